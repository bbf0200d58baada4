"""
Application-wide exception hierarchy.

Services raise these; the app factory registers one handler per type so
every blueprint gets the same HTTP status codes and ``{"error": ...}``
body shape.

Usage:
    from flowsms.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id=42)
    raise ValidationError("title is required", details={"title": "required"})
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist.

    Maps to HTTP 404.

    Args:
        resource: Human-readable entity name (e.g. "Project", "Task").
        resource_id: The key that was looked up. Included in logs, not in HTTP response.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource} not found"
        if resource_id is not None:
            msg = f"{resource} id={resource_id} not found"
        super().__init__(msg)

    @property
    def public_message(self) -> str:
        return f"{self.resource} not found"


class ValidationError(Exception):
    """Raised when input is missing or malformed.

    Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class FeedNotConfiguredError(Exception):
    """Raised when an external feed needs a credential or id that is not set.

    Maps to HTTP 503.

    Args:
        feed: Feed name ("airtable", "monday", "building-info", ...).
        setting: The missing configuration key.
    """

    def __init__(self, feed: str, setting: str) -> None:
        self.feed = feed
        self.setting = setting
        super().__init__(f"{feed} is not configured ({setting} is not set)")


class UpstreamError(Exception):
    """Raised when an external API answers with an error we cannot degrade from.

    Maps to HTTP 502.
    """

    def __init__(self, service: str, message: str, status_code: int | None = None) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")
