"""Request-body coercion and session helpers shared by blueprints and services.

Lookups and commits return ``(value, error_response)`` style results
instead of aborting, so a view can ``return err`` directly.
"""
import logging
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError, OperationalError

from flowsms.models import db
from flowsms.utils.errors import E, api_error

logger = logging.getLogger(__name__)

_DATE_FORMATS = ("%d.%m.%Y", "%d/%m/%Y")


def get_or_404(model, pk, label=None):
    """``(row, None)`` when found, else ``(None, <404 response>)``.

        task, err = get_or_404(Task, task_id)
        if err:
            return err
    """
    row = db.session.get(model, pk)
    if row is None:
        return None, api_error(E.NOT_FOUND, f"{label or model.__name__} not found")
    return row, None


def parse_date(value):
    """ISO date or datetime, DD.MM.YYYY or DD/MM/YYYY → ``date``; None when blank or unparseable."""
    if not value:
        return None
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _coerce(value, kind):
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return kind(value)
    except (ValueError, TypeError):
        return None


def parse_float(value):
    """JSON number or numeric string → float; None when blank or invalid."""
    return _coerce(value, float)


def parse_int(value):
    """JSON number or numeric string → int; None when blank or invalid."""
    return _coerce(value, int)


def db_commit_or_error():
    """Commit the session; on failure roll back and return an error response.

        err = db_commit_or_error()
        if err:
            return err

    IntegrityError → 409, anything else → 500.
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit: %s", exc.orig)
        return api_error(E.CONFLICT_DUPLICATE, "Duplicate or constraint violation")
    except OperationalError:
        db.session.rollback()
        logger.exception("Database operational error on commit")
        return api_error(E.DATABASE, "Database error")
    except Exception:
        db.session.rollback()
        logger.exception("Unexpected database error on commit")
        return api_error(E.DATABASE, "Database error")
    return None
