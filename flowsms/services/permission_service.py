"""
Role-based permissions.

Database roles collapse into three app roles:

    admin                       → ADMIN
    project_manager, team_lead  → MANAGER
    anything else               → USER

Each permission codename lists the app roles allowed to use it.
"""

ADMIN = "ADMIN"
MANAGER = "MANAGER"
USER = "USER"

_ROLE_MAP = {
    "admin": ADMIN,
    "project_manager": MANAGER,
    "team_lead": MANAGER,
}

PERMISSIONS = {
    # Analytics
    "analytics:view": (ADMIN, MANAGER, USER),
    "analytics:full": (ADMIN, MANAGER),
    # Projects
    "projects:view": (ADMIN, MANAGER, USER),
    "projects:edit": (ADMIN, MANAGER),
    "projects:delete": (ADMIN,),
    # HR
    "hr:view": (ADMIN, MANAGER),
    "hr:edit": (ADMIN,),
    # Finance
    "finance:view": (ADMIN,),
    "finance:edit": (ADMIN,),
    # Tasks
    "tasks:view": (ADMIN, MANAGER, USER),
    "tasks:edit": (ADMIN, MANAGER),
    "tasks:delete": (ADMIN, MANAGER),
}


def simplify_role(db_role):
    return _ROLE_MAP.get(db_role, USER)


def has_permission(role, codename):
    """True when the app role (or a raw database role) grants *codename*.

    Unknown codenames are denied.
    """
    app_role = role if role in (ADMIN, MANAGER, USER) else simplify_role(role)
    return app_role in PERMISSIONS.get(codename, ())


def permissions_for(role):
    app_role = role if role in (ADMIN, MANAGER, USER) else simplify_role(role)
    return sorted(code for code, roles in PERMISSIONS.items() if app_role in roles)


def can_access_route(role, route):
    """Page-level access: finance is admin-only, HR needs manager or above."""
    app_role = role if role in (ADMIN, MANAGER, USER) else simplify_role(role)
    if route.startswith("/finance"):
        return app_role == ADMIN
    if route.startswith("/hr"):
        return app_role in (ADMIN, MANAGER)
    return True
