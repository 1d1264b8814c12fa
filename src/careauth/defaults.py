"""Built-in role policy for the care platform."""

from __future__ import annotations

from careauth.models.policy import RolePolicy
from careauth.roles import Role

ROLE_HIERARCHY: dict[Role, tuple[Role, ...]] = {
    Role.ADMINISTRATOR: (Role.CASE_MANAGER, Role.PROVIDER, Role.CLIENT),
    Role.CASE_MANAGER: (Role.PROVIDER, Role.CLIENT),
    Role.PROVIDER: (Role.CLIENT,),
    Role.CLIENT: (),
}

# Granted to every authenticated principal regardless of role.
DEFAULT_PERMISSIONS = frozenset(
    {
        "view:own-profile",
        "edit:own-profile",
        "view:own-documents",
    }
)

ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.CLIENT: frozenset(
        {
            "request:services",
            "view:own-care-plans",
            "view:own-service-plans",
            "rate:providers",
            "view:matched-providers",
            "schedule:appointments",
            "upload:own-documents",
            "view:own-notifications",
            "provide:feedback",
            "cancel:own-appointments",
        }
    ),
    Role.PROVIDER: frozenset(
        {
            "manage:availability",
            "view:assigned-clients",
            "update:service-status",
            "manage:own-calendar",
            "view:own-reviews",
            "respond:to-booking-requests",
            "upload:service-documents",
            "view:own-schedule",
            "message:assigned-clients",
            "view:service-history",
        }
    ),
    Role.CASE_MANAGER: frozenset(
        {
            "create:care-plans",
            "edit:care-plans",
            "assign:providers",
            "generate:reports",
            "override:matching",
            "view:client-records",
            "create:service-plans",
            "assess:client-needs",
            "monitor:client-outcomes",
            "approve:service-requests",
            "message:clients",
            "message:providers",
            "view:client-analytics",
        }
    ),
    Role.ADMINISTRATOR: frozenset(
        {
            "manage:users",
            "view:all-records",
            "configure:system",
            "access:analytics",
            "manage:permissions",
            "view:audit-logs",
            "delete:records",
            "manage:providers",
            "manage:services",
            "generate:system-reports",
            "override:system-settings",
            "manage:case-managers",
            "view:system-health",
            "configure:notifications",
            "manage:integrations",
        }
    ),
}

DEFAULT_POLICY = RolePolicy(
    hierarchy=ROLE_HIERARCHY,
    permissions=ROLE_PERMISSIONS,
    defaults=DEFAULT_PERMISSIONS,
)
