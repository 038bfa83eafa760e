"""Built-in roles of the admin console, in the legacy permission document format."""

from typing import Any

READ = {"read": True}

SYSTEM_ROLES: tuple[dict[str, Any], ...] = (
    {
        "name": "super_admin",
        "display_name": "Super Admin",
        "description": "Full system access with all permissions. Can manage all users, "
        "roles, and system configuration.",
        "level": 0,
        "can_create_sub_roles": True,
        "can_manage_users": True,
        "permissions": {
            "systemConfig": True,
            "apiManagement": True,
            "pricing": True,
            "merchantManagement": True,
            "analytics": True,
            "systemHealth": True,
            "compliance": True,
            "auditLogs": True,
            "userManagement": True,
            "roleManagement": True,
        },
    },
    {
        "name": "system_admin",
        "display_name": "System Administrator",
        "description": "System configuration and technical operations. Can manage system "
        "settings, API integrations, and platform health.",
        "level": 10,
        "permissions": {
            "systemConfig": {"read": True, "write": True, "delete": False},
            "apiManagement": {"read": True, "write": True, "delete": False},
            "pricing": READ,
            "merchantManagement": READ,
            "analytics": {"read": True, "export": True},
            "systemHealth": {"read": True, "write": True},
            "compliance": READ,
            "auditLogs": READ,
            "userManagement": False,
            "roleManagement": READ,
        },
    },
    {
        "name": "ops_admin",
        "display_name": "Operations Administrator",
        "description": "Day-to-day operations management. Can manage merchants, handle "
        "support tickets, and process payouts.",
        "level": 20,
        "can_manage_users": True,
        "max_sub_users": 20,
        "permissions": {
            "systemConfig": READ,
            "apiManagement": False,
            "pricing": READ,
            "merchantManagement": {"read": True, "write": True, "suspend": True},
            "analytics": {"read": True, "export": True},
            "systemHealth": READ,
            "compliance": READ,
            "auditLogs": READ,
            "userManagement": {"read": True, "create": True, "update": True},
            "roleManagement": READ,
        },
    },
    {
        "name": "finance_admin",
        "display_name": "Finance Administrator",
        "description": "Financial operations and billing management. Can manage pricing, "
        "process payouts, and view financial reports.",
        "level": 30,
        "can_manage_users": True,
        "max_sub_users": 10,
        "permissions": {
            "pricing": {"read": True, "write": True},
            "merchantManagement": READ,
            "analytics": {"read": True, "export": True},
            "compliance": {"read": True, "export": True},
            "auditLogs": READ,
            "userManagement": {"read": True, "create": True, "update": True},
            "roleManagement": READ,
        },
    },
    {
        "name": "support_admin",
        "display_name": "Support Administrator",
        "description": "Customer support operations. Can handle merchant tickets, view basic "
        "information, and assist merchants.",
        "level": 40,
        "can_manage_users": True,
        "max_sub_users": 50,
        "permissions": {
            "pricing": READ,
            "merchantManagement": READ,
            "analytics": READ,
            "userManagement": {"read": True, "create": True, "update": True},
            "roleManagement": READ,
        },
    },
    {
        "name": "audit_admin",
        "display_name": "Audit Administrator",
        "description": "Compliance and audit operations. Can view audit logs, compliance "
        "reports, and analytics.",
        "level": 50,
        "permissions": {
            "systemConfig": READ,
            "pricing": READ,
            "merchantManagement": READ,
            "analytics": {"read": True, "export": True},
            "systemHealth": READ,
            "compliance": {"read": True, "write": True, "export": True},
            "auditLogs": {"read": True, "export": True},
            "roleManagement": READ,
        },
    },
    {
        "name": "merchant_support_lead",
        "display_name": "Merchant Support Lead",
        "description": "Lead support agent with team management. Can manage support agents "
        "and escalated tickets.",
        "level": 60,
        "can_manage_users": True,
        "max_sub_users": 30,
        "permissions": {
            "pricing": READ,
            "merchantManagement": READ,
            "analytics": READ,
            "userManagement": {"read": True, "create": True, "update": True},
            "roleManagement": READ,
        },
    },
    {
        "name": "merchant_support_agent",
        "display_name": "Merchant Support Agent",
        "description": "Basic support operations. Can view merchant information and handle "
        "basic support tickets.",
        "level": 70,
        "permissions": {
            "pricing": READ,
            "merchantManagement": READ,
        },
    },
    {
        "name": "viewer",
        "display_name": "Read-Only Viewer",
        "description": "Read-only access to basic analytics and merchant information. "
        "No modification permissions.",
        "level": 90,
        "permissions": {
            "pricing": READ,
            "merchantManagement": READ,
            "analytics": READ,
        },
    },
)

SYSTEM_ROLE_NAMES = tuple(r["name"] for r in SYSTEM_ROLES)
