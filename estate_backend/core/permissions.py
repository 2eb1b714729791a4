"""Role names, permission catalog, page catalog and role presets."""

from typing import Dict, List

# ---- Role names ----
CUSTOMER = "customer"
AGENT = "agent"
VENDOR = "vendor"
BUILDER = "builder"
SUBADMIN = "subadmin"
ADMIN = "admin"
SUPERADMIN = "superadmin"

# Built-in roles seeded at bootstrap. "admin" is a recognised tier name but
# has no seeded document.
SYSTEM_ROLE_NAMES = (CUSTOMER, AGENT, SUBADMIN, SUPERADMIN)

# Names the level fallback never applies to; anything else is a custom role.
STANDARD_ROLE_NAMES = frozenset({CUSTOMER, AGENT, ADMIN, SUBADMIN, SUPERADMIN})

ADMIN_ROLE_NAMES = frozenset({SUPERADMIN, ADMIN, SUBADMIN})

MIN_LEVEL = 1
MAX_LEVEL = 10
ADMIN_LEVEL_THRESHOLD = 8
SUBADMIN_LEVEL_THRESHOLD = 7

# ---- Permissions ----
USERS_VIEW = "users.view"
USERS_CREATE = "users.create"
USERS_EDIT = "users.edit"
USERS_DELETE = "users.delete"
USERS_PROMOTE = "users.promote"
USERS_STATUS = "users.status"

ROLES_VIEW = "roles.view"
ROLES_CREATE = "roles.create"
ROLES_EDIT = "roles.edit"
ROLES_DELETE = "roles.delete"

PROPERTIES_VIEW = "properties.view"
PROPERTIES_CREATE = "properties.create"
PROPERTIES_EDIT = "properties.edit"
PROPERTIES_DELETE = "properties.delete"
PROPERTIES_APPROVE = "properties.approve"

VENDORS_VIEW = "vendors.view"
VENDORS_APPROVE = "vendors.approve"
VENDORS_MANAGE = "vendors.manage"

CONTENT_MODERATE = "content.moderate"
REVIEWS_VIEW = "reviews.view"
REVIEWS_RESPOND = "reviews.respond"
REVIEWS_MANAGE = "reviews.manage"

MESSAGES_VIEW = "messages.view"
MESSAGES_SEND = "messages.send"
MESSAGES_DELETE = "messages.delete"

NOTIFICATIONS_VIEW = "notifications.view"
NOTIFICATIONS_SEND = "notifications.send"
NOTIFICATIONS_MANAGE = "notifications.manage"

SUPPORT_TICKETS_READ = "supportTickets.read"
SUPPORT_TICKETS_REPLY = "supportTickets.reply"
SUPPORT_TICKETS_STATUS = "supportTickets.status"

SETTINGS_MANAGE = "settings.manage"
LOGS_VIEW = "logs.view"
DASHBOARD_VIEW = "dashboard.view"
ANALYTICS_VIEW = "analytics.view"

PERMISSION_CATALOG: Dict[str, List[str]] = {
    "users": [USERS_VIEW, USERS_CREATE, USERS_EDIT, USERS_DELETE, USERS_PROMOTE, USERS_STATUS],
    "roles": [ROLES_VIEW, ROLES_CREATE, ROLES_EDIT, ROLES_DELETE],
    "properties": [
        PROPERTIES_VIEW, PROPERTIES_CREATE, PROPERTIES_EDIT,
        PROPERTIES_DELETE, PROPERTIES_APPROVE,
    ],
    "vendors": [VENDORS_VIEW, VENDORS_APPROVE, VENDORS_MANAGE],
    "content": [CONTENT_MODERATE, REVIEWS_VIEW, REVIEWS_RESPOND, REVIEWS_MANAGE],
    "messages": [MESSAGES_VIEW, MESSAGES_SEND, MESSAGES_DELETE],
    "notifications": [NOTIFICATIONS_VIEW, NOTIFICATIONS_SEND, NOTIFICATIONS_MANAGE],
    "support": [SUPPORT_TICKETS_READ, SUPPORT_TICKETS_REPLY, SUPPORT_TICKETS_STATUS],
    "system": [SETTINGS_MANAGE, LOGS_VIEW, DASHBOARD_VIEW, ANALYTICS_VIEW],
}

ALL_PERMISSIONS: List[str] = [p for group in PERMISSION_CATALOG.values() for p in group]

# ---- Pages ----
# Opaque navigation ids echoed to the client; the API never branches on them.
AVAILABLE_PAGES: Dict[str, List[str]] = {
    "admin": [
        "dashboard", "users", "vendor_approvals", "messages", "roles", "clients",
        "properties", "plans", "addons", "privacy_policy", "refund_policy",
        "hero_management",
    ],
    "subadmin": [
        "subadmin_dashboard", "property_reviews", "property_rejections",
        "content_moderation", "support_tickets", "vendor_performance",
        "addon_services", "notifications", "reports",
        "subadmin_privacy_policy", "subadmin_refund_policy",
    ],
    "vendor": [
        "vendor_dashboard", "vendor_properties", "vendor_add_property",
        "vendor_leads", "vendor_messages", "vendor_analytics", "vendor_services",
        "vendor_subscription", "vendor_billing", "vendor_reviews", "vendor_profile",
    ],
    "customer": [
        "customer_dashboard", "customer_search", "customer_favorites",
        "customer_compare", "customer_owned_properties", "customer_messages",
        "customer_services", "customer_reviews", "customer_profile",
        "customer_settings",
    ],
}

# ---- System role definitions (seeded once) ----
SYSTEM_ROLES: List[dict] = [
    {
        "name": CUSTOMER,
        "description": "Regular customer with basic property viewing and inquiry capabilities",
        "level": 1,
        "pages": AVAILABLE_PAGES["customer"],
        "permissions": [PROPERTIES_VIEW, MESSAGES_VIEW, MESSAGES_SEND, REVIEWS_VIEW],
    },
    {
        "name": AGENT,
        "description": "Property vendor who can manage their own listings and interact with customers",
        "level": 5,
        "pages": AVAILABLE_PAGES["vendor"],
        "permissions": [
            PROPERTIES_VIEW, PROPERTIES_CREATE, PROPERTIES_EDIT,
            MESSAGES_VIEW, MESSAGES_SEND, REVIEWS_VIEW, REVIEWS_RESPOND,
            ANALYTICS_VIEW,
        ],
    },
    {
        "name": SUBADMIN,
        "description": "Sub Administrator with limited administrative access",
        "level": 7,
        "pages": AVAILABLE_PAGES["subadmin"],
        "permissions": [
            DASHBOARD_VIEW, USERS_VIEW, ROLES_VIEW,
            PROPERTIES_VIEW, PROPERTIES_APPROVE,
            VENDORS_VIEW, VENDORS_APPROVE,
            CONTENT_MODERATE, REVIEWS_VIEW, REVIEWS_MANAGE,
            SUPPORT_TICKETS_READ, SUPPORT_TICKETS_REPLY, SUPPORT_TICKETS_STATUS,
            NOTIFICATIONS_VIEW, NOTIFICATIONS_SEND, ANALYTICS_VIEW,
        ],
    },
    {
        "name": SUPERADMIN,
        "description": "Super Administrator with full system access and control",
        "level": 10,
        "pages": AVAILABLE_PAGES["admin"],
        "permissions": ALL_PERMISSIONS,
    },
]

# ---- Presets for custom roles ----
ROLE_PRESETS: Dict[str, dict] = {
    "sales": {
        "description": "Sales and business development team member",
        "level": 5,
        "permissions": [
            USERS_VIEW, USERS_CREATE, VENDORS_VIEW, VENDORS_APPROVE, VENDORS_MANAGE,
            PROPERTIES_VIEW, PROPERTIES_APPROVE, ANALYTICS_VIEW, DASHBOARD_VIEW,
        ],
    },
    "marketing": {
        "description": "Marketing and content management team member",
        "level": 4,
        "permissions": [
            PROPERTIES_VIEW, REVIEWS_VIEW, REVIEWS_RESPOND,
            NOTIFICATIONS_VIEW, NOTIFICATIONS_SEND, ANALYTICS_VIEW, DASHBOARD_VIEW,
        ],
    },
    "support": {
        "description": "Customer support team member",
        "level": 3,
        "permissions": [
            SUPPORT_TICKETS_READ, SUPPORT_TICKETS_REPLY, SUPPORT_TICKETS_STATUS,
            USERS_VIEW, PROPERTIES_VIEW, REVIEWS_VIEW, REVIEWS_RESPOND,
        ],
    },
    "moderator": {
        "description": "Content moderation team member",
        "level": 6,
        "permissions": [
            PROPERTIES_VIEW, PROPERTIES_APPROVE, REVIEWS_VIEW, REVIEWS_RESPOND,
            REVIEWS_MANAGE, CONTENT_MODERATE, VENDORS_VIEW,
            SUPPORT_TICKETS_READ, SUPPORT_TICKETS_REPLY, DASHBOARD_VIEW,
        ],
    },
    "manager": {
        "description": "Manager with extensive permissions",
        "level": 7,
        "permissions": [
            USERS_VIEW, USERS_EDIT, USERS_STATUS,
            PROPERTIES_VIEW, PROPERTIES_CREATE, PROPERTIES_EDIT,
            PROPERTIES_DELETE, PROPERTIES_APPROVE,
            VENDORS_VIEW, VENDORS_APPROVE, VENDORS_MANAGE,
            REVIEWS_VIEW, REVIEWS_RESPOND, REVIEWS_MANAGE,
            SUPPORT_TICKETS_READ, SUPPORT_TICKETS_REPLY, SUPPORT_TICKETS_STATUS,
            NOTIFICATIONS_VIEW, NOTIFICATIONS_SEND, DASHBOARD_VIEW, ANALYTICS_VIEW,
        ],
    },
    "analyst": {
        "description": "Read-only access for analytics and reporting",
        "level": 3,
        "permissions": [
            USERS_VIEW, PROPERTIES_VIEW, VENDORS_VIEW, REVIEWS_VIEW,
            SUPPORT_TICKETS_READ, ANALYTICS_VIEW, DASHBOARD_VIEW,
        ],
    },
    "property_manager": {
        "description": "Property and listing management specialist",
        "level": 5,
        "permissions": [
            PROPERTIES_VIEW, PROPERTIES_CREATE, PROPERTIES_EDIT,
            PROPERTIES_DELETE, PROPERTIES_APPROVE, VENDORS_VIEW, DASHBOARD_VIEW,
        ],
    },
    "role_admin": {
        "description": "Role and permission administrator",
        "level": 8,
        "permissions": [
            ROLES_VIEW, ROLES_CREATE, ROLES_EDIT, ROLES_DELETE,
            USERS_VIEW, USERS_CREATE, USERS_EDIT, USERS_PROMOTE, USERS_STATUS,
            DASHBOARD_VIEW,
        ],
    },
}
