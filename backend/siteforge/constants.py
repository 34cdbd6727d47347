"""Role names and role groups used by authorization checks."""

SUPER_ADMIN = "SuperAdmin"
PLATFORM_ADMIN = "PlatformAdmin"
TENANT_ADMIN = "TenantAdmin"
TENANT_MANAGER = "TenantManager"
TENANT_USER = "TenantUser"

SYSTEM_ROLES = [
    # Global Platform Roles
    ("SuperAdmin", "Super Administrator with platform-wide access across all tenants"),
    ("PlatformAdmin", "Platform Administrator with system-wide access"),
    ("SupportAgent", "Support agent with customer assistance capabilities"),
    # Tenant Level Roles
    ("TenantAdmin", "Tenant Administrator with full tenant access"),
    ("TenantManager", "Tenant Manager with management capabilities"),
    ("TenantUser", "Basic tenant user with limited permissions"),
    # CMS Module Roles
    ("ContentManager", "Content Manager with full content management access"),
    ("ContentEditor", "Content Editor with content editing capabilities"),
    # HRMS Module Roles
    ("HRAdmin", "HR Administrator with full HR system access"),
    ("HRManager", "HR Manager with HR management capabilities"),
    ("Employee", "Employee with standard workspace access"),
    # Booking Module Roles
    ("BookingAdmin", "Booking Administrator with full booking system access"),
    ("Agent", "Booking agent with customer service capabilities"),
    ("Customer", "Customer with booking and service access"),
    # E-Commerce Module Roles
    ("StoreAdmin", "Store Administrator with full e-commerce access"),
    ("StoreManager", "Store Manager with store management capabilities"),
    # Future/Complementary Roles
    ("FinanceManager", "Finance Manager with financial system access"),
    ("SalesRep", "Sales Representative with sales capabilities"),
    ("Instructor", "Instructor with educational content access"),
    ("ProjectLead", "Project Lead with project management capabilities"),
]

SYSTEM_PERMISSIONS = [
    ("user:read", "View user information"),
    ("user:write", "Create or update users"),
    ("user:delete", "Delete users"),
    ("role:read", "View roles"),
    ("role:write", "Create or update roles"),
    ("role:delete", "Delete roles"),
    ("permission:read", "View permissions"),
    ("permission:write", "Create or update permissions"),
    ("permission:delete", "Delete permissions"),
]

ADMIN_ROLES = (TENANT_ADMIN, PLATFORM_ADMIN, SUPER_ADMIN)
MANAGER_ROLES = ADMIN_ROLES + (TENANT_MANAGER, "HRAdmin", "HRManager")
CONTENT_ROLES = ADMIN_ROLES + (TENANT_MANAGER, "ContentManager", "ContentEditor")
STORE_ROLES = ADMIN_ROLES + (TENANT_MANAGER, "StoreAdmin", "StoreManager")
BOOKING_ROLES = ADMIN_ROLES + (TENANT_MANAGER, "BookingAdmin", "Agent")
