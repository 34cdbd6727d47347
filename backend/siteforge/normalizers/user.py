from siteforge.constants import TENANT_USER
from siteforge.utils.dates import isoformat

DEFAULT_ROLE = {"id": "default", "name": TENANT_USER}


def normalize_role(role, user_count=None, permission_count=None):
    data = {
        "id": role.id,
        "name": role.name,
        "description": role.description,
    }
    if user_count is not None:
        data["user_count"] = user_count
    if permission_count is not None:
        data["permission_count"] = permission_count
    return data


def normalize_permission(permission):
    return {
        "id": permission.id,
        "name": permission.name,
        "description": permission.description,
    }


def normalize_user_permission(override):
    return {
        "id": override.id,
        "user_id": override.user_id,
        "permission_name": override.permission_name,
        "granted": override.granted,
    }


def normalize_membership(membership):
    return {
        "id": membership.id,
        "tenant_id": membership.tenant_id,
        "tenant_slug": membership.tenant.slug if membership.tenant else None,
        "role": membership.role,
        "is_active": membership.is_active,
        "joined_at": isoformat(membership.joined_at),
    }


def normalize_user(user, include_memberships=True):
    """User without credentials; the role falls back to a TenantUser placeholder."""
    if user is None:
        return None

    data = {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone_number": user.phone_number,
        "is_active": user.is_active,
        "email_verified_at": isoformat(user.email_verified_at),
        "role": normalize_role(user.role) if user.role else dict(DEFAULT_ROLE),
        "created_at": isoformat(user.created_at),
        "updated_at": isoformat(user.updated_at),
    }

    if include_memberships:
        data["memberships"] = [
            normalize_membership(m) for m in user.memberships if m.is_active
        ]

    return data
