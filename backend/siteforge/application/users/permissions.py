import logging

from siteforge.constants import ADMIN_ROLES, SYSTEM_PERMISSIONS, TENANT_ADMIN, TENANT_MANAGER
from siteforge.errors import Conflict, Forbidden, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.role import Permission, Role, UserPermission
from siteforge.models.user import User
from siteforge.utils.transaction import transactional
from .roles import get_or_create_role

logger = logging.getLogger(__name__)


def ensure_system_permissions():
    """
    Seed the user/role/permission CRUD permissions.

    TenantAdmin receives all of them, TenantManager every ``:read``.
    """
    with transactional():
        admin = get_or_create_role(TENANT_ADMIN, "Tenant Administrator with full tenant access")
        manager = get_or_create_role(TENANT_MANAGER, "Tenant Manager with management capabilities")

        for name, description in SYSTEM_PERMISSIONS:
            permission = Permission.query.filter_by(name=name).first()
            if permission is None:
                permission = Permission(name=name, description=description)
                db.session.add(permission)

            if permission not in admin.permissions:
                admin.permissions.append(permission)
            if name.endswith(":read") and permission not in manager.permissions:
                manager.permissions.append(permission)


def effective_permissions(user):
    """Role permissions plus granted overrides, minus revoked overrides."""
    names = {p.name for p in user.role.permissions} if user.role else set()

    for override in user.permission_overrides:
        if override.granted:
            names.add(override.permission_name)
        else:
            names.discard(override.permission_name)

    return sorted(names)


def has_permission(user, permission_name):
    return permission_name in effective_permissions(user)


def list_permissions():
    return Permission.query.order_by(Permission.name.asc()).all()


def create_permission(*, name, description=None, role_id=None):
    if not name:
        raise ValidationError("Permission name is required")

    if Permission.query.filter_by(name=name).first():
        raise Conflict(f"Permission '{name}' already exists")

    role = None
    if role_id:
        role = db.session.get(Role, role_id)
        if not role:
            raise NotFound("Role not found")

    permission = Permission(name=name, description=description)
    with transactional():
        db.session.add(permission)
        if role is not None:
            role.permissions.append(permission)
    return permission


def _can_manage_permissions(requester, requester_roles, permission_name):
    return bool(requester_roles.intersection(ADMIN_ROLES)) or has_permission(requester, permission_name)


def user_specific_permissions(*, requester, requester_roles, user_id):
    if requester.id != user_id and not _can_manage_permissions(requester, requester_roles, "user:read"):
        raise Forbidden("Unauthorized: Insufficient permissions")

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    return (
        UserPermission.query
        .filter_by(user_id=user_id)
        .order_by(UserPermission.permission_name.asc())
        .all()
    )


def set_user_permission(*, requester, requester_roles, user_id, permission_name, granted):
    """
    Upsert a per-user override. ``granted=None`` removes the override.
    Returns the override, or None when it was removed.
    """
    if not _can_manage_permissions(requester, requester_roles, "permission:write"):
        raise Forbidden("Unauthorized: Insufficient permissions")

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    if not Permission.query.filter_by(name=permission_name).first():
        raise NotFound(f"Permission '{permission_name}' not found")

    override = UserPermission.query.filter_by(user_id=user_id, permission_name=permission_name).first()

    with transactional():
        if granted is None:
            if override is None:
                raise NotFound("User permission override not found")
            db.session.delete(override)
            logger.info("Removed permission override %s for user %s", permission_name, user_id)
            return None

        if override is None:
            override = UserPermission(user_id=user_id, permission_name=permission_name)
            db.session.add(override)
        override.granted = bool(granted)

    logger.info("Set permission override %s=%s for user %s", permission_name, granted, user_id)
    return override
