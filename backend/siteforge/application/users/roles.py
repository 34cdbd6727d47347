import logging

from sqlalchemy import func

from siteforge.constants import SYSTEM_ROLES
from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.role import Permission, Role, role_permissions
from siteforge.models.user import User
from siteforge.utils.transaction import transactional

logger = logging.getLogger(__name__)


def get_or_create_role(name, description=None):
    """Fetch a role by name, staging a new one when it does not exist yet."""
    role = Role.query.filter_by(name=name).first()
    if role is None:
        role = Role(name=name, description=description)
        db.session.add(role)
        db.session.flush()
        logger.info("Created role %s", name)
    return role


def ensure_system_roles():
    """Idempotently create the built-in roles. Returns the names created."""
    created = []
    with transactional():
        existing = {name for (name,) in db.session.query(Role.name)}
        for name, description in SYSTEM_ROLES:
            if name in existing:
                continue
            db.session.add(Role(name=name, description=description))
            created.append(name)
    if created:
        logger.info("Seeded %d system roles", len(created))
    return created


def get_role(role_id):
    role = db.session.get(Role, role_id)
    if not role:
        raise NotFound("Role not found")
    return role


def list_roles():
    """Roles with user and permission counts, ordered by name."""
    user_counts = dict(
        db.session.query(User.role_id, func.count(User.id)).group_by(User.role_id).all()
    )
    permission_counts = dict(
        db.session.query(role_permissions.c.role_id, func.count(role_permissions.c.permission_id))
        .group_by(role_permissions.c.role_id)
        .all()
    )
    roles = Role.query.order_by(Role.name.asc()).all()
    return [
        (role, user_counts.get(role.id, 0), permission_counts.get(role.id, 0))
        for role in roles
    ]


def role_permissions_for(role_id):
    return list(get_role(role_id).permissions)


def create_role(*, name, description=None):
    if not name:
        raise ValidationError("Role name is required")

    if Role.query.filter_by(name=name).first():
        raise Conflict(f"Role '{name}' already exists")

    role = Role(name=name, description=description)
    with transactional():
        db.session.add(role)
    return role


def assign_permission_to_role(*, role_id, permission_id):
    role = get_role(role_id)
    permission = db.session.get(Permission, permission_id)
    if not permission:
        raise NotFound("Permission not found")

    if permission in role.permissions:
        raise Conflict(f"Role '{role.name}' already has permission '{permission.name}'")

    with transactional():
        role.permissions.append(permission)
    return role


def remove_permission_from_role(*, role_id, permission_id):
    role = get_role(role_id)
    permission = db.session.get(Permission, permission_id)
    if not permission:
        raise NotFound("Permission not found")

    if permission not in role.permissions:
        raise NotFound(f"Role '{role.name}' does not have permission '{permission.name}'")

    with transactional():
        role.permissions.remove(permission)
    return role
