import logging

from sqlalchemy import or_

from siteforge.application.auth.login import stage_user
from siteforge.application.users.roles import get_or_create_role
from siteforge.constants import TENANT_ADMIN, TENANT_USER
from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.role import Role
from siteforge.models.user import TENANT_ROLES, User, UserTenant
from siteforge.utils.pagination import MAX_PAGE_SIZE
from siteforge.utils.transaction import transactional
from .counts import page_envelope
from .tenants import tenant_by_id

logger = logging.getLogger(__name__)


def _get_user(user_id):
    if not user_id:
        raise ValidationError("User ID is required")
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound(f'User with ID "{user_id}" not found')
    return user


def _tenant_role(role):
    # Unknown membership roles fall back to the least privileged one
    return role if role in TENANT_ROLES else TENANT_USER


def all_users(*, search=None, role=None, tenant_id=None, is_active=None, page=1, page_size=20):
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

    query = User.query
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.email.ilike(pattern),
        ))
    if is_active is not None:
        query = query.filter(User.is_active.is_(is_active))
    if role:
        query = query.join(Role, Role.id == User.role_id).filter(Role.name == role)
    if tenant_id:
        query = query.join(UserTenant, UserTenant.user_id == User.id).filter(
            UserTenant.tenant_id == tenant_id,
            UserTenant.is_active.is_(True),
        )

    total = query.count()
    users = (
        query.order_by(User.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return page_envelope(users, total, page, page_size)


def assign_tenant_admin(*, tenant_id, user_id):
    """Make ``user_id`` an admin of the tenant, creating or upgrading its membership."""
    tenant = tenant_by_id(tenant_id)
    user = _get_user(user_id)

    with transactional():
        user.role = get_or_create_role(TENANT_ADMIN)
        membership = user.membership_for(tenant.id)
        if membership is None:
            db.session.add(UserTenant(user_id=user.id, tenant_id=tenant.id, role=TENANT_ADMIN))
        else:
            membership.role = TENANT_ADMIN
            membership.is_active = True

    return {
        "success": True,
        "message": f'User "{user.full_name}" has been assigned as admin for tenant "{tenant.name}"',
        "user": user,
        "tenant": tenant,
    }


def create_user_and_assign_tenant(data):
    tenant = tenant_by_id(data.get("tenant_id"))
    role = _tenant_role(data.get("role"))

    with transactional():
        user = stage_user(
            email=data.get("email"),
            password=data.get("password"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            phone_number=data.get("phone_number"),
            role_name=role,
        )
        membership = UserTenant(user_id=user.id, tenant_id=tenant.id, role=role)
        db.session.add(membership)

    logger.info("Created user %s in tenant %s as %s", user.id, tenant.slug, role)
    return {
        "success": True,
        "message": f'User "{user.full_name}" created and assigned to tenant successfully',
        "user": user,
        "membership": membership,
    }


def assign_user_to_tenant(*, tenant_id, user_id, role=None):
    user = _get_user(user_id)
    tenant = tenant_by_id(tenant_id)
    role = _tenant_role(role)

    membership = user.membership_for(tenant.id)
    if membership is not None and membership.is_active:
        raise Conflict("User is already assigned to this tenant")

    with transactional():
        if membership is None:
            membership = UserTenant(user_id=user.id, tenant_id=tenant.id, role=role)
            db.session.add(membership)
        else:
            membership.role = role
            membership.is_active = True

    return {
        "success": True,
        "message": f'User "{user.full_name}" assigned to tenant "{tenant.name}" successfully',
        "membership": membership,
    }


def remove_user_from_tenant(*, tenant_id, user_id):
    user = _get_user(user_id)
    tenant = tenant_by_id(tenant_id)

    membership = user.membership_for(tenant.id)
    if membership is None or not membership.is_active:
        raise NotFound("User is not assigned to this tenant")

    with transactional():
        membership.is_active = False

    return {
        "success": True,
        "message": f'User "{user.full_name}" removed from tenant "{tenant.name}"',
    }
