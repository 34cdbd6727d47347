import logging

from flask_jwt_extended import create_access_token
from flask import current_app
from sqlalchemy import or_

from siteforge.application.auth.login import stage_user
from siteforge.application.auth.tokens import token_claims
from siteforge.application.tenants.tenants import clean_features
from siteforge.application.users.roles import get_or_create_role
from siteforge.constants import TENANT_ADMIN, TENANT_MANAGER
from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.tenant import TENANT_STATUSES, Tenant
from siteforge.models.user import User, UserTenant
from siteforge.utils.pagination import MAX_PAGE_SIZE
from siteforge.utils.slugs import checked_slug
from siteforge.utils.transaction import transactional
from .counts import page_envelope, tenant_counts

logger = logging.getLogger(__name__)

TENANT_FIELDS = ("name", "domain", "status", "plan_id", "settings")


def all_tenants(*, search=None, status=None, plan_id=None, page=1, page_size=20):
    """Tenants newest first, each paired with its user/page/post counts."""
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

    query = Tenant.query
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Tenant.name.ilike(pattern),
            Tenant.slug.ilike(pattern),
            Tenant.domain.ilike(pattern),
        ))
    if status:
        query = query.filter(Tenant.status == status)
    if plan_id:
        query = query.filter(Tenant.plan_id == plan_id)

    total = query.count()
    tenants = (
        query.order_by(Tenant.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    counts = tenant_counts([t.id for t in tenants])

    items = [(tenant, counts[tenant.id]) for tenant in tenants]
    return page_envelope(items, total, page, page_size)


def tenant_by_id(tenant_id):
    if not tenant_id:
        raise ValidationError("Tenant ID is required")
    tenant = db.session.get(Tenant, tenant_id)
    if not tenant:
        raise NotFound(f'Tenant with ID "{tenant_id}" not found')
    return tenant


ADMIN_SETTING_KEYS = {
    "email": "adminEmail",
    "password": "adminPassword",
    "first_name": "adminFirstName",
    "last_name": "adminLastName",
}


def _admin_fields(data):
    """Admin account fields; values inside ``settings`` win over top-level ``admin_*`` input."""
    settings = data.get("settings") or {}
    fields = {}
    for key, setting in ADMIN_SETTING_KEYS.items():
        fields[key] = (
            settings.get(setting)
            or settings.get(f"admin_{key}")
            or data.get(f"admin_{key}")
        )
    return fields


def _promote_existing(user_id, tenant):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound(f'User with ID "{user_id}" not found')

    user.role = get_or_create_role(TENANT_ADMIN)
    db.session.add(UserTenant(user_id=user.id, tenant_id=tenant.id, role=TENANT_ADMIN))
    return user


def _create_admin(fields, tenant):
    if not fields["email"] or not fields["password"]:
        return None

    if User.query.filter_by(email=fields["email"].strip().lower()).first():
        raise Conflict(f'User with email "{fields["email"]}" already exists')

    user = stage_user(
        email=fields["email"],
        password=fields["password"],
        first_name=fields["first_name"],
        last_name=fields["last_name"],
        role_name=TENANT_ADMIN,
    )
    db.session.add(UserTenant(user_id=user.id, tenant_id=tenant.id, role=TENANT_ADMIN))
    return user


def create_tenant(data):
    """
    Provision a tenant together with its administrator.

    The admin is either an existing user (``settings.existingUser`` plus
    ``settings.selectedUserId``) or a new account built from the
    ``admin_*`` fields. Tenant, admin and membership are written in one
    transaction; any failure leaves nothing behind.
    """
    name = (data.get("name") or "").strip()
    slug = checked_slug(data.get("slug"), name)
    if not name or not slug:
        raise ValidationError("Tenant name and slug are required")

    if Tenant.query.filter_by(slug=slug).first():
        raise Conflict(f'Tenant with slug "{slug}" already exists')

    settings = data.get("settings") or {}

    with transactional():
        tenant = Tenant(
            name=name,
            slug=slug,
            domain=data.get("domain"),
            status="ACTIVE",
            plan_id=data.get("plan_id"),
            features=clean_features(data.get("features")),
            settings=settings,
        )
        db.session.add(tenant)
        db.session.flush()

        if settings.get("existingUser") and settings.get("selectedUserId"):
            admin = _promote_existing(settings["selectedUserId"], tenant)
        else:
            admin = _create_admin(_admin_fields(data), tenant)

    logger.info("Provisioned tenant %s (admin: %s)", tenant.slug, admin.id if admin else None)

    message = f'Tenant "{tenant.name}" created successfully'
    if admin is not None:
        message += f" with admin user {admin.email}"
    return {"success": True, "message": message, "tenant": tenant, "adminUser": admin}


def update_tenant(tenant_id, data):
    tenant = tenant_by_id(tenant_id)

    if data.get("status") and data["status"] not in TENANT_STATUSES:
        raise ValidationError(f"Invalid tenant status: {data['status']}")

    if "slug" in data and data["slug"] != tenant.slug:
        slug = checked_slug(data["slug"])
        if not slug:
            raise ValidationError("Tenant slug cannot be empty")
        clash = Tenant.query.filter(Tenant.slug == slug, Tenant.id != tenant.id).first()
        if clash:
            raise Conflict(f'Tenant with slug "{slug}" already exists')
    else:
        slug = tenant.slug

    with transactional():
        tenant.slug = slug
        for field in TENANT_FIELDS:
            if field in data:
                setattr(tenant, field, data[field])
        if "features" in data:
            tenant.features = clean_features(data["features"])

    return {"success": True, "message": "Tenant updated successfully", "tenant": tenant}


def delete_tenant(tenant_id):
    tenant = tenant_by_id(tenant_id)
    name = tenant.name

    with transactional():
        db.session.delete(tenant)

    logger.warning("Deleted tenant %s and all its data", tenant_id)
    return {
        "success": True,
        "message": f'Tenant "{name}" and all associated data deleted successfully',
    }


def impersonate_tenant(*, tenant_id, admin):
    """Short-lived access token for the tenant's first active admin or manager."""
    tenant = tenant_by_id(tenant_id)

    membership = (
        UserTenant.query
        .join(User, User.id == UserTenant.user_id)
        .filter(
            UserTenant.tenant_id == tenant.id,
            UserTenant.is_active.is_(True),
            UserTenant.role.in_((TENANT_ADMIN, TENANT_MANAGER)),
            User.is_active.is_(True),
        )
        .order_by(UserTenant.joined_at.asc())
        .first()
    )
    if membership is None:
        raise NotFound("No admin user found for this tenant")

    claims = token_claims(membership.user, membership)
    claims["impersonated_by"] = admin.id
    token = create_access_token(
        identity=membership.user_id,
        additional_claims=claims,
        expires_delta=current_app.config["IMPERSONATION_TOKEN_EXPIRES"],
    )

    logger.warning("User %s impersonating tenant %s as %s", admin.id, tenant.slug, membership.user_id)
    return {
        "success": True,
        "message": "Impersonation session created",
        "token": token,
        "user": membership.user,
        "tenant": tenant,
    }
