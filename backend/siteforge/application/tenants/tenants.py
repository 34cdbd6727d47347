import logging

from siteforge.constants import TENANT_ADMIN
from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.tenant import KNOWN_FEATURES, FEATURE_CMS, Tenant
from siteforge.models.user import UserTenant
from siteforge.application.auth.login import stage_user
from siteforge.utils.slugs import checked_slug
from siteforge.utils.transaction import transactional

logger = logging.getLogger(__name__)


def clean_features(features):
    if features is None:
        return [FEATURE_CMS]
    unknown = [f for f in features if f not in KNOWN_FEATURES]
    if unknown:
        raise ValidationError(f"Unknown features: {', '.join(unknown)}")
    return list(dict.fromkeys(features))


def get_tenant(*, tenant_id=None, slug=None):
    if tenant_id:
        tenant = db.session.get(Tenant, tenant_id)
    elif slug:
        tenant = Tenant.query.filter_by(slug=slug).first()
    else:
        raise ValidationError("Tenant id or slug is required")

    if not tenant:
        raise NotFound("Tenant not found")
    return tenant


def list_tenants(user):
    """Tenants the user is an active member of."""
    return (
        Tenant.query
        .join(UserTenant, UserTenant.tenant_id == Tenant.id)
        .filter(UserTenant.user_id == user.id, UserTenant.is_active.is_(True))
        .order_by(Tenant.name.asc())
        .all()
    )


def _new_tenant(data):
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Tenant name is required")

    slug = checked_slug(data.get("slug"), name)
    if not slug:
        raise ValidationError("Tenant slug is required")

    if Tenant.query.filter_by(slug=slug).first():
        raise Conflict(f"Tenant slug '{slug}' is already taken")

    return Tenant(
        name=name,
        slug=slug,
        domain=data.get("domain"),
        status="ACTIVE",
        plan_id=data.get("plan_id"),
        features=clean_features(data.get("features")),
        settings=data.get("settings") or {},
    )


def create_tenant(*, user, data):
    """Self-service tenant creation; the caller becomes its TenantAdmin."""
    tenant = _new_tenant(data)

    with transactional():
        db.session.add(tenant)
        db.session.flush()
        db.session.add(UserTenant(user_id=user.id, tenant_id=tenant.id, role=TENANT_ADMIN))

    logger.info("User %s created tenant %s", user.id, tenant.slug)
    return tenant


def register_user_with_tenant(*, data):
    """Create user, tenant and admin membership atomically."""
    tenant_data = data.get("tenant") or {}
    tenant = _new_tenant(tenant_data)

    with transactional():
        user = stage_user(
            email=data.get("email"),
            password=data.get("password"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            phone_number=data.get("phone_number"),
        )
        db.session.add(tenant)
        db.session.flush()
        db.session.add(UserTenant(user_id=user.id, tenant_id=tenant.id, role=TENANT_ADMIN))

    return user, tenant
