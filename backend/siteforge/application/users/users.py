from siteforge.constants import MANAGER_ROLES, SUPER_ADMIN
from siteforge.errors import Forbidden, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.user import User, UserTenant


def get_user(*, requester, requester_roles, user_id):
    if requester.id != user_id and not requester_roles.intersection(MANAGER_ROLES):
        raise Forbidden("Unauthorized: You can only view your own profile")

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def list_users(*, requester_roles, tenant_id=None):
    """SuperAdmin sees every user; other managers only members of ``tenant_id``."""
    if not requester_roles.intersection(MANAGER_ROLES):
        raise Forbidden("Unauthorized: Insufficient permissions")

    query = User.query
    if SUPER_ADMIN not in requester_roles:
        if not tenant_id:
            raise ValidationError("Tenant context missing")
        query = query.join(UserTenant, UserTenant.user_id == User.id).filter(UserTenant.tenant_id == tenant_id)

    return query.order_by(User.created_at.desc()).all()
