from functools import wraps
from flask import g
from flask_jwt_extended import get_current_user

from siteforge.constants import SUPER_ADMIN
from siteforge.errors import Forbidden, NotAuthenticated, ValidationError


def _actor():
    user = get_current_user()
    if user is None:
        raise NotAuthenticated()
    return user


def held_roles(user, membership=None):
    """Platform role plus the tenant membership role, if any."""
    roles = {user.role_name}
    if membership is not None and membership.is_active:
        roles.add(membership.role)
    return roles


def request_roles():
    """Roles of the authenticated user within the request's tenant (if any)."""
    user = _actor()
    membership = getattr(g, "current_membership", None)
    tenant = getattr(g, "current_tenant", None)
    if membership is None and tenant is not None:
        membership = user.membership_for(tenant.id)
    return held_roles(user, membership)


def tenant_required(fn):
    """Require a resolved tenant and an active membership of the caller in it."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        tenant = getattr(g, "current_tenant", None)
        if not tenant:
            raise ValidationError("Tenant context missing")

        user = _actor()
        membership = user.membership_for(tenant.id)

        if user.role_name != SUPER_ADMIN and (membership is None or not membership.is_active):
            raise Forbidden("Unauthorized: You are not a member of this tenant")

        g.current_membership = membership
        return fn(*args, **kwargs)
    return wrapper


def tenant_optional(fn):
    """Like ``tenant_required`` when a tenant was selected; a no-op otherwise."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "current_tenant", None) is None:
            return fn(*args, **kwargs)
        return tenant_required(fn)(*args, **kwargs)
    return wrapper


def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            roles = request_roles()

            if SUPER_ADMIN not in roles and not roles.intersection(allowed_roles):
                raise Forbidden("Unauthorized: Insufficient permissions")

            return fn(*args, **kwargs)
        return wrapper
    return decorator


def permission_required(permission_name, *bypass_roles):
    """Allow callers holding ``permission_name`` (role grant or user override)."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            from siteforge.application.users.permissions import has_permission

            roles = request_roles()

            if SUPER_ADMIN in roles or roles.intersection(bypass_roles):
                return fn(*args, **kwargs)

            if not has_permission(_actor(), permission_name):
                raise Forbidden(f"Forbidden: Missing permission '{permission_name}'")

            return fn(*args, **kwargs)
        return wrapper
    return decorator


def feature_enabled(feature_name):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            tenant = getattr(g, "current_tenant", None)
            if not tenant:
                raise ValidationError("Tenant context missing")

            if not tenant.has_feature(feature_name):
                raise Forbidden(f"Feature '{feature_name}' is disabled for this tenant")

            return fn(*args, **kwargs)
        return wrapper
    return decorator


def super_admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = get_current_user()
        if user is None:
            raise NotAuthenticated("Unauthorized: You must be logged in")

        if user.role_name != SUPER_ADMIN:
            raise Forbidden("Forbidden: SuperAdmin access required")

        return fn(*args, **kwargs)
    return wrapper
