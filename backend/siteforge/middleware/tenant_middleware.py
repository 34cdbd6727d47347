from flask import request, g

from siteforge.errors import error_response
from siteforge.models.tenant import Tenant

# Paths that never run inside a tenant context. Login is not listed: it reads
# the tenant header to issue tenant-scoped tokens.
PUBLIC_PREFIXES = (
    "/api/v1/health",
    "/api/v1/auth/register",
    "/api/v1/auth/refresh",
    "/api/v1/auth/logout",
    "/api/v1/tenants/register",
    "/api/v1/super-admin",
    "/openapi",
    "/swagger",
)


def resolve_tenant(tenant_id=None, tenant_slug=None):
    if tenant_id:
        tenant = Tenant.query.filter_by(id=tenant_id).first()
    elif tenant_slug:
        tenant = Tenant.query.filter_by(slug=tenant_slug).first()
    else:
        return None

    if not tenant or not tenant.is_active:
        return None
    return tenant


def tenant_middleware(app):
    @app.before_request
    def load_tenant():
        g.current_tenant = None
        g.current_membership = None

        if request.path.startswith(PUBLIC_PREFIXES):
            return None

        tenant_id = request.headers.get('X-Tenant-ID')
        tenant_slug = request.headers.get('X-Tenant-Slug')
        if not tenant_id and not tenant_slug:
            return None  # Tenant-scoped routes reject this in tenant_required

        tenant = resolve_tenant(tenant_id, tenant_slug)
        if not tenant:
            return error_response("NotFound", "Invalid tenant", 404)

        # Attach tenant to global context
        g.current_tenant = tenant
        return None
