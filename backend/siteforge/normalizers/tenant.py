from siteforge.utils.dates import isoformat


def normalize_tenant(tenant, counts=None):
    if tenant is None:
        return None

    data = {
        "id": tenant.id,
        "name": tenant.name,
        "slug": tenant.slug,
        "domain": tenant.domain,
        "status": tenant.status,
        "plan_id": tenant.plan_id,
        "features": list(tenant.features or []),
        "settings": tenant.settings or {},
        "created_at": isoformat(tenant.created_at),
        "updated_at": isoformat(tenant.updated_at),
    }
    if counts is not None:
        data.update(counts)
    return data


def normalize_tenant_with_counts(pair):
    tenant, counts = pair
    return normalize_tenant(tenant, counts)
