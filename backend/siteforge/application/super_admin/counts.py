from sqlalchemy import func

from siteforge.extensions import db
from siteforge.models.blog import Post
from siteforge.models.page import Page
from siteforge.models.user import UserTenant


def _count_by_tenant(column, tenant_ids):
    if not tenant_ids:
        return {}
    rows = (
        db.session.query(column, func.count())
        .filter(column.in_(tenant_ids))
        .group_by(column)
        .all()
    )
    return dict(rows)


def tenant_counts(tenant_ids):
    """``{tenant_id: {"userCount", "pageCount", "postCount"}}`` for the given tenants."""
    users = _count_by_tenant(UserTenant.tenant_id, tenant_ids)
    pages = _count_by_tenant(Page.tenant_id, tenant_ids)
    posts = _count_by_tenant(Post.tenant_id, tenant_ids)
    return {
        tenant_id: {
            "userCount": users.get(tenant_id, 0),
            "pageCount": pages.get(tenant_id, 0),
            "postCount": posts.get(tenant_id, 0),
        }
        for tenant_id in tenant_ids
    }


def page_envelope(items, total, page, page_size):
    return {
        "items": items,
        "totalCount": total,
        "page": page,
        "pageSize": page_size,
        "totalPages": (total + page_size - 1) // page_size if page_size else 0,
    }
