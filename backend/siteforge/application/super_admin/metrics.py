from collections import Counter
from datetime import timedelta

from siteforge.errors import NotFound
from siteforge.extensions import db
from siteforge.models.base import utcnow
from siteforge.models.blog import Blog, Post
from siteforge.models.booking import Booking
from siteforge.models.order import Order
from siteforge.models.page import Page
from siteforge.models.product import Product
from siteforge.models.tenant import (
    FEATURE_BLOG, FEATURE_BOOKING, FEATURE_ECOMMERCE, Tenant,
)
from siteforge.models.user import User, UserTenant
from .counts import tenant_counts

# Health score weights
HEALTH_HAS_USERS = 30
HEALTH_PUBLISHED_PAGE = 25
HEALTH_PUBLISHED_POST = 20
HEALTH_ACTIVE = 25

TIME_RANGES = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "quarter": timedelta(days=90),
    "year": timedelta(days=365),
}
DEFAULT_TIME_RANGE = timedelta(days=30)


def _get_tenant(tenant_id):
    tenant = db.session.get(Tenant, tenant_id)
    if not tenant:
        raise NotFound(f'Tenant with ID "{tenant_id}" not found')
    return tenant


def _member_users(tenant_id):
    return (
        User.query
        .join(UserTenant, UserTenant.user_id == User.id)
        .filter(UserTenant.tenant_id == tenant_id, UserTenant.is_active.is_(True))
        .all()
    )


def _base_metrics(tenant):
    users = _member_users(tenant.id)
    pages = Page.query.filter_by(tenant_id=tenant.id)
    posts = Post.query.filter_by(tenant_id=tenant.id)
    return {
        "totalUsers": len(users),
        "activeUsers": sum(1 for u in users if u.is_active),
        "totalPages": pages.count(),
        "publishedPages": pages.filter_by(is_published=True).count(),
        "totalPosts": posts.count(),
        "publishedPosts": posts.filter_by(status="PUBLISHED").count(),
        "features": list(tenant.features or []),
    }


def health_score(tenant, metrics):
    score = 0
    if metrics["totalUsers"] > 0:
        score += HEALTH_HAS_USERS
    if metrics["publishedPages"] > 0:
        score += HEALTH_PUBLISHED_PAGE
    if metrics["publishedPosts"] > 0:
        score += HEALTH_PUBLISHED_POST
    if tenant.status == "ACTIVE":
        score += HEALTH_ACTIVE
    return score


def tenant_health_metrics(tenant_id=None):
    if tenant_id:
        tenants = [_get_tenant(tenant_id)]
    else:
        tenants = Tenant.query.order_by(Tenant.name.asc()).all()

    results = []
    for tenant in tenants:
        metrics = _base_metrics(tenant)
        results.append({
            "tenantId": tenant.id,
            "tenantName": tenant.name,
            "status": tenant.status,
            "healthScore": health_score(tenant, metrics),
            "metrics": metrics,
            "lastActivity": tenant.updated_at.isoformat(),
        })
    return results


def tenant_detailed_metrics(tenant_id):
    tenant = _get_tenant(tenant_id)
    since = utcnow() - timedelta(days=30)

    metrics = _base_metrics(tenant)

    blogs = Blog.query.filter_by(tenant_id=tenant.id)
    bookings = Booking.query.filter_by(tenant_id=tenant.id)
    products = Product.query.filter_by(tenant_id=tenant.id)
    orders = Order.query.filter_by(tenant_id=tenant.id)

    recent_posts = Post.query.filter(Post.tenant_id == tenant.id, Post.created_at > since).count()
    recent_bookings = bookings.filter(Booking.created_at > since).count()
    recent_orders = orders.filter(Order.created_at > since).count()

    metrics.update({
        "totalBlogs": blogs.count(),
        "activeBlogs": blogs.filter_by(is_active=True).count(),
        "totalBookings": bookings.count(),
        "last30DaysBookings": recent_bookings,
        "totalProducts": products.count(),
        "activeProducts": products.filter_by(is_active=True).count(),
        "totalOrders": orders.count(),
        "last30DaysOrders": recent_orders,
    })

    modules = []
    if tenant.has_feature(FEATURE_BLOG):
        modules.append({"moduleName": "Blog Module", "isActive": True,
                        "itemCount": metrics["totalBlogs"], "last30DaysActivity": recent_posts})
    if tenant.has_feature(FEATURE_ECOMMERCE):
        modules.append({"moduleName": "E-commerce Engine", "isActive": True,
                        "itemCount": metrics["totalProducts"], "last30DaysActivity": recent_orders})
    if tenant.has_feature(FEATURE_BOOKING):
        modules.append({"moduleName": "Booking Engine", "isActive": True,
                        "itemCount": metrics["totalBookings"], "last30DaysActivity": recent_bookings})
    metrics["modules"] = modules

    return {
        "tenantId": tenant.id,
        "tenantName": tenant.name,
        "metrics": metrics,
        "lastActivity": tenant.updated_at.isoformat(),
    }


def _growth(rows):
    per_day = Counter(created_at.date().isoformat() for (created_at,) in rows)
    return [{"date": day, "count": per_day[day]} for day in sorted(per_day)]


def global_analytics(time_range=None):
    start = utcnow() - TIME_RANGES.get(time_range, DEFAULT_TIME_RANGE)

    tenant_rows = db.session.query(Tenant.created_at).filter(Tenant.created_at >= start).all()
    user_rows = db.session.query(User.created_at).filter(User.created_at >= start).all()

    feature_usage = Counter(f for (features,) in db.session.query(Tenant.features) for f in (features or []))

    top = Tenant.query.order_by(Tenant.updated_at.desc()).limit(10).all()
    counts = tenant_counts([t.id for t in top])

    return {
        "tenantGrowth": _growth(tenant_rows),
        "userGrowth": _growth(user_rows),
        "featureUsage": [
            {"feature": feature, "count": count}
            for feature, count in sorted(feature_usage.items())
        ],
        "topTenants": [
            {
                "id": t.id,
                "name": t.name,
                "slug": t.slug,
                **counts[t.id],
                "lastActivity": t.updated_at.isoformat(),
            }
            for t in top
        ],
    }
