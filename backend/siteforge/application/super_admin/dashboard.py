import logging
import time

from sqlalchemy import text

from siteforge.extensions import db
from siteforge.models.base import utcnow
from siteforge.models.role import Permission, Role
from siteforge.models.tenant import Tenant
from siteforge.models.user import User

logger = logging.getLogger(__name__)


def dashboard():
    tenants = Tenant.query.all()
    total_users = User.query.count()
    active_users = User.query.filter_by(is_active=True).count()
    modules = {feature for tenant in tenants for feature in (tenant.features or [])}

    return {
        "stats": {
            "totalTenants": len(tenants),
            "activeTenants": sum(1 for t in tenants if t.status == "ACTIVE"),
            "totalUsers": total_users,
            "activeUsers": active_users,
            "totalModules": len(modules),
        },
        "recentActivity": {
            "tenants": Tenant.query.order_by(Tenant.created_at.desc()).limit(5).all(),
            "users": User.query.order_by(User.created_at.desc()).limit(5).all(),
        },
    }


def check_database():
    started = time.perf_counter()
    try:
        db.session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        db.session.rollback()
        return {"status": "unhealthy", "responseTimeMs": None}
    return {"status": "healthy", "responseTimeMs": round((time.perf_counter() - started) * 1000, 2)}


def system_status():
    total_tenants = Tenant.query.count()
    active_tenants = Tenant.query.filter_by(status="ACTIVE").count()
    total_users = User.query.count()
    active_users = User.query.filter_by(is_active=True).count()

    return {
        "database": check_database(),
        "metrics": {
            "tenants": {
                "total": total_tenants,
                "active": active_tenants,
                "inactive": total_tenants - active_tenants,
            },
            "users": {
                "total": total_users,
                "active": active_users,
                "inactive": total_users - active_users,
            },
            "system": {
                "roles": Role.query.count(),
                "permissions": Permission.query.count(),
            },
        },
        "timestamp": utcnow().isoformat(),
    }


def global_modules():
    tenants = Tenant.query.all()
    features = sorted({f for t in tenants for f in (t.features or [])})

    modules = []
    for feature in features:
        usage = sum(1 for t in tenants if feature in (t.features or []))
        modules.append({
            "name": feature,
            "usageCount": usage,
            "usagePercentage": round(usage / len(tenants) * 100, 2),
            "isCore": feature == "CMS_ENGINE",
        })
    return modules
