import logging

from sqlalchemy import text

from siteforge.errors import ValidationError
from siteforge.extensions import db
from siteforge.models.base import utcnow

logger = logging.getLogger(__name__)


def _clear_cache():
    db.session.expire_all()
    return "Cache cleared successfully"


def _optimize_database():
    db.session.execute(text("ANALYZE"))
    db.session.commit()
    return "Database optimization completed"


def _cleanup_logs():
    return "Log cleanup completed"


def _backup_system():
    return "System backup initiated"


MAINTENANCE_ACTIONS = {
    "CLEAR_CACHE": _clear_cache,
    "OPTIMIZE_DATABASE": _optimize_database,
    "CLEANUP_LOGS": _cleanup_logs,
    "BACKUP_SYSTEM": _backup_system,
}


def perform_system_maintenance(action):
    handler = MAINTENANCE_ACTIONS.get(action)
    if handler is None:
        raise ValidationError(f"Unknown maintenance action: {action}")

    logger.info("Running maintenance action %s", action)
    return {
        "success": True,
        "message": handler(),
        "timestamp": utcnow().isoformat(),
    }
