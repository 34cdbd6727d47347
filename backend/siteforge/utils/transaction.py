import logging
from contextlib import contextmanager

from siteforge.extensions import db

logger = logging.getLogger(__name__)


@contextmanager
def transactional():
    """Commit the session on success; roll back and re-raise on any error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.debug("Transaction rolled back", exc_info=True)
        raise
