from sqlalchemy import event

from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class PageVersion(BaseModel, TenantMixin):
    __tablename__ = "page_versions"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False
    )

    version = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False)
    # published | unpublished | rollback

    snapshot = db.Column(db.JSON, nullable=False)

    created_by = db.Column(db.String(36), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("page_id", "version", name="uq_page_version"),
        db.Index("idx_page_version_page", "page_id"),
    )


@event.listens_for(PageVersion, "before_update")
def prevent_version_mutation(mapper, connection, target):
    raise RuntimeError("Page versions are immutable")
