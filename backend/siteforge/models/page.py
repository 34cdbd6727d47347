from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

PAGE_TYPES = (
    "CONTENT", "LANDING", "BLOG", "PRODUCT", "CATEGORY",
    "TAG", "HOME", "CONTACT", "ABOUT", "CUSTOM",
)
SCROLL_TYPES = ("NORMAL", "SMOOTH")


class Page(BaseModel, TenantMixin):
    __tablename__ = 'pages'

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    template = db.Column(db.String(100), nullable=False, default="default")

    is_published = db.Column(db.Boolean, nullable=False, default=False, index=True)
    publish_date = db.Column(db.DateTime, nullable=True)

    featured_image = db.Column(db.String(512), nullable=True)
    meta_title = db.Column(db.String(255), nullable=True)
    meta_description = db.Column(db.Text, nullable=True)

    parent_id = db.Column(db.String(36), db.ForeignKey("pages.id", ondelete="SET NULL"), nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    page_type = db.Column(db.String(20), nullable=False, default="CONTENT", index=True)
    locale = db.Column(db.String(10), nullable=False, default="en")
    scroll_type = db.Column(db.String(10), nullable=False, default="NORMAL")

    created_by = db.Column(db.String(36), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_page_slug_per_tenant"),
    )

    # Relationship to Sections (ordered, cascade deletes)
    sections = db.relationship(
        "PageSection",
        back_populates="page",
        order_by="PageSection.order",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    children = db.relationship("Page", backref=db.backref("parent", remote_side="Page.id"))
