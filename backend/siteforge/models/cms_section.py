from siteforge.extensions import db
from .base import BaseModel, utcnow
from .tenant_mixin import TenantMixin


class CMSSection(BaseModel, TenantMixin):
    __tablename__ = "cms_sections"

    # Human-facing key used by pages and the editor, e.g. "home-hero"
    section_id = db.Column(db.String(200), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=True)
    description = db.Column(db.Text, nullable=True)
    last_updated = db.Column(db.DateTime, nullable=False, default=utcnow)
    created_by = db.Column(db.String(36), nullable=True)

    components = db.relationship(
        "SectionComponent",
        back_populates="section",
        order_by="SectionComponent.order",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "section_id", name="uq_cms_section_key_per_tenant"),
    )


class SectionComponent(BaseModel):
    __tablename__ = "section_components"

    section_id = db.Column(db.String(36), db.ForeignKey("cms_sections.id", ondelete="CASCADE"), nullable=False)
    component_id = db.Column(db.String(36), db.ForeignKey("cms_components.id"), nullable=False, index=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    data = db.Column(db.JSON, nullable=True)

    section = db.relationship("CMSSection", back_populates="components")
    component = db.relationship("CMSComponent")

    __table_args__ = (
        db.Index("idx_section_component_order", "section_id", "order"),
    )
