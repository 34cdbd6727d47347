from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class CMSComponent(BaseModel, TenantMixin):
    __tablename__ = "cms_components"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)  # hero, video, gallery...
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    schema = db.Column(db.JSON, nullable=True)
    icon = db.Column(db.String(100), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_cms_component_slug_per_tenant"),
    )
