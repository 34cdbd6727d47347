from siteforge.extensions import db
from .base import BaseModel

TENANT_STATUSES = ("ACTIVE", "INACTIVE", "SUSPENDED", "PENDING")

# Feature codes stored in Tenant.features
FEATURE_CMS = "CMS_ENGINE"
FEATURE_BLOG = "BLOG_MODULE"
FEATURE_ECOMMERCE = "ECOMMERCE_ENGINE"
FEATURE_BOOKING = "BOOKING_ENGINE"
FEATURE_FORMS = "FORMS_MODULE"

KNOWN_FEATURES = (FEATURE_CMS, FEATURE_BLOG, FEATURE_ECOMMERCE, FEATURE_BOOKING, FEATURE_FORMS)


class Tenant(BaseModel):
    __tablename__ = "tenants"

    # Basic info
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    domain = db.Column(db.String(255), nullable=True, index=True)
    status = db.Column(db.String(20), nullable=False, default="ACTIVE", index=True)
    plan_id = db.Column(db.String(64), nullable=True, index=True)

    # Enabled modules, e.g. ["CMS_ENGINE", "BLOG_MODULE"]
    features = db.Column(db.JSON, nullable=False, default=lambda: [FEATURE_CMS])

    # Free-form settings (business hours, branding, provisioning hints)
    settings = db.Column(db.JSON, nullable=True)

    memberships = db.relationship(
        "UserTenant",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def is_active(self):
        return self.status == "ACTIVE"

    def has_feature(self, feature_name: str) -> bool:
        """
        Check if a feature is enabled for this tenant.
        """
        return feature_name in (self.features or [])
