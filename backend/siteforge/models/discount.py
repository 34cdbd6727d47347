from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

DISCOUNT_TYPES = ("PERCENTAGE", "FIXED_AMOUNT")


class Discount(BaseModel, TenantMixin):
    __tablename__ = "discounts"

    code = db.Column(db.String(50), nullable=False, index=True)
    description = db.Column(db.String(255), nullable=True)
    type = db.Column(db.String(20), nullable=False, default="PERCENTAGE")
    value = db.Column(db.Numeric(12, 2), nullable=False)
    min_order_amount = db.Column(db.Numeric(12, 2), nullable=True)
    starts_at = db.Column(db.DateTime, nullable=True)
    ends_at = db.Column(db.DateTime, nullable=True)
    usage_limit = db.Column(db.Integer, nullable=True)
    usage_count = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "code", name="uq_discount_code_per_tenant"),
    )
