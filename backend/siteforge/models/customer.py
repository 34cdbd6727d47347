from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class Customer(BaseModel, TenantMixin):
    __tablename__ = "customers"

    email = db.Column(db.String(255), nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    orders = db.relationship("Order", back_populates="customer", passive_deletes=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "email", name="uq_customer_email_per_tenant"),
    )
