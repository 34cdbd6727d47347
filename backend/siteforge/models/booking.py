from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

BOOKING_STATUSES = ("PENDING", "CONFIRMED", "CANCELLED", "COMPLETED", "NO_SHOW")


class Service(BaseModel, TenantMixin):
    __tablename__ = "services"

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    duration_minutes = db.Column(db.Integer, nullable=False)
    buffer_minutes = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Numeric(12, 2), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)


class Booking(BaseModel, TenantMixin):
    __tablename__ = "bookings"

    service_id = db.Column(db.String(36), db.ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    customer_name = db.Column(db.String(200), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False)
    customer_phone = db.Column(db.String(50), nullable=True)

    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default="PENDING", index=True)
    notes = db.Column(db.Text, nullable=True)

    service = db.relationship("Service")
