from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class Shop(BaseModel, TenantMixin):
    __tablename__ = "shops"

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    default_currency_code = db.Column(db.String(3), nullable=False, default="USD")
    is_active = db.Column(db.Boolean, nullable=False, default=True)


class Currency(BaseModel, TenantMixin):
    __tablename__ = "currencies"

    code = db.Column(db.String(3), nullable=False)  # ISO 4217
    name = db.Column(db.String(100), nullable=False)
    symbol = db.Column(db.String(10), nullable=False)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "code", name="uq_currency_code_per_tenant"),
    )


class Tax(BaseModel, TenantMixin):
    __tablename__ = "taxes"

    name = db.Column(db.String(100), nullable=False)
    rate = db.Column(db.Numeric(5, 2), nullable=False)  # percentage 0..100
    is_active = db.Column(db.Boolean, nullable=False, default=True)
