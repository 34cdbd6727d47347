from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class ProductCategory(BaseModel, TenantMixin):
    __tablename__ = "product_categories"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    parent_id = db.Column(
        db.String(36), db.ForeignKey("product_categories.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_category_slug_per_tenant"),
    )


class Product(BaseModel, TenantMixin):
    __tablename__ = "products"

    shop_id = db.Column(db.String(36), db.ForeignKey("shops.id", ondelete="SET NULL"), nullable=True, index=True)
    category_id = db.Column(
        db.String(36), db.ForeignKey("product_categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name = db.Column(db.String(255), nullable=False)
    sku = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    images = db.Column(db.JSON, nullable=False, default=list)

    category = db.relationship("ProductCategory")
    shop = db.relationship("Shop")

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "sku", name="uq_product_sku_per_tenant"),
    )
