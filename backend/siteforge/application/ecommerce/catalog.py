from sqlalchemy import or_

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.product import Product, ProductCategory
from siteforge.models.shop import Shop
from siteforge.utils.audit import log_action
from siteforge.utils.slugs import slugify
from siteforge.utils.transaction import transactional
from .money import to_money

PRODUCT_FIELDS = ("name", "sku", "description", "stock_quantity", "is_active", "images", "category_id", "shop_id")


def list_categories(*, tenant_id):
    return ProductCategory.query.filter_by(tenant_id=tenant_id).order_by(ProductCategory.name.asc()).all()


def get_category(*, tenant_id, category_id):
    category = ProductCategory.query.filter_by(tenant_id=tenant_id, id=category_id).first()
    if not category:
        raise NotFound("Product category not found")
    return category


def category_by_slug(*, tenant_id, slug):
    category = ProductCategory.query.filter_by(tenant_id=tenant_id, slug=slug).first()
    if not category:
        raise NotFound("Product category not found")
    return category


def create_category(*, tenant_id, actor_id, data):
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Category name is required")

    slug = slugify(data.get("slug") or name)
    if ProductCategory.query.filter_by(tenant_id=tenant_id, slug=slug).first():
        raise Conflict(f"A category with slug {slug} already exists")

    if data.get("parent_id"):
        get_category(tenant_id=tenant_id, category_id=data["parent_id"])

    category = ProductCategory(
        tenant_id=tenant_id,
        name=name,
        slug=slug,
        description=data.get("description"),
        parent_id=data.get("parent_id"),
    )
    with transactional():
        db.session.add(category)
        db.session.flush()
        log_action(action="product_category.create", entity_type="product_category",
                   entity_id=category.id, payload={"slug": slug}, tenant_id=tenant_id, actor_id=actor_id)
    return category


def list_products(*, tenant_id, category_id=None, active=None, search=None):
    query = Product.query.filter_by(tenant_id=tenant_id)
    if category_id:
        query = query.filter_by(category_id=category_id)
    if active is not None:
        query = query.filter_by(is_active=active)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            Product.name.ilike(pattern),
            Product.sku.ilike(pattern),
            Product.description.ilike(pattern),
        ))
    return query.order_by(Product.created_at.desc()).all()


def get_product(*, tenant_id, product_id):
    product = Product.query.filter_by(tenant_id=tenant_id, id=product_id).first()
    if not product:
        raise NotFound("Product not found")
    return product


def product_by_sku(*, tenant_id, sku):
    product = Product.query.filter_by(tenant_id=tenant_id, sku=sku).first()
    if not product:
        raise NotFound("Product not found")
    return product


def _clean_product(data, *, tenant_id):
    fields = {f: data[f] for f in PRODUCT_FIELDS if f in data}

    if "name" in fields and not (fields["name"] or "").strip():
        raise ValidationError("Product name is required")
    if "sku" in fields:
        fields["sku"] = (fields["sku"] or "").strip()
        if not fields["sku"]:
            raise ValidationError("Product sku is required")
    if "price" in data:
        fields["price"] = to_money(data["price"], "price")
    if "stock_quantity" in fields:
        stock = fields["stock_quantity"]
        if not isinstance(stock, int) or isinstance(stock, bool) or stock < 0:
            raise ValidationError("stock_quantity must be a non-negative integer")
    if "images" in fields and not isinstance(fields["images"] or [], list):
        raise ValidationError("images must be a list")
    if fields.get("category_id"):
        get_category(tenant_id=tenant_id, category_id=fields["category_id"])
    if fields.get("shop_id") and not Shop.query.filter_by(tenant_id=tenant_id, id=fields["shop_id"]).first():
        raise NotFound("Shop not found")
    return fields


def create_product(*, tenant_id, actor_id, data):
    if not data.get("name") or not data.get("sku"):
        raise ValidationError("Product name and sku are required")
    if "price" not in data:
        raise ValidationError("price is required")

    fields = _clean_product(data, tenant_id=tenant_id)
    if Product.query.filter_by(tenant_id=tenant_id, sku=fields["sku"]).first():
        raise Conflict(f"A product with SKU {fields['sku']} already exists")

    product = Product(tenant_id=tenant_id, stock_quantity=0, is_active=True, images=[])
    for field, value in fields.items():
        setattr(product, field, value)

    with transactional():
        db.session.add(product)
        db.session.flush()
        log_action(action="product.create", entity_type="product", entity_id=product.id,
                   payload={"sku": product.sku}, tenant_id=tenant_id, actor_id=actor_id)
    return product


def update_product(*, tenant_id, actor_id, product_id, data):
    product = get_product(tenant_id=tenant_id, product_id=product_id)
    fields = _clean_product(data, tenant_id=tenant_id)

    if "sku" in fields and fields["sku"] != product.sku:
        if Product.query.filter_by(tenant_id=tenant_id, sku=fields["sku"]).first():
            raise Conflict(f"A product with SKU {fields['sku']} already exists")

    with transactional():
        for field, value in fields.items():
            setattr(product, field, value)
        log_action(action="product.update", entity_type="product", entity_id=product.id,
                   payload={"fields": sorted(fields.keys())}, tenant_id=tenant_id, actor_id=actor_id)
    return product


def delete_product(*, tenant_id, actor_id, product_id):
    product = get_product(tenant_id=tenant_id, product_id=product_id)
    with transactional():
        log_action(action="product.delete", entity_type="product", entity_id=product.id,
                   payload={"sku": product.sku}, tenant_id=tenant_id, actor_id=actor_id)
        db.session.delete(product)
    return True
