from flask import Blueprint, g, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from siteforge.application.ecommerce import catalog, customers, discounts, orders, shops
from siteforge.constants import STORE_ROLES
from siteforge.models.tenant import FEATURE_ECOMMERCE
from siteforge.normalizers.ecommerce import (
    money,
    normalize_category,
    normalize_currency,
    normalize_customer,
    normalize_customer_stats,
    normalize_discount,
    normalize_order,
    normalize_product,
    normalize_shop,
    normalize_tax,
)
from siteforge.utils.decorators import tenant_required, roles_required, feature_enabled

ecommerce_bp = Blueprint("ecommerce", __name__)


def _body():
    return request.get_json(silent=True) or {}


def _bool_arg(name):
    value = request.args.get(name)
    if value is None:
        return None
    return value.lower() in ("1", "true", "yes")


# ------------------------
# Shops, currencies, taxes
# ------------------------

@ecommerce_bp.route("/shops", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_ECOMMERCE)
def list_shops():
    return jsonify([normalize_shop(s) for s in shops.list_shops(tenant_id=g.current_tenant.id)])


@ecommerce_bp.route("/shops/<shop_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_ECOMMERCE)
def get_shop(shop_id):
    return jsonify(normalize_shop(shops.get_shop(tenant_id=g.current_tenant.id, shop_id=shop_id)))


@ecommerce_bp.route("/shops", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def create_shop():
    shop = shops.create_shop(tenant_id=g.current_tenant.id, actor_id=current_user.id, data=_body())
    return jsonify(normalize_shop(shop)), 201


@ecommerce_bp.route("/shops/<shop_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def update_shop(shop_id):
    shop = shops.update_shop(tenant_id=g.current_tenant.id, actor_id=current_user.id, shop_id=shop_id, data=_body())
    return jsonify(normalize_shop(shop)), 200


@ecommerce_bp.route("/currencies", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_ECOMMERCE)
def list_currencies():
    tenant = g.current_tenant
    code = request.args.get("code")
    if code:
        currency = shops.currency_by_code(tenant_id=tenant.id, code=code)
        return jsonify(normalize_currency(currency))
    return jsonify([normalize_currency(c) for c in shops.list_currencies(tenant_id=tenant.id)])


@ecommerce_bp.route("/currencies/<currency_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_ECOMMERCE)
def get_currency(currency_id):
    return jsonify(normalize_currency(shops.get_currency(tenant_id=g.current_tenant.id, currency_id=currency_id)))


@ecommerce_bp.route("/currencies", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def create_currency():
    currency = shops.create_currency(tenant_id=g.current_tenant.id, actor_id=current_user.id, data=_body())
    return jsonify(normalize_currency(currency)), 201


@ecommerce_bp.route("/taxes", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_ECOMMERCE)
def list_taxes():
    return jsonify([normalize_tax(t) for t in shops.list_taxes(tenant_id=g.current_tenant.id)])


@ecommerce_bp.route("/taxes/<tax_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_ECOMMERCE)
def get_tax(tax_id):
    return jsonify(normalize_tax(shops.get_tax(tenant_id=g.current_tenant.id, tax_id=tax_id)))


@ecommerce_bp.route("/taxes", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def create_tax():
    tax = shops.create_tax(tenant_id=g.current_tenant.id, actor_id=current_user.id, data=_body())
    return jsonify(normalize_tax(tax)), 201


# ------------------------
# Catalog
# ------------------------

@ecommerce_bp.route("/categories", methods=["GET"])
@feature_enabled(FEATURE_ECOMMERCE)
def list_categories():
    return jsonify([normalize_category(c) for c in catalog.list_categories(tenant_id=g.current_tenant.id)])


@ecommerce_bp.route("/categories/<category_id>", methods=["GET"])
@feature_enabled(FEATURE_ECOMMERCE)
def get_category(category_id):
    return jsonify(normalize_category(catalog.get_category(tenant_id=g.current_tenant.id, category_id=category_id)))


@ecommerce_bp.route("/categories/by-slug/<slug>", methods=["GET"])
@feature_enabled(FEATURE_ECOMMERCE)
def category_by_slug(slug):
    return jsonify(normalize_category(catalog.category_by_slug(tenant_id=g.current_tenant.id, slug=slug)))


@ecommerce_bp.route("/categories", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def create_category():
    category = catalog.create_category(tenant_id=g.current_tenant.id, actor_id=current_user.id, data=_body())
    return jsonify(normalize_category(category)), 201


@ecommerce_bp.route("/products", methods=["GET"])
@feature_enabled(FEATURE_ECOMMERCE)
def list_products():
    products = catalog.list_products(
        tenant_id=g.current_tenant.id,
        category_id=request.args.get("category_id"),
        active=_bool_arg("active"),
        search=request.args.get("search"),
    )
    return jsonify([normalize_product(p) for p in products])


@ecommerce_bp.route("/products/<product_id>", methods=["GET"])
@feature_enabled(FEATURE_ECOMMERCE)
def get_product(product_id):
    return jsonify(normalize_product(catalog.get_product(tenant_id=g.current_tenant.id, product_id=product_id)))


@ecommerce_bp.route("/products/by-sku/<sku>", methods=["GET"])
@feature_enabled(FEATURE_ECOMMERCE)
def product_by_sku(sku):
    return jsonify(normalize_product(catalog.product_by_sku(tenant_id=g.current_tenant.id, sku=sku)))


@ecommerce_bp.route("/products", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def create_product():
    product = catalog.create_product(tenant_id=g.current_tenant.id, actor_id=current_user.id, data=_body())
    return jsonify(normalize_product(product)), 201


@ecommerce_bp.route("/products/<product_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def update_product(product_id):
    product = catalog.update_product(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        product_id=product_id,
        data=_body(),
    )
    return jsonify(normalize_product(product)), 200


@ecommerce_bp.route("/products/<product_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def delete_product(product_id):
    catalog.delete_product(tenant_id=g.current_tenant.id, actor_id=current_user.id, product_id=product_id)
    return jsonify({"success": True, "message": "Product deleted successfully"}), 200


# ------------------------
# Customers
# ------------------------

@ecommerce_bp.route("/customers", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def list_customers():
    tenant = g.current_tenant
    email = request.args.get("email")
    if email:
        return jsonify(normalize_customer(customers.customer_by_email(tenant_id=tenant.id, email=email)))
    return jsonify([normalize_customer(c) for c in customers.list_customers(tenant_id=tenant.id)])


@ecommerce_bp.route("/customers/stats", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def customer_stats():
    return jsonify(normalize_customer_stats(customers.customer_stats(tenant_id=g.current_tenant.id)))


@ecommerce_bp.route("/customers/<customer_id>", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def get_customer(customer_id):
    customer = customers.get_customer(tenant_id=g.current_tenant.id, customer_id=customer_id)
    return jsonify(normalize_customer(customer))


@ecommerce_bp.route("/customers", methods=["POST"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_ECOMMERCE)
def create_customer():
    customer = customers.create_customer(tenant_id=g.current_tenant.id, actor_id=current_user.id, data=_body())
    return jsonify(normalize_customer(customer)), 201


# ------------------------
# Discounts
# ------------------------

@ecommerce_bp.route("/discounts", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def list_discounts():
    tenant = g.current_tenant
    code = request.args.get("code")
    if code:
        return jsonify(normalize_discount(discounts.discount_by_code(tenant_id=tenant.id, code=code)))
    return jsonify([normalize_discount(d) for d in discounts.list_discounts(tenant_id=tenant.id)])


@ecommerce_bp.route("/discounts/<discount_id>", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def get_discount(discount_id):
    discount = discounts.get_discount(tenant_id=g.current_tenant.id, discount_id=discount_id)
    return jsonify(normalize_discount(discount))


@ecommerce_bp.route("/discounts", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def create_discount():
    discount = discounts.create_discount(tenant_id=g.current_tenant.id, actor_id=current_user.id, data=_body())
    return jsonify(normalize_discount(discount)), 201


@ecommerce_bp.route("/discounts/validate", methods=["POST"])
@feature_enabled(FEATURE_ECOMMERCE)
def validate_discount():
    data = _body()
    result = discounts.validate_discount(
        tenant_id=g.current_tenant.id,
        code=data.get("code"),
        subtotal=data.get("subtotal"),
    )
    return jsonify({**result, "amount": money(result["amount"])})


# ------------------------
# Orders
# ------------------------

@ecommerce_bp.route("/orders", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def list_orders():
    found = orders.list_orders(tenant_id=g.current_tenant.id, status=request.args.get("status"))
    return jsonify([normalize_order(o) for o in found])


@ecommerce_bp.route("/orders/<order_id>", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def get_order(order_id):
    return jsonify(normalize_order(orders.get_order(tenant_id=g.current_tenant.id, order_id=order_id)))


@ecommerce_bp.route("/orders", methods=["POST"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_ECOMMERCE)
def create_order():
    order = orders.create_order(tenant_id=g.current_tenant.id, actor_id=current_user.id, data=_body())
    return jsonify(normalize_order(order)), 201


@ecommerce_bp.route("/orders/<order_id>/status", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*STORE_ROLES)
@feature_enabled(FEATURE_ECOMMERCE)
def update_order_status(order_id):
    order = orders.update_order_status(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        order_id=order_id,
        status=_body().get("status"),
    )
    return jsonify(normalize_order(order)), 200
