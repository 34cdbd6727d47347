from siteforge.utils.dates import isoformat


def money(value):
    """Decimal amounts travel as strings to keep their two places."""
    return str(value) if value is not None else None


def _timestamps(entity):
    return {"created_at": isoformat(entity.created_at), "updated_at": isoformat(entity.updated_at)}


def normalize_shop(shop):
    return {
        "id": shop.id,
        "name": shop.name,
        "description": shop.description,
        "default_currency_code": shop.default_currency_code,
        "is_active": shop.is_active,
        **_timestamps(shop),
    }


def normalize_currency(currency):
    return {"id": currency.id, "code": currency.code, "name": currency.name, "symbol": currency.symbol}


def normalize_tax(tax):
    return {"id": tax.id, "name": tax.name, "rate": money(tax.rate), "is_active": tax.is_active}


def normalize_category(category):
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "parent_id": category.parent_id,
    }


def normalize_product(product):
    return {
        "id": product.id,
        "shop_id": product.shop_id,
        "category_id": product.category_id,
        "category": normalize_category(product.category) if product.category else None,
        "name": product.name,
        "sku": product.sku,
        "description": product.description,
        "price": money(product.price),
        "stock_quantity": product.stock_quantity,
        "is_active": product.is_active,
        "images": product.images or [],
        **_timestamps(product),
    }


def normalize_customer(customer):
    return {
        "id": customer.id,
        "email": customer.email,
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "phone": customer.phone,
        "user_id": customer.user_id,
        **_timestamps(customer),
    }


def normalize_customer_stats(stats):
    return {
        **stats,
        "totalRevenue": money(stats["totalRevenue"]),
        "averageOrderValue": money(stats["averageOrderValue"]),
    }


def normalize_discount(discount):
    return {
        "id": discount.id,
        "code": discount.code,
        "description": discount.description,
        "type": discount.type,
        "value": money(discount.value),
        "min_order_amount": money(discount.min_order_amount),
        "starts_at": isoformat(discount.starts_at),
        "ends_at": isoformat(discount.ends_at),
        "usage_limit": discount.usage_limit,
        "usage_count": discount.usage_count,
        "is_active": discount.is_active,
    }


def normalize_order_item(item):
    return {
        "id": item.id,
        "product_id": item.product_id,
        "product_name": item.product_name,
        "sku": item.sku,
        "quantity": item.quantity,
        "unit_price": money(item.unit_price),
        "line_total": money(item.line_total),
    }


def normalize_order(order):
    return {
        "id": order.id,
        "number": order.number,
        "customer_id": order.customer_id,
        "status": order.status,
        "currency_code": order.currency_code,
        "subtotal": money(order.subtotal),
        "discount_total": money(order.discount_total),
        "tax_total": money(order.tax_total),
        "total": money(order.total),
        "discount_code": order.discount_code,
        "notes": order.notes,
        "items": [normalize_order_item(i) for i in order.items],
        **_timestamps(order),
    }
