import logging
from collections import OrderedDict
from decimal import Decimal

from sqlalchemy import select

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.base import utcnow
from siteforge.models.discount import Discount
from siteforge.models.order import ORDER_STATUSES, Order, OrderItem
from siteforge.models.product import Product
from siteforge.models.shop import Tax
from siteforge.domain.lifecycle.order import assert_order_transition
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional
from .customers import get_customer
from .discounts import evaluate_discount
from .money import quantize

logger = logging.getLogger(__name__)

# Leaving these states puts stock back on the shelf
RESTOCK_ON = ("CANCELLED",)


def list_orders(*, tenant_id, status=None):
    query = Order.query.filter_by(tenant_id=tenant_id)
    if status:
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        query = query.filter_by(status=status)
    return query.order_by(Order.created_at.desc()).all()


def get_order(*, tenant_id, order_id):
    order = Order.query.filter_by(tenant_id=tenant_id, id=order_id).first()
    if not order:
        raise NotFound("Order not found")
    return order


def _order_number(tenant_id):
    count = Order.query.filter_by(tenant_id=tenant_id).count()
    return f"ORD-{utcnow():%Y%m%d}-{count + 1:05d}"


def _merge_lines(items):
    """Collapse repeated product ids; quantities must be positive integers."""
    if not items:
        raise ValidationError("An order needs at least one item")

    lines = OrderedDict()
    for entry in items:
        product_id = entry.get("product_id")
        quantity = entry.get("quantity", 1)
        if not product_id:
            raise ValidationError("Each item needs a product_id")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError("quantity must be a positive integer")
        lines[product_id] = lines.get(product_id, 0) + quantity
    return lines


def create_order(*, tenant_id, actor_id, data):
    """
    Place an order in one transaction: lock and decrement stock, price the
    lines, apply the discount, then tax what remains.
    """
    customer = get_customer(tenant_id=tenant_id, customer_id=data.get("customer_id"))
    lines = _merge_lines(data.get("items"))

    tax = None
    if data.get("tax_id"):
        tax = Tax.query.filter_by(tenant_id=tenant_id, id=data["tax_id"], is_active=True).first()
        if not tax:
            raise NotFound("Tax not found")

    with transactional():
        products = {
            p.id: p
            for p in db.session.execute(
                select(Product)
                .where(Product.tenant_id == tenant_id, Product.id.in_(list(lines.keys())))
                .with_for_update()
            ).scalars()
        }

        order = Order(
            tenant_id=tenant_id,
            number=_order_number(tenant_id),
            customer_id=customer.id,
            status="PENDING",
            currency_code=(data.get("currency_code") or "USD").upper(),
            notes=data.get("notes"),
        )

        subtotal = Decimal("0.00")
        for product_id, quantity in lines.items():
            product = products.get(product_id)
            if product is None:
                raise NotFound(f"Product {product_id} not found")
            if not product.is_active:
                raise ValidationError(f"Product {product.name} is not available")
            if product.stock_quantity < quantity:
                raise Conflict(
                    f"Insufficient stock for {product.name}: {product.stock_quantity} available"
                )

            product.stock_quantity -= quantity
            line_total = quantize(product.price * quantity)
            subtotal += line_total
            order.items.append(OrderItem(
                product_id=product.id,
                product_name=product.name,
                sku=product.sku,
                quantity=quantity,
                unit_price=product.price,
                line_total=line_total,
            ))

        discount_total = Decimal("0.00")
        code = (data.get("discount_code") or "").strip().upper()
        if code:
            discount = (
                db.session.execute(
                    select(Discount)
                    .where(Discount.tenant_id == tenant_id, Discount.code == code)
                    .with_for_update()
                ).scalar_one_or_none()
            )
            if discount is None:
                raise NotFound("Discount not found")

            valid, message, discount_total = evaluate_discount(discount, subtotal)
            if not valid:
                raise ValidationError(message)
            discount.usage_count += 1
            order.discount_code = code

        taxable = subtotal - discount_total
        tax_total = quantize(taxable * tax.rate / Decimal("100")) if tax else Decimal("0.00")

        order.subtotal = subtotal
        order.discount_total = discount_total
        order.tax_total = tax_total
        order.total = quantize(taxable + tax_total)

        db.session.add(order)
        db.session.flush()

        log_action(
            action="order.create",
            entity_type="order",
            entity_id=order.id,
            payload={"number": order.number, "total": str(order.total), "items": len(lines)},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )

    logger.info("Order %s placed for tenant %s", order.number, tenant_id)
    return order


def update_order_status(*, tenant_id, actor_id, order_id, status):
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Invalid status: {status}")

    with transactional():
        order = (
            db.session.execute(
                select(Order).where(Order.tenant_id == tenant_id, Order.id == order_id).with_for_update()
            ).scalar_one_or_none()
        )
        if not order:
            raise NotFound("Order not found")

        previous = order.status
        assert_order_transition(from_status=previous, to_status=status)
        order.status = status

        if status in RESTOCK_ON:
            for item in order.items:
                if item.product is not None:
                    item.product.stock_quantity += item.quantity

        log_action(
            action="order.status",
            entity_type="order",
            entity_id=order.id,
            payload={"from": previous, "to": status},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return order
