from decimal import Decimal

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.base import utcnow
from siteforge.models.discount import DISCOUNT_TYPES, Discount
from siteforge.utils.audit import log_action
from siteforge.utils.dates import parse_datetime
from siteforge.utils.transaction import transactional
from .money import quantize, to_money


def list_discounts(*, tenant_id):
    return Discount.query.filter_by(tenant_id=tenant_id).order_by(Discount.created_at.desc()).all()


def get_discount(*, tenant_id, discount_id):
    discount = Discount.query.filter_by(tenant_id=tenant_id, id=discount_id).first()
    if not discount:
        raise NotFound("Discount not found")
    return discount


def discount_by_code(*, tenant_id, code):
    discount = Discount.query.filter_by(tenant_id=tenant_id, code=(code or "").strip().upper()).first()
    if not discount:
        raise NotFound("Discount not found")
    return discount


def create_discount(*, tenant_id, actor_id, data):
    code = (data.get("code") or "").strip().upper()
    if not code:
        raise ValidationError("Discount code is required")

    discount_type = data.get("type", "PERCENTAGE")
    if discount_type not in DISCOUNT_TYPES:
        raise ValidationError(f"Invalid discount type: {discount_type}")

    value = to_money(data.get("value"), "value")
    if discount_type == "PERCENTAGE" and value > Decimal("100"):
        raise ValidationError("Percentage discounts cannot exceed 100")

    starts_at = parse_datetime(data.get("starts_at"), "starts_at")
    ends_at = parse_datetime(data.get("ends_at"), "ends_at")
    if starts_at and ends_at and ends_at <= starts_at:
        raise ValidationError("ends_at must be after starts_at")

    usage_limit = data.get("usage_limit")
    if usage_limit is not None and (not isinstance(usage_limit, int) or usage_limit < 1):
        raise ValidationError("usage_limit must be a positive integer")

    if Discount.query.filter_by(tenant_id=tenant_id, code=code).first():
        raise Conflict(f"Discount code {code} already exists")

    discount = Discount(
        tenant_id=tenant_id,
        code=code,
        description=data.get("description"),
        type=discount_type,
        value=value,
        min_order_amount=(
            to_money(data["min_order_amount"], "min_order_amount")
            if data.get("min_order_amount") is not None else None
        ),
        starts_at=starts_at,
        ends_at=ends_at,
        usage_limit=usage_limit,
        usage_count=0,
        is_active=data.get("is_active", True),
    )
    with transactional():
        db.session.add(discount)
        db.session.flush()
        log_action(action="discount.create", entity_type="discount", entity_id=discount.id,
                   payload={"code": code, "type": discount_type}, tenant_id=tenant_id, actor_id=actor_id)
    return discount


def evaluate_discount(discount, subtotal, now=None):
    """
    Check a discount against an order subtotal.
    Returns ``(valid, message, amount)``.
    """
    now = now or utcnow()

    if not discount.is_active:
        return False, "Discount is not active", Decimal("0.00")
    if discount.starts_at and now < discount.starts_at:
        return False, "Discount is not yet valid", Decimal("0.00")
    if discount.ends_at and now > discount.ends_at:
        return False, "Discount has expired", Decimal("0.00")
    if discount.usage_limit is not None and discount.usage_count >= discount.usage_limit:
        return False, "Discount usage limit reached", Decimal("0.00")
    if discount.min_order_amount is not None and subtotal < discount.min_order_amount:
        return False, f"Minimum order amount is {discount.min_order_amount}", Decimal("0.00")

    if discount.type == "PERCENTAGE":
        amount = subtotal * discount.value / Decimal("100")
    else:
        amount = min(discount.value, subtotal)

    return True, "Discount applied", quantize(amount)


def validate_discount(*, tenant_id, code, subtotal):
    subtotal = to_money(subtotal, "subtotal")
    discount = Discount.query.filter_by(tenant_id=tenant_id, code=(code or "").strip().upper()).first()
    if not discount:
        return {"valid": False, "message": "Discount not found", "amount": Decimal("0.00")}

    valid, message, amount = evaluate_discount(discount, subtotal)
    return {"valid": valid, "message": message, "amount": amount}
