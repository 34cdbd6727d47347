from decimal import Decimal

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.shop import Currency, Shop, Tax
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional
from .money import to_money

SHOP_FIELDS = ("name", "description", "default_currency_code", "is_active")


def list_shops(*, tenant_id):
    return Shop.query.filter_by(tenant_id=tenant_id).order_by(Shop.name.asc()).all()


def get_shop(*, tenant_id, shop_id):
    shop = Shop.query.filter_by(tenant_id=tenant_id, id=shop_id).first()
    if not shop:
        raise NotFound("Shop not found")
    return shop


def create_shop(*, tenant_id, actor_id, data):
    if not (data.get("name") or "").strip():
        raise ValidationError("Shop name is required")

    shop = Shop(tenant_id=tenant_id)
    for field in SHOP_FIELDS:
        if field in data:
            setattr(shop, field, data[field])
    if shop.default_currency_code:
        shop.default_currency_code = shop.default_currency_code.upper()

    with transactional():
        db.session.add(shop)
        db.session.flush()
        log_action(action="shop.create", entity_type="shop", entity_id=shop.id,
                   payload={"name": shop.name}, tenant_id=tenant_id, actor_id=actor_id)
    return shop


def update_shop(*, tenant_id, actor_id, shop_id, data):
    shop = get_shop(tenant_id=tenant_id, shop_id=shop_id)
    if "name" in data and not (data["name"] or "").strip():
        raise ValidationError("Shop name is required")

    with transactional():
        for field in SHOP_FIELDS:
            if field in data:
                setattr(shop, field, data[field])
        log_action(action="shop.update", entity_type="shop", entity_id=shop.id,
                   payload={"fields": sorted(f for f in SHOP_FIELDS if f in data)},
                   tenant_id=tenant_id, actor_id=actor_id)
    return shop


def list_currencies(*, tenant_id):
    return Currency.query.filter_by(tenant_id=tenant_id).order_by(Currency.code.asc()).all()


def get_currency(*, tenant_id, currency_id):
    currency = Currency.query.filter_by(tenant_id=tenant_id, id=currency_id).first()
    if not currency:
        raise NotFound("Currency not found")
    return currency


def currency_by_code(*, tenant_id, code):
    currency = Currency.query.filter_by(tenant_id=tenant_id, code=(code or "").upper()).first()
    if not currency:
        raise NotFound("Currency not found")
    return currency


def create_currency(*, tenant_id, actor_id, data):
    code = (data.get("code") or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError("Currency code must be a 3-letter ISO code")
    if not data.get("name") or not data.get("symbol"):
        raise ValidationError("Currency name and symbol are required")

    if Currency.query.filter_by(tenant_id=tenant_id, code=code).first():
        raise Conflict(f"Currency {code} already exists")

    currency = Currency(tenant_id=tenant_id, code=code, name=data["name"], symbol=data["symbol"])
    with transactional():
        db.session.add(currency)
        db.session.flush()
        log_action(action="currency.create", entity_type="currency", entity_id=currency.id,
                   payload={"code": code}, tenant_id=tenant_id, actor_id=actor_id)
    return currency


def list_taxes(*, tenant_id):
    return Tax.query.filter_by(tenant_id=tenant_id).order_by(Tax.name.asc()).all()


def get_tax(*, tenant_id, tax_id):
    tax = Tax.query.filter_by(tenant_id=tenant_id, id=tax_id).first()
    if not tax:
        raise NotFound("Tax not found")
    return tax


def create_tax(*, tenant_id, actor_id, data):
    if not (data.get("name") or "").strip():
        raise ValidationError("Tax name is required")

    rate = to_money(data.get("rate"), "rate")
    if rate > Decimal("100"):
        raise ValidationError("rate must be between 0 and 100")

    tax = Tax(tenant_id=tenant_id, name=data["name"].strip(), rate=rate, is_active=data.get("is_active", True))
    with transactional():
        db.session.add(tax)
        db.session.flush()
        log_action(action="tax.create", entity_type="tax", entity_id=tax.id,
                   payload={"rate": str(rate)}, tenant_id=tenant_id, actor_id=actor_id)
    return tax
