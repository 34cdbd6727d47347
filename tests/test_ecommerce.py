from decimal import Decimal

import pytest

from siteforge.extensions import db
from siteforge.models.audit_log import AuditLog
from siteforge.models.product import Product

API = "/api/v1/ecommerce"


def post(client, seed, path, body, who="admin", status=201):
    r = client.post(f"{API}{path}", headers=seed.headers(who), json=body)
    assert r.status_code == status, r.json
    return r.json


@pytest.fixture()
def store(client, seed):
    customer = post(client, seed, "/customers", {"email": "Buyer@Example.com", "first_name": "Bo"})
    mug = post(client, seed, "/products", {"name": "Mug", "sku": "MUG-1", "price": "12.50", "stock_quantity": 5})
    tee = post(client, seed, "/products", {"name": "Tee", "sku": "TEE-1", "price": 20, "stock_quantity": 1})
    tax = post(client, seed, "/taxes", {"name": "VAT", "rate": "10"})
    return {"customer": customer, "mug": mug, "tee": tee, "tax": tax}


def stock_of(app, product_id):
    with app.app_context():
        return db.session.get(Product, product_id).stock_quantity


def test_catalog_reads_are_public(client, seed, store):
    public = {"X-Tenant-ID": seed.tenant_id}

    r = client.get(f"{API}/products", headers=public)
    assert sorted(p["sku"] for p in r.json) == ["MUG-1", "TEE-1"]

    r = client.get(f"{API}/products/by-sku/MUG-1", headers=public)
    assert r.json["price"] == "12.50"


def test_duplicate_sku_conflicts(client, seed, store):
    r = client.post(f"{API}/products", headers=seed.headers(), json={"name": "Mug", "sku": "MUG-1", "price": 1})
    assert r.status_code == 409


def test_negative_price_is_rejected(client, seed):
    r = client.post(f"{API}/products", headers=seed.headers(), json={"name": "X", "sku": "X", "price": "-1"})
    assert r.status_code == 400


def test_order_totals_apply_discount_before_tax(app, client, seed, store):
    post(client, seed, "/discounts", {"code": "save10", "type": "PERCENTAGE", "value": 10})

    order = post(client, seed, "/orders", {
        "customer_id": store["customer"]["id"],
        "items": [
            {"product_id": store["mug"]["id"], "quantity": 1},
            {"product_id": store["mug"]["id"], "quantity": 1},
            {"product_id": store["tee"]["id"], "quantity": 1},
        ],
        "discount_code": "SAVE10",
        "tax_id": store["tax"]["id"],
    }, who="member")

    assert order["status"] == "PENDING"
    assert Decimal(order["subtotal"]) == Decimal("45.00")
    assert Decimal(order["discount_total"]) == Decimal("4.50")
    assert Decimal(order["tax_total"]) == Decimal("4.05")
    assert Decimal(order["total"]) == Decimal("44.55")
    assert [(i["sku"], i["quantity"]) for i in order["items"]] == [("MUG-1", 2), ("TEE-1", 1)]
    assert order["number"].startswith("ORD-")

    assert stock_of(app, store["mug"]["id"]) == 3
    assert stock_of(app, store["tee"]["id"]) == 0

    r = client.get(f"{API}/discounts/{_discount_id(client, seed)}", headers=seed.headers())
    assert r.json["usage_count"] == 1


def _discount_id(client, seed):
    r = client.get(f"{API}/discounts?code=SAVE10", headers=seed.headers())
    return r.json["id"]


def test_insufficient_stock_rolls_back_everything(app, client, seed, store):
    r = client.post(f"{API}/orders", headers=seed.headers(), json={
        "customer_id": store["customer"]["id"],
        "items": [
            {"product_id": store["mug"]["id"], "quantity": 2},
            {"product_id": store["tee"]["id"], "quantity": 2},
        ],
    })
    assert r.status_code == 409
    assert "Insufficient stock" in r.json["message"]

    assert stock_of(app, store["mug"]["id"]) == 5
    with app.app_context():
        assert AuditLog.query.filter_by(action="order.create").count() == 0


def test_order_rejects_bad_quantity(client, seed, store):
    r = client.post(f"{API}/orders", headers=seed.headers(), json={
        "customer_id": store["customer"]["id"],
        "items": [{"product_id": store["mug"]["id"], "quantity": 0}],
    })
    assert r.status_code == 400


def test_cancelling_restocks_and_is_final(app, client, seed, store):
    order = post(client, seed, "/orders", {
        "customer_id": store["customer"]["id"],
        "items": [{"product_id": store["mug"]["id"], "quantity": 4}],
    })
    assert stock_of(app, store["mug"]["id"]) == 1

    r = client.put(f"{API}/orders/{order['id']}/status", headers=seed.headers(), json={"status": "CANCELLED"})
    assert r.status_code == 200
    assert stock_of(app, store["mug"]["id"]) == 5

    r = client.put(f"{API}/orders/{order['id']}/status", headers=seed.headers(), json={"status": "PROCESSING"})
    assert r.status_code == 400


def test_members_cannot_manage_orders(client, seed, store):
    r = client.get(f"{API}/orders", headers=seed.headers("member"))
    assert r.status_code == 403


def test_validate_discount(client, seed, store):
    post(client, seed, "/discounts", {"code": "FIVE", "type": "FIXED_AMOUNT", "value": "5", "min_order_amount": "30"})
    public = {"X-Tenant-ID": seed.tenant_id}

    r = client.post(f"{API}/discounts/validate", headers=public, json={"code": "five", "subtotal": "40"})
    assert r.json == {"valid": True, "message": "Discount applied", "amount": "5.00"}

    r = client.post(f"{API}/discounts/validate", headers=public, json={"code": "FIVE", "subtotal": "20"})
    assert r.json["valid"] is False

    r = client.post(f"{API}/discounts/validate", headers=public, json={"code": "NOPE", "subtotal": "20"})
    assert r.json["message"] == "Discount not found"


def test_exhausted_discount_fails_the_order(client, seed, store):
    post(client, seed, "/discounts", {"code": "ONCE", "value": 50, "usage_limit": 1})
    body = {
        "customer_id": store["customer"]["id"],
        "items": [{"product_id": store["mug"]["id"], "quantity": 1}],
        "discount_code": "ONCE",
    }
    post(client, seed, "/orders", body)

    r = client.post(f"{API}/orders", headers=seed.headers(), json=body)
    assert r.status_code == 400
    assert r.json["message"] == "Discount usage limit reached"


def test_customer_emails_are_unique(client, seed, store):
    r = client.post(f"{API}/customers", headers=seed.headers(), json={"email": "buyer@example.com"})
    assert r.status_code == 409


def test_customer_stats(client, seed, store):
    post(client, seed, "/orders", {
        "customer_id": store["customer"]["id"],
        "items": [{"product_id": store["mug"]["id"], "quantity": 2}],
    })

    r = client.get(f"{API}/customers/stats", headers=seed.headers())
    assert r.status_code == 200
    assert r.json["totalCustomers"] == 1
    assert Decimal(r.json["totalRevenue"]) == Decimal("25.00")
