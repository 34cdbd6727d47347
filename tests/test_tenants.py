from siteforge.extensions import db
from siteforge.models.tenant import Tenant


def test_unknown_tenant_header_is_rejected(client, seed):
    r = client.get("/api/v1/cms/pages", headers={**seed.headers(), "X-Tenant-ID": "missing"})
    assert r.status_code == 404
    assert r.json["message"] == "Invalid tenant"


def test_suspended_tenant_is_not_resolved(app, client, seed):
    with app.app_context():
        db.session.get(Tenant, seed.tenant_id).status = "SUSPENDED"
        db.session.commit()

    r = client.get("/api/v1/cms/pages", headers=seed.headers())
    assert r.status_code == 404


def test_tenant_route_without_tenant_header(client, seed):
    r = client.get("/api/v1/cms/pages", headers=seed.headers(tenant=False))
    assert r.status_code == 400
    assert r.json["message"] == "Tenant context missing"


def test_non_member_is_forbidden(client, seed):
    r = client.get("/api/v1/cms/pages", headers=seed.headers("outsider"))
    assert r.status_code == 403


def test_super_admin_passes_membership_check(client, seed):
    r = client.get("/api/v1/cms/pages", headers=seed.headers("root"))
    assert r.status_code == 200


def test_plain_member_cannot_write_content(client, seed):
    r = client.post("/api/v1/cms/pages", json={"title": "X", "slug": "x"}, headers=seed.headers("member"))
    assert r.status_code == 403


def test_disabled_feature_is_forbidden(app, client, seed):
    with app.app_context():
        db.session.get(Tenant, seed.tenant_id).features = ["CMS_ENGINE"]
        db.session.commit()

    r = client.get("/api/v1/blogs", headers=seed.headers())
    assert r.status_code == 403
    assert "BLOG_MODULE" in r.json["message"]


def test_create_tenant_makes_caller_admin(client, seed):
    r = client.post("/api/v1/tenants", json={"name": "Beta Shop"}, headers=seed.headers("outsider", tenant=False))
    assert r.status_code == 201
    assert r.json["slug"] == "beta-shop"
    assert r.json["features"] == ["CMS_ENGINE"]

    r = client.get("/api/v1/tenants", headers=seed.headers("outsider", tenant=False))
    assert [t["slug"] for t in r.json] == ["beta-shop"]

    r = client.post("/api/v1/tenants", json={"name": "Beta Shop"}, headers=seed.headers("outsider", tenant=False))
    assert r.status_code == 409


def test_create_tenant_rejects_malformed_slug(client, seed):
    r = client.post(
        "/api/v1/tenants",
        json={"name": "Gamma", "slug": "Gamma Shop"},
        headers=seed.headers("outsider", tenant=False),
    )
    assert r.status_code == 400
    assert r.json["error"] == "ValidationError"


def test_create_tenant_rejects_unknown_feature(client, seed):
    r = client.post(
        "/api/v1/tenants",
        json={"name": "Gamma", "features": ["TELEPORT"]},
        headers=seed.headers("outsider", tenant=False),
    )
    assert r.status_code == 400


def test_register_with_tenant(client):
    r = client.post("/api/v1/tenants/register", json={
        "email": "owner@delta.test",
        "password": "pw",
        "tenant": {"name": "Delta"},
    })
    assert r.status_code == 201
    assert r.json["tenant"]["slug"] == "delta"
    assert r.json["access_token"]
    assert r.json["user"]["memberships"][0]["role"] == "TenantAdmin"


def test_register_with_taken_slug_leaves_no_user(client, seed):
    r = client.post("/api/v1/tenants/register", json={
        "email": "late@acme.test",
        "password": "pw",
        "tenant": {"name": "Acme"},
    })
    assert r.status_code == 409

    r = client.post("/api/v1/auth/login", json={"email": "late@acme.test", "password": "pw"})
    assert r.status_code == 401


def test_tenant_by_slug_is_public(client, seed):
    r = client.get("/api/v1/tenants/by-slug/acme")
    assert r.status_code == 200
    assert r.json["id"] == seed.tenant_id


def test_get_tenant_requires_membership(client, seed):
    r = client.get(f"/api/v1/tenants/{seed.tenant_id}", headers=seed.headers("outsider", tenant=False))
    assert r.status_code == 403

    r = client.get(f"/api/v1/tenants/{seed.tenant_id}", headers=seed.headers("member", tenant=False))
    assert r.status_code == 200
    assert r.json["slug"] == "acme"


def test_provisioning_paths_ignore_tenant_headers(client, seed):
    stale = {"X-Tenant-ID": "deleted-tenant"}

    r = client.post("/api/v1/tenants/register", headers=stale, json={
        "email": "owner@zeta.test",
        "password": "pw",
        "tenant": {"name": "Zeta"},
    })
    assert r.status_code == 201

    r = client.post("/api/v1/auth/register", headers=stale, json={"email": "new@zeta.test", "password": "pw"})
    assert r.status_code == 201

    r = client.post("/api/v1/auth/login", headers=stale, json={"email": "new@zeta.test", "password": "pw"})
    assert r.status_code == 404
    assert r.json["message"] == "Invalid tenant"
