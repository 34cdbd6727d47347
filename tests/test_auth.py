from siteforge.extensions import db
from siteforge.models.user import User


def test_health_ok(client):
    r = client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json["status"] == "ok"


def test_openapi_document_is_served(client):
    r = client.get("/openapi/siteforge.yaml")
    assert r.status_code == 200
    assert b"openapi:" in r.data


def test_register_normalizes_email_and_defaults_role(client):
    r = client.post("/api/v1/auth/register", json={"email": "New.User@Example.com", "password": "pw"})
    assert r.status_code == 201
    assert r.json["email"] == "new.user@example.com"
    assert r.json["role"]["name"] == "TenantUser"
    assert "password_hash" not in r.json


def test_register_duplicate_email_conflicts(client, seed):
    r = client.post("/api/v1/auth/register", json={"email": "admin@acme.test", "password": "pw"})
    assert r.status_code == 409
    assert r.json["success"] is False
    assert r.json["error"] == "Conflict"


def test_login_returns_tokens_and_user(client, seed):
    r = client.post("/api/v1/auth/login", json={"email": "admin@acme.test", "password": "admin-pw"})
    assert r.status_code == 200
    assert r.json["access_token"]
    assert r.json["refresh_token"]
    assert r.json["user"]["email"] == "admin@acme.test"
    assert [m["tenant_slug"] for m in r.json["user"]["memberships"]] == ["acme"]


def test_login_wrong_password(client, seed):
    r = client.post("/api/v1/auth/login", json={"email": "admin@acme.test", "password": "nope"})
    assert r.status_code == 401
    assert r.json["message"] == "Invalid credentials"


def test_login_into_foreign_tenant_is_forbidden(client, seed):
    r = client.post(
        "/api/v1/auth/login",
        json={"email": "outsider@example.com", "password": "outsider-pw"},
        headers={"X-Tenant-ID": seed.tenant_id},
    )
    assert r.status_code == 403


def test_me_requires_token(client, seed):
    r = client.get("/api/v1/auth/me")
    assert r.status_code == 401
    assert r.json["message"] == "Not authenticated"

    r = client.get("/api/v1/auth/me", headers=seed.headers("member", tenant=False))
    assert r.status_code == 200
    assert r.json["email"] == "member@acme.test"


def test_refresh_issues_new_access_token(client, seed):
    r = client.post(
        "/api/v1/auth/refresh",
        headers={"Authorization": f"Bearer {seed.refresh_tokens['member']}"},
    )
    assert r.status_code == 200
    assert r.json["access_token"]


def test_deactivated_user_token_is_rejected(app, client, seed):
    with app.app_context():
        user = db.session.get(User, seed.user_ids["member"])
        user.is_active = False
        db.session.commit()

    r = client.get("/api/v1/auth/me", headers=seed.headers("member", tenant=False))
    assert r.status_code == 401
    assert r.json["message"] == "User not found or inactive"
