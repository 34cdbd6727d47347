import pytest

from siteforge.application.users.permissions import ensure_system_permissions

API = "/api/v1"


@pytest.fixture()
def permissions(app, seed):
    with app.app_context():
        ensure_system_permissions()


def test_admin_lists_roles_with_counts(client, seed, permissions):
    r = client.get(f"{API}/roles", headers=seed.headers())
    assert r.status_code == 200

    roles = {role["name"]: role for role in r.json}
    assert roles["TenantAdmin"]["user_count"] == 1
    assert roles["TenantAdmin"]["permission_count"] == 9
    assert roles["TenantManager"]["permission_count"] == 3


def test_user_override_grants_and_revokes_access(client, seed, permissions):
    member = seed.user_ids["member"]

    r = client.get(f"{API}/roles", headers=seed.headers("member"))
    assert r.status_code == 403
    assert r.json["message"] == "Forbidden: Missing permission 'role:read'"

    r = client.put(
        f"{API}/users/{member}/permissions",
        headers=seed.headers(),
        json={"permission_name": "role:read", "granted": True},
    )
    assert r.status_code == 200
    assert r.json["granted"] is True

    r = client.get(f"{API}/roles", headers=seed.headers("member"))
    assert r.status_code == 200

    r = client.put(
        f"{API}/users/{member}/permissions",
        headers=seed.headers(),
        json={"permission_name": "role:read", "granted": None},
    )
    assert r.json["message"] == "Permission override removed"

    r = client.get(f"{API}/roles", headers=seed.headers("member"))
    assert r.status_code == 403


def test_members_cannot_set_overrides(client, seed, permissions):
    r = client.put(
        f"{API}/users/{seed.user_ids['member']}/permissions",
        headers=seed.headers("member"),
        json={"permission_name": "role:read", "granted": True},
    )
    assert r.status_code == 403


def test_unknown_permission_override_is_not_found(client, seed, permissions):
    r = client.put(
        f"{API}/users/{seed.user_ids['member']}/permissions",
        headers=seed.headers(),
        json={"permission_name": "rocket:launch", "granted": True},
    )
    assert r.status_code == 404


def test_revoked_override_hides_role_permission(client, seed, permissions):
    admin = seed.user_ids["admin"]
    r = client.put(
        f"{API}/users/{admin}/permissions",
        headers=seed.headers(),
        json={"permission_name": "user:delete", "granted": False},
    )
    assert r.status_code == 200

    r = client.get(f"{API}/me/permissions", headers=seed.headers(tenant=False))
    assert "user:read" in r.json["permissions"]
    assert "user:delete" not in r.json["permissions"]


def test_create_role_rejects_duplicates(client, seed, permissions):
    r = client.post(f"{API}/roles", headers=seed.headers(), json={"name": "Editor"})
    assert r.status_code == 201

    r = client.post(f"{API}/roles", headers=seed.headers(), json={"name": "Editor"})
    assert r.status_code == 409

    r = client.post(f"{API}/roles", headers=seed.headers("member"), json={"name": "Hacker"})
    assert r.status_code == 403


def test_role_permission_assignment(client, seed, permissions):
    role_id = client.post(f"{API}/roles", headers=seed.headers(), json={"name": "Auditor"}).json["id"]
    permission = next(p for p in client.get(f"{API}/permissions", headers=seed.headers()).json if p["name"] == "user:read")

    url = f"{API}/roles/{role_id}/permissions/{permission['id']}"
    r = client.post(url, headers=seed.headers())
    assert [p["name"] for p in r.json["permissions"]] == ["user:read"]

    r = client.post(url, headers=seed.headers())
    assert r.status_code == 409

    r = client.delete(url, headers=seed.headers())
    assert r.json["permissions"] == []


def test_users_only_see_their_own_profile(client, seed):
    member = seed.user_ids["member"]
    r = client.get(f"{API}/users/{member}", headers=seed.headers("member"))
    assert r.status_code == 200

    r = client.get(f"{API}/users/{seed.user_ids['admin']}", headers=seed.headers("member"))
    assert r.status_code == 403


def test_tenant_admin_lists_members(client, seed):
    r = client.get(f"{API}/users", headers=seed.headers())
    assert r.status_code == 200
    assert sorted(u["email"] for u in r.json) == ["admin@acme.test", "member@acme.test"]
