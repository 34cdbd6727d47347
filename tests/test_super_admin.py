from datetime import timedelta

from siteforge.extensions import db
from siteforge.models.base import utcnow
from siteforge.models.blog import Blog, Post
from siteforge.models.page import Page
from siteforge.models.tenant import Tenant
from siteforge.models.user import User, UserTenant

API = "/api/v1/super-admin"


def root(seed):
    return seed.headers("root", tenant=False)


def test_requires_super_admin(client, seed):
    r = client.get(f"{API}/dashboard", headers=seed.headers("admin", tenant=False))
    assert r.status_code == 403
    assert r.json["message"] == "Forbidden: SuperAdmin access required"

    r = client.get(f"{API}/dashboard")
    assert r.status_code == 401


def test_dashboard_stats(client, seed):
    r = client.get(f"{API}/dashboard", headers=root(seed))
    assert r.status_code == 200

    stats = r.json["stats"]
    assert stats["totalTenants"] == 1
    assert stats["activeTenants"] == 1
    assert stats["totalUsers"] == 4
    assert [t["slug"] for t in r.json["recentActivity"]["tenants"]] == ["acme"]


def test_system_status_checks_database(client, seed):
    r = client.get(f"{API}/system-status", headers=root(seed))
    assert r.status_code == 200
    assert r.json["database"]["status"] == "healthy"
    assert r.json["metrics"]["users"]["total"] == 4


def test_create_tenant_with_new_admin(app, client, seed):
    r = client.post(f"{API}/tenants", headers=root(seed), json={
        "name": "Beta Shop",
        "features": ["CMS_ENGINE", "ECOMMERCE_ENGINE"],
        "admin_email": "Boss@Beta.test",
        "admin_password": "boss-pw",
    })
    assert r.status_code == 201, r.json
    assert r.json["tenant"]["slug"] == "beta-shop"
    assert r.json["adminUser"]["email"] == "boss@beta.test"
    assert r.json["message"].endswith("with admin user boss@beta.test")

    r = client.post(f"{API}/tenants", headers=root(seed), json={"name": "Beta Shop"})
    assert r.status_code == 409


def test_create_tenant_rolls_back_when_admin_email_taken(app, client, seed):
    r = client.post(f"{API}/tenants", headers=root(seed), json={
        "name": "Gamma",
        "admin_email": "admin@acme.test",
        "admin_password": "x",
    })
    assert r.status_code == 409

    with app.app_context():
        assert Tenant.query.filter_by(slug="gamma").first() is None


def test_list_tenants_envelope(client, seed):
    r = client.get(f"{API}/tenants", headers=root(seed), query_string={"search": "acm"})
    assert r.status_code == 200
    assert r.json["totalCount"] == 1
    assert r.json["page"] == 1
    assert r.json["totalPages"] == 1

    item = r.json["items"][0]
    assert item["slug"] == "acme"
    assert item["userCount"] == 2
    assert item["pageCount"] == 0


def test_update_tenant_validates_status(client, seed):
    r = client.put(f"{API}/tenants/{seed.tenant_id}", headers=root(seed), json={"status": "ZOMBIE"})
    assert r.status_code == 400

    r = client.put(f"{API}/tenants/{seed.tenant_id}", headers=root(seed), json={"status": "SUSPENDED"})
    assert r.status_code == 200
    assert r.json["tenant"]["status"] == "SUSPENDED"


def test_unknown_tenant_is_not_found(client, seed):
    r = client.get(f"{API}/tenants/nope", headers=root(seed))
    assert r.status_code == 404


def test_impersonation_token_acts_as_tenant_admin(client, seed):
    r = client.post(f"{API}/tenants/{seed.tenant_id}/impersonate", headers=root(seed))
    assert r.status_code == 200
    assert r.json["user"]["email"] == "admin@acme.test"

    token = r.json["token"]
    r = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json["email"] == "admin@acme.test"


def test_maintenance_actions(client, seed):
    r = client.post(f"{API}/maintenance", headers=root(seed), json={"action": "CLEAR_CACHE"})
    assert r.status_code == 200
    assert r.json["message"] == "Cache cleared successfully"

    r = client.post(f"{API}/maintenance", headers=root(seed), json={"action": "REBOOT"})
    assert r.status_code == 400


def test_assign_and_remove_tenant_user(app, client, seed):
    outsider = seed.user_ids["outsider"]

    r = client.post(
        f"{API}/tenants/{seed.tenant_id}/users",
        headers=root(seed),
        json={"user_id": outsider, "role": "Wizard"},
    )
    assert r.status_code == 200
    assert r.json["membership"]["role"] == "TenantUser"
    assert r.json["membership"]["tenant_slug"] == "acme"

    r = client.post(f"{API}/tenants/{seed.tenant_id}/users", headers=root(seed), json={"user_id": outsider})
    assert r.status_code == 409

    r = client.delete(f"{API}/tenants/{seed.tenant_id}/users/{outsider}", headers=root(seed))
    assert r.status_code == 200

    with app.app_context():
        membership = UserTenant.query.filter_by(user_id=outsider, tenant_id=seed.tenant_id).one()
        assert membership.is_active is False

    r = client.delete(f"{API}/tenants/{seed.tenant_id}/users/{outsider}", headers=root(seed))
    assert r.status_code == 404


def test_list_users_filters_by_tenant(client, seed):
    r = client.get(f"{API}/users", headers=root(seed), query_string={"tenant_id": seed.tenant_id})
    assert r.status_code == 200
    assert sorted(u["email"] for u in r.json["items"]) == ["admin@acme.test", "member@acme.test"]


def test_delete_tenant_removes_its_data(app, client, seed):
    r = client.post("/api/v1/cms/pages", headers=seed.headers(), json={"title": "Home", "slug": "home"})
    assert r.status_code == 201

    r = client.delete(f"{API}/tenants/{seed.tenant_id}", headers=root(seed))
    assert r.status_code == 200

    with app.app_context():
        assert Tenant.query.count() == 0
        assert Page.query.count() == 0
        assert UserTenant.query.count() == 0
        assert User.query.count() == 4


def publish_content(app, seed):
    with app.app_context():
        db.session.add(Page(tenant_id=seed.tenant_id, title="Home", slug="home", is_published=True))
        blog = Blog(tenant_id=seed.tenant_id, title="News", slug="news")
        db.session.add(blog)
        db.session.flush()
        db.session.add(Post(tenant_id=seed.tenant_id, blog_id=blog.id, title="Hi", slug="hi", status="PUBLISHED"))
        db.session.commit()


def add_tenant(app, slug, features, age_days):
    with app.app_context():
        created = utcnow() - timedelta(days=age_days)
        db.session.add(Tenant(name=slug.title(), slug=slug, features=features, created_at=created, updated_at=created))
        db.session.commit()


def test_health_score_weights(app, client, seed):
    r = client.get(f"{API}/tenants/health", headers=root(seed), query_string={"tenant_id": seed.tenant_id})
    assert r.status_code == 200
    [health] = r.json
    assert health["healthScore"] == 30 + 25
    assert health["metrics"]["totalUsers"] == 2

    publish_content(app, seed)
    r = client.get(f"{API}/tenants/health", headers=root(seed), query_string={"tenant_id": seed.tenant_id})
    assert r.json[0]["healthScore"] == 100
    assert r.json[0]["metrics"]["publishedPages"] == 1
    assert r.json[0]["metrics"]["publishedPosts"] == 1

    r = client.put(f"{API}/tenants/{seed.tenant_id}", headers=root(seed), json={"status": "SUSPENDED"})
    assert r.status_code == 200
    r = client.get(f"{API}/tenants/health", headers=root(seed))
    assert [(h["tenantName"], h["healthScore"]) for h in r.json] == [("Acme", 75)]


def test_detailed_metrics_only_list_enabled_modules(app, client, seed):
    publish_content(app, seed)
    r = client.put(
        f"{API}/tenants/{seed.tenant_id}",
        headers=root(seed),
        json={"features": ["CMS_ENGINE", "BLOG_MODULE"]},
    )
    assert r.status_code == 200

    r = client.get(f"{API}/tenants/{seed.tenant_id}/metrics", headers=root(seed))
    assert r.status_code == 200
    metrics = r.json["metrics"]
    assert metrics["modules"] == [
        {"moduleName": "Blog Module", "isActive": True, "itemCount": 1, "last30DaysActivity": 1},
    ]
    assert metrics["totalBlogs"] == 1
    assert metrics["totalOrders"] == 0

    r = client.get(f"{API}/tenants/missing/metrics", headers=root(seed))
    assert r.status_code == 404


def test_global_analytics_time_ranges(app, client, seed):
    add_tenant(app, "old", ["CMS_ENGINE"], age_days=60)
    add_tenant(app, "older", ["CMS_ENGINE", "BLOG_MODULE"], age_days=200)

    def growth(time_range):
        params = {"time_range": time_range} if time_range else {}
        r = client.get(f"{API}/analytics", headers=root(seed), query_string=params)
        assert r.status_code == 200
        return sum(day["count"] for day in r.json["tenantGrowth"])

    assert growth("week") == 1
    assert growth("month") == 1
    assert growth("quarter") == 2
    assert growth("year") == 3
    assert growth(None) == 1
    assert growth("decade") == 1

    r = client.get(f"{API}/analytics", headers=root(seed))
    usage = {u["feature"]: u["count"] for u in r.json["featureUsage"]}
    assert usage["CMS_ENGINE"] == 3
    assert usage["BLOG_MODULE"] == 2
    assert usage["BOOKING_ENGINE"] == 1
    assert sum(day["count"] for day in r.json["userGrowth"]) == 4
    assert r.json["topTenants"][0]["slug"] == "acme"


def test_global_modules_usage_percentages(app, client, seed):
    add_tenant(app, "old", ["CMS_ENGINE"], age_days=1)
    add_tenant(app, "older", ["CMS_ENGINE", "BLOG_MODULE"], age_days=1)

    r = client.get(f"{API}/modules", headers=root(seed))
    assert r.status_code == 200
    modules = {m["name"]: m for m in r.json}
    assert modules["CMS_ENGINE"]["usagePercentage"] == 100.0
    assert modules["CMS_ENGINE"]["isCore"] is True
    assert modules["BLOG_MODULE"]["usagePercentage"] == 66.67
    assert modules["ECOMMERCE_ENGINE"]["usageCount"] == 1
    assert modules["ECOMMERCE_ENGINE"]["usagePercentage"] == 33.33


def test_create_tenant_keeps_client_slug_and_rejects_malformed_ones(client, seed):
    r = client.post(f"{API}/tenants", headers=root(seed), json={"name": "Acme Co", "slug": "acme-co-2"})
    assert r.status_code == 201
    assert r.json["tenant"]["slug"] == "acme-co-2"

    r = client.post(f"{API}/tenants", headers=root(seed), json={"name": "Acme Co", "slug": "Acme_Co"})
    assert r.status_code == 400
    assert r.json["message"].startswith('Invalid slug "Acme_Co"')

    r = client.put(f"{API}/tenants/{seed.tenant_id}", headers=root(seed), json={"slug": "New Slug"})
    assert r.status_code == 400


def test_admin_fields_in_settings_take_precedence(client, seed):
    r = client.post(f"{API}/tenants", headers=root(seed), json={
        "name": "Epsilon",
        "admin_email": "top@epsilon.test",
        "admin_password": "top-pw",
        "settings": {"adminEmail": "owner@epsilon.test", "adminFirstName": "Olga"},
    })
    assert r.status_code == 201, r.json
    assert r.json["adminUser"]["email"] == "owner@epsilon.test"
    assert r.json["adminUser"]["first_name"] == "Olga"

    r = client.post("/api/v1/auth/login", json={"email": "owner@epsilon.test", "password": "top-pw"})
    assert r.status_code == 200
