import pytest

API = "/api/v1/cms"


def save_components(client, headers, key, components):
    r = client.put(f"{API}/sections/{key}/components", json={"components": components}, headers=headers)
    assert r.status_code == 200, r.json
    return r.json


def create_page(client, headers, **data):
    r = client.post(f"{API}/pages", json=data, headers=headers)
    assert r.status_code == 201, r.json
    return r.json["page"]


@pytest.fixture()
def hero(client, seed):
    save_components(client, seed.headers(), "home-hero", [
        {"type": "hero", "data": {"title": "Welcome"}},
        {"type": "video", "data": {"url": "https://example.com/v.mp4"}},
    ])
    return "home-hero"


def test_create_page_links_known_sections_only(client, seed, hero):
    page = create_page(client, seed.headers(), title="Home", slug="home", sections=[hero, "missing"])

    assert page["status"] == "draft"
    assert [(s["order"], s["section_id"]) for s in page["sections"]] == [(0, "home-hero")]


def test_create_page_requires_title_and_slug(client, seed):
    r = client.post(f"{API}/pages", json={"title": "No slug"}, headers=seed.headers())
    assert r.status_code == 400


def test_duplicate_slug_conflicts(client, seed):
    create_page(client, seed.headers(), title="Home", slug="home")
    r = client.post(f"{API}/pages", json={"title": "Home 2", "slug": "home"}, headers=seed.headers())
    assert r.status_code == 409


def test_save_components_creates_section_and_component_types(client, seed, hero):
    r = client.get(f"{API}/sections/home-hero/components", headers={"X-Tenant-ID": seed.tenant_id})
    assert r.status_code == 200
    assert [c["type"] for c in r.json["components"]] == ["hero", "video"]
    assert r.json["lastUpdated"]

    r = client.get(f"{API}/components", headers=seed.headers())
    assert sorted(c["slug"] for c in r.json) == ["hero", "video"]


def test_saving_components_replaces_previous_list(client, seed, hero):
    save_components(client, seed.headers(), hero, [{"type": "gallery", "data": {}}])

    r = client.get(f"{API}/sections/home-hero/components", headers={"X-Tenant-ID": seed.tenant_id})
    assert [c["type"] for c in r.json["components"]] == ["gallery"]


def test_section_components_fall_back_to_prefix_match(client, seed, hero):
    r = client.get(f"{API}/sections/home-hero-v2/components", headers={"X-Tenant-ID": seed.tenant_id})
    assert [c["type"] for c in r.json["components"]] == ["hero", "video"]

    r = client.get(f"{API}/sections/unrelated/components", headers={"X-Tenant-ID": seed.tenant_id})
    assert r.json == {"components": [], "lastUpdated": None}


def test_component_without_type_is_rejected(client, seed):
    r = client.put(f"{API}/sections/x/components", json={"components": [{"data": {}}]}, headers=seed.headers())
    assert r.status_code == 400


def test_publish_requires_a_visible_section(client, seed):
    page = create_page(client, seed.headers(), title="Empty", slug="empty")

    r = client.post(f"{API}/pages/{page['id']}/publish", headers=seed.headers())
    assert r.status_code == 400
    assert r.json["error"] == "InvariantViolation"


def test_publish_render_and_unpublish(client, seed, hero):
    page = create_page(client, seed.headers(), title="Home", slug="home", sections=[hero])

    r = client.get(f"{API}/render/home", headers={"X-Tenant-Slug": "acme"})
    assert r.status_code == 404

    r = client.post(f"{API}/pages/{page['id']}/publish", headers=seed.headers())
    assert r.status_code == 200
    assert r.json == {"page_id": page["id"], "version": 1}

    r = client.post(f"{API}/pages/{page['id']}/publish", headers=seed.headers())
    assert r.status_code == 400

    r = client.get(f"{API}/render/home", headers={"X-Tenant-Slug": "acme"})
    assert r.status_code == 200
    components = r.json["sections"][0]["components"]
    assert [c["type"] for c in components] == ["hero", "video"]
    assert components[0]["data"] == {"title": "Welcome"}

    r = client.post(f"{API}/pages/{page['id']}/unpublish", headers=seed.headers())
    assert r.json["version"] == 2

    r = client.get(f"{API}/pages/{page['id']}/versions", headers=seed.headers())
    assert [(v["version"], v["status"]) for v in r.json] == [(2, "unpublished"), (1, "published")]


def test_render_hides_invisible_sections(client, seed, hero):
    page = create_page(client, seed.headers(), title="Home", slug="home", sections=[hero])
    first = page["sections"][0]

    r = client.put(f"{API}/pages/{page['id']}", headers=seed.headers(), json={
        "sections": [
            {"id": first["id"], "data": first["data"]},
            {"id": "temp-1", "component_type": "HERO", "is_visible": False},
        ],
    })
    assert r.status_code == 200
    client.post(f"{API}/pages/{page['id']}/publish", headers=seed.headers())

    r = client.get(f"{API}/render/home", headers={"X-Tenant-Slug": "acme"})
    assert [s["id"] for s in r.json["sections"]] == [first["id"]]

    r = client.get(f"{API}/pages/{page['id']}/preview", headers=seed.headers())
    assert len(r.json["sections"]) == 2


def test_update_syncs_sections_and_compacts_order(client, seed, hero):
    page = create_page(client, seed.headers(), title="Home", slug="home", sections=[hero])
    existing = page["sections"][0]

    r = client.put(f"{API}/pages/{page['id']}", headers=seed.headers(), json={
        "title": "Start",
        "sections": [
            {"id": "temp-a", "component_type": "HERO", "order": 5},
            {"id": existing["id"], "title": "Linked", "data": existing["data"], "order": 9},
        ],
    })
    assert r.status_code == 200
    updated = r.json["page"]
    assert updated["title"] == "Start"
    assert [s["order"] for s in updated["sections"]] == [0, 1]
    assert [s["component_type"] for s in updated["sections"]] == ["HERO", "CUSTOM"]
    assert updated["sections"][1]["title"] == "Linked"


def test_update_defaults_missing_section_order_to_position(client, seed):
    page = create_page(client, seed.headers(), title="Home", slug="home")

    r = client.put(f"{API}/pages/{page['id']}", headers=seed.headers(), json={
        "sections": [{"component_type": "HERO", "order": None}, {"component_type": "TEXT"}],
    })
    assert r.status_code == 200, r.json
    sections = r.json["page"]["sections"]
    assert [(s["order"], s["title"]) for s in sections] == [(0, "Section 1"), (1, "Section 2")]


def test_update_rejects_malformed_section_entries(client, seed):
    page = create_page(client, seed.headers(), title="Home", slug="home")
    url = f"{API}/pages/{page['id']}"

    for entry in ({"order": "first"}, {"order": -1}, {"title": 42}, {"id": 7}):
        r = client.put(url, headers=seed.headers(), json={"sections": [entry]})
        assert r.status_code == 400, entry
        assert r.json["error"] == "ValidationError"


def test_page_text_fields_must_be_strings(client, seed):
    r = client.post(f"{API}/pages", headers=seed.headers(), json={"title": 123, "slug": "home"})
    assert r.status_code == 400
    assert r.json["message"] == "title must be a string"


def test_update_rejects_unknown_section_ids(client, seed):
    page = create_page(client, seed.headers(), title="Home", slug="home")
    r = client.put(f"{API}/pages/{page['id']}", headers=seed.headers(), json={"sections": [{"id": "nope"}]})
    assert r.status_code == 404


def test_update_slug_conflict(client, seed):
    create_page(client, seed.headers(), title="Home", slug="home")
    about = create_page(client, seed.headers(), title="About", slug="about")

    r = client.put(f"{API}/pages/{about['id']}", headers=seed.headers(), json={"slug": "home"})
    assert r.status_code == 409


def test_stale_if_unmodified_since_conflicts(client, seed):
    page = create_page(client, seed.headers(), title="Home", slug="home")

    r = client.put(
        f"{API}/pages/{page['id']}",
        headers={**seed.headers(), "If-Unmodified-Since": "Mon, 01 Jan 2001 00:00:00 GMT"},
        json={"title": "Late edit"},
    )
    assert r.status_code == 409


def test_rollback_restores_snapshot_as_draft(client, seed, hero):
    page = create_page(client, seed.headers(), title="About", slug="about", sections=[hero])
    client.post(f"{API}/pages/{page['id']}/publish", headers=seed.headers())

    r = client.put(f"{API}/pages/{page['id']}", headers=seed.headers(), json={"title": "About us", "sections": []})
    assert r.json["page"]["sections"] == []

    r = client.post(f"{API}/pages/{page['id']}/rollback/1", headers=seed.headers())
    assert r.status_code == 200
    assert r.json == {"page_id": page["id"], "new_version": 2}

    r = client.get(f"{API}/pages/{page['id']}", headers=seed.headers())
    assert r.json["title"] == "About"
    assert r.json["status"] == "draft"
    assert [s["section_id"] for s in r.json["sections"]] == ["home-hero"]


def test_rollback_to_missing_version(client, seed):
    page = create_page(client, seed.headers(), title="Home", slug="home")
    r = client.post(f"{API}/pages/{page['id']}/rollback/7", headers=seed.headers())
    assert r.status_code == 404


def test_associate_and_dissociate_sections(client, seed, hero):
    save_components(client, seed.headers(), "footer-cta", [{"type": "cta"}])
    page = create_page(client, seed.headers(), title="Home", slug="home", sections=[hero])

    r = client.post(f"{API}/pages/{page['id']}/sections", json={"section_id": "footer-cta", "order": 0},
                    headers=seed.headers())
    assert r.status_code == 200
    assert [(s["order"], s["section_id"]) for s in r.json["sections"]] == [(0, "footer-cta"), (1, "home-hero")]

    r = client.post(f"{API}/pages/{page['id']}/sections", json={"section_id": "footer-cta"}, headers=seed.headers())
    assert r.status_code == 409

    r = client.delete(f"{API}/pages/{page['id']}/sections/footer-cta", headers=seed.headers())
    assert [(s["order"], s["section_id"]) for s in r.json["sections"]] == [(0, "home-hero")]


def test_pages_using_section_and_forgiving_slug_lookup(client, seed, hero):
    create_page(client, seed.headers(), title="Home", slug="home", sections=[hero])
    create_page(client, seed.headers(), title="Contact", slug="contact-us")

    r = client.get(f"{API}/pages/using-section/home-hero", headers=seed.headers())
    assert [p["slug"] for p in r.json] == ["home"]

    r = client.get(f"{API}/pages/by-slug/Contact", headers=seed.headers())
    assert r.json["slug"] == "contact-us"

    r = client.get(f"{API}/pages/by-slug/nothing-like-it", headers=seed.headers())
    assert r.json is None


def test_default_page_prefers_published_home(client, seed, hero):
    landing = create_page(client, seed.headers(), title="Landing", slug="landing", sections=[hero])
    home = create_page(client, seed.headers(), title="Home", slug="home", page_type="HOME", order=3, sections=[hero])
    for page in (landing, home):
        client.post(f"{API}/pages/{page['id']}/publish", headers=seed.headers())

    r = client.get(f"{API}/render", headers={"X-Tenant-ID": seed.tenant_id})
    assert r.json["slug"] == "home"


def test_delete_section_reports_unlinked_components(client, seed, hero):
    r = client.delete(f"{API}/sections/{hero}", headers=seed.headers())
    assert r.status_code == 200
    assert r.json["message"] == "Section deleted. 2 components were unlinked."


def test_component_crud(client, seed):
    r = client.post(f"{API}/components", headers=seed.headers(),
                    json={"name": "Hero", "slug": "hero", "category": "layout"})
    assert r.status_code == 201
    component_id = r.json["component"]["id"]

    r = client.post(f"{API}/components", headers=seed.headers(), json={"name": "Hero", "slug": "hero"})
    assert r.status_code == 409

    r = client.get(f"{API}/components?type=layout", headers=seed.headers())
    assert [c["id"] for c in r.json] == [component_id]

    r = client.delete(f"{API}/components/{component_id}", headers=seed.headers())
    assert r.status_code == 200
