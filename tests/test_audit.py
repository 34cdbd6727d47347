import pytest

from siteforge.extensions import db
from siteforge.models.audit_log import AuditLog

API = "/api/v1/audit-logs"


def make_sections(client, seed, names):
    for name in names:
        r = client.post("/api/v1/cms/sections", headers=seed.headers(), json={"sectionId": name})
        assert r.status_code == 201, r.json


def test_cursor_pagination_walks_every_entry_once(client, seed):
    make_sections(client, seed, ["about", "pricing", "faq", "team", "contact"])

    seen = []
    cursor = None
    for _ in range(10):
        params = {"limit": 2}
        if cursor:
            params["cursor"] = cursor
        r = client.get(API, headers=seed.headers(), query_string=params)
        assert r.status_code == 200
        assert len(r.json["items"]) <= 2

        seen.extend(item["id"] for item in r.json["items"])
        meta = r.json["pagination"]
        if not meta["has_more"]:
            assert meta["next_cursor"] is None
            break
        cursor = meta["next_cursor"]

    assert len(seen) == 5
    assert len(set(seen)) == 5


def test_filters_by_action(client, seed):
    make_sections(client, seed, ["about"])
    r = client.put(
        "/api/v1/cms/sections/about/components",
        headers=seed.headers(),
        json={"components": [{"type": "text", "data": {"body": "hi"}}]},
    )
    assert r.status_code == 200, r.json

    r = client.get(API, headers=seed.headers(), query_string={"action": "cms_section.create"})
    items = r.json["items"]
    assert [item["action"] for item in items] == ["cms_section.create"]
    assert items[0]["entity_type"] == "cms_section"
    assert items[0]["payload"] == {"section_id": "about"}
    assert items[0]["actor_id"] == seed.user_ids["admin"]


def test_rejects_bad_cursor(client, seed):
    r = client.get(API, headers=seed.headers(), query_string={"cursor": "garbage"})
    assert r.status_code == 400
    assert r.json["message"] == "Invalid cursor format"


def test_members_cannot_read_audit_trail(client, seed):
    r = client.get(API, headers=seed.headers("member"))
    assert r.status_code == 403


def test_entries_are_immutable(app, client, seed):
    make_sections(client, seed, ["about"])

    with app.app_context():
        entry = AuditLog.query.first()
        entry.action = "tampered"
        with pytest.raises(RuntimeError):
            db.session.flush()
        db.session.rollback()

        entry = AuditLog.query.first()
        db.session.delete(entry)
        with pytest.raises(RuntimeError):
            db.session.flush()
        db.session.rollback()
