API = "/api/v1/menus"


def create_main_menu(client, seed):
    r = client.post(API, headers=seed.headers(), json={
        "name": "Main",
        "location": "header",
        "items": [
            {"title": "Home", "url": "/"},
            {"title": "Shop", "url": "/shop", "children": [{"title": "Cart", "url": "/cart"}]},
        ],
    })
    assert r.status_code == 201, r.json
    return r.json


def test_create_menu_builds_nested_tree(client, seed):
    menu = create_main_menu(client, seed)

    assert [i["title"] for i in menu["items"]] == ["Home", "Shop"]
    assert [c["title"] for c in menu["items"][1]["children"]] == ["Cart"]
    assert menu["header_style"] is None


def test_menu_names_are_unique_per_tenant(client, seed):
    create_main_menu(client, seed)
    r = client.post(API, headers=seed.headers(), json={"name": "Main"})
    assert r.status_code == 409


def test_public_lookup_by_location_and_name(client, seed):
    create_main_menu(client, seed)

    r = client.get(f"{API}/by-location/header", headers={"X-Tenant-ID": seed.tenant_id})
    assert r.json["name"] == "Main"

    r = client.get(f"{API}/by-name/Main", headers={"X-Tenant-ID": seed.tenant_id})
    assert r.json["location"] == "header"

    r = client.get(f"{API}/by-location/footer", headers={"X-Tenant-ID": seed.tenant_id})
    assert r.json is None

    r = client.get(f"{API}/by-location/header")
    assert r.json is None


def test_bulk_reorder_items(client, seed):
    menu = create_main_menu(client, seed)
    home, shop = menu["items"]

    r = client.put(f"{API}/items/order", headers=seed.headers(), json={
        "items": [{"id": shop["id"], "order": 0}, {"id": home["id"], "order": 1}],
    })
    assert r.status_code == 200

    r = client.get(f"{API}/{menu['id']}", headers=seed.headers())
    assert [i["title"] for i in r.json["items"]] == ["Shop", "Home"]


def test_item_cannot_move_under_its_descendant(client, seed):
    menu = create_main_menu(client, seed)
    shop = menu["items"][1]
    cart = shop["children"][0]

    r = client.put(f"{API}/items/{shop['id']}", headers=seed.headers(), json={"parent_id": cart["id"]})
    assert r.status_code == 400
    assert r.json["error"] == "InvariantViolation"


def test_bulk_reorder_rejects_parent_loops(client, seed):
    menu = create_main_menu(client, seed)
    home, shop = menu["items"]
    cart = shop["children"][0]

    r = client.put(f"{API}/items/order", headers=seed.headers(), json={
        "items": [
            {"id": home["id"], "order": 0, "parent_id": shop["id"]},
            {"id": shop["id"], "order": 0, "parent_id": cart["id"]},
        ],
    })
    assert r.status_code == 400
    assert r.json["error"] == "InvariantViolation"

    r = client.get(f"{API}/{menu['id']}", headers=seed.headers())
    assert [i["title"] for i in r.json["items"]] == ["Home", "Shop"]
    assert [c["title"] for c in r.json["items"][1]["children"]] == ["Cart"]


def test_add_and_delete_items(client, seed):
    menu = create_main_menu(client, seed)

    r = client.post(f"{API}/items", headers=seed.headers(), json={"menu_id": menu["id"], "title": "Blog"})
    assert r.status_code == 201
    assert r.json["order"] == 2

    home = menu["items"][0]
    r = client.delete(f"{API}/items/{home['id']}", headers=seed.headers())
    assert r.status_code == 200

    r = client.get(f"{API}/{menu['id']}", headers=seed.headers())
    assert [(i["order"], i["title"]) for i in r.json["items"]] == [(0, "Shop"), (1, "Blog")]


def test_item_link_to_missing_page(client, seed):
    menu = create_main_menu(client, seed)
    r = client.post(f"{API}/items", headers=seed.headers(),
                    json={"menu_id": menu["id"], "title": "Ghost", "page_id": "missing"})
    assert r.status_code == 404


def test_header_style_upsert(client, seed):
    menu = create_main_menu(client, seed)

    r = client.put(f"{API}/{menu['id']}/header-style", headers=seed.headers(),
                   json={"header_size": "lg", "transparent_header": True})
    assert r.status_code == 200
    assert r.json["header_size"] == "lg"

    r = client.get(f"{API}/{menu['id']}", headers=seed.headers())
    assert r.json["header_style"]["transparent_header"] is True


def test_delete_menu(client, seed):
    menu = create_main_menu(client, seed)
    r = client.delete(f"{API}/{menu['id']}", headers=seed.headers())
    assert r.status_code == 200

    r = client.get(f"{API}/{menu['id']}", headers=seed.headers())
    assert r.status_code == 404
