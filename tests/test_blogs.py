API = "/api/v1/blogs"


def create_blog(client, seed):
    r = client.post(API, headers=seed.headers(), json={"title": "News"})
    assert r.status_code == 201, r.json
    return r.json


def create_post(client, seed, blog_id, **data):
    r = client.post(f"{API}/posts", headers=seed.headers(), json={"blog_id": blog_id, **data})
    assert r.status_code == 201, r.json
    return r.json


def test_post_slug_is_derived_and_unique_per_blog(client, seed):
    blog = create_blog(client, seed)
    post = create_post(client, seed, blog["id"], title="Hello World!")
    assert post["slug"] == "hello-world"
    assert post["status"] == "DRAFT"
    assert post["published_at"] is None

    r = client.post(f"{API}/posts", headers=seed.headers(), json={"blog_id": blog["id"], "title": "Hello world"})
    assert r.status_code == 409


def test_publishing_stamps_published_at(client, seed):
    blog = create_blog(client, seed)
    post = create_post(client, seed, blog["id"], title="Launch", status="PUBLISHED")
    assert post["published_at"] is not None


def test_anonymous_readers_only_see_published_posts(client, seed):
    blog = create_blog(client, seed)
    draft = create_post(client, seed, blog["id"], title="Draft")
    live = create_post(client, seed, blog["id"], title="Live", status="PUBLISHED")
    public = {"X-Tenant-ID": seed.tenant_id}

    r = client.get(f"{API}/posts?status=DRAFT", headers=public)
    assert [p["id"] for p in r.json] == [live["id"]]

    r = client.get(f"{API}/posts/{draft['id']}", headers=public)
    assert r.status_code == 404

    r = client.get(f"{API}/posts/by-slug/live", headers=public)
    assert r.json["id"] == live["id"]

    r = client.get(f"{API}/posts?status=DRAFT", headers=seed.headers("member"))
    assert [p["id"] for p in r.json] == [draft["id"]]


def test_invalid_post_status(client, seed):
    blog = create_blog(client, seed)
    r = client.post(f"{API}/posts", headers=seed.headers(),
                    json={"blog_id": blog["id"], "title": "X", "status": "LIVE"})
    assert r.status_code == 400


def test_delete_blog_removes_posts(client, seed):
    blog = create_blog(client, seed)
    post = create_post(client, seed, blog["id"], title="Gone")

    r = client.delete(f"{API}/{blog['id']}", headers=seed.headers())
    assert r.status_code == 200

    r = client.get(f"{API}/posts/{post['id']}", headers=seed.headers())
    assert r.status_code == 404
