import io
from pathlib import Path

API = "/api/v1/media"


def upload(client, seed, name="photo.png", folder="gallery"):
    return client.post(
        f"{API}/upload",
        headers=seed.headers(),
        data={"file": (io.BytesIO(b"\x89PNG fake"), name), "folder": folder},
        content_type="multipart/form-data",
    )


def test_upload_stores_under_tenant_prefix(app, client, seed):
    r = upload(client, seed)
    assert r.status_code == 201, r.json

    key = r.json["key"]
    assert key.startswith("acme/gallery/")
    assert key.endswith(".png")

    assert (Path(app.config["UPLOAD_FOLDER"]) / key).is_file()


def test_upload_rejects_disallowed_extension(client, seed):
    r = upload(client, seed, name="script.exe")
    assert r.status_code == 400
    assert r.json["message"] == "File type not allowed"


def test_upload_requires_file(client, seed):
    r = client.post(f"{API}/upload", headers=seed.headers(), data={}, content_type="multipart/form-data")
    assert r.status_code == 400


def test_delete_single_key(client, seed):
    key = upload(client, seed).json["key"]

    r = client.delete(API, headers=seed.headers(), json={"key": key})
    assert r.status_code == 200
    assert r.json["key"] == key

    r = client.delete(API, headers=seed.headers(), json={"key": key})
    assert r.status_code == 404
    assert r.json["message"] == "Object does not exist or cannot be accessed"


def test_delete_outside_tenant_prefix_is_forbidden(client, seed):
    r = client.delete(API, headers=seed.headers(), json={"key": "other-tenant/file.png"})
    assert r.status_code == 403

    r = client.delete(API, headers=seed.headers(), json={"key": "acme/../other/file.png"})
    assert r.status_code == 403


def test_bulk_delete_reports_per_key(client, seed):
    key = upload(client, seed).json["key"]
    missing = "acme/gallery/missing.png"

    r = client.delete(API, headers=seed.headers(), json={"keys": [key, missing]})
    assert r.status_code == 200
    assert r.json["success"] is False
    assert r.json["totalDeleted"] == 1
    assert r.json["totalErrors"] == 1
    assert r.json["errors"] == [{"key": missing, "error": "Object does not exist or cannot be accessed"}]


def test_delete_requires_keys(client, seed):
    r = client.delete(API, headers=seed.headers(), json={"keys": []})
    assert r.status_code == 400
    assert r.json["message"] == "No keys provided"

    r = client.delete(API, headers=seed.headers(), json={})
    assert r.json["message"] == "No key provided"


def test_delete_rejects_non_string_keys(client, seed):
    key = upload(client, seed).json["key"]

    r = client.delete(API, headers=seed.headers(), json={"keys": [key, 42]})
    assert r.status_code == 400
    assert r.json["message"] == "Invalid key"

    r = client.delete(API, headers=seed.headers(), json={"key": {"path": key}})
    assert r.status_code == 400
    assert r.json["message"] == "Invalid key"

    r = client.delete(API, headers=seed.headers(), json={"key": key})
    assert r.status_code == 200
