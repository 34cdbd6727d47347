import pytest

API = "/api/v1/calendar"
DAY = "2030-03-04"


@pytest.fixture()
def service(client, seed):
    r = client.post(f"{API}/services", headers=seed.headers(),
                    json={"name": "Haircut", "duration_minutes": 60, "price": "30"})
    assert r.status_code == 201, r.json
    return r.json


def book(client, seed, service, start, **extra):
    return client.post(f"{API}/bookings", headers={"X-Tenant-ID": seed.tenant_id}, json={
        "service_id": service["id"],
        "customer_name": "Ada",
        "customer_email": "Ada@Example.com",
        "start_time": start,
        **extra,
    })


def slots(client, seed, service):
    r = client.get(f"{API}/services/{service['id']}/availability?date={DAY}",
                   headers={"X-Tenant-ID": seed.tenant_id})
    assert r.status_code == 200, r.json
    return r.json["slots"]


def test_slots_cover_business_hours(client, seed, service):
    found = slots(client, seed, service)
    assert found[0] == f"{DAY}T09:00:00"
    assert found[-1] == f"{DAY}T16:00:00"
    assert len(found) == 8


def test_anonymous_booking_takes_the_slot(client, seed, service):
    r = book(client, seed, service, f"{DAY}T10:00:00")
    assert r.status_code == 201
    assert r.json["status"] == "PENDING"
    assert r.json["end_time"] == f"{DAY}T11:00:00"
    assert r.json["customer_email"] == "ada@example.com"

    assert f"{DAY}T10:00:00" not in slots(client, seed, service)


def test_overlapping_booking_conflicts(client, seed, service):
    assert book(client, seed, service, f"{DAY}T10:00:00").status_code == 201

    r = book(client, seed, service, f"{DAY}T10:30:00")
    assert r.status_code == 409

    assert book(client, seed, service, f"{DAY}T11:00:00").status_code == 201


def test_aware_start_time_is_stored_as_utc(client, seed, service):
    r = book(client, seed, service, f"{DAY}T12:00:00+02:00")
    assert r.json["start_time"] == f"{DAY}T10:00:00"


def test_cancelled_booking_frees_the_slot(client, seed, service):
    booking = book(client, seed, service, f"{DAY}T10:00:00").json

    r = client.post(f"{API}/bookings/{booking['id']}/cancel", headers=seed.headers())
    assert r.status_code == 200
    assert r.json["status"] == "CANCELLED"

    assert f"{DAY}T10:00:00" in slots(client, seed, service)
    assert book(client, seed, service, f"{DAY}T10:00:00").status_code == 201


def test_status_transitions_are_guarded(client, seed, service):
    booking = book(client, seed, service, f"{DAY}T10:00:00").json

    r = client.put(f"{API}/bookings/{booking['id']}/status", headers=seed.headers(), json={"status": "COMPLETED"})
    assert r.status_code == 400

    r = client.put(f"{API}/bookings/{booking['id']}/status", headers=seed.headers(), json={"status": "CONFIRMED"})
    assert r.status_code == 200
    assert r.json["status"] == "CONFIRMED"


def test_buffer_spaces_out_slots(client, seed):
    r = client.post(f"{API}/services", headers=seed.headers(),
                    json={"name": "Massage", "duration_minutes": 90, "buffer_minutes": 30})
    massage = r.json

    found = slots(client, seed, massage)
    assert found == [f"{DAY}T09:00:00", f"{DAY}T11:00:00", f"{DAY}T13:00:00", f"{DAY}T15:00:00"]

    book(client, seed, massage, f"{DAY}T11:00:00")
    r = book(client, seed, massage, f"{DAY}T12:45:00")
    assert r.status_code == 409


def test_business_hours_come_from_tenant_settings(app, client, seed, service):
    from siteforge.extensions import db
    from siteforge.models.tenant import Tenant

    with app.app_context():
        db.session.get(Tenant, seed.tenant_id).settings = {"business_hours": {"start": "08:00", "end": "10:00"}}
        db.session.commit()

    assert slots(client, seed, service) == [f"{DAY}T08:00:00", f"{DAY}T09:00:00"]


def test_booking_list_requires_booking_role(client, seed, service):
    book(client, seed, service, f"{DAY}T10:00:00")

    r = client.get(f"{API}/bookings", headers=seed.headers("member"))
    assert r.status_code == 403

    r = client.get(f"{API}/bookings", headers=seed.headers())
    assert len(r.json) == 1


def test_staff_must_belong_to_the_tenant(client, seed, service):
    r = book(client, seed, service, f"{DAY}T10:00:00", staff_user_id=seed.user_ids["outsider"])
    assert r.status_code == 404
    assert r.json["message"] == "Staff user not found"

    r = client.get(
        f"{API}/services/{service['id']}/availability",
        query_string={"date": DAY, "staff_user_id": seed.user_ids["outsider"]},
        headers={"X-Tenant-ID": seed.tenant_id},
    )
    assert r.status_code == 404

    r = book(client, seed, service, f"{DAY}T10:00:00", staff_user_id=seed.user_ids["member"])
    assert r.status_code == 201
    assert r.json["staff_user_id"] == seed.user_ids["member"]
