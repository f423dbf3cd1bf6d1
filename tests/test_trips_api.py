"""HTTP tests for employee and trip endpoints."""

from __future__ import annotations

import jwt

from app.models.audit_log import AuditLog
from app.models.company import Company
from app.models.employee import Employee, NationalityType


def _create_trip(client, headers, employee_id, entry, exit, country="FR", **extra):
    return client.post(
        f"/employees/{employee_id}/trips",
        json={"country": country, "entry_date": entry, "exit_date": exit, **extra},
        headers=headers,
    )


def test_requests_without_token_are_rejected(client, employee):
    assert client.get(f"/employees/{employee.id}/trips").status_code == 401
    r = client.get(f"/employees/{employee.id}/trips", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_token_without_company_is_rejected(client, employee):
    token = jwt.encode({"sub": "42", "email": "admin@acme.test"}, "test-secret", algorithm="HS256")
    r = client.get(f"/employees/{employee.id}/trips", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_create_and_list_employees(client, auth_headers):
    r = client.post("/employees/", json={"name": "  Sam Lee ", "nationality_type": "eu_schengen_citizen"}, headers=auth_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Sam Lee"
    assert body["subject_to_rule"] is False

    names = [e["name"] for e in client.get("/employees/", headers=auth_headers).json()]
    assert names == ["Sam Lee"]


def test_create_trip(client, auth_headers, employee, db):
    r = _create_trip(client, auth_headers, employee.id, "2024-01-01", "2024-01-10", country="fr", purpose="  Client visit ")
    assert r.status_code == 201
    body = r.json()
    assert body["country"] == "FR"
    assert body["purpose"] == "Client visit"
    assert body["travel_days"] == 10
    assert db.query(AuditLog).filter(AuditLog.trip_id == body["id"], AuditLog.title == "Trip created").count() == 1


def test_overlapping_trip_is_rejected_with_the_conflict(client, auth_headers, employee):
    first = _create_trip(client, auth_headers, employee.id, "2024-01-01", "2024-01-10").json()
    r = _create_trip(client, auth_headers, employee.id, "2024-01-10", "2024-01-15")
    assert r.status_code == 409
    assert r.json()["conflicting_trip"]["id"] == first["id"]
    assert len(client.get(f"/employees/{employee.id}/trips", headers=auth_headers).json()) == 1


def test_trip_starting_the_day_after_is_accepted(client, auth_headers, employee):
    _create_trip(client, auth_headers, employee.id, "2024-01-01", "2024-01-10")
    assert _create_trip(client, auth_headers, employee.id, "2024-01-11", "2024-01-15").status_code == 201


def test_malformed_trips_are_rejected(client, auth_headers, employee):
    assert _create_trip(client, auth_headers, employee.id, "2024-01-10", "2024-01-01").status_code == 400
    r = _create_trip(client, auth_headers, employee.id, "2024-01-01", "2024-01-10", country="ZZ")
    assert r.status_code == 400
    assert "ZZ" in r.json()["detail"]


def test_ghosted_trips_do_not_block_writes(client, auth_headers, employee):
    trip = _create_trip(client, auth_headers, employee.id, "2024-01-01", "2024-01-10").json()
    r = client.patch(f"/trips/{trip['id']}", json={"ghosted": True}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["ghosted"] is True
    assert _create_trip(client, auth_headers, employee.id, "2024-01-05", "2024-01-08").status_code == 201

    # un-ghosting would now overlap
    r = client.patch(f"/trips/{trip['id']}", json={"ghosted": False}, headers=auth_headers)
    assert r.status_code == 409


def test_editing_a_trip_does_not_conflict_with_itself(client, auth_headers, employee):
    trip = _create_trip(client, auth_headers, employee.id, "2024-01-01", "2024-01-10").json()
    r = client.patch(f"/trips/{trip['id']}", json={"exit_date": "2024-01-12"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["travel_days"] == 12

    r = client.patch(f"/trips/{trip['id']}", json={"entry_date": "2024-01-20"}, headers=auth_headers)
    assert r.status_code == 400


def test_delete_trip(client, auth_headers, employee):
    trip = _create_trip(client, auth_headers, employee.id, "2024-01-01", "2024-01-10").json()
    assert client.delete(f"/trips/{trip['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/trips/{trip['id']}", headers=auth_headers).status_code == 404


def test_advisory_overlap_checks(client, auth_headers, employee):
    trip = _create_trip(client, auth_headers, employee.id, "2024-01-01", "2024-01-10").json()
    url = f"/employees/{employee.id}/trips/check-overlap"

    r = client.post(url, json={"entry_date": "2024-01-05", "exit_date": "2024-01-06"}, headers=auth_headers)
    assert r.json()["has_overlap"] is True
    r = client.post(
        url,
        json={"entry_date": "2024-01-05", "exit_date": "2024-01-06", "exclude_trip_id": trip["id"]},
        headers=auth_headers,
    )
    assert r.json()["has_overlap"] is False

    r = client.post(
        url + "/bulk",
        json={"trips": [{"entry_date": "2024-02-01", "exit_date": "2024-02-03"}, {"entry_date": "2024-02-03", "exit_date": "2024-02-04"}]},
        headers=auth_headers,
    )
    assert [item["has_overlap"] for item in r.json()] == [False, True]


def test_other_companies_are_invisible(client, auth_headers, db):
    db.add(Company(id=2, name="Other Ltd"))
    db.flush()
    other = Employee(company_id=2, name="Someone Else", nationality_type=NationalityType.rest_of_world)
    db.add(other)
    db.commit()
    assert client.get(f"/employees/{other.id}", headers=auth_headers).status_code == 404
    assert _create_trip(client, auth_headers, other.id, "2024-01-01", "2024-01-02").status_code == 404
