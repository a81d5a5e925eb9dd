"""HTTP tests for the EMI API."""

from __future__ import annotations

import pytest


def _create(client, headers, **overrides):
    payload = {
        "title": "Laptop",
        "start_month": "2025-11",
        "amount_per_month": 1200,
        "duration": 3,
    }
    payload.update(overrides)
    return client.post("/api/emis", json=payload, headers=headers)


def test_create_and_fetch_emi(client, auth_headers):
    created = _create(client, auth_headers)
    body = created.get_json()

    assert created.status_code == 201
    assert [entry["month"] for entry in body["schedule"]] == ["2025-11", "2025-12", "2026-01"]
    assert body["total_amount"] == 3600
    assert body["remaining_amount"] == 3600

    fetched = client.get(f"/api/emis/{body['id']}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.get_json()["title"] == "Laptop"


def test_create_emi_validation(client, auth_headers):
    response = _create(client, auth_headers, amount_per_month=0, duration="two", title="")

    assert response.status_code == 400
    assert set(response.get_json()["errors"]) == {"amount_per_month", "duration", "title"}


def test_toggle_schedule_entry(client, auth_headers):
    emi_id = _create(client, auth_headers).get_json()["id"]

    paid = client.patch(
        f"/api/emis/{emi_id}/schedule/1", json={"status": "paid"}, headers=auth_headers
    )
    assert paid.status_code == 200
    assert paid.get_json()["remaining_amount"] == 2400

    unpaid = client.patch(
        f"/api/emis/{emi_id}/schedule/1", json={"status": "unpaid"}, headers=auth_headers
    )
    assert unpaid.get_json()["remaining_amount"] == 3600


def test_toggle_rejects_bad_index_and_status(client, auth_headers):
    emi_id = _create(client, auth_headers).get_json()["id"]

    too_far = client.patch(
        f"/api/emis/{emi_id}/schedule/3", json={"status": "paid"}, headers=auth_headers
    )
    negative = client.patch(
        f"/api/emis/{emi_id}/schedule/-1", json={"status": "paid"}, headers=auth_headers
    )
    bad_status = client.patch(
        f"/api/emis/{emi_id}/schedule/0", json={"status": "done"}, headers=auth_headers
    )

    assert too_far.status_code == 400
    assert negative.status_code == 400
    assert bad_status.status_code == 400


def test_other_users_cannot_see_or_change_emi(client, auth_headers):
    emi_id = _create(client, auth_headers).get_json()["id"]
    other = {"X-User-Id": "other"}

    assert client.get(f"/api/emis/{emi_id}", headers=other).status_code == 404
    assert (
        client.patch(f"/api/emis/{emi_id}/schedule/0", json={"status": "paid"}, headers=other)
        .status_code
        == 404
    )
    assert client.get("/api/emis", headers=other).get_json() == []


def test_delete_emi(client, auth_headers):
    emi_id = _create(client, auth_headers).get_json()["id"]

    assert client.delete(f"/api/emis/{emi_id}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/emis/{emi_id}", headers=auth_headers).status_code == 404
    assert client.get("/api/emis", headers=auth_headers).get_json() == []


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_create_emi_rejects_non_finite_amount(client, auth_headers, literal):
    body = (
        '{"title": "Laptop", "start_month": "2025-11", '
        f'"amount_per_month": {literal}, "duration": 3}}'
    )

    response = client.post(
        "/api/emis", data=body, content_type="application/json", headers=auth_headers
    )

    assert response.status_code == 400
    assert set(response.get_json()["errors"]) == {"amount_per_month"}
    assert client.get("/api/emis", headers=auth_headers).get_json() == []
