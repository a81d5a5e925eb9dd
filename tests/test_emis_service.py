"""EMI schedule service tests."""

from __future__ import annotations

import pytest

from spendbook.errors import InvalidInput, NotFound
from spendbook.services import emis
from spendbook.services.emis import PAID, UNPAID, add_months

USER = "user-1"


def _create(emi_repo, **overrides):
    params = {
        "user_id": USER,
        "title": "Phone",
        "start_month": "2025-11",
        "amount_per_month": 500.0,
        "duration": 4,
    }
    params.update(overrides)
    return emis.create_emi(emi_repo, **params)


def _assert_remaining_consistent(emi):
    paid = sum(entry["amount"] for entry in emi.schedule if entry["status"] == PAID)
    assert emi.remaining_amount == emi.total_amount - paid
    assert emi.total_amount == emi.amount_per_month * emi.duration


@pytest.mark.parametrize(
    ("month", "count", "expected"),
    [
        ("2025-01", 0, "2025-01"),
        ("2025-01", 11, "2025-12"),
        ("2025-12", 1, "2026-01"),
        ("2025-11", 14, "2027-01"),
        ("1999-12", 25, "2002-01"),
    ],
)
def test_add_months_rolls_over_years(month, count, expected):
    assert add_months(month, count) == expected


def test_schedule_rolls_over_year_boundary(emi_repo):
    emi = _create(emi_repo, start_month="2025-11", duration=4)

    assert [entry["month"] for entry in emi.schedule] == [
        "2025-11",
        "2025-12",
        "2026-01",
        "2026-02",
    ]


def test_create_emi_generates_full_unpaid_schedule(emi_repo):
    emi = _create(emi_repo, amount_per_month=250.0, duration=12, start_month="2025-01")

    assert len(emi.schedule) == 12
    assert all(entry["amount"] == 250.0 for entry in emi.schedule)
    assert all(entry["status"] == UNPAID for entry in emi.schedule)
    assert emi.total_amount == 3000.0
    assert emi.remaining_amount == 3000.0
    assert emi.schedule[-1]["month"] == "2025-12"


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount_per_month": 0.5},
        {"amount_per_month": float("nan")},
        {"amount_per_month": float("inf")},
        {"duration": 0},
        {"duration": -3},
        {"title": "   "},
        {"start_month": "2025-13"},
        {"start_month": "2025-1"},
    ],
)
def test_create_emi_rejects_invalid_parameters(emi_repo, overrides):
    with pytest.raises(InvalidInput):
        _create(emi_repo, **overrides)
    assert emi_repo.list_for_user(USER) == []


def test_set_entry_status_recomputes_remaining(emi_repo):
    emi = _create(emi_repo)

    emi = emis.set_entry_status(emi_repo, emi_id=emi.id, index=0, status=PAID)
    assert emi.remaining_amount == 1500.0
    emi = emis.set_entry_status(emi_repo, emi_id=emi.id, index=3, status=PAID)
    assert emi.remaining_amount == 1000.0
    assert [entry["status"] for entry in emi.schedule] == [PAID, UNPAID, UNPAID, PAID]
    _assert_remaining_consistent(emi)


def test_marking_paid_twice_is_idempotent(emi_repo):
    emi = _create(emi_repo)
    first = emis.set_entry_status(emi_repo, emi_id=emi.id, index=1, status=PAID)
    second = emis.set_entry_status(emi_repo, emi_id=emi.id, index=1, status=PAID)

    assert first.remaining_amount == second.remaining_amount == 1500.0


def test_paid_entry_can_be_reverted(emi_repo):
    emi = _create(emi_repo)
    emis.set_entry_status(emi_repo, emi_id=emi.id, index=2, status=PAID)

    emi = emis.set_entry_status(emi_repo, emi_id=emi.id, index=2, status=UNPAID)

    assert emi.remaining_amount == emi.total_amount
    _assert_remaining_consistent(emi)


@pytest.mark.parametrize("index", [-1, 4, 99])
def test_set_entry_status_rejects_out_of_range_index(emi_repo, index):
    emi = _create(emi_repo, duration=4)

    with pytest.raises(InvalidInput):
        emis.set_entry_status(emi_repo, emi_id=emi.id, index=index, status=PAID)


def test_set_entry_status_rejects_unknown_status(emi_repo):
    emi = _create(emi_repo)

    with pytest.raises(InvalidInput):
        emis.set_entry_status(emi_repo, emi_id=emi.id, index=0, status="late")


def test_set_entry_status_unknown_emi(emi_repo):
    with pytest.raises(NotFound):
        emis.set_entry_status(emi_repo, emi_id="missing", index=0, status=PAID)


def test_set_entry_status_scoped_to_owner(emi_repo):
    emi = _create(emi_repo)

    with pytest.raises(NotFound):
        emis.set_entry_status(
            emi_repo, emi_id=emi.id, index=0, status=PAID, user_id="intruder"
        )
    assert emis.get_emi(emi_repo, emi_id=emi.id).remaining_amount == emi.total_amount


def test_fully_paid_emi_is_inactive(emi_repo):
    emi = _create(emi_repo, duration=2)
    assert emis.is_active(emi)

    for index in range(2):
        emi = emis.set_entry_status(emi_repo, emi_id=emi.id, index=index, status=PAID)

    assert emi.remaining_amount == 0
    assert not emis.is_active(emi)


def test_delete_emi_is_idempotent(emi_repo):
    emi = _create(emi_repo)

    assert emis.delete_emi(emi_repo, emi_id=emi.id) is True
    assert emis.delete_emi(emi_repo, emi_id=emi.id) is False
    with pytest.raises(NotFound):
        emis.get_emi(emi_repo, emi_id=emi.id)


def test_delete_emi_of_other_user_is_a_no_op(emi_repo):
    emi = _create(emi_repo)

    assert emis.delete_emi(emi_repo, emi_id=emi.id, user_id="intruder") is False
    assert emis.get_emi(emi_repo, emi_id=emi.id).id == emi.id


def test_list_emis_filters_by_user(emi_repo):
    _create(emi_repo, title="Car")
    _create(emi_repo, title="Laptop", start_month="2025-01")
    _create(emi_repo, user_id="other", title="Bike")

    titles = [emi.title for emi in emis.list_emis(emi_repo, user_id=USER)]

    assert titles == ["Laptop", "Car"]


def test_serialize_emi_round_trips_schedule(emi_repo):
    emi = _create(emi_repo, duration=2, start_month="2025-12")

    payload = emis.serialize_emi(emi)

    assert payload["schedule"] == [
        {"month": "2025-12", "amount": 500.0, "status": UNPAID},
        {"month": "2026-01", "amount": 500.0, "status": UNPAID},
    ]
    assert payload["total_amount"] == 1000.0
