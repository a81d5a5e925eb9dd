"""Concurrency tests for per-document serialization."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from spendbook.services import emis, expenses
from spendbook.services.expenses import LineItem
from spendbook.services.locks import held_keys, key_lock

from tests.conftest import assert_ledger_consistent


def test_key_lock_does_not_block_other_keys():
    acquired = threading.Event()

    with key_lock("ledger", "u", "2025-01"):
        def _other():
            with key_lock("ledger", "u", "2025-02"):
                acquired.set()

        worker = threading.Thread(target=_other)
        worker.start()
        worker.join(timeout=2)

    assert acquired.is_set()


def test_concurrent_day_additions_do_not_lose_updates(ledger_repo):
    dates = [f"2025-06-{day:02d}" for day in range(1, 13)]

    def _add(date):
        return expenses.add_day(
            ledger_repo,
            user_id="u",
            month="2025-06",
            date=date,
            items=[LineItem(purpose=f"spend {date}", amount=10.0)],
        )

    with ThreadPoolExecutor(max_workers=6) as pool:
        list(pool.map(_add, dates))

    ledger = ledger_repo.get("u", "2025-06")
    assert [day["date"] for day in ledger.days] == dates
    assert ledger.monthly_total == 120.0
    assert_ledger_consistent(ledger)


def test_concurrent_status_toggles_keep_remaining_consistent(emi_repo):
    emi = emis.create_emi(
        emi_repo, user_id="u", title="TV", start_month="2025-01", amount_per_month=50, duration=10
    )

    def _pay(index):
        emis.set_entry_status(emi_repo, emi_id=emi.id, index=index, status=emis.PAID)

    with ThreadPoolExecutor(max_workers=5) as pool:
        list(pool.map(_pay, range(10)))

    stored = emi_repo.get_by_id(emi.id)
    assert all(entry["status"] == emis.PAID for entry in stored.schedule)
    assert stored.remaining_amount == 0


def test_released_keys_are_forgotten(emi_repo):
    with key_lock("emi", "held"):
        assert held_keys() == [("emi", "held")]

    for n in range(200):
        assert emis.delete_emi(emi_repo, emi_id=f"missing-{n}") is False

    assert held_keys() == []


def test_key_is_forgotten_after_contended_use():
    entered = threading.Event()
    release = threading.Event()

    def _hold():
        with key_lock("ledger", "u", "2025-03"):
            entered.set()
            release.wait(timeout=2)

    holder = threading.Thread(target=_hold)
    holder.start()
    entered.wait(timeout=2)

    waiter = threading.Thread(target=_hold)
    waiter.start()
    release.set()
    holder.join(timeout=2)
    waiter.join(timeout=2)

    assert held_keys() == []


def test_key_is_released_when_body_raises():
    with pytest.raises(RuntimeError):
        with key_lock("emi", "boom"):
            raise RuntimeError("boom")

    assert held_keys() == []
