"""Month-based expense routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_repositories
from ...services import expenses
from ..api import current_user_id, json_body, validation_error
from . import bp
from .forms import DayForm, MonthForm, SalaryForm, validate_month_value


def _checked_month(month: str):
    errors: dict[str, list[str]] = {}
    validate_month_value(errors, month)
    return errors


@bp.get("/months")
def list_months():
    repos = get_repositories()
    ledgers = expenses.list_months(repos.ledgers, user_id=current_user_id())
    return jsonify([expenses.serialize_ledger(ledger) for ledger in ledgers])


@bp.get("/month/<month>")
def get_month(month: str):
    user_id = current_user_id()
    if errors := _checked_month(month):
        return validation_error(errors)
    ledger = expenses.get_month(get_repositories().ledgers, user_id=user_id, month=month)
    return jsonify(expenses.serialize_ledger(ledger))


@bp.post("/month")
def create_month():
    user_id = current_user_id()
    form = MonthForm.from_json(json_body())
    if not form.validate():
        return validation_error(form.errors)
    ledger = expenses.create_month(
        get_repositories().ledgers, user_id=user_id, month=form.month, salary=form.salary
    )
    return jsonify(expenses.serialize_ledger(ledger)), 201


@bp.put("/month/<month>/salary")
def update_salary(month: str):
    user_id = current_user_id()
    form = SalaryForm(salary_credited=json_body().get("salary_credited"))
    errors = _checked_month(month)
    if not form.validate() or errors:
        return validation_error({**errors, **form.errors})
    ledger = expenses.set_salary(
        get_repositories().ledgers, user_id=user_id, month=month, salary=form.salary
    )
    return jsonify(expenses.serialize_ledger(ledger))


@bp.post("/month/<month>/day")
def add_day(month: str):
    user_id = current_user_id()
    form = DayForm.from_json(json_body())
    errors = _checked_month(month)
    if not form.validate() or errors:
        return validation_error({**errors, **form.errors})
    ledger = expenses.add_day(
        get_repositories().ledgers,
        user_id=user_id,
        month=month,
        date=form.date,
        items=form.line_items,
    )
    return jsonify(expenses.serialize_ledger(ledger))


@bp.put("/month/<month>/day/<date>")
def update_day(month: str, date: str):
    user_id = current_user_id()
    form = DayForm(date=date, items=json_body().get("items"), require_items=False)
    errors = _checked_month(month)
    if not form.validate() or errors:
        return validation_error({**errors, **form.errors})
    ledger = expenses.update_day(
        get_repositories().ledgers,
        user_id=user_id,
        month=month,
        date=date,
        items=form.line_items,
    )
    return jsonify(expenses.serialize_ledger(ledger))


@bp.delete("/month/<month>/day/<date>")
def delete_day(month: str, date: str):
    user_id = current_user_id()
    if errors := _checked_month(month):
        return validation_error(errors)
    ledger = expenses.delete_day(
        get_repositories().ledgers, user_id=user_id, month=month, date=date
    )
    return jsonify(expenses.serialize_ledger(ledger))


@bp.delete("/month/<month>/day/<date>/item/<item_id>")
def delete_item(month: str, date: str, item_id: str):
    user_id = current_user_id()
    if errors := _checked_month(month):
        return validation_error(errors)
    ledger = expenses.delete_item(
        get_repositories().ledgers,
        user_id=user_id,
        month=month,
        date=date,
        item_id=item_id,
    )
    return jsonify(expenses.serialize_ledger(ledger))
