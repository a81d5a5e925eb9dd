"""EMI routes."""

from __future__ import annotations

from flask import jsonify

from ...errors import NotFound
from ...extensions import get_repositories
from ...services import emis
from ..api import current_user_id, json_body, validation_error
from . import bp
from .forms import EmiForm, StatusForm


@bp.get("")
def list_emis():
    records = emis.list_emis(get_repositories().emis, user_id=current_user_id())
    return jsonify([emis.serialize_emi(emi) for emi in records])


@bp.get("/<emi_id>")
def get_emi(emi_id: str):
    emi = emis.get_emi(get_repositories().emis, emi_id=emi_id, user_id=current_user_id())
    return jsonify(emis.serialize_emi(emi))


@bp.post("")
def create_emi():
    user_id = current_user_id()
    form = EmiForm.from_json(json_body())
    if not form.validate():
        return validation_error(form.errors)
    emi = emis.create_emi(
        get_repositories().emis,
        user_id=user_id,
        title=form.title,
        start_month=form.start_month,
        amount_per_month=float(form.amount_per_month),
        duration=form.duration,
    )
    return jsonify(emis.serialize_emi(emi)), 201


@bp.patch("/<emi_id>/schedule/<int(signed=True):index>")
def update_schedule_entry(emi_id: str, index: int):
    user_id = current_user_id()
    form = StatusForm(status=json_body().get("status"))
    if not form.validate():
        return validation_error(form.errors)
    emi = emis.set_entry_status(
        get_repositories().emis,
        emi_id=emi_id,
        index=index,
        status=form.status,
        user_id=user_id,
    )
    return jsonify(emis.serialize_emi(emi))


@bp.delete("/<emi_id>")
def delete_emi(emi_id: str):
    deleted = emis.delete_emi(get_repositories().emis, emi_id=emi_id, user_id=current_user_id())
    if not deleted:
        raise NotFound("EMI not found")
    return jsonify({"message": "EMI deleted"})
