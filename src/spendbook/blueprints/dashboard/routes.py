"""Dashboard routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_repositories
from ...services.dashboard import load_dashboard_stats
from ..api import current_user_id
from . import bp


@bp.get("/stats")
def stats():
    repos = get_repositories()
    summary = load_dashboard_stats(
        ledgers=repos.ledgers, emis=repos.emis, user_id=current_user_id()
    )
    return jsonify(summary.to_dict())
