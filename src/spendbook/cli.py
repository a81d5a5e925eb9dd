"""Flask CLI commands for Spendbook."""

from __future__ import annotations

import json

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("spendbook-init-db")
    def spendbook_init_db() -> None:
        """Create database tables (the app factory already does this)."""

        from .infra.database import init_database

        init_database(app.extensions["spendbook_engine"])
        click.echo("Database ready.")

    @app.cli.command("spendbook-summary")
    @click.option("--user", "user_id", required=True, help="User id to summarize")
    def spendbook_summary(user_id: str) -> None:
        """Print the dashboard rollup for one user as JSON."""

        from .extensions import get_repositories
        from .services.dashboard import load_dashboard_stats

        repos = get_repositories()
        stats = load_dashboard_stats(ledgers=repos.ledgers, emis=repos.emis, user_id=user_id)
        click.echo(json.dumps(stats.to_dict(), indent=2))
