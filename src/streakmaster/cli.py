"""Command line entry points for Streakmaster."""

from __future__ import annotations

import json

import click

from .config import resolve_config
from .context import create_app_context
from .logging_config import setup_logging


def _build_context(config_name: str | None):
    config = resolve_config(config_name)()
    setup_logging(config)
    return create_app_context(config)


@click.group()
@click.option(
    "--config",
    "config_name",
    default=None,
    envvar="STREAKMASTER_ENV",
    help="Configuration name (development, testing, default).",
)
@click.pass_context
def cli(click_ctx: click.Context, config_name: str | None) -> None:
    """Streakmaster maintenance commands."""

    click_ctx.ensure_object(dict)
    click_ctx.obj["config_name"] = config_name


@cli.command("init-db")
@click.pass_context
def init_db_command(click_ctx: click.Context) -> None:
    """Create database tables if they do not exist."""

    ctx = _build_context(click_ctx.obj.get("config_name"))
    click.echo(f"Database ready: {ctx.config.DATABASE_URL}")
    ctx.dispose()


@cli.command("recompute-streaks")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the summary as JSON")
@click.pass_context
def recompute_streaks_command(click_ctx: click.Context, as_json: bool) -> None:
    """Recompute every habit streak and profile total from the logs."""

    ctx = _build_context(click_ctx.obj.get("config_name"))
    try:
        summary = ctx.recompute_streaks()
    finally:
        ctx.dispose()

    if as_json:
        click.echo(json.dumps(summary.to_dict()))
    else:
        click.echo(
            f"Recomputed {summary.updated} habit(s) "
            f"({summary.changed} changed, {summary.failed} failed); "
            f"refreshed {summary.profiles} profile total(s)."
        )
    if summary.failed:
        raise SystemExit(1)


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("recompute-streaks")
    def flask_recompute_streaks() -> None:
        """Recompute streaks using the app's database."""

        from .extensions import get_context

        summary = get_context(app).recompute_streaks()
        click.echo(json.dumps(summary.to_dict()))


__all__ = ["cli", "init_app"]
