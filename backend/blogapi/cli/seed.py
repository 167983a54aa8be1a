"""``flask seed`` commands: demo users and posts for local work."""

from __future__ import annotations

import logging
import os

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from blogapi.core.config import ENV_VAR
from blogapi.core.extensions import db, get_password_hasher
from blogapi.models import Post, User
from blogapi.seeds import seed_data

LOGGER = logging.getLogger(__name__)


def _print_summary(summary: dict[str, dict[str, int]]) -> None:
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(map(len, summary))
    for table in sorted(summary):
        counters = summary[table]
        click.echo(
            f"  {table.ljust(width)}  created={counters.get('created', 0):>2}"
            f"  existing={counters.get('existing', 0):>2}"
        )


def _guard_destructive() -> None:
    """Refuse to drop tables unless the app runs in debug or testing mode."""
    if os.getenv(ENV_VAR, "").strip().lower() == "production":
        allowed = False
    else:
        allowed = bool(current_app.config.get("DEBUG") or current_app.config.get("TESTING"))
    if not allowed:
        raise click.UsageError(
            "The 'flask seed fresh' command is restricted to non-production environments."
        )


def _seed(verbose: bool) -> None:
    try:
        summary = seed_data.run_all(db, get_password_hasher(), verbose=verbose)
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _print_summary(summary)


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log every seeding step.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Load demo data into the configured database."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    level = logging.DEBUG if verbose else logging.INFO
    for name in (LOGGER.name, seed_data.__name__):
        logging.getLogger(name).setLevel(level)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Insert missing demo users and posts; existing rows are left alone."""
    _seed(ctx.obj["verbose"])


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop and recreate every table, then seed."""
    _guard_destructive()
    if not yes:
        click.confirm("Drop ALL tables and recreate them?", abort=True)
    LOGGER.info("seed.fresh.drop_all")
    db.session.remove()
    db.drop_all()
    db.create_all()
    LOGGER.info("seed.fresh.create_all")
    _seed(ctx.obj["verbose"])


@seed_cli.command("status")
@with_appcontext
def status_command() -> None:
    """Print row counts for users and posts."""
    for label, model in (("users", User), ("posts", Post)):
        count = db.session.execute(select(func.count()).select_from(model)).scalar_one()
        click.echo(f"{label}: {count}")
