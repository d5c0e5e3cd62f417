"""``flask seed`` commands for local development databases.

``run`` is safe to repeat: users whose email is already active are counted
as existing. ``fresh`` rebuilds the schema first and is refused when
``APP_ENV`` is ``production``.
"""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from userhub.core.extensions import db
from userhub.seeds import seed_data
from userhub.services._shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


def _report(summary: dict[str, dict[str, int]]) -> None:
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(map(len, summary))
    for table in sorted(summary):
        counts = summary[table]
        click.echo(
            f"  {table:<{width}}  created={counts.get('created', 0):>2}"
            f"  existing={counts.get('existing', 0):>2}"
        )


def _seed(ctx: click.Context, label: str) -> None:
    """Run every seeder and print the summary, mapping service failures to CLI errors."""
    verbose = bool(ctx.obj.get("verbose"))
    try:
        summary = seed_data.run_all(verbose=verbose)
    except ServiceError as exc:
        raise click.ClickException(f"{label} failed: {exc}") from exc
    _report(summary)


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log every seeded user.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Seed the database with demo users."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    level = logging.DEBUG if verbose else logging.INFO
    for logger in (LOGGER, logging.getLogger(seed_data.__name__)):
        logger.setLevel(level)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Create the demo users that do not exist yet."""
    _seed(ctx, "Seeding")


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop and recreate the ``users`` schema, then seed it."""
    if str(current_app.config.get("APP_ENV", "")).lower() == "production":
        raise click.UsageError("'flask seed fresh' is restricted to non-production environments.")
    if not yes:
        click.confirm("Every user row will be DELETED. Continue?", abort=True)

    LOGGER.info("seed.schema_reset")
    db.session.remove()
    db.drop_all()
    db.create_all()
    _seed(ctx, "Fresh seed")
