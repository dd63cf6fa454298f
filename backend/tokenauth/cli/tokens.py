"""Flask CLI commands for refresh-token housekeeping."""

from __future__ import annotations

import logging
from datetime import timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from tokenauth.services._shared.errors import ServiceError
from tokenauth.services.auth.setup import get_token_service

LOGGER = logging.getLogger(__name__)


@click.group("refresh-tokens")
def refresh_tokens_cli() -> None:
    """Inspect and clean up stored refresh tokens."""


@refresh_tokens_cli.command("sweep")
@click.option(
    "--max-age-days",
    type=click.IntRange(min=0),
    default=None,
    help="Delete records older than this many days (defaults to REFRESH_TOKEN_MAX_AGE_DAYS).",
)
@with_appcontext
def sweep(max_age_days: int | None) -> None:
    """Delete refresh tokens that were never used."""
    if max_age_days is None:
        max_age_days = int(current_app.config.get("REFRESH_TOKEN_MAX_AGE_DAYS", 30))
    store = get_token_service().store
    try:
        removed = store.sweep(timedelta(days=max_age_days))
    except ServiceError as exc:
        LOGGER.exception("refresh_tokens.sweep_failed")
        raise click.ClickException(exc.public_message) from exc
    click.echo(f"Removed {removed} refresh token(s) older than {max_age_days} day(s).")


@refresh_tokens_cli.command("count")
@click.argument("user_id")
@with_appcontext
def count(user_id: str) -> None:
    """Print the number of stored refresh tokens for USER_ID."""
    try:
        total = get_token_service().store.count_for_user(user_id)
    except ServiceError as exc:
        LOGGER.exception("refresh_tokens.count_failed")
        raise click.ClickException(exc.public_message) from exc
    click.echo(str(total))
