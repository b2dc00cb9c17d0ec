"""CLI error handling helpers."""

import logging

import click

from ledgerlens.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Report a rejected ledger or report request and exit with status 1.

    Validation, not-found and conflict errors from the services, and bad
    report settings, are all printed as ``Error: <message>`` on stderr. The
    traceback is only logged at DEBUG, so it shows up with ``--verbose``.
    """
    logger.debug("Command %s failed", ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
