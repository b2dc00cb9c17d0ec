"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from ledgerlens.cli.error_handling import handle_domain_error
from ledgerlens.domain.account import AccountService
from ledgerlens.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_accounts_or_exit(
    ctx: click.Context, account_service: AccountService, accounts: tuple[str, ...]
) -> frozenset[int]:
    """Resolve a repeated --account option into a set of account IDs."""
    return frozenset(
        resolve_account_or_exit(ctx, account_service, account) for account in accounts
    )
