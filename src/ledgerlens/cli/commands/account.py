"""Account management commands."""

import click
from ledgerlens.cli.error_handling import handle_domain_error
from ledgerlens.domain.account import AccountService
from ledgerlens.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--currency", help="ISO currency code of the account (e.g. VND, USD)")
@click.option("--type", "account_type", help="Account type (e.g. cash, bank, credit)")
@click.option(
    "--opening-balance", default="0", show_default=True, help="Balance before the first entry"
)
@click.pass_context
def create_account(
    ctx, name: str, currency: str | None, account_type: str | None, opening_balance: str
):
    """Create a new account.

    Examples:
        ledgerlens account create "Wallet" --currency VND --type cash
        ledgerlens account create "Techcombank" --type bank --opening-balance 5000000
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        balance = parse_amount(opening_balance)
        account_id = service.create_account(
            name=name,
            currency_code=currency,
            account_type=account_type,
            opening_balance=balance,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        currency = acc.currency_code or "-"
        account_type = acc.account_type or "-"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {currency:4s} | {account_type:10s} "
            f"| Opening: {acc.opening_balance:,.2f}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
