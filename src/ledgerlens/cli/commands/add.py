"""Add ledger entry command."""

import click
from ledgerlens.cli.account_resolution import resolve_account_or_exit
from ledgerlens.cli.error_handling import handle_domain_error
from ledgerlens.domain.account import AccountService
from ledgerlens.domain.entities import TransactionType
from ledgerlens.domain.transaction import TransactionService
from ledgerlens.utils.amount_parser import parse_amount
from ledgerlens.utils.date_parser import parse_date


@click.command("add")
@click.option(
    "--type",
    "transaction_type",
    required=True,
    type=click.Choice([t.value for t in TransactionType]),
    help="Entry type",
)
@click.option(
    "--date",
    required=True,
    help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Amount in the account currency")
@click.option("--home-amount", help="Amount already converted to the home currency")
@click.option("--from", "source", help="Source account name or ID (expense, transfer)")
@click.option("--to", "destination", help="Destination account name or ID (income, transfer)")
@click.option("--category", help="Category name (created if missing)")
@click.option("--partner", help="Counterparty name (created if missing)")
@click.option("--creator", help="Name of the user recording the entry")
@click.option("--code", help="Entry code")
@click.option("--description", help="Entry description")
@click.option("--document", help="Supporting document number")
@click.option("--notes", help="Notes")
@click.pass_context
def add_transaction(
    ctx,
    transaction_type: str,
    date: str,
    amount: str,
    home_amount: str | None,
    source: str | None,
    destination: str | None,
    category: str | None,
    partner: str | None,
    creator: str | None,
    code: str | None,
    description: str | None,
    document: str | None,
    notes: str | None,
):
    """Record an income, expense or transfer.

    Examples:
        ledgerlens add --type income --date 2024-01-05 --amount 1000000 --to Wallet
        ledgerlens add --type expense --date today --amount 45000 --from Wallet --category Food
        ledgerlens add --type transfer --date 2024-01-20 --amount 500000 --from Wallet --to Bank
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    source_id = resolve_account_or_exit(ctx, account_service, source) if source else None
    destination_id = (
        resolve_account_or_exit(ctx, account_service, destination) if destination else None
    )

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
        home_currency_amount = parse_amount(home_amount) if home_amount is not None else None
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_id = transaction_service.create_transaction(
            date=txn_date,
            transaction_type=TransactionType(transaction_type),
            amount=txn_amount,
            home_currency_amount=home_currency_amount,
            source_account_id=source_id,
            destination_account_id=destination_id,
            category=category,
            partner=partner,
            creator=creator,
            code=code,
            description=description,
            document_number=document,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {transaction_type} entry {txn_id} on {txn_date}: {txn_amount:,.2f}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
