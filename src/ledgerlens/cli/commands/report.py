"""Report commands."""

from decimal import Decimal
from typing import Iterable, Optional

import click
from ledgerlens.cli.account_resolution import resolve_accounts_or_exit
from ledgerlens.cli.date_filters import (
    period_options,
    pop_period_flags,
    resolve_cli_date_range,
)
from ledgerlens.cli.error_handling import handle_domain_error
from ledgerlens.domain.account import AccountService
from ledgerlens.domain.entities import (
    AccountReport,
    AggregateRow,
    BalanceRow,
    CompareOption,
    Granularity,
    Report,
    ReportFilter,
    ReportWarning,
    TransactionType,
)
from ledgerlens.domain.report import ReportService

WIDTH = 100

GROUP_BY_CHOICES = (
    "time",
    "week",
    "category",
    "partner",
    "creator",
    "account",
    "currency",
    "type",
)


def filter_options(command):
    """Attach the inclusion filters shared by every report command."""
    options = [
        click.option("--keyword", help="Text searched in code, description, document and notes"),
        click.option("--currency", "currencies", multiple=True, help="Currency code (repeatable)"),
        click.option(
            "--account-type", "account_types", multiple=True, help="Account type (repeatable)"
        ),
        click.option(
            "--type",
            "transaction_types",
            multiple=True,
            type=click.Choice([t.value for t in TransactionType]),
            help="Entry type (repeatable)",
        ),
        click.option("--account", "accounts", multiple=True, help="Account name or ID (repeatable)"),
        click.option("--creator-id", "creator_ids", multiple=True, type=int, help="Creator ID (repeatable)"),
        click.option("--partner-id", "partner_ids", multiple=True, type=int, help="Partner ID (repeatable)"),
        click.option("--category-id", "category_ids", multiple=True, type=int, help="Category ID (repeatable)"),
    ]
    for option in options:
        command = option(command)
    return period_options(command)


def _build_filter(ctx, kwargs: dict) -> ReportFilter:
    period_flags = pop_period_flags(kwargs)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=kwargs.pop("start_date"),
        end_date=kwargs.pop("end_date"),
        period_flags=period_flags,
    )
    account_ids = resolve_accounts_or_exit(
        ctx, AccountService(ctx.obj["db"]), kwargs.pop("accounts")
    )
    return ReportFilter(
        date_from=start,
        date_to=end,
        category_ids=frozenset(kwargs.pop("category_ids")),
        partner_ids=frozenset(kwargs.pop("partner_ids")),
        creator_ids=frozenset(kwargs.pop("creator_ids")),
        account_ids=account_ids,
        account_types=frozenset(kwargs.pop("account_types")),
        transaction_types=frozenset(
            TransactionType(t) for t in kwargs.pop("transaction_types")
        ),
        currencies=frozenset(c.upper() for c in kwargs.pop("currencies")),
        keyword=kwargs.pop("keyword"),
    )


def _money(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def _percent(value: Decimal) -> str:
    return f"{value:+.2f}%"


def _window(report_filter: ReportFilter) -> str:
    start = report_filter.date_from or "beginning"
    end = report_filter.date_to or "today"
    return f"{start} to {end}"


def _echo_flow_rows(title: str, rows: Iterable[AggregateRow]) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * WIDTH)
    click.echo(f"{'Group':<30} {'Income':>18} {'Expense':>18} {'Net':>18} {'Count':>8}")
    click.echo("-" * WIDTH)
    for row in rows:
        name = str(row.name if row.name is not None else row.key.value)
        if row.mixed_currency:
            name = f"{name} *"
        click.echo(
            f"{name[:30]:<30} {_money(row.income_total):>18} {_money(row.expense_total):>18} "
            f"{_money(row.net_balance):>18} {row.transaction_count:>8d}"
        )


def _echo_balance_rows(title: str, rows: Iterable[BalanceRow]) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * WIDTH)
    click.echo(
        f"{'Group':<20} {'Opening':>17} {'Income':>17} {'Expense':>17} {'Closing':>17} {'Count':>7}"
    )
    click.echo("-" * WIDTH)
    for row in rows:
        click.echo(
            f"{str(row.name)[:20]:<20} {_money(row.opening_balance):>17} "
            f"{_money(row.income_total):>17} {_money(row.expense_total):>17} "
            f"{_money(row.closing_balance):>17} {row.transaction_count:>7d}"
        )


def _echo_warnings(warnings: Iterable[ReportWarning]) -> None:
    for warning in warnings:
        click.echo(
            f"Warning: skipped transaction {warning.transaction_id}: {warning.reason}",
            err=True,
        )


def _display_report(report: Report, group_by: str) -> None:
    summary = report.summary
    click.echo(f"\nFinancial Report ({_window(report.filter)})")
    click.echo("=" * WIDTH)
    click.echo(f"{'Total income':<30} {_money(summary.total_income):>20}  ({summary.income_count} entries)")
    click.echo(f"{'Total expense':<30} {_money(summary.total_expense):>20}  ({summary.expense_count} entries)")
    click.echo(f"{'Total transfer':<30} {_money(summary.total_transfer):>20}  ({summary.transfer_count} entries)")
    click.echo(f"{'Net balance':<30} {_money(summary.net_balance):>20}")
    click.echo(f"{'Transactions':<30} {summary.transaction_count:>20d}")
    if len(summary.currencies) > 1:
        click.echo(f"Note: totals mix currencies ({', '.join(summary.currencies)})")

    if group_by == "type":
        click.echo("\nBy type:")
        click.echo("-" * WIDTH)
        for row in report.by_type:
            click.echo(
                f"{row.transaction_type.value:<30} {_money(row.amount_total):>20} "
                f"{row.transaction_count:>8d}"
            )
    else:
        rows = {
            "time": (f"By {report.granularity.value}", report.by_time),
            "week": ("By week", report.by_week),
            "category": ("By category", report.by_category),
            "partner": ("By partner", report.by_partner),
            "creator": ("By creator", report.by_creator),
            "account": ("By account", report.by_account),
            "currency": ("By currency", report.by_currency),
        }
        title, selected = rows[group_by]
        _echo_flow_rows(title, selected)

    if report.top_transactions:
        click.echo(f"\nTop {len(report.top_transactions)} transactions:")
        click.echo("-" * WIDTH)
        for txn in report.top_transactions:
            description = (txn.description or "")[:40]
            click.echo(
                f"{txn.id:>6d} {txn.date} {txn.transaction_type.value:<9} "
                f"{_money(txn.amount):>18} {description}"
            )

    for title, ranked in (
        ("Top categories", report.top_categories),
        ("Top partners", report.top_partners),
    ):
        if not ranked:
            continue
        click.echo(f"\n{title}:")
        click.echo("-" * WIDTH)
        for row in ranked:
            click.echo(f"{str(row.name)[:30]:<30} {_money(row.amount_total):>20} {row.transaction_count:>8d}")

    if report.comparison is not None:
        comparison = report.comparison
        change = comparison.change
        click.echo(
            f"\nCompared with {comparison.previous_from} to {comparison.previous_to} "
            f"({comparison.option.value}):"
        )
        click.echo("-" * WIDTH)
        click.echo(f"{'Metric':<20} {'Current':>20} {'Previous':>20} {'Change':>12}")
        for label, current, previous, delta in (
            ("Income", comparison.current.total_income, comparison.previous.total_income, change.total_income),
            ("Expense", comparison.current.total_expense, comparison.previous.total_expense, change.total_expense),
            ("Net balance", comparison.current.net_balance, comparison.previous.net_balance, change.net_balance),
        ):
            click.echo(f"{label:<20} {_money(current):>20} {_money(previous):>20} {_percent(delta):>12}")
        click.echo(
            f"{'Transactions':<20} {comparison.current.transaction_count:>20d} "
            f"{comparison.previous.transaction_count:>20d} {_percent(change.transaction_count):>12}"
        )

    _echo_warnings(report.warnings)


def _display_account_report(report: AccountReport) -> None:
    summary = report.summary
    click.echo(f"\nAccount Report ({_window(report.filter)})")
    click.echo("=" * WIDTH)
    click.echo(f"{'Opening balance':<30} {_money(summary.opening_balance):>20}")
    click.echo(f"{'Income':<30} {_money(summary.total_income):>20}")
    click.echo(f"{'Expense':<30} {_money(summary.total_expense):>20}")
    click.echo(f"{'Closing balance':<30} {_money(summary.closing_balance):>20}")

    click.echo("\nBy account:")
    click.echo("-" * WIDTH)
    for row in report.by_account:
        marker = "" if row.opening_balance_available else " (opening unavailable)"
        click.echo(
            f"{row.account.name[:20]:<20} {_money(row.opening_balance):>17} "
            f"{_money(row.income_total):>17} {_money(row.expense_total):>17} "
            f"{_money(row.closing_balance):>17} {row.transaction_count:>7d}{marker}"
        )

    _echo_balance_rows("By month", report.by_period)
    if report.by_account_type:
        _echo_balance_rows("By account type", report.by_account_type)
    _echo_balance_rows("By currency", report.by_currency)

    if report.incomplete:
        ids = ", ".join(str(account_id) for account_id in report.unavailable_account_ids)
        click.echo(
            f"Warning: report is incomplete; opening balance unavailable for account(s) {ids}",
            err=True,
        )
    _echo_warnings(report.warnings)


@click.group()
def report_group():
    """Build financial reports."""
    pass


@report_group.command("summary")
@filter_options
@click.option(
    "--granularity",
    type=click.Choice([g.value for g in Granularity]),
    default=Granularity.MONTH.value,
    show_default=True,
    help="Bucket size of the time breakdown",
)
@click.option(
    "--group-by",
    type=click.Choice(GROUP_BY_CHOICES),
    default="time",
    show_default=True,
    help="Breakdown to display",
)
@click.option(
    "--compare",
    type=click.Choice([c.value for c in CompareOption]),
    help="Compare with a preceding window (requires a date range)",
)
@click.option("--top", type=click.IntRange(min=1), help="Size of the rankings")
@click.pass_context
def summary(
    ctx,
    granularity: str,
    group_by: str,
    compare: Optional[str],
    top: Optional[int],
    **kwargs,
):
    """Show totals, a breakdown, rankings and an optional comparison.

    Examples:
        ledgerlens report summary --this-month
        ledgerlens report summary --start-date 2024-01-01 --end-date 2024-03-31 --group-by category
        ledgerlens report summary --last-month --compare previous-period --top 5
    """
    report_filter = _build_filter(ctx, kwargs)
    service = ReportService(ctx.obj["db"], ctx.obj["settings"])

    try:
        report = service.build_report(
            report_filter,
            granularity=Granularity(granularity),
            compare=CompareOption(compare) if compare else None,
            top_n=top,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not report.transactions:
        click.echo("No transactions found.")
        _echo_warnings(report.warnings)
        return

    _display_report(report, group_by)


@report_group.command("accounts")
@filter_options
@click.pass_context
def accounts(ctx, **kwargs):
    """Show opening, income, expense and closing balance per account.

    A date range is required.

    Examples:
        ledgerlens report accounts --last-month
        ledgerlens report accounts --start-date 2024-01-01 --end-date 2024-06-30 --currency VND
    """
    report_filter = _build_filter(ctx, kwargs)
    service = ReportService(ctx.obj["db"], ctx.obj["settings"])

    try:
        report = service.build_account_report(report_filter)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not report.by_account:
        click.echo("No transactions found.")
        _echo_warnings(report.warnings)
        return

    _display_account_report(report)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
