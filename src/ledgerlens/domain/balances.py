"""Account balance aggregation.

Opening balances are carried forward from each account's history before
the report window; income and expense inside the window are then folded
into running balances per period, per account, per account type and per
currency. At every level the closing balance is opening + income - expense.
"""

import logging
import math
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Optional, Sequence

from ledgerlens.config import DEFAULT_SETTINGS, ReportSettings
from ledgerlens.domain.aggregation import FlowAccumulator, group_by_time, preferred_money
from ledgerlens.domain.entities import (
    Account,
    AccountBalanceRow,
    AccountReport,
    AccountSummary,
    AggregateRow,
    BalanceRow,
    Dimension,
    Granularity,
    GroupKey,
    ReportFilter,
    ReportWarning,
    Transaction,
    TransactionType,
)
from ledgerlens.domain.filters import apply_filter, partition_valid, validate_window
from ledgerlens.domain.periods import period_key

if TYPE_CHECKING:
    from ledgerlens.database.base import LedgerStore

logger = logging.getLogger(__name__)

OUTGOING = (TransactionType.EXPENSE, TransactionType.TRANSFER)
INCOMING = (TransactionType.INCOME, TransactionType.TRANSFER)


def balance_delta(
    txn: Transaction, account_id: int, settings: ReportSettings = DEFAULT_SETTINGS
) -> Decimal:
    """Return how much one entry changes the balance of one account."""
    amount = preferred_money(txn, settings).amount
    delta = Decimal("0")
    if txn.source_account_id == account_id and txn.transaction_type in OUTGOING:
        delta -= amount
    if txn.destination_account_id == account_id and txn.transaction_type in INCOMING:
        delta += amount
    return delta


def opening_balance_as_of(
    account: Account,
    history: Iterable[Transaction],
    as_of: date,
    settings: ReportSettings = DEFAULT_SETTINGS,
) -> Decimal:
    """Fold an account's entries dated strictly before ``as_of`` onto its opening balance."""
    balance = account.opening_balance
    for txn in history:
        if txn.date < as_of:
            balance += balance_delta(txn, account.id, settings)
    return balance


def distinct_accounts(transactions: Iterable[Transaction]) -> dict[int, Account]:
    """Collect the accounts referenced by either leg, in first-appearance order."""
    accounts: dict[int, Account] = {}
    for txn in transactions:
        for account in (txn.source_account, txn.destination_account):
            if account is not None and account.id not in accounts:
                accounts[account.id] = account
    return accounts


def running_balances(rows: Iterable[AggregateRow], opening: Decimal) -> list[BalanceRow]:
    """Chain period rows so each opens with the previous row's closing balance."""
    result: list[BalanceRow] = []
    running = opening
    for row in rows:
        balance_row = BalanceRow(
            key=row.key,
            name=row.name,
            opening_balance=running,
            income_total=row.income_total,
            expense_total=row.expense_total,
            transaction_count=row.transaction_count,
        )
        running = balance_row.closing_balance
        result.append(balance_row)
    return result


class OpeningBalanceResolver:
    """Looks up opening balances of many accounts concurrently.

    A lookup that fails or exceeds ``settings.lookup_timeout`` does not stop
    the others; its account id is reported back as unavailable.
    """

    def __init__(
        self,
        lookup: Callable[[int, date], Decimal],
        settings: ReportSettings = DEFAULT_SETTINGS,
    ):
        """Initialize opening balance resolver.

        Args:
            lookup: Returns the balance of an account as of a date
            settings: Worker and timeout settings
        """
        self.lookup = lookup
        self.settings = settings

    def resolve(
        self, account_ids: Sequence[int], as_of: date
    ) -> tuple[dict[int, Decimal], list[int]]:
        """Fetch opening balances for every account id.

        Args:
            account_ids: Distinct account ids
            as_of: First day of the report window

        Returns:
            Tuple of (balances by account id, ids whose lookup failed)
        """
        balances: dict[int, Decimal] = {}
        unavailable: list[int] = []
        if not account_ids:
            return balances, unavailable

        workers = max(1, min(self.settings.max_workers, len(account_ids)))
        # Lookups run in rounds of ``workers``; each round gets one timeout.
        rounds = math.ceil(len(account_ids) / workers)
        executor = ThreadPoolExecutor(max_workers=workers)
        try:
            futures: dict[int, Future] = {
                account_id: executor.submit(self.lookup, account_id, as_of)
                for account_id in account_ids
            }
            done, _ = wait(
                futures.values(), timeout=self.settings.lookup_timeout * rounds
            )
            for account_id, future in futures.items():
                if future not in done:
                    logger.warning(
                        "Opening balance lookup for account %s timed out after %ss",
                        account_id,
                        self.settings.lookup_timeout,
                    )
                    unavailable.append(account_id)
                    continue
                try:
                    balances[account_id] = future.result()
                except Exception as e:
                    logger.warning(
                        "Opening balance lookup for account %s failed: %s", account_id, e
                    )
                    unavailable.append(account_id)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return balances, unavailable


def _account_rows(
    transactions: Sequence[Transaction],
    accounts: Mapping[int, Account],
    opening_balances: Mapping[int, Decimal],
    unavailable: Sequence[int],
    settings: ReportSettings,
) -> list[AccountBalanceRow]:
    totals = {account_id: FlowAccumulator() for account_id in accounts}
    periods: dict[int, dict[str, FlowAccumulator]] = {
        account_id: {} for account_id in accounts
    }

    def book(account_id: int, txn: Transaction, incoming: bool) -> None:
        key = period_key(txn.date, Granularity.MONTH)
        period_acc = periods[account_id].setdefault(key, FlowAccumulator(key))
        money = preferred_money(txn, settings)
        for acc in (totals[account_id], period_acc):
            if incoming and txn.transaction_type in INCOMING:
                acc.add_income(money)
            elif not incoming and txn.transaction_type in OUTGOING:
                acc.add_expense(money)
            acc.count += 1

    for txn in transactions:
        if txn.source_account_id is not None:
            book(txn.source_account_id, txn, incoming=False)
        if txn.destination_account_id is not None:
            book(txn.destination_account_id, txn, incoming=True)

    rows: list[AccountBalanceRow] = []
    for account_id, account in accounts.items():
        opening = opening_balances.get(account_id, Decimal("0"))
        acc = totals[account_id]
        period_rows = [
            periods[account_id][key].to_row(GroupKey(Dimension.PERIOD, key))
            for key in sorted(periods[account_id])
        ]
        rows.append(
            AccountBalanceRow(
                account=account,
                opening_balance=opening,
                income_total=acc.income,
                expense_total=acc.expense,
                transaction_count=acc.count,
                periods=tuple(running_balances(period_rows, opening)),
                opening_balance_available=account_id not in unavailable,
            )
        )
    return rows


def rollup(
    account_rows: Iterable[AccountBalanceRow],
    dimension: Dimension,
    key_func: Callable[[Account], Optional[str]],
) -> list[BalanceRow]:
    """Sum per-account rows into one row per derived key.

    Accounts for which ``key_func`` returns None are left out.
    """
    groups: dict[str, list[AccountBalanceRow]] = {}
    for row in account_rows:
        key = key_func(row.account)
        if key is None:
            continue
        groups.setdefault(key, []).append(row)

    return [
        BalanceRow(
            key=GroupKey(dimension, key),
            name=key,
            opening_balance=sum((r.opening_balance for r in rows), Decimal("0")),
            income_total=sum((r.income_total for r in rows), Decimal("0")),
            expense_total=sum((r.expense_total for r in rows), Decimal("0")),
            transaction_count=sum(r.transaction_count for r in rows),
        )
        for key, rows in groups.items()
    ]


def compute_account_report(
    transactions: Sequence[Transaction],
    report_filter: ReportFilter,
    opening_balances: Mapping[int, Decimal],
    unavailable: Sequence[int] = (),
    warnings: Sequence[ReportWarning] = (),
    settings: ReportSettings = DEFAULT_SETTINGS,
) -> AccountReport:
    """Assemble an account report from validated, filtered entries.

    Args:
        transactions: Entries inside the report window with every required leg
        report_filter: Filter the entries were selected with
        opening_balances: Balance of each account as of the window start
        unavailable: Account ids whose opening balance could not be fetched
        warnings: Entries rejected upstream
        settings: Amount unit settings

    Returns:
        AccountReport whose period, account, type and currency rows all
        satisfy closing = opening + income - expense
    """
    accounts = distinct_accounts(transactions)
    account_rows = _account_rows(
        transactions, accounts, opening_balances, unavailable, settings
    )

    total_opening = sum((row.opening_balance for row in account_rows), Decimal("0"))
    total_income = Decimal("0")
    total_expense = Decimal("0")
    for txn in transactions:
        if txn.transaction_type == TransactionType.INCOME:
            total_income += preferred_money(txn, settings).amount
        elif txn.transaction_type == TransactionType.EXPENSE:
            total_expense += preferred_money(txn, settings).amount

    by_period = running_balances(
        group_by_time(transactions, Granularity.MONTH, settings), total_opening
    )

    return AccountReport(
        filter=report_filter,
        summary=AccountSummary(
            opening_balance=total_opening,
            total_income=total_income,
            total_expense=total_expense,
            transaction_count=len(transactions),
        ),
        by_account=tuple(account_rows),
        by_period=tuple(by_period),
        by_account_type=tuple(
            rollup(account_rows, Dimension.ACCOUNT_TYPE, lambda a: a.account_type)
        ),
        by_currency=tuple(
            rollup(
                account_rows,
                Dimension.CURRENCY,
                lambda a: a.currency_code or settings.default_currency,
            )
        ),
        transactions=tuple(transactions),
        warnings=tuple(warnings),
        unavailable_account_ids=tuple(unavailable),
    )


class AccountBalanceAggregator:
    """Builds account reports against a ledger store."""

    def __init__(self, store: "LedgerStore", settings: ReportSettings = DEFAULT_SETTINGS):
        """Initialize account balance aggregator.

        Args:
            store: Ledger store answering opening-balance lookups
            settings: Engine settings
        """
        self.store = store
        self.settings = settings
        self.resolver = OpeningBalanceResolver(
            store.fetch_account_opening_balance, settings
        )

    def build(
        self, transactions: Sequence[Transaction], report_filter: ReportFilter
    ) -> AccountReport:
        """Filter entries and compute the account report for the filter window.

        Raises:
            ValidationError: If the filter lacks either date bound
        """
        validate_window(report_filter, "the account report")
        filtered = apply_filter(
            transactions, report_filter, self.settings.default_currency
        )
        valid, warnings = partition_valid(filtered, require_legs=True)
        accounts = distinct_accounts(valid)
        balances, unavailable = self.resolver.resolve(
            list(accounts), report_filter.date_from
        )
        if unavailable:
            logger.warning(
                "Account report is incomplete; opening balance unavailable for %s",
                unavailable,
            )
        logger.debug(
            "Account report over %d entries and %d accounts", len(valid), len(accounts)
        )
        return compute_account_report(
            valid,
            report_filter,
            balances,
            unavailable=unavailable,
            warnings=warnings,
            settings=self.settings,
        )
