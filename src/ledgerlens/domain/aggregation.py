"""Dimension aggregators for financial reports.

Each aggregator folds an already filtered, already validated sequence of
ledger entries into one row per key that actually occurs. Every monetary
value goes through ``Transaction.preferred_amount`` so raw and converted
amounts are never mixed silently; the units folded into a row are recorded
on the row itself.
"""

from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from ledgerlens.config import DEFAULT_SETTINGS, ReportSettings
from ledgerlens.domain.entities import (
    AggregateRow,
    Dimension,
    Granularity,
    GroupKey,
    Money,
    Summary,
    Transaction,
    TransactionType,
    TypeRow,
)
from ledgerlens.domain.periods import period_key

KeyFunc = Callable[[Transaction], Optional[tuple[GroupKey, Optional[str]]]]


class FlowAccumulator:
    """Mutable running totals for one group."""

    __slots__ = ("name", "income", "expense", "count", "units")

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self.income = Decimal("0")
        self.expense = Decimal("0")
        self.count = 0
        self.units: set[str] = set()

    def add_income(self, money: Money) -> None:
        self.income += money.amount
        self.units.add(money.currency)

    def add_expense(self, money: Money) -> None:
        self.expense += money.amount
        self.units.add(money.currency)

    def add(self, txn_type: TransactionType, money: Money) -> None:
        """Count one entry, booking income and expense by type.

        Transfers only count; they move money between accounts and do not
        change income or expense outside the account dimension.
        """
        if txn_type == TransactionType.INCOME:
            self.add_income(money)
        elif txn_type == TransactionType.EXPENSE:
            self.add_expense(money)
        self.count += 1

    def to_row(self, key: GroupKey) -> AggregateRow:
        return AggregateRow(
            key=key,
            name=self.name,
            income_total=self.income,
            expense_total=self.expense,
            transaction_count=self.count,
            currencies=tuple(sorted(self.units)),
        )


def preferred_money(
    txn: Transaction, settings: ReportSettings = DEFAULT_SETTINGS
) -> Money:
    """Apply the home-currency preference rule with the configured units."""
    return txn.preferred_amount(settings.home_currency, settings.default_currency)


def sort_by_flow(rows: Iterable[AggregateRow]) -> list[AggregateRow]:
    """Sort rows by total flow, largest first, keeping input order for ties."""
    return sorted(rows, key=lambda row: row.total_flow, reverse=True)


def aggregate_flows(
    transactions: Iterable[Transaction],
    key_func: KeyFunc,
    settings: ReportSettings = DEFAULT_SETTINGS,
) -> list[AggregateRow]:
    """Group entries by key and fold income/expense totals.

    Entries for which ``key_func`` returns None are left out of every group.

    Args:
        transactions: Entries to fold
        key_func: Returns (key, display name) for an entry, or None
        settings: Amount unit settings

    Returns:
        Rows in first-appearance order of their keys
    """
    groups: dict[GroupKey, FlowAccumulator] = {}
    for txn in transactions:
        resolved = key_func(txn)
        if resolved is None:
            continue
        key, name = resolved
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = FlowAccumulator(name)
        acc.add(txn.transaction_type, preferred_money(txn, settings))
    return [acc.to_row(key) for key, acc in groups.items()]


def group_by_time(
    transactions: Iterable[Transaction],
    granularity: Granularity = Granularity.MONTH,
    settings: ReportSettings = DEFAULT_SETTINGS,
) -> list[AggregateRow]:
    """Group entries into time buckets, sorted by period key."""

    def key_func(txn: Transaction):
        key = period_key(txn.date, granularity)
        return GroupKey(Dimension.PERIOD, key), key

    rows = aggregate_flows(transactions, key_func, settings)
    return sorted(rows, key=lambda row: row.key.value)


def group_by_category(
    transactions: Iterable[Transaction], settings: ReportSettings = DEFAULT_SETTINGS
) -> list[AggregateRow]:
    """Group entries by category."""

    def key_func(txn: Transaction):
        if txn.category is None:
            return None
        return GroupKey(Dimension.CATEGORY, txn.category.id), txn.category.name

    return sort_by_flow(aggregate_flows(transactions, key_func, settings))


def group_by_partner(
    transactions: Iterable[Transaction], settings: ReportSettings = DEFAULT_SETTINGS
) -> list[AggregateRow]:
    """Group entries by partner."""

    def key_func(txn: Transaction):
        if txn.partner is None:
            return None
        return GroupKey(Dimension.PARTNER, txn.partner.id), txn.partner.name

    return sort_by_flow(aggregate_flows(transactions, key_func, settings))


def group_by_creator(
    transactions: Iterable[Transaction], settings: ReportSettings = DEFAULT_SETTINGS
) -> list[AggregateRow]:
    """Group entries by the user who recorded them."""

    def key_func(txn: Transaction):
        if txn.creator is None:
            return None
        return GroupKey(Dimension.CREATOR, txn.creator.id), txn.creator.name

    return sort_by_flow(aggregate_flows(transactions, key_func, settings))


def group_by_currency(
    transactions: Iterable[Transaction], settings: ReportSettings = DEFAULT_SETTINGS
) -> list[AggregateRow]:
    """Group entries by their derived currency code."""

    def key_func(txn: Transaction):
        code = txn.currency_code(settings.default_currency)
        return GroupKey(Dimension.CURRENCY, code), code

    return sort_by_flow(aggregate_flows(transactions, key_func, settings))


def group_by_account(
    transactions: Iterable[Transaction], settings: ReportSettings = DEFAULT_SETTINGS
) -> list[AggregateRow]:
    """Group entries by account, booking each leg separately.

    The source leg of an expense or transfer is an expense of that account;
    the destination leg of an income or transfer is an income of that
    account. A transfer therefore touches two rows with equal amounts.
    """
    groups: dict[GroupKey, FlowAccumulator] = {}

    def acc_for(account) -> FlowAccumulator:
        key = GroupKey(Dimension.ACCOUNT, account.id)
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = FlowAccumulator(account.name)
        return acc

    for txn in transactions:
        money = preferred_money(txn, settings)
        kind = txn.transaction_type
        if txn.source_account is not None:
            acc = acc_for(txn.source_account)
            if kind in (TransactionType.EXPENSE, TransactionType.TRANSFER):
                acc.add_expense(money)
            acc.count += 1
        if txn.destination_account is not None:
            acc = acc_for(txn.destination_account)
            if kind in (TransactionType.INCOME, TransactionType.TRANSFER):
                acc.add_income(money)
            acc.count += 1

    return sort_by_flow(acc.to_row(key) for key, acc in groups.items())


def group_by_type(
    transactions: Iterable[Transaction], settings: ReportSettings = DEFAULT_SETTINGS
) -> list[TypeRow]:
    """Total entries per transaction type, in Income/Expense/Transfer order."""
    totals: dict[TransactionType, Decimal] = {}
    counts: dict[TransactionType, int] = {}
    units: dict[TransactionType, set[str]] = {}
    for txn in transactions:
        kind = txn.transaction_type
        money = preferred_money(txn, settings)
        totals[kind] = totals.get(kind, Decimal("0")) + money.amount
        counts[kind] = counts.get(kind, 0) + 1
        units.setdefault(kind, set()).add(money.currency)

    return [
        TypeRow(
            transaction_type=kind,
            amount_total=totals[kind],
            transaction_count=counts[kind],
            currencies=tuple(sorted(units[kind])),
        )
        for kind in TransactionType
        if kind in totals
    ]


def summarize(
    transactions: Sequence[Transaction], settings: ReportSettings = DEFAULT_SETTINGS
) -> Summary:
    """Compute the type-independent summary of an entry set."""
    totals = {kind: Decimal("0") for kind in TransactionType}
    counts = {kind: 0 for kind in TransactionType}
    units: set[str] = set()

    for txn in transactions:
        money = preferred_money(txn, settings)
        totals[txn.transaction_type] += money.amount
        counts[txn.transaction_type] += 1
        units.add(money.currency)

    return Summary(
        total_income=totals[TransactionType.INCOME],
        total_expense=totals[TransactionType.EXPENSE],
        total_transfer=totals[TransactionType.TRANSFER],
        transaction_count=len(transactions),
        income_count=counts[TransactionType.INCOME],
        expense_count=counts[TransactionType.EXPENSE],
        transfer_count=counts[TransactionType.TRANSFER],
        currencies=tuple(sorted(units)),
    )
