"""Domain model entities for ledgerlens.

These are pure data classes representing ledger concepts and report values,
independent of the storage schema. Every report value is immutable so that a
report built twice from the same inputs compares equal.
"""

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import NamedTuple, Optional, Union

from ledgerlens.config import DEFAULT_CURRENCY


class TransactionType(str, Enum):
    """Kind of ledger entry."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class Granularity(str, Enum):
    """Time bucket size for period breakdowns."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class CompareOption(str, Enum):
    """How the previous window of a period comparison is derived."""

    PREVIOUS_MONTH = "previous-month"
    PREVIOUS_YEAR = "previous-year"
    PREVIOUS_PERIOD = "previous-period"


class Dimension(str, Enum):
    """Classification axis of an aggregate row."""

    PERIOD = "period"
    CATEGORY = "category"
    PARTNER = "partner"
    CREATOR = "creator"
    ACCOUNT = "account"
    CURRENCY = "currency"
    ACCOUNT_TYPE = "account_type"


class GroupKey(NamedTuple):
    """Typed composite key of an aggregate row."""

    dimension: Dimension
    value: Union[int, str]


@dataclass(frozen=True)
class Money:
    """Amount tagged with the unit it is expressed in."""

    amount: Decimal
    currency: str
    is_converted: bool = False


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: int
    name: str
    currency_code: Optional[str] = None
    account_type: Optional[str] = None
    opening_balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class Reference:
    """Named foreign reference (category, partner or creator)."""

    id: int
    name: str


@dataclass(frozen=True)
class Transaction:
    """Ledger entry domain entity.

    ``transaction_type`` holds the raw stored value when it is not a known
    ``TransactionType``; such entries are rejected before aggregation.
    """

    id: int
    date: date
    transaction_type: Union[TransactionType, str]
    amount: Decimal
    home_currency_amount: Optional[Decimal] = None
    source_account: Optional[Account] = None
    destination_account: Optional[Account] = None
    category: Optional[Reference] = None
    partner: Optional[Reference] = None
    creator: Optional[Reference] = None
    code: Optional[str] = None
    description: Optional[str] = None
    document_number: Optional[str] = None
    notes: Optional[str] = None

    @property
    def source_account_id(self) -> Optional[int]:
        return self.source_account.id if self.source_account else None

    @property
    def destination_account_id(self) -> Optional[int]:
        return self.destination_account.id if self.destination_account else None

    @property
    def category_id(self) -> Optional[int]:
        return self.category.id if self.category else None

    @property
    def partner_id(self) -> Optional[int]:
        return self.partner.id if self.partner else None

    @property
    def creator_id(self) -> Optional[int]:
        return self.creator.id if self.creator else None

    def currency_code(self, default: str = DEFAULT_CURRENCY) -> str:
        """Resolve the currency from the source leg, then the destination leg."""
        for account in (self.source_account, self.destination_account):
            if account is not None and account.currency_code:
                return account.currency_code
        return default

    def account_type(self) -> Optional[str]:
        """Resolve the account type from the source leg, then the destination leg."""
        for account in (self.source_account, self.destination_account):
            if account is not None and account.account_type:
                return account.account_type
        return None

    def preferred_amount(
        self, home_currency: str = DEFAULT_CURRENCY, default_currency: str = DEFAULT_CURRENCY
    ) -> Money:
        """Return the home-currency amount when present, else the native amount."""
        if self.home_currency_amount is not None:
            return Money(self.home_currency_amount, home_currency, is_converted=True)
        return Money(self.amount, self.currency_code(default_currency))


@dataclass(frozen=True)
class ReportFilter:
    """Report filter criteria.

    Date bounds are inclusive. Every populated inclusion set must match;
    empty sets impose no constraint.
    """

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    category_ids: frozenset[int] = frozenset()
    partner_ids: frozenset[int] = frozenset()
    creator_ids: frozenset[int] = frozenset()
    account_ids: frozenset[int] = frozenset()
    account_types: frozenset[str] = frozenset()
    transaction_types: frozenset[TransactionType] = frozenset()
    currencies: frozenset[str] = frozenset()
    keyword: Optional[str] = None

    def with_window(self, date_from: date, date_to: date) -> "ReportFilter":
        """Return a copy of the filter with a different date window."""
        return replace(self, date_from=date_from, date_to=date_to)


@dataclass(frozen=True)
class ReportWarning:
    """An entry rejected before aggregation."""

    transaction_id: int
    reason: str


@dataclass(frozen=True)
class AggregateRow:
    """Income/expense totals for one dimension key."""

    key: GroupKey
    name: Optional[str]
    income_total: Decimal
    expense_total: Decimal
    transaction_count: int
    currencies: tuple[str, ...] = ()

    @property
    def net_balance(self) -> Decimal:
        return self.income_total - self.expense_total

    @property
    def total_flow(self) -> Decimal:
        return self.income_total + self.expense_total

    @property
    def mixed_currency(self) -> bool:
        return len(self.currencies) > 1


@dataclass(frozen=True)
class TypeRow:
    """Total for one transaction type."""

    transaction_type: TransactionType
    amount_total: Decimal
    transaction_count: int
    currencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class RankedRow:
    """Top-N entry ranked by total flow."""

    key: GroupKey
    name: Optional[str]
    amount_total: Decimal
    transaction_count: int


@dataclass(frozen=True)
class Summary:
    """Period summary of a filtered transaction set."""

    total_income: Decimal
    total_expense: Decimal
    total_transfer: Decimal
    transaction_count: int
    income_count: int
    expense_count: int
    transfer_count: int
    currencies: tuple[str, ...] = ()

    @property
    def net_balance(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class ComparisonDelta:
    """Percent changes between the current and previous summaries."""

    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    transaction_count: Decimal


@dataclass(frozen=True)
class Comparison:
    """Period-over-period comparison."""

    option: CompareOption
    current_from: date
    current_to: date
    previous_from: date
    previous_to: date
    current: Summary
    previous: Summary
    change: ComparisonDelta


@dataclass(frozen=True)
class BalanceRow:
    """Opening/closing balance line of an account report.

    The closing balance is always ``opening + income - expense``.
    """

    key: GroupKey
    name: Optional[str]
    opening_balance: Decimal
    income_total: Decimal
    expense_total: Decimal
    transaction_count: int

    @property
    def closing_balance(self) -> Decimal:
        return self.opening_balance + self.income_total - self.expense_total


@dataclass(frozen=True)
class AccountBalanceRow:
    """Per-account balance line with its own monthly series."""

    account: Account
    opening_balance: Decimal
    income_total: Decimal
    expense_total: Decimal
    transaction_count: int
    periods: tuple[BalanceRow, ...] = ()
    opening_balance_available: bool = True

    @property
    def closing_balance(self) -> Decimal:
        return self.opening_balance + self.income_total - self.expense_total


@dataclass(frozen=True)
class AccountSummary:
    """Grand totals of an account report."""

    opening_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    transaction_count: int

    @property
    def closing_balance(self) -> Decimal:
        return self.opening_balance + self.total_income - self.total_expense


@dataclass(frozen=True)
class AccountReport:
    """Account balance report for one date window."""

    filter: ReportFilter
    summary: AccountSummary
    by_account: tuple[AccountBalanceRow, ...]
    by_period: tuple[BalanceRow, ...]
    by_account_type: tuple[BalanceRow, ...]
    by_currency: tuple[BalanceRow, ...]
    transactions: tuple[Transaction, ...]
    warnings: tuple[ReportWarning, ...] = ()
    unavailable_account_ids: tuple[int, ...] = ()

    @property
    def incomplete(self) -> bool:
        return bool(self.unavailable_account_ids)


@dataclass(frozen=True)
class Report:
    """Financial report assembled from every aggregator."""

    filter: ReportFilter
    granularity: Granularity
    summary: Summary
    transactions: tuple[Transaction, ...]
    by_time: tuple[AggregateRow, ...]
    by_week: tuple[AggregateRow, ...]
    by_category: tuple[AggregateRow, ...]
    by_partner: tuple[AggregateRow, ...]
    by_creator: tuple[AggregateRow, ...]
    by_account: tuple[AggregateRow, ...]
    by_currency: tuple[AggregateRow, ...]
    by_type: tuple[TypeRow, ...]
    top_transactions: tuple[Transaction, ...]
    top_categories: tuple[RankedRow, ...]
    top_partners: tuple[RankedRow, ...]
    comparison: Optional[Comparison] = None
    warnings: tuple[ReportWarning, ...] = ()
