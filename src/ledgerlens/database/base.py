"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerlens.domain.entities import (
    Account,
    Reference,
    ReportFilter,
    Transaction,
    TransactionType,
)

REFERENCE_KINDS = ("category", "partner", "creator")


class LedgerStore(ABC):
    """Abstract ledger store for ledgerlens."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        currency_code: Optional[str] = None,
        account_type: Optional[str] = None,
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Reference operations
    @abstractmethod
    def get_or_create_reference(self, kind: str, name: str) -> Reference:
        """Get a category, partner or creator by name, creating it if missing.

        Args:
            kind: One of REFERENCE_KINDS
            name: Display name
        """
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        date: date,
        transaction_type: TransactionType,
        amount: Decimal,
        home_currency_amount: Optional[Decimal] = None,
        source_account_id: Optional[int] = None,
        destination_account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        partner_id: Optional[int] = None,
        creator_id: Optional[int] = None,
        code: Optional[str] = None,
        description: Optional[str] = None,
        document_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a ledger entry. Returns transaction ID."""
        pass

    @abstractmethod
    def fetch_transactions(self, report_filter: ReportFilter) -> list[Transaction]:
        """Fetch entries for a report filter.

        Implementations may narrow the result using any part of the filter;
        callers re-apply the full filter in memory.
        """
        pass

    @abstractmethod
    def fetch_account_opening_balance(self, account_id: int, as_of: date) -> Decimal:
        """Get an account's balance before any entry dated on or after ``as_of``.

        Raises:
            LookupFailure: If the account does not exist or cannot be read
        """
        pass
