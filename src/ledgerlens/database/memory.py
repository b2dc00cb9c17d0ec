"""In-memory ledger store.

Holds domain entities in dictionaries. Used by tests and by callers that
already have entries in hand and only want the report engine.
"""

import threading
from datetime import date
from decimal import Decimal
from itertools import count
from typing import Iterable, Optional

from ledgerlens.database.base import LedgerStore, REFERENCE_KINDS
from ledgerlens.domain import errors
from ledgerlens.domain.balances import opening_balance_as_of
from ledgerlens.domain.entities import (
    Account,
    Reference,
    ReportFilter,
    Transaction,
    TransactionType,
)
from ledgerlens.domain.filters import apply_filter


class InMemoryLedgerStore(LedgerStore):
    """LedgerStore backed by plain dictionaries."""

    def __init__(
        self,
        accounts: Iterable[Account] = (),
        transactions: Iterable[Transaction] = (),
    ):
        """Initialize in-memory ledger store.

        Args:
            accounts: Accounts to preload
            transactions: Entries to preload; their accounts are registered too
        """
        self._lock = threading.Lock()
        self._ids = count(1)
        self.accounts: dict[int, Account] = {}
        self.references: dict[str, dict[str, Reference]] = {
            kind: {} for kind in REFERENCE_KINDS
        }
        self.transactions: dict[int, Transaction] = {}
        for account in accounts:
            self.accounts[account.id] = account
        for txn in transactions:
            self.add_transaction(txn)

    def _next_id(self) -> int:
        # Caller holds self._lock.
        taken = set(self.accounts) | set(self.transactions)
        new_id = next(self._ids)
        while new_id in taken:
            new_id = next(self._ids)
        return new_id

    def connect(self) -> None:
        """Connect to the store."""
        pass

    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    def initialize_schema(self) -> None:
        """Initialize storage schema."""
        pass

    def add_transaction(self, txn: Transaction) -> None:
        """Store a prebuilt entry, registering the accounts on its legs."""
        with self._lock:
            for account in (txn.source_account, txn.destination_account):
                if account is not None:
                    self.accounts.setdefault(account.id, account)
            self.transactions[txn.id] = txn

    # Account operations
    def create_account(
        self,
        name: str,
        currency_code: Optional[str] = None,
        account_type: Optional[str] = None,
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account. Returns account ID."""
        with self._lock:
            if any(acc.name == name for acc in self.accounts.values()):
                raise errors.ConflictError(f"Account '{name}' already exists")
            account_id = self._next_id()
            self.accounts[account_id] = Account(
                id=account_id,
                name=name,
                currency_code=currency_code,
                account_type=account_type,
                opening_balance=opening_balance,
            )
        return account_id

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        return self.accounts.get(account_id)

    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        return sorted(self.accounts.values(), key=lambda acc: acc.name)

    # Reference operations
    def get_or_create_reference(self, kind: str, name: str) -> Reference:
        """Get a category, partner or creator by name, creating it if missing."""
        if kind not in REFERENCE_KINDS:
            raise ValueError(f"Unknown reference kind '{kind}'")
        with self._lock:
            refs = self.references[kind]
            if name not in refs:
                refs[name] = Reference(id=len(refs) + 1, name=name)
            return refs[name]

    def _reference_by_id(self, kind: str, ref_id: Optional[int]) -> Optional[Reference]:
        if ref_id is None:
            return None
        for ref in self.references[kind].values():
            if ref.id == ref_id:
                return ref
        raise errors.NotFoundError(f"{kind.capitalize()} {ref_id} not found")

    # Transaction operations
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
        with self._lock:
            txn_id = self._next_id()
            self.transactions[txn_id] = Transaction(
                id=txn_id,
                date=date,
                transaction_type=TransactionType(transaction_type),
                amount=amount,
                home_currency_amount=home_currency_amount,
                source_account=self._account_or_none(source_account_id),
                destination_account=self._account_or_none(destination_account_id),
                category=self._reference_by_id("category", category_id),
                partner=self._reference_by_id("partner", partner_id),
                creator=self._reference_by_id("creator", creator_id),
                code=code,
                description=description,
                document_number=document_number,
                notes=notes,
            )
        return txn_id

    def _account_or_none(self, account_id: Optional[int]) -> Optional[Account]:
        if account_id is None:
            return None
        account = self.accounts.get(account_id)
        if account is None:
            raise errors.NotFoundError(errors.account_not_found(account_id))
        return account

    def fetch_transactions(self, report_filter: ReportFilter) -> list[Transaction]:
        """Fetch entries inside the filter window, newest first."""
        entries = sorted(
            self.transactions.values(), key=lambda t: (t.date, t.id), reverse=True
        )
        window = ReportFilter(date_from=report_filter.date_from, date_to=report_filter.date_to)
        return apply_filter(entries, window)

    def fetch_account_opening_balance(self, account_id: int, as_of: date) -> Decimal:
        """Fold an account's history before ``as_of`` onto its opening balance.

        Raises:
            LookupFailure: If the account does not exist
        """
        account = self.accounts.get(account_id)
        if account is None:
            raise errors.LookupFailure(account_id, errors.account_not_found(account_id))
        history = [
            txn
            for txn in self.transactions.values()
            if account_id in (txn.source_account_id, txn.destination_account_id)
        ]
        return opening_balance_as_of(account, history, as_of)
