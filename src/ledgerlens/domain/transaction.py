"""Transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from ledgerlens.domain import errors
from ledgerlens.domain.entities import TransactionType

if TYPE_CHECKING:
    from ledgerlens.database.base import LedgerStore

# Account legs each type must carry
REQUIRED_LEGS = {
    TransactionType.INCOME: ("destination",),
    TransactionType.EXPENSE: ("source",),
    TransactionType.TRANSFER: ("source", "destination"),
}


class TransactionService:
    """Service for recording ledger entries."""

    def __init__(self, db: "LedgerStore"):
        """Initialize transaction service.

        Args:
            db: Ledger store instance
        """
        self.db = db

    def create_transaction(
        self,
        date: date,
        transaction_type: TransactionType,
        amount: Decimal,
        home_currency_amount: Optional[Decimal] = None,
        source_account_id: Optional[int] = None,
        destination_account_id: Optional[int] = None,
        category: Optional[str] = None,
        partner: Optional[str] = None,
        creator: Optional[str] = None,
        code: Optional[str] = None,
        description: Optional[str] = None,
        document_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Record a ledger entry.

        Args:
            date: Entry date
            transaction_type: Income, expense or transfer
            amount: Amount in the account's own currency
            home_currency_amount: Optional amount already converted to the home currency
            source_account_id: Account money leaves (expense, transfer)
            destination_account_id: Account money enters (income, transfer)
            category: Optional category name, created if missing
            partner: Optional counterparty name, created if missing
            creator: Optional name of the user recording the entry, created if missing
            code: Optional entry code
            description: Optional description
            document_number: Optional supporting document number
            notes: Optional notes

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the type is unknown, the amount is negative,
                a required leg is missing or both legs are the same account
            NotFoundError: If an account doesn't exist
        """
        try:
            transaction_type = TransactionType(transaction_type)
        except ValueError:
            raise errors.ValidationError(errors.unknown_transaction_type(transaction_type))

        if amount < 0:
            raise errors.ValidationError("Amount cannot be negative")
        if home_currency_amount is not None and home_currency_amount < 0:
            raise errors.ValidationError("Home currency amount cannot be negative")

        legs = {"source": source_account_id, "destination": destination_account_id}
        for leg in REQUIRED_LEGS[transaction_type]:
            if legs[leg] is None:
                raise errors.ValidationError(errors.missing_leg(transaction_type.value, leg))

        if source_account_id is not None and source_account_id == destination_account_id:
            raise errors.ValidationError(
                errors.same_source_and_destination(source_account_id)
            )

        for account_id in (source_account_id, destination_account_id):
            if account_id is not None and self.db.get_account(account_id) is None:
                raise errors.NotFoundError(errors.account_not_found(account_id))

        category_id = self._reference_id("category", category)
        partner_id = self._reference_id("partner", partner)
        creator_id = self._reference_id("creator", creator)

        return self.db.create_transaction(
            date=date,
            transaction_type=transaction_type,
            amount=amount,
            home_currency_amount=home_currency_amount,
            source_account_id=source_account_id,
            destination_account_id=destination_account_id,
            category_id=category_id,
            partner_id=partner_id,
            creator_id=creator_id,
            code=code,
            description=description,
            document_number=document_number,
            notes=notes,
        )

    def _reference_id(self, kind: str, name: Optional[str]) -> Optional[int]:
        if name is None or not name.strip():
            return None
        return self.db.get_or_create_reference(kind, name.strip()).id
