"""Account domain service."""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from ledgerlens.domain import errors
from ledgerlens.domain.entities import Account as AccountEntity

if TYPE_CHECKING:
    from ledgerlens.database.base import LedgerStore


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: "LedgerStore"):
        """Initialize account service.

        Args:
            db: Ledger store instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        currency_code: Optional[str] = None,
        account_type: Optional[str] = None,
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            currency_code: Optional ISO currency code of the account
            account_type: Optional account type label (e.g. cash, bank)
            opening_balance: Balance before the first recorded entry

        Returns:
            Account ID

        Raises:
            ConflictError: If account name already exists
            ValidationError: If the name is blank
        """
        if not name or not name.strip():
            raise errors.ValidationError("Account name cannot be empty")

        for acc in self.db.list_accounts():
            if acc.name == name:
                raise errors.ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            name=name,
            currency_code=currency_code.upper() if currency_code else None,
            account_type=account_type,
            opening_balance=opening_balance,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()
