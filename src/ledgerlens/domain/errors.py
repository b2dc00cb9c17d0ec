"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class LookupFailure(DomainError):
    """The ledger store could not answer a sub-query for one account."""

    def __init__(self, account_id: int, message: Optional[str] = None):
        self.account_id = account_id
        super().__init__(message or f"Opening balance lookup failed for account {account_id}")


class InvalidStateError(DomainError):
    """A ledger entry that cannot take part in aggregation."""

    def __init__(self, transaction_id: int, reason: str):
        self.transaction_id = transaction_id
        self.reason = reason
        super().__init__(f"Transaction {transaction_id}: {reason}")


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def date_range_required(operation: str) -> str:
    """Return message when an operation needs both date bounds."""
    return f"Both a start date and an end date are required for {operation}"


def date_range_inverted(date_from, date_to) -> str:
    """Return message when the start date is after the end date."""
    return f"Start date {date_from} is after end date {date_to}"


def same_source_and_destination(account_id: int) -> str:
    """Return reason for an entry whose legs point at one account."""
    return f"source and destination are both account {account_id}"


def unknown_transaction_type(value: object) -> str:
    """Return reason for an unrecognized transaction type."""
    return f"unrecognized transaction type {value!r}"


def missing_leg(transaction_type: str, leg: str) -> str:
    """Return reason for an entry lacking a required account leg."""
    return f"{transaction_type} entry has no {leg} account"
