"""Domain layer for ledgerlens application."""

from ledgerlens.domain.account import AccountService
from ledgerlens.domain.report import ReportService
from ledgerlens.domain.transaction import TransactionService

__all__ = [
    "AccountService",
    "ReportService",
    "TransactionService",
]
