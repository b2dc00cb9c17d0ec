"""Report filter evaluation and ledger entry validation."""

import logging
from typing import Iterable, Optional, Sequence

from ledgerlens.domain import errors
from ledgerlens.domain.entities import (
    DEFAULT_CURRENCY,
    ReportFilter,
    ReportWarning,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)


def _keyword_fields(txn: Transaction) -> tuple[Optional[str], ...]:
    return (txn.code, txn.description, txn.document_number, txn.notes)


def matches_keyword(txn: Transaction, keyword: str) -> bool:
    """Case-insensitive substring match over the entry's text fields."""
    needle = keyword.casefold()
    return any(
        text is not None and needle in text.casefold() for text in _keyword_fields(txn)
    )


def matches_filter(
    txn: Transaction, report_filter: ReportFilter, default_currency: str = DEFAULT_CURRENCY
) -> bool:
    """Check whether one entry passes every populated filter dimension."""
    f = report_filter
    if f.date_from is not None and txn.date < f.date_from:
        return False
    if f.date_to is not None and txn.date > f.date_to:
        return False
    if f.category_ids and txn.category_id not in f.category_ids:
        return False
    if f.partner_ids and txn.partner_id not in f.partner_ids:
        return False
    if f.creator_ids and txn.creator_id not in f.creator_ids:
        return False
    if f.transaction_types and txn.transaction_type not in f.transaction_types:
        return False
    if f.account_ids and not (
        txn.source_account_id in f.account_ids
        or txn.destination_account_id in f.account_ids
    ):
        return False
    if f.account_types and txn.account_type() not in f.account_types:
        return False
    if f.currencies and txn.currency_code(default_currency) not in f.currencies:
        return False
    if f.keyword and not matches_keyword(txn, f.keyword):
        return False
    return True


def apply_filter(
    transactions: Iterable[Transaction],
    report_filter: ReportFilter,
    default_currency: str = DEFAULT_CURRENCY,
) -> list[Transaction]:
    """Return the entries matching the filter, preserving input order."""
    return [
        txn
        for txn in transactions
        if matches_filter(txn, report_filter, default_currency)
    ]


def check_entry(txn: Transaction) -> Optional[str]:
    """Return the reason an entry cannot be aggregated, or None if it is valid."""
    if not isinstance(txn.transaction_type, TransactionType):
        return errors.unknown_transaction_type(txn.transaction_type)
    if (
        txn.source_account_id is not None
        and txn.source_account_id == txn.destination_account_id
    ):
        return errors.same_source_and_destination(txn.source_account_id)
    return None


def check_legs(txn: Transaction) -> Optional[str]:
    """Return the reason an entry lacks an account leg its type requires."""
    kind = txn.transaction_type
    if kind in (TransactionType.EXPENSE, TransactionType.TRANSFER):
        if txn.source_account is None:
            return errors.missing_leg(kind.value, "source")
    if kind in (TransactionType.INCOME, TransactionType.TRANSFER):
        if txn.destination_account is None:
            return errors.missing_leg(kind.value, "destination")
    return None


def partition_valid(
    transactions: Sequence[Transaction], require_legs: bool = False
) -> tuple[list[Transaction], list[ReportWarning]]:
    """Split entries into aggregatable ones and warnings for rejected ones.

    Args:
        transactions: Entries to check
        require_legs: If True, also reject entries missing a required account leg

    Returns:
        Tuple of (valid entries, warnings)
    """
    valid: list[Transaction] = []
    warnings: list[ReportWarning] = []
    for txn in transactions:
        reason = check_entry(txn)
        if reason is None and require_legs:
            reason = check_legs(txn)
        if reason is None:
            valid.append(txn)
            continue
        logger.warning("Skipping transaction %s: %s", txn.id, reason)
        warnings.append(ReportWarning(transaction_id=txn.id, reason=reason))
    return valid, warnings


def validate_window(report_filter: ReportFilter, operation: str) -> None:
    """Require both date bounds, in order.

    Raises:
        ValidationError: If either bound is missing or the range is inverted
    """
    if report_filter.date_from is None or report_filter.date_to is None:
        raise errors.ValidationError(errors.date_range_required(operation))
    if report_filter.date_from > report_filter.date_to:
        raise errors.ValidationError(
            errors.date_range_inverted(report_filter.date_from, report_filter.date_to)
        )
