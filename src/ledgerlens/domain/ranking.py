"""Top-N rankings of entries and groups."""

from typing import Iterable, Sequence

from ledgerlens.config import DEFAULT_SETTINGS, ReportSettings
from ledgerlens.domain.aggregation import preferred_money, sort_by_flow
from ledgerlens.domain.entities import AggregateRow, RankedRow, Transaction


def top_transactions(
    transactions: Sequence[Transaction],
    limit: int = 10,
    settings: ReportSettings = DEFAULT_SETTINGS,
) -> list[Transaction]:
    """Return the largest entries by preferred amount, ties in input order."""
    ranked = sorted(
        transactions,
        key=lambda txn: preferred_money(txn, settings).amount,
        reverse=True,
    )
    return ranked[:limit]


def top_groups(rows: Iterable[AggregateRow], limit: int = 10) -> list[RankedRow]:
    """Rank grouped totals by total flow and keep the first ``limit`` rows."""
    return [
        RankedRow(
            key=row.key,
            name=row.name,
            amount_total=row.total_flow,
            transaction_count=row.transaction_count,
        )
        for row in sort_by_flow(rows)[:limit]
    ]
