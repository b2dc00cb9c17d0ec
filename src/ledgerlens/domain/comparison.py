"""Period-over-period comparison."""

import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Callable, Union

from ledgerlens.domain.entities import (
    CompareOption,
    Comparison,
    ComparisonDelta,
    ReportFilter,
    Summary,
)
from ledgerlens.domain.filters import validate_window
from ledgerlens.domain.periods import previous_window

logger = logging.getLogger(__name__)

Number = Union[Decimal, int]

HUNDRED = Decimal("100")


def percent_change(current: Number, previous: Number) -> Decimal:
    """Percent change of a non-negative metric.

    A zero previous value yields 100 when the current value is positive and
    0 otherwise.
    """
    current, previous = Decimal(current), Decimal(previous)
    if previous == 0:
        return HUNDRED if current > 0 else Decimal("0")
    return (current - previous) / previous * HUNDRED


def signed_percent_change(current: Number, previous: Number) -> Decimal:
    """Percent change of a signed metric such as a net balance.

    The change is taken relative to the magnitude of the previous value so a
    recovery from a negative balance reads as an increase.
    """
    current, previous = Decimal(current), Decimal(previous)
    if previous == 0:
        if current > 0:
            return HUNDRED
        if current < 0:
            return -HUNDRED
        return Decimal("0")
    return (current - previous) / abs(previous) * HUNDRED


def compare_summaries(current: Summary, previous: Summary) -> ComparisonDelta:
    """Compute percent deltas between two summaries."""
    return ComparisonDelta(
        total_income=percent_change(current.total_income, previous.total_income),
        total_expense=percent_change(current.total_expense, previous.total_expense),
        net_balance=signed_percent_change(current.net_balance, previous.net_balance),
        transaction_count=percent_change(
            current.transaction_count, previous.transaction_count
        ),
    )


class PeriodComparator:
    """Compares a report window with the window preceding it."""

    def __init__(self, summarize_window: Callable[[ReportFilter], Summary]):
        """Initialize period comparator.

        Args:
            summarize_window: Computes the summary of one filter
        """
        self.summarize_window = summarize_window

    def compare(self, report_filter: ReportFilter, option: CompareOption) -> Comparison:
        """Summarize the current and previous windows and compute deltas.

        Args:
            report_filter: Filter of the current window; both dates required
            option: How to derive the previous window

        Returns:
            Comparison of the two windows

        Raises:
            ValidationError: If the filter lacks either date bound
        """
        validate_window(report_filter, "period comparison")
        option = CompareOption(option)
        previous_from, previous_to = previous_window(
            report_filter.date_from, report_filter.date_to, option
        )
        previous_filter = report_filter.with_window(previous_from, previous_to)
        logger.debug(
            "Comparing %s..%s with %s..%s",
            report_filter.date_from,
            report_filter.date_to,
            previous_from,
            previous_to,
        )

        with ThreadPoolExecutor(max_workers=2) as executor:
            current_future = executor.submit(self.summarize_window, report_filter)
            previous_future = executor.submit(self.summarize_window, previous_filter)
            current = current_future.result()
            previous = previous_future.result()

        return Comparison(
            option=option,
            current_from=report_filter.date_from,
            current_to=report_filter.date_to,
            previous_from=previous_from,
            previous_to=previous_to,
            current=current,
            previous=previous,
            change=compare_summaries(current, previous),
        )
