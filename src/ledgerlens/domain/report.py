"""Report orchestration domain service."""

import logging
from typing import TYPE_CHECKING, Optional

from ledgerlens.config import DEFAULT_SETTINGS, ReportSettings
from ledgerlens.domain.aggregation import (
    group_by_account,
    group_by_category,
    group_by_creator,
    group_by_currency,
    group_by_partner,
    group_by_time,
    group_by_type,
    summarize,
)
from ledgerlens.domain.balances import AccountBalanceAggregator
from ledgerlens.domain.comparison import PeriodComparator
from ledgerlens.domain.entities import (
    AccountReport,
    CompareOption,
    Granularity,
    Report,
    ReportFilter,
    ReportWarning,
    Summary,
    Transaction,
)
from ledgerlens.domain.filters import apply_filter, partition_valid, validate_window
from ledgerlens.domain.ranking import top_groups, top_transactions

if TYPE_CHECKING:
    from ledgerlens.database.base import LedgerStore

logger = logging.getLogger(__name__)


class ReportService:
    """Service for building financial and account reports."""

    def __init__(self, db: "LedgerStore", settings: ReportSettings = DEFAULT_SETTINGS):
        """Initialize report service.

        Args:
            db: Ledger store instance
            settings: Report engine settings
        """
        self.db = db
        self.settings = settings
        self.comparator = PeriodComparator(self.summarize_window)
        self.account_aggregator = AccountBalanceAggregator(db, settings)

    def _load(
        self, report_filter: ReportFilter
    ) -> tuple[list[Transaction], list[ReportWarning]]:
        """Fetch entries, re-apply the full filter and drop invalid entries."""
        fetched = self.db.fetch_transactions(report_filter)
        filtered = apply_filter(fetched, report_filter, self.settings.default_currency)
        logger.debug(
            "Filter kept %d of %d fetched transactions", len(filtered), len(fetched)
        )
        return partition_valid(filtered)

    def summarize_window(self, report_filter: ReportFilter) -> Summary:
        """Compute the summary of one filter window.

        Raises:
            ValidationError: If the filter lacks either date bound
        """
        validate_window(report_filter, "period comparison")
        transactions, _ = self._load(report_filter)
        return summarize(transactions, self.settings)

    def build_report(
        self,
        report_filter: ReportFilter,
        granularity: Granularity = Granularity.MONTH,
        compare: Optional[CompareOption] = None,
        top_n: Optional[int] = None,
    ) -> Report:
        """Build the financial report for a filter.

        Args:
            report_filter: Selection of entries; dates optional unless comparing
            granularity: Bucket size of the time breakdown
            compare: Optional comparison with a preceding window
            top_n: Size of the rankings; defaults to ``settings.top_n``

        Returns:
            Report with summary, every dimension breakdown, rankings and the
            optional comparison

        Raises:
            ValidationError: If ``compare`` is given without both date bounds
        """
        granularity = Granularity(granularity)
        limit = self.settings.top_n if top_n is None else top_n
        if compare is not None:
            validate_window(report_filter, "period comparison")

        transactions, warnings = self._load(report_filter)

        by_category = group_by_category(transactions, self.settings)
        by_partner = group_by_partner(transactions, self.settings)
        comparison = None
        if compare is not None:
            comparison = self.comparator.compare(report_filter, compare)

        logger.debug(
            "Built report over %d transactions (%d skipped)",
            len(transactions),
            len(warnings),
        )
        return Report(
            filter=report_filter,
            granularity=granularity,
            summary=summarize(transactions, self.settings),
            transactions=tuple(transactions),
            by_time=tuple(group_by_time(transactions, granularity, self.settings)),
            by_week=tuple(group_by_time(transactions, Granularity.WEEK, self.settings)),
            by_category=tuple(by_category),
            by_partner=tuple(by_partner),
            by_creator=tuple(group_by_creator(transactions, self.settings)),
            by_account=tuple(group_by_account(transactions, self.settings)),
            by_currency=tuple(group_by_currency(transactions, self.settings)),
            by_type=tuple(group_by_type(transactions, self.settings)),
            top_transactions=tuple(top_transactions(transactions, limit, self.settings)),
            top_categories=tuple(top_groups(by_category, limit)),
            top_partners=tuple(top_groups(by_partner, limit)),
            comparison=comparison,
            warnings=tuple(warnings),
        )

    def build_account_report(self, report_filter: ReportFilter) -> AccountReport:
        """Build the account balance report for a filter window.

        Raises:
            ValidationError: If the filter lacks either date bound
        """
        validate_window(report_filter, "the account report")
        transactions = self.db.fetch_transactions(report_filter)
        return self.account_aggregator.build(transactions, report_filter)
