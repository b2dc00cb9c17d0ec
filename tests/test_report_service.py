"""Tests for the report orchestrator."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from ledgerlens.config import ReportSettings
from ledgerlens.database.memory import InMemoryLedgerStore
from ledgerlens.domain.entities import (
    CompareOption,
    Granularity,
    ReportFilter,
    TransactionType,
)
from ledgerlens.domain.errors import ValidationError
from ledgerlens.domain.report import ReportService


@pytest.fixture
def ledger(make_txn, wallet, bank, usd_card):
    return [
        make_txn(TransactionType.INCOME, "400000", date(2024, 1, 25), destination=bank, category=(1, "Salary")),
        make_txn(TransactionType.INCOME, "1000000", date(2024, 2, 1), destination=bank, category=(1, "Salary"), partner=(10, "Acme")),
        make_txn(TransactionType.EXPENSE, "250000", date(2024, 2, 3), source=wallet, category=(2, "Food"), partner=(11, "Market")),
        make_txn(TransactionType.EXPENSE, "8", date(2024, 2, 5), source=usd_card, home_amount="200000", category=(2, "Food")),
        make_txn(TransactionType.TRANSFER, "300000", date(2024, 2, 6), source=bank, destination=wallet),
        make_txn("refund", "1", date(2024, 2, 7), destination=wallet),
    ]


@pytest.fixture
def service(ledger):
    return ReportService(InMemoryLedgerStore(transactions=ledger))


FEBRUARY = ReportFilter(date_from=date(2024, 2, 1), date_to=date(2024, 2, 29))


def test_build_report_assembles_every_section(service):
    report = service.build_report(FEBRUARY)

    assert report.granularity is Granularity.MONTH
    assert report.summary.total_income == Decimal("1000000")
    assert report.summary.total_expense == Decimal("450000")
    assert report.summary.total_transfer == Decimal("300000")
    assert report.summary.transaction_count == 4
    assert [row.name for row in report.by_time] == ["2024-02"]
    assert [row.name for row in report.by_week] == ["2024-W5", "2024-W6"]
    assert [row.name for row in report.by_category] == ["Salary", "Food"]
    assert {row.name for row in report.by_partner} == {"Acme", "Market"}
    assert {row.name for row in report.by_currency} == {"VND", "USD"}
    assert len(report.by_account) == 3
    assert [row.transaction_type for row in report.by_type] == [
        TransactionType.INCOME,
        TransactionType.EXPENSE,
        TransactionType.TRANSFER,
    ]
    assert report.top_transactions[0].amount == Decimal("1000000")
    assert [row.name for row in report.top_categories] == ["Salary", "Food"]
    assert report.comparison is None


def test_invalid_entries_become_warnings(service):
    report = service.build_report(FEBRUARY)
    assert len(report.warnings) == 1
    assert "refund" in report.warnings[0].reason
    assert all(t.transaction_type != "refund" for t in report.transactions)


def test_build_report_without_dates_covers_everything(service):
    report = service.build_report(ReportFilter())
    assert report.summary.transaction_count == 5
    assert [row.name for row in report.by_time] == ["2024-01", "2024-02"]


def test_top_n_comes_from_settings_or_argument(ledger):
    service = ReportService(
        InMemoryLedgerStore(transactions=ledger), ReportSettings(top_n=2)
    )
    assert len(service.build_report(FEBRUARY).top_transactions) == 2
    assert len(service.build_report(FEBRUARY, top_n=1).top_transactions) == 1


def test_build_report_with_comparison(service):
    report = service.build_report(FEBRUARY, compare=CompareOption.PREVIOUS_MONTH)

    comparison = report.comparison
    assert comparison.previous_from == date(2024, 1, 1)
    assert comparison.previous_to == date(2024, 1, 29)
    assert comparison.previous.total_income == Decimal("400000")
    assert comparison.change.total_income == Decimal("150")
    assert comparison.change.total_expense == Decimal("100")


def test_comparison_requires_window(service):
    with pytest.raises(ValidationError):
        service.build_report(ReportFilter(date_from=date(2024, 2, 1)), compare="previous-period")


def test_report_is_idempotent(service):
    report_filter = replace(FEBRUARY, keyword=None)
    assert service.build_report(report_filter) == service.build_report(report_filter)
    assert service.build_account_report(report_filter) == service.build_account_report(
        report_filter
    )


@pytest.mark.parametrize(
    "restriction",
    [
        {"category_ids": frozenset({2})},
        {"transaction_types": frozenset({TransactionType.INCOME})},
        {"currencies": frozenset({"USD"})},
        {"account_types": frozenset({"bank"})},
        {"keyword": "nothing matches this"},
        {"date_from": date(2024, 2, 4)},
    ],
)
def test_filter_monotonicity(service, restriction):
    base = service.build_report(FEBRUARY).summary
    narrowed = service.build_report(replace(FEBRUARY, **restriction)).summary

    assert narrowed.transaction_count <= base.transaction_count
    assert narrowed.total_income <= base.total_income
    assert narrowed.total_expense <= base.total_expense
    assert narrowed.total_transfer <= base.total_transfer


def test_build_account_report(service, bank):
    report = service.build_account_report(FEBRUARY)

    rows = {row.account.id: row for row in report.by_account}
    assert rows[bank.id].opening_balance == Decimal("400000")
    assert rows[bank.id].closing_balance == Decimal("1100000")
    assert report.summary.closing_balance == sum(
        (row.closing_balance for row in report.by_account), Decimal("0")
    )


def test_account_report_requires_window(service):
    with pytest.raises(ValidationError, match="account report"):
        service.build_account_report(ReportFilter())
