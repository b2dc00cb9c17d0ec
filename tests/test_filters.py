"""Tests for report filter evaluation and entry validation."""

from datetime import date

import pytest

from ledgerlens.domain.entities import Account, ReportFilter, TransactionType
from ledgerlens.domain.errors import ValidationError
from ledgerlens.domain.filters import (
    apply_filter,
    matches_filter,
    matches_keyword,
    partition_valid,
    validate_window,
)


@pytest.fixture
def entries(make_txn, wallet, bank, usd_card):
    return [
        make_txn(
            TransactionType.INCOME,
            "1000000",
            date(2024, 1, 1),
            destination=bank,
            category=(1, "Salary"),
            partner=(10, "Acme"),
            creator=(100, "lan"),
            description="January salary",
        ),
        make_txn(
            TransactionType.EXPENSE,
            "50000",
            date(2024, 1, 15),
            source=wallet,
            category=(2, "Food"),
            document_number="INV-778",
        ),
        make_txn(
            TransactionType.EXPENSE,
            "20",
            date(2024, 1, 31),
            source=usd_card,
            category=(2, "Food"),
            notes="Dinner with team",
        ),
        make_txn(
            TransactionType.TRANSFER,
            "300000",
            date(2024, 2, 1),
            source=bank,
            destination=wallet,
            code="TRF-01",
        ),
    ]


def test_empty_filter_matches_everything(entries):
    assert apply_filter(entries, ReportFilter()) == entries


def test_date_bounds_are_inclusive(entries):
    report_filter = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))
    assert [t.id for t in apply_filter(entries, report_filter)] == [1, 2, 3]


def test_category_and_type_filters_are_combined(entries):
    report_filter = ReportFilter(
        category_ids=frozenset({2}),
        transaction_types=frozenset({TransactionType.EXPENSE}),
    )
    assert [t.id for t in apply_filter(entries, report_filter)] == [2, 3]

    report_filter = ReportFilter(
        category_ids=frozenset({2}),
        transaction_types=frozenset({TransactionType.INCOME}),
    )
    assert apply_filter(entries, report_filter) == []


def test_account_filter_matches_either_leg(entries, wallet):
    report_filter = ReportFilter(account_ids=frozenset({wallet.id}))
    assert [t.id for t in apply_filter(entries, report_filter)] == [2, 4]


def test_partner_and_creator_filters(entries):
    assert [t.id for t in apply_filter(entries, ReportFilter(partner_ids=frozenset({10})))] == [1]
    assert [t.id for t in apply_filter(entries, ReportFilter(creator_ids=frozenset({100})))] == [1]
    assert apply_filter(entries, ReportFilter(creator_ids=frozenset({999}))) == []


def test_currency_filter_uses_derived_currency(entries):
    report_filter = ReportFilter(currencies=frozenset({"USD"}))
    assert [t.id for t in apply_filter(entries, report_filter)] == [3]


def test_currency_filter_uses_configured_default(make_txn):
    txn = make_txn(
        TransactionType.EXPENSE, "1", date(2024, 1, 1), source=Account(id=5, name="Plain")
    )
    report_filter = ReportFilter(currencies=frozenset({"EUR"}))
    assert matches_filter(txn, report_filter, default_currency="EUR")
    assert not matches_filter(txn, report_filter)


def test_account_type_filter(entries):
    report_filter = ReportFilter(account_types=frozenset({"bank"}))
    assert [t.id for t in apply_filter(entries, report_filter)] == [1, 4]


def test_keyword_searches_text_fields_case_insensitively(entries):
    assert [t.id for t in apply_filter(entries, ReportFilter(keyword="SALARY"))] == [1]
    assert [t.id for t in apply_filter(entries, ReportFilter(keyword="inv-778"))] == [2]
    assert [t.id for t in apply_filter(entries, ReportFilter(keyword="team"))] == [3]
    assert [t.id for t in apply_filter(entries, ReportFilter(keyword="trf"))] == [4]


def test_matches_keyword_ignores_missing_fields(make_txn, wallet):
    txn = make_txn(TransactionType.EXPENSE, "1", date(2024, 1, 1), source=wallet)
    assert not matches_keyword(txn, "anything")


def test_partition_valid_rejects_same_legs_and_unknown_types(make_txn, wallet, bank, caplog):
    good = make_txn(TransactionType.EXPENSE, "10", date(2024, 1, 1), source=wallet)
    same = make_txn(
        TransactionType.TRANSFER, "10", date(2024, 1, 1), source=wallet, destination=wallet
    )
    unknown = make_txn("refund", "10", date(2024, 1, 1), destination=bank)

    valid, warnings = partition_valid([good, same, unknown])

    assert valid == [good]
    assert [w.transaction_id for w in warnings] == [same.id, unknown.id]
    assert "source and destination" in warnings[0].reason
    assert "refund" in warnings[1].reason
    assert "Skipping transaction" in caplog.text


def test_partition_valid_can_require_legs(make_txn, wallet):
    income_without_destination = make_txn(
        TransactionType.INCOME, "10", date(2024, 1, 1), source=wallet
    )
    transfer_missing_destination = make_txn(
        TransactionType.TRANSFER, "10", date(2024, 1, 1), source=wallet
    )

    valid, warnings = partition_valid([income_without_destination, transfer_missing_destination])
    assert len(valid) == 2
    assert warnings == []

    valid, warnings = partition_valid(
        [income_without_destination, transfer_missing_destination], require_legs=True
    )
    assert valid == []
    assert "no destination account" in warnings[0].reason
    assert "no destination account" in warnings[1].reason


def test_validate_window_requires_both_bounds():
    with pytest.raises(ValidationError, match="required for period comparison"):
        validate_window(ReportFilter(date_from=date(2024, 1, 1)), "period comparison")
    with pytest.raises(ValidationError):
        validate_window(ReportFilter(date_to=date(2024, 1, 1)), "the account report")


def test_validate_window_rejects_inverted_range():
    report_filter = ReportFilter(date_from=date(2024, 2, 1), date_to=date(2024, 1, 1))
    with pytest.raises(ValidationError, match="after end date"):
        validate_window(report_filter, "the account report")


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        validate_window(ReportFilter(), "period comparison")
