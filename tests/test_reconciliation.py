from decimal import Decimal

import pytest

from ipv.shared.checkout import DenominationLedger, ReconciliationStatus, reconcile

def test_declared_bills_against_cash_sales_report_discrepancy():
    ledger = DenominationLedger()
    ledger.set_count(100, 2)
    ledger.set_count(20, 3)

    result = ledger.reconcile(Decimal("255.00"))

    assert ledger.total_declared() == Decimal("260")
    assert result.status is ReconciliationStatus.discrepancy
    assert result.difference == Decimal("5.00")
    assert result.absolute_difference == Decimal("5.00")

def test_exact_totals_match():
    result = reconcile(Decimal("255"), Decimal("255.00"))

    assert result.status is ReconciliationStatus.match
    assert result.absolute_difference == 0

def test_shortage_has_negative_signed_difference():
    result = reconcile(Decimal("200"), Decimal("255.00"))

    assert result.difference == Decimal("-55.00")
    assert result.absolute_difference == Decimal("55.00")

def test_unknown_denomination_is_rejected():
    ledger = DenominationLedger()

    with pytest.raises(ValueError):
        ledger.set_count(3, 1)

def test_negative_counts_are_stored_as_zero_and_reset_clears():
    ledger = DenominationLedger(counts={500: 2})
    ledger.set_count(50, -3)

    assert ledger.count(50) == 0
    assert ledger.total_declared() == Decimal("1000")

    ledger.reset()
    assert ledger.total_declared() == 0
    assert ledger.denominations == [1000, 500, 200, 100, 50, 20, 10, 5, 1]
