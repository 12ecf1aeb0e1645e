# ipv/shared/checkout/reconciliation.py
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

DEFAULT_DENOMINATIONS = (1000, 500, 200, 100, 50, 20, 10, 5, 1)

class ReconciliationStatus(str, Enum):
    match = "match"
    discrepancy = "discrepancy"

@dataclass(frozen=True)
class Reconciliation:
    declared: Decimal
    cash_sales: Decimal
    difference: Decimal  # declarado - ventas en efectivo

    @property
    def status(self) -> ReconciliationStatus:
        if self.difference == 0:
            return ReconciliationStatus.match
        return ReconciliationStatus.discrepancy

    @property
    def absolute_difference(self) -> Decimal:
        return abs(self.difference)

def reconcile(declared: Decimal, cash_sales: Decimal) -> Reconciliation:
    declared = Decimal(declared)
    cash_sales = Decimal(cash_sales)
    return Reconciliation(
        declared=declared,
        cash_sales=cash_sales,
        difference=declared - cash_sales
    )

class DenominationLedger:
    """Conteo de billetes por denominación fija"""

    def __init__(
        self,
        denominations: Sequence[int] = DEFAULT_DENOMINATIONS,
        counts: Optional[Mapping[int, int]] = None
    ):
        self._counts: Dict[int, int] = {int(d): 0 for d in denominations}
        for denomination, count in (counts or {}).items():
            if denomination in self._counts:
                self.set_count(denomination, count)

    @property
    def denominations(self) -> List[int]:
        return list(self._counts)

    def set_count(self, denomination: int, count: int) -> None:
        if denomination not in self._counts:
            raise ValueError(f"Denominación no válida: {denomination}")
        self._counts[denomination] = max(0, int(count))

    def count(self, denomination: int) -> int:
        return self._counts.get(denomination, 0)

    def counts(self) -> List[Tuple[int, int]]:
        return list(self._counts.items())

    def total_declared(self) -> Decimal:
        return Decimal(sum(d * c for d, c in self._counts.items()))

    def reconcile(self, cash_sales: Decimal) -> Reconciliation:
        return reconcile(self.total_declared(), cash_sales)

    def reset(self) -> None:
        for denomination in self._counts:
            self._counts[denomination] = 0
