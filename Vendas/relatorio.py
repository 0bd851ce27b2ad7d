# Vendas/relatorio.py ────────────────────────────────────────
"""
Sales report aggregation.

Commission is 30 % of the gross value; net is what remains (70 %). The
commission is rounded to cents and net is derived by subtraction, so
``total_commission + total_net == total_gross`` always holds exactly.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

COMMISSION_RATE = Decimal("0.30")
CENT = Decimal("0.01")
ZERO = Decimal("0.00")


class SaleLike(Protocol):
    client_name: str
    value: Decimal
    payment_method: str
    payment_date: date


@dataclass(frozen=True)
class SalesFilter:
    payment_method: Optional[str] = None
    client_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def matches(self, sale: SaleLike) -> bool:
        if self.payment_method and sale.payment_method != self.payment_method:
            return False
        if self.client_name and self.client_name.lower() not in sale.client_name.lower():
            return False
        # both bounds inclusive; end_date covers the whole day
        if self.start_date and sale.payment_date < self.start_date:
            return False
        if self.end_date and sale.payment_date > self.end_date:
            return False
        return True


@dataclass(frozen=True)
class Summary:
    total_gross: Decimal = ZERO
    total_commission: Decimal = ZERO
    total_net: Decimal = ZERO
    count: int = 0
    by_payment_method: Dict[str, Decimal] = field(default_factory=dict)


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def commission_of(gross: Decimal) -> Decimal:
    return _money(gross * COMMISSION_RATE)


def filter_sales(sales: Iterable[SaleLike], filtro: Optional[SalesFilter] = None) -> List[SaleLike]:
    if filtro is None:
        return list(sales)
    return [s for s in sales if filtro.matches(s)]


def summarize(sales: Sequence[SaleLike]) -> Summary:
    gross = ZERO
    by_method: Dict[str, Decimal] = {}
    for sale in sales:
        value = _money(sale.value)
        gross += value
        by_method[sale.payment_method] = by_method.get(sale.payment_method, ZERO) + value

    commission = commission_of(gross)
    return Summary(
        total_gross=gross,
        total_commission=commission,
        total_net=gross - commission,
        count=len(sales),
        by_payment_method=by_method,
    )


def payment_methods(sales: Iterable[SaleLike]) -> List[str]:
    """Distinct payment methods, in first-seen order."""
    return list(dict.fromkeys(s.payment_method for s in sales))
