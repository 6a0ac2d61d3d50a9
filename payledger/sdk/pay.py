"""Per-month pay calculations.

SDK layer - pure calculation. Takes an employee (anything with
``hourly_rate`` and an ``hours`` mapping of month-key -> hours) and
returns Decimal amounts. Nothing here is stored; every figure is
recomputed from rate and hours on demand.

Rounding:
- gross and tax are quantised to cents (ROUND_HALF_UP) per month
- tax is worked out from the exact rate x hours product, not from the
  rounded gross, so it can differ by a cent from taxing the rounded gross
- net is gross - tax of the quantised figures
- rate x hours is carried at full precision however large it gets
- totals add up the quantised monthly figures, so a breakdown's rows
  always sum exactly to its totals row
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import TYPE_CHECKING, Any, Optional

from .schemas import DEFAULT_TAX_RULES, PayTotals, TaxRules

if TYPE_CHECKING:
    from .registry import Employee


CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a token or number to a finite Decimal.

    Floats go through str() so 0.1 becomes Decimal('0.1'), not its
    binary expansion. Returns None for anything non-numeric or
    non-finite (nan, inf).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        value = str(value)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not result.is_finite():
        return None
    return result


def to_cents(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half up, whatever the magnitude."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def _worked_amount(employee: "Employee", month: str) -> Optional[Decimal]:
    """Exact rate x hours, or None when no hours are recorded."""
    hours = employee.hours.get(month)
    if hours is None:
        return None
    rate = employee.hourly_rate
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(rate.as_tuple().digits) + len(hours.as_tuple().digits))
        return rate * hours


def gross_pay(employee: "Employee", month: str) -> Decimal:
    """Hourly rate x hours for the month, 0 when no hours are recorded."""
    amount = _worked_amount(employee, month)
    if amount is None:
        return ZERO
    return to_cents(amount)


def tax(employee: "Employee", month: str, rules: TaxRules = DEFAULT_TAX_RULES) -> Decimal:
    """Monthly tax under the annualised flat-rate model.

    annual = hourly rate * hours * 12; taxable = max(0, annual - allowance);
    monthly tax = taxable * tax rate / 12. The rounded gross is not used.

    Example: 2400.00 gross -> 28800 annual -> 16230 taxable
    -> 3246.00 annual tax -> 270.50 per month.
    """
    amount = _worked_amount(employee, month)
    if amount is None:
        return ZERO
    annual = amount * rules.months_in_year
    taxable = max(annual - rules.allowance, ZERO)
    return to_cents(taxable * rules.rate / rules.months_in_year)


def net_pay(employee: "Employee", month: str, rules: TaxRules = DEFAULT_TAX_RULES) -> Decimal:
    """Gross pay minus tax."""
    return gross_pay(employee, month) - tax(employee, month, rules)


def total_gross(employee: "Employee") -> Decimal:
    return sum((gross_pay(employee, m) for m in sorted(employee.hours)), ZERO)


def total_tax(employee: "Employee", rules: TaxRules = DEFAULT_TAX_RULES) -> Decimal:
    return sum((tax(employee, m, rules) for m in sorted(employee.hours)), ZERO)


def total_net(employee: "Employee", rules: TaxRules = DEFAULT_TAX_RULES) -> Decimal:
    return sum((net_pay(employee, m, rules) for m in sorted(employee.hours)), ZERO)


def totals(employee: "Employee", rules: TaxRules = DEFAULT_TAX_RULES) -> PayTotals:
    """All three aggregate totals for an employee."""
    return PayTotals(
        gross=total_gross(employee),
        tax=total_tax(employee, rules),
        net=total_net(employee, rules),
    )


@dataclass(frozen=True)
class PayRecord:
    """One employee's hours and derived pay for one month."""

    employee_id: str
    name: str
    month: str
    hourly_rate: Decimal
    hours: Decimal
    gross: Decimal
    tax: Decimal
    net: Decimal

    @classmethod
    def for_month(
        cls, employee: "Employee", month: str, rules: TaxRules = DEFAULT_TAX_RULES
    ) -> "PayRecord":
        """Snapshot an employee's figures for a month (zeros if not worked)."""
        gross = gross_pay(employee, month)
        month_tax = tax(employee, month, rules)
        return cls(
            employee_id=employee.employee_id,
            name=employee.name,
            month=month,
            hourly_rate=employee.hourly_rate,
            hours=employee.hours.get(month, ZERO),
            gross=gross,
            tax=month_tax,
            net=gross - month_tax,
        )
