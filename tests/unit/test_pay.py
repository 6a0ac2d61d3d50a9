"""Unit tests for per-month pay calculations.

Tests use in-memory employees - no files or settings.
"""

from decimal import Decimal

import pytest

from payledger.sdk import pay
from payledger.sdk.pay import PayRecord, to_decimal
from payledger.sdk.registry import Employee
from payledger.sdk.schemas import TaxRules


def make_employee(rate: str, hours: dict = None, employee_id: str = "E1", name: str = "Alice") -> Employee:
    """Create an employee with hours given as {month: str}."""
    return Employee(
        employee_id=employee_id,
        name=name,
        hourly_rate=Decimal(rate),
        hours={month: Decimal(h) for month, h in (hours or {}).items()},
    )


class TestWorkedExamples:
    """Figures from the payroll handbook examples."""

    def test_above_allowance(self):
        """15.00 x 160 -> 2400.00 gross, 270.50 tax, 2129.50 net."""
        emp = make_employee("15.00", {"JAN25": "160"})

        assert pay.gross_pay(emp, "JAN25") == Decimal("2400.00")
        assert pay.tax(emp, "JAN25") == Decimal("270.50")
        assert pay.net_pay(emp, "JAN25") == Decimal("2129.50")

    def test_below_allowance_pays_no_tax(self):
        """10.00 x 100 -> 12000 annual is under the allowance."""
        emp = make_employee("10.00", {"FEB25": "100"})

        assert pay.gross_pay(emp, "FEB25") == Decimal("1000.00")
        assert pay.tax(emp, "FEB25") == Decimal("0.00")
        assert pay.net_pay(emp, "FEB25") == Decimal("1000.00")

    def test_exactly_at_allowance(self):
        """1047.50 monthly annualises to exactly 12570."""
        emp = make_employee("10.475", {"MAR25": "100"})

        assert pay.gross_pay(emp, "MAR25") == Decimal("1047.50")
        assert pay.tax(emp, "MAR25") == Decimal("0.00")

    @pytest.mark.parametrize("rate,hours,gross,tax,net", [
        ("20.00", "80", "1600.00", "110.50", "1489.50"),
        ("12.50", "37.5", "468.75", "0.00", "468.75"),
        ("30.00", "170", "5100.00", "810.50", "4289.50"),
    ])
    def test_flat_rate_formula(self, rate, hours, gross, tax, net):
        emp = make_employee(rate, {"JAN25": hours})

        assert pay.gross_pay(emp, "JAN25") == Decimal(gross)
        assert pay.tax(emp, "JAN25") == Decimal(tax)
        assert pay.net_pay(emp, "JAN25") == Decimal(net)


class TestMissingMonth:
    """A month without hours is a zero, not an error."""

    def test_all_figures_zero(self):
        emp = make_employee("15.00", {"JAN25": "160"})

        assert pay.gross_pay(emp, "FEB25") == 0
        assert pay.tax(emp, "FEB25") == 0
        assert pay.net_pay(emp, "FEB25") == 0

    def test_employee_with_no_hours_has_zero_totals(self):
        emp = make_employee("15.00")

        totals = pay.totals(emp)
        assert totals.gross == 0
        assert totals.tax == 0
        assert totals.net == 0


class TestTotals:
    """Totals sum the per-month figures."""

    def test_two_months(self):
        emp = make_employee("15.00", {"JAN25": "160", "FEB25": "100"})

        # FEB25: 1500.00 gross, 18000 annual, 5430 taxable, 90.50 tax
        assert pay.total_gross(emp) == Decimal("3900.00")
        assert pay.total_tax(emp) == Decimal("361.00")
        assert pay.total_net(emp) == Decimal("3539.00")

    def test_no_float_drift_over_many_months(self):
        emp = make_employee("0.10", {f"M{i:02d}": "1" for i in range(30)})

        assert pay.total_gross(emp) == Decimal("3.00")

    def test_totals_match_sum_of_rounded_months(self):
        emp = make_employee("13.333", {"JAN25": "151.5", "FEB25": "160.25", "MAR25": "99.9"})

        months = emp.months()
        assert pay.total_gross(emp) == sum(pay.gross_pay(emp, m) for m in months)
        assert pay.total_tax(emp) == sum(pay.tax(emp, m) for m in months)
        assert pay.total_net(emp) == pay.total_gross(emp) - pay.total_tax(emp)


class TestTaxRules:
    """The flat model's parameters can be changed, the model can't."""

    def test_custom_allowance_and_rate(self):
        emp = make_employee("15.00", {"JAN25": "160"})
        rules = TaxRules(allowance=Decimal("0"), rate=Decimal("0.5"))

        assert pay.tax(emp, "JAN25", rules) == Decimal("1200.00")
        assert pay.net_pay(emp, "JAN25", rules) == Decimal("1200.00")

    def test_rate_above_one_rejected(self):
        with pytest.raises(ValueError):
            TaxRules(rate=Decimal("1.5"))


class TestRounding:

    def test_tax_from_unrounded_product(self):
        """1100.036 gross: exact tax is 13.134, the rounded gross would give 13.135."""
        emp = make_employee("1100.036", {"JAN25": "1"})
        rules = TaxRules(rate=Decimal("0.25"))

        assert pay.gross_pay(emp, "JAN25") == Decimal("1100.04")
        assert pay.tax(emp, "JAN25", rules) == Decimal("13.13")
        assert pay.net_pay(emp, "JAN25", rules) == Decimal("1086.91")

    def test_huge_hours_still_compute(self):
        emp = make_employee("15.00", {"JAN25": "1e30"})

        assert pay.gross_pay(emp, "JAN25") == Decimal("15e30")
        assert pay.tax(emp, "JAN25") > 0
        assert pay.totals(emp).gross == Decimal("15e30")

    def test_to_cents_beyond_default_precision(self):
        amount = Decimal("123456789012345678901234567890.125")

        assert pay.to_cents(amount) == Decimal("123456789012345678901234567890.13")


class TestEmployeeMethods:
    """Employee convenience methods normalise the month-key."""

    def test_lowercase_month(self):
        emp = make_employee("15.00", {"JAN25": "160"})

        assert emp.gross_pay(" jan25 ") == Decimal("2400.00")
        assert emp.tax("jan25") == Decimal("270.50")
        assert emp.net_pay("Jan25") == Decimal("2129.50")

    def test_months_sorted(self):
        emp = make_employee("15.00", {"MAR25": "1", "FEB25": "1", "JAN25": "1"})

        assert emp.months() == ["FEB25", "JAN25", "MAR25"]


class TestPayRecord:
    """PayRecord snapshots one employee-month."""

    def test_for_month(self):
        emp = make_employee("15.00", {"JAN25": "160"})

        record = PayRecord.for_month(emp, "JAN25")

        assert record.employee_id == "E1"
        assert record.name == "Alice"
        assert record.month == "JAN25"
        assert record.hours == Decimal("160")
        assert record.gross == Decimal("2400.00")
        assert record.tax == Decimal("270.50")
        assert record.net == Decimal("2129.50")

    def test_for_missing_month_is_zero(self):
        emp = make_employee("15.00")

        record = PayRecord.for_month(emp, "JAN25")

        assert record.hours == 0
        assert record.net == 0

    def test_frozen(self):
        record = PayRecord.for_month(make_employee("15.00", {"JAN25": "1"}), "JAN25")

        with pytest.raises(AttributeError):
            record.gross = Decimal("1")


class TestToDecimal:
    """Token conversion used by registry and pay-file parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("160", Decimal("160")),
        (" 7.5 ", Decimal("7.5")),
        (0.1, Decimal("0.1")),
        (12, Decimal("12")),
        (Decimal("3.25"), Decimal("3.25")),
        ("-4", Decimal("-4")),
    ])
    def test_numeric(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", "nan", "inf", "12abc", None, True, float("nan")])
    def test_rejected(self, value):
        assert to_decimal(value) is None
