"""Read-only report views over a PayrollLedger.

SDK layer - returns pydantic models, no formatting. Renderers in
payledger.cli turn these into tables or JSON.

Ordering:
- month summaries list employees by ID
- employee details list months in sorted month-key order
- sorted listings are descending by the chosen criterion, ties by ID
"""

from decimal import Decimal
from typing import Callable, Dict, List

from .errors import EmployeeNotFoundError
from .ledger import PayrollLedger
from .pay import PayRecord
from .registry import Employee, normalize_key
from .schemas import (
    EmployeeDetail,
    EmployeeMonthRow,
    MonthListing,
    MonthPayRow,
    PayTotals,
    SortKey,
)


_SORT_VALUES: Dict[SortKey, Callable[[MonthPayRow], Decimal]] = {
    SortKey.RATE: lambda row: row.hourly_rate,
    SortKey.HOURS: lambda row: row.hours,
    SortKey.NET: lambda row: row.net,
}


def _require_employee(ledger: PayrollLedger, employee_id: str) -> Employee:
    employee = ledger.get_employee(employee_id)
    if employee is None:
        raise EmployeeNotFoundError(normalize_key(employee_id))
    return employee


def _month_row(record: PayRecord) -> MonthPayRow:
    return MonthPayRow(
        employee_id=record.employee_id,
        name=record.name,
        hourly_rate=record.hourly_rate,
        hours=record.hours,
        gross=record.gross,
        tax=record.tax,
        net=record.net,
    )


def month_summary(ledger: PayrollLedger, month: str) -> List[MonthPayRow]:
    """Everyone with hours recorded for the month, in ID order.

    A month nobody worked (or never processed) gives an empty list.
    """
    month = normalize_key(month)
    return [
        _month_row(PayRecord.for_month(employee, month, ledger.tax_rules))
        for employee in ledger.employees()
        if month in employee.hours
    ]


def sorted_month_listing(ledger: PayrollLedger, month: str, sort_key: SortKey) -> MonthListing:
    """Month summary ordered by rate, hours or net pay, highest first."""
    sort_key = SortKey(sort_key)
    value = _SORT_VALUES[sort_key]
    rows = sorted(month_summary(ledger, month), key=lambda row: (-value(row), row.employee_id))
    return MonthListing(month=normalize_key(month), sort_key=sort_key, rows=rows)


def employee_detail(ledger: PayrollLedger, employee_id: str) -> EmployeeDetail:
    """Month-by-month breakdown for one employee plus totals.

    Raises:
        EmployeeNotFoundError: If the ID isn't in the registry
    """
    employee = _require_employee(ledger, employee_id)
    months = []
    for month in employee.months():
        record = PayRecord.for_month(employee, month, ledger.tax_rules)
        months.append(EmployeeMonthRow(
            month=month,
            hours=record.hours,
            gross=record.gross,
            tax=record.tax,
            net=record.net,
        ))
    return EmployeeDetail(
        employee_id=employee.employee_id,
        name=employee.name,
        hourly_rate=employee.hourly_rate,
        months=months,
        totals=employee.totals(ledger.tax_rules),
    )


def employee_totals(ledger: PayrollLedger, employee_id: str) -> PayTotals:
    """Total gross, tax and net across all of an employee's months."""
    return _require_employee(ledger, employee_id).totals(ledger.tax_rules)
