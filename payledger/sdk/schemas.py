"""Pydantic schemas for payledger settings and report results.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in settings files cause clear errors rather than silent ignoring.
Report models are what the query layer hands to renderers; they carry
Decimal amounts and never formatted text.
"""

from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Tax rules
# =============================================================================


class TaxRules(BaseModel):
    """Flat-rate tax with an annual tax-free allowance.

    Monthly gross is projected to a year, the allowance is taken off,
    the remainder (never negative) is taxed at a single rate and the
    result is brought back to a monthly figure. This is a deliberate
    simplification; real income tax is banded.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    allowance: Decimal = Field(
        default=Decimal("12570.00"), ge=0,
        description="Annual tax-free allowance",
    )
    rate: Decimal = Field(
        default=Decimal("0.20"), ge=0, le=1,
        description="Flat tax rate applied to annual taxable income",
    )
    months_in_year: int = Field(
        default=12, gt=0,
        description="Periods used to annualise a monthly gross",
    )


DEFAULT_TAX_RULES = TaxRules()


# =============================================================================
# Settings
# =============================================================================


class Settings(BaseModel):
    """Contents of settings.yaml."""

    model_config = ConfigDict(extra="forbid")

    employees_file: str = Field(default="employees.txt", description="Employee registry file")
    error_log: str = Field(default="errors.txt", description="File unknown IDs and missing files are appended to")
    output_dir: str = Field(default=".", description="Where <month>_output.txt summaries are written")
    currency: str = Field(default="£", description="Currency symbol used when rendering amounts")
    tax: TaxRules = Field(default_factory=TaxRules)


# =============================================================================
# Report results
# =============================================================================


class SortKey(str, Enum):
    """Criteria for a sorted month listing (always descending)."""

    RATE = "rate"
    HOURS = "hours"
    NET = "net"


class PayTotals(BaseModel):
    """Gross, tax and net summed over every month an employee worked."""

    model_config = ConfigDict(extra="forbid")

    gross: Decimal
    tax: Decimal
    net: Decimal


class MonthPayRow(BaseModel):
    """One employee's pay for one month."""

    model_config = ConfigDict(extra="forbid")

    employee_id: str
    name: str
    hourly_rate: Decimal = Field(..., ge=0)
    hours: Decimal
    gross: Decimal
    tax: Decimal = Field(..., ge=0)
    net: Decimal


class EmployeeMonthRow(BaseModel):
    """One month of an employee's detail breakdown."""

    model_config = ConfigDict(extra="forbid")

    month: str
    hours: Decimal
    gross: Decimal
    tax: Decimal = Field(..., ge=0)
    net: Decimal


class EmployeeDetail(BaseModel):
    """Per-month breakdown for one employee plus totals."""

    model_config = ConfigDict(extra="forbid")

    employee_id: str
    name: str
    hourly_rate: Decimal = Field(..., ge=0)
    months: List[EmployeeMonthRow] = Field(default_factory=list)
    totals: PayTotals


class MonthListing(BaseModel):
    """Rows for one month, optionally ordered by a sort criterion."""

    model_config = ConfigDict(extra="forbid")

    month: str
    sort_key: SortKey | None = None
    rows: List[MonthPayRow] = Field(default_factory=list)
