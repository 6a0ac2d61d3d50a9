"""Payledger SDK - payroll ledger, pay calculation and reports."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    configure_logging,
    SettingsError,
)

from .errors import (
    PayledgerError,
    SourceUnreadableError,
    EmployeeNotFoundError,
    ConfigNotFoundError,
)

from .schemas import (
    TaxRules,
    DEFAULT_TAX_RULES,
    Settings,
    SortKey,
    PayTotals,
    MonthPayRow,
    EmployeeMonthRow,
    EmployeeDetail,
    MonthListing,
)

from .pay import PayRecord, gross_pay, tax, net_pay, total_gross, total_tax, total_net

from .registry import Employee, EmployeeRegistry, normalize_key, parse_registry_lines

from .ledger import PayrollLedger, IngestResult, IngestStatus, ErrorEntry

from .reports import month_summary, sorted_month_listing, employee_detail, employee_totals

from . import sources

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "configure_logging",
    "SettingsError",
    # Errors
    "PayledgerError",
    "SourceUnreadableError",
    "EmployeeNotFoundError",
    "ConfigNotFoundError",
    # Schemas
    "TaxRules",
    "DEFAULT_TAX_RULES",
    "Settings",
    "SortKey",
    "PayTotals",
    "MonthPayRow",
    "EmployeeMonthRow",
    "EmployeeDetail",
    "MonthListing",
    # Pay calculation
    "PayRecord",
    "gross_pay",
    "tax",
    "net_pay",
    "total_gross",
    "total_tax",
    "total_net",
    # Registry
    "Employee",
    "EmployeeRegistry",
    "normalize_key",
    "parse_registry_lines",
    # Ledger
    "PayrollLedger",
    "IngestResult",
    "IngestStatus",
    "ErrorEntry",
    # Reports
    "month_summary",
    "sorted_month_listing",
    "employee_detail",
    "employee_totals",
    # File collaborators
    "sources",
]
