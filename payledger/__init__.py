"""Payledger - monthly hourly payroll ledger and reports."""

__version__ = "0.3.0"
