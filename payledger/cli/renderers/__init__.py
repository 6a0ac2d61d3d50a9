"""Rich renderers for CLI output."""

from .tables import (
    render_month_rows,
    render_employee_detail,
    render_employee_totals,
    render_ingest_result,
)

__all__ = [
    "render_month_rows",
    "render_employee_detail",
    "render_employee_totals",
    "render_ingest_result",
]
