"""Rich renderers for payledger reports.

Transforms SDK report models into formatted Rich tables.
"""

from decimal import Decimal
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from payledger.sdk import (
    EmployeeDetail,
    ErrorEntry,
    IngestResult,
    IngestStatus,
    MonthPayRow,
    PayTotals,
)


def render_month_rows(
    console: Console,
    rows: Sequence[MonthPayRow],
    title: str,
    currency: str = "£",
) -> None:
    """Render a month summary or sorted listing."""
    if not rows:
        console.print(f"[dim]{escape(title)}: no employees worked this month.[/dim]")
        return

    table = Table(title=escape(title), box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column(f"Rate({escape(currency)})", justify="right")
    table.add_column("Hours", justify="right")
    table.add_column(f"Gross({escape(currency)})", justify="right")
    table.add_column(f"Tax({escape(currency)})", justify="right")
    table.add_column(f"Net({escape(currency)})", justify="right")

    for row in rows:
        table.add_row(
            escape(row.employee_id),
            escape(row.name),
            _num(row.hourly_rate),
            _num(row.hours),
            _num(row.gross),
            _num(row.tax),
            _num(row.net),
        )

    console.print(table)


def render_employee_detail(console: Console, detail: EmployeeDetail, currency: str = "£") -> None:
    """Render one employee's month-by-month breakdown with a totals row."""
    table = Table(
        title=escape(f"Details for {detail.employee_id} ({detail.name})"),
        box=box.ROUNDED,
        show_footer=True,
    )
    table.add_column("Month", footer="Totals:", style="bold")
    table.add_column("Hours", justify="right")
    table.add_column(f"Gross({escape(currency)})", justify="right", footer=_fmt(detail.totals.gross, currency))
    table.add_column(f"Tax({escape(currency)})", justify="right", footer=_fmt(detail.totals.tax, currency))
    table.add_column(f"Net({escape(currency)})", justify="right", footer=_fmt(detail.totals.net, currency))

    for month in detail.months:
        table.add_row(
            escape(month.month),
            _num(month.hours),
            _fmt(month.gross, currency),
            _fmt(month.tax, currency),
            _fmt(month.net, currency),
        )

    if not detail.months:
        console.print(f"[dim]No pay records for {escape(detail.employee_id)}.[/dim]")
    console.print(table)


def render_employee_totals(
    console: Console,
    employee_id: str,
    name: str,
    totals: PayTotals,
    currency: str = "£",
) -> None:
    """Render the three aggregate totals for an employee."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")
    table.add_row("Total Gross:", _fmt(totals.gross, currency))
    table.add_row("Total Tax:", _fmt(totals.tax, currency))
    table.add_row("[bold]Total Net:[/bold]", f"[bold]{_fmt(totals.net, currency)}[/bold]")

    console.print(Panel(table, title=escape(f"Totals for {employee_id} ({name})"), border_style="dim"))


def render_ingest_result(console: Console, result: IngestResult, source: Optional[str] = None) -> None:
    """Report how an ingestion went, including per-line errors."""
    label = escape(source or result.month)
    month = escape(result.month)
    if result.status == IngestStatus.PROCESSED:
        action = "replaced" if result.replaced else "processed"
        console.print(f"[green]File {label} {action} successfully as month {month}.[/green]")
    elif result.status == IngestStatus.SKIPPED:
        console.print(f"[yellow]{month} already processed; not replaced.[/yellow]")
    elif result.status == IngestStatus.ALREADY_PROCESSED:
        console.print(
            f"[yellow]{month} already processed. Use --replace to overwrite it.[/yellow]"
        )

    _render_errors(console, result.errors)


def _render_errors(console: Console, errors: List[ErrorEntry]) -> None:
    for entry in errors:
        console.print(f"[red]{escape(entry.source)}: {escape(entry.message)}[/red]")


def _num(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def _fmt(amount: Optional[Decimal], currency: str = "£") -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    if amount < 0:
        return escape(f"-{currency}{-amount:,.2f}")
    return escape(f"{currency}{amount:,.2f}")
