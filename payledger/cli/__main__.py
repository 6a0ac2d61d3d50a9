"""Payledger CLI - Command-line interface for monthly hourly payroll."""

import json
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape

from payledger import __version__
from payledger.sdk import (
    ConfigNotFoundError,
    Employee,
    EmployeeNotFoundError,
    IngestResult,
    MonthListing,
    PayrollLedger,
    Settings,
    SettingsError,
    SortKey,
    SourceUnreadableError,
    configure_logging,
    employee_detail,
    employee_totals,
    load_settings,
    month_summary,
    sorted_month_listing,
    sources,
)

from .renderers import (
    render_employee_detail,
    render_employee_totals,
    render_ingest_result,
    render_month_rows,
)
from .settings_commands import settings as settings_group

# Main menu choices for the interactive shell
MENU_QUIT = 0
MENU_PROCESS_PAY_FILE = 1
MENU_VIEW_ALL_SALARY = 2
MENU_VIEW_INDIVIDUAL = 3
MENU_SORT_EMPLOYEES = 4
MENU_VIEW_EMPLOYEE_TOTALS = 5

MENU_LABELS = [
    (MENU_PROCESS_PAY_FILE, "Process Pay File"),
    (MENU_VIEW_ALL_SALARY, "View All Salary Details"),
    (MENU_VIEW_INDIVIDUAL, "View Individual Employee Details"),
    (MENU_SORT_EMPLOYEES, "Sort Employees"),
    (MENU_VIEW_EMPLOYEE_TOTALS, "View Employee Totals"),
    (MENU_QUIT, "Quit"),
]

SORT_CHOICES = [
    (SortKey.RATE, "Hourly Rate"),
    (SortKey.HOURS, "Hours Worked"),
    (SortKey.NET, "Net Pay"),
]

RETURN_INPUT = "0"


@click.group()
@click.version_option(version=__version__, prog_name="payledger")
def cli():
    """Payledger - monthly payroll from hours-worked files.

    Loads an employee registry (ID NAME RATE per line), processes
    monthly pay files (ID HOURS per line, month taken from the file
    name) and reports gross pay, tax and net pay.

    Settings are loaded from (in order):

    \b
    1. PAYLEDGER_CONFIG_PATH environment variable
    2. ~/.config/payledger/settings.yaml (XDG default)

    Set LOG_LEVEL=INFO or DEBUG for processing detail.
    """
    configure_logging()


cli.add_command(settings_group)


def path_options(func: Callable) -> Callable:
    """Options that override file locations from settings.yaml."""
    func = click.option("--output-dir", type=click.Path(file_okay=False),
                        help="Directory for <month>_output.txt files")(func)
    func = click.option("--error-log", type=click.Path(dir_okay=False),
                        help="File errors are appended to")(func)
    func = click.option("--employees", "-e", type=click.Path(dir_okay=False),
                        help="Employee registry file")(func)
    return func


def _load_context(
    employees: Optional[str],
    error_log: Optional[str],
    output_dir: Optional[str],
) -> Tuple[Settings, PayrollLedger]:
    """Resolve settings, apply overrides and load the registry."""
    try:
        settings = load_settings()
    except (SettingsError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))

    overrides = {
        "employees_file": employees,
        "error_log": error_log,
        "output_dir": output_dir,
    }
    settings = settings.model_copy(update={k: v for k, v in overrides.items() if v})

    ledger = PayrollLedger(tax_rules=settings.tax)
    try:
        records = sources.read_registry_file(settings.employees_file)
    except SourceUnreadableError as e:
        raise click.ClickException(
            f"{e.message}\nCannot continue without employee records."
        )
    ledger.load_registry(records)
    return settings, ledger


def _process_pay_file(
    ledger: PayrollLedger,
    settings: Settings,
    pay_file: str,
    replace: bool = False,
    confirm_replace: Optional[Callable[[str], bool]] = None,
    write_output: bool = True,
) -> Tuple[IngestResult, Optional[Path]]:
    """Ingest one pay file, log its errors and write the month output."""
    month, records = sources.read_pay_file(pay_file)
    result = ledger.ingest(
        month,
        records,
        replace=replace,
        confirm_replace=confirm_replace,
        source=Path(pay_file).name,
    )
    sources.append_error_log(settings.error_log, result.errors)

    output_file = None
    if result.ok and write_output:
        output_file = sources.write_month_output(
            settings.output_dir, result.month, month_summary(ledger, result.month)
        )
    return result, output_file


def _dump(data) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


# =============================================================================
# Batch commands
# =============================================================================


@cli.command("report")
@click.argument("pay_files", nargs=-1, type=click.Path(dir_okay=False))
@path_options
@click.option("--replace", is_flag=True, help="Replace months that appear in more than one pay file")
@click.option("--month", "-m", help="Only report this month")
@click.option("--sort", "sort_key", type=click.Choice([k.value for k in SortKey]),
              help="Sort the month listing by this criterion (descending)")
@click.option("--employee", "employee_id", help="Show the breakdown for one employee instead")
@click.option("--write-output", is_flag=True, help="Also write <month>_output.txt for each processed month")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def report(pay_files, employees, error_log, output_dir, replace, month, sort_key,
           employee_id, write_output, output_format):
    """Process PAY_FILES in order and report the results.

    Each pay file holds 'ID HOURS' lines; its month is the file name
    without extension (jan25.txt -> JAN25). A month repeated later in
    the list is skipped unless --replace is given.

    Examples:
        payledger report jan25.txt feb25.txt
        payledger report jan25.txt --sort net
        payledger report jan25.txt feb25.txt --employee E1 --format json
    """
    settings, ledger = _load_context(employees, error_log, output_dir)
    console = Console()

    results = []
    for pay_file in pay_files:
        result, _ = _process_pay_file(
            ledger, settings, pay_file, replace=replace, write_output=write_output
        )
        results.append(result)
        if output_format == "text":
            render_ingest_result(console, result, Path(pay_file).name)

    if sort_key and not month and len(ledger.processed_months) != 1:
        raise click.BadParameter("--sort needs --month when more than one month is processed")

    if employee_id:
        try:
            detail = employee_detail(ledger, employee_id)
        except EmployeeNotFoundError as e:
            raise click.ClickException(str(e))
        if output_format == "json":
            click.echo(_dump({
                "ingested": [_result_json(r) for r in results],
                "employee": detail.model_dump(mode="json"),
            }))
        else:
            render_employee_detail(console, detail, settings.currency)
        return

    months = [month.strip().upper()] if month else ledger.processed_months
    listings = []
    for m in months:
        if sort_key:
            listings.append(sorted_month_listing(ledger, m, SortKey(sort_key)))
        else:
            listings.append(MonthListing(month=m, rows=month_summary(ledger, m)))

    if output_format == "json":
        click.echo(_dump({
            "ingested": [_result_json(r) for r in results],
            "months": [listing.model_dump(mode="json") for listing in listings],
        }))
        return

    if not listings:
        console.print("No pay files processed yet.")
    for listing in listings:
        title = f"Monthly Summary: {listing.month}"
        if listing.sort_key:
            title += f" (by {listing.sort_key.value})"
        render_month_rows(console, listing.rows, title, settings.currency)


def _result_json(result: IngestResult) -> dict:
    return {
        "month": result.month,
        "status": result.status.value,
        "applied": result.applied,
        "skipped_lines": result.skipped_lines,
        "replaced": result.replaced,
        "errors": [{"source": e.source, "message": e.message} for e in result.errors],
    }


@cli.command("employees")
@path_options
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def employees_list(employees, error_log, output_dir, output_format):
    """List the employee registry."""
    settings, ledger = _load_context(employees, error_log, output_dir)

    roster = ledger.employees()
    if output_format == "json":
        click.echo(_dump([
            {"id": e.employee_id, "name": e.name, "hourly_rate": str(e.hourly_rate)}
            for e in roster
        ]))
        return

    if not roster:
        click.echo("No employees in registry.")
        return
    for index, employee in enumerate(roster, start=1):
        click.echo(f"{index:>3}. {employee.employee_id:<8} {employee.name:<18} "
                   f"{settings.currency}{employee.hourly_rate:,.2f}/hr")


# =============================================================================
# Interactive shell
# =============================================================================


@cli.command("run")
@path_options
def run(employees, error_log, output_dir):
    """Interactive payroll menu.

    Processed months only live for the session; each processed month
    is also written to <month>_output.txt in the output directory.
    """
    settings, ledger = _load_context(employees, error_log, output_dir)
    console = Console()

    console.print("Welcome to the Payroll System")
    handlers = {
        MENU_PROCESS_PAY_FILE: _menu_process_pay_files,
        MENU_VIEW_ALL_SALARY: _menu_view_months,
        MENU_VIEW_INDIVIDUAL: _menu_employee_detail,
        MENU_SORT_EMPLOYEES: _menu_sort_employees,
        MENU_VIEW_EMPLOYEE_TOTALS: _menu_employee_totals,
    }

    while True:
        console.rule("Main Menu")
        for number, label in MENU_LABELS:
            console.print(f"{number}. {label}")
        choice = click.prompt("Enter choice", type=click.IntRange(MENU_QUIT, MENU_VIEW_EMPLOYEE_TOTALS))
        if choice == MENU_QUIT:
            console.print("Goodbye!")
            return
        handlers[choice](console, ledger, settings)


def _confirm_replace(month: str) -> bool:
    return click.confirm(
        f"This file has already been processed ({month}).\nDo you want to replace it?",
        default=False,
    )


def _menu_process_pay_files(console: Console, ledger: PayrollLedger, settings: Settings) -> None:
    while True:
        pay_file = click.prompt(
            "Enter pay file to process (e.g., jan25.txt), or '0' to return", type=str
        ).strip()
        if pay_file == RETURN_INPUT:
            return
        result, output_file = _process_pay_file(
            ledger, settings, pay_file, confirm_replace=_confirm_replace
        )
        render_ingest_result(console, result, Path(pay_file).name)
        if output_file:
            console.print(f"Wrote pay details to {escape(str(output_file))}")


def _choose_month(console: Console, ledger: PayrollLedger) -> Optional[str]:
    months = ledger.processed_months
    listing = " ".join(f"{i}.{m}" for i, m in enumerate(months, start=1))
    console.print(f"Processed months: {escape(listing)}")
    idx = click.prompt("Enter number (or 0 to return)", type=click.IntRange(0, len(months)))
    if idx == 0:
        return None
    return months[idx - 1]


def _choose_employee(console: Console, ledger: PayrollLedger) -> Optional[Employee]:
    roster: List[Employee] = ledger.employees()
    console.rule("Select Employee")
    for index, employee in enumerate(roster, start=1):
        console.print(escape(f"{index:>3}. {employee.employee_id} ({employee.name})"))
    sel = click.prompt(
        "Select employee by number (or 0 to return)", type=click.IntRange(0, len(roster))
    )
    if sel == 0:
        return None
    return roster[sel - 1]


def _menu_view_months(console: Console, ledger: PayrollLedger, settings: Settings) -> None:
    if not ledger.processed_months:
        console.print("No pay files processed yet.")
        return
    while True:
        month = _choose_month(console, ledger)
        if month is None:
            return
        render_month_rows(
            console, month_summary(ledger, month), f"Monthly Summary: {month}", settings.currency
        )


def _menu_employee_detail(console: Console, ledger: PayrollLedger, settings: Settings) -> None:
    employee = _choose_employee(console, ledger)
    if employee is None:
        return
    render_employee_detail(console, employee_detail(ledger, employee.employee_id), settings.currency)


def _menu_employee_totals(console: Console, ledger: PayrollLedger, settings: Settings) -> None:
    employee = _choose_employee(console, ledger)
    if employee is None:
        return
    totals = employee_totals(ledger, employee.employee_id)
    render_employee_totals(console, employee.employee_id, employee.name, totals, settings.currency)


def _menu_sort_employees(console: Console, ledger: PayrollLedger, settings: Settings) -> None:
    if not ledger.processed_months:
        console.print("No pay files processed yet.")
        return
    console.print("Choose month to sort by:")
    month = _choose_month(console, ledger)
    if month is None:
        return

    console.print("Sort by:")
    for number, (_, label) in enumerate(SORT_CHOICES, start=1):
        console.print(f"{number}. {label}")
    crit = click.prompt("Enter choice", type=click.IntRange(1, len(SORT_CHOICES)))
    sort_key = SORT_CHOICES[crit - 1][0]

    listing = sorted_month_listing(ledger, month, sort_key)
    render_month_rows(
        console, listing.rows, f"{month} sorted by {SORT_CHOICES[crit - 1][1]}", settings.currency
    )


def main():
    cli()


if __name__ == "__main__":
    main()
