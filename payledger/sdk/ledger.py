"""Payroll ledger - owns the registry and the processed months.

SDK layer - no I/O, no prompting. Callers hand in record iterables and
decide replace questions through a flag or a callback; the ledger only
mutates itself once it knows the whole month can be applied.

Ingestion outcomes:
- PROCESSED: hours applied, month recorded (errors may list unknown IDs)
- ALREADY_PROCESSED: month seen before and no replace decision given
- SKIPPED: month seen before and the caller declined to replace it
- FAILED: the record source couldn't be read; nothing changed
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from . import pay
from .errors import SourceUnreadableError
from .registry import Employee, EmployeeRegistry, normalize_key
from .schemas import DEFAULT_TAX_RULES, TaxRules

logger = logging.getLogger(__name__)

ConfirmReplace = Callable[[str], bool]


class IngestStatus(str, Enum):
    PROCESSED = "processed"
    ALREADY_PROCESSED = "already_processed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ErrorEntry:
    """A (source label, message) pair for the error sink."""

    source: str
    message: str


@dataclass
class IngestResult:
    """Outcome of ingesting one month's records."""

    month: str
    status: IngestStatus
    errors: List[ErrorEntry] = field(default_factory=list)
    applied: int = 0
    skipped_lines: int = 0
    replaced: bool = False

    @property
    def ok(self) -> bool:
        return self.status == IngestStatus.PROCESSED

    @property
    def needs_decision(self) -> bool:
        return self.status == IngestStatus.ALREADY_PROCESSED


class PayrollLedger:
    """Registry plus the ordered list of months ingested so far."""

    def __init__(
        self,
        registry: Optional[EmployeeRegistry] = None,
        tax_rules: TaxRules = DEFAULT_TAX_RULES,
    ):
        self.registry = registry if registry is not None else EmployeeRegistry()
        self.tax_rules = tax_rules
        self._processed: List[str] = []

    # ------------------------------------------------------------------
    # Registry access
    # ------------------------------------------------------------------

    def load_registry(self, records: Iterable[Sequence]) -> Tuple[int, int]:
        """Load or reload employees. See EmployeeRegistry.load()."""
        return self.registry.load(records)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.registry.get(employee_id)

    def employees(self) -> List[Employee]:
        """All employees in ID order."""
        return list(self.registry)

    # ------------------------------------------------------------------
    # Months
    # ------------------------------------------------------------------

    @property
    def processed_months(self) -> List[str]:
        """Months in the order they were first ingested."""
        return list(self._processed)

    def is_processed(self, month: str) -> bool:
        return normalize_key(month) in self._processed

    def remove_month(self, month: str) -> bool:
        """Drop every employee's hours for a month and forget the month.

        Returns:
            True if anything was removed, False for a never-seen month
        """
        month = normalize_key(month)
        changed = False
        for employee in self.registry:
            if employee.hours.pop(month, None) is not None:
                changed = True
        if month in self._processed:
            self._processed.remove(month)
            changed = True
        if changed:
            logger.info(f"Removed pay records for {month}")
        return changed

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(
        self,
        month: str,
        records: Iterable[Sequence],
        replace: bool = False,
        confirm_replace: Optional[ConfirmReplace] = None,
        source: Optional[str] = None,
    ) -> IngestResult:
        """Merge one month's (employee_id, hours) records into the ledger.

        Args:
            month: Month-key (normalised here)
            records: (employee_id, hours) pairs; may raise
                SourceUnreadableError while being iterated
            replace: Replace an already-processed month without asking
            confirm_replace: Asked with the month-key when the month was
                already processed and replace is False
            source: Label used on error entries (defaults to the month)

        Returns:
            IngestResult describing what happened
        """
        month = normalize_key(month)
        label = source or month

        replacing = False
        if month in self._processed:
            if not replace:
                if confirm_replace is None:
                    logger.info(f"{month} already processed; replace decision required")
                    return IngestResult(month, IngestStatus.ALREADY_PROCESSED)
                if not confirm_replace(month):
                    logger.info(f"{month} already processed; not replaced")
                    return IngestResult(month, IngestStatus.SKIPPED)
            replacing = True

        # Read everything before touching state so a failed source
        # leaves the ledger exactly as it was.
        try:
            rows = list(records)
        except SourceUnreadableError as e:
            logger.warning(e.message)
            return IngestResult(
                month, IngestStatus.FAILED, errors=[ErrorEntry(e.source, e.message)]
            )

        parsed: List[Tuple[str, Decimal]] = []
        skipped_lines = 0
        for row in rows:
            if len(row) < 2:
                skipped_lines += 1
                continue
            hours = pay.to_decimal(row[1])
            employee_id = normalize_key(row[0])
            if hours is None or not employee_id:
                skipped_lines += 1
                continue
            parsed.append((employee_id, hours))

        if replacing:
            self.remove_month(month)

        result = IngestResult(
            month, IngestStatus.PROCESSED, skipped_lines=skipped_lines, replaced=replacing
        )
        for employee_id, hours in parsed:
            employee = self.registry.get(employee_id)
            if employee is None:
                message = f"{employee_id} is not a valid employee ID number."
                logger.warning(f"{label}: {message}")
                result.errors.append(ErrorEntry(label, message))
                continue
            employee.hours[month] = hours
            result.applied += 1

        if month not in self._processed:
            self._processed.append(month)

        logger.info(
            f"Processed {month}: {result.applied} applied, "
            f"{len(result.errors)} unknown ID(s), {skipped_lines} malformed line(s) skipped"
        )
        return result
