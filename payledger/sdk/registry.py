"""Employee registry.

Maps normalised employee IDs to Employee records. Loading is lenient:
records with too few fields or a bad rate are skipped, later records
for the same ID win. Tokens after the third are ignored.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from . import pay
from .schemas import DEFAULT_TAX_RULES, PayTotals, TaxRules

logger = logging.getLogger(__name__)


def normalize_key(value: str) -> str:
    """Trim and uppercase an employee ID or month-key."""
    return str(value).strip().upper()


@dataclass
class Employee:
    """An employee and the hours they worked, keyed by month."""

    employee_id: str
    name: str
    hourly_rate: Decimal
    hours: Dict[str, Decimal] = field(default_factory=dict)

    def gross_pay(self, month: str) -> Decimal:
        return pay.gross_pay(self, normalize_key(month))

    def tax(self, month: str, rules: TaxRules = DEFAULT_TAX_RULES) -> Decimal:
        return pay.tax(self, normalize_key(month), rules)

    def net_pay(self, month: str, rules: TaxRules = DEFAULT_TAX_RULES) -> Decimal:
        return pay.net_pay(self, normalize_key(month), rules)

    def totals(self, rules: TaxRules = DEFAULT_TAX_RULES) -> PayTotals:
        return pay.totals(self, rules)

    def months(self) -> List[str]:
        """Months with recorded hours, sorted."""
        return sorted(self.hours)


def parse_registry_lines(lines: Iterable[str]) -> Iterator[Tuple[str, str, str]]:
    """Split raw 'ID NAME RATE' lines into tuples.

    Lines with fewer than three whitespace-separated tokens are dropped
    here; rate validation happens in EmployeeRegistry.load().
    """
    for line_no, line in enumerate(lines, start=1):
        parts = line.split()
        if len(parts) < 3:
            if parts:
                logger.debug(f"registry line {line_no}: expected 3 fields, skipping")
            continue
        yield parts[0], parts[1], parts[2]


class EmployeeRegistry:
    """Employees keyed by normalised ID, iterated in ID order."""

    def __init__(self, employees: Optional[Iterable[Employee]] = None):
        self._employees: Dict[str, Employee] = {}
        for employee in employees or []:
            self._employees[employee.employee_id] = employee

    def load(self, records: Iterable[Sequence]) -> Tuple[int, int]:
        """Merge (id, name, rate) records into the registry.

        Existing IDs get the new name and rate but keep their hours;
        unknown IDs are created with no hours.

        Returns:
            (loaded, skipped) counts
        """
        loaded = 0
        skipped = 0
        for record in records:
            if len(record) < 3:
                skipped += 1
                continue
            raw_id, raw_name, raw_rate = record[0], record[1], record[2]
            employee_id = normalize_key(raw_id)
            name = str(raw_name).strip()
            rate = pay.to_decimal(raw_rate)
            if not employee_id or rate is None or rate < 0:
                logger.debug(f"registry record {raw_id!r}: invalid rate {raw_rate!r}, skipping")
                skipped += 1
                continue

            existing = self._employees.get(employee_id)
            if existing is None:
                self._employees[employee_id] = Employee(employee_id, name, rate)
            else:
                existing.name = name
                existing.hourly_rate = rate
            loaded += 1

        logger.info(f"Registry loaded {loaded} record(s), skipped {skipped}")
        return loaded, skipped

    def get(self, employee_id: str) -> Optional[Employee]:
        return self._employees.get(normalize_key(employee_id))

    def ids(self) -> List[str]:
        return sorted(self._employees)

    def __contains__(self, employee_id: object) -> bool:
        return isinstance(employee_id, str) and normalize_key(employee_id) in self._employees

    def __iter__(self) -> Iterator[Employee]:
        for employee_id in sorted(self._employees):
            yield self._employees[employee_id]

    def __len__(self) -> int:
        return len(self._employees)
