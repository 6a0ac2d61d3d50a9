"""Flat-file collaborators: registry and pay files in, logs and summaries out.

File formats:
- employees.txt: one 'ID NAME RATE' per line
- <month>.txt:   one 'ID HOURS' per line; the month-key is the file
                 name without its extension (jan25.txt -> JAN25)
- errors.txt:    appended 'source\\nmessage\\n' pairs
- <month>_output.txt: fixed-width month summary

Everything that touches the filesystem lives here so the ledger and
reports stay pure.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from .errors import SourceUnreadableError
from .ledger import ErrorEntry
from .registry import normalize_key, parse_registry_lines
from .schemas import MonthPayRow

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

OUTPUT_SUFFIX = "_output.txt"

# Column widths for the month output file
_COLUMNS = [
    ("ID", 8, "<"),
    ("Name", 18, "<"),
    ("Rate", 10, ">"),
    ("Hours", 8, ">"),
    ("Gross", 12, ">"),
    ("Tax", 10, ">"),
    ("Net", 12, ">"),
]


def month_key_from_filename(filename: PathLike) -> str:
    """Derive a month-key from a pay file name (path and extension dropped)."""
    return normalize_key(Path(filename).stem)


def read_registry_file(path: PathLike) -> List[Tuple[str, str, str]]:
    """Read employee records from a registry file.

    Raises:
        SourceUnreadableError: If the file can't be opened or isn't UTF-8 text
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            records = list(parse_registry_lines(f))
    except OSError as e:
        raise SourceUnreadableError(str(path), f"Could not open {path}") from e
    except UnicodeDecodeError as e:
        raise SourceUnreadableError(
            str(path), f"Could not read {path}: not valid UTF-8 text"
        ) from e
    logger.debug(f"read {len(records)} registry record(s) from {path}")
    return records


def iter_pay_records(path: PathLike) -> Iterator[Tuple[str, ...]]:
    """Yield (employee_id, hours) token pairs from a pay file.

    The file is opened lazily, on first iteration. Lines with a single
    token are yielded as-is for the ledger to count as malformed; blank
    lines are dropped.

    Raises:
        SourceUnreadableError: If the file can't be opened or isn't UTF-8 text
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                parts = line.split()
                if parts:
                    yield tuple(parts[:2])
    except OSError as e:
        raise SourceUnreadableError(
            path.name, f"Pay file {path.name} could not be found."
        ) from e
    except UnicodeDecodeError as e:
        raise SourceUnreadableError(
            path.name, f"Pay file {path.name} could not be read (not valid UTF-8 text)."
        ) from e


def read_pay_file(path: PathLike) -> Tuple[str, Iterator[Tuple[str, ...]]]:
    """Return (month_key, lazy records) for a pay file."""
    return month_key_from_filename(path), iter_pay_records(path)


def append_error_log(path: PathLike, errors: Iterable[ErrorEntry]) -> int:
    """Append error entries to the error log.

    Returns:
        Number of entries written (the file isn't touched when zero)
    """
    errors = list(errors)
    if not errors:
        return 0
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        for entry in errors:
            f.write(f"{entry.source}\n{entry.message}\n")
    logger.debug(f"appended {len(errors)} error(s) to {path}")
    return len(errors)


def format_month_output(rows: Sequence[MonthPayRow]) -> str:
    """Fixed-width text table for a month summary."""
    header = "".join(f"{title:{align}{width}}" for title, width, align in _COLUMNS)
    lines = [header.rstrip()]
    for row in rows:
        values = [
            row.employee_id,
            row.name,
            f"{row.hourly_rate:.2f}",
            f"{row.hours:.2f}",
            f"{row.gross:.2f}",
            f"{row.tax:.2f}",
            f"{row.net:.2f}",
        ]
        lines.append("".join(
            f"{value:{align}{width}}" for value, (_, width, align) in zip(values, _COLUMNS)
        ).rstrip())
    return "\n".join(lines) + "\n"


def write_month_output(output_dir: PathLike, month: str, rows: Sequence[MonthPayRow]) -> Path:
    """Write <month>_output.txt (lowercase month) and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"{normalize_key(month).lower()}{OUTPUT_SUFFIX}"
    output_file.write_text(format_month_output(rows), encoding="utf-8")
    logger.info(f"Wrote pay details to {output_file}")
    return output_file
