"""Tests for the flat-file collaborators.

Uses tmp_path for all files.
"""

from decimal import Decimal

import pytest

from payledger.sdk import SourceUnreadableError
from payledger.sdk.ledger import ErrorEntry, IngestStatus, PayrollLedger
from payledger.sdk.reports import month_summary
from payledger.sdk.sources import (
    append_error_log,
    format_month_output,
    iter_pay_records,
    month_key_from_filename,
    read_pay_file,
    read_registry_file,
    write_month_output,
)


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "employees.txt"
    path.write_text("E1 Alice 15.00\nE2 Bob 10.00\nbroken\nE3 Cat notanumber\n")
    return path


@pytest.fixture
def ledger(registry_file):
    ledger = PayrollLedger()
    ledger.load_registry(read_registry_file(registry_file))
    return ledger


class TestMonthKey:

    @pytest.mark.parametrize("filename,expected", [
        ("jan25.txt", "JAN25"),
        ("Feb25.TXT", "FEB25"),
        ("data/mar25.txt", "MAR25"),
        ("apr25", "APR25"),
    ])
    def test_from_filename(self, filename, expected):
        assert month_key_from_filename(filename) == expected


class TestRegistryFile:

    def test_reads_records(self, registry_file):
        records = read_registry_file(registry_file)

        assert records == [
            ("E1", "Alice", "15.00"),
            ("E2", "Bob", "10.00"),
            ("E3", "Cat", "notanumber"),
        ]

    def test_bad_rate_dropped_on_load(self, ledger):
        assert [e.employee_id for e in ledger.employees()] == ["E1", "E2"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnreadableError) as exc:
            read_registry_file(tmp_path / "nope.txt")

        assert "Could not open" in exc.value.message

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "employees.txt"
        path.write_bytes(b"E1 Alice 15.00\n\xff\xfe Bob 10.00\n")

        with pytest.raises(SourceUnreadableError) as exc:
            read_registry_file(path)

        assert "not valid UTF-8" in exc.value.message


class TestPayFile:

    def test_ingest_from_file(self, tmp_path, ledger):
        pay_file = tmp_path / "jan25.txt"
        pay_file.write_text("E1 160\ne2 100 overtime\nZZZ 40\n\njunk\n")

        month, records = read_pay_file(pay_file)
        result = ledger.ingest(month, records, source=pay_file.name)

        assert result.month == "JAN25"
        assert result.ok
        assert result.applied == 2
        assert result.skipped_lines == 1
        assert result.errors == [ErrorEntry("jan25.txt", "ZZZ is not a valid employee ID number.")]
        assert ledger.get_employee("E2").hours == {"JAN25": Decimal("100")}

    def test_missing_file_fails_ingest(self, tmp_path, ledger):
        month, records = read_pay_file(tmp_path / "mar25.txt")

        result = ledger.ingest(month, records)

        assert result.status == IngestStatus.FAILED
        assert result.errors == [ErrorEntry("mar25.txt", "Pay file mar25.txt could not be found.")]
        assert ledger.processed_months == []

    def test_not_utf8_fails_ingest(self, tmp_path, ledger):
        pay_file = tmp_path / "jan25.txt"
        pay_file.write_bytes(b"E1 160\n\xff\xfe 10\n")

        result = ledger.ingest(*read_pay_file(pay_file), source=pay_file.name)

        assert result.status == IngestStatus.FAILED
        assert result.errors == [ErrorEntry(
            "jan25.txt", "Pay file jan25.txt could not be read (not valid UTF-8 text)."
        )]
        assert ledger.processed_months == []
        assert ledger.get_employee("E1").hours == {}

    def test_opened_lazily(self, tmp_path):
        records = iter_pay_records(tmp_path / "missing.txt")

        with pytest.raises(SourceUnreadableError):
            next(records)


class TestErrorLog:

    def test_appends_pairs(self, tmp_path):
        log = tmp_path / "errors.txt"
        log.write_text("old.txt\nold message\n")

        written = append_error_log(log, [
            ErrorEntry("jan25.txt", "ZZZ is not a valid employee ID number."),
            ErrorEntry("mar25.txt", "Pay file mar25.txt could not be found."),
        ])

        assert written == 2
        assert log.read_text().splitlines() == [
            "old.txt",
            "old message",
            "jan25.txt",
            "ZZZ is not a valid employee ID number.",
            "mar25.txt",
            "Pay file mar25.txt could not be found.",
        ]

    def test_no_errors_no_file(self, tmp_path):
        log = tmp_path / "errors.txt"

        assert append_error_log(log, []) == 0
        assert not log.exists()


class TestMonthOutput:

    def test_writes_lowercase_file(self, tmp_path, ledger):
        ledger.ingest("JAN25", [("E1", "160"), ("E2", "100")])

        path = write_month_output(tmp_path / "out", "JAN25", month_summary(ledger, "JAN25"))

        assert path.name == "jan25_output.txt"
        lines = path.read_text().splitlines()
        assert lines[0].split() == ["ID", "Name", "Rate", "Hours", "Gross", "Tax", "Net"]
        assert lines[1].split() == ["E1", "Alice", "15.00", "160.00", "2400.00", "270.50", "2129.50"]
        assert lines[2].split() == ["E2", "Bob", "10.00", "100.00", "1000.00", "0.00", "1000.00"]

    def test_fixed_width_columns(self, ledger):
        ledger.ingest("JAN25", [("E1", "160")])

        text = format_month_output(month_summary(ledger, "JAN25"))
        row = text.splitlines()[1]

        assert row.startswith("E1      Alice             ")
        assert row.endswith("2129.50")
        assert len(row) == 8 + 18 + 10 + 8 + 12 + 10 + 12

    def test_empty_month_header_only(self):
        text = format_month_output([])

        assert text.splitlines()[0].startswith("ID")
        assert len(text.splitlines()) == 1
