"""Exceptions raised by the payledger SDK."""


class PayledgerError(Exception):
    """Base class for payledger errors."""
    pass


class SourceUnreadableError(PayledgerError):
    """Raised when a registry or pay file source cannot be opened or read."""

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source
        self.message = message


class EmployeeNotFoundError(PayledgerError, KeyError):
    """Raised when a report asks for an employee the registry doesn't hold."""

    def __init__(self, employee_id: str):
        super().__init__(employee_id)
        self.employee_id = employee_id

    def __str__(self) -> str:
        return f"No employee with ID {self.employee_id}"


class ConfigNotFoundError(PayledgerError):
    """Raised when a required settings file is missing."""
    pass
