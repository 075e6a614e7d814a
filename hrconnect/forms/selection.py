from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from hrconnect.tickets.models import Employee


class FormValidationError(ValueError):
    """Required input is missing; nothing was sent to the Gateway."""


def search_employees(employees: Iterable[Employee], query: str) -> list[Employee]:
    """Case-insensitive name search backing the employee picker."""

    needle = query.lower()
    return [employee for employee in employees if needle in employee.name.lower()]


@dataclass(slots=True)
class EmployeeSelection:
    """Employee picked in a form; its reference fields autofill the payload."""

    employee: Employee | None = None

    @property
    def is_selected(self) -> bool:
        return self.employee is not None and bool(self.employee.screening_id)

    def select(self, employee: Employee) -> None:
        self.employee = employee

    def clear(self) -> None:
        self.employee = None

    def require(self, message: str = "Select an employee first.") -> Employee:
        employee = self.employee
        if employee is None or not employee.screening_id:
            raise FormValidationError(message)
        return employee
