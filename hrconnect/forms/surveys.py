from __future__ import annotations

from dataclasses import dataclass, field

from hrconnect.gateway.schemas import Week1Submission, Week234Submission
from hrconnect.tickets.models import SourceWeek

from .selection import EmployeeSelection, FormValidationError

WEEK1_DAYS: dict[str, str] = {
    "Day 1": "Basics & IT",
    "Day 2": "Role Clarity",
    "Day 3": "Comfort & Travel",
    "Day 4": "System & Process",
    "Day 5": "Workload Review",
    "Day 6": "Week 1 Summary",
}

LOCATIONS: dict[str, str] = {
    "KOLKATA": "Kolkata",
    "MUMBAI": "Mumbai",
    "DETROJ": "Detroj",
    "DHULAGARH": "Dhulagarh",
    "BHUBANESWAR": "Bhubaneswar",
    "PUNE": "Pune",
    "NOIDA": "Noida",
    "KHEDA": "Kheda",
    "DANKUNI": "Dankuni",
}

REVIEW_WEEKS: tuple[SourceWeek, ...] = (SourceWeek.WEEK_2, SourceWeek.WEEK_3, SourceWeek.WEEK_4)


@dataclass(slots=True)
class Week1Form:
    """Daily touchpoint captured during an employee's first week."""

    selection: EmployeeSelection = field(default_factory=EmployeeSelection)
    day: str = ""
    job_role: str = ""
    comfort: str = ""
    support: str = ""
    location: str = ""

    def build_submission(self) -> Week1Submission:
        if not self.selection.is_selected or not self.day:
            raise FormValidationError("Select employee and day.")
        employee = self.selection.require()
        return Week1Submission(
            screening_id=employee.screening_id,
            name=employee.name,
            designation=employee.designation,
            doj=employee.doj,
            day=self.day,
            job_role=self.job_role,
            comfort=self.comfort,
            support=self.support,
            location=self.location,
        )

    def reset(self) -> None:
        self.selection.clear()
        self.day = self.job_role = self.comfort = self.support = self.location = ""


@dataclass(slots=True)
class Week234Form:
    """Weekly review for weeks two to four."""

    selection: EmployeeSelection = field(default_factory=EmployeeSelection)
    week_number: SourceWeek | None = None
    role_clarity: str = ""
    work_environment: str = ""
    support_required: str = ""

    def build_submission(self) -> Week234Submission:
        if not self.selection.is_selected or self.week_number is None:
            raise FormValidationError("Select employee and week.")
        employee = self.selection.require()
        return Week234Submission(
            screening_id=employee.screening_id,
            name=employee.name,
            designation=employee.designation,
            doj=employee.doj,
            week_number=self.week_number,
            role_clarity=self.role_clarity,
            work_environment=self.work_environment,
            support_required=self.support_required,
        )

    def reset(self) -> None:
        self.selection.clear()
        self.week_number = None
        self.role_clarity = self.work_environment = self.support_required = ""
