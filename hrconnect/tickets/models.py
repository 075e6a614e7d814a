from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .state import TicketStatus

# Formats the spreadsheet host is known to emit besides ISO 8601.
_TIMESTAMP_FORMATS = (
    "%d/%m/%Y, %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y, %I:%M:%S %p",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y-%m-%d",
)


class TicketType(str, Enum):
    ISSUE = "Issue"
    SUPPORT = "Support"


class FlagLevel(str, Enum):
    """Severity classification, independent of status."""

    RED = "Red"
    ORANGE = "Orange"
    YELLOW = "Yellow"


class SourceWeek(str, Enum):
    WEEK_1 = "Week 1"
    WEEK_2 = "Week 2"
    WEEK_3 = "Week 3"
    WEEK_4 = "Week 4"


def parse_timestamp(raw: object) -> datetime | None:
    """Best-effort conversion of a spreadsheet timestamp cell."""

    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    text = str(raw).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


@dataclass(frozen=True, slots=True)
class Employee:
    """Reference data for an onboarding employee."""

    screening_id: str
    name: str
    designation: str = ""
    doj: str = ""


@dataclass(frozen=True, slots=True)
class Ticket:
    """Issue or support item raised against an employee.

    Employee fields are a snapshot taken when the ticket was raised.
    """

    ticket_id: str
    employee_name: str
    screening_id: str
    designation: str
    type: TicketType
    description: str
    flag_level: FlagLevel
    status: TicketStatus
    action_owner: str = ""
    resolution_notes: str = ""
    date_raised: str = ""
    source_week: SourceWeek = SourceWeek.WEEK_1

    @property
    def is_resolved(self) -> bool:
        return self.status == TicketStatus.RESOLVED

    @property
    def raised_at(self) -> datetime | None:
        return parse_timestamp(self.date_raised)


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    """Everything the Gateway returns for one dashboard load."""

    employees: tuple[Employee, ...] = ()
    tickets: tuple[Ticket, ...] = ()
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def empty(cls) -> DashboardSnapshot:
        return cls()
