from __future__ import annotations

from dataclasses import replace

import pytest

from hrconnect.gateway.schemas import CreateTicketsResult, TicketDraft
from hrconnect.tickets.models import (
    DashboardSnapshot,
    Employee,
    FlagLevel,
    SourceWeek,
    Ticket,
    TicketType,
)
from hrconnect.tickets.state import TicketStatus


def make_ticket(
    ticket_id: str = "TKT-0001",
    *,
    flag: FlagLevel = FlagLevel.YELLOW,
    status: TicketStatus = TicketStatus.OPEN,
    name: str = "Aarav Sharma",
    screening_id: str = "SCR-1001",
    description: str = "No laptop assigned",
    notes: str = "",
) -> Ticket:
    return Ticket(
        ticket_id=ticket_id,
        employee_name=name,
        screening_id=screening_id,
        designation="Production Engineer",
        type=TicketType.ISSUE,
        description=description,
        flag_level=flag,
        status=status,
        resolution_notes=notes,
        date_raised="2025-01-08T09:30:00+00:00",
        source_week=SourceWeek.WEEK_1,
    )


class RecordingGateway:
    """In-memory gateway that records every call the front end makes."""

    def __init__(self, tickets=(), employees=()):
        self.tickets: list[Ticket] = list(tickets)
        self.employees: list[Employee] = list(employees)
        self.calls: list[tuple] = []
        self.fail_with: Exception | None = None
        self._next = len(self.tickets) + 1

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def fetch_dashboard(self) -> DashboardSnapshot:
        self.calls.append(("fetch_dashboard",))
        self._check()
        return DashboardSnapshot(employees=tuple(self.employees), tickets=tuple(self.tickets))

    def update_status(self, ticket_id, status, notes=""):
        self.calls.append(("update_status", ticket_id, status, notes))
        self._check()
        for index, ticket in enumerate(self.tickets):
            if ticket.ticket_id == ticket_id:
                resolution = notes if status == TicketStatus.RESOLVED else ticket.resolution_notes
                self.tickets[index] = replace(ticket, status=status, resolution_notes=resolution)
        return {"success": True}

    def add_tickets(self, drafts):
        self.calls.append(("add_tickets", list(drafts)))
        self._check()
        ids = []
        for draft in drafts:
            ticket_id = f"TKT-{self._next:04d}"
            self._next += 1
            ids.append(ticket_id)
            self.tickets.append(
                make_ticket(
                    ticket_id,
                    flag=draft.flag_level,
                    name=draft.name,
                    screening_id=draft.screening_id,
                    description=draft.description,
                )
            )
        return CreateTicketsResult(count=len(ids), ticket_ids=ids)

    def submit_week1(self, submission):
        self.calls.append(("submit_week1", submission))
        self._check()
        return {"success": True}

    def submit_week234(self, submission):
        self.calls.append(("submit_week234", submission))
        self._check()
        return {"success": True}

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def employees() -> list[Employee]:
    return [
        Employee("SCR-1001", "Aarav Sharma", "Production Engineer", "2025-01-06"),
        Employee("SCR-1002", "Meera Iyer", "Quality Analyst", "2025-01-13"),
        Employee("SCR-1003", "Rohan Das", "Maintenance Supervisor", "2025-01-20"),
    ]


@pytest.fixture
def sample_tickets() -> list[Ticket]:
    return [
        make_ticket("TKT-0001", flag=FlagLevel.RED, status=TicketStatus.OPEN),
        make_ticket("TKT-0002", flag=FlagLevel.YELLOW, status=TicketStatus.RESOLVED, notes="Laptop issued"),
        make_ticket("TKT-0003", flag=FlagLevel.RED, status=TicketStatus.OPEN, name="Meera Iyer", screening_id="SCR-1002"),
    ]


@pytest.fixture
def gateway(sample_tickets, employees) -> RecordingGateway:
    return RecordingGateway(sample_tickets, employees)


def draft(description: str, **overrides) -> TicketDraft:
    values = {"description": description, "screening_id": "SCR-1001", "name": "Aarav Sharma"}
    values.update(overrides)
    return TicketDraft(**values)
