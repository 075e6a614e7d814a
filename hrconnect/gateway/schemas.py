"""Wire models for the spreadsheet-backed Gateway.

Ticket rows are keyed by the sheet's column headers, employee rows and request
payloads by the camel-case keys the Gateway script expects.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from hrconnect.tickets.models import Employee, FlagLevel, SourceWeek, Ticket, TicketType
from hrconnect.tickets.state import TicketStatus


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class EmployeeRecord(_WireModel):
    screening_id: str = Field(alias="screeningID")
    name: str
    designation: str = ""
    doj: str = ""

    @field_validator("screening_id", "name", "designation", "doj", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return _cell_text(value)

    def to_domain(self) -> Employee:
        return Employee(
            screening_id=self.screening_id,
            name=self.name,
            designation=self.designation,
            doj=self.doj,
        )


class TicketRecord(_WireModel):
    ticket_id: str = Field(alias="Ticket ID")
    employee_name: str = Field(default="", alias="Employee Name")
    screening_id: str = Field(default="", alias="Screening ID")
    designation: str = Field(default="", alias="Designation")
    type: TicketType = Field(default=TicketType.ISSUE, alias="Type")
    description: str = Field(default="", alias="Description")
    flag_level: FlagLevel = Field(default=FlagLevel.YELLOW, alias="Flag Level")
    action_owner: str = Field(default="", alias="Action Owner")
    status: TicketStatus = Field(default=TicketStatus.OPEN, alias="Status")
    resolution_notes: str = Field(default="", alias="Resolution Notes")
    date_raised: str = Field(default="", alias="Date Raised")
    source_week: SourceWeek = Field(default=SourceWeek.WEEK_1, alias="Source Week")

    @field_validator(
        "ticket_id",
        "employee_name",
        "screening_id",
        "designation",
        "description",
        "action_owner",
        "resolution_notes",
        "date_raised",
        mode="before",
    )
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return _cell_text(value)

    @field_validator("type", "flag_level", "status", "source_week", mode="before")
    @classmethod
    def _blank_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Blank sheet cells fall back to the field default.
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value.strip() if isinstance(value, str) else value

    @classmethod
    def from_domain(cls, ticket: Ticket) -> TicketRecord:
        return cls(
            ticket_id=ticket.ticket_id,
            employee_name=ticket.employee_name,
            screening_id=ticket.screening_id,
            designation=ticket.designation,
            type=ticket.type,
            description=ticket.description,
            flag_level=ticket.flag_level,
            action_owner=ticket.action_owner,
            status=ticket.status,
            resolution_notes=ticket.resolution_notes,
            date_raised=ticket.date_raised,
            source_week=ticket.source_week,
        )

    def to_domain(self) -> Ticket:
        return Ticket(
            ticket_id=self.ticket_id,
            employee_name=self.employee_name,
            screening_id=self.screening_id,
            designation=self.designation,
            type=self.type,
            description=self.description,
            flag_level=self.flag_level,
            action_owner=self.action_owner,
            status=self.status,
            resolution_notes=self.resolution_notes,
            date_raised=self.date_raised,
            source_week=self.source_week,
        )


class DashboardPayload(_WireModel):
    employees: list[EmployeeRecord] = Field(default_factory=list)
    issues: list[TicketRecord] = Field(default_factory=list)

    @field_validator("employees", "issues", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class TicketDraft(_WireModel):
    """One row of a "create tickets" request."""

    type: TicketType = TicketType.ISSUE
    description: str = ""
    flag_level: FlagLevel = Field(default=FlagLevel.YELLOW, alias="flagLevel")
    action_owner: str = Field(default="", alias="actionOwner")
    screening_id: str = Field(alias="screeningID")
    name: str
    designation: str = ""
    source_week: SourceWeek = Field(default=SourceWeek.WEEK_1, alias="sourceWeek")


class CreateTicketsResult(_WireModel):
    count: int
    ticket_ids: list[str] = Field(default_factory=list, alias="ticketIDs")


class _EmployeeSubmission(_WireModel):
    screening_id: str = Field(alias="screeningID")
    name: str
    designation: str = ""
    doj: str = ""


class Week1Submission(_EmployeeSubmission):
    day: str = Field(min_length=1)
    job_role: str = Field(default="", alias="jobRole")
    comfort: str = ""
    support: str = ""
    location: str = ""


class Week234Submission(_EmployeeSubmission):
    week_number: SourceWeek = Field(alias="weekNumber")
    role_clarity: str = Field(default="", alias="roleClarity")
    work_environment: str = Field(default="", alias="workEnvironment")
    support_required: str = Field(default="", alias="supportRequired")


class StatusUpdate(_WireModel):
    ticket_id: str = Field(alias="ticketID")
    status: TicketStatus
    notes: str = ""
