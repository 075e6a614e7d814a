from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from hrconnect.gateway.schemas import TicketDraft
from hrconnect.tickets.models import FlagLevel, SourceWeek, TicketType

from .selection import EmployeeSelection, FormValidationError


@dataclass(frozen=True, slots=True)
class TicketRow:
    type: TicketType = TicketType.ISSUE
    description: str = ""
    flag_level: FlagLevel = FlagLevel.YELLOW
    action_owner: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.description.strip()


@dataclass(slots=True)
class RaiseIssueForm:
    """Several issue/support rows raised against one employee at once."""

    selection: EmployeeSelection = field(default_factory=EmployeeSelection)
    source_week: SourceWeek = SourceWeek.WEEK_1
    rows: list[TicketRow] = field(default_factory=lambda: [TicketRow()])

    def add_row(self) -> None:
        self.rows.append(TicketRow())

    def remove_row(self, index: int) -> None:
        # The form always keeps at least one row.
        if len(self.rows) > 1:
            del self.rows[index]

    def update_row(self, index: int, **changes: Any) -> None:
        self.rows[index] = replace(self.rows[index], **changes)

    def valid_rows(self) -> list[TicketRow]:
        return [row for row in self.rows if not row.is_blank]

    def build_drafts(self) -> list[TicketDraft]:
        employee = self.selection.require()
        valid = self.valid_rows()
        if not valid:
            raise FormValidationError("Add at least one issue with a description.")
        return [
            TicketDraft(
                type=row.type,
                description=row.description,
                flag_level=row.flag_level,
                action_owner=row.action_owner,
                screening_id=employee.screening_id,
                name=employee.name,
                designation=employee.designation,
                source_week=self.source_week,
            )
            for row in valid
        ]

    def reset(self) -> None:
        self.selection.clear()
        self.source_week = SourceWeek.WEEK_1
        self.rows = [TicketRow()]
