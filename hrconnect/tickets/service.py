from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence

from hrconnect.gateway.schemas import CreateTicketsResult, TicketDraft

from .models import DashboardSnapshot
from .state import TicketStateMachine, TicketStatus
from .store import TicketStore

logger = logging.getLogger(__name__)

TRANSITION_TARGETS = frozenset({TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED})


class TicketServiceError(RuntimeError):
    """Base error for ticket operations rejected before reaching the Gateway."""


class InvalidTicketTransitionError(TicketServiceError):
    """Raised when attempting to transition to an invalid state."""


class ResolutionNotesRequiredError(InvalidTicketTransitionError):
    """Raised when resolving a ticket without resolution notes."""


class EmptyTicketBatchError(TicketServiceError):
    """Raised when a create request has no row with a description."""


class TicketGateway(Protocol):
    def fetch_dashboard(self) -> DashboardSnapshot:
        ...

    def add_tickets(self, drafts: Sequence[TicketDraft]) -> CreateTicketsResult:
        ...

    def update_status(self, ticket_id: str, status: TicketStatus, notes: str = "") -> Mapping[str, Any]:
        ...


@dataclass(slots=True)
class TicketService:
    """Ticket mutations against the Gateway followed by a full store reload.

    Nothing is patched locally: after the Gateway accepts a change the store
    is refreshed from it, and a rejected change leaves the store untouched.
    """

    gateway: TicketGateway
    store: TicketStore

    def refresh(self) -> DashboardSnapshot:
        return self.store.reload(self.gateway)

    def transition(self, ticket_id: str, new_status: TicketStatus, notes: str = "") -> DashboardSnapshot:
        try:
            new_status = TicketStatus(new_status)
        except ValueError as exc:
            raise InvalidTicketTransitionError(f"Unknown ticket status: {new_status}") from exc
        if new_status not in TRANSITION_TARGETS:
            raise InvalidTicketTransitionError(f"Tickets cannot be moved to {new_status.value}")

        if new_status == TicketStatus.RESOLVED:
            if not notes or not notes.strip():
                raise ResolutionNotesRequiredError("Resolution notes are required to resolve a ticket")
        else:
            notes = ""

        current = self.store.find(ticket_id)
        if current is not None and not TicketStateMachine.can_transition(current.status, new_status):
            raise InvalidTicketTransitionError(
                f"Cannot transition {ticket_id} from {current.status.value} to {new_status.value}"
            )

        self.gateway.update_status(ticket_id, new_status, notes)
        logger.info("Ticket %s moved to %s", ticket_id, new_status.value)
        return self.refresh()

    def mark_in_progress(self, ticket_id: str) -> DashboardSnapshot:
        return self.transition(ticket_id, TicketStatus.IN_PROGRESS)

    def resolve(self, ticket_id: str, notes: str) -> DashboardSnapshot:
        return self.transition(ticket_id, TicketStatus.RESOLVED, notes)

    def create_tickets(self, drafts: Sequence[TicketDraft]) -> CreateTicketsResult:
        valid = [draft for draft in drafts if draft.description.strip()]
        if not valid:
            raise EmptyTicketBatchError("Add at least one issue with a description")
        dropped = len(drafts) - len(valid)
        if dropped:
            logger.debug("Dropped %d blank ticket rows before submission", dropped)

        result = self.gateway.add_tickets(valid)
        logger.info("Created %d ticket(s): %s", result.count, ", ".join(result.ticket_ids))
        self.refresh()
        return result
