import pytest

from hrconnect.gateway.client import GatewayError
from hrconnect.tickets.service import (
    EmptyTicketBatchError,
    InvalidTicketTransitionError,
    ResolutionNotesRequiredError,
    TicketService,
)
from hrconnect.tickets.state import TicketStatus
from hrconnect.tickets.store import TicketStore

from .conftest import draft


@pytest.fixture
def service(gateway):
    store = TicketStore()
    store.reload(gateway)
    gateway.calls.clear()
    return TicketService(gateway, store)


def test_resolve_without_notes_is_rejected_locally(service, gateway):
    with pytest.raises(ResolutionNotesRequiredError):
        service.transition("TKT-0001", TicketStatus.RESOLVED, "")
    with pytest.raises(ResolutionNotesRequiredError):
        service.resolve("TKT-0001", "   ")

    assert gateway.calls == []


def test_resolve_with_notes_sends_one_request_then_reloads(service, gateway):
    service.transition("TKT-0001", TicketStatus.RESOLVED, "fixed")

    assert gateway.call_names() == ["update_status", "fetch_dashboard"]
    assert gateway.calls[0] == ("update_status", "TKT-0001", TicketStatus.RESOLVED, "fixed")
    ticket = service.store.find("TKT-0001")
    assert ticket.status is TicketStatus.RESOLVED
    assert ticket.resolution_notes == "fixed"


def test_in_progress_carries_empty_notes(service, gateway):
    service.transition("TKT-0003", TicketStatus.IN_PROGRESS, "ignored")

    assert gateway.calls[0] == ("update_status", "TKT-0003", TicketStatus.IN_PROGRESS, "")
    assert service.store.find("TKT-0003").status is TicketStatus.IN_PROGRESS


def test_transition_accepts_status_strings(service, gateway):
    service.transition("TKT-0001", "In Progress")
    assert gateway.calls[0][2] is TicketStatus.IN_PROGRESS


@pytest.mark.parametrize("target", [TicketStatus.OPEN, "Closed"])
def test_unsupported_targets_are_rejected_locally(service, gateway, target):
    with pytest.raises(InvalidTicketTransitionError):
        service.transition("TKT-0001", target)
    assert gateway.calls == []


def test_resolved_ticket_cannot_move_again(service, gateway):
    with pytest.raises(InvalidTicketTransitionError):
        service.mark_in_progress("TKT-0002")
    assert gateway.calls == []


def test_unknown_ticket_is_left_to_the_gateway(service, gateway):
    service.mark_in_progress("TKT-7777")
    assert gateway.call_names() == ["update_status", "fetch_dashboard"]


def test_gateway_failure_leaves_store_untouched(service, gateway):
    before = service.store.snapshot
    gateway.fail_with = GatewayError("Sheet is locked")

    with pytest.raises(GatewayError, match="Sheet is locked"):
        service.resolve("TKT-0001", "fixed")

    assert service.store.snapshot is before
    assert gateway.call_names() == ["update_status"]


def test_create_tickets_drops_blank_rows(service, gateway):
    result = service.create_tickets([draft("No laptop"), draft("  "), draft("60km commute", flag_level="Red")])

    name, sent = gateway.calls[0]
    assert name == "add_tickets"
    assert [item.description for item in sent] == ["No laptop", "60km commute"]
    assert result.count == 2
    assert result.ticket_ids == ["TKT-0004", "TKT-0005"]
    assert gateway.call_names()[-1] == "fetch_dashboard"
    assert service.store.find("TKT-0005") is not None


def test_create_tickets_rejects_batch_without_descriptions(service, gateway):
    with pytest.raises(EmptyTicketBatchError):
        service.create_tickets([draft(""), draft("   ")])
    assert gateway.calls == []


def test_failed_create_keeps_snapshot(service, gateway):
    before = service.store.snapshot
    gateway.fail_with = GatewayError("Missing required field")

    with pytest.raises(GatewayError):
        service.create_tickets([draft("No laptop")])

    assert service.store.snapshot is before
