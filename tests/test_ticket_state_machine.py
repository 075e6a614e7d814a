import pytest

from hrconnect.tickets.state import TicketStateMachine, TicketStatus


def test_ticket_state_machine_allows_expected_transitions():
    assert TicketStateMachine.initial_state() is TicketStatus.OPEN
    assert TicketStateMachine.can_transition(TicketStatus.OPEN, TicketStatus.IN_PROGRESS)
    assert TicketStateMachine.can_transition(TicketStatus.OPEN, TicketStatus.RESOLVED)
    assert TicketStateMachine.can_transition(TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED)
    assert TicketStateMachine.can_transition(TicketStatus.IN_PROGRESS, TicketStatus.IN_PROGRESS)


def test_ticket_state_machine_treats_resolved_as_terminal():
    assert TicketStateMachine.is_terminal(TicketStatus.RESOLVED)
    for target in TicketStatus:
        assert not TicketStateMachine.can_transition(TicketStatus.RESOLVED, target)
    assert not TicketStateMachine.can_transition(TicketStatus.IN_PROGRESS, TicketStatus.OPEN)
    with pytest.raises(ValueError):
        TicketStateMachine.assert_transition(TicketStatus.RESOLVED, TicketStatus.IN_PROGRESS)
