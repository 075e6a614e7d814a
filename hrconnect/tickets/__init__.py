"""Ticket domain: models, lifecycle, filtering and the client-side store."""

from .filters import Category, TicketStats, compute_stats, filter_tickets, toggle_category, tracker_filter
from .models import DashboardSnapshot, Employee, FlagLevel, SourceWeek, Ticket, TicketType
from .service import (
    EmptyTicketBatchError,
    InvalidTicketTransitionError,
    ResolutionNotesRequiredError,
    TicketService,
    TicketServiceError,
)
from .state import TicketStateMachine, TicketStatus
from .store import TicketStore

__all__ = [
    "Category",
    "DashboardSnapshot",
    "Employee",
    "EmptyTicketBatchError",
    "FlagLevel",
    "InvalidTicketTransitionError",
    "ResolutionNotesRequiredError",
    "SourceWeek",
    "Ticket",
    "TicketService",
    "TicketServiceError",
    "TicketStateMachine",
    "TicketStats",
    "TicketStatus",
    "TicketStore",
    "TicketType",
    "compute_stats",
    "filter_tickets",
    "toggle_category",
    "tracker_filter",
]
