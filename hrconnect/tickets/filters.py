"""Filtering and search over the loaded ticket collection.

Every function here is pure: it never mutates its input and always returns
tickets in the order they were supplied.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Sequence

from .models import FlagLevel, Ticket
from .state import TicketStatus

DASHBOARD_DISPLAY_LIMIT = 20


class Category(str, Enum):
    """Dashboard filter chips."""

    ALL = "All"
    NEEDS_ATTENTION = "Needs Attention"
    OPEN = "Open"
    RESOLVED = "Resolved"
    RED = "Red"
    ORANGE = "Orange"
    YELLOW = "Yellow"


DEFAULT_CATEGORY = Category.NEEDS_ATTENTION

_FLAG_CATEGORIES: dict[Category, FlagLevel] = {
    Category.RED: FlagLevel.RED,
    Category.ORANGE: FlagLevel.ORANGE,
    Category.YELLOW: FlagLevel.YELLOW,
}


def _needs_attention(ticket: Ticket) -> bool:
    return ticket.status != TicketStatus.RESOLVED


def _flag_predicate(flag: FlagLevel) -> Callable[[Ticket], bool]:
    def predicate(ticket: Ticket) -> bool:
        return ticket.flag_level == flag and _needs_attention(ticket)

    return predicate


_CATEGORY_PREDICATES: dict[Category, Callable[[Ticket], bool]] = {
    Category.ALL: lambda ticket: True,
    Category.NEEDS_ATTENTION: _needs_attention,
    Category.OPEN: lambda ticket: ticket.status == TicketStatus.OPEN,
    Category.RESOLVED: lambda ticket: ticket.status == TicketStatus.RESOLVED,
    **{category: _flag_predicate(flag) for category, flag in _FLAG_CATEGORIES.items()},
}


def matches_category(ticket: Ticket, category: Category) -> bool:
    return _CATEGORY_PREDICATES[category](ticket)


def matches_query(ticket: Ticket, query: str) -> bool:
    """Case-insensitive substring match on name, ticket ID, screening ID and description."""

    if not query:
        return True
    needle = query.lower()
    haystacks = (ticket.employee_name, ticket.ticket_id, ticket.screening_id, ticket.description)
    return any(needle in (value or "").lower() for value in haystacks)


def filter_tickets(
    tickets: Iterable[Ticket],
    category: Category = DEFAULT_CATEGORY,
    query: str = "",
) -> list[Ticket]:
    """Return the tickets passing both the category and the text filter."""

    predicate = _CATEGORY_PREDICATES[category]
    return [ticket for ticket in tickets if predicate(ticket) and matches_query(ticket, query)]


def toggle_category(active: Category, selected: Category) -> Category:
    """Selecting the active chip again switches back to the default view."""

    if selected == active:
        return DEFAULT_CATEGORY
    return selected


def tracker_filter(
    tickets: Iterable[Ticket],
    *,
    status: TicketStatus | None = None,
    flag: FlagLevel | None = None,
    query: str = "",
) -> list[Ticket]:
    """Issue tracker filtering: independent status and flag pills plus search."""

    result: list[Ticket] = []
    for ticket in tickets:
        if status is not None and ticket.status != status:
            continue
        if flag is not None and ticket.flag_level != flag:
            continue
        if not matches_query(ticket, query):
            continue
        result.append(ticket)
    return result


def display_window(tickets: Sequence[Ticket], limit: int = DASHBOARD_DISPLAY_LIMIT) -> list[Ticket]:
    return list(tickets[:limit])


@dataclass(frozen=True, slots=True)
class TicketStats:
    """Counts shown on the dashboard stat cards."""

    total: int = 0
    open: int = 0
    red: int = 0
    orange: int = 0
    yellow: int = 0
    resolved: int = 0
    needs_attention: int = 0

    def count_for(self, category: Category) -> int:
        return {
            Category.ALL: self.total,
            Category.NEEDS_ATTENTION: self.needs_attention,
            Category.OPEN: self.open,
            Category.RESOLVED: self.resolved,
            Category.RED: self.red,
            Category.ORANGE: self.orange,
            Category.YELLOW: self.yellow,
        }[category]


def compute_stats(tickets: Sequence[Ticket]) -> TicketStats:
    """Count every category over the full, unfiltered collection."""

    counts = {category: 0 for category in Category}
    for ticket in tickets:
        for category, predicate in _CATEGORY_PREDICATES.items():
            if predicate(ticket):
                counts[category] += 1
    return TicketStats(
        total=counts[Category.ALL],
        open=counts[Category.OPEN],
        red=counts[Category.RED],
        orange=counts[Category.ORANGE],
        yellow=counts[Category.YELLOW],
        resolved=counts[Category.RESOLVED],
        needs_attention=counts[Category.NEEDS_ATTENTION],
    )
