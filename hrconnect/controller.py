"""Top-level application state for the HR Employee Connect front end."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from hrconnect.core.config import Settings, get_settings
from hrconnect.forms import RaiseIssueForm, Week1Form, Week234Form
from hrconnect.gateway.client import GatewayClient
from hrconnect.gateway.schemas import Week1Submission, Week234Submission
from hrconnect.tickets.filters import (
    DASHBOARD_DISPLAY_LIMIT,
    DEFAULT_CATEGORY,
    Category,
    TicketStats,
    compute_stats,
    display_window,
    filter_tickets,
    toggle_category,
    tracker_filter,
)
from hrconnect.tickets.models import DashboardSnapshot, FlagLevel, Ticket
from hrconnect.tickets.service import TicketGateway, TicketService
from hrconnect.tickets.state import TicketStatus
from hrconnect.tickets.store import TicketStore

logger = logging.getLogger(__name__)


class Page(str, Enum):
    DASHBOARD = "dashboard"
    WEEK1 = "week1"
    WEEK234 = "week234"
    TRACKER = "tracker"
    RAISE = "raise"


PAGE_LABELS: dict[Page, str] = {
    Page.DASHBOARD: "📊 Dashboard",
    Page.WEEK1: "📝 Week 1 Form",
    Page.WEEK234: "📋 Week 2-4 Form",
    Page.TRACKER: "🎯 Issue Tracker",
    Page.RAISE: "➕ Raise Issues / Support Tickets",
}


class Gateway(TicketGateway, Protocol):
    def submit_week1(self, submission: Week1Submission) -> object:
        ...

    def submit_week234(self, submission: Week234Submission) -> object:
        ...


@dataclass(slots=True)
class DashboardView:
    """Active filter chip and search text of the dashboard."""

    category: Category = DEFAULT_CATEGORY
    query: str = ""
    display_limit: int = DASHBOARD_DISPLAY_LIMIT

    def select(self, category: Category) -> Category:
        self.category = toggle_category(self.category, category)
        return self.category

    def matches(self, tickets: tuple[Ticket, ...]) -> list[Ticket]:
        return filter_tickets(tickets, self.category, self.query)

    def visible(self, tickets: tuple[Ticket, ...]) -> list[Ticket]:
        return display_window(self.matches(tickets), self.display_limit)

    @property
    def heading(self) -> str:
        if self.category == Category.NEEDS_ATTENTION:
            return "Open Issues (Needs Attention)"
        return f"{self.category.value} Issues"


@dataclass(slots=True)
class TrackerView:
    """Status pill, flag pill and search text of the issue tracker."""

    status: TicketStatus | None = None
    flag: FlagLevel | None = None
    query: str = ""

    def matches(self, tickets: tuple[Ticket, ...]) -> list[Ticket]:
        return tracker_filter(tickets, status=self.status, flag=self.flag, query=self.query)


class ConnectApp:
    """Owns the page, the ticket store and the view state.

    Every operation returns the notice shown to the user on success; failures
    propagate as exceptions with nothing changed locally.
    """

    def __init__(
        self,
        gateway: Gateway,
        *,
        store: TicketStore | None = None,
        display_limit: int = DASHBOARD_DISPLAY_LIMIT,
    ) -> None:
        self.gateway = gateway
        self.store = store if store is not None else TicketStore()
        self.tickets = TicketService(gateway, self.store)
        self.page = Page.DASHBOARD
        self.dashboard = DashboardView(display_limit=display_limit)
        self.tracker = TrackerView()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ConnectApp:
        settings = settings or get_settings()
        gateway = GatewayClient(base_url=settings.gateway_url, timeout=settings.gateway_timeout)
        return cls(gateway, display_limit=settings.dashboard_display_limit)

    def load_all(self) -> DashboardSnapshot:
        return self.tickets.refresh()

    def stats(self) -> TicketStats:
        return compute_stats(self.store.tickets)

    def start_progress(self, ticket_id: str) -> str:
        self.tickets.mark_in_progress(ticket_id)
        return f"🔄 {ticket_id} → {TicketStatus.IN_PROGRESS.value}"

    def resolve(self, ticket_id: str, notes: str) -> str:
        self.tickets.resolve(ticket_id, notes)
        return f"✅ {ticket_id} Resolved!"

    def submit_week1(self, form: Week1Form) -> str:
        submission = form.build_submission()
        self.gateway.submit_week1(submission)
        logger.info("Week 1 %s response saved for %s", submission.day, submission.screening_id)
        form.reset()
        return "✅ Week 1 response saved!"

    def submit_week234(self, form: Week234Form) -> str:
        submission = form.build_submission()
        self.gateway.submit_week234(submission)
        logger.info("%s response saved for %s", submission.week_number.value, submission.screening_id)
        form.reset()
        return "✅ Week 2-4 response saved!"

    def raise_tickets(self, form: RaiseIssueForm) -> str:
        drafts = form.build_drafts()
        result = self.tickets.create_tickets(drafts)
        form.reset()
        return f"🎫 {result.count} ticket(s) created: {', '.join(result.ticket_ids)}"
