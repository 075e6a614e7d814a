from __future__ import annotations

import logging
from typing import Protocol

from .models import DashboardSnapshot, Employee, Ticket

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    def fetch_dashboard(self) -> DashboardSnapshot:
        ...


class TicketStore:
    """Client-held copy of the last dashboard snapshot.

    The store is only ever replaced as a whole; a failed reload keeps the
    previous snapshot.
    """

    def __init__(self, snapshot: DashboardSnapshot | None = None) -> None:
        self._snapshot = snapshot or DashboardSnapshot.empty()
        self._loaded = snapshot is not None

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    @property
    def tickets(self) -> tuple[Ticket, ...]:
        return self._snapshot.tickets

    @property
    def employees(self) -> tuple[Employee, ...]:
        return self._snapshot.employees

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def replace(self, snapshot: DashboardSnapshot) -> None:
        self._snapshot = snapshot
        self._loaded = True

    def reload(self, source: SnapshotSource) -> DashboardSnapshot:
        snapshot = source.fetch_dashboard()
        self.replace(snapshot)
        logger.info("Ticket store reloaded with %d tickets", len(snapshot.tickets))
        return snapshot

    def find(self, ticket_id: str) -> Ticket | None:
        return next((ticket for ticket in self._snapshot.tickets if ticket.ticket_id == ticket_id), None)

    def find_employee(self, screening_id: str) -> Employee | None:
        return next(
            (employee for employee in self._snapshot.employees if employee.screening_id == screening_id),
            None,
        )
