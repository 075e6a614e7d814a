"""In-memory stand-in for the spreadsheet Gateway.

Speaks the same wire protocol as the deployed script (``GET ?action=`` reads,
``text/plain`` JSON ``POST`` writes, ``success``/``error`` envelopes) so the
front end can run locally and be exercised end to end in tests::

    uvicorn hrconnect.gateway.devserver:app
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Sequence

from fastapi import FastAPI, Query, Request
from pydantic import ValidationError

from hrconnect.core.config import get_settings
from hrconnect.core.logging import setup_observability
from hrconnect.tickets.models import Employee, Ticket
from hrconnect.tickets.state import TicketStateMachine, TicketStatus

from .schemas import StatusUpdate, TicketDraft, TicketRecord, Week1Submission, Week234Submission

logger = logging.getLogger(__name__)

SAMPLE_EMPLOYEES: tuple[Employee, ...] = (
    Employee("SCR-1001", "Aarav Sharma", "Production Engineer", "2025-01-06"),
    Employee("SCR-1002", "Meera Iyer", "Quality Analyst", "2025-01-13"),
    Employee("SCR-1003", "Rohan Das", "Maintenance Supervisor", "2025-01-20"),
)


@dataclass
class GatewayState:
    """Sheets held by the development Gateway."""

    employees: list[Employee] = field(default_factory=list)
    tickets: list[Ticket] = field(default_factory=list)
    week1_responses: list[dict[str, Any]] = field(default_factory=list)
    week234_responses: list[dict[str, Any]] = field(default_factory=list)
    next_ticket_number: int = 1
    lock: Lock = field(default_factory=Lock, repr=False)

    def allocate_ticket_id(self) -> str:
        ticket_id = f"TKT-{self.next_ticket_number:04d}"
        self.next_ticket_number += 1
        return ticket_id


class GatewayRejection(ValueError):
    """Business failure reported to the caller as ``success: false``."""


def _ok(**payload: Any) -> dict[str, Any]:
    return {"success": True, **payload}


def _error(message: str) -> dict[str, Any]:
    return {"success": False, "error": message}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _dashboard(state: GatewayState) -> dict[str, Any]:
    return _ok(
        employees=[_employee_row(employee) for employee in state.employees],
        issues=[TicketRecord.from_domain(ticket).to_wire() for ticket in state.tickets],
    )


def _employee_row(employee: Employee) -> dict[str, str]:
    return {
        "screeningID": employee.screening_id,
        "name": employee.name,
        "designation": employee.designation,
        "doj": employee.doj,
    }


def _validated(model, data: Any, what: str):
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise GatewayRejection(f"Invalid {what}: {location} {first.get('msg', '')}".strip()) from exc


def _submit_week1(state: GatewayState, body: dict[str, Any]) -> dict[str, Any]:
    submission = _validated(Week1Submission, body.get("data"), "week 1 response")
    state.week1_responses.append({**submission.to_wire(), "timestamp": _now()})
    return _ok()


def _submit_week234(state: GatewayState, body: dict[str, Any]) -> dict[str, Any]:
    submission = _validated(Week234Submission, body.get("data"), "week 2-4 response")
    state.week234_responses.append({**submission.to_wire(), "timestamp": _now()})
    return _ok()


def _add_issues(state: GatewayState, body: dict[str, Any]) -> dict[str, Any]:
    rows = body.get("data")
    if not isinstance(rows, list) or not rows:
        raise GatewayRejection("No issues supplied")
    # Validate the whole batch before writing any row.
    drafts: Sequence[TicketDraft] = [_validated(TicketDraft, row, "issue") for row in rows]
    if any(not draft.description.strip() for draft in drafts):
        raise GatewayRejection("Every issue needs a description")

    created: list[str] = []
    raised = _now()
    for draft in drafts:
        ticket_id = state.allocate_ticket_id()
        state.tickets.append(
            Ticket(
                ticket_id=ticket_id,
                employee_name=draft.name,
                screening_id=draft.screening_id,
                designation=draft.designation,
                type=draft.type,
                description=draft.description,
                flag_level=draft.flag_level,
                status=TicketStateMachine.initial_state(),
                action_owner=draft.action_owner,
                date_raised=raised,
                source_week=draft.source_week,
            )
        )
        created.append(ticket_id)
    return _ok(count=len(created), ticketIDs=created)


def _update_status(state: GatewayState, body: dict[str, Any]) -> dict[str, Any]:
    update = _validated(StatusUpdate, body, "status update")
    index = next((i for i, ticket in enumerate(state.tickets) if ticket.ticket_id == update.ticket_id), None)
    if index is None:
        raise GatewayRejection(f"Ticket {update.ticket_id} not found")

    ticket = state.tickets[index]
    try:
        TicketStateMachine.assert_transition(ticket.status, update.status)
    except ValueError as exc:
        raise GatewayRejection(f"{ticket.ticket_id}: {exc}") from exc
    if update.status == TicketStatus.RESOLVED and not update.notes.strip():
        raise GatewayRejection("Resolution notes are required")

    notes = update.notes if update.status == TicketStatus.RESOLVED else ticket.resolution_notes
    state.tickets[index] = replace(ticket, status=update.status, resolution_notes=notes)
    return _ok()


_POST_ACTIONS: dict[str, Callable[[GatewayState, dict[str, Any]], dict[str, Any]]] = {
    "submitWeek1": _submit_week1,
    "submitWeek234": _submit_week234,
    "addIssues": _add_issues,
    "updateStatus": _update_status,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    tracer_provider = setup_observability(get_settings())
    app.state.tracer_provider = tracer_provider
    try:
        yield
    finally:
        if tracer_provider is not None:
            tracer_provider.shutdown()


def create_gateway_app(state: GatewayState | None = None) -> FastAPI:
    gateway_state = state if state is not None else GatewayState(employees=list(SAMPLE_EMPLOYEES))
    app = FastAPI(title="HR Employee Connect development gateway", lifespan=lifespan)
    app.state.gateway = gateway_state

    @app.get("/")
    async def read(action: str = Query(default="")) -> dict[str, Any]:
        with gateway_state.lock:
            if action == "":
                return _dashboard(gateway_state)
            if action == "getEmployees":
                return _ok(data=_dashboard(gateway_state)["employees"])
            if action == "getIssues":
                return _ok(data=_dashboard(gateway_state)["issues"])
        return _error(f"Unknown action: {action}")

    @app.post("/")
    async def write(request: Request) -> dict[str, Any]:
        raw = await request.body()
        try:
            body = json.loads(raw or b"{}")
        except ValueError:
            return _error("Request body must be JSON")
        if not isinstance(body, dict):
            return _error("Request body must be a JSON object")

        action = str(body.get("action", ""))
        handler = _POST_ACTIONS.get(action)
        if handler is None:
            return _error(f"Unknown action: {action}")
        try:
            with gateway_state.lock:
                result = handler(gateway_state, body)
        except GatewayRejection as exc:
            logger.info("Rejected %s: %s", action, exc)
            return _error(str(exc))
        logger.info("Handled %s", action)
        return result

    return app


app = create_gateway_app()
