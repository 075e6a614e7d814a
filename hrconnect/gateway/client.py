from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import httpx
from opentelemetry import trace
from pydantic import ValidationError

from hrconnect.tickets.models import DashboardSnapshot, Employee, Ticket
from hrconnect.tickets.state import TicketStatus

from .schemas import (
    CreateTicketsResult,
    DashboardPayload,
    EmployeeRecord,
    StatusUpdate,
    TicketDraft,
    TicketRecord,
    Week1Submission,
    Week234Submission,
)

logger = logging.getLogger(__name__)
_tracer = trace.get_tracer(__name__)

DEFAULT_ERROR_MESSAGE = "API Failed"


class GatewayError(RuntimeError):
    """Failure reported by, or while talking to, the Gateway.

    The message is the Gateway's own text; the HTTP status, when there is
    one, is kept on ``status_code``.
    """

    def __init__(self, message: str, *, status_code: int | None = None, response: httpx.Response | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class GatewayTransportError(GatewayError):
    """The request never produced a usable HTTP response."""


def _extract_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or "Unknown gateway error"

    if isinstance(data, Mapping):
        error = data.get("error") or data.get("detail")
        if isinstance(error, str) and error:
            return error
    return "The gateway could not process the request"


def _unwrap(response: httpx.Response) -> Mapping[str, Any]:
    if response.status_code >= 400:
        raise GatewayError(_extract_error_message(response), status_code=response.status_code, response=response)

    try:
        data = response.json()
    except ValueError as exc:
        raise GatewayError("Gateway returned a non-JSON response", response=response) from exc

    if not isinstance(data, Mapping):
        raise GatewayError("Gateway returned an unexpected payload", response=response)
    if not data.get("success"):
        raise GatewayError(str(data.get("error") or DEFAULT_ERROR_MESSAGE), response=response)
    return data


@dataclass(slots=True)
class GatewayClient:
    """Client for the spreadsheet-backed Gateway web app.

    Reads are ``GET`` requests selecting an ``action`` query parameter; writes
    are ``POST`` requests whose JSON body is sent as ``text/plain`` because the
    script host only accepts simple CORS requests.
    """

    base_url: str
    timeout: float = 30.0
    http_client: httpx.Client | None = None

    def _request(self, method: str, action: str, **kwargs: Any) -> Mapping[str, Any]:
        span_name = f"gateway.{action or 'dashboard'}"
        with _tracer.start_as_current_span(span_name) as span:
            span.set_attribute("http.method", method)
            span.set_attribute("gateway.action", action)
            send = self.http_client.request if self.http_client is not None else httpx.request
            try:
                response = send(method, self.base_url, timeout=self.timeout, follow_redirects=True, **kwargs)
            except httpx.HTTPError as exc:
                logger.warning("Gateway %s request failed: %s", span_name, exc)
                raise GatewayTransportError(f"Gateway request failed: {exc}") from exc

            span.set_attribute("http.status_code", response.status_code)
            try:
                return _unwrap(response)
            except GatewayError as exc:
                logger.warning("Gateway %s rejected (HTTP %s): %s", span_name, response.status_code, exc)
                raise

    def _get(self, action: str) -> Mapping[str, Any]:
        return self._request("GET", action, params={"action": action}, headers={"Accept": "application/json"})

    def _post(self, action: str, **body: Any) -> Mapping[str, Any]:
        payload = {"action": action, **body}
        return self._request(
            "POST",
            action,
            content=json.dumps(payload),
            headers={"Content-Type": "text/plain", "Accept": "application/json"},
        )

    # Reads
    def fetch_dashboard(self) -> DashboardSnapshot:
        data = self._get("")
        try:
            payload = DashboardPayload.model_validate(data)
        except ValidationError as exc:
            raise GatewayError(f"Malformed dashboard payload: {exc}") from exc
        snapshot = DashboardSnapshot(
            employees=tuple(record.to_domain() for record in payload.employees),
            tickets=tuple(record.to_domain() for record in payload.issues),
        )
        logger.debug("Loaded %d employees and %d tickets", len(snapshot.employees), len(snapshot.tickets))
        return snapshot

    def get_employees(self) -> list[Employee]:
        data = self._get("getEmployees")
        try:
            return [EmployeeRecord.model_validate(row).to_domain() for row in data.get("data") or []]
        except ValidationError as exc:
            raise GatewayError(f"Malformed employee payload: {exc}") from exc

    def get_issues(self) -> list[Ticket]:
        data = self._get("getIssues")
        try:
            return [TicketRecord.model_validate(row).to_domain() for row in data.get("data") or []]
        except ValidationError as exc:
            raise GatewayError(f"Malformed ticket payload: {exc}") from exc

    # Writes
    def submit_week1(self, submission: Week1Submission) -> Mapping[str, Any]:
        return self._post("submitWeek1", data=submission.to_wire())

    def submit_week234(self, submission: Week234Submission) -> Mapping[str, Any]:
        return self._post("submitWeek234", data=submission.to_wire())

    def add_tickets(self, drafts: Sequence[TicketDraft]) -> CreateTicketsResult:
        data = self._post("addIssues", data=[draft.to_wire() for draft in drafts])
        try:
            return CreateTicketsResult.model_validate(data)
        except ValidationError as exc:
            raise GatewayError(f"Malformed create response: {exc}") from exc

    def update_status(self, ticket_id: str, status: TicketStatus, notes: str = "") -> Mapping[str, Any]:
        update = StatusUpdate(ticket_id=ticket_id, status=status, notes=notes)
        return self._post("updateStatus", **update.to_wire())
