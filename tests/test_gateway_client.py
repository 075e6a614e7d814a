import json

import httpx
import pytest

from hrconnect.gateway.client import GatewayClient, GatewayError, GatewayTransportError
from hrconnect.gateway.schemas import TicketDraft, Week1Submission
from hrconnect.tickets.models import FlagLevel, SourceWeek, TicketType
from hrconnect.tickets.state import TicketStatus

BASE_URL = "https://script.example.com/macros/s/abc/exec"

TICKET_ROW = {
    "Ticket ID": "TKT-0001",
    "Employee Name": "Aarav Sharma",
    "Screening ID": "SCR-1001",
    "Designation": "Production Engineer",
    "Type": "Support",
    "Description": "No laptop",
    "Flag Level": "Red",
    "Action Owner": "IT",
    "Status": "In Progress",
    "Resolution Notes": "",
    "Date Raised": "2025-01-08T09:30:00.000Z",
    "Source Week": "Week 2",
}


def _client(handler) -> tuple[GatewayClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http_client = httpx.Client(transport=httpx.MockTransport(record))
    return GatewayClient(base_url=BASE_URL, http_client=http_client), seen


def test_fetch_dashboard_maps_sheet_rows():
    client, seen = _client(
        lambda request: httpx.Response(
            200,
            json={
                "success": True,
                "employees": [{"screeningID": 1001, "name": "Aarav Sharma", "designation": "Engineer", "doj": None}],
                "issues": [TICKET_ROW],
            },
        )
    )

    snapshot = client.fetch_dashboard()

    assert seen[0].method == "GET"
    assert seen[0].url.params["action"] == ""
    employee = snapshot.employees[0]
    assert employee.screening_id == "1001"
    assert employee.doj == ""
    ticket = snapshot.tickets[0]
    assert ticket.ticket_id == "TKT-0001"
    assert ticket.type is TicketType.SUPPORT
    assert ticket.flag_level is FlagLevel.RED
    assert ticket.status is TicketStatus.IN_PROGRESS
    assert ticket.source_week is SourceWeek.WEEK_2
    assert ticket.action_owner == "IT"
    assert ticket.raised_at.year == 2025


def test_blank_cells_fall_back_to_defaults():
    row = {"Ticket ID": "TKT-0002", "Status": "", "Flag Level": " ", "Type": None, "Description": "Commute"}
    client, _ = _client(lambda request: httpx.Response(200, json={"success": True, "issues": [row]}))

    ticket = client.fetch_dashboard().tickets[0]

    assert ticket.status is TicketStatus.OPEN
    assert ticket.flag_level is FlagLevel.YELLOW
    assert ticket.type is TicketType.ISSUE
    assert client.fetch_dashboard().employees == ()


def test_malformed_dashboard_raises_gateway_error():
    bad = {**TICKET_ROW, "Status": "Escalated"}
    client, _ = _client(lambda request: httpx.Response(200, json={"success": True, "issues": [bad]}))

    with pytest.raises(GatewayError, match="Malformed dashboard payload"):
        client.fetch_dashboard()


def test_failure_message_is_surfaced_verbatim():
    client, _ = _client(lambda request: httpx.Response(200, json={"success": False, "error": "Sheet not found"}))

    with pytest.raises(GatewayError) as excinfo:
        client.fetch_dashboard()

    assert str(excinfo.value) == "Sheet not found"


def test_failure_without_message_uses_default():
    client, _ = _client(lambda request: httpx.Response(200, json={"success": False}))

    with pytest.raises(GatewayError, match="API Failed"):
        client.get_issues()


def test_http_error_status_is_reported():
    client, _ = _client(lambda request: httpx.Response(500, text="Internal error"))

    with pytest.raises(GatewayError) as excinfo:
        client.get_employees()

    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == "Internal error"


def test_http_error_with_envelope_keeps_gateway_message():
    client, _ = _client(
        lambda request: httpx.Response(400, json={"success": False, "error": "Missing required field: description"})
    )

    with pytest.raises(GatewayError) as excinfo:
        client.add_tickets([])

    assert str(excinfo.value) == "Missing required field: description"
    assert excinfo.value.status_code == 400


def test_configured_timeout_applies_to_injected_client():
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": []})

    client = GatewayClient(
        base_url=BASE_URL,
        timeout=4.5,
        http_client=httpx.Client(transport=httpx.MockTransport(handler), timeout=60.0),
    )

    client.get_issues()

    assert seen[0].extensions["timeout"]["read"] == 4.5


def test_non_json_response_is_rejected():
    client, _ = _client(lambda request: httpx.Response(200, text="<html>login</html>"))

    with pytest.raises(GatewayError, match="non-JSON"):
        client.fetch_dashboard()


def test_transport_failure_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = _client(handler)

    with pytest.raises(GatewayTransportError, match="connection refused"):
        client.fetch_dashboard()


def test_writes_post_plain_text_json():
    client, seen = _client(lambda request: httpx.Response(200, json={"success": True}))

    client.update_status("TKT-0001", TicketStatus.RESOLVED, "Laptop issued")

    request = seen[0]
    assert request.method == "POST"
    assert request.headers["Content-Type"] == "text/plain"
    assert json.loads(request.content) == {
        "action": "updateStatus",
        "ticketID": "TKT-0001",
        "status": "Resolved",
        "notes": "Laptop issued",
    }


def test_add_tickets_sends_camel_case_rows_and_parses_ids():
    client, seen = _client(
        lambda request: httpx.Response(200, json={"success": True, "count": 1, "ticketIDs": ["TKT-0010"]})
    )
    drafts = [
        TicketDraft(
            type=TicketType.SUPPORT,
            description="Mediclaim card pending",
            flag_level=FlagLevel.ORANGE,
            action_owner="HR Ops",
            screening_id="SCR-1002",
            name="Meera Iyer",
            designation="Quality Analyst",
            source_week=SourceWeek.WEEK_3,
        )
    ]

    result = client.add_tickets(drafts)

    body = json.loads(seen[0].content)
    assert body["action"] == "addIssues"
    assert body["data"] == [
        {
            "type": "Support",
            "description": "Mediclaim card pending",
            "flagLevel": "Orange",
            "actionOwner": "HR Ops",
            "screeningID": "SCR-1002",
            "name": "Meera Iyer",
            "designation": "Quality Analyst",
            "sourceWeek": "Week 3",
        }
    ]
    assert result.count == 1
    assert result.ticket_ids == ["TKT-0010"]


def test_submit_week1_wraps_payload_in_data():
    client, seen = _client(lambda request: httpx.Response(200, json={"success": True}))
    submission = Week1Submission(
        screening_id="SCR-1001",
        name="Aarav Sharma",
        designation="Production Engineer",
        doj="2025-01-06",
        day="Day 2",
        job_role="Clear",
        location="PUNE",
    )

    client.submit_week1(submission)

    body = json.loads(seen[0].content)
    assert body["action"] == "submitWeek1"
    assert body["data"]["screeningID"] == "SCR-1001"
    assert body["data"]["jobRole"] == "Clear"
    assert body["data"]["location"] == "PUNE"


def test_redirects_are_followed():
    def handler(request):
        if request.url.host == "script.example.com":
            return httpx.Response(302, headers={"Location": "https://usercontent.example.com/echo"})
        return httpx.Response(200, json={"success": True, "data": []})

    client, seen = _client(handler)

    assert client.get_employees() == []
    assert [request.url.host for request in seen] == ["script.example.com", "usercontent.example.com"]
