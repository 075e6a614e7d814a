"""Client and wire models for the spreadsheet-backed Gateway."""

from .client import GatewayClient, GatewayError, GatewayTransportError
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

__all__ = [
    "CreateTicketsResult",
    "DashboardPayload",
    "EmployeeRecord",
    "GatewayClient",
    "GatewayError",
    "GatewayTransportError",
    "StatusUpdate",
    "TicketDraft",
    "TicketRecord",
    "Week1Submission",
    "Week234Submission",
]
