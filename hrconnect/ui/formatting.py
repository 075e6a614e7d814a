from __future__ import annotations

from hrconnect.tickets.models import FlagLevel, TicketType, parse_timestamp
from hrconnect.tickets.state import TicketStatus

FLAG_TOOLTIPS: dict[FlagLevel, str] = {
    FlagLevel.RED: "🔴 Critical — Employee cannot perform job / at risk of leaving. Requires immediate HR intervention.",
    FlagLevel.ORANGE: "🟠 At-Risk — Productivity blocked or benefits pending. Needs follow-up within 48 hours.",
    FlagLevel.YELLOW: "🟡 Monitoring — Minor concerns noted. Employee adjusting, may need support if situation persists.",
}

FLAG_ICONS: dict[FlagLevel, str] = {
    FlagLevel.RED: "🔴",
    FlagLevel.ORANGE: "🟠",
    FlagLevel.YELLOW: "🟡",
}

FLAG_LABELS: dict[FlagLevel, str] = {
    FlagLevel.RED: "🔴 Red — Critical",
    FlagLevel.ORANGE: "🟠 Orange — At-Risk",
    FlagLevel.YELLOW: "🟡 Yellow — Monitoring",
}

TYPE_LABELS: dict[TicketType, str] = {
    TicketType.ISSUE: "🔴 Issue",
    TicketType.SUPPORT: "🔵 Support",
}

STATUS_COLOURS: dict[TicketStatus, str] = {
    TicketStatus.OPEN: "orange",
    TicketStatus.IN_PROGRESS: "yellow",
    TicketStatus.RESOLVED: "green",
}


def flag_tooltip(flag: object) -> str:
    try:
        return FLAG_TOOLTIPS[FlagLevel(flag)]
    except ValueError:
        return ""


def format_doj(raw: object) -> str:
    """Date of joining as DD-MM-YYYY; unparseable values are shown as given."""

    if raw is None or raw == "":
        return "—"
    parsed = parse_timestamp(raw)
    if parsed is None:
        return str(raw)
    return parsed.strftime("%d-%m-%Y")


def format_short_date(raw: object) -> str:
    """Compact DD/MM/YY for ticket lists."""

    if raw is None or raw == "":
        return ""
    parsed = parse_timestamp(raw)
    if parsed is None:
        return str(raw).split(",")[0]
    return parsed.strftime("%d/%m/%y")
