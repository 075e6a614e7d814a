from __future__ import annotations

from typing import Callable, Sequence

import streamlit as st
from opentelemetry.sdk.trace import TracerProvider

from hrconnect.controller import PAGE_LABELS, ConnectApp, Page
from hrconnect.core.config import get_settings
from hrconnect.core.logging import setup_observability
from hrconnect.forms import (
    LOCATIONS,
    REVIEW_WEEKS,
    WEEK1_DAYS,
    EmployeeSelection,
    FormValidationError,
    RaiseIssueForm,
    Week1Form,
    Week234Form,
    search_employees,
)
from hrconnect.gateway.client import GatewayClient, GatewayError
from hrconnect.tickets.filters import Category, display_window
from hrconnect.tickets.models import Employee, FlagLevel, SourceWeek, Ticket, TicketType
from hrconnect.tickets.service import TicketServiceError
from hrconnect.tickets.state import TicketStatus
from hrconnect.ui.formatting import (
    FLAG_ICONS,
    FLAG_LABELS,
    STATUS_COLOURS,
    TYPE_LABELS,
    flag_tooltip,
    format_doj,
    format_short_date,
)

_USER_ERRORS = (GatewayError, TicketServiceError, FormValidationError)

_STAT_CARDS: tuple[tuple[Category, str], ...] = (
    (Category.ALL, "Total Tickets"),
    (Category.OPEN, "⏳ Open"),
    (Category.RED, "🔴 Critical"),
    (Category.ORANGE, "🟠 At-Risk"),
    (Category.YELLOW, "🟡 Monitoring"),
    (Category.RESOLVED, "✅ Resolved"),
)


@st.cache_resource
def _observability() -> TracerProvider | None:
    # Once per server process, shared by every session.
    return setup_observability(get_settings())


def _get_base_url() -> str:
    base_url = st.session_state.get("base_url")
    if not base_url:
        base_url = get_settings().gateway_url
        st.session_state["base_url"] = base_url
    return str(base_url)


def _get_app() -> ConnectApp:
    base_url = _get_base_url()
    app = st.session_state.get("connect_app")
    if isinstance(app, ConnectApp) and st.session_state.get("connect_app_url") == base_url:
        return app
    settings = get_settings()
    gateway = GatewayClient(base_url=base_url, timeout=settings.gateway_timeout)
    app = ConnectApp(gateway, display_limit=settings.dashboard_display_limit)
    st.session_state["connect_app"] = app
    st.session_state["connect_app_url"] = base_url
    return app


def _session_form(key: str, factory: Callable[[], object]):
    form = st.session_state.get(key)
    if form is None:
        form = factory()
        st.session_state[key] = form
    return form


def _generation(key: str) -> int:
    return int(st.session_state.get(f"{key}_generation", 0))


def _bump_generation(key: str) -> None:
    st.session_state[f"{key}_generation"] = _generation(key) + 1


def _notify(message: str) -> None:
    st.session_state["notice"] = message


def _handle_call(callback: Callable[[], object], error_prefix: str = "") -> tuple[bool, object | None]:
    try:
        result = callback()
    except _USER_ERRORS as exc:
        st.error(f"{error_prefix}{exc}")
        return False, None
    if isinstance(result, str):
        _notify(result)
    return True, result


def _render_sidebar(app: ConnectApp) -> None:
    st.sidebar.header("Gateway")
    _get_base_url()
    st.sidebar.text_input("Gateway URL", key="base_url")
    if st.sidebar.button("🔄 Reload data"):
        success, _ = _handle_call(app.load_all, "Load error: ")
        if success:
            st.rerun()

    snapshot = app.store.snapshot
    st.sidebar.markdown("---")
    st.sidebar.caption(f"{len(snapshot.employees)} employees • {len(snapshot.tickets)} tickets")
    if app.store.is_loaded:
        st.sidebar.caption(f"Loaded {snapshot.loaded_at:%H:%M:%S} UTC")


# Shared widgets


def _employee_picker(employees: Sequence[Employee], selection: EmployeeSelection, key: str) -> None:
    if selection.is_selected and selection.employee is not None:
        name_col, clear_col = st.columns([5, 1])
        name_col.text_input("Search Employee *", value=selection.employee.name, disabled=True, key=f"{key}-chosen")
        if clear_col.button("✕", key=f"{key}-clear"):
            selection.clear()
            st.session_state.pop(f"{key}-select", None)
            st.session_state.pop(f"{key}-query", None)
            st.rerun()
        return

    query = st.text_input("Search Employee by Name *", key=f"{key}-query", placeholder="Type to search...")
    matches = search_employees(employees, query)
    noun = "employee" if len(matches) == 1 else "employees"
    st.caption(f"{len(matches)} {noun} {'matching' if query else 'available'}")
    if not matches:
        st.caption("No matches found")
        return
    chosen = st.selectbox(
        "Employee",
        options=matches,
        index=None,
        format_func=lambda emp: f"{emp.name} — {emp.screening_id} • {emp.designation}",
        key=f"{key}-select",
        placeholder="Click to browse...",
        label_visibility="collapsed",
    )
    if chosen is not None:
        selection.select(chosen)
        st.rerun()


def _employee_info(selection: EmployeeSelection) -> None:
    employee = selection.employee
    cols = st.columns(4)
    cols[0].caption("Screening ID")
    cols[0].code(employee.screening_id if employee else "—", language=None)
    cols[1].caption("Name")
    cols[1].write(employee.name if employee else "—")
    cols[2].caption("Designation")
    cols[2].write((employee.designation or "—") if employee else "—")
    cols[3].caption("DOJ")
    cols[3].write(format_doj(employee.doj) if employee else "—")


def _render_ticket_actions(app: ConnectApp, ticket: Ticket, container, key: str) -> None:
    if ticket.is_resolved:
        container.caption(ticket.resolution_notes or "Resolved")
        return

    if container.button("🔄 In Progress", key=f"{key}-progress", use_container_width=True):
        success, _ = _handle_call(lambda: app.start_progress(ticket.ticket_id))
        if success:
            st.rerun()

    with container.popover("✅ Resolve", use_container_width=True):
        st.markdown(f"**✅ Resolve: {ticket.ticket_id}**")
        st.write(ticket.employee_name)
        st.caption(ticket.description)
        with st.form(f"{key}-resolve"):
            notes = st.text_area("Resolution Notes *", placeholder="How was this resolved?")
            submitted = st.form_submit_button("Mark Resolved")
        if submitted:
            success, _ = _handle_call(lambda: app.resolve(ticket.ticket_id, notes))
            if success:
                st.rerun()


def _ticket_badges(ticket: Ticket) -> str:
    colour = STATUS_COLOURS.get(ticket.status, "gray")
    return (
        f"`{ticket.ticket_id}` {FLAG_ICONS.get(ticket.flag_level, '')} {ticket.flag_level.value} • "
        f"{ticket.type.value} • :{colour}[{ticket.status.value}]"
    )


# Pages


def _render_dashboard(app: ConnectApp) -> None:
    stats = app.stats()
    cols = st.columns(len(_STAT_CARDS))
    for col, (category, label) in zip(cols, _STAT_CARDS):
        col.metric(label, stats.count_for(category), help=flag_tooltip(category.value) or None)
        active = app.dashboard.category == category
        clicked = col.button(
            "Showing" if active else "Show",
            key=f"chip-{category.value}",
            type="primary" if active else "secondary",
        )
        if clicked:
            app.dashboard.select(category)
            st.rerun()

    head_col, search_col = st.columns([3, 2])
    app.dashboard.query = search_col.text_input(
        "Search",
        value=app.dashboard.query,
        placeholder="🔍 Search name, ticket ID, description...",
        label_visibility="collapsed",
        key="dashboard-search",
    )
    matches = app.dashboard.matches(app.store.tickets)
    head_col.subheader(f"⚡ {app.dashboard.heading} ({len(matches)})")

    if not matches:
        st.info("🎉 No issues found for this filter!")
        return

    for ticket in display_window(matches, app.dashboard.display_limit):
        with st.container(border=True):
            body, date_col, actions = st.columns([6, 1, 2])
            body.markdown(_ticket_badges(ticket), help=flag_tooltip(ticket.flag_level) or None)
            body.markdown(f"**{ticket.employee_name}**")
            body.write(ticket.description)
            date_col.caption(format_short_date(ticket.date_raised))
            _render_ticket_actions(app, ticket, actions, f"dash-{ticket.ticket_id}")


def _render_week1(app: ConnectApp) -> None:
    st.subheader("📝 Week 1 Daily Touchpoint Form")
    form: Week1Form = _session_form("week1_form", Week1Form)
    gen = _generation("week1")

    _employee_picker(app.store.employees, form.selection, f"week1-{gen}")
    _employee_info(form.selection)
    with st.form(f"week1-form-{gen}"):
        day_col, location_col = st.columns(2)
        day = day_col.selectbox(
            "Day *",
            options=list(WEEK1_DAYS),
            index=None,
            format_func=lambda day: f"{day} — {WEEK1_DAYS[day]}",
            placeholder="-- Select Day --",
        )
        location = location_col.selectbox(
            "Location",
            options=list(LOCATIONS),
            index=None,
            format_func=LOCATIONS.__getitem__,
            placeholder="— Select Location —",
        )
        role_col, comfort_col = st.columns(2)
        job_role = role_col.text_area("Discussion on Job Role", placeholder="Responsibilities, clarity, team coordination...")
        comfort = comfort_col.text_area("Personal Comfort / Discomfort", placeholder="Travel, accommodation, food, workspace...")
        support = st.text_area("Additional Support / Clarity / System Needed", placeholder="Laptop, email ID, software, mediclaim...")
        submitted = st.form_submit_button("Submit Week 1 Response", use_container_width=True)

    if submitted:
        form.day = day or ""
        form.location = location or ""
        form.job_role, form.comfort, form.support = job_role, comfort, support
        with st.spinner("Submitting..."):
            success, _ = _handle_call(lambda: app.submit_week1(form))
        if success:
            _bump_generation("week1")
            st.rerun()


def _render_week234(app: ConnectApp) -> None:
    st.subheader("📋 Week 2 / 3 / 4 Review Form")
    form: Week234Form = _session_form("week234_form", Week234Form)
    gen = _generation("week234")

    _employee_picker(app.store.employees, form.selection, f"week234-{gen}")
    _employee_info(form.selection)
    with st.form(f"week234-form-{gen}"):
        week = st.selectbox(
            "Week Number *",
            options=list(REVIEW_WEEKS),
            index=None,
            format_func=lambda week: week.value,
            placeholder="-- Select --",
        )
        clarity_col, env_col = st.columns(2)
        role_clarity = clarity_col.text_area("Role Clarity & Workload", placeholder="Clear about roles? Occupied enough?")
        work_env = env_col.text_area(
            "Work Environment & Comfort", placeholder="Comfortable? Infrastructure? Conversations with RM?"
        )
        support_required = st.text_area("Support Required", placeholder="What support does the employee need?")
        submitted = st.form_submit_button("Submit Week 2-4 Response", use_container_width=True)

    if submitted:
        form.week_number = week
        form.role_clarity, form.work_environment, form.support_required = role_clarity, work_env, support_required
        with st.spinner("Submitting..."):
            success, _ = _handle_call(lambda: app.submit_week234(form))
        if success:
            _bump_generation("week234")
            st.rerun()


def _render_tracker(app: ConnectApp) -> None:
    filter_col, flag_col, search_col = st.columns([3, 3, 2])
    status_options: list[TicketStatus | None] = [None, *TicketStatus]
    flag_options: list[FlagLevel | None] = [None, *FlagLevel]
    app.tracker.status = filter_col.radio(
        "Filter",
        options=status_options,
        index=status_options.index(app.tracker.status),
        format_func=lambda status: status.value if status else "All",
        horizontal=True,
        key="tracker-status",
    )
    app.tracker.flag = flag_col.radio(
        "Flag",
        options=flag_options,
        index=flag_options.index(app.tracker.flag),
        format_func=lambda flag: FLAG_ICONS[flag] if flag else "All Flags",
        horizontal=True,
        key="tracker-flag",
    )
    app.tracker.query = search_col.text_input(
        "Search",
        value=app.tracker.query,
        placeholder="🔍 Search name, ticket, description...",
        key="tracker-search",
    )

    matches = app.tracker.matches(app.store.tickets)
    if not matches:
        st.info("No issues matching this filter.")
        return

    header = st.columns([2, 2, 1, 4, 1, 2, 1, 2])
    for col, title in zip(header, ("Ticket", "Employee", "Type", "Description", "Flag", "Owner", "Status", "Actions")):
        col.markdown(f"**{title}**")
    for ticket in matches:
        cols = st.columns([2, 2, 1, 4, 1, 2, 1, 2])
        cols[0].markdown(f"`{ticket.ticket_id}`  \n{format_short_date(ticket.date_raised)}")
        cols[1].markdown(f"{ticket.employee_name}  \n{ticket.screening_id}")
        cols[2].write(ticket.type.value)
        cols[3].write(ticket.description)
        cols[4].markdown(FLAG_ICONS.get(ticket.flag_level, ""), help=flag_tooltip(ticket.flag_level) or None)
        cols[5].write(ticket.action_owner or "—")
        cols[6].markdown(f":{STATUS_COLOURS.get(ticket.status, 'gray')}[{ticket.status.value}]")
        _render_ticket_actions(app, ticket, cols[7], f"tracker-{ticket.ticket_id}")


def _render_raise(app: ConnectApp) -> None:
    st.subheader("➕ Raise Issues / Support Tickets")
    form: RaiseIssueForm = _session_form("raise_form", RaiseIssueForm)
    gen = _generation("raise")

    pick_col, week_col = st.columns(2)
    with pick_col:
        _employee_picker(app.store.employees, form.selection, f"raise-{gen}")
    weeks = list(SourceWeek)
    form.source_week = week_col.selectbox(
        "Source Week",
        options=weeks,
        index=weeks.index(form.source_week),
        format_func=lambda week: week.value,
        key=f"raise-{gen}-week",
    )
    _employee_info(form.selection)

    title_col, add_col = st.columns([5, 1])
    title_col.markdown("**Issues / Support Items**")
    if add_col.button("+ Add Row", key=f"raise-{gen}-add"):
        form.add_row()
        st.rerun()

    types = list(TicketType)
    flags = list(FlagLevel)
    for index, row in enumerate(form.rows):
        key = f"raise-{gen}-{index}"
        with st.container(border=True):
            cols = st.columns([1, 3, 1, 2, 0.5])
            row_type = cols[0].selectbox(
                f"#{index + 1} Type", options=types, index=types.index(row.type),
                format_func=TYPE_LABELS.__getitem__, key=f"{key}-type",
            )
            description = cols[1].text_input(
                "Description *", value=row.description, placeholder="No laptop, 60km commute...", key=f"{key}-desc"
            )
            flag = cols[2].selectbox(
                "Flag Level", options=flags, index=flags.index(row.flag_level),
                format_func=FLAG_LABELS.__getitem__, key=f"{key}-flag",
            )
            owner = cols[3].text_input("Action Owner", value=row.action_owner, placeholder="IT, Admin...", key=f"{key}-owner")
            form.update_row(index, type=row_type, description=description, flag_level=flag, action_owner=owner)
            if len(form.rows) > 1 and cols[4].button("✕", key=f"{key}-remove"):
                form.remove_row(index)
                _bump_generation("raise")
                st.rerun()

    if st.button(f"🎫 Create {len(form.rows)} Ticket(s)", type="primary", use_container_width=True):
        with st.spinner("Creating tickets..."):
            success, _ = _handle_call(lambda: app.raise_tickets(form))
        if success:
            _bump_generation("raise")
            st.rerun()


_PAGE_RENDERERS: dict[Page, Callable[[ConnectApp], None]] = {
    Page.DASHBOARD: _render_dashboard,
    Page.WEEK1: _render_week1,
    Page.WEEK234: _render_week234,
    Page.TRACKER: _render_tracker,
    Page.RAISE: _render_raise,
}


def main() -> None:
    st.set_page_config(page_title="HR Employee Connect", layout="wide")
    _observability()

    st.title("HR Employee Connect")
    st.caption("Issue Tracking & Resolution System")

    app = _get_app()
    _render_sidebar(app)

    notice = st.session_state.pop("notice", None)
    if notice:
        st.toast(notice)

    if not app.store.is_loaded:
        with st.spinner("Loading dashboard..."):
            _handle_call(app.load_all, "Load error: ")

    app.page = st.radio(
        "Page",
        options=list(Page),
        index=list(Page).index(app.page),
        format_func=PAGE_LABELS.__getitem__,
        horizontal=True,
        label_visibility="collapsed",
        key="page",
    )
    _PAGE_RENDERERS[app.page](app)


if __name__ == "__main__":
    main()
