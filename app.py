import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import streamlit as st

from hr_core.auth import SessionUser, authenticate, refresh_user
from hr_core.charts import CHART_OPTIONS
from hr_core.config import configure_logging, load_settings
from hr_core.csv_codec import CSVMode, decode_upload, export_csv, import_csv
from hr_core.data import list_departments, prepare_context
from hr_core.errors import CSVImportError, FileReadError
from hr_core.filters import normalize_filters
from hr_core.metrics_employee import compute_employee_profile
from hr_core.metrics_overview import compute_overview
from hr_core.metrics_performance import compute_performance
from hr_core.metrics_retention import compute_retention
from hr_core.metrics_workforce import compute_workforce
from hr_core.records import coerce_form_values, new_employee
from hr_core.store import TabularStore

logger = logging.getLogger(__name__)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .card-actions {font-size: 0.9rem;color: #2563eb;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
            <div class="card-actions">{actions or ""}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(selected_departments: List[str], search_query: str, record_count: int) -> str:
    dept_chip = "Department: All" if not selected_departments else f"Department: {', '.join(selected_departments)}"
    search_chip = f"Search: {search_query}" if search_query else "Search: none"
    count_chip = f"Records: {record_count}"
    return "".join([f"<span class='chip'>{txt}</span>" for txt in [dept_chip, search_chip, count_chip]])


def render_page_header(title: str, breadcrumb: str, filter_summary_html: str = ""):
    inject_base_styles()
    top = st.container()
    c1, c2 = top.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if st.button("Sign out", key=f"signout_{title}"):
            st.session_state.pop("user", None)
            st.rerun()
    if filter_summary_html:
        st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


def render_chart(charts: Dict[str, Any], key: str):
    spec = charts.get(key)
    if spec is None:
        return False
    with card(CHART_OPTIONS.get(key, key)):
        st.vega_lite_chart(spec=spec, use_container_width=True)
    return True


def _pct(value: Optional[float]) -> str:
    return f"{value:.1f}%" if value is not None else "N/A"


# ---------- Session setup ----------
st.set_page_config(page_title="HR Analytics Dashboard", layout="wide")
inject_base_styles()

settings = load_settings()
configure_logging(settings.log_level)

if "store" not in st.session_state:
    st.session_state["store"] = TabularStore()
store: TabularStore = st.session_state["store"]

user: Optional[SessionUser] = st.session_state.get("user")
if user is not None:
    user = refresh_user(user, store.get_snapshot())
    st.session_state["user"] = user


def render_login_page():
    st.title("HR Analytics Dashboard")
    st.caption("Sign in as the administrator or with your employee ID.")
    with st.form("login"):
        username = st.text_input("Username / Employee ID")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        signed_in = authenticate(store, username, password, settings)
        if signed_in is None:
            st.error("Invalid username or password.")
        else:
            st.session_state["user"] = signed_in
            st.rerun()


# ----- Page renderers -----
def render_dashboard_page():
    snapshot = store.get_snapshot()
    departments = list_departments(snapshot)

    with st.sidebar:
        st.markdown("---")
        st.markdown("### Quick filters")
        selected_departments = st.multiselect("Department", options=departments, default=[])
        search_query = st.text_input("Employee name / ID search (optional)", "")
        with st.expander("Customize dashboard", expanded=False):
            visible = st.multiselect(
                "Show visualizations",
                options=list(CHART_OPTIONS),
                default=list(CHART_OPTIONS),
                format_func=lambda k: CHART_OPTIONS[k],
            )
            top_n = st.slider("Top N rows", min_value=5, max_value=50, value=15, step=5)

    filters = normalize_filters(
        {
            "selected_departments": selected_departments,
            "search_query": search_query,
            "top_n": top_n,
            "hidden_charts": [k for k in CHART_OPTIONS if k not in visible],
        },
        available_departments=departments,
    )
    ctx = prepare_context(filters, snapshot)
    overview = compute_overview(filters, ctx)

    render_page_header(
        "HR Dashboard",
        "Admin / Dashboard",
        format_filter_summary(filters.selected_departments, filters.search_query, overview["record_count"]),
    )

    with card("Overall Performance Snapshot"):
        kpis = overview["kpis"]
        tiles = [
            ("Average KPI Score", _pct(kpis["avg_kpi"]), "Across all employee records"),
            ("% Excellent Performers", _pct(kpis["excellent_percent"]), "Employees rated as 'Excellent'"),
            ("Avg. Attendance Rate", _pct(kpis["avg_attendance"]), "Company-wide average"),
            (
                "Total Training Hours",
                f"{kpis['total_training']:,.0f}" if kpis["total_training"] is not None else "N/A",
                "Sum across all employees",
            ),
        ]
        cols = st.columns(len(tiles))
        for col, (label, value, help_text) in zip(cols, tiles):
            col.metric(label, value, help=help_text)

    sections = [
        ("Performance Deep Dive", compute_performance, ["kpiTrend", "performanceDistribution", "departmentKpi", "avgKpiBySupervisor"]),
        ("Workforce & Productivity", compute_workforce, ["employeeDistByDept", "avgKpiByJobTitle", "projectsVsKpi", "avgAttendanceByDept"]),
        ("Development & Retention", compute_retention, ["avgTrainingByDept", "hrAction"]),
    ]
    for title, compute, keys in sections:
        charts = compute(filters, ctx)["charts"]
        present = [k for k in keys if k in charts]
        if not present:
            continue
        st.subheader(title)
        grid = st.columns(2)
        for idx, key in enumerate(present):
            with grid[idx % 2]:
                render_chart(charts, key)


def render_employees_page():
    snapshot = store.get_snapshot()
    render_page_header("Employees", "Admin / Employees")
    key = snapshot.identity_column

    with card("Roster", actions=f"{len(snapshot.records)} records"):
        if st.button("Add employee"):
            existing = [r.get(key) for r in snapshot.records] if key else []
            record = new_employee(snapshot.headers, existing)
            store.add_record(record)
            st.success(f"{record.get('Employee Name', record.get(key, 'New employee'))} has been added.")
            snapshot = store.get_snapshot()
        if snapshot.is_empty:
            st.info("No employee records loaded.")
            return
        st.dataframe(snapshot.to_frame(), use_container_width=True, hide_index=True)

    if key is None:
        return
    with card("Edit employee"):
        ids = [str(r.get(key, "")) for r in snapshot.records]
        chosen = st.selectbox("Select employee", options=ids)
        record = store.find_by_identity(chosen) if chosen else None
        if record is None:
            st.info("No employee selected.")
            return
        with st.form(f"edit_{chosen}"):
            values: Dict[str, Any] = {}
            for header in snapshot.headers:
                current = record.get(header, "")
                if isinstance(current, (int, float)) and not isinstance(current, bool):
                    values[header] = st.number_input(header, value=current, disabled=header == key)
                else:
                    values[header] = st.text_input(header, value=str(current), disabled=header == key)
            saved = st.form_submit_button("Save changes")
        if saved:
            store.update_by_identity(coerce_form_values(record, values))
            st.success(f"{chosen}'s data has been updated.")
            st.rerun()
        if st.button("Delete employee", type="primary"):
            removed = store.remove_by_identity(chosen)
            if removed is not None:
                st.warning(f"{chosen} has been removed from the system.")
            st.rerun()


def render_data_operations_page():
    render_page_header("Data Operations", "Admin / Data Operations")
    st.caption(
        "Upload a CSV file to use your own data, download the current data, or reset to the original sample data."
    )
    left, right = st.columns(2)
    with left:
        with card("Download Data"):
            st.write("Download the current employee dataset as a CSV file. Use it as the template for uploads.")
            export = export_csv(store)
            st.download_button(
                "Download CSV File",
                data=export.content.encode("utf-8"),
                file_name=export.filename,
                mime=export.mime_type,
                disabled=not export.content,
            )
    with right:
        with card("Import Data"):
            st.write("Upload a new CSV file to replace all existing data. This action cannot be undone.")
            uploaded = st.file_uploader("Select CSV File", type=["csv"])
            mode = st.radio(
                "Header policy",
                options=[CSVMode.SCHEMA_FREE, CSVMode.FIXED],
                index=0 if settings.csv_mode is CSVMode.SCHEMA_FREE else 1,
                format_func=lambda m: "Any columns" if m is CSVMode.SCHEMA_FREE else "Employee template",
                horizontal=True,
            )
            if st.button("Import and Replace Data", type="primary", disabled=uploaded is None):
                try:
                    text = decode_upload(uploaded.getvalue())
                    result = import_csv(store, text, mode)
                except FileReadError as exc:
                    st.error(f"File Read Error: {exc}")
                except CSVImportError as exc:
                    st.error(f"Import Failed: {exc}")
                else:
                    st.success(f"Successfully imported {len(result.records)} employee records.")
    with card("Reset Data"):
        st.write("Revert the employee data to the original sample dataset that came with the application.")
        if st.button("Reset to Sample Data"):
            store.reset()
            st.success("Employee data has been reset to the original sample data.")


def render_my_performance_page(current: SessionUser):
    render_page_header("My Performance", "Home / My Performance")
    profile = compute_employee_profile(current.employee)
    if not profile["found"]:
        st.info("Could not find performance data for your account.")
        return
    st.subheader(f"Welcome, {profile['display_name'] or current.username}")
    with card("Profile"):
        cols = st.columns(max(1, len(profile["details"])))
        for col, fact in zip(cols, profile["details"]):
            col.metric(fact["label"], str(fact["value"]))

    left, right = st.columns(2)
    with left:
        if not render_chart(profile["charts"], "performance"):
            st.info("Performance metrics are not available for your record.")
    with right:
        if profile["gauge"] is not None:
            with card("KPI Score"):
                st.vega_lite_chart(spec=profile["charts"]["kpiGauge"], use_container_width=True)
                st.metric("KPI", f"{profile['gauge']['score']:.1f}%")

    if profile["rewards"]:
        with card("Rewards & Recognition"):
            for fact in profile["rewards"]:
                st.markdown(f"**{fact['label']}:** {fact['value']}")


# ----- Navigation -----
if user is None:
    render_login_page()
    st.stop()

with st.sidebar:
    st.markdown(f"### Signed in as {user.username}")
    if user.is_admin:
        nav_choice = st.radio("Navigate", ["Dashboard", "Employees", "Data Operations"], index=0)
    else:
        nav_choice = st.radio("Navigate", ["My Performance"], index=0)

if not user.is_admin:
    render_my_performance_page(user)
elif nav_choice == "Employees":
    render_employees_page()
elif nav_choice == "Data Operations":
    render_data_operations_page()
else:
    render_dashboard_page()
