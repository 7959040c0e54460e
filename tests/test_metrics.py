from __future__ import annotations

import pytest

from hr_core.charts import CHART_OPTIONS
from hr_core.data import list_departments, prepare_context
from hr_core.filters import DashboardFilters, normalize_filters
from hr_core.metrics_employee import compute_employee_profile
from hr_core.metrics_overview import compute_overview
from hr_core.metrics_performance import compute_performance
from hr_core.metrics_retention import compute_retention
from hr_core.metrics_workforce import compute_workforce


def _ctx(store, **raw):
    snapshot = store.get_snapshot()
    filters = normalize_filters(raw, available_departments=list_departments(snapshot))
    return filters, prepare_context(filters, snapshot)


def test_normalize_filters_clamps_and_drops_unknowns():
    filters = normalize_filters(
        {
            "selected_departments": ["Sales", "Nowhere", "All Departments"],
            "search_query": "  ann ",
            "top_n": "5000",
            "hidden_charts": ["kpiTrend", "bogus"],
        },
        available_departments=["Sales", "IT"],
    )
    assert filters == DashboardFilters(["Sales"], "ann", 200, ["kpiTrend"])
    assert normalize_filters(None) == DashboardFilters()
    assert normalize_filters({"top_n": "x"}).top_n == 15


def test_departments_skip_blanks(rich_store):
    assert list_departments(rich_store.get_snapshot()) == ["IT", "Sales"]


def test_overview_kpis(rich_store):
    filters, ctx = _ctx(rich_store)
    payload = compute_overview(filters, ctx)
    assert payload["record_count"] == 4
    kpis = payload["kpis"]
    assert kpis["avg_kpi"] == pytest.approx(75.0)
    assert kpis["excellent_percent"] == pytest.approx(50.0)
    assert kpis["avg_attendance"] == pytest.approx(85.0)
    assert kpis["total_training"] == pytest.approx(60.0)


def test_overview_missing_columns_are_none(store):
    filters, ctx = _ctx(store)
    kpis = compute_overview(filters, ctx)["kpis"]
    assert kpis["avg_attendance"] is None
    assert kpis["total_training"] is None
    assert kpis["avg_kpi"] is not None


def test_overview_respects_filters(rich_store):
    filters, ctx = _ctx(rich_store, selected_departments=["Sales"])
    payload = compute_overview(filters, ctx)
    assert payload["record_count"] == 2
    assert payload["total_records"] == 4
    assert payload["kpis"]["avg_kpi"] == pytest.approx(70.0)

    filters, ctx = _ctx(rich_store, search_query="cho")
    assert compute_overview(filters, ctx)["record_count"] == 1
    filters, ctx = _ctx(rich_store, search_query="a2")
    assert compute_overview(filters, ctx)["record_count"] == 1


def test_overview_on_empty_table(rich_store):
    rich_store.replace([])
    filters, ctx = _ctx(rich_store)
    payload = compute_overview(filters, ctx)
    assert payload["record_count"] == 0
    assert payload["kpis"]["avg_kpi"] is None


def test_performance_payload(rich_store):
    filters, ctx = _ctx(rich_store)
    payload = compute_performance(filters, ctx)
    trend = {row["name"]: row["average_kpi"] for row in payload["kpi_trend"]}
    assert trend == {"Q1": 85.0, "Q2": 65.0, "Q3": 0.0, "Q4": 0.0}
    dist = {row["name"]: row["value"] for row in payload["performance_distribution"]}
    assert dist == {"Excellent": 2, "Good": 1, "Poor": 1}
    dept = {row["name"]: row["average_kpi"] for row in payload["department_kpi"]}
    assert dept == {"Sales": 70.0, "IT": 90.0}
    assert [row["name"] for row in payload["supervisor_kpi"]] == ["Tia", "Sam"]
    assert set(payload["charts"]) == {"kpiTrend", "performanceDistribution", "departmentKpi", "avgKpiBySupervisor"}


def test_hidden_charts_are_omitted(rich_store):
    filters, ctx = _ctx(rich_store, hidden_charts=["kpiTrend", "hrAction"])
    assert "kpiTrend" not in compute_performance(filters, ctx)["charts"]
    assert "hrAction" not in compute_retention(filters, ctx)["charts"]


def test_sample_roster_has_no_quarter_trend(store):
    filters, ctx = _ctx(store)
    payload = compute_performance(filters, ctx)
    assert payload["kpi_trend"] == []
    assert "kpiTrend" not in payload["charts"]


def test_workforce_payload(rich_store):
    filters, ctx = _ctx(rich_store, top_n=1)
    payload = compute_workforce(filters, ctx)
    counts = {row["name"]: row["employees"] for row in payload["employees_by_department"]}
    assert counts == {"Sales": 2, "IT": 1, "Unknown": 1}
    assert payload["kpi_by_job_title"] == [{"name": "Admin", "average_kpi": 80.0}]
    assert len(payload["projects_vs_kpi"]) == 3
    attendance = {row["name"]: row["average_attendance"] for row in payload["attendance_by_department"]}
    assert attendance == {"Sales": 80.0, "IT": 100.0}


def test_retention_payload(rich_store):
    filters, ctx = _ctx(rich_store)
    payload = compute_retention(filters, ctx)
    training = {row["name"]: row["average_hours"] for row in payload["training_by_department"]}
    assert training == {"Sales": 15.0, "IT": 30.0}
    hr = payload["hr_actions"]
    assert hr["actions"] == ["Retain", "Train"]
    by_dept = {row["name"]: row for row in hr["data"]}
    assert by_dept["Sales"] == {"name": "Sales", "Retain": 1, "Train": 1}
    assert by_dept["IT"] == {"name": "IT", "Retain": 1}
    assert "hrAction" in payload["charts"]


def test_every_chart_key_is_known(rich_store):
    filters, ctx = _ctx(rich_store)
    keys = set()
    for compute in (compute_performance, compute_workforce, compute_retention):
        keys |= set(compute(filters, ctx)["charts"])
    assert keys <= set(CHART_OPTIONS)


def test_employee_profile(store):
    profile = compute_employee_profile(store.find_by_identity("E001"))
    assert profile["found"]
    assert profile["display_name"] == "Alice Johnson"
    assert profile["gauge"] == {"score": 92.0, "remaining": 8.0}
    assert [p["name"] for p in profile["performance"]] == ["Average KPI (%)", "Productivity Rate (%)"]
    assert {"performance", "kpiGauge"} <= set(profile["charts"])
    assert {f["label"] for f in profile["rewards"]} >= {"Bonus Eligibility", "Reward Type"}


def test_employee_profile_not_found():
    assert compute_employee_profile(None)["found"] is False
    assert compute_employee_profile({})["found"] is False
