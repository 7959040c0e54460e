from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from hr_core.charts import bar_chart, scatter_chart, to_vega_spec
from hr_core.data import group_mean, numeric_series, present, text_series
from hr_core.filters import DashboardFilters
from hr_core.metrics_performance import average_kpi_by
from hr_core.roles import MetricColumns


def employees_by_department(df: pd.DataFrame, cols: MetricColumns) -> pd.DataFrame:
    if not cols.department or df.empty:
        return pd.DataFrame(columns=["name", "employees"])
    depts = text_series(df, cols.department).where(present(df[cols.department]), "Unknown")
    counts = depts.value_counts(sort=False).reset_index()
    counts.columns = ["name", "employees"]
    return counts


def projects_vs_kpi(df: pd.DataFrame, cols: MetricColumns) -> pd.DataFrame:
    if not cols.kpi or not cols.projects or df.empty:
        return pd.DataFrame(columns=["kpi", "projects"])
    mask = present(df[cols.kpi]) & present(df[cols.projects])
    return pd.DataFrame(
        {
            "kpi": numeric_series(df, cols.kpi)[mask],
            "projects": numeric_series(df, cols.projects)[mask],
        }
    ).reset_index(drop=True)


def attendance_by_department(df: pd.DataFrame, cols: MetricColumns) -> pd.DataFrame:
    if not cols.department or not cols.attendance or df.empty:
        return pd.DataFrame(columns=["name", "average_attendance"])
    mask = present(df[cols.department])
    base = pd.DataFrame(
        {"dept": text_series(df, cols.department)[mask], "attendance": numeric_series(df, cols.attendance)[mask]}
    )
    return group_mean(base, "dept", "attendance", "average_attendance")


def compute_workforce(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("filtered", pd.DataFrame())
    cols: MetricColumns = ctx.get("columns", MetricColumns())

    by_dept = employees_by_department(df, cols)
    by_title = (
        average_kpi_by(df, cols, cols.job_title, "average_kpi")
        .sort_values("average_kpi", ascending=False, kind="stable")
        .head(filters.top_n)
    )
    scatter = projects_vs_kpi(df, cols)
    attendance = attendance_by_department(df, cols)

    charts: Dict[str, Any] = {}
    if filters.shows("employeeDistByDept") and not by_dept.empty:
        charts["employeeDistByDept"] = to_vega_spec(bar_chart(by_dept, "name", "employees", title="Employees by Department"))
    if filters.shows("avgKpiByJobTitle") and not by_title.empty:
        charts["avgKpiByJobTitle"] = to_vega_spec(
            bar_chart(by_title, "name", "average_kpi", title="KPI by Job Title", horizontal=True)
        )
    if filters.shows("projectsVsKpi") and not scatter.empty:
        charts["projectsVsKpi"] = to_vega_spec(scatter_chart(scatter, "projects", "kpi", title="Projects vs. KPI"))
    if filters.shows("avgAttendanceByDept") and not attendance.empty:
        charts["avgAttendanceByDept"] = to_vega_spec(
            bar_chart(attendance, "name", "average_attendance", title="Attendance by Department")
        )

    return {
        "filters": asdict(filters),
        "employees_by_department": by_dept.to_dict(orient="records"),
        "kpi_by_job_title": by_title.to_dict(orient="records"),
        "projects_vs_kpi": scatter.to_dict(orient="records"),
        "attendance_by_department": attendance.to_dict(orient="records"),
        "charts": charts,
    }
