from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

import pandas as pd

from hr_core.charts import bar_chart, donut_chart, line_chart, to_vega_spec
from hr_core.data import group_mean, numeric_series, present, text_series
from hr_core.filters import DashboardFilters
from hr_core.roles import MetricColumns

QUARTERS = ["Q1", "Q2", "Q3", "Q4"]


def kpi_trend(df: pd.DataFrame, cols: MetricColumns) -> pd.DataFrame:
    if not cols.quarter or not cols.kpi or df.empty:
        return pd.DataFrame(columns=["name", "average_kpi"])
    raw = df[cols.quarter]
    is_quarter = raw.map(lambda v: isinstance(v, str) and v.strip().upper().startswith("Q")).astype(bool)
    base = pd.DataFrame(
        {
            "name": raw[is_quarter].astype(str).str.strip().str.upper(),
            "kpi": numeric_series(df, cols.kpi)[is_quarter],
        }
    )
    means = base.groupby("name")["kpi"].mean()
    trend = pd.DataFrame({"name": QUARTERS, "average_kpi": [float(means.get(q, 0.0)) for q in QUARTERS]})
    if not (trend["average_kpi"] > 0).any():
        return pd.DataFrame(columns=["name", "average_kpi"])
    return trend


def performance_distribution(df: pd.DataFrame, cols: MetricColumns) -> pd.DataFrame:
    if not cols.performance or df.empty:
        return pd.DataFrame(columns=["name", "value"])
    levels = df[cols.performance]
    levels = levels[present(levels)].astype(str)
    dist = levels.value_counts(sort=False).reset_index()
    dist.columns = ["name", "value"]
    return dist


def average_kpi_by(df: pd.DataFrame, cols: MetricColumns, group_col: str, out_name: str) -> pd.DataFrame:
    if not group_col or not cols.kpi or df.empty:
        return pd.DataFrame(columns=["name", out_name])
    groups = df[group_col]
    mask = present(groups)
    base = pd.DataFrame({"group": text_series(df, group_col)[mask], "kpi": numeric_series(df, cols.kpi)[mask]})
    return group_mean(base, "group", "kpi", out_name)


def compute_performance(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("filtered", pd.DataFrame())
    cols: MetricColumns = ctx.get("columns", MetricColumns())

    trend = kpi_trend(df, cols)
    distribution = performance_distribution(df, cols)
    department = average_kpi_by(df, cols, cols.department, "average_kpi")
    supervisor = (
        average_kpi_by(df, cols, cols.supervisor, "average_team_kpi")
        .sort_values("average_team_kpi", ascending=False, kind="stable")
        .head(filters.top_n)
    )

    charts: Dict[str, Any] = {}
    if filters.shows("kpiTrend") and not trend.empty:
        charts["kpiTrend"] = to_vega_spec(line_chart(trend, "name", "average_kpi", title="Quarterly KPI Trend"))
    if filters.shows("performanceDistribution") and not distribution.empty:
        charts["performanceDistribution"] = to_vega_spec(donut_chart(distribution, "name", "value", title="Performance Rating Distribution"))
    if filters.shows("departmentKpi") and not department.empty:
        charts["departmentKpi"] = to_vega_spec(bar_chart(department, "name", "average_kpi", title="Department-wise KPI"))
    if filters.shows("avgKpiBySupervisor") and not supervisor.empty:
        charts["avgKpiBySupervisor"] = to_vega_spec(
            bar_chart(supervisor, "name", "average_team_kpi", title="Team KPI by Supervisor", horizontal=True)
        )

    def rows(frame: pd.DataFrame) -> List[Dict[str, Any]]:
        return frame.to_dict(orient="records")

    return {
        "filters": asdict(filters),
        "kpi_trend": rows(trend),
        "performance_distribution": rows(distribution),
        "department_kpi": rows(department),
        "supervisor_kpi": rows(supervisor),
        "charts": charts,
    }
