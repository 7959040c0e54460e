from __future__ import annotations

from typing import Any, Dict, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

CHART_OPTIONS: Dict[str, str] = {
    "kpiTrend": "Quarterly KPI Trend",
    "performanceDistribution": "Performance Rating Distribution",
    "departmentKpi": "Department-wise KPI",
    "avgKpiBySupervisor": "Team KPI by Supervisor",
    "employeeDistByDept": "Employees by Department",
    "avgKpiByJobTitle": "KPI by Job Title",
    "projectsVsKpi": "Projects vs. KPI",
    "avgAttendanceByDept": "Attendance by Department",
    "avgTrainingByDept": "Training Hours by Department",
    "hrAction": "HR Recommendation Distribution",
}

PERFORMANCE_COLORS = {
    "Excellent": "#16a34a",
    "Good": "#2563eb",
    "Satisfactory": "#eab308",
    "Needs Improvement": "#f97316",
    "Poor": "#dc2626",
}


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def bar_chart(df: pd.DataFrame, category: str, value: str, *, title: Optional[str] = None, horizontal: bool = False) -> alt.Chart:
    hover = alt.selection_point(fields=[category], on="mouseover", empty="all")
    cat_enc = alt.X(f"{category}:N", title=None, sort=None, axis=alt.Axis(grid=False, labelAngle=-30))
    val_enc = alt.Y(f"{value}:Q", title=value, axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False))
    if horizontal:
        cat_enc = alt.Y(f"{category}:N", title=None, sort=None, axis=alt.Axis(grid=False))
        val_enc = alt.X(f"{value}:Q", title=value, axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False))
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=val_enc if horizontal else cat_enc,
            y=cat_enc if horizontal else val_enc,
            color=alt.Color(f"{category}:N", legend=None),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.6)),
            tooltip=[alt.Tooltip(category, title=category.capitalize()), alt.Tooltip(value, format=",.2f")],
        )
        .add_params(hover)
    )
    return chart.properties(title=title) if title else chart


def line_chart(df: pd.DataFrame, x: str, y: str, *, title: Optional[str] = None) -> alt.Chart:
    chart = (
        alt.Chart(df)
        .mark_line(point={"filled": True, "size": 60})
        .encode(
            x=alt.X(f"{x}:O", title=None, axis=alt.Axis(grid=False)),
            y=alt.Y(f"{y}:Q", axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=[alt.Tooltip(x), alt.Tooltip(y, format=",.2f")],
        )
    )
    return chart.properties(title=title) if title else chart


def donut_chart(df: pd.DataFrame, category: str, value: str, *, title: Optional[str] = None) -> alt.Chart:
    domain = [c for c in PERFORMANCE_COLORS if c in set(df[category].astype(str))]
    color = alt.Color(f"{category}:N")
    if domain and len(domain) == df[category].nunique():
        color = alt.Color(f"{category}:N", scale=alt.Scale(domain=domain, range=[PERFORMANCE_COLORS[c] for c in domain]))
    chart = (
        alt.Chart(df)
        .mark_arc(innerRadius=50)
        .encode(theta=alt.Theta(f"{value}:Q"), color=color, tooltip=[category, value])
    )
    return chart.properties(title=title) if title else chart


def scatter_chart(df: pd.DataFrame, x: str, y: str, *, title: Optional[str] = None) -> alt.Chart:
    chart = (
        alt.Chart(df)
        .mark_circle(size=70, opacity=0.7)
        .encode(
            x=alt.X(f"{x}:Q", title=x),
            y=alt.Y(f"{y}:Q", title=y),
            tooltip=[x, y],
        )
    )
    return chart.properties(title=title) if title else chart


def stacked_bar_chart(df: pd.DataFrame, category: str, stack: str, value: str, *, title: Optional[str] = None) -> alt.Chart:
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X(f"{category}:N", title=None, axis=alt.Axis(grid=False, labelAngle=-30)),
            y=alt.Y(f"{value}:Q", stack="zero", title=value),
            color=alt.Color(f"{stack}:N", title=stack.capitalize()),
            tooltip=[category, stack, value],
        )
    )
    return chart.properties(title=title) if title else chart
