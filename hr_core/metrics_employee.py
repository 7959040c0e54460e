"""Payload for the employee's own performance page."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional

import altair as alt
import pandas as pd

from hr_core.charts import bar_chart, to_vega_spec
from hr_core.roles import resolve_profile_columns


def _as_float(value: object) -> float:
    out = pd.to_numeric(pd.Series([value]), errors="coerce").iloc[0]
    return 0.0 if pd.isna(out) else float(out)


def _fact(record: Mapping[str, object], col: Optional[str]) -> Optional[Dict[str, Any]]:
    if not col:
        return None
    return {"label": col, "value": record.get(col, "")}


def gauge_chart(score: float) -> alt.Chart:
    df = pd.DataFrame({"name": ["Score", "Remaining"], "value": [score, max(0.0, 100.0 - score)]})
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=80, outerRadius=110)
        .encode(
            theta=alt.Theta("value:Q", stack=True),
            color=alt.Color("name:N", scale=alt.Scale(domain=["Score", "Remaining"], range=["#2563eb", "#e5e7eb"]), legend=None),
            tooltip=["name", "value"],
        )
    )


def compute_employee_profile(record: Optional[Mapping[str, object]]) -> Dict[str, Any]:
    if not record:
        return {"found": False, "columns": {}, "details": [], "performance": [], "gauge": None, "rewards": [], "charts": {}}

    headers = list(record.keys())
    cols = resolve_profile_columns(headers)

    performance: List[Dict[str, Any]] = []
    for col in (cols.kpi, cols.productivity):
        if col:
            performance.append({"name": col, "value": _as_float(record.get(col))})

    gauge = None
    if cols.kpi:
        score = _as_float(record.get(cols.kpi))
        gauge = {"score": score, "remaining": 100.0 - score}

    details = [f for f in (_fact(record, c) for c in (cols.identity, cols.name, cols.job_title, cols.department, cols.supervisor)) if f]
    rewards = [f for f in (_fact(record, c) for c in (cols.bonus, cols.reward, cols.retention, cols.performance)) if f]

    charts: Dict[str, Any] = {}
    if performance:
        charts["performance"] = to_vega_spec(bar_chart(pd.DataFrame(performance), "name", "value", title="Performance Metrics"))
    if gauge is not None:
        charts["kpiGauge"] = to_vega_spec(gauge_chart(gauge["score"]))

    return {
        "found": True,
        "display_name": record.get(cols.name, "") if cols.name else "",
        "columns": asdict(cols),
        "details": details,
        "performance": performance,
        "gauge": gauge,
        "rewards": rewards,
        "charts": charts,
    }
