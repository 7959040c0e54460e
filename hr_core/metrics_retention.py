from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

import pandas as pd

from hr_core.charts import bar_chart, stacked_bar_chart, to_vega_spec
from hr_core.data import group_mean, numeric_series, present, text_series
from hr_core.filters import DashboardFilters
from hr_core.roles import MetricColumns


def training_by_department(df: pd.DataFrame, cols: MetricColumns) -> pd.DataFrame:
    if not cols.department or not cols.training_hours or df.empty:
        return pd.DataFrame(columns=["name", "average_hours"])
    mask = present(df[cols.department])
    base = pd.DataFrame(
        {"dept": text_series(df, cols.department)[mask], "hours": numeric_series(df, cols.training_hours)[mask]}
    )
    return group_mean(base, "dept", "hours", "average_hours")


def hr_action_counts(df: pd.DataFrame, cols: MetricColumns) -> Dict[str, Any]:
    """Per-department counts of each HR recommendation (blank -> "N/A")."""
    if not cols.department or not cols.recommendation or df.empty:
        return {"data": [], "actions": [], "long": pd.DataFrame(columns=["name", "action", "count"])}

    actions_raw = df[cols.recommendation]
    actions: List[str] = [a for a in text_series(df, cols.recommendation)[present(actions_raw)].unique().tolist()]

    mask = present(df[cols.department])
    base = pd.DataFrame(
        {
            "name": text_series(df, cols.department)[mask],
            "action": text_series(df, cols.recommendation).where(present(actions_raw), "N/A")[mask],
        }
    )
    if base.empty:
        return {"data": [], "actions": actions, "long": pd.DataFrame(columns=["name", "action", "count"])}

    long = base.groupby(["name", "action"], sort=False).size().reset_index(name="count")
    data: List[Dict[str, Any]] = []
    for dept, group in long.groupby("name", sort=False):
        row: Dict[str, Any] = {"name": dept}
        row.update({str(a): int(c) for a, c in zip(group["action"], group["count"])})
        data.append(row)
    return {"data": data, "actions": actions, "long": long}


def compute_retention(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("filtered", pd.DataFrame())
    cols: MetricColumns = ctx.get("columns", MetricColumns())

    training = training_by_department(df, cols)
    hr_actions = hr_action_counts(df, cols)

    charts: Dict[str, Any] = {}
    if filters.shows("avgTrainingByDept") and not training.empty:
        charts["avgTrainingByDept"] = to_vega_spec(
            bar_chart(training, "name", "average_hours", title="Training Hours by Department")
        )
    if filters.shows("hrAction") and hr_actions["data"]:
        charts["hrAction"] = to_vega_spec(
            stacked_bar_chart(hr_actions["long"], "name", "action", "count", title="HR Recommendation Distribution")
        )

    return {
        "filters": asdict(filters),
        "training_by_department": training.to_dict(orient="records"),
        "hr_actions": {"data": hr_actions["data"], "actions": hr_actions["actions"]},
        "charts": charts,
    }
