from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from hr_core.data import numeric_series, text_series
from hr_core.filters import DashboardFilters
from hr_core.roles import MetricColumns


def _mean_over_all(df: pd.DataFrame, col: Optional[str]) -> Optional[float]:
    if not col:
        return None
    if df.empty:
        return 0.0
    return float(numeric_series(df, col).sum() / len(df))


def compute_overview(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("filtered", pd.DataFrame())
    cols: MetricColumns = ctx.get("columns", MetricColumns())
    total = int(len(df))

    excellent_percent: Optional[float] = None
    if cols.performance:
        excellent = int(text_series(df, cols.performance).str.lower().eq("excellent").sum()) if total else 0
        excellent_percent = (excellent / total) * 100 if total else 0.0

    total_training: Optional[float] = None
    if cols.training_hours:
        total_training = float(numeric_series(df, cols.training_hours).sum()) if total else 0.0

    return {
        "filters": asdict(filters),
        "record_count": total,
        "total_records": int(len(ctx.get("frame", pd.DataFrame()))),
        "columns": asdict(cols),
        "kpis": {
            "avg_kpi": _mean_over_all(df, cols.kpi),
            "excellent_percent": excellent_percent,
            "avg_attendance": _mean_over_all(df, cols.attendance),
            "total_training": total_training,
        },
    }
