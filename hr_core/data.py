"""Snapshot -> pandas helpers shared by the metrics modules."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pandas as pd

from hr_core.filters import DashboardFilters, normalize_filters
from hr_core.roles import MetricColumns, identity_column, name_column, resolve_metric_columns
from hr_core.store import TableSnapshot


def numeric_series(df: pd.DataFrame, col: Optional[str]) -> pd.Series:
    """Column as floats; blanks and non-numeric text count as 0."""
    if not col or col not in df.columns:
        return pd.Series(0.0, index=df.index)
    return pd.to_numeric(df[col], errors="coerce").fillna(0.0).astype(float)


def text_series(df: pd.DataFrame, col: Optional[str]) -> pd.Series:
    if not col or col not in df.columns:
        return pd.Series("", index=df.index, dtype="string")
    series = df[col].astype("string").str.strip()
    return series.fillna("")


def _truthy(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if pd.isna(value):
        return False
    return bool(value)


def present(series: pd.Series) -> pd.Series:
    """Mask of entries that hold a value; blanks, NaN and numeric 0 are excluded."""
    return series.map(_truthy).astype(bool)


def group_mean(df: pd.DataFrame, by: str, value: str, out_name: str) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["name", out_name])
    grouped = df.groupby(by, sort=False)[value].mean().reset_index()
    return grouped.rename(columns={by: "name", value: out_name})


def list_departments(snapshot: TableSnapshot) -> List[str]:
    cols = resolve_metric_columns(snapshot.headers)
    df = snapshot.to_frame()
    if df.empty or not cols.department:
        return []
    depts = text_series(df, cols.department)
    return sorted(d for d in depts.unique().tolist() if d)


def apply_filters(df: pd.DataFrame, filt: DashboardFilters, cols: MetricColumns, headers: Iterable[str]) -> pd.DataFrame:
    out = df
    if out.empty:
        return out
    if filt.selected_departments and cols.department:
        out = out[text_series(out, cols.department).isin(set(filt.selected_departments))]
    if filt.search_query:
        headers = list(headers)
        q = filt.search_query.lower()
        mask = pd.Series(False, index=out.index)
        for col in {identity_column(headers), name_column(headers)}:
            if col:
                mask |= text_series(out, col).str.lower().str.contains(q, na=False, regex=False)
        out = out[mask]
    return out


def prepare_context(filters: dict | DashboardFilters | None, snapshot: TableSnapshot) -> Dict[str, object]:
    frame = snapshot.to_frame()
    cols = resolve_metric_columns(snapshot.headers)
    filt = (
        filters
        if isinstance(filters, DashboardFilters)
        else normalize_filters(filters, available_departments=list_departments(snapshot))
    )
    filtered = apply_filters(frame, filt, cols, snapshot.headers)
    return {
        "filters": filt,
        "columns": cols,
        "headers": list(snapshot.headers),
        "frame": frame,
        "filtered": filtered,
        "version": snapshot.version,
    }
