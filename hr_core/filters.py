from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from hr_core.charts import CHART_OPTIONS


@dataclass(frozen=True)
class DashboardFilters:
    selected_departments: List[str] = field(default_factory=list)
    search_query: str = ""
    top_n: int = 15
    hidden_charts: List[str] = field(default_factory=list)

    def shows(self, chart_key: str) -> bool:
        return chart_key not in self.hidden_charts


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    return [str(v) for v in values if v is not None and str(v).strip()]


def normalize_filters(raw: Optional[dict], *, available_departments: Optional[List[str]] = None) -> DashboardFilters:
    raw = raw or {}

    selected_departments = [d for d in _as_str_list(raw.get("selected_departments")) if d != "All Departments"]
    if available_departments is not None:
        allowed = {str(d) for d in available_departments}
        selected_departments = [d for d in selected_departments if d in allowed]

    search_query = (raw.get("search_query") or "").strip()

    top_n = raw.get("top_n", 15)
    try:
        top_n = int(top_n)
    except Exception:
        top_n = 15
    top_n = max(1, min(200, top_n))

    hidden_charts = [c for c in _as_str_list(raw.get("hidden_charts")) if c in CHART_OPTIONS]

    return DashboardFilters(
        selected_departments=selected_departments,
        search_query=search_query,
        top_n=top_n,
        hidden_charts=hidden_charts,
    )
