"""Heuristic column discovery.

Imported spreadsheets carry arbitrary headers, so every consumer that needs a
primary key, a display name or a metric column asks this module instead of
hard-coding column names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence


def resolve_role(headers: Sequence[str], keyword: str) -> Optional[str]:
    """Return the first header containing ``keyword`` (case-insensitive)."""
    needle = keyword.lower()
    for header in headers:
        if needle in str(header).lower():
            return header
    return None


def resolve_first(headers: Sequence[str], keywords: Iterable[str]) -> Optional[str]:
    for keyword in keywords:
        found = resolve_role(headers, keyword)
        if found is not None:
            return found
    return None


def identity_column(headers: Sequence[str]) -> Optional[str]:
    found = resolve_role(headers, "id")
    if found is not None:
        return found
    return headers[0] if headers else None


def name_column(headers: Sequence[str]) -> Optional[str]:
    found = resolve_role(headers, "name")
    if found is not None:
        return found
    if len(headers) > 1:
        return headers[1]
    return identity_column(headers)


@dataclass(frozen=True)
class MetricColumns:
    kpi: Optional[str] = None
    performance: Optional[str] = None
    attendance: Optional[str] = None
    training_hours: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    recommendation: Optional[str] = None
    projects: Optional[str] = None
    supervisor: Optional[str] = None
    quarter: Optional[str] = None


@dataclass(frozen=True)
class ProfileColumns:
    identity: Optional[str] = None
    name: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    supervisor: Optional[str] = None
    kpi: Optional[str] = None
    productivity: Optional[str] = None
    performance: Optional[str] = None
    bonus: Optional[str] = None
    reward: Optional[str] = None
    retention: Optional[str] = None


def resolve_metric_columns(headers: Sequence[str]) -> MetricColumns:
    return MetricColumns(
        kpi=resolve_first(headers, ["kpi score (%)", "average kpi (%)"]),
        performance=resolve_first(headers, ["performance rating", "final performance level"]),
        attendance=resolve_first(headers, ["attendance rate (%)", "attendance"]),
        training_hours=resolve_first(headers, ["training hours attended", "training hours"]),
        department=resolve_first(headers, ["department"]),
        job_title=resolve_first(headers, ["job title", "role"]),
        recommendation=resolve_first(headers, ["system recommendation", "retention action"]),
        projects=resolve_first(headers, ["projects completed"]),
        supervisor=resolve_first(headers, ["supervisor"]),
        quarter=resolve_first(headers, ["quarter"]),
    )


def resolve_profile_columns(headers: Sequence[str]) -> ProfileColumns:
    return ProfileColumns(
        identity=identity_column(headers),
        name=name_column(headers),
        job_title=resolve_role(headers, "job title"),
        department=resolve_role(headers, "department"),
        supervisor=resolve_role(headers, "supervisor"),
        kpi=resolve_role(headers, "kpi"),
        productivity=resolve_role(headers, "productivity"),
        performance=resolve_role(headers, "performance level"),
        bonus=resolve_role(headers, "bonus"),
        reward=resolve_role(headers, "reward"),
        retention=resolve_role(headers, "retention"),
    )
