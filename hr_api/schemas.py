from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

Scalar = Union[int, float, str]


class DashboardFiltersModel(BaseModel):
    selected_departments: List[str] = Field(default_factory=list)
    search_query: str = ""
    top_n: int = 15
    hidden_charts: List[str] = Field(default_factory=list)


class RecordPayload(BaseModel):
    record: Dict[str, Optional[Scalar]] = Field(default_factory=dict)


class LoginRequest(BaseModel):
    username: str
    password: str
