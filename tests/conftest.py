from __future__ import annotations

import pytest

from hr_core.config import Settings
from hr_core.store import TabularStore

RICH_HEADERS = [
    "Employee ID",
    "Name",
    "Department",
    "Job Title",
    "Supervisor",
    "KPI Score (%)",
    "Performance Rating",
    "Attendance Rate (%)",
    "Training Hours Attended",
    "Projects Completed",
    "Quarter",
    "System Recommendation",
]

RICH_ROWS = [
    ("A1", "Ana", "Sales", "Rep", "Sam", 80, "Excellent", 90, 10, 4, "Q1", "Retain"),
    ("A2", "Ben", "Sales", "Rep", "Sam", 60, "Good", 70, 20, 2, "Q2", "Train"),
    ("A3", "Cho", "IT", "Admin", "Tia", 90, "Excellent", 100, 30, 6, "Q1", "Retain"),
    ("A4", "Dev", "", "Admin", "Tia", 70, "Poor", 80, 0, 0, "q2", ""),
]


@pytest.fixture
def store() -> TabularStore:
    return TabularStore()


@pytest.fixture
def rich_records():
    return [dict(zip(RICH_HEADERS, row)) for row in RICH_ROWS]


@pytest.fixture
def rich_store(rich_records) -> TabularStore:
    return TabularStore(initial_records=rich_records)


@pytest.fixture
def settings() -> Settings:
    return Settings()
