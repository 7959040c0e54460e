from __future__ import annotations

from hr_core.roles import (
    identity_column,
    name_column,
    resolve_metric_columns,
    resolve_profile_columns,
    resolve_role,
)
from hr_core.sample_data import EMPLOYEE_COLUMNS

from .conftest import RICH_HEADERS


def test_resolve_role_is_case_insensitive():
    assert resolve_role(["Employee ID", "Name"], "id") == "Employee ID"
    assert resolve_role(["a", "b"], "id") is None


def test_identity_and_name_fallbacks():
    assert identity_column([]) is None
    assert identity_column(["Code", "Label"]) == "Code"
    assert name_column(["Code", "Label"]) == "Label"
    assert name_column(["Code"]) == "Code"
    assert name_column(["Code", "Full Name"]) == "Full Name"


def test_metric_columns_for_sample_roster():
    cols = resolve_metric_columns(EMPLOYEE_COLUMNS)
    assert cols.kpi == "Average KPI (%)"
    assert cols.performance == "Final Performance Level"
    assert cols.recommendation == "Retention Action"
    assert cols.department == "Department"
    assert cols.attendance is None
    assert cols.quarter is None


def test_metric_columns_prefer_first_keyword():
    cols = resolve_metric_columns(RICH_HEADERS)
    assert cols.kpi == "KPI Score (%)"
    assert cols.performance == "Performance Rating"
    assert cols.training_hours == "Training Hours Attended"
    assert cols.recommendation == "System Recommendation"
    assert cols.projects == "Projects Completed"


def test_profile_columns():
    cols = resolve_profile_columns(EMPLOYEE_COLUMNS)
    assert cols.identity == "Employee ID"
    assert cols.name == "Employee Name"
    assert cols.productivity == "Productivity Rate (%)"
    assert cols.bonus == "Bonus Eligibility"
    assert cols.performance == "Final Performance Level"
