from __future__ import annotations

import random

from hr_core.records import NEW_EMPLOYEE_TEMPLATE, coerce_form_values, generate_employee_id, new_employee
from hr_core.sample_data import EMPLOYEE_COLUMNS


def test_generated_ids_avoid_existing():
    taken = [f"E{n:03d}" for n in range(999)]
    assert generate_employee_id(taken, random.Random(1)) == "E999"


def test_generated_ids_grow_when_exhausted():
    taken = [f"E{n:03d}" for n in range(1000)]
    assert generate_employee_id(taken) == "E1000"


def test_new_employee_follows_headers():
    record = new_employee(EMPLOYEE_COLUMNS, ["E001"], random.Random(3))
    assert list(record) == EMPLOYEE_COLUMNS
    assert record["Employee ID"].startswith("E")
    assert record["Employee ID"] != "E001"
    assert record["Average KPI (%)"] == NEW_EMPLOYEE_TEMPLATE["Average KPI (%)"]


def test_new_employee_blank_for_unknown_columns():
    record = new_employee(["Code", "Colour"], [])
    assert record["Colour"] == ""
    assert record["Code"].startswith("E")


def test_new_employee_without_headers_uses_template():
    record = new_employee([])
    assert "Employee ID" in record
    assert record["Employee Name"] == "New Hire"


def test_coerce_form_values_keeps_numbers_numeric():
    original = {"Employee ID": "E001", "Score": 80, "Name": "Ann"}
    out = coerce_form_values(original, {"Employee ID": "HACK", "Score": "91.5", "Name": "Anne"})
    assert out == {"Employee ID": "E001", "Score": 91.5, "Name": "Anne"}


def test_coerce_form_values_ignores_bad_numbers():
    original = {"id": "1", "Score": 80}
    assert coerce_form_values(original, {"Score": "lots"})["Score"] == 80
    assert coerce_form_values(original, {"Score": 70.0})["Score"] == 70


def test_coerce_form_values_keeps_whole_numbers_as_int():
    original = {"ID": "E1", "KPI": 92, "Rate": 80.5}
    out = coerce_form_values(original, {"KPI": 92.0, "Rate": 81.0})
    assert out["KPI"] == 92 and isinstance(out["KPI"], int)
    assert isinstance(out["Rate"], float)
    assert coerce_form_values(original, {"KPI": 92.5})["KPI"] == 92.5
