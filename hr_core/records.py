from __future__ import annotations

import random
from typing import Iterable, Mapping, Optional, Sequence

from hr_core.csv_codec import coerce_field
from hr_core.roles import identity_column
from hr_core.sample_data import Record

NEW_EMPLOYEE_TEMPLATE: Record = {
    "Employee Name": "New Hire",
    "Department": "Engineering",
    "Job Title": "Software Engineer",
    "Supervisor": "Bob Williams",
    "Average KPI (%)": 80,
    "Productivity Rate (%)": 85,
    "Final Performance Level": "Good",
    "Bonus Eligibility": "No",
    "Reward Type": "None",
    "Retention Action": "Mentorship",
}


def generate_employee_id(existing_ids: Iterable[object], rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    taken = {str(v) for v in existing_ids}
    free = [f"E{n:03d}" for n in range(1000) if f"E{n:03d}" not in taken]
    if free:
        return rng.choice(free)
    n = 1000
    while f"E{n}" in taken:
        n += 1
    return f"E{n}"


def new_employee(headers: Sequence[str], existing_ids: Iterable[object] = (), rng: Optional[random.Random] = None) -> Record:
    """Default record for the admin "Add" action, shaped to the current headers."""
    columns = list(headers) or ["Employee ID", *NEW_EMPLOYEE_TEMPLATE]
    key = identity_column(columns)
    record: Record = {h: NEW_EMPLOYEE_TEMPLATE.get(h, "") for h in columns}
    if key is not None:
        record[key] = generate_employee_id(existing_ids, rng)
    return record


def coerce_form_values(original: Mapping[str, object], values: Mapping[str, object]) -> Record:
    """Merge edited form values into a record, keeping numeric columns numeric."""
    headers = list(original.keys())
    key = identity_column(headers)
    out: Record = dict(original)
    for header, value in values.items():
        if header == key:
            continue
        current = original.get(header)
        if isinstance(current, (int, float)) and not isinstance(current, bool):
            parsed = coerce_field(str(value)) if value is not None else current
            if not isinstance(parsed, (int, float)):
                parsed = current
            elif isinstance(current, int) and isinstance(parsed, float) and parsed.is_integer():
                parsed = int(parsed)
            out[header] = parsed
        else:
            out[header] = "" if value is None else value
    return out
