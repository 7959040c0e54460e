"""Bundled sample roster the store is seeded with and reset to."""

from __future__ import annotations

import copy
from typing import Dict, List, Union

Scalar = Union[str, int, float]
Record = Dict[str, Scalar]

EMPLOYEE_COLUMNS = [
    "Employee ID",
    "Employee Name",
    "Department",
    "Job Title",
    "Supervisor",
    "Average KPI (%)",
    "Productivity Rate (%)",
    "Final Performance Level",
    "Bonus Eligibility",
    "Reward Type",
    "Retention Action",
]

_ROWS = [
    ("E001", "Alice Johnson", "Engineering", "Senior Software Engineer", "Bob Williams", 92, 95, "Excellent", "Yes", "Cash Bonus", "Promotion Track"),
    ("E002", "Michael Brown", "Engineering", "Software Engineer", "Bob Williams", 81, 84, "Good", "Yes", "Gift Card", "Mentorship"),
    ("E003", "Sophia Davis", "HR", "HR Specialist", "Linda Martinez", 76, 79, "Satisfactory", "No", "None", "Training Program"),
    ("E004", "James Wilson", "Marketing", "Marketing Analyst", "Karen Taylor", 68, 70, "Needs Improvement", "No", "None", "Performance Improvement Plan"),
    ("E005", "Olivia Moore", "Sales", "Account Executive", "Daniel Anderson", 88, 90, "Excellent", "Yes", "Commission Boost", "Retain"),
    ("E006", "William Thomas", "Sales", "Sales Representative", "Daniel Anderson", 59, 61, "Poor", "No", "None", "Performance Improvement Plan"),
    ("E007", "Emma Jackson", "R&D", "Research Scientist", "Steven White", 90, 87, "Excellent", "Yes", "Stock Options", "Promotion Track"),
    ("E008", "Benjamin Harris", "Finance", "Financial Analyst", "Patricia Clark", 79, 82, "Good", "Yes", "Gift Card", "Retain"),
    ("E009", "Mia Lewis", "IT", "Systems Administrator", "Steven White", 73, 75, "Satisfactory", "No", "None", "Training Program"),
    ("E010", "Lucas Robinson", "Operations", "Operations Manager", "Patricia Clark", 85, 88, "Good", "Yes", "Cash Bonus", "Retain"),
    ("E011", "Charlotte Walker", "Engineering", "QA Engineer", "Bob Williams", 71, 74, "Satisfactory", "No", "None", "Mentorship"),
    ("E012", "Henry Young", "Marketing", "Content Strategist", "Karen Taylor", 83, 80, "Good", "Yes", "Gift Card", "Retain"),
    ("E013", "Amelia King", "HR", "Recruiter", "Linda Martinez", 64, 66, "Needs Improvement", "No", "None", "Mentorship"),
    ("E014", "Alexander Scott", "Finance", "Accountant", "Patricia Clark", 95, 93, "Excellent", "Yes", "Cash Bonus", "Promotion Track"),
    ("E015", "Harper Green", "IT", "Network Engineer", "Steven White", 55, 58, "Poor", "No", "None", "Performance Improvement Plan"),
]

SAMPLE_EMPLOYEES: List[Record] = [dict(zip(EMPLOYEE_COLUMNS, row)) for row in _ROWS]


def sample_records() -> List[Record]:
    return copy.deepcopy(SAMPLE_EMPLOYEES)
