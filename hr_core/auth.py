"""Login contract for the two roles.

Credentials are fixed settings values; this is session plumbing, not
security.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Literal, Optional

from hr_core.config import Settings
from hr_core.roles import identity_column
from hr_core.sample_data import Record
from hr_core.store import TableSnapshot, TabularStore

logger = logging.getLogger(__name__)

Role = Literal["admin", "user"]


@dataclass(frozen=True)
class SessionUser:
    username: str
    role: Role
    employee: Optional[Record] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def find_employee(snapshot: TableSnapshot, username: str) -> Optional[Record]:
    key = identity_column(snapshot.headers)
    if key is None:
        return None
    for record in snapshot.records:
        if str(record.get(key, "")) == str(username):
            return dict(record)
    return None


def authenticate(store: TabularStore, username: str, password: str, settings: Settings) -> Optional[SessionUser]:
    username = (username or "").strip()
    if username == settings.admin_username and password == settings.admin_password:
        logger.info("Admin signed in")
        return SessionUser(username=username, role="admin")

    employee = find_employee(store.get_snapshot(), username)
    if employee is not None and password == settings.employee_password:
        logger.info("Employee %s signed in", username)
        return SessionUser(username=username, role="user", employee=employee)

    logger.info("Rejected sign-in for %r", username)
    return None


def refresh_user(user: SessionUser, snapshot: TableSnapshot) -> SessionUser:
    """Re-resolve an employee's record after the table changed."""
    if user.is_admin or user.employee is None:
        return user
    latest = find_employee(snapshot, user.username)
    if latest is None or latest == user.employee:
        return user
    return replace(user, employee=latest)
