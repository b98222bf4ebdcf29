from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Hashable, Iterable

from perf_portal.core.exceptions import AuthenticationError
from perf_portal.core.roles import Role, parse_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """What the user store knows about a logged-in session."""

    user_id: Hashable
    role: Role | str
    employee_id: Hashable | None = None
    is_active: bool = True
    last_activity_at: datetime | None = None


@dataclass(frozen=True)
class IdentityContext:
    """
    Per-request caller identity, resolved once and passed explicitly to every
    policy call.

    direct_report_ids is the directory's answer to "who reports to
    employee_id" at resolution time; it is empty for non-managers.
    """

    user_id: Hashable
    role: Role | str
    employee_id: Hashable | None = None
    is_active: bool = True
    direct_report_ids: frozenset = field(default_factory=frozenset)

    @property
    def is_hr_admin(self) -> bool:
        return self.role == Role.HR_ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def session_expired(
    last_activity_at: datetime | None,
    *,
    timeout_seconds: int,
    now: datetime | None = None,
) -> bool:
    if last_activity_at is None:
        return True
    now = as_utc(now or datetime.now(timezone.utc))
    return now - as_utc(last_activity_at) > timedelta(seconds=timeout_seconds)


def resolve_identity(
    session: SessionSnapshot | None,
    *,
    direct_report_ids: Iterable[Hashable] = (),
    timeout_seconds: int | None = None,
    now: datetime | None = None,
) -> IdentityContext:
    """
    Turn a session snapshot into an IdentityContext.

    Raises AuthenticationError for a missing, inactive or expired session and
    PolicyConfigurationError for an unknown role. Expiry is only checked when
    timeout_seconds is given.
    """
    if session is None:
        raise AuthenticationError("No valid session")

    if not session.is_active:
        raise AuthenticationError("Invalid or inactive user")

    if timeout_seconds is not None and session_expired(
        session.last_activity_at, timeout_seconds=timeout_seconds, now=now
    ):
        logger.info("Session expired", extra={"user_id": str(session.user_id)})
        raise AuthenticationError("Session expired")

    role = parse_role(session.role)

    return IdentityContext(
        user_id=session.user_id,
        role=role,
        employee_id=session.employee_id,
        is_active=session.is_active,
        direct_report_ids=frozenset(direct_report_ids) if role == Role.MANAGER else frozenset(),
    )
