import logging
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Header
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from perf_portal.core.access import direct_report_ids, get_employee_for_user
from perf_portal.core.config import settings
from perf_portal.core.exceptions import AccountLockedError, AuthenticationError
from perf_portal.core.identity import IdentityContext, SessionSnapshot, as_utc, resolve_identity
from perf_portal.core.roles import Role
from perf_portal.db.session import get_db
from perf_portal.models.user import User
from perf_portal.models.user_session import UserSession

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Check credentials with lockout after repeated failures.

    Failed attempts are committed before raising so the request rollback
    does not undo the counter.
    """
    now = _utcnow()
    user = db.query(User).filter(User.email == email).one_or_none()
    if not user or not user.is_active:
        logger.warning("Login failed for unknown or inactive account", extra={"email": email})
        raise AuthenticationError("Invalid email or password")

    if user.locked_until and as_utc(user.locked_until) > now:
        logger.warning("Login attempt on locked account", extra={"user_id": str(user.id)})
        raise AccountLockedError()

    if not verify_password(password, user.password_hash):
        user.failed_login_attempts += 1
        if user.failed_login_attempts >= settings.MAX_LOGIN_ATTEMPTS:
            user.locked_until = now + timedelta(seconds=settings.LOGIN_LOCKOUT_SECONDS)
            user.failed_login_attempts = 0
            logger.warning("Account locked after repeated failures", extra={"user_id": str(user.id)})
        db.commit()
        raise AuthenticationError("Invalid email or password")

    user.failed_login_attempts = 0
    user.locked_until = None
    user.last_login_at = now
    logger.info("Login succeeded", extra={"user_id": str(user.id)})
    return user


def start_session(db: Session, user: User) -> UserSession:
    now = _utcnow()
    row = UserSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        created_at=now,
        last_activity_at=now,
    )
    db.add(row)
    db.flush()
    return row


def end_session(db: Session, token: str) -> None:
    row = db.get(UserSession, token)
    if row and row.ended_at is None:
        row.ended_at = _utcnow()
        logger.info("Session ended", extra={"user_id": str(row.user_id)})


def load_session_snapshot(db: Session, row: UserSession | None) -> SessionSnapshot | None:
    if row is None or row.ended_at is not None:
        return None

    user = db.get(User, row.user_id)
    if user is None:
        return None

    employee = get_employee_for_user(db, user.id)
    return SessionSnapshot(
        user_id=user.id,
        role=user.role,
        employee_id=employee.id if employee else None,
        is_active=user.is_active,
        last_activity_at=row.last_activity_at,
    )


def get_session_token(x_session_token: str | None = Header(default=None)) -> str:
    if not x_session_token:
        raise AuthenticationError("Missing X-Session-Token header")
    return x_session_token


def get_current_identity(
    token: str = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> IdentityContext:
    """
    Resolve the caller once per request. Activity on a valid session
    extends it.
    """
    row = db.get(UserSession, token)
    snapshot = load_session_snapshot(db, row)

    reports: set = set()
    if snapshot and snapshot.role == Role.MANAGER and snapshot.employee_id is not None:
        reports = direct_report_ids(db, snapshot.employee_id)

    ctx = resolve_identity(
        snapshot,
        direct_report_ids=reports,
        timeout_seconds=settings.SESSION_TIMEOUT_SECONDS,
    )

    row.last_activity_at = _utcnow()
    return ctx
