"""
Evaluation lifecycle.

    draft -> submitted -> reviewed -> approved | rejected

Only drafts are writable by managers and evaluators. Every later state
belongs to HR admins, who may also re-open any evaluation back to draft.
Nothing here changes state; handlers call check_transition() and apply the
change themselves.
"""
from __future__ import annotations

import logging
from enum import Enum

from perf_portal.core.exceptions import (
    AuthorizationDenied,
    PolicyConfigurationError,
    WorkflowTransitionError,
)
from perf_portal.core.roles import Role, parse_role

logger = logging.getLogger(__name__)


class EvaluationStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    REJECTED = "rejected"


TERMINAL_STATUSES = frozenset({EvaluationStatus.APPROVED, EvaluationStatus.REJECTED})

FORWARD_TRANSITIONS: dict[EvaluationStatus, frozenset[EvaluationStatus]] = {
    EvaluationStatus.DRAFT: frozenset({EvaluationStatus.SUBMITTED}),
    EvaluationStatus.SUBMITTED: frozenset({EvaluationStatus.REVIEWED}),
    EvaluationStatus.REVIEWED: frozenset({EvaluationStatus.APPROVED, EvaluationStatus.REJECTED}),
    EvaluationStatus.APPROVED: frozenset(),
    EvaluationStatus.REJECTED: frozenset(),
}


def parse_status(value: EvaluationStatus | str) -> EvaluationStatus:
    if isinstance(value, EvaluationStatus):
        return value
    try:
        return EvaluationStatus(value)
    except ValueError:
        logger.error("Unrecognized evaluation status", extra={"status": value})
        raise PolicyConfigurationError(
            f"Unrecognized evaluation status: {value!r}", details={"status": value}
        ) from None


def is_mutable(status: EvaluationStatus | str, role: Role | str) -> bool:
    """The workflow gate: may this role write to an evaluation in this state?"""
    role = parse_role(role)
    status = parse_status(status)

    if status == EvaluationStatus.DRAFT:
        return True
    return role == Role.HR_ADMIN


def allowed_transitions(
    status: EvaluationStatus | str, role: Role | str
) -> frozenset[EvaluationStatus]:
    role = parse_role(role)
    status = parse_status(status)

    if not is_mutable(status, role):
        return frozenset()

    targets = FORWARD_TRANSITIONS[status]
    if role == Role.HR_ADMIN and status != EvaluationStatus.DRAFT:
        # re-open escape hatch
        targets = targets | {EvaluationStatus.DRAFT}
    return targets


def check_transition(
    status: EvaluationStatus | str,
    target: EvaluationStatus | str,
    role: Role | str,
) -> EvaluationStatus:
    """
    Validate status -> target for role and return the parsed target.

    Raises AuthorizationDenied when the current state is not writable for the
    role and WorkflowTransitionError when the move itself is illegal.
    """
    status = parse_status(status)
    target = parse_status(target)

    if not is_mutable(status, role):
        raise AuthorizationDenied(
            f"Evaluations in status '{status.value}' can only be changed by HR administrators"
        )

    if target not in allowed_transitions(status, role):
        raise WorkflowTransitionError(status.value, target.value)

    return target
