"""
Record-level authorization.

Every predicate is a pure function of an IdentityContext and an
already-fetched snapshot. Ordinary denial is a False return value; the
only exceptions raised are PolicyConfigurationError for a role or status
outside the closed sets.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Hashable

from perf_portal.core.exceptions import PolicyConfigurationError
from perf_portal.core.identity import IdentityContext
from perf_portal.core.roles import Role, parse_role
from perf_portal.core.workflow import EvaluationStatus, is_mutable


@dataclass(frozen=True)
class EvaluationSnapshot:
    evaluation_id: Hashable
    employee_id: Hashable
    evaluator_id: Hashable
    # None on rows created before evaluations carried a manager link
    manager_id: Hashable | None
    status: EvaluationStatus | str


class AccessPath(str, Enum):
    """Which rule let the caller see an evaluation."""

    HR_ADMIN = "hr_admin"
    EVALUATOR = "evaluator"
    SUBJECT = "subject"
    MANAGER = "manager"
    LEGACY_DIRECTORY = "legacy_directory"
    DENIED = "denied"


# SUBJECT is read-only: employees see their own evaluations but never edit them.
EDIT_PATHS = frozenset(
    {AccessPath.HR_ADMIN, AccessPath.MANAGER, AccessPath.EVALUATOR, AccessPath.LEGACY_DIRECTORY}
)


def can_access_employee(ctx: IdentityContext, target_employee_id: Hashable) -> bool:
    role = parse_role(ctx.role)

    if role == Role.HR_ADMIN:
        return True

    if ctx.employee_id is None:
        return False

    if role == Role.EMPLOYEE:
        return ctx.employee_id == target_employee_id

    if role == Role.MANAGER:
        if target_employee_id in ctx.direct_report_ids:
            return True
        return ctx.employee_id == target_employee_id

    raise PolicyConfigurationError(f"No employee access rule for role {role.value!r}")


def accessible_employee_ids(ctx: IdentityContext) -> frozenset | None:
    """
    The employee ids the caller may see, or None when unrestricted.
    """
    role = parse_role(ctx.role)

    if role == Role.HR_ADMIN:
        return None

    if ctx.employee_id is None:
        return frozenset()

    if role == Role.EMPLOYEE:
        return frozenset({ctx.employee_id})

    if role == Role.MANAGER:
        return frozenset(ctx.direct_report_ids) | {ctx.employee_id}

    raise PolicyConfigurationError(f"No employee access rule for role {role.value!r}")


def explain_evaluation_access(ctx: IdentityContext, evaluation: EvaluationSnapshot) -> AccessPath:
    role = parse_role(ctx.role)

    if role == Role.HR_ADMIN:
        return AccessPath.HR_ADMIN

    # creator override, regardless of role
    if evaluation.evaluator_id == ctx.user_id:
        return AccessPath.EVALUATOR

    if ctx.employee_id is None:
        return AccessPath.DENIED

    if role == Role.EMPLOYEE:
        if evaluation.employee_id == ctx.employee_id:
            return AccessPath.SUBJECT
        return AccessPath.DENIED

    if role == Role.MANAGER:
        # stored manager_id wins over the live directory
        if evaluation.manager_id is not None:
            if evaluation.manager_id == ctx.employee_id:
                return AccessPath.MANAGER
            return AccessPath.DENIED
        if can_access_employee(ctx, evaluation.employee_id):
            return AccessPath.LEGACY_DIRECTORY
        return AccessPath.DENIED

    raise PolicyConfigurationError(f"No evaluation access rule for role {role.value!r}")


def can_access_evaluation(ctx: IdentityContext, evaluation: EvaluationSnapshot) -> bool:
    return explain_evaluation_access(ctx, evaluation) != AccessPath.DENIED


def can_edit_evaluation(ctx: IdentityContext, evaluation: EvaluationSnapshot) -> bool:
    """
    Workflow gate first, then the relationship check. Only drafts are
    editable by anyone other than an HR admin.
    """
    if not is_mutable(evaluation.status, ctx.role):
        return False
    return explain_evaluation_access(ctx, evaluation) in EDIT_PATHS
