import itertools

import pytest

from perf_portal.core.exceptions import PolicyConfigurationError
from perf_portal.core.identity import IdentityContext
from perf_portal.core.policy import (
    AccessPath,
    EvaluationSnapshot,
    accessible_employee_ids,
    can_access_employee,
    can_access_evaluation,
    can_edit_evaluation,
    explain_evaluation_access,
)
from perf_portal.core.roles import Role
from perf_portal.core.workflow import EvaluationStatus

MANAGER = IdentityContext(user_id=100, role=Role.MANAGER, employee_id=10, direct_report_ids=frozenset({42, 43}))
EMPLOYEE = IdentityContext(user_id=700, role=Role.EMPLOYEE, employee_id=7)
HR = IdentityContext(user_id=1, role=Role.HR_ADMIN)


def _eval(employee_id=42, manager_id=10, evaluator_id=999, status="draft"):
    return EvaluationSnapshot(
        evaluation_id=1,
        employee_id=employee_id,
        evaluator_id=evaluator_id,
        manager_id=manager_id,
        status=status,
    )


# ---------- scenarios ----------

def test_manager_can_edit_draft_of_own_report():
    assert can_edit_evaluation(MANAGER, _eval(status="draft")) is True


def test_manager_cannot_edit_submitted_even_with_relationship():
    e = _eval(status="submitted")
    assert can_access_evaluation(MANAGER, e) is True
    assert can_edit_evaluation(MANAGER, e) is False


def test_manager_reaches_legacy_evaluation_through_directory():
    e = _eval(manager_id=None)
    assert explain_evaluation_access(MANAGER, e) == AccessPath.LEGACY_DIRECTORY
    assert can_access_evaluation(MANAGER, e) is True


def test_employee_cannot_access_colleague():
    assert can_access_employee(EMPLOYEE, 8) is False


@pytest.mark.parametrize("status", list(EvaluationStatus))
def test_hr_admin_can_edit_in_any_status(status):
    assert can_edit_evaluation(HR, _eval(status=status, manager_id=None, employee_id=5)) is True


# ---------- employee access ----------

def test_employee_access_is_reflexive_for_self():
    assert can_access_employee(EMPLOYEE, 7) is True
    assert can_access_employee(MANAGER, 10) is True


def test_manager_sees_direct_reports_only():
    assert can_access_employee(MANAGER, 42) is True
    assert can_access_employee(MANAGER, 43) is True
    assert can_access_employee(MANAGER, 44) is False


def test_missing_employee_link_denies_non_admins():
    orphan_manager = IdentityContext(user_id=5, role=Role.MANAGER, employee_id=None)
    orphan_employee = IdentityContext(user_id=6, role="employee", employee_id=None)
    assert can_access_employee(orphan_manager, 42) is False
    assert can_access_employee(orphan_employee, 42) is False
    assert can_access_employee(HR, 42) is True


def test_unknown_role_is_a_configuration_error():
    auditor = IdentityContext(user_id=9, role="auditor", employee_id=7)
    with pytest.raises(PolicyConfigurationError):
        can_access_employee(auditor, 7)
    with pytest.raises(PolicyConfigurationError):
        can_access_evaluation(auditor, _eval(evaluator_id=9))
    with pytest.raises(PolicyConfigurationError):
        can_edit_evaluation(auditor, _eval(evaluator_id=9))


def test_plain_string_roles_are_accepted():
    ctx = IdentityContext(user_id=700, role="employee", employee_id=7)
    assert can_access_employee(ctx, 7) is True


# ---------- evaluation access ----------

def test_evaluator_override_applies_to_any_role():
    e = _eval(employee_id=55, manager_id=77, evaluator_id=700)
    assert explain_evaluation_access(EMPLOYEE, e) == AccessPath.EVALUATOR


def test_employee_sees_own_evaluation_but_cannot_edit_it():
    e = _eval(employee_id=7, manager_id=10)
    assert explain_evaluation_access(EMPLOYEE, e) == AccessPath.SUBJECT
    assert can_edit_evaluation(EMPLOYEE, e) is False


def test_stored_manager_wins_over_live_directory():
    # 42 reports to this manager today, but the evaluation was written under manager 11
    e = _eval(employee_id=42, manager_id=11)
    assert can_access_evaluation(MANAGER, e) is False

    # and the manager named on the record keeps access after a reorg
    former = IdentityContext(user_id=110, role=Role.MANAGER, employee_id=11)
    assert explain_evaluation_access(former, e) == AccessPath.MANAGER


def test_legacy_fallback_denies_outside_team():
    e = _eval(employee_id=99, manager_id=None)
    assert can_access_evaluation(MANAGER, e) is False


def test_legacy_fallback_is_manager_only():
    e = _eval(employee_id=7, manager_id=None)
    # the employee still reaches it as subject, never through the directory
    assert explain_evaluation_access(EMPLOYEE, e) == AccessPath.SUBJECT


def test_manager_can_edit_legacy_draft_of_report():
    assert can_edit_evaluation(MANAGER, _eval(manager_id=None)) is True


def test_accessible_employee_ids():
    assert accessible_employee_ids(HR) is None
    assert accessible_employee_ids(EMPLOYEE) == frozenset({7})
    assert accessible_employee_ids(MANAGER) == frozenset({10, 42, 43})
    assert accessible_employee_ids(IdentityContext(user_id=3, role="employee")) == frozenset()


# ---------- properties over every combination ----------

CONTEXTS = [
    HR,
    MANAGER,
    EMPLOYEE,
    IdentityContext(user_id=999, role=Role.MANAGER, employee_id=20),
    IdentityContext(user_id=999, role=Role.EMPLOYEE, employee_id=42),
    IdentityContext(user_id=8, role=Role.MANAGER, employee_id=None),
]

EVALUATIONS = [
    _eval(employee_id=emp, manager_id=mgr, evaluator_id=evaluator, status=status)
    for emp, mgr, evaluator, status in itertools.product(
        (7, 42, 99),
        (None, 10, 20),
        (100, 700, 999),
        list(EvaluationStatus),
    )
]


def test_edit_implies_access():
    for ctx, e in itertools.product(CONTEXTS, EVALUATIONS):
        if can_edit_evaluation(ctx, e):
            assert can_access_evaluation(ctx, e), (ctx, e)


def test_non_draft_is_never_editable_by_non_admins():
    for ctx, e in itertools.product(CONTEXTS, EVALUATIONS):
        if ctx.role != Role.HR_ADMIN and e.status != EvaluationStatus.DRAFT:
            assert can_edit_evaluation(ctx, e) is False, (ctx, e)


def test_legacy_access_matches_employee_access_for_managers():
    managers = [c for c in CONTEXTS if c.role == Role.MANAGER]
    legacy = [e for e in EVALUATIONS if e.manager_id is None]
    for ctx, e in itertools.product(managers, legacy):
        if e.evaluator_id == ctx.user_id:
            continue  # creator override wins before the fallback is consulted
        assert can_access_evaluation(ctx, e) == can_access_employee(ctx, e.employee_id), (ctx, e)
