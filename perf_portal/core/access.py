from fastapi import HTTPException
from sqlalchemy import and_, or_, false
from sqlalchemy.orm import Query, Session

from perf_portal.core.exceptions import AuthorizationDenied
from perf_portal.core.identity import IdentityContext
from perf_portal.core.policy import (
    EvaluationSnapshot,
    accessible_employee_ids,
    can_access_employee,
    can_access_evaluation,
    can_edit_evaluation,
)
from perf_portal.core.roles import Role, parse_role
from perf_portal.models.employee import Employee
from perf_portal.models.evaluation import Evaluation


def get_employee_for_user(db: Session, user_id) -> Employee | None:
    return db.query(Employee).filter(Employee.user_id == user_id).one_or_none()


def direct_report_ids(db: Session, manager_employee_id) -> set:
    rows = (
        db.query(Employee.id)
        .filter(Employee.manager_id == manager_employee_id, Employee.is_active.is_(True))
        .all()
    )
    return {r[0] for r in rows}


def evaluation_snapshot(e: Evaluation) -> EvaluationSnapshot:
    return EvaluationSnapshot(
        evaluation_id=e.id,
        employee_id=e.employee_id,
        evaluator_id=e.evaluator_id,
        manager_id=e.manager_id,
        status=e.status,
    )


def get_employee_or_404(db: Session, employee_id) -> Employee:
    emp = db.get(Employee, employee_id)
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


def get_evaluation_or_404(db: Session, evaluation_id) -> Evaluation:
    e = db.get(Evaluation, evaluation_id)
    if not e:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return e


def assert_can_access_employee(ctx: IdentityContext, employee_id) -> None:
    if not can_access_employee(ctx, employee_id):
        raise AuthorizationDenied("You do not have access to this employee")


def assert_can_access_evaluation(ctx: IdentityContext, e: Evaluation) -> None:
    if not can_access_evaluation(ctx, evaluation_snapshot(e)):
        raise AuthorizationDenied("You do not have access to this evaluation")


def assert_can_edit_evaluation(ctx: IdentityContext, e: Evaluation) -> None:
    if not can_edit_evaluation(ctx, evaluation_snapshot(e)):
        raise AuthorizationDenied("You cannot edit this evaluation in its current state")


def scope_employees_query(query: Query, ctx: IdentityContext) -> Query:
    """Restrict an Employee query to the ids the caller may see."""
    allowed = accessible_employee_ids(ctx)
    if allowed is None:
        return query
    if not allowed:
        return query.filter(false())
    return query.filter(Employee.id.in_(list(allowed)))


def scope_evaluations_query(query: Query, ctx: IdentityContext) -> Query:
    """
    SQL rendition of can_access_evaluation() for list endpoints.
    Must grant exactly what the predicate grants.
    """
    role = parse_role(ctx.role)
    if ctx.is_hr_admin:
        return query

    clauses = [Evaluation.evaluator_id == ctx.user_id]

    if ctx.employee_id is not None:
        if role == Role.EMPLOYEE:
            clauses.append(Evaluation.employee_id == ctx.employee_id)
        elif role == Role.MANAGER:
            clauses.append(Evaluation.manager_id == ctx.employee_id)
            clauses.append(
                and_(
                    Evaluation.manager_id.is_(None),
                    Evaluation.employee_id.in_(list(accessible_employee_ids(ctx))),
                )
            )

    return query.filter(or_(*clauses))
