import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from perf_portal.core.access import (
    assert_can_access_employee,
    direct_report_ids,
    get_employee_or_404,
    scope_employees_query,
)
from perf_portal.core.identity import IdentityContext
from perf_portal.core.security import get_current_identity
from perf_portal.db.session import get_db
from perf_portal.models.employee import Employee
from perf_portal.schemas.employee import EmployeeOut

router = APIRouter(prefix="/employees", tags=["employees"])


def employee_to_out(e: Employee) -> EmployeeOut:
    return EmployeeOut(
        id=str(e.id),
        employee_number=e.employee_number,
        display_name=e.display_name,
        user_id=str(e.user_id) if e.user_id else None,
        manager_id=str(e.manager_id) if e.manager_id else None,
        is_active=e.is_active,
    )


@router.get("", response_model=list[EmployeeOut])
def list_employees(
    search: str | None = Query(default=None, description="Search by employee number or display name"),
    scope: Literal["team"] | None = Query(default=None, description="'team' to list only the caller's direct reports"),
    limit: int = Query(default=100, ge=1, le=500, description="Maximum number of results"),
    offset: int = Query(default=0, ge=0, description="Number of results to skip"),
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(get_current_identity),
):
    """
    Employees visible to the caller: everyone for HR admins, self plus
    direct reports for managers, self for employees.
    """
    query = scope_employees_query(db.query(Employee), ctx)

    if scope == "team":
        if ctx.is_manager:
            team = ctx.direct_report_ids
        elif ctx.employee_id is not None:
            team = direct_report_ids(db, ctx.employee_id)
        else:
            team = set()
        query = query.filter(Employee.id.in_(list(team)))

    if search:
        search_term = f"%{search.lower()}%"
        query = query.filter(
            (Employee.employee_number.ilike(search_term))
            | (Employee.display_name.ilike(search_term))
        )

    employees = query.order_by(Employee.display_name.asc()).offset(offset).limit(limit).all()
    return [employee_to_out(e) for e in employees]


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(
    employee_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(get_current_identity),
):
    emp = get_employee_or_404(db, employee_id)
    assert_can_access_employee(ctx, emp.id)
    return employee_to_out(emp)
