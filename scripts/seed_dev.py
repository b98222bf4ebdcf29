# seed_dev.py
from sqlalchemy.orm import Session

from perf_portal.core.roles import Role
from perf_portal.core.security import hash_password
from perf_portal.db.session import SessionLocal
from perf_portal.models.employee import Employee
from perf_portal.models.user import User

DEV_PASSWORD = "ChangeMe123!"


# ---------- helpers ----------

def get_or_create_user(db: Session, email: str, full_name: str, role: Role) -> User:
    u = db.query(User).filter(User.email == email).one_or_none()
    if u:
        # keep these up to date in dev
        u.full_name = full_name
        u.role = role.value
        u.is_active = True
        db.commit()
        db.refresh(u)
        return u

    u = User(
        email=email,
        full_name=full_name,
        role=role.value,
        password_hash=hash_password(DEV_PASSWORD),
        is_active=True,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def get_or_create_employee(
    db: Session,
    employee_number: str,
    display_name: str,
    user: User | None = None,
    manager: Employee | None = None,
) -> Employee:
    e = db.query(Employee).filter(Employee.employee_number == employee_number).one_or_none()
    if not e:
        e = Employee(employee_number=employee_number, display_name=display_name)
        db.add(e)
    e.display_name = display_name
    e.user_id = user.id if user else None
    e.manager_id = manager.id if manager else None
    db.commit()
    db.refresh(e)
    return e


def main():
    db = SessionLocal()
    try:
        hr = get_or_create_user(db, "hr@local.test", "Hana Reyes", Role.HR_ADMIN)
        mgr = get_or_create_user(db, "manager@local.test", "Marco Diaz", Role.MANAGER)
        emp = get_or_create_user(db, "employee@local.test", "Eli Chen", Role.EMPLOYEE)

        hr_emp = get_or_create_employee(db, "E001", "Hana Reyes", user=hr)
        mgr_emp = get_or_create_employee(db, "E010", "Marco Diaz", user=mgr, manager=hr_emp)
        get_or_create_employee(db, "E042", "Eli Chen", user=emp, manager=mgr_emp)
        get_or_create_employee(db, "E043", "Sam Okafor", manager=mgr_emp)

        print("Dev users seeded (password: %s):" % DEV_PASSWORD)
        for u in (hr, mgr, emp):
            print(f"  {u.role:<9} {u.email}")
    finally:
        db.close()

if __name__ == "__main__":
    main()
