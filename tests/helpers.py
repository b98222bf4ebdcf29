from sqlalchemy.orm import Session

from perf_portal.core.security import hash_password, start_session
from perf_portal.models.employee import Employee
from perf_portal.models.evaluation import Evaluation
from perf_portal.models.user import User

PASSWORD = "Secret123!"


def create_user(db: Session, email: str, role: str = "employee", full_name="User", is_active=True) -> User:
    u = User(
        email=email,
        full_name=full_name,
        role=role,
        password_hash=hash_password(PASSWORD),
        is_active=is_active,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def create_employee(
    db: Session,
    employee_number: str,
    display_name: str,
    user: User | None = None,
    manager: Employee | None = None,
) -> Employee:
    e = Employee(
        employee_number=employee_number,
        display_name=display_name,
        user_id=(user.id if user else None),
        manager_id=(manager.id if manager else None),
    )
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


def create_evaluation(
    db: Session,
    employee: Employee,
    evaluator: User,
    status: str = "draft",
    legacy: bool = False,
) -> Evaluation:
    """legacy=True leaves manager_id empty, like rows predating the column."""
    e = Evaluation(
        employee_id=employee.id,
        evaluator_id=evaluator.id,
        manager_id=None if legacy else employee.manager_id,
        status=status,
    )
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


def login_headers(db: Session, user: User) -> dict[str, str]:
    session = start_session(db, user)
    db.commit()
    return {"X-Session-Token": session.token}


def seed_org(db: Session) -> dict:
    """
    hr (E001)
     └─ manager (E010)
         ├─ alice (E042, has login)
         └─ bob   (E043, no login)
    other_manager (E020)
     └─ carol (E050, has login)
    """
    hr_user = create_user(db, "hr@local.test", "hr_admin", "HR")
    mgr_user = create_user(db, "manager@local.test", "manager", "Manager")
    other_mgr_user = create_user(db, "other@local.test", "manager", "Other Manager")
    alice_user = create_user(db, "alice@local.test", "employee", "Alice")
    carol_user = create_user(db, "carol@local.test", "employee", "Carol")

    hr = create_employee(db, "E001", "HR", user=hr_user)
    mgr = create_employee(db, "E010", "Manager", user=mgr_user, manager=hr)
    other_mgr = create_employee(db, "E020", "Other Manager", user=other_mgr_user, manager=hr)
    alice = create_employee(db, "E042", "Alice", user=alice_user, manager=mgr)
    bob = create_employee(db, "E043", "Bob", manager=mgr)
    carol = create_employee(db, "E050", "Carol", user=carol_user, manager=other_mgr)

    return {
        "hr_user": hr_user,
        "mgr_user": mgr_user,
        "other_mgr_user": other_mgr_user,
        "alice_user": alice_user,
        "carol_user": carol_user,
        "hr": hr,
        "mgr": mgr,
        "other_mgr": other_mgr,
        "alice": alice,
        "bob": bob,
        "carol": carol,
    }
