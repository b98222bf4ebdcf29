from __future__ import annotations

from dataclasses import dataclass, field

from perf_portal.core.roles import Role, parse_role


@dataclass(frozen=True)
class MenuItem:
    title: str
    target: str
    children: tuple["MenuItem", ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        out: dict = {"title": self.title, "target": self.target}
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out


DASHBOARD = MenuItem("Dashboard", "/dashboard")

ADMINISTRATION = MenuItem(
    "Administration",
    "/admin",
    (
        MenuItem("Job Templates", "/admin/job-templates"),
        MenuItem("Company KPIs", "/admin/kpis"),
        MenuItem("Competencies", "/admin/competencies"),
        MenuItem("Company Values", "/admin/values"),
        MenuItem("Departments", "/admin/departments"),
        MenuItem("Evaluation Periods", "/admin/periods"),
    ),
)

_EVALUATION_ITEMS = (
    MenuItem("All Evaluations", "/evaluations"),
    MenuItem("Create Evaluation", "/evaluations/new"),
    MenuItem("My Evaluations", "/me/evaluations"),
)

REPORTS = MenuItem("Reports", "/reports")

# Each role is listed explicitly; menu_for() refuses anything else.
MENUS: dict[Role, tuple[MenuItem, ...]] = {
    Role.HR_ADMIN: (
        DASHBOARD,
        ADMINISTRATION,
        MenuItem(
            "Evaluations",
            "/evaluations",
            _EVALUATION_ITEMS + (MenuItem("Evaluation Periods", "/admin/periods"),),
        ),
        MenuItem(
            "Employees",
            "/employees",
            (
                MenuItem("All Employees", "/employees"),
                MenuItem("Add Employee", "/employees/new"),
                MenuItem("Organization Chart", "/employees/hierarchy"),
            ),
        ),
        REPORTS,
    ),
    Role.MANAGER: (
        DASHBOARD,
        MenuItem("Evaluations", "/evaluations", _EVALUATION_ITEMS),
        MenuItem("Employees", "/employees", (MenuItem("My Team", "/employees?scope=team"),)),
        REPORTS,
    ),
    Role.EMPLOYEE: (
        DASHBOARD,
        MenuItem("My Evaluations", "/me/evaluations"),
    ),
}


def menu_for(role: Role | str) -> tuple[MenuItem, ...]:
    """Entry points a role may see. Not a security boundary on its own."""
    return MENUS[parse_role(role)]
