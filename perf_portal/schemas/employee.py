from pydantic import BaseModel


class EmployeeOut(BaseModel):
    id: str
    employee_number: str
    display_name: str
    user_id: str | None
    manager_id: str | None
    is_active: bool
