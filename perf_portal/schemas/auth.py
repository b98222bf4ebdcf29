from pydantic import BaseModel, Field


class LoginPayload(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=200)


class LoginOut(BaseModel):
    token: str
    user_id: str
    role: str
    employee_id: str | None


class MeOut(BaseModel):
    user_id: str
    email: str
    full_name: str
    role: str
    role_display_name: str
    employee_id: str | None
    direct_report_ids: list[str]
