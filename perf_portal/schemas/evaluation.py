import uuid
from datetime import datetime
from pydantic import BaseModel, Field

from perf_portal.core.workflow import EvaluationStatus


class EvaluationCreate(BaseModel):
    employee_id: uuid.UUID
    period_label: str | None = Field(default=None, max_length=100)
    overall_rating: int | None = Field(default=None, ge=1, le=5)
    comments: str | None = None


class EvaluationUpdate(BaseModel):
    period_label: str | None = Field(default=None, max_length=100)
    overall_rating: int | None = Field(default=None, ge=1, le=5)
    comments: str | None = None


class TransitionPayload(BaseModel):
    status: EvaluationStatus


class EvaluationOut(BaseModel):
    id: str
    employee_id: str
    evaluator_id: str
    manager_id: str | None
    period_label: str | None
    status: str
    overall_rating: int | None
    comments: str | None
    submitted_at: datetime | None
    reviewed_at: datetime | None
    decided_at: datetime | None
    created_at: datetime
    updated_at: datetime


class EvaluationDetailOut(EvaluationOut):
    access_path: str
    can_edit: bool
    allowed_transitions: list[str]
