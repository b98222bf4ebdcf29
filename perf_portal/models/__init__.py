from perf_portal.models.audit_event import AuditEvent
from perf_portal.models.employee import Employee
from perf_portal.models.evaluation import Evaluation
from perf_portal.models.user import User
from perf_portal.models.user_session import UserSession

__all__ = [ "AuditEvent", "Employee", "Evaluation", "User", "UserSession" ]
