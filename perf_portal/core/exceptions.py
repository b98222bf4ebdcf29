from typing import Any


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """No session, an invalid token, or an expired/inactive session."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, status_code=401, error_code="AUTH_REQUIRED")


class AccountLockedError(AppException):
    def __init__(self, message: str = "Account temporarily locked due to too many failed attempts"):
        super().__init__(message=message, status_code=423, error_code="ACCOUNT_LOCKED")


class AuthorizationDenied(AppException):
    """
    Raised by request adapters when a predicate answered False.
    Predicates themselves return False for ordinary denials.
    """

    def __init__(self, message: str = "You do not have permission to access this resource"):
        super().__init__(message=message, status_code=403, error_code="PERMISSION_DENIED")


class PolicyConfigurationError(AppException):
    """An unrecognized role or status reached the policy engine. Fail closed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="POLICY_MISCONFIGURED",
            details=details,
        )


class WorkflowTransitionError(AppException):
    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Invalid workflow transition from {current} to {target}",
            status_code=409,
            error_code="INVALID_TRANSITION",
            details={"from": current, "to": target},
        )
