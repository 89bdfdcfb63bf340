"""Domain exceptions for Sindh."""
from typing import Optional


class SindhError(Exception):
    """Base exception for all domain errors."""

    pass


# =============================================================================
# VALIDATION
# =============================================================================


class ValidationError(SindhError):
    """Raised when an input field is malformed or violates a business rule."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class DuplicatePhoneError(ValidationError):
    """Raised when registering with a phone number that is already in use."""

    def __init__(self, phone: str):
        self.phone = phone
        super().__init__("phone", f"Phone number already registered: {phone}")


class DuplicateEmailError(ValidationError):
    """Raised when registering an employer with an email already in use."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("email", f"Email already registered: {email}")


class DuplicateApplicationError(ValidationError):
    """Raised when a worker applies to the same job twice."""

    def __init__(self, job_id: str, worker_id: str):
        self.job_id = job_id
        self.worker_id = worker_id
        super().__init__("worker_id", "Worker has already applied for this job")


class InvalidStatusTransitionError(ValidationError):
    """Raised when a status change is not allowed by the state machine."""

    def __init__(self, entity: str, old_status: str, new_status: str):
        self.entity = entity
        self.old_status = old_status
        self.new_status = new_status
        super().__init__(
            "status",
            f"{entity} cannot move from '{old_status}' to '{new_status}'",
        )


class IneligibleWorkerError(ValidationError):
    """Raised when accepting a worker who fails the eligibility gate."""

    def __init__(self, worker_id: str, reasons: list[str]):
        self.worker_id = worker_id
        self.reasons = reasons
        super().__init__("status", "Worker is not eligible: " + "; ".join(reasons))


class JobNotOpenError(ValidationError):
    """Raised when applying to a job that no longer accepts applications."""

    def __init__(self, job_id: str, status: str):
        self.job_id = job_id
        self.status = status
        super().__init__("job_id", f"Job is not open for applications (status: {status})")


class InsufficientBalanceError(ValidationError):
    """Raised when a withdrawal exceeds the worker's balance."""

    def __init__(self, requested: float, balance: float):
        self.requested = requested
        self.balance = balance
        super().__init__(
            "amount", f"Insufficient balance: requested {requested:g}, available {balance:g}"
        )


# =============================================================================
# LOOKUP
# =============================================================================


class NotFoundError(SindhError):
    """Raised when a referenced record cannot be resolved."""

    entity = "Record"

    def __init__(self, identifier: Optional[str] = None):
        self.identifier = identifier
        if identifier is None:
            super().__init__(f"{self.entity} not found")
        else:
            super().__init__(f"{self.entity} not found: {identifier}")


class WorkerNotFoundError(NotFoundError):
    entity = "Worker"


class EmployerNotFoundError(NotFoundError):
    entity = "Employer"


class JobNotFoundError(NotFoundError):
    entity = "Job"


class ApplicationNotFoundError(NotFoundError):
    entity = "Application"


class NotificationNotFoundError(NotFoundError):
    entity = "Notification"


# =============================================================================
# AUTHENTICATION
# =============================================================================


class AuthenticationError(SindhError):
    """Base exception for login errors."""

    pass


class AccountNotFoundError(AuthenticationError):
    """Raised when no profile is registered for the phone number."""

    def __init__(self, phone: str):
        self.phone = phone
        super().__init__(f"No account registered for {phone}")


class InvalidOTPError(AuthenticationError):
    """Raised when the submitted one-time code does not match."""

    def __init__(self):
        super().__init__("Invalid OTP")


class OTPExpiredError(AuthenticationError):
    """Raised when the one-time code is missing or past its expiry."""

    def __init__(self):
        super().__init__("OTP has expired or was never requested")


class OTPRateLimitError(AuthenticationError):
    """Raised when a phone requests codes too often."""

    def __init__(self, phone: str, window_seconds: int):
        self.phone = phone
        self.window_seconds = window_seconds
        super().__init__(f"Too many OTP requests; try again in {window_seconds // 60} minutes")
