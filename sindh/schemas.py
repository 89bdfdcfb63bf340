"""Pydantic request models for profile, job and application input.

Every model forbids unknown fields so malformed payloads are rejected at
the boundary instead of being silently stored.
"""
import re
from datetime import datetime
from typing import Any, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from sindh.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

PHONE_REGEX = re.compile(r"^\+?\d{10,15}$")
EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

WagePeriod = Literal["daily", "weekly", "monthly", "fixed"]
JobStatus = Literal["open", "in-progress", "completed"]
ApplicationStatus = Literal["pending", "accepted", "rejected", "in-progress", "completed"]


def _clean_terms(v):
    """Strip, drop empties and de-duplicate (case-insensitive) while keeping order."""
    if not isinstance(v, list):
        return v
    seen = set()
    cleaned = []
    for item in v:
        if not isinstance(item, str):
            cleaned.append(item)
            continue
        item = item.strip()
        if item and item.lower() not in seen:
            seen.add(item.lower())
            cleaned.append(item)
    return cleaned


def _check_phone(v: str) -> str:
    v = v.strip().replace(" ", "").replace("-", "")
    if not PHONE_REGEX.match(v):
        raise ValueError("Phone must be 10-15 digits, optionally prefixed with +")
    return v


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is None or v.strip() == "":
        return None
    v = v.strip().lower()
    if not EMAIL_REGEX.match(v):
        raise ValueError("Invalid email format")
    return v


def parse_input(model_cls: type[ModelT], data: Any) -> ModelT:
    """Validate raw input into a request model.

    Accepts an instance of the model as-is. Pydantic errors are re-raised
    as ValidationError carrying the dotted path of the first bad field.
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or model_cls.__name__
        raise ValidationError(field, first["msg"]) from e


class StrictModel(BaseModel):
    """Base for request models: unknown fields are errors."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class LocationIn(StrictModel):
    """Address and [longitude, latitude] point."""
    address: Optional[str] = Field(default=None, max_length=300)
    coordinates: Optional[tuple[float, float]] = Field(
        default=None,
        description="[longitude, latitude]",
    )

    @field_validator("coordinates")
    @classmethod
    def validate_coordinates(cls, v):
        """Longitude must be within [-180, 180] and latitude within [-90, 90]."""
        if v is None:
            return v
        lon, lat = v
        if not -180 <= lon <= 180:
            raise ValueError(f"Longitude {lon} out of range [-180, 180]")
        if not -90 <= lat <= 90:
            raise ValueError(f"Latitude {lat} out of range [-90, 90]")
        return v


# =============================================================================
# WORKERS
# =============================================================================


class WorkerCreate(StrictModel):
    """Worker registration."""
    name: str = Field(min_length=1, max_length=120)
    age: int = Field(gt=17, le=70, description="Age in years (18-70)")
    phone: str
    email: Optional[str] = None
    gender: Optional[Literal["Male", "Female", "Other"]] = None
    skills: list[str] = Field(min_length=1, description="At least one skill")
    experience: int = Field(ge=0, le=60, default=0, description="Years of experience")
    languages: list[str] = Field(default_factory=list)
    location: Optional[LocationIn] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    work_radius_km: int = Field(ge=1, le=100, default=10)
    is_available: bool = True

    @field_validator("skills", "languages", mode="before")
    @classmethod
    def clean_terms(cls, v):
        return _clean_terms(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)


class WorkerUpdate(StrictModel):
    """Partial worker profile update; phone cannot be changed.

    Omitted fields stay unchanged. Fields the profile cannot do without
    may not be set to null.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    age: Optional[int] = Field(default=None, gt=17, le=70)
    email: Optional[str] = None
    gender: Optional[Literal["Male", "Female", "Other"]] = None
    skills: Optional[list[str]] = Field(default=None, min_length=1)
    experience: Optional[int] = Field(default=None, ge=0, le=60)
    languages: Optional[list[str]] = None
    location: Optional[LocationIn] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    work_radius_km: Optional[int] = Field(default=None, ge=1, le=100)
    is_available: Optional[bool] = None

    @field_validator("skills", "languages", mode="before")
    @classmethod
    def clean_terms(cls, v):
        return _clean_terms(v)

    @field_validator(
        "name", "age", "skills", "experience", "languages", "work_radius_km", "is_available",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)


# =============================================================================
# EMPLOYERS
# =============================================================================


class CompanyIn(StrictModel):
    """Employer's company details."""
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    registration_number: Optional[str] = Field(default=None, max_length=100)


class EmployerCreate(StrictModel):
    """Employer registration."""
    name: str = Field(min_length=1, max_length=120)
    phone: str
    email: Optional[str] = None
    company: CompanyIn
    location: Optional[LocationIn] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)


class EmployerUpdate(StrictModel):
    """Partial employer update; phone cannot be changed."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    email: Optional[str] = None
    company: Optional[CompanyIn] = None
    location: Optional[LocationIn] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)


# =============================================================================
# JOBS & APPLICATIONS
# =============================================================================


class WageIn(StrictModel):
    """Offered wage."""
    amount: float = Field(gt=0, description="Wage amount, must be positive")
    period: WagePeriod = "daily"


class JobCreate(StrictModel):
    """New job posting."""
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    required_skills: list[str] = Field(min_length=1)
    location: Optional[LocationIn] = None
    wage: WageIn
    duration: Optional[str] = Field(default=None, max_length=100)
    required_experience: int = Field(ge=0, le=60, default=0)
    preferred_languages: list[str] = Field(default_factory=list)
    start_date: Optional[datetime] = None

    @field_validator("required_skills", "preferred_languages", mode="before")
    @classmethod
    def clean_terms(cls, v):
        return _clean_terms(v)


class JobPostRequest(JobCreate):
    """Job posting submitted over HTTP, naming the employer."""
    employer_id: str = Field(min_length=1)


class JobStatusUpdate(StrictModel):
    """Job status change."""
    status: JobStatus


class ApplyRequest(StrictModel):
    """Worker applying to a job."""
    worker_id: str = Field(min_length=1)


class ApplicationStatusUpdate(StrictModel):
    """Application status change."""
    status: ApplicationStatus
    notes: Optional[str] = Field(default=None, max_length=1000)


class ReviewRequest(StrictModel):
    """Automatic review of pending applications."""
    min_shakti_score: Optional[float] = Field(default=None, ge=0, le=100)


class PaymentRequest(StrictModel):
    """Payment recorded against a completed application."""
    amount: float = Field(gt=0)


class AvailabilityUpdate(StrictModel):
    """Worker availability toggle."""
    is_available: bool


class VerificationUpdate(StrictModel):
    """Outcome of a worker's identity verification."""
    status: Literal["pending", "verified", "rejected"]


class RatingRequest(StrictModel):
    """Employer's rating of completed work."""
    rating: int = Field(ge=1, le=5, description="1 (poor) to 5 (excellent)")
    review: Optional[str] = Field(default=None, max_length=1000)


class WithdrawalRequest(StrictModel):
    """Worker payout from their wallet balance."""
    amount: float = Field(gt=0)
    method: Literal["bank_transfer", "upi"] = "bank_transfer"


# =============================================================================
# AUTH
# =============================================================================


class OTPRequest(StrictModel):
    """Request a one-time login code."""
    phone: str

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)


class OTPVerify(StrictModel):
    """Submit a one-time login code."""
    phone: str
    otp: str = Field(pattern=r"^\d{6}$")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)
