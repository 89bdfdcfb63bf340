"""Response models for API endpoints."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class WorkerOut(ORMModel):
    """Public worker profile."""
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "name": "Ravi Kumar",
                "age": 35,
                "phone": "+919876543210",
                "skills": ["electrical", "electronics repair"],
                "experience": 12,
                "languages": ["hindi", "english"],
                "shakti_score": 78.5,
                "profile_completion": 75,
                "is_available": True,
            }
        },
    )

    id: str
    name: str
    age: int
    phone: str
    email: Optional[str] = None
    gender: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    experience: int
    languages: Optional[list[str]] = None
    bio: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[list[float]] = None
    is_available: bool
    work_radius_km: Optional[int] = None
    shakti_score: float = Field(ge=0, le=100)
    profile_completion: int = Field(ge=0, le=100)
    verification_status: Optional[str] = None
    rating_average: Optional[float] = None
    rating_count: Optional[int] = None
    balance: float = 0.0
    created_at: Optional[datetime] = None


class EmployerOut(ORMModel):
    """Public employer profile."""
    id: str
    name: str
    phone: str
    email: Optional[str] = None
    company_name: str
    company_description: Optional[str] = None
    registration_number: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[list[float]] = None
    created_at: Optional[datetime] = None


class JobOut(ORMModel):
    """Job posting."""
    id: str
    employer_id: str
    title: str
    description: str
    required_skills: list[str] = Field(default_factory=list)
    required_experience: int = 0
    preferred_languages: list[str] = Field(default_factory=list)
    address: Optional[str] = None
    coordinates: Optional[list[float]] = None
    wage_amount: float
    wage_period: str
    duration: Optional[str] = None
    start_date: Optional[datetime] = None
    status: str
    created_at: Optional[datetime] = None


class StatusChangeOut(ORMModel):
    old_status: Optional[str] = None
    new_status: str
    changed_at: Optional[datetime] = None
    notes: Optional[str] = None


class ApplicationOut(ORMModel):
    """A worker's application to a job."""
    id: str
    job_id: str
    worker_id: str
    status: str
    applied_at: Optional[datetime] = None
    last_status_change: Optional[datetime] = None
    notes: Optional[str] = None
    payment_status: str
    payment_amount: Optional[float] = None
    payment_date: Optional[datetime] = None
    worker_rating: Optional[int] = None
    worker_review: Optional[str] = None
    history: list[StatusChangeOut] = Field(default_factory=list)


class EmployerStatsOut(BaseModel):
    """Posting and application totals for one employer."""
    total_jobs: int
    active_jobs: int
    completed_jobs: int
    total_applications: int
    average_applications_per_job: float


class JobDetailOut(JobOut):
    """Job with its applications and a count per status."""
    applications: list[ApplicationOut] = Field(default_factory=list)
    pipeline: dict[str, int] = Field(default_factory=dict)


class MatchOut(BaseModel):
    """A job ranked for a worker."""
    job: JobOut
    score: float = Field(ge=0, le=1)
    breakdown: dict[str, Optional[float]]
    matched_skills: list[str]
    missing_skills: list[str]
    distance_km: Optional[float] = None


class ReviewOut(BaseModel):
    """Outcome of an automatic review."""
    success: bool = True
    accepted: list[ApplicationOut]
    rejected: list[ApplicationOut]


class TransactionOut(ORMModel):
    id: str
    type: str
    amount: float
    description: Optional[str] = None
    method: Optional[str] = None
    status: str
    application_id: Optional[str] = None
    created_at: Optional[datetime] = None


class WalletOut(ORMModel):
    """Worker balance with lifetime totals and ledger, newest first."""
    balance: float
    total_earned: float
    total_withdrawn: float
    transactions: list[TransactionOut] = Field(default_factory=list)


class NotificationOut(ORMModel):
    id: str
    recipient_id: str
    recipient_type: str
    event: str
    message: str
    channel: str
    is_read: bool
    created_at: Optional[datetime] = None


class CountOut(BaseModel):
    success: bool = True
    count: int


class OTPSentOut(BaseModel):
    success: bool = True
    message: str
    expires_in_minutes: int


class LoginOut(BaseModel):
    success: bool = True
    role: str
    id: str
    name: str
