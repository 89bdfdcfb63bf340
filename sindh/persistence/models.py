"""SQLAlchemy models for Sindh."""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_uuid() -> str:
    """Generate a UUID string."""
    return str(uuid.uuid4())


# Job lifecycle
JOB_STATUSES = ["open", "in-progress", "completed"]

# Application lifecycle
APPLICATION_STATUSES = ["pending", "accepted", "rejected", "in-progress", "completed"]

PAYMENT_STATUSES = ["unpaid", "paid"]

WAGE_PERIODS = ["daily", "weekly", "monthly", "fixed"]

VERIFICATION_STATUSES = ["pending", "verified", "rejected"]

# Wallet ledger
TRANSACTION_TYPES = ["earning", "withdrawal"]


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class LocationMixin:
    """Address plus [longitude, latitude] point shared by workers, employers and jobs."""

    address = Column(String)
    longitude = Column(Float)
    latitude = Column(Float)

    @property
    def coordinates(self) -> Optional[list[float]]:
        if self.longitude is None or self.latitude is None:
            return None
        return [self.longitude, self.latitude]


class Worker(LocationMixin, Base):
    """Informal worker profile."""

    __tablename__ = "workers"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    phone = Column(String, unique=True, nullable=False)
    email = Column(String)
    gender = Column(String)  # Male, Female, Other

    # Skills & experience
    skills = Column(JSON, default=list)
    experience = Column(Integer, nullable=False, default=0)  # years
    languages = Column(JSON, default=list)
    bio = Column(Text)

    # Work preferences
    is_available = Column(Boolean, default=True)
    work_radius_km = Column(Integer, default=10)

    # Computed
    shakti_score = Column(Float, default=0.0)
    profile_completion = Column(Integer, default=0)  # percent

    # Reputation
    verification_status = Column(String, default="pending")  # pending, verified, rejected
    rating_average = Column(Float, default=0.0)
    rating_count = Column(Integer, default=0)

    # Wallet
    balance = Column(Float, nullable=False, default=0.0)

    # OTP login (bcrypt hash of the current code)
    otp_hash = Column(String)
    otp_expires_at = Column(DateTime)
    last_login = Column(DateTime)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    applications = relationship("Application", back_populates="worker")
    transactions = relationship(
        "WalletTransaction",
        back_populates="worker",
        order_by="WalletTransaction.created_at",
    )

    def __repr__(self) -> str:
        return f"<Worker {self.name} ({self.phone})>"


class Employer(LocationMixin, Base):
    """Employer posting jobs."""

    __tablename__ = "employers"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    phone = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=True)

    # Company
    company_name = Column(String, nullable=False)
    company_description = Column(Text)
    registration_number = Column(String)

    # OTP login
    otp_hash = Column(String)
    otp_expires_at = Column(DateTime)
    last_login = Column(DateTime)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    jobs = relationship("Job", back_populates="employer", order_by="Job.created_at")

    def __repr__(self) -> str:
        return f"<Employer {self.company_name} ({self.phone})>"


class Job(LocationMixin, Base):
    """Job posted by an employer."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, default=generate_uuid)
    employer_id = Column(String, ForeignKey("employers.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)

    # Requirements
    required_skills = Column(JSON, default=list)
    required_experience = Column(Integer, default=0)
    preferred_languages = Column(JSON, default=list)

    # Terms
    wage_amount = Column(Float, nullable=False)
    wage_period = Column(String, nullable=False, default="daily")
    duration = Column(String)
    start_date = Column(DateTime)

    # Status: open, in-progress, completed
    status = Column(String, nullable=False, default="open")

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    employer = relationship("Employer", back_populates="jobs")
    applications = relationship(
        "Application",
        back_populates="job",
        order_by="Application.applied_at",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Job {self.title} ({self.status})>"


class Application(Base):
    """A worker's application to a job."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "worker_id", name="uq_application_job_worker"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    job_id = Column(String, ForeignKey("jobs.id"), nullable=False)
    worker_id = Column(String, ForeignKey("workers.id"), nullable=False)

    # Status tracking
    # Statuses: pending, accepted, rejected, in-progress, completed
    status = Column(String, nullable=False, default="pending")
    applied_at = Column(DateTime, default=utcnow)
    last_status_change = Column(DateTime, default=utcnow)
    notes = Column(Text)

    # Payment
    payment_status = Column(String, nullable=False, default="unpaid")
    payment_amount = Column(Float, default=0.0)
    payment_date = Column(DateTime)

    # Employer's rating of the finished work (1-5)
    worker_rating = Column(Integer)
    worker_review = Column(Text)
    rated_at = Column(DateTime)

    # Reminders
    reminder_sent_at = Column(DateTime)

    # Relationships
    job = relationship("Job", back_populates="applications")
    worker = relationship("Worker", back_populates="applications")
    history = relationship(
        "StatusHistory",
        back_populates="application",
        order_by="StatusHistory.changed_at",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Application job={self.job_id} worker={self.worker_id} ({self.status})>"


class StatusHistory(Base):
    """Track status changes for applications."""

    __tablename__ = "status_history"

    id = Column(String, primary_key=True, default=generate_uuid)
    application_id = Column(String, ForeignKey("applications.id"), nullable=False)
    old_status = Column(String)
    new_status = Column(String, nullable=False)
    changed_at = Column(DateTime, default=utcnow)
    notes = Column(Text)

    application = relationship("Application", back_populates="history")


class Notification(Base):
    """In-app copy of a notification sent to a worker or employer."""

    __tablename__ = "notifications"

    id = Column(String, primary_key=True, default=generate_uuid)
    recipient_id = Column(String, nullable=False, index=True)
    recipient_type = Column(String, nullable=False)  # worker, employer
    event = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    channel = Column(String, default="sms")  # sms, call
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<Notification {self.event} -> {self.recipient_id}>"


class WalletTransaction(Base):
    """Money moving in or out of a worker's balance."""

    __tablename__ = "wallet_transactions"

    id = Column(String, primary_key=True, default=generate_uuid)
    worker_id = Column(String, ForeignKey("workers.id"), nullable=False, index=True)
    application_id = Column(String, ForeignKey("applications.id", ondelete="SET NULL"))

    # earning (payment for a job) or withdrawal
    type = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(String)
    method = Column(String)  # withdrawals only: bank_transfer, upi
    status = Column(String, nullable=False, default="completed")  # pending, completed
    created_at = Column(DateTime, default=utcnow)

    worker = relationship("Worker", back_populates="transactions")

    def __repr__(self) -> str:
        return f"<WalletTransaction {self.type} {self.amount} ({self.worker_id})>"
