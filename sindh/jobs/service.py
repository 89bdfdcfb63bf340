"""Job posting storage and lifecycle."""
import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from sindh.exceptions import (
    EmployerNotFoundError,
    InvalidStatusTransitionError,
    JobNotFoundError,
    ValidationError,
)
from sindh.persistence.models import JOB_STATUSES, Employer, Job, as_utc, utcnow
from sindh.schemas import JobCreate, parse_input

logger = logging.getLogger(__name__)


class JobService:
    """Service for posting jobs and moving them through their lifecycle."""

    # open -> in-progress -> completed (an open job may also be closed directly)
    TRANSITIONS = {
        "open": {"in-progress", "completed"},
        "in-progress": {"completed"},
        "completed": set(),
    }

    def __init__(self, session: Session):
        """
        Initialize job service.

        Args:
            session: Database session
        """
        self.session = session

    def post_job(self, employer_id: str, data: JobCreate | dict[str, Any]) -> Job:
        """
        Post a new job for an employer.

        Args:
            employer_id: Employer posting the job
            data: Job payload (schema or raw dict)

        Returns:
            Created Job with status "open"

        Raises:
            EmployerNotFoundError: If the employer does not exist
            ValidationError: If the payload is invalid or start_date is in the past
        """
        payload = parse_input(JobCreate, data)

        employer = self.session.get(Employer, employer_id)
        if employer is None:
            raise EmployerNotFoundError(employer_id)

        now = utcnow()
        start_date = as_utc(payload.start_date) if payload.start_date else now
        if start_date < now.replace(second=0, microsecond=0):
            raise ValidationError("start_date", "Start date cannot be in the past")

        job = Job(
            employer_id=employer.id,
            title=payload.title,
            description=payload.description,
            required_skills=payload.required_skills,
            required_experience=payload.required_experience,
            preferred_languages=payload.preferred_languages,
            wage_amount=payload.wage.amount,
            wage_period=payload.wage.period,
            duration=payload.duration,
            start_date=start_date,
            status="open",
        )
        if payload.location is not None:
            job.address = payload.location.address
            if payload.location.coordinates is not None:
                job.longitude, job.latitude = payload.location.coordinates

        self.session.add(job)
        self.session.commit()
        self.session.refresh(job)

        logger.info("Employer %s posted job %s: %s", employer.id, job.id, job.title)
        return job

    def get_job(self, job_id: str) -> Job:
        """Get a job by ID, raising JobNotFoundError if absent."""
        job = self.session.get(Job, job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def list_open_jobs(self, limit: Optional[int] = None) -> list[Job]:
        """Open jobs in creation order (oldest first)."""
        return self.search_jobs(status="open", limit=limit)

    def search_jobs(
        self,
        status: Optional[str] = "open",
        skills: Optional[list[str]] = None,
        location: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Job]:
        """
        Filter jobs, in creation order.

        Args:
            status: Only jobs in this status (None for any status)
            skills: Keep jobs requiring at least one of these skills (case-insensitive)
            location: Case-insensitive substring of the job's address
            limit: Maximum results
        """
        if status is not None and status not in JOB_STATUSES:
            raise ValidationError("status", f"Invalid status: {status}. Must be one of {JOB_STATUSES}")

        stmt = select(Job).order_by(Job.created_at, Job.id)
        if status is not None:
            stmt = stmt.where(Job.status == status)
        if location:
            stmt = stmt.where(Job.address.ilike(f"%{location.strip()}%"))

        wanted = {s.strip().lower() for s in skills or [] if s.strip()}
        if not wanted:
            if limit is not None:
                stmt = stmt.limit(limit)
            return list(self.session.execute(stmt).scalars().all())

        # Skills live in a JSON column, so overlap is checked here
        jobs = [
            job for job in self.session.execute(stmt).scalars().all()
            if wanted & {s.lower() for s in job.required_skills or []}
        ]
        return jobs[:limit] if limit is not None else jobs

    def get_employer_stats(self, employer_id: str) -> dict[str, Any]:
        """
        Posting and application totals for an employer's dashboard.

        Raises:
            EmployerNotFoundError: If the employer does not exist
        """
        jobs = self.list_jobs_for_employer(employer_id)
        total_applications = sum(len(job.applications) for job in jobs)

        return {
            "total_jobs": len(jobs),
            "active_jobs": sum(1 for job in jobs if job.status in ("open", "in-progress")),
            "completed_jobs": sum(1 for job in jobs if job.status == "completed"),
            "total_applications": total_applications,
            "average_applications_per_job": (
                round(total_applications / len(jobs), 2) if jobs else 0.0
            ),
        }

    def list_jobs_for_employer(self, employer_id: str, status: Optional[str] = None) -> list[Job]:
        """
        Jobs posted by one employer, newest first.

        Raises:
            EmployerNotFoundError: If the employer does not exist
        """
        if self.session.get(Employer, employer_id) is None:
            raise EmployerNotFoundError(employer_id)

        stmt = select(Job).where(Job.employer_id == employer_id).order_by(Job.created_at.desc())
        if status:
            stmt = stmt.where(Job.status == status)
        return list(self.session.execute(stmt).scalars().all())

    def update_job_status(self, job_id: str, new_status: str) -> Job:
        """
        Move a job to a new status.

        Setting the current status again is a no-op.

        Raises:
            ValidationError: If the status is unknown
            InvalidStatusTransitionError: If the move is not allowed
        """
        if new_status not in JOB_STATUSES:
            raise ValidationError("status", f"Invalid status: {new_status}. Must be one of {JOB_STATUSES}")

        job = self.get_job(job_id)
        old_status = job.status
        if old_status == new_status:
            return job

        if new_status not in self.TRANSITIONS.get(old_status, set()):
            raise InvalidStatusTransitionError("Job", old_status, new_status)

        job.status = new_status
        self.session.commit()
        self.session.refresh(job)

        logger.info("Job %s: %s -> %s", job.id, old_status, new_status)
        return job
