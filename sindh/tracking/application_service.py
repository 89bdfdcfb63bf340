"""Application tracking service."""
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sindh.exceptions import (
    ApplicationNotFoundError,
    DuplicateApplicationError,
    IneligibleWorkerError,
    InvalidStatusTransitionError,
    JobNotFoundError,
    JobNotOpenError,
    ValidationError,
    WorkerNotFoundError,
)
from sindh.matching.config import ScoringConfig, get_scoring_config
from sindh.matching.eligibility import check_eligibility
from sindh.matching.types import JobPosting, WorkerProfile
from sindh.persistence.models import (
    APPLICATION_STATUSES,
    Application,
    Job,
    StatusHistory,
    Worker,
    as_utc,
    utcnow,
)
from sindh.profiles.service import ProfileService
from sindh.tracking.wallet_service import WalletService

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    """Applications accepted and rejected by an automatic review."""

    accepted: list[Application] = field(default_factory=list)
    rejected: list[Application] = field(default_factory=list)


class ApplicationService:
    """Service for managing job applications."""

    # pending -> accepted -> in-progress -> completed
    # pending -> rejected
    TRANSITIONS = {
        "pending": {"accepted", "rejected"},
        "accepted": {"in-progress"},
        "in-progress": {"completed"},
        "rejected": set(),
        "completed": set(),
    }

    def __init__(self, session: Session, config: Optional[ScoringConfig] = None):
        """
        Initialize application service.

        Args:
            session: Database session
            config: Scoring configuration (eligibility bounds and review threshold)
        """
        self.session = session
        self.config = config or get_scoring_config()

    def apply(self, job_id: str, worker_id: str) -> Application:
        """
        Submit a worker's application to a job.

        Args:
            job_id: Job ID
            worker_id: Worker ID

        Returns:
            Created Application with status "pending"

        Raises:
            JobNotFoundError / WorkerNotFoundError: If either does not exist
            JobNotOpenError: If the job no longer accepts applications
            DuplicateApplicationError: If the worker already applied
        """
        job = self.session.get(Job, job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        worker = self.session.get(Worker, worker_id)
        if worker is None:
            raise WorkerNotFoundError(worker_id)

        if job.status != "open":
            raise JobNotOpenError(job_id, job.status)

        if self.get_application_for(job_id, worker_id) is not None:
            raise DuplicateApplicationError(job_id, worker_id)

        application = Application(job_id=job_id, worker_id=worker_id, status="pending")
        self.session.add(application)
        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateApplicationError(job_id, worker_id) from e

        self.session.add(
            StatusHistory(application_id=application.id, old_status=None, new_status="pending")
        )
        self.session.commit()
        self.session.refresh(application)

        logger.info("Worker %s applied to job %s", worker_id, job_id)
        return application

    def get_application(self, application_id: str) -> Optional[Application]:
        """Get an application by ID."""
        return self.session.get(Application, application_id)

    def get_application_for(self, job_id: str, worker_id: str) -> Optional[Application]:
        """Get a worker's application to a specific job."""
        stmt = select(Application).where(
            Application.job_id == job_id,
            Application.worker_id == worker_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_applications_for_job(self, job_id: str, status: Optional[str] = None) -> list[Application]:
        """Applications to one job in submission order."""
        stmt = select(Application).where(Application.job_id == job_id).order_by(Application.applied_at)
        if status:
            stmt = stmt.where(Application.status == status)
        return list(self.session.execute(stmt).scalars().all())

    def get_applications_for_worker(
        self,
        worker_id: str,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> list[Application]:
        """
        A worker's applications, newest first.

        Args:
            worker_id: Worker ID
            status: Filter by status
            limit: Maximum results

        Raises:
            WorkerNotFoundError: If the worker does not exist
        """
        if self.session.get(Worker, worker_id) is None:
            raise WorkerNotFoundError(worker_id)

        stmt = (
            select(Application)
            .where(Application.worker_id == worker_id)
            .order_by(Application.applied_at.desc())
        )
        if status:
            stmt = stmt.where(Application.status == status)
        stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def update_status(
        self,
        job_id: str,
        application_id: str,
        new_status: str,
        notes: Optional[str] = None,
    ) -> Application:
        """
        Update application status with history tracking.

        Accepting a worker runs the eligibility gate first. Setting the
        current status again is a no-op.

        Args:
            job_id: Job the application belongs to
            application_id: Application ID
            new_status: New status
            notes: Notes about the status change

        Returns:
            Updated application

        Raises:
            ValidationError: If the status is unknown
            ApplicationNotFoundError: If the application is not on this job
            InvalidStatusTransitionError: If the move is not allowed
            IneligibleWorkerError: If accepting a worker who fails the gate
            JobNotOpenError: If accepting onto a job that is already completed
        """
        if new_status not in APPLICATION_STATUSES:
            raise ValidationError(
                "status", f"Invalid status: {new_status}. Must be one of {APPLICATION_STATUSES}"
            )

        application = self.get_application(application_id)
        if application is None or application.job_id != job_id:
            raise ApplicationNotFoundError(application_id)

        old_status = application.status

        # Skip if already at the same status (prevents duplicate history entries)
        if old_status == new_status:
            return application

        if new_status not in self.TRANSITIONS.get(old_status, set()):
            raise InvalidStatusTransitionError("Application", old_status, new_status)

        if new_status == "accepted":
            if application.job.status == "completed":
                raise JobNotOpenError(job_id, application.job.status)
            reasons = check_eligibility(
                WorkerProfile.from_model(application.worker),
                JobPosting.from_model(application.job),
                self.config,
            )
            if reasons:
                raise IneligibleWorkerError(application.worker_id, reasons)

        self.session.add(
            StatusHistory(
                application_id=application.id,
                old_status=old_status,
                new_status=new_status,
                notes=notes,
            )
        )

        application.status = new_status
        application.last_status_change = utcnow()
        if notes:
            application.notes = notes

        self.session.commit()
        self.session.refresh(application)

        logger.info("Application %s: %s -> %s", application.id, old_status, new_status)
        return application

    def review_applications(
        self,
        job_id: str,
        min_shakti_score: Optional[float] = None,
    ) -> ReviewOutcome:
        """
        Decide every pending application on a job.

        Eligible applicants whose ShaktiScore meets the threshold are
        accepted; everyone else is rejected.

        Args:
            job_id: Job ID
            min_shakti_score: Threshold (defaults to thresholds.auto_accept_min_shakti_score)

        Returns:
            ReviewOutcome listing the accepted and rejected applications
        """
        job = self.session.get(Job, job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        if job.status == "completed":
            raise JobNotOpenError(job_id, job.status)

        threshold = (
            self.config.thresholds.auto_accept_min_shakti_score
            if min_shakti_score is None
            else min_shakti_score
        )
        posting = JobPosting.from_model(job)
        outcome = ReviewOutcome()

        for application in self.get_applications_for_job(job_id, status="pending"):
            worker = application.worker
            reasons = check_eligibility(WorkerProfile.from_model(worker), posting, self.config)
            score = worker.shakti_score or 0.0

            if not reasons and score >= threshold:
                outcome.accepted.append(
                    self.update_status(job_id, application.id, "accepted", notes="Automatic review")
                )
                continue

            if not reasons:
                reasons = [f"ShaktiScore {score:.2f} below {threshold:.2f}"]
            outcome.rejected.append(
                self.update_status(job_id, application.id, "rejected", notes="; ".join(reasons))
            )

        logger.info(
            "Reviewed job %s: %d accepted, %d rejected",
            job_id, len(outcome.accepted), len(outcome.rejected),
        )
        return outcome

    def record_payment(
        self,
        application_id: str,
        amount: float,
        job_id: Optional[str] = None,
    ) -> Application:
        """
        Record payment for completed work.

        Args:
            application_id: Application ID
            amount: Amount paid
            job_id: If given, the application must belong to this job

        Raises:
            ApplicationNotFoundError: If the application does not exist
            ValidationError: If the work is not completed, already paid, or amount is not positive
        """
        application = self.get_application(application_id)
        if application is None or (job_id is not None and application.job_id != job_id):
            raise ApplicationNotFoundError(application_id)

        if amount is None or amount <= 0:
            raise ValidationError("amount", "Payment amount must be positive")
        if application.status != "completed":
            raise ValidationError("status", "Payment can only be recorded for completed work")
        if application.payment_status == "paid":
            raise ValidationError("payment_status", "Payment has already been recorded")

        application.payment_status = "paid"
        application.payment_amount = amount
        application.payment_date = utcnow()
        WalletService(self.session).credit_earning(application)

        self.session.commit()
        self.session.refresh(application)

        logger.info("Recorded payment of %.2f for application %s", amount, application.id)
        return application

    def rate_worker(
        self,
        job_id: str,
        application_id: str,
        rating: int,
        review: Optional[str] = None,
    ) -> Application:
        """
        Employer's 1-5 rating of completed work.

        Each application can be rated once. The rating feeds the worker's
        average and therefore the reputation part of the ShaktiScore.

        Raises:
            ApplicationNotFoundError: If the application is not on this job
            ValidationError: If the work is not completed, already rated, or the rating is out of range
        """
        application = self.get_application(application_id)
        if application is None or application.job_id != job_id:
            raise ApplicationNotFoundError(application_id)

        if rating is None or not 1 <= rating <= 5:
            raise ValidationError("rating", "Rating must be between 1 and 5")
        if application.status != "completed":
            raise ValidationError("status", "Only completed work can be rated")
        if application.worker_rating is not None:
            raise ValidationError("rating", "This work has already been rated")

        application.worker_rating = rating
        application.worker_review = review
        application.rated_at = utcnow()

        # Commits the rating together with the worker's new average
        ProfileService(self.session, self.config).add_rating(application.worker_id, rating)
        self.session.refresh(application)

        logger.info("Application %s rated %d", application.id, rating)
        return application

    def get_pipeline_counts(self, job_id: Optional[str] = None) -> dict[str, int]:
        """Get counts by status, optionally for a single job."""
        stmt = select(Application.status, func.count(Application.id)).group_by(
            Application.status
        )
        if job_id:
            stmt = stmt.where(Application.job_id == job_id)
        result = self.session.execute(stmt)
        return dict(result.all())

    def get_due_reminders(self, within: timedelta = timedelta(hours=24)) -> list[Application]:
        """
        Accepted applications whose job starts soon and have not been reminded.

        Args:
            within: How far ahead to look from now
        """
        now = utcnow()
        stmt = (
            select(Application)
            .join(Job, Application.job_id == Job.id)
            .where(
                Application.status == "accepted",
                Application.reminder_sent_at.is_(None),
                Job.start_date.is_not(None),
            )
            .order_by(Job.start_date)
        )
        due = []
        for application in self.session.execute(stmt).scalars().all():
            start = as_utc(application.job.start_date)
            if now <= start <= now + within:
                due.append(application)
        return due

    def mark_reminder_sent(self, application_id: str) -> Application:
        """Record that the start reminder went out."""
        application = self.get_application(application_id)
        if application is None:
            raise ApplicationNotFoundError(application_id)
        application.reminder_sent_at = utcnow()
        self.session.commit()
        return application
