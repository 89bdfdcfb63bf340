"""Worker and employer profile storage."""
import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sindh.exceptions import (
    DuplicateEmailError,
    DuplicatePhoneError,
    EmployerNotFoundError,
    ValidationError,
    WorkerNotFoundError,
)
from sindh.matching.config import ScoringConfig, get_scoring_config
from sindh.matching.shakti_score import compute_shakti_score, profile_completion
from sindh.matching.types import WorkerProfile
from sindh.persistence.models import VERIFICATION_STATUSES, Employer, Worker
from sindh.schemas import (
    EmployerCreate,
    EmployerUpdate,
    LocationIn,
    WorkerCreate,
    WorkerUpdate,
    parse_input,
)

logger = logging.getLogger(__name__)


def _apply_location(record, location: Optional[LocationIn]) -> None:
    """Copy an address/coordinates pair onto a model with LocationMixin."""
    if location is None:
        return
    if location.address is not None:
        record.address = location.address
    if location.coordinates is not None:
        record.longitude, record.latitude = location.coordinates


class ProfileService:
    """Service for registering and updating workers and employers."""

    def __init__(self, session: Session, config: Optional[ScoringConfig] = None):
        """
        Initialize profile service.

        Args:
            session: Database session
            config: Scoring configuration used for the ShaktiScore
        """
        self.session = session
        self.config = config or get_scoring_config()

    # =========================================================================
    # WORKERS
    # =========================================================================

    def register_worker(self, data: WorkerCreate | dict[str, Any]) -> Worker:
        """
        Register a new worker and compute their ShaktiScore.

        Args:
            data: Registration payload (schema or raw dict)

        Returns:
            Created Worker

        Raises:
            ValidationError: If the payload is invalid
            DuplicatePhoneError: If the phone number is already registered
        """
        payload = parse_input(WorkerCreate, data)

        if self._worker_by_phone(payload.phone) is not None:
            raise DuplicatePhoneError(payload.phone)

        worker = Worker(
            name=payload.name,
            age=payload.age,
            phone=payload.phone,
            email=payload.email,
            gender=payload.gender,
            skills=payload.skills,
            experience=payload.experience,
            languages=payload.languages,
            bio=payload.bio,
            work_radius_km=payload.work_radius_km,
            is_available=payload.is_available,
        )
        _apply_location(worker, payload.location)
        self._refresh_scores(worker)

        self.session.add(worker)
        try:
            self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            self.session.rollback()
            raise DuplicatePhoneError(payload.phone) from e
        self.session.refresh(worker)

        logger.info("Registered worker %s (ShaktiScore %.2f)", worker.id, worker.shakti_score)
        return worker

    def get_worker(self, worker_id: str) -> Worker:
        """Get a worker by ID, raising WorkerNotFoundError if absent."""
        worker = self.session.get(Worker, worker_id)
        if worker is None:
            raise WorkerNotFoundError(worker_id)
        return worker

    def list_workers(self, available_only: bool = False, limit: int = 100) -> list[Worker]:
        """
        List workers, newest first.

        Args:
            available_only: Only include workers open to new jobs
            limit: Maximum results
        """
        stmt = select(Worker).order_by(Worker.created_at.desc())
        if available_only:
            stmt = stmt.where(Worker.is_available.is_(True))
        stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def update_worker(self, worker_id: str, data: WorkerUpdate | dict[str, Any]) -> Worker:
        """
        Apply a partial profile update and recompute derived scores.

        Args:
            worker_id: Worker ID
            data: Fields to change (phone is immutable)

        Returns:
            Updated Worker
        """
        payload = parse_input(WorkerUpdate, data)
        worker = self.get_worker(worker_id)

        changes = payload.model_dump(exclude_unset=True, exclude={"location"})
        for field, value in changes.items():
            setattr(worker, field, value)
        _apply_location(worker, payload.location)

        self._refresh_scores(worker)
        self.session.commit()
        self.session.refresh(worker)

        logger.info(
            "Updated worker %s (%s), ShaktiScore now %.2f",
            worker.id, ", ".join(sorted(changes)) or "location", worker.shakti_score,
        )
        return worker

    def set_availability(self, worker_id: str, is_available: bool) -> Worker:
        """Mark a worker as available or unavailable for new jobs."""
        worker = self.get_worker(worker_id)
        worker.is_available = is_available
        self.session.commit()
        self.session.refresh(worker)
        return worker

    def set_verification(self, worker_id: str, status: str) -> Worker:
        """
        Record the outcome of identity verification.

        Only a verified worker earns the verification half of the
        reputation points, so the ShaktiScore is recomputed.

        Raises:
            ValidationError: If the status is unknown
        """
        if status not in VERIFICATION_STATUSES:
            raise ValidationError(
                "status", f"Invalid status: {status}. Must be one of {VERIFICATION_STATUSES}"
            )

        worker = self.get_worker(worker_id)
        worker.verification_status = status
        self._refresh_scores(worker)
        self.session.commit()
        self.session.refresh(worker)

        logger.info("Worker %s verification: %s", worker.id, status)
        return worker

    def add_rating(self, worker_id: str, rating: int) -> Worker:
        """
        Fold one 1-5 rating into the worker's running average.

        Commits the session, so callers can stage related changes first.
        """
        if not 1 <= rating <= 5:
            raise ValidationError("rating", "Rating must be between 1 and 5")

        worker = self.get_worker(worker_id)
        count = worker.rating_count or 0
        total = (worker.rating_average or 0.0) * count + rating
        worker.rating_count = count + 1
        worker.rating_average = total / worker.rating_count
        self._refresh_scores(worker)
        self.session.commit()
        self.session.refresh(worker)

        logger.info(
            "Worker %s rated %d (average %.2f over %d)",
            worker.id, rating, worker.rating_average, worker.rating_count,
        )
        return worker

    def _refresh_scores(self, worker: Worker) -> None:
        worker.shakti_score = compute_shakti_score(WorkerProfile.from_model(worker), self.config)
        worker.profile_completion = profile_completion(worker)

    def _worker_by_phone(self, phone: str) -> Optional[Worker]:
        stmt = select(Worker).where(Worker.phone == phone)
        return self.session.execute(stmt).scalar_one_or_none()

    # =========================================================================
    # EMPLOYERS
    # =========================================================================

    def register_employer(self, data: EmployerCreate | dict[str, Any]) -> Employer:
        """
        Register a new employer.

        Raises:
            ValidationError: If the payload is invalid
            DuplicatePhoneError: If the phone number is already registered
            DuplicateEmailError: If the email is already registered
        """
        payload = parse_input(EmployerCreate, data)

        if self._employer_by_phone(payload.phone) is not None:
            raise DuplicatePhoneError(payload.phone)
        if payload.email and self._employer_by_email(payload.email) is not None:
            raise DuplicateEmailError(payload.email)

        employer = Employer(
            name=payload.name,
            phone=payload.phone,
            email=payload.email,
            company_name=payload.company.name,
            company_description=payload.company.description,
            registration_number=payload.company.registration_number,
        )
        _apply_location(employer, payload.location)

        self.session.add(employer)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicatePhoneError(payload.phone) from e
        self.session.refresh(employer)

        logger.info("Registered employer %s (%s)", employer.id, employer.company_name)
        return employer

    def get_employer(self, employer_id: str) -> Employer:
        """Get an employer by ID, raising EmployerNotFoundError if absent."""
        employer = self.session.get(Employer, employer_id)
        if employer is None:
            raise EmployerNotFoundError(employer_id)
        return employer

    def update_employer(self, employer_id: str, data: EmployerUpdate | dict[str, Any]) -> Employer:
        """Apply a partial employer update."""
        payload = parse_input(EmployerUpdate, data)
        employer = self.get_employer(employer_id)

        if payload.email and payload.email != employer.email:
            existing = self._employer_by_email(payload.email)
            if existing is not None and existing.id != employer.id:
                raise DuplicateEmailError(payload.email)
            employer.email = payload.email

        if payload.name is not None:
            employer.name = payload.name
        if payload.company is not None:
            employer.company_name = payload.company.name
            employer.company_description = payload.company.description
            employer.registration_number = payload.company.registration_number
        _apply_location(employer, payload.location)

        self.session.commit()
        self.session.refresh(employer)
        return employer

    def _employer_by_phone(self, phone: str) -> Optional[Employer]:
        stmt = select(Employer).where(Employer.phone == phone)
        return self.session.execute(stmt).scalar_one_or_none()

    def _employer_by_email(self, email: str) -> Optional[Employer]:
        stmt = select(Employer).where(Employer.email == email)
        return self.session.execute(stmt).scalar_one_or_none()
