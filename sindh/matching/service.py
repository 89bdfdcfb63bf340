"""Match stored workers and jobs through the scoring engine."""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from sindh.exceptions import JobNotFoundError, WorkerNotFoundError
from sindh.jobs.service import JobService
from sindh.matching.config import ScoringConfig, get_scoring_config
from sindh.matching.job_matcher import JobMatcher, MatchResult
from sindh.matching.ranker import JobRanker
from sindh.matching.types import JobPosting, WorkerProfile
from sindh.persistence.models import Job, Worker

logger = logging.getLogger(__name__)


class MatchService:
    """Rank persisted jobs for a worker and workers for a job."""

    def __init__(self, session: Session, config: Optional[ScoringConfig] = None):
        """
        Initialize match service.

        Args:
            session: Database session
            config: Scoring configuration (defaults to config/scoring.yaml)
        """
        self.session = session
        self.config = config or get_scoring_config()
        self.matcher = JobMatcher(self.config)

    def get_matches_for_worker(
        self,
        worker_id: str,
        min_score: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> list[tuple[Job, MatchResult]]:
        """
        Open jobs ranked for a worker.

        Args:
            worker_id: Worker ID
            min_score: Minimum match score (defaults to thresholds.min_match_score)
            limit: Maximum number of matches

        Returns:
            (Job, MatchResult) pairs, best match first

        Raises:
            WorkerNotFoundError: If the worker does not exist
        """
        worker = self.session.get(Worker, worker_id)
        if worker is None:
            raise WorkerNotFoundError(worker_id)

        jobs = JobService(self.session).list_open_jobs()
        by_id = {job.id: job for job in jobs}

        threshold = self.config.thresholds.min_match_score if min_score is None else min_score
        ranker = JobRanker(self.matcher, min_score=threshold)
        matches = ranker.rank_jobs(
            WorkerProfile.from_model(worker),
            [JobPosting.from_model(job) for job in jobs],
            limit=limit,
        )

        logger.info(
            "Worker %s: %d of %d open jobs matched (min score %.2f)",
            worker_id, len(matches), len(jobs), threshold,
        )
        return [(by_id[m.job.id], m.match_result) for m in matches]

    def get_matching_workers(
        self,
        job_id: str,
        min_score: Optional[float] = None,
    ) -> list[tuple[Worker, MatchResult]]:
        """
        Available workers ranked for a job.

        Args:
            job_id: Job ID
            min_score: Minimum match score (defaults to thresholds.job_alert_min_score)

        Returns:
            (Worker, MatchResult) pairs, best match first

        Raises:
            JobNotFoundError: If the job does not exist
        """
        job = self.session.get(Job, job_id)
        if job is None:
            raise JobNotFoundError(job_id)

        stmt = select(Worker).where(Worker.is_available.is_(True)).order_by(Worker.created_at, Worker.id)
        workers = list(self.session.execute(stmt).scalars().all())
        by_id = {w.id: w for w in workers}

        threshold = self.config.thresholds.job_alert_min_score if min_score is None else min_score
        matches = JobRanker(self.matcher).rank_workers(
            JobPosting.from_model(job),
            [WorkerProfile.from_model(w) for w in workers],
            min_score=threshold,
        )
        return [(by_id[m.worker.id], m.match_result) for m in matches]
