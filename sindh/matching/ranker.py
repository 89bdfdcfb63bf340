"""Job ranking for workers (and worker ranking for jobs)."""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sindh.exceptions import JobNotFoundError, WorkerNotFoundError
from sindh.matching.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from sindh.matching.job_matcher import JobMatcher, MatchResult
from sindh.matching.scorer_protocol import Matcher
from sindh.matching.types import JobPosting, WorkerProfile

logger = logging.getLogger(__name__)


@dataclass
class Match:
    """A job with its match score and details."""

    job: JobPosting
    match_result: MatchResult

    @property
    def score(self) -> float:
        return self.match_result.score


@dataclass
class WorkerMatch:
    """A worker with their match score for one job."""

    worker: WorkerProfile
    match_result: MatchResult

    @property
    def score(self) -> float:
        return self.match_result.score


class JobRanker:
    """Rank open jobs for a worker by match score."""

    def __init__(self, matcher: Optional[Matcher] = None, min_score: float = 0):
        """
        Initialize job ranker.

        Args:
            matcher: Matcher instance (defaults to JobMatcher with default config)
            min_score: Minimum score to include (0-1)
        """
        self.matcher = matcher or JobMatcher()
        self.min_score = min_score

    def rank_jobs(
        self,
        worker: WorkerProfile,
        candidate_jobs: Sequence[JobPosting],
        limit: Optional[int] = None,
    ) -> list[Match]:
        """
        Score open jobs for a worker.

        Args:
            worker: Worker to rank jobs for
            candidate_jobs: Jobs in creation order
            limit: Optional maximum number of matches

        Returns:
            List of Match objects, sorted by score descending. Equal scores
            keep their input order.
        """
        if worker is None:
            raise WorkerNotFoundError()

        matches: list[Match] = []
        for job in candidate_jobs:
            if job.status != "open":
                continue

            result = self.matcher.match(worker, job)
            if result.score < self.min_score:
                continue

            matches.append(Match(job=job, match_result=result))

        # list.sort is stable, so ties stay in creation order
        matches.sort(key=lambda m: m.score, reverse=True)

        logger.debug(
            "Ranked %d of %d candidate jobs for worker %s",
            len(matches), len(candidate_jobs), worker.id,
        )

        if limit is not None:
            return matches[:limit]
        return matches

    def rank_workers(
        self,
        job: JobPosting,
        workers: Sequence[WorkerProfile],
        min_score: Optional[float] = None,
    ) -> list[WorkerMatch]:
        """Score available workers for one job, best first."""
        if job is None:
            raise JobNotFoundError()

        threshold = min_score if min_score is not None else self.min_score
        matches = []
        for worker in workers:
            if not worker.is_available:
                continue
            result = self.matcher.match(worker, job)
            if result.score >= threshold:
                matches.append(WorkerMatch(worker=worker, match_result=result))

        matches.sort(key=lambda m: m.score, reverse=True)
        return matches


def rank_jobs_for_worker(
    worker: WorkerProfile,
    candidate_jobs: Sequence[JobPosting],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[Match]:
    """Open jobs for a worker, best match first (stable on ties)."""
    ranker = JobRanker(JobMatcher(config), min_score=config.thresholds.min_match_score)
    return ranker.rank_jobs(worker, candidate_jobs)


def find_matching_workers(
    job: JobPosting,
    workers: Sequence[WorkerProfile],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    min_score: Optional[float] = None,
) -> list[WorkerMatch]:
    """Available workers for a job, best match first."""
    ranker = JobRanker(JobMatcher(config), min_score=config.thresholds.min_match_score)
    return ranker.rank_workers(job, workers, min_score=min_score)
