"""Hard eligibility gate applied when an application is accepted."""
from sindh.exceptions import JobNotFoundError, WorkerNotFoundError
from sindh.matching.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from sindh.matching.types import JobPosting, WorkerProfile


def check_eligibility(
    worker: WorkerProfile,
    job: JobPosting,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[str]:
    """Return the reasons a worker fails the gate (empty list means eligible)."""
    if worker is None:
        raise WorkerNotFoundError()
    if job is None:
        raise JobNotFoundError()

    rules = config.eligibility
    reasons = []

    if worker.age is None or not (rules.min_age <= worker.age <= rules.max_age):
        reasons.append(f"age must be between {rules.min_age} and {rules.max_age}")

    if worker.experience < job.required_experience:
        reasons.append(
            f"requires {job.required_experience} years of experience, has {worker.experience}"
        )

    return reasons


def is_eligible(
    worker: WorkerProfile,
    job: JobPosting,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> bool:
    """True when the worker's age is within bounds and experience meets the job's minimum."""
    return not check_eligibility(worker, job, config)
