"""Worker/job matching and scoring."""
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig, get_scoring_config, load_scoring_config
from .eligibility import check_eligibility, is_eligible
from .job_matcher import JobMatcher, MatchResult, match_job_to_worker
from .ranker import JobRanker, Match, WorkerMatch, find_matching_workers, rank_jobs_for_worker
from .shakti_score import compute_shakti_score, profile_completion
from .types import GeoPoint, JobPosting, WorkerProfile

__all__ = [
    "DEFAULT_SCORING_CONFIG",
    "ScoringConfig",
    "get_scoring_config",
    "load_scoring_config",
    "check_eligibility",
    "is_eligible",
    "JobMatcher",
    "MatchResult",
    "match_job_to_worker",
    "JobRanker",
    "Match",
    "WorkerMatch",
    "find_matching_workers",
    "rank_jobs_for_worker",
    "compute_shakti_score",
    "profile_completion",
    "GeoPoint",
    "JobPosting",
    "WorkerProfile",
]
