"""Worker-to-job compatibility scoring."""
import math
from dataclasses import dataclass, field
from typing import Optional

from sindh.exceptions import JobNotFoundError, WorkerNotFoundError
from sindh.matching.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from sindh.matching.types import GeoPoint, JobPosting, WorkerProfile

EARTH_RADIUS_KM = 6371.0088


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in kilometres."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


@dataclass
class MatchResult:
    """Result of scoring one worker against one job."""

    score: float  # 0-1
    skill_score: float = 0.0
    experience_score: float = 0.0
    language_score: Optional[float] = None  # None when the dimension was excluded
    location_score: Optional[float] = None  # None when the dimension was excluded
    matched_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)
    matched_languages: list[str] = field(default_factory=list)
    distance_km: Optional[float] = None

    @property
    def breakdown(self) -> dict[str, Optional[float]]:
        return {
            "skills": self.skill_score,
            "experience": self.experience_score,
            "languages": self.language_score,
            "location": self.location_score,
        }


class JobMatcher:
    """Score workers against jobs using configurable weights."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        """
        Initialize job matcher.

        Args:
            config: Scoring configuration (weights and distance scale)
        """
        self.config = config
        self.weights = config.match.weights
        self.distance_scale_km = config.match.distance_scale_km

    def match(self, worker: Optional[WorkerProfile], job: Optional[JobPosting]) -> MatchResult:
        """
        Compute the compatibility of a worker with a job.

        Dimensions whose inputs are missing (worker languages when the job
        prefers some, coordinates on either side) are left out of the
        weighted average instead of scoring zero.

        Args:
            worker: Worker to score
            job: Job to score against

        Returns:
            MatchResult with a score in [0, 1] and per-dimension details

        Raises:
            WorkerNotFoundError / JobNotFoundError: If either side is None
        """
        if worker is None:
            raise WorkerNotFoundError()
        if job is None:
            raise JobNotFoundError()

        # === SKILLS ===
        matched_skills = sorted(job.required_skills & worker.skills)
        missing_skills = sorted(job.required_skills - worker.skills)
        if job.required_skills:
            skill_score = len(matched_skills) / len(job.required_skills)
        else:
            skill_score = 1.0

        # === EXPERIENCE ===
        if worker.experience >= job.required_experience:
            experience_score = 1.0
        else:
            # Graded credit for partial experience
            experience_score = worker.experience / job.required_experience

        # === LANGUAGES ===
        language_score = None
        matched_languages: list[str] = []
        if not job.preferred_languages:
            language_score = 1.0
        elif worker.languages:
            matched_languages = sorted(job.preferred_languages & worker.languages)
            language_score = len(matched_languages) / len(job.preferred_languages)

        # === LOCATION ===
        location_score = None
        distance_km = None
        if worker.location is not None and job.location is not None:
            distance_km = haversine_km(worker.location, job.location)
            location_score = 1.0 / (1.0 + distance_km / self.distance_scale_km)

        score = self._combine(skill_score, experience_score, language_score, location_score)

        return MatchResult(
            score=score,
            skill_score=skill_score,
            experience_score=experience_score,
            language_score=language_score,
            location_score=location_score,
            matched_skills=matched_skills,
            missing_skills=missing_skills,
            matched_languages=matched_languages,
            distance_km=round(distance_km, 2) if distance_km is not None else None,
        )

    def _combine(
        self,
        skill_score: float,
        experience_score: float,
        language_score: Optional[float],
        location_score: Optional[float],
    ) -> float:
        """Weighted average over the dimensions that were scored."""
        parts = [
            (self.weights.skills, skill_score),
            (self.weights.experience, experience_score),
            (self.weights.languages, language_score),
            (self.weights.location, location_score),
        ]
        included = [(w, s) for w, s in parts if s is not None and w > 0]

        total_weight = sum(w for w, _ in included)
        if total_weight <= 0:
            return 0.0

        score = sum(w * s for w, s in included) / total_weight
        return round(min(1.0, max(0.0, score)), 4)


def match_job_to_worker(
    worker: Optional[WorkerProfile],
    job: Optional[JobPosting],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Compatibility score in [0, 1] for a worker and a job."""
    return JobMatcher(config).match(worker, job).score
