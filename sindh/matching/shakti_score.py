"""ShaktiScore: a job-independent quality score for a worker profile.

The score is a weighted sum on a 0-100 scale (with default points):

    age         20 x age_factor(age)
    experience  30 x min(experience, 15) / 15
    skills      25 x min(len(skills), 5) / 5
    languages   15 x min(len(languages), 4) / 4
    reputation  10 x (0.5 x verified + 0.5 x rating_average / 5)

age_factor is piecewise linear: young_floor at min_age rising to 1.0 at
peak_start, flat through peak_end, then falling to senior_floor at max_age.
Ages outside [min_age, max_age] or unknown ages contribute nothing.

All points, caps and the curve shape come from ScoringConfig.
"""
from typing import Optional

from sindh.matching.config import DEFAULT_SCORING_CONFIG, AgeCurve, ScoringConfig
from sindh.matching.types import WorkerProfile


def age_factor(age: Optional[int], curve: AgeCurve) -> float:
    """Return the 0-1 age multiplier for the ShaktiScore."""
    if age is None or age < curve.min_age or age > curve.max_age:
        return 0.0

    if age < curve.peak_start:
        span = curve.peak_start - curve.min_age
        progress = (age - curve.min_age) / span if span else 1.0
        return curve.young_floor + (1.0 - curve.young_floor) * progress

    if age <= curve.peak_end:
        return 1.0

    span = curve.max_age - curve.peak_end
    decline = (age - curve.peak_end) / span if span else 1.0
    return 1.0 - (1.0 - curve.senior_floor) * decline


def compute_shakti_score(
    worker: WorkerProfile,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Compute a worker's ShaktiScore (0 to points.total, 100 by default).

    Pure and deterministic; missing optional fields contribute zero.
    """
    shakti = config.shakti
    points = shakti.points

    languages = worker.languages or frozenset()
    rating = min(max(worker.rating_average or 0.0, 0.0), 5.0)

    score = 0.0
    score += points.age * age_factor(worker.age, shakti.age_curve)
    score += points.experience * min(worker.experience, shakti.experience_cap_years) / shakti.experience_cap_years
    score += points.skills * min(len(worker.skills), shakti.skills_cap) / shakti.skills_cap
    score += points.languages * min(len(languages), shakti.languages_cap) / shakti.languages_cap
    score += points.reputation * (0.5 * float(worker.is_verified) + 0.5 * rating / 5.0)

    return round(min(points.total, max(0.0, score)), 2)


# Profile fields counted towards completion, with the attribute that holds each
_COMPLETION_FIELDS = [
    "name",
    "age",
    "phone",
    "email",
    "gender",
    "skills",
    "experience",
    "languages",
    "address",
    "coordinates",
    "bio",
    "work_radius_km",
]


def profile_completion(worker) -> int:
    """Percentage of tracked profile fields that are filled in.

    Works on a persistence Worker row (or anything exposing the same attributes).
    """
    filled = 0
    for name in _COMPLETION_FIELDS:
        value = getattr(worker, name, None)
        if name == "experience":
            # Zero years is a valid, filled-in answer
            filled += value is not None
        elif value:
            filled += 1
    return round(filled / len(_COMPLETION_FIELDS) * 100)
