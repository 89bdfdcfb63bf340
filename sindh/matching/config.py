"""Pydantic models for the tunable scoring configuration (config/scoring.yaml)."""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


class MatchWeights(BaseModel):
    """Relative weight of each job/worker compatibility dimension."""
    skills: float = Field(ge=0, default=0.45)
    experience: float = Field(ge=0, default=0.30)
    languages: float = Field(ge=0, default=0.15)
    location: float = Field(ge=0, default=0.10)

    @model_validator(mode="after")
    def validate_total(self):
        """At least one dimension must carry weight."""
        if self.skills + self.experience + self.languages + self.location <= 0:
            raise ValueError("Match weights must not all be zero")
        return self


class MatchScoring(BaseModel):
    """Job match scoring settings."""
    weights: MatchWeights = Field(default_factory=MatchWeights)
    distance_scale_km: float = Field(gt=0, default=25.0)


class AgeCurve(BaseModel):
    """Piecewise-linear age factor used by the ShaktiScore."""
    min_age: int = Field(ge=0, default=18)
    peak_start: int = Field(default=30)
    peak_end: int = Field(default=45)
    max_age: int = Field(default=70)
    young_floor: float = Field(ge=0, le=1, default=0.5)
    senior_floor: float = Field(ge=0, le=1, default=0.3)

    @model_validator(mode="after")
    def validate_order(self):
        """Ages must be ordered min <= peak_start <= peak_end <= max."""
        if not (self.min_age <= self.peak_start <= self.peak_end <= self.max_age):
            raise ValueError("Age curve must satisfy min_age <= peak_start <= peak_end <= max_age")
        return self


class ShaktiPoints(BaseModel):
    """Points available per ShaktiScore component (sum is the scale, 100 by default)."""
    age: float = Field(ge=0, default=20)
    experience: float = Field(ge=0, default=30)
    skills: float = Field(ge=0, default=25)
    languages: float = Field(ge=0, default=15)
    reputation: float = Field(ge=0, default=10)

    @property
    def total(self) -> float:
        return self.age + self.experience + self.skills + self.languages + self.reputation


class ShaktiScoring(BaseModel):
    """ShaktiScore settings."""
    points: ShaktiPoints = Field(default_factory=ShaktiPoints)
    experience_cap_years: int = Field(gt=0, default=15)
    skills_cap: int = Field(gt=0, default=5)
    languages_cap: int = Field(gt=0, default=4)
    age_curve: AgeCurve = Field(default_factory=AgeCurve)


class Eligibility(BaseModel):
    """Hard gate applied when an application is accepted."""
    min_age: int = Field(ge=0, default=18)
    max_age: int = Field(ge=0, default=70)

    @model_validator(mode="after")
    def validate_range(self):
        if self.min_age > self.max_age:
            raise ValueError("Eligibility min_age must be <= max_age")
        return self


class Thresholds(BaseModel):
    """Cut-offs used by ranking, job alerts and application review."""
    min_match_score: float = Field(ge=0, le=1, default=0.0)
    job_alert_min_score: float = Field(ge=0, le=1, default=0.8)
    auto_accept_min_shakti_score: float = Field(ge=0, le=100, default=35)


class ScoringConfig(BaseModel):
    """Complete scoring.yaml configuration."""
    match: MatchScoring = Field(default_factory=MatchScoring)
    shakti: ShaktiScoring = Field(default_factory=ShaktiScoring)
    eligibility: Eligibility = Field(default_factory=Eligibility)
    thresholds: Thresholds = Field(default_factory=Thresholds)


DEFAULT_SCORING_CONFIG = ScoringConfig()


def load_scoring_config(path: Optional[str | Path] = None) -> ScoringConfig:
    """Load and validate scoring configuration from YAML.

    Falls back to the built-in defaults when the file does not exist.

    Args:
        path: Path to scoring.yaml (defaults to settings.scoring_config_path)

    Raises:
        pydantic.ValidationError: If the file contents are invalid
    """
    if path is None:
        from config.settings import settings

        path = settings.scoring_config_path

    path = Path(path)
    if not path.exists():
        logger.warning("Scoring config %s not found, using defaults", path)
        return ScoringConfig()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return ScoringConfig(**data)


@lru_cache(maxsize=1)
def get_scoring_config() -> ScoringConfig:
    """Cached scoring configuration for the running application."""
    return load_scoring_config()
