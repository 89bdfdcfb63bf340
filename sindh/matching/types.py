"""Plain data structures consumed by the matching engine."""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional


def normalize_terms(values: Optional[Iterable[str]]) -> frozenset[str]:
    """Lower-case, strip and de-duplicate skill/language names."""
    if not values:
        return frozenset()
    return frozenset(v.strip().lower() for v in values if isinstance(v, str) and v.strip())


@dataclass(frozen=True)
class GeoPoint:
    """A [longitude, latitude] point."""

    longitude: float
    latitude: float

    @classmethod
    def from_pair(cls, coordinates: Any) -> Optional["GeoPoint"]:
        """Build a point from [lon, lat], or None if missing or out of range."""
        if coordinates is None:
            return None
        try:
            lon, lat = coordinates
            lon, lat = float(lon), float(lat)
        except (TypeError, ValueError):
            return None
        if math.isnan(lon) or math.isnan(lat):
            return None
        if not (-180 <= lon <= 180 and -90 <= lat <= 90):
            return None
        return cls(longitude=lon, latitude=lat)


@dataclass
class WorkerProfile:
    """Worker fields relevant to scoring."""

    id: Optional[str] = None
    name: str = ""
    age: Optional[int] = None
    skills: frozenset[str] = field(default_factory=frozenset)
    experience: int = 0
    languages: Optional[frozenset[str]] = None
    location: Optional[GeoPoint] = None
    is_available: bool = True
    is_verified: bool = False
    rating_average: float = 0.0

    def __post_init__(self):
        self.skills = normalize_terms(self.skills)
        self.languages = normalize_terms(self.languages) if self.languages is not None else None
        self.experience = max(0, int(self.experience or 0))
        if self.location is not None and not isinstance(self.location, GeoPoint):
            self.location = GeoPoint.from_pair(self.location)

    @classmethod
    def from_model(cls, worker) -> "WorkerProfile":
        """Build from a persistence.models.Worker row."""
        return cls(
            id=worker.id,
            name=worker.name or "",
            age=worker.age,
            skills=worker.skills or [],
            experience=worker.experience or 0,
            languages=worker.languages,
            location=GeoPoint.from_pair(worker.coordinates),
            is_available=bool(worker.is_available) if worker.is_available is not None else True,
            is_verified=worker.verification_status == "verified",
            rating_average=worker.rating_average or 0.0,
        )


@dataclass
class JobPosting:
    """Job fields relevant to scoring."""

    id: Optional[str] = None
    title: str = ""
    required_skills: frozenset[str] = field(default_factory=frozenset)
    required_experience: int = 0
    preferred_languages: frozenset[str] = field(default_factory=frozenset)
    location: Optional[GeoPoint] = None
    status: str = "open"
    created_at: Optional[datetime] = None

    def __post_init__(self):
        self.required_skills = normalize_terms(self.required_skills)
        self.preferred_languages = normalize_terms(self.preferred_languages)
        self.required_experience = max(0, int(self.required_experience or 0))
        if self.location is not None and not isinstance(self.location, GeoPoint):
            self.location = GeoPoint.from_pair(self.location)

    @classmethod
    def from_model(cls, job) -> "JobPosting":
        """Build from a persistence.models.Job row."""
        return cls(
            id=job.id,
            title=job.title or "",
            required_skills=job.required_skills or [],
            required_experience=job.required_experience or 0,
            preferred_languages=job.preferred_languages or [],
            location=GeoPoint.from_pair(job.coordinates),
            status=job.status,
            created_at=job.created_at,
        )
