"""Matcher protocol for pluggable scoring engines.

Defines the interface that all matching implementations must satisfy.
JobMatcher is the weighted heuristic implementation; alternative
matchers only need to provide the same ``match`` method.
"""
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sindh.matching.types import JobPosting, WorkerProfile

if TYPE_CHECKING:
    from sindh.matching.job_matcher import MatchResult


@runtime_checkable
class Matcher(Protocol):
    """Protocol for worker/job matching engines."""

    def match(self, worker: WorkerProfile, job: JobPosting) -> "MatchResult":
        """Score a single worker against a single job."""
        ...
