"""Tests for the matching and scoring engine."""
import random
from datetime import datetime, timezone

import pytest
import yaml
from pydantic import ValidationError as PydanticValidationError

from sindh.exceptions import JobNotFoundError, WorkerNotFoundError
from sindh.matching import (
    DEFAULT_SCORING_CONFIG,
    GeoPoint,
    JobMatcher,
    JobPosting,
    JobRanker,
    ScoringConfig,
    WorkerProfile,
    check_eligibility,
    compute_shakti_score,
    find_matching_workers,
    is_eligible,
    load_scoring_config,
    match_job_to_worker,
    rank_jobs_for_worker,
)
from sindh.matching.job_matcher import haversine_km
from sindh.matching.scorer_protocol import Matcher
from sindh.matching.shakti_score import age_factor

DELHI = [77.209, 28.6139]
# Roughly 25 km south of Connaught Place
FARIDABAD = [77.3178, 28.4089]


@pytest.fixture
def electrician():
    """Worker from the reference scenario."""
    return WorkerProfile(
        id="w-1",
        name="Ravi Kumar",
        age=35,
        skills=["Electrical", "Electronics Repair"],
        experience=12,
    )


@pytest.fixture
def wiring_job():
    return JobPosting(id="j-1", title="House wiring", required_skills=["electrical"], required_experience=1)


# =============================================================================
# ShaktiScore
# =============================================================================


class TestShaktiScore:
    """Test the job-independent worker score."""

    def test_reference_worker(self, electrician):
        """age 20 + experience 24 + skills 10 + languages 0 + reputation 0."""
        assert compute_shakti_score(electrician) == 54.0

    def test_full_profile_reaches_maximum(self):
        worker = WorkerProfile(
            age=35,
            skills=["a", "b", "c", "d", "e", "f"],
            experience=20,
            languages=["hindi", "english", "tamil", "bengali"],
            is_verified=True,
            rating_average=5.0,
        )
        assert compute_shakti_score(worker) == 100.0

    def test_empty_profile_scores_zero(self):
        assert compute_shakti_score(WorkerProfile()) == 0.0

    def test_score_is_within_scale(self):
        rng = random.Random(7)
        for _ in range(200):
            worker = WorkerProfile(
                age=rng.randint(10, 90),
                skills=[f"s{i}" for i in range(rng.randint(0, 8))],
                experience=rng.randint(0, 40),
                languages=[f"l{i}" for i in range(rng.randint(0, 6))],
                is_verified=rng.random() < 0.5,
                rating_average=rng.uniform(0, 5),
            )
            assert 0.0 <= compute_shakti_score(worker) <= 100.0

    def test_peak_age_beats_boundary_ages(self):
        """A 35-year-old outscores otherwise identical 18- and 70-year-olds."""
        base = dict(skills=["masonry"], experience=5, languages=["hindi"])
        peak = compute_shakti_score(WorkerProfile(age=35, **base))
        young = compute_shakti_score(WorkerProfile(age=18, **base))
        senior = compute_shakti_score(WorkerProfile(age=70, **base))

        assert peak > young
        assert peak > senior

    def test_deterministic(self, electrician):
        assert compute_shakti_score(electrician) == compute_shakti_score(electrician)

    def test_experience_is_capped(self):
        capped = compute_shakti_score(WorkerProfile(age=35, experience=15))
        beyond = compute_shakti_score(WorkerProfile(age=35, experience=40))
        assert capped == beyond

    def test_custom_points(self):
        config = ScoringConfig(shakti={"points": {"age": 0, "experience": 100, "skills": 0, "languages": 0, "reputation": 0}})
        worker = WorkerProfile(age=35, experience=15)
        assert compute_shakti_score(worker, config) == 100.0


class TestAgeCurve:
    """Test the piecewise-linear age factor."""

    curve = DEFAULT_SCORING_CONFIG.shakti.age_curve

    @pytest.mark.parametrize(
        "age,expected",
        [
            (18, 0.5),
            (24, 0.75),
            (30, 1.0),
            (40, 1.0),
            (45, 1.0),
            (70, 0.3),
        ],
    )
    def test_curve_points(self, age, expected):
        assert age_factor(age, self.curve) == pytest.approx(expected)

    @pytest.mark.parametrize("age", [None, 17, 71, 0])
    def test_outside_bounds_is_zero(self, age):
        assert age_factor(age, self.curve) == 0.0


# =============================================================================
# Job match score
# =============================================================================


class TestJobMatcher:
    """Test worker/job compatibility scoring."""

    def test_reference_scenario(self, electrician, wiring_job):
        """Electrician with 12 years matches a 1-year electrical job."""
        assert is_eligible(electrician, wiring_job)
        assert match_job_to_worker(electrician, wiring_job) >= 0.8

    def test_full_match_without_locations(self, electrician, wiring_job):
        assert match_job_to_worker(electrician, wiring_job) == 1.0

    def test_partial_match(self):
        worker = WorkerProfile(skills=["electrical"], experience=2, languages=["hindi"])
        job = JobPosting(
            required_skills=["electrical", "plumbing"],
            required_experience=4,
            preferred_languages=["hindi", "english"],
        )
        result = JobMatcher().match(worker, job)

        assert result.skill_score == 0.5
        assert result.experience_score == 0.5
        assert result.language_score == 0.5
        assert result.location_score is None
        assert result.score == 0.5
        assert result.matched_skills == ["electrical"]
        assert result.missing_skills == ["plumbing"]

    def test_nothing_in_common_scores_zero(self):
        worker = WorkerProfile(skills=["cooking"], experience=0, languages=["tamil"])
        job = JobPosting(required_skills=["welding"], required_experience=5, preferred_languages=["english"])
        assert match_job_to_worker(worker, job) == 0.0

    def test_job_without_language_preference_counts_as_met(self):
        worker = WorkerProfile(skills=["cooking"], experience=0)
        job = JobPosting(required_skills=["welding"], required_experience=5)
        # Only the language dimension (0.15 of 0.90) is satisfied
        assert match_job_to_worker(worker, job) == pytest.approx(0.1667, abs=1e-4)

    def test_skills_are_case_insensitive(self):
        worker = WorkerProfile(skills=["  PLUMBING "])
        job = JobPosting(required_skills=["plumbing"])
        assert JobMatcher().match(worker, job).skill_score == 1.0

    def test_worker_without_languages_excludes_dimension(self):
        """Missing languages are left out of the average, not scored zero."""
        worker = WorkerProfile(skills=["electrical"], experience=3, languages=[])
        job = JobPosting(required_skills=["electrical"], preferred_languages=["english"])
        result = JobMatcher().match(worker, job)

        assert result.language_score is None
        assert result.score == 1.0

    def test_unmatched_language_counts_against(self):
        worker = WorkerProfile(skills=["electrical"], experience=3, languages=["tamil"])
        job = JobPosting(required_skills=["electrical"], preferred_languages=["english"])
        # (0.45 + 0.30 + 0.15 * 0) / 0.90
        assert match_job_to_worker(worker, job) == pytest.approx(0.8333, abs=1e-4)

    def test_same_location_scores_full(self):
        worker = WorkerProfile(skills=["electrical"], location=DELHI)
        job = JobPosting(required_skills=["electrical"], location=DELHI)
        result = JobMatcher().match(worker, job)

        assert result.distance_km == 0.0
        assert result.location_score == 1.0

    def test_nearer_jobs_score_higher(self):
        worker = WorkerProfile(skills=["electrical"], location=DELHI)
        near = JobPosting(required_skills=["electrical"], location=[77.22, 28.62])
        far = JobPosting(required_skills=["electrical"], location=FARIDABAD)

        assert match_job_to_worker(worker, near) > match_job_to_worker(worker, far)

    def test_invalid_coordinates_exclude_location(self):
        worker = WorkerProfile(skills=["electrical"], location=[181, 91])
        job = JobPosting(required_skills=["electrical"], location=DELHI)
        result = JobMatcher().match(worker, job)

        assert worker.location is None
        assert result.location_score is None
        assert result.score == 1.0

    def test_missing_worker_raises(self, wiring_job):
        with pytest.raises(WorkerNotFoundError):
            match_job_to_worker(None, wiring_job)

    def test_missing_job_raises(self, electrician):
        with pytest.raises(JobNotFoundError):
            match_job_to_worker(electrician, None)

    def test_job_matcher_satisfies_protocol(self):
        assert isinstance(JobMatcher(), Matcher)


class TestMatchProperties:
    """Properties that must hold for any worker and job."""

    SKILLS = ["electrical", "plumbing", "masonry", "carpentry", "painting", "welding", "driving"]
    LANGUAGES = ["hindi", "english", "tamil", "bengali", "marathi"]

    def _random_pair(self, rng):
        worker = WorkerProfile(
            age=rng.randint(18, 70),
            skills=rng.sample(self.SKILLS, rng.randint(0, 4)),
            experience=rng.randint(0, 20),
            languages=rng.sample(self.LANGUAGES, rng.randint(0, 3)) if rng.random() < 0.8 else None,
            location=[rng.uniform(68, 97), rng.uniform(8, 37)] if rng.random() < 0.7 else None,
        )
        job = JobPosting(
            required_skills=rng.sample(self.SKILLS, rng.randint(0, 3)),
            required_experience=rng.randint(0, 10),
            preferred_languages=rng.sample(self.LANGUAGES, rng.randint(0, 2)),
            location=[rng.uniform(68, 97), rng.uniform(8, 37)] if rng.random() < 0.7 else None,
        )
        return worker, job

    def test_score_is_in_unit_interval(self):
        rng = random.Random(42)
        for _ in range(300):
            worker, job = self._random_pair(rng)
            assert 0.0 <= match_job_to_worker(worker, job) <= 1.0

    def test_score_ignores_ordering(self):
        rng = random.Random(11)
        for _ in range(100):
            worker, job = self._random_pair(rng)
            shuffled_worker = WorkerProfile(
                age=worker.age,
                skills=list(reversed(sorted(worker.skills))),
                experience=worker.experience,
                languages=None if worker.languages is None else list(reversed(sorted(worker.languages))),
                location=worker.location,
            )
            shuffled_job = JobPosting(
                required_skills=list(reversed(sorted(job.required_skills))),
                required_experience=job.required_experience,
                preferred_languages=list(reversed(sorted(job.preferred_languages))),
                location=job.location,
            )
            assert match_job_to_worker(worker, job) == match_job_to_worker(shuffled_worker, shuffled_job)

    def test_meeting_all_requirements_scores_at_least_point_nine(self):
        """Skills, experience and languages satisfied means >= 0.9 even when far away."""
        worker = WorkerProfile(
            skills=["electrical", "plumbing", "painting"],
            experience=6,
            languages=["hindi", "english"],
            location=DELHI,
        )
        job = JobPosting(
            required_skills=["plumbing", "electrical"],
            required_experience=6,
            preferred_languages=["english"],
            location=[72.8777, 19.0760],  # Mumbai
        )
        assert match_job_to_worker(worker, job) >= 0.9


# =============================================================================
# Ranking
# =============================================================================


class TestRanking:
    """Test ranking jobs for a worker."""

    def test_empty_candidates(self, electrician):
        assert rank_jobs_for_worker(electrician, []) == []

    def test_sorted_descending(self, electrician):
        jobs = [
            JobPosting(id="weak", required_skills=["plumbing"], required_experience=20),
            JobPosting(id="strong", required_skills=["electrical"]),
            JobPosting(id="middle", required_skills=["electrical", "plumbing"]),
        ]
        ranked = rank_jobs_for_worker(electrician, jobs)

        assert [m.job.id for m in ranked] == ["strong", "middle", "weak"]
        scores = [m.score for m in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_creation_order(self, electrician):
        jobs = [
            JobPosting(
                id=f"job-{i}",
                required_skills=["electrical"],
                created_at=datetime(2026, 1, 1 + i, tzinfo=timezone.utc),
            )
            for i in range(5)
        ]
        ranked = rank_jobs_for_worker(electrician, jobs)
        assert [m.job.id for m in ranked] == [f"job-{i}" for i in range(5)]

    def test_only_open_jobs(self, electrician):
        jobs = [
            JobPosting(id="open", required_skills=["electrical"]),
            JobPosting(id="running", required_skills=["electrical"], status="in-progress"),
            JobPosting(id="done", required_skills=["electrical"], status="completed"),
        ]
        assert [m.job.id for m in rank_jobs_for_worker(electrician, jobs)] == ["open"]

    def test_min_score_and_limit(self, electrician):
        jobs = [
            JobPosting(id="a", required_skills=["electrical"]),
            JobPosting(id="b", required_skills=["welding"], required_experience=30),
            JobPosting(id="c", required_skills=["electrical"]),
        ]
        ranker = JobRanker(min_score=0.5)

        assert [m.job.id for m in ranker.rank_jobs(electrician, jobs)] == ["a", "c"]
        assert [m.job.id for m in ranker.rank_jobs(electrician, jobs, limit=1)] == ["a"]

    def test_missing_worker_raises(self):
        with pytest.raises(WorkerNotFoundError):
            rank_jobs_for_worker(None, [])

    def test_find_matching_workers_skips_unavailable(self, wiring_job):
        workers = [
            WorkerProfile(id="busy", skills=["electrical"], experience=5, is_available=False),
            WorkerProfile(id="free", skills=["electrical"], experience=5),
            WorkerProfile(id="cook", skills=["cooking"]),
        ]
        matches = find_matching_workers(wiring_job, workers, min_score=0.8)
        assert [m.worker.id for m in matches] == ["free"]


# =============================================================================
# Eligibility
# =============================================================================


class TestEligibility:
    """Test the hard eligibility gate."""

    @pytest.mark.parametrize("age,expected", [(17, False), (18, True), (45, True), (70, True), (71, False)])
    def test_age_bounds(self, wiring_job, age, expected):
        worker = WorkerProfile(age=age, skills=["electrical"], experience=5)
        assert is_eligible(worker, wiring_job) is expected

    def test_insufficient_experience(self):
        worker = WorkerProfile(age=30, skills=["electrical"], experience=1)
        job = JobPosting(required_skills=["electrical"], required_experience=3)

        assert not is_eligible(worker, job)
        assert check_eligibility(worker, job) == ["requires 3 years of experience, has 1"]

    def test_eligibility_ignores_skills(self):
        """The gate is about age and experience; skills only affect the score."""
        worker = WorkerProfile(age=30, skills=["cooking"], experience=5)
        job = JobPosting(required_skills=["electrical"], required_experience=2)
        assert is_eligible(worker, job)

    def test_unknown_age_is_ineligible(self, wiring_job):
        assert not is_eligible(WorkerProfile(experience=5), wiring_job)

    def test_missing_inputs_raise(self, electrician, wiring_job):
        with pytest.raises(WorkerNotFoundError):
            is_eligible(None, wiring_job)
        with pytest.raises(JobNotFoundError):
            is_eligible(electrician, None)


# =============================================================================
# Geometry and configuration
# =============================================================================


class TestGeoPoint:
    """Test coordinate parsing and distance."""

    def test_valid_pair(self):
        point = GeoPoint.from_pair(DELHI)
        assert point == GeoPoint(longitude=77.209, latitude=28.6139)

    @pytest.mark.parametrize("pair", [None, [181, 91], [0, -91], ["a", "b"], [1], [float("nan"), 0]])
    def test_invalid_pairs(self, pair):
        assert GeoPoint.from_pair(pair) is None

    def test_haversine_known_distance(self):
        """Delhi to Mumbai is about 1150 km as the crow flies."""
        delhi = GeoPoint.from_pair(DELHI)
        mumbai = GeoPoint.from_pair([72.8777, 19.0760])
        assert haversine_km(delhi, mumbai) == pytest.approx(1150, rel=0.02)


class TestScoringConfig:
    """Test loading scoring.yaml."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_scoring_config(tmp_path / "nope.yaml")
        assert config == ScoringConfig()

    def test_loads_overrides(self, tmp_path):
        path = tmp_path / "scoring.yaml"
        path.write_text(yaml.dump({"match": {"weights": {"location": 0.0}}, "thresholds": {"job_alert_min_score": 0.7}}))

        config = load_scoring_config(path)

        assert config.match.weights.location == 0.0
        assert config.match.weights.skills == 0.45
        assert config.thresholds.job_alert_min_score == 0.7

    def test_shipped_file_matches_defaults(self):
        """config/scoring.yaml carries the same values as the built-in defaults."""
        from config.settings import settings

        assert load_scoring_config(settings.scoring_config_path) == DEFAULT_SCORING_CONFIG

    def test_zero_weights_rejected(self):
        with pytest.raises(PydanticValidationError):
            ScoringConfig(match={"weights": {"skills": 0, "experience": 0, "languages": 0, "location": 0}})

    def test_unordered_age_curve_rejected(self):
        with pytest.raises(PydanticValidationError):
            ScoringConfig(shakti={"age_curve": {"peak_start": 50, "peak_end": 40}})
