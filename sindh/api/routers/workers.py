"""Worker endpoints: registration, profile, matches, applications and wallet."""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from sindh.api.dependencies import (
    get_application_service,
    get_dispatcher,
    get_match_service,
    get_notification_service,
    get_profile_service,
    get_wallet_service,
)
from sindh.api.notify import queue_notification
from sindh.api.responses import (
    ApplicationOut,
    JobOut,
    MatchOut,
    TransactionOut,
    WalletOut,
    WorkerOut,
)
from sindh.matching.service import MatchService
from sindh.notifications.dispatcher import NotificationDispatcher
from sindh.notifications.service import NotificationService
from sindh.profiles.service import ProfileService
from sindh.schemas import (
    AvailabilityUpdate,
    VerificationUpdate,
    WithdrawalRequest,
    WorkerCreate,
    WorkerUpdate,
)
from sindh.tracking.application_service import ApplicationService
from sindh.tracking.wallet_service import WalletService

router = APIRouter(prefix="/api/workers", tags=["workers"])


@router.post("/register", response_model=WorkerOut, status_code=201)
def register_worker(
    request: WorkerCreate,
    background_tasks: BackgroundTasks,
    profiles: ProfileService = Depends(get_profile_service),
    inbox: NotificationService = Depends(get_notification_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Register a worker; the ShaktiScore is computed on save."""
    worker = profiles.register_worker(request)
    queue_notification(
        background_tasks, inbox, dispatcher, "worker_registered", worker,
        name=worker.name, shakti_score=round(worker.shakti_score),
    )
    return worker


@router.get("", response_model=list[WorkerOut])
def list_workers(
    available_only: bool = Query(False),
    limit: int = Query(100, ge=1, le=500),
    profiles: ProfileService = Depends(get_profile_service),
):
    return profiles.list_workers(available_only=available_only, limit=limit)


@router.get("/{worker_id}", response_model=WorkerOut)
def get_worker(worker_id: str, profiles: ProfileService = Depends(get_profile_service)):
    return profiles.get_worker(worker_id)


@router.put("/{worker_id}", response_model=WorkerOut)
def update_worker(
    worker_id: str,
    request: WorkerUpdate,
    profiles: ProfileService = Depends(get_profile_service),
):
    """Update profile fields; ShaktiScore and completion are recomputed."""
    return profiles.update_worker(worker_id, request)


@router.patch("/{worker_id}/availability", response_model=WorkerOut)
def set_availability(
    worker_id: str,
    request: AvailabilityUpdate,
    profiles: ProfileService = Depends(get_profile_service),
):
    return profiles.set_availability(worker_id, request.is_available)


@router.patch("/{worker_id}/verification", response_model=WorkerOut)
def set_verification(
    worker_id: str,
    request: VerificationUpdate,
    profiles: ProfileService = Depends(get_profile_service),
):
    """Record identity verification; the ShaktiScore is recomputed."""
    return profiles.set_verification(worker_id, request.status)


@router.get("/{worker_id}/jobs", response_model=list[MatchOut])
def get_matching_jobs(
    worker_id: str,
    min_score: Optional[float] = Query(None, ge=0, le=1),
    limit: Optional[int] = Query(None, ge=1, le=200),
    matches: MatchService = Depends(get_match_service),
):
    """
    Open jobs ranked for this worker, best match first.

    Ties keep the order in which the jobs were posted.
    """
    ranked = matches.get_matches_for_worker(worker_id, min_score=min_score, limit=limit)
    return [
        MatchOut(
            job=JobOut.model_validate(job),
            score=result.score,
            breakdown=result.breakdown,
            matched_skills=result.matched_skills,
            missing_skills=result.missing_skills,
            distance_km=result.distance_km,
        )
        for job, result in ranked
    ]


@router.get("/{worker_id}/applications", response_model=list[ApplicationOut])
def get_worker_applications(
    worker_id: str,
    status: Optional[str] = Query(None),
    applications: ApplicationService = Depends(get_application_service),
):
    return applications.get_applications_for_worker(worker_id, status=status)


@router.get("/{worker_id}/wallet", response_model=WalletOut)
def get_wallet(worker_id: str, wallet: WalletService = Depends(get_wallet_service)):
    """Balance, lifetime earnings and withdrawals, and the ledger."""
    return WalletOut.model_validate(wallet.get_wallet(worker_id))


@router.post("/{worker_id}/withdraw", response_model=TransactionOut, status_code=201)
def withdraw(
    worker_id: str,
    request: WithdrawalRequest,
    wallet: WalletService = Depends(get_wallet_service),
):
    return wallet.withdraw(worker_id, request.amount, method=request.method)
