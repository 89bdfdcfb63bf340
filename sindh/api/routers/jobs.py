"""Job endpoints: posting, search, lifecycle, applications, review, payment and rating."""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query

from sindh.api.dependencies import (
    get_application_service,
    get_dispatcher,
    get_job_service,
    get_match_service,
    get_notification_service,
)
from sindh.api.notify import queue_broadcast, queue_notification
from sindh.api.responses import ApplicationOut, JobDetailOut, JobOut, ReviewOut
from sindh.jobs.service import JobService
from sindh.matching.service import MatchService
from sindh.notifications.dispatcher import NotificationDispatcher
from sindh.notifications.service import NotificationService
from sindh.persistence.models import Application
from sindh.schemas import (
    ApplicationStatusUpdate,
    ApplyRequest,
    JobPostRequest,
    JobStatusUpdate,
    PaymentRequest,
    RatingRequest,
    ReviewRequest,
)
from sindh.tracking.application_service import ApplicationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def _notify_status(
    background_tasks: BackgroundTasks,
    inbox: NotificationService,
    dispatcher: NotificationDispatcher,
    application: Application,
) -> None:
    queue_notification(
        background_tasks, inbox, dispatcher, "application_status", application.worker,
        status=application.status, title=application.job.title,
    )


@router.post("", response_model=JobOut, status_code=201)
def post_job(
    request: JobPostRequest,
    background_tasks: BackgroundTasks,
    jobs: JobService = Depends(get_job_service),
    matches: MatchService = Depends(get_match_service),
    inbox: NotificationService = Depends(get_notification_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """
    Post a job.

    Available workers matching at or above the alert threshold get an
    SMS and a missed call after the response is sent.
    """
    job = jobs.post_job(request.employer_id, request)

    alerts = [
        (
            worker,
            {
                "title": job.title,
                "address": job.address or "you",
                "wage_amount": f"{job.wage_amount:g}",
                "wage_period": job.wage_period,
                "match_percent": round(result.score * 100),
            },
        )
        for worker, result in matches.get_matching_workers(job.id)
    ]
    alerted = queue_broadcast(background_tasks, inbox, dispatcher, "job_alert", alerts)

    logger.info("Job %s posted; %d workers alerted", job.id, alerted)
    return job


@router.get("", response_model=list[JobOut])
def search_jobs(
    status: Optional[str] = Query("open", description="Job status, or \"any\""),
    skills: Optional[str] = Query(None, description="Comma-separated skills"),
    location: Optional[str] = Query(None, description="Part of the job address"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    jobs: JobService = Depends(get_job_service),
):
    """Jobs in the order they were posted; open jobs unless another status is asked for."""
    return jobs.search_jobs(
        status=None if status == "any" else status,
        skills=skills.split(",") if skills else None,
        location=location,
        limit=limit,
    )


@router.get("/{job_id}", response_model=JobDetailOut)
def get_job(
    job_id: str,
    jobs: JobService = Depends(get_job_service),
    applications: ApplicationService = Depends(get_application_service),
):
    job = jobs.get_job(job_id)
    detail = JobDetailOut.model_validate(job)
    detail.pipeline = applications.get_pipeline_counts(job_id)
    return detail


@router.patch("/{job_id}/status", response_model=JobOut)
def update_job_status(
    job_id: str,
    request: JobStatusUpdate,
    jobs: JobService = Depends(get_job_service),
):
    return jobs.update_job_status(job_id, request.status)


@router.post("/{job_id}/apply", response_model=ApplicationOut, status_code=201)
def apply_for_job(
    job_id: str,
    request: ApplyRequest,
    background_tasks: BackgroundTasks,
    applications: ApplicationService = Depends(get_application_service),
    inbox: NotificationService = Depends(get_notification_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    application = applications.apply(job_id, request.worker_id)
    queue_notification(
        background_tasks, inbox, dispatcher, "application_received", application.job.employer,
        worker_name=application.worker.name, title=application.job.title,
    )
    return application


@router.patch("/{job_id}/applications/{application_id}", response_model=ApplicationOut)
def update_application_status(
    job_id: str,
    application_id: str,
    request: ApplicationStatusUpdate,
    background_tasks: BackgroundTasks,
    applications: ApplicationService = Depends(get_application_service),
    inbox: NotificationService = Depends(get_notification_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Move an application along; accepting re-checks eligibility."""
    current = applications.get_application(application_id)
    old_status = current.status if current is not None else None

    application = applications.update_status(
        job_id, application_id, request.status, notes=request.notes
    )
    if application.status != old_status:
        _notify_status(background_tasks, inbox, dispatcher, application)
    return application


@router.post("/{job_id}/review", response_model=ReviewOut)
def review_applications(
    job_id: str,
    background_tasks: BackgroundTasks,
    request: Optional[ReviewRequest] = Body(None),
    applications: ApplicationService = Depends(get_application_service),
    inbox: NotificationService = Depends(get_notification_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Accept eligible pending applicants above the ShaktiScore threshold; reject the rest."""
    threshold = request.min_shakti_score if request is not None else None
    outcome = applications.review_applications(job_id, min_shakti_score=threshold)

    for application in outcome.accepted + outcome.rejected:
        _notify_status(background_tasks, inbox, dispatcher, application)

    return ReviewOut(
        accepted=[ApplicationOut.model_validate(a) for a in outcome.accepted],
        rejected=[ApplicationOut.model_validate(a) for a in outcome.rejected],
    )


@router.post("/{job_id}/applications/{application_id}/payment", response_model=ApplicationOut)
def record_payment(
    job_id: str,
    application_id: str,
    request: PaymentRequest,
    background_tasks: BackgroundTasks,
    applications: ApplicationService = Depends(get_application_service),
    inbox: NotificationService = Depends(get_notification_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    application = applications.record_payment(application_id, request.amount, job_id=job_id)
    queue_notification(
        background_tasks, inbox, dispatcher, "payment_recorded", application.worker,
        amount=f"{application.payment_amount:g}", title=application.job.title,
    )
    return application


@router.post("/{job_id}/applications/{application_id}/rating", response_model=ApplicationOut)
def rate_worker(
    job_id: str,
    application_id: str,
    request: RatingRequest,
    applications: ApplicationService = Depends(get_application_service),
):
    """Rate completed work; the worker's ShaktiScore is recomputed."""
    return applications.rate_worker(job_id, application_id, request.rating, review=request.review)
