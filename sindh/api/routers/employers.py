"""Employer endpoints."""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from sindh.api.dependencies import (
    get_dispatcher,
    get_job_service,
    get_notification_service,
    get_profile_service,
)
from sindh.api.notify import queue_notification
from sindh.api.responses import EmployerOut, EmployerStatsOut, JobOut
from sindh.jobs.service import JobService
from sindh.notifications.dispatcher import NotificationDispatcher
from sindh.notifications.service import NotificationService
from sindh.profiles.service import ProfileService
from sindh.schemas import EmployerCreate, EmployerUpdate

router = APIRouter(prefix="/api/employers", tags=["employers"])


@router.post("/register", response_model=EmployerOut, status_code=201)
def register_employer(
    request: EmployerCreate,
    background_tasks: BackgroundTasks,
    profiles: ProfileService = Depends(get_profile_service),
    inbox: NotificationService = Depends(get_notification_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    employer = profiles.register_employer(request)
    queue_notification(
        background_tasks, inbox, dispatcher, "employer_registered", employer,
        name=employer.name, company_name=employer.company_name,
    )
    return employer


@router.get("/{employer_id}", response_model=EmployerOut)
def get_employer(employer_id: str, profiles: ProfileService = Depends(get_profile_service)):
    return profiles.get_employer(employer_id)


@router.put("/{employer_id}", response_model=EmployerOut)
def update_employer(
    employer_id: str,
    request: EmployerUpdate,
    profiles: ProfileService = Depends(get_profile_service),
):
    return profiles.update_employer(employer_id, request)


@router.get("/{employer_id}/jobs", response_model=list[JobOut])
def get_employer_jobs(
    employer_id: str,
    status: Optional[str] = Query(None),
    jobs: JobService = Depends(get_job_service),
):
    """Jobs posted by this employer, newest first."""
    return jobs.list_jobs_for_employer(employer_id, status=status)


@router.get("/{employer_id}/stats", response_model=EmployerStatsOut)
def get_employer_stats(employer_id: str, jobs: JobService = Depends(get_job_service)):
    """Totals of jobs by state and applications received."""
    return jobs.get_employer_stats(employer_id)
