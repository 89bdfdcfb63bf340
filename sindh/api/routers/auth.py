"""OTP login endpoints for workers and employers."""
from typing import Literal

from fastapi import APIRouter, BackgroundTasks, Depends

from sindh.api.dependencies import get_auth_service, get_dispatcher, get_notification_service
from sindh.api.notify import queue_notification
from sindh.api.responses import LoginOut, OTPSentOut
from sindh.auth.service import AuthService
from sindh.notifications.dispatcher import NotificationDispatcher
from sindh.notifications.service import NotificationService
from sindh.schemas import OTPRequest, OTPVerify

router = APIRouter(prefix="/api/auth", tags=["auth"])

Role = Literal["worker", "employer"]


@router.post("/{role}/request-otp", response_model=OTPSentOut)
def request_otp(
    role: Role,
    request: OTPRequest,
    background_tasks: BackgroundTasks,
    auth: AuthService = Depends(get_auth_service),
    inbox: NotificationService = Depends(get_notification_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Send a one-time login code by SMS to a registered phone."""
    code = auth.request_otp(request.phone, role)
    account = auth.get_account(request.phone, role)
    ttl_minutes = int(auth.ttl.total_seconds() // 60)

    queue_notification(
        background_tasks, inbox, dispatcher, "login_otp", account,
        store=False, code=code, ttl_minutes=ttl_minutes,
    )
    return OTPSentOut(message="OTP sent", expires_in_minutes=ttl_minutes)


@router.post("/{role}/verify-otp", response_model=LoginOut)
def verify_otp(
    role: Role,
    request: OTPVerify,
    auth: AuthService = Depends(get_auth_service),
):
    account = auth.verify_otp(request.phone, request.otp, role)
    return LoginOut(role=role, id=account.id, name=account.name)
