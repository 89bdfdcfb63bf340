"""Queue notifications from request handlers."""
import logging

from fastapi import BackgroundTasks

from sindh.notifications.dispatcher import NotificationDispatcher
from sindh.notifications.messages import build_message
from sindh.notifications.service import NotificationService
from sindh.persistence.models import Employer, Worker

logger = logging.getLogger(__name__)


def queue_notification(
    background_tasks: BackgroundTasks,
    inbox: NotificationService,
    dispatcher: NotificationDispatcher,
    event: str,
    recipient: Worker | Employer,
    store: bool = True,
    **context,
) -> str:
    """
    Store the inbox copy now and send the SMS after the response.

    Args:
        background_tasks: Request's background task queue
        inbox: Notification inbox service
        dispatcher: SMS dispatcher
        event: Event name
        recipient: Worker or Employer being notified
        store: Keep an inbox copy (off for one-time codes)
        **context: Template fields

    Returns:
        The rendered message
    """
    message = build_message(event, **context)
    recipient_type = "worker" if isinstance(recipient, Worker) else "employer"

    if store:
        inbox.record(recipient.id, recipient_type, event, message)

    background_tasks.add_task(
        dispatcher.notify, event, {"phone": recipient.phone, "message": message}
    )
    logger.debug("Queued %s for %s %s", event, recipient_type, recipient.id)
    return message


def queue_broadcast(
    background_tasks: BackgroundTasks,
    inbox: NotificationService,
    dispatcher: NotificationDispatcher,
    event: str,
    recipients: list[tuple[Worker | Employer, dict]],
) -> int:
    """
    Store one inbox copy per recipient and send all SMS in a single task.

    Args:
        recipients: (recipient, template fields) pairs

    Returns:
        Number of recipients queued
    """
    payloads = []
    for recipient, context in recipients:
        message = build_message(event, **context)
        recipient_type = "worker" if isinstance(recipient, Worker) else "employer"
        inbox.record(recipient.id, recipient_type, event, message)
        payloads.append({"phone": recipient.phone, "message": message})

    if payloads:
        background_tasks.add_task(dispatcher.notify_many, event, payloads)
        logger.debug("Queued %s for %d recipients", event, len(payloads))
    return len(payloads)
