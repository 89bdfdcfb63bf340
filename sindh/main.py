"""Main entry point: API server plus the job reminder scheduler."""
import asyncio
import logging
from datetime import timedelta
from typing import Optional

import uvicorn
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config.settings import settings
from sindh.api.app import create_app
from sindh.logging_config import setup_logging
from sindh.notifications.dispatcher import NotificationDispatcher
from sindh.notifications.messages import build_message
from sindh.notifications.service import NotificationService
from sindh.persistence.database import get_session, init_db
from sindh.tracking.application_service import ApplicationService

logger = logging.getLogger(__name__)


async def send_job_reminders(dispatcher: Optional[NotificationDispatcher] = None) -> int:
    """
    Remind accepted workers whose job starts within the reminder window.

    Returns:
        Number of reminders sent
    """
    dispatcher = dispatcher or NotificationDispatcher()
    window = timedelta(hours=settings.reminder_window_hours)
    sent = 0

    try:
        with get_session() as session:
            applications = ApplicationService(session)
            inbox = NotificationService(session)

            for application in applications.get_due_reminders(window):
                worker, job = application.worker, application.job
                message = build_message(
                    "job_reminder",
                    title=job.title,
                    start_date=job.start_date.strftime("%d %b %Y %H:%M"),
                )
                inbox.record(worker.id, "worker", "job_reminder", message)
                await dispatcher.notify("job_reminder", {"phone": worker.phone, "message": message})
                applications.mark_reminder_sent(application.id)
                sent += 1

    except Exception as e:
        logger.error("Job reminder run failed: %s", e, exc_info=True)

    if sent:
        logger.info("Sent %d job reminders", sent)
    return sent


async def async_main():
    """Async main entry point."""
    setup_logging(level=settings.log_level, log_file=settings.log_file or None)
    logger.info("Sindh starting...")

    # Initialize database
    init_db()

    dispatcher = NotificationDispatcher()
    if not dispatcher.notifier.configured:
        logger.warning("SMS gateway not configured; notifications will only be logged")

    # Create scheduler
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        send_job_reminders,
        IntervalTrigger(minutes=settings.reminder_check_interval_minutes),
        kwargs={"dispatcher": dispatcher},
        id="job_reminders",
        name="Job Reminders",
        max_instances=1,
    )
    scheduler.start()
    logger.info(
        "Scheduler started: job reminders every %d minutes",
        settings.reminder_check_interval_minutes,
    )

    app = create_app(dispatcher=dispatcher)
    server = uvicorn.Server(
        uvicorn.Config(app, host=settings.api_host, port=settings.api_port, log_config=None)
    )
    logger.info("API listening on http://%s:%d (docs at /docs)", settings.api_host, settings.api_port)

    try:
        await server.serve()
    except asyncio.CancelledError:
        logger.info("Shutting down...")
    finally:
        scheduler.shutdown()


def main():
    """Main entry point."""
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown complete.")


if __name__ == "__main__":
    main()
