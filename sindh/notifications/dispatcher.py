"""Fire-and-forget delivery of notification events."""
import logging
from typing import Any, Optional

from sindh.notifications.messages import build_message
from sindh.notifications.sms_notifier import SMSNotifier

logger = logging.getLogger(__name__)

# Events that also ring the recipient so they notice the SMS
CALL_EVENTS = {"job_alert"}


class NotificationDispatcher:
    """Render events into SMS and hand them to the notifier."""

    def __init__(self, notifier: Optional[SMSNotifier] = None):
        """
        Initialize dispatcher.

        Args:
            notifier: SMS notifier (defaults to one built from settings)
        """
        self.notifier = notifier or self.default_notifier()

    @staticmethod
    def default_notifier() -> SMSNotifier:
        from config.settings import settings

        return SMSNotifier(
            gateway_url=settings.sms_gateway_url,
            api_key=settings.sms_gateway_api_key,
            sender_id=settings.sms_sender_id,
        )

    async def notify(self, event: str, payload: dict[str, Any]) -> bool:
        """
        Send the SMS for one event.

        Failures are logged and reported as False; nothing is raised so
        callers can schedule this after responding.

        Args:
            event: Event name (see messages.EVENTS)
            payload: ``phone`` of the recipient plus template fields;
                a pre-rendered ``message`` is used as-is

        Returns:
            True if the SMS was delivered
        """
        phone = payload.get("phone")
        try:
            message = payload.get("message") or build_message(event, **payload)
            sent = await self.notifier.send_sms(phone, message)
            if event in CALL_EVENTS:
                await self.notifier.missed_call(phone)
        except Exception as e:
            logger.error("Notification %s to %s failed: %s", event, phone, e)
            return False

        logger.debug("Notification %s to %s sent=%s", event, phone, sent)
        return sent

    async def notify_many(self, event: str, payloads: list[dict[str, Any]]) -> int:
        """Send one event to several recipients; returns the number delivered."""
        sent = 0
        for payload in payloads:
            if await self.notify(event, payload):
                sent += 1
        return sent
