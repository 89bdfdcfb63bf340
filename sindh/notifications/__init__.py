"""SMS notifications and the in-app inbox."""
from .dispatcher import NotificationDispatcher
from .messages import EVENTS, build_message
from .service import NotificationService
from .sms_notifier import SMSNotifier

__all__ = [
    "EVENTS",
    "NotificationDispatcher",
    "NotificationService",
    "SMSNotifier",
    "build_message",
]
