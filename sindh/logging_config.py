"""Logging configuration for Sindh."""
import logging
import logging.handlers
import re
from pathlib import Path

# Phone numbers as accepted at registration (10-15 digits, optional +)
PHONE_PATTERN = re.compile(r"(?<![\w-])\+?\d{6,11}(\d{4})\b")

NOISY_LOGGERS = ("aiohttp", "sqlalchemy", "apscheduler", "uvicorn.access")


class PhoneMaskFilter(logging.Filter):
    """Replace all but the last four digits of phone numbers in log output."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = PHONE_PATTERN.sub(r"******\1", message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    mask_phones: bool = True,
) -> None:
    """Configure application-wide logging.

    Call once at startup (sindh.main). Repeated calls are ignored so
    uvicorn reloads do not stack handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path for a rotating log file
        mask_phones: Hide worker and employer phone numbers in log lines
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                path,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        if mask_phones:
            handler.addFilter(PhoneMaskFilter())
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
