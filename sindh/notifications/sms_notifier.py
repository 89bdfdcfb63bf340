"""SMS and missed-call delivery through an HTTP gateway."""
import asyncio
import logging
import random
from typing import Optional

import aiohttp

logger = logging.getLogger(__name__)


async def post_with_retry(
    session: aiohttp.ClientSession,
    url: str,
    *,
    retries: int = 3,
    **kwargs,
) -> bool:
    """POST returning True on a 2xx response, retrying 429/5xx and network errors."""
    last_error = None
    for attempt in range(retries):
        try:
            async with session.post(url, **kwargs) as resp:
                if resp.status == 429 or resp.status >= 500:
                    if attempt < retries - 1:
                        wait = (2 ** attempt) + random.uniform(0, 1)
                        logger.warning(
                            "HTTP %d from %s, retrying in %.1fs (attempt %d/%d)",
                            resp.status, url, wait, attempt + 1, retries,
                        )
                        await asyncio.sleep(wait)
                    continue
                if not 200 <= resp.status < 300:
                    logger.warning("HTTP %d from %s", resp.status, url)
                    return False
                return True
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            last_error = e
            if attempt < retries - 1:
                wait = (2 ** attempt) + random.uniform(0, 1)
                logger.warning(
                    "Request to %s failed: %s, retrying in %.1fs (attempt %d/%d)",
                    url, e, wait, attempt + 1, retries,
                )
                await asyncio.sleep(wait)

    if last_error:
        logger.error("All %d retries failed for %s: %s", retries, url, last_error)
    else:
        logger.error("Gateway %s kept failing after %d attempts", url, retries)
    return False


class SMSNotifier:
    """Send SMS and missed calls via the configured gateway."""

    def __init__(
        self,
        gateway_url: Optional[str] = None,
        api_key: Optional[str] = None,
        sender_id: str = "SINDH",
        retries: int = 3,
    ):
        """
        Initialize SMS notifier.

        Args:
            gateway_url: HTTP endpoint of the SMS gateway (messages are only logged when unset)
            api_key: Bearer token for the gateway
            sender_id: Sender ID shown on the SMS
            retries: Attempts per message on transient failures
        """
        self.gateway_url = gateway_url
        self.api_key = api_key
        self.sender_id = sender_id
        self.retries = retries

    @property
    def configured(self) -> bool:
        return bool(self.gateway_url)

    async def send_sms(self, phone: str, message: str) -> bool:
        """
        Send a text message.

        Args:
            phone: Recipient phone number
            message: Message body

        Returns:
            True if the gateway accepted the message
        """
        if not phone or not message:
            logger.warning("SMS skipped: phone and message are required")
            return False

        if not self.configured:
            logger.info("SMS gateway not configured; would send to %s: %s", phone, message)
            return False

        payload = {"to": phone, "message": message, "sender": self.sender_id, "type": "sms"}
        return await self._post(payload)

    async def missed_call(self, phone: str) -> bool:
        """Ring a phone once as a prompt to check messages."""
        if not phone:
            return False

        if not self.configured:
            logger.info("SMS gateway not configured; would place missed call to %s", phone)
            return False

        return await self._post({"to": phone, "sender": self.sender_id, "type": "missed_call"})

    async def _post(self, payload: dict) -> bool:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        async with aiohttp.ClientSession() as session:
            return await post_with_retry(
                session,
                self.gateway_url,
                retries=self.retries,
                json=payload,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=10),
            )
