"""Twilio WhatsApp HTTP client.

Messages go through the Twilio Messages REST endpoint:
POST {TWILIO_API_URL}/Accounts/{sid}/Messages.json with form fields
From / To / Body and basic auth (account sid, auth token).
"""

import asyncio
import logging
import re
from typing import Optional

import httpx

from fitdesk.config import Settings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


class WhatsAppDeliveryError(Exception):
    """Raised when a message could not be handed to Twilio."""


class WhatsAppClient:
    """Client for sending WhatsApp text messages through Twilio."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.account_sid = settings.TWILIO_ACCOUNT_SID
        self.auth_token = settings.TWILIO_AUTH_TOKEN
        self.from_number = settings.TWILIO_WHATSAPP_NUMBER
        self.country_code = settings.WHATSAPP_COUNTRY_CODE
        self.url = f"{settings.TWILIO_API_URL.rstrip('/')}/Accounts/{self.account_sid}/Messages.json"
        self.timeout = settings.WHATSAPP_TIMEOUT_SECONDS
        self.transport = transport
        self.max_retries = 3
        self.retry_delay = 1  # seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def format_phone_number(self, phone: str) -> str:
        """Normalise to ``whatsapp:+<country><number>``."""
        cleaned = re.sub(r"\D", "", phone)
        # Local mobile numbers are 10 digits and may themselves start with the country code
        if len(cleaned) == 10 or not cleaned.startswith(self.country_code):
            cleaned = f"{self.country_code}{cleaned}"
        return f"whatsapp:+{cleaned}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            auth=(self.account_sid, self.auth_token),
            transport=self.transport,
        )

    async def send_text(self, phone: str, message: str) -> dict:
        """
        Send a text message and return Twilio's message resource.

        Retries up to max_retries times with linear backoff on connection
        errors and retryable status codes; other 4xx responses fail at once.
        """
        if not self.is_configured:
            raise WhatsAppDeliveryError("Twilio WhatsApp credentials are not configured")

        payload = {
            "From": self.from_number,
            "To": self.format_phone_number(phone),
            "Body": message,
        }

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                async with self._client() as client:
                    response = await client.post(self.url, data=payload)
                    response.raise_for_status()
                    try:
                        result = response.json()
                    except ValueError as e:
                        raise WhatsAppDeliveryError(f"Unexpected Twilio response: {response.text[:200]}") from e
                    logger.info("WhatsApp message %s queued (attempt %d)", result.get("sid"), attempt)
                    return result
            except httpx.HTTPStatusError as e:
                last_error = e
                logger.warning(
                    "Twilio error (attempt %d/%d): %s - %s",
                    attempt,
                    self.max_retries,
                    e.response.status_code,
                    e.response.text[:200],
                )
                if e.response.status_code not in RETRYABLE_STATUS_CODES:
                    break
            except httpx.HTTPError as e:
                last_error = e
                logger.warning("Twilio connection error (attempt %d/%d): %s", attempt, self.max_retries, e)

            if attempt < self.max_retries:
                await asyncio.sleep(self.retry_delay * attempt)

        raise WhatsAppDeliveryError(f"Failed to send WhatsApp message: {last_error}")
