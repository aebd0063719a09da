"""Notification service — OTP, welcome and login alerts over WhatsApp or email.

Every method reports delivery as ``{"success": bool, ...}``. Delivery errors
are logged here and never raised.
"""

import asyncio
from datetime import datetime

import pytz
import structlog

from fitdesk.config import Settings, get_settings
from fitdesk.infrastructure.email_client import EmailClient, EmailDeliveryError
from fitdesk.infrastructure.whatsapp_api import WhatsAppClient, WhatsAppDeliveryError

logger = structlog.get_logger(__name__)

APP_NAME = "FitDesk"


def format_otp_message(code: str, expiry_minutes: int) -> str:
    return (
        f"Your verification OTP is: *{code}*\n\n"
        f"This code will expire in {expiry_minutes} minutes.\n\n"
        "Do not share this code with anyone."
    )


def format_welcome_message(name: str) -> str:
    return (
        f"Welcome to {APP_NAME}, {name}! 🎉\n\n"
        "Your account has been successfully created.\n\n"
        "You can now login using WhatsApp OTP."
    )


def format_login_message(when: datetime) -> str:
    return (
        "Login successful! ✅\n\n"
        f"You have logged into {APP_NAME} at {when.strftime('%d/%m/%Y, %I:%M:%S %p')}.\n\n"
        "If this wasn't you, please contact support immediately."
    )


class NotificationService:
    def __init__(self, settings: Settings, whatsapp: WhatsAppClient, email: EmailClient):
        self.whatsapp = whatsapp
        self.email = email
        self.tz = pytz.timezone(settings.TIMEZONE)
        self.otp_expiry_minutes = settings.OTP_EXPIRY_MINUTES

    async def _send_whatsapp(self, phone: str, message: str, kind: str) -> dict:
        try:
            result = await self.whatsapp.send_text(phone, message)
        except WhatsAppDeliveryError as e:
            logger.warning("WhatsApp notification failed", kind=kind, phone=phone, error=str(e))
            return {"success": False, "error": str(e)}
        except Exception:
            logger.exception("WhatsApp notification crashed", kind=kind, phone=phone)
            return {"success": False, "error": "unexpected delivery error"}
        return {"success": True, "message_id": result.get("sid")}

    async def _send_email(self, to_email: str, subject: str, body: str, kind: str) -> dict:
        try:
            await asyncio.to_thread(self.email.send_email, to_email, subject, body)
        except EmailDeliveryError as e:
            logger.warning("Email notification failed", kind=kind, email=to_email, error=str(e))
            return {"success": False, "error": str(e)}
        except Exception:
            logger.exception("Email notification crashed", kind=kind, email=to_email)
            return {"success": False, "error": "unexpected delivery error"}
        return {"success": True}

    async def send_otp(self, identifier: str, code: str) -> dict:
        """Deliver ``code`` to an email address or a WhatsApp number."""
        message = format_otp_message(code, self.otp_expiry_minutes)
        if "@" in identifier:
            return await self._send_email(identifier, f"{APP_NAME} verification code", message, kind="otp")
        return await self._send_whatsapp(identifier, message, kind="otp")

    async def send_welcome_message(self, phone: str, name: str) -> dict:
        return await self._send_whatsapp(phone, format_welcome_message(name), kind="welcome")

    async def send_login_notification(self, phone: str) -> dict:
        return await self._send_whatsapp(phone, format_login_message(datetime.now(self.tz)), kind="login")


def get_notification_service() -> NotificationService:
    settings = get_settings()
    return NotificationService(settings, WhatsAppClient(settings), EmailClient(settings))
