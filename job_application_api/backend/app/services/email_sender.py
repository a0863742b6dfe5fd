"""
Email sending service.
Sends through SMTP (default) or SendGrid, depending on EMAIL_TRANSPORT.
Never raises: every outcome comes back as a DeliveryResult for the caller to log.
"""

import asyncio
import base64
import logging
import smtplib
from dataclasses import dataclass
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import List, Optional

import httpx

from app.core.config import settings
from app.core.errors import DeliveryError

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


@dataclass(frozen=True)
class EmailAttachment:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class DeliveryResult:
    to: str
    sent: bool
    transport: str
    message_id: Optional[str] = None
    error: Optional[str] = None


def build_message(
    to_email: str,
    subject: str,
    html: str,
    attachments: Optional[List[EmailAttachment]] = None,
    from_email: Optional[str] = None,
    from_name: Optional[str] = None,
) -> MIMEMultipart:
    """multipart/mixed: one HTML part followed by base64 attachments."""
    msg = MIMEMultipart("mixed")
    msg["To"] = to_email
    msg["Subject"] = subject
    sender = from_email or settings.EMAIL_USER
    msg["From"] = formataddr((from_name or settings.COMPANY_NAME, sender))
    msg["Message-ID"] = make_msgid()
    msg.attach(MIMEText(html, "html", "utf-8"))

    for attachment in attachments or []:
        maintype, _, subtype = attachment.content_type.partition("/")
        part = MIMEBase(maintype or "application", subtype or "octet-stream")
        part.set_payload(attachment.content)
        encoders.encode_base64(part)
        part.add_header("Content-Disposition", "attachment", filename=("utf-8", "", attachment.filename))
        msg.attach(part)
    return msg


def _smtp_send(msg: MIMEMultipart) -> None:
    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.EMAIL_TIMEOUT) as server:
            if settings.SMTP_USE_TLS:
                server.starttls()
            server.login(settings.EMAIL_USER, settings.EMAIL_PASS)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise DeliveryError(f"SMTP delivery failed: {e}") from e


async def send_via_smtp(msg: MIMEMultipart) -> str:
    if not settings.EMAIL_USER or not settings.EMAIL_PASS:
        raise DeliveryError("EMAIL_USER / EMAIL_PASS not configured")
    await asyncio.to_thread(_smtp_send, msg)
    return msg["Message-ID"]


async def send_via_sendgrid(
    to_email: str,
    subject: str,
    html: str,
    attachments: Optional[List[EmailAttachment]] = None,
    from_email: Optional[str] = None,
    from_name: Optional[str] = None,
) -> Optional[str]:
    if not settings.SENDGRID_API_KEY:
        raise DeliveryError("SENDGRID_API_KEY not configured")

    headers = {
        "Authorization": f"Bearer {settings.SENDGRID_API_KEY}",
        "Content-Type": "application/json",
    }
    payload = {
        "personalizations": [{"to": [{"email": to_email}]}],
        "from": {
            "email": from_email or settings.EMAIL_USER,
            "name": from_name or settings.COMPANY_NAME,
        },
        "subject": subject,
        "content": [{"type": "text/html", "value": html}],
    }
    if attachments:
        payload["attachments"] = [
            {
                "content": base64.b64encode(a.content).decode("utf-8"),
                "filename": a.filename,
                "type": a.content_type,
                "disposition": "attachment",
            }
            for a in attachments
        ]

    try:
        async with httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT) as client:
            response = await client.post(SENDGRID_URL, headers=headers, json=payload)
    except httpx.HTTPError as e:
        raise DeliveryError(f"SendGrid request failed: {e}") from e

    if response.status_code not in (200, 201, 202):
        logger.error(f"SendGrid error {response.status_code}: {response.text}")
        raise DeliveryError(f"SendGrid API error: {response.status_code}")
    return response.headers.get("X-Message-Id")


def is_configured(transport: str) -> bool:
    if transport == "sendgrid":
        return bool(settings.SENDGRID_API_KEY)
    if transport == "smtp":
        return bool(settings.EMAIL_USER and settings.EMAIL_PASS)
    # unknown transports fall through and fail loudly in send_email
    return True


async def send_email(
    to_email: str,
    subject: str,
    html: str,
    attachments: Optional[List[EmailAttachment]] = None,
    from_email: Optional[str] = None,
    from_name: Optional[str] = None,
) -> DeliveryResult:
    """Deliver one email. Failures are reported in the result, not raised."""
    transport = settings.EMAIL_TRANSPORT
    if not to_email:
        logger.warning(f"No recipient for '{subject}', email not sent")
        return DeliveryResult(to="", sent=False, transport=transport, error="no recipient")

    if not is_configured(transport):
        logger.warning(f"Email transport '{transport}' not configured, skipping email to {to_email}")
        return DeliveryResult(to=to_email, sent=False, transport=transport, error="not configured")

    try:
        if transport == "sendgrid":
            message_id = await send_via_sendgrid(to_email, subject, html, attachments, from_email, from_name)
        elif transport == "smtp":
            msg = build_message(to_email, subject, html, attachments, from_email, from_name)
            message_id = await send_via_smtp(msg)
        else:
            raise DeliveryError(f"Unknown EMAIL_TRANSPORT '{transport}'")
    except DeliveryError as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return DeliveryResult(to=to_email, sent=False, transport=transport, error=str(e))

    logger.info(f"Email sent via {transport} to {to_email}, id={message_id}")
    return DeliveryResult(to=to_email, sent=True, transport=transport, message_id=message_id)
