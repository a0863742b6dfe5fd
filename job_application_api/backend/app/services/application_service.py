"""
Submission orchestration: fonts -> PDF -> attachments -> emails.

Intake has already accepted the application when this runs. Font problems
surface as ResourceAcquisitionError before any rendering starts; delivery
problems never fail the submission, they are only logged.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.config import settings
from app.pdf.assembler import render_application_pdf
from app.schemas.application import Application
from app.services.email_sender import DeliveryResult, EmailAttachment, send_email
from app.services.email_templates import (
    APPLICANT_SUBJECT,
    admin_notification_html,
    admin_subject,
    applicant_confirmation_html,
)
from app.services.fonts import load_font_set
from app.services.resource_cache import ResourceCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class SubmissionOutcome:
    application_id: str
    document_size: int
    applicant_delivery: DeliveryResult
    admin_delivery: DeliveryResult


def build_attachments(
    application: Application,
    document: bytes,
    photo: UploadedFile,
    resume: Optional[UploadedFile] = None,
):
    name = application.personal_info.full_name_local
    attachments = [
        EmailAttachment(f"Job_Application_{name}_{application.id}.pdf", document, "application/pdf"),
        EmailAttachment(f"Photo_{name}_{photo.filename}", photo.content, photo.content_type),
    ]
    if resume is not None:
        attachments.append(EmailAttachment(resume.filename, resume.content, resume.content_type))
    return attachments


async def process_application(
    application: Application,
    photo: UploadedFile,
    resume: Optional[UploadedFile],
    cache: ResourceCache,
) -> SubmissionOutcome:
    fonts = await load_font_set(cache)

    # PyMuPDF is synchronous; keep it off the event loop
    document = await asyncio.to_thread(render_application_pdf, application, photo.content, fonts)
    logger.info(f"PDF generated for {application.id} ({len(document)} bytes)")

    attachments = build_attachments(application, document, photo, resume)

    applicant_delivery = await send_email(
        application.personal_info.email,
        APPLICANT_SUBJECT,
        applicant_confirmation_html(application),
    )
    admin_delivery = await send_email(
        settings.ADMIN_EMAIL,
        admin_subject(application),
        admin_notification_html(application),
        attachments,
    )

    for label, result in (("applicant", applicant_delivery), ("admin", admin_delivery)):
        if result.sent:
            logger.info(f"{application.id}: {label} email delivered to {result.to}")
        else:
            logger.warning(f"{application.id}: {label} email not delivered ({result.error})")

    return SubmissionOutcome(
        application_id=application.id,
        document_size=len(document),
        applicant_delivery=applicant_delivery,
        admin_delivery=admin_delivery,
    )
