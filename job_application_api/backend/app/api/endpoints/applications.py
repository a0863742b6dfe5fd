"""
Job application endpoint: multipart form in, PDF + emails out.
"""

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from app.core.errors import ResourceAcquisitionError
from app.schemas.application import ApplicationAccepted, ApplicationRejected
from app.services.application_service import UploadedFile, process_application
from app.services.intake import parse_application
from app.services.resource_cache import ResourceCache

router = APIRouter()
logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "ส่งใบสมัครงานสำเร็จ! เราจะติดต่อกลับภายใน 7 วันทำการ"
FAILURE_MESSAGE = "เกิดข้อผิดพลาด กรุณาลองใหม่อีกครั้ง"


def get_resource_cache(request: Request) -> ResourceCache:
    return request.app.state.resource_cache


async def read_upload(upload: Optional[UploadFile]) -> Optional[UploadedFile]:
    """An upload with no filename or no bytes counts as not attached."""
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    if not content:
        return None
    return UploadedFile(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type or "application/octet-stream",
    )


def _failure(status_code: int, message: str, error: str, fields=None) -> JSONResponse:
    body = ApplicationRejected(message=message, error=error, fields=fields)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "/job-application",
    response_model=ApplicationAccepted,
    responses={400: {"model": ApplicationRejected}, 500: {"model": ApplicationRejected}},
)
async def submit_job_application(
    request: Request,
    photo: Optional[UploadFile] = File(None),
    resume: Optional[UploadFile] = File(None),
    cache: ResourceCache = Depends(get_resource_cache),
):
    logger.info("Received job application")

    form = await request.form()
    fields = {key: value for key, value in form.items() if isinstance(value, str)}

    photo_file = await read_upload(photo)
    resume_file = await read_upload(resume)

    result = parse_application(fields, has_photo=photo_file is not None)
    if not result.ok:
        error = result.error
        return _failure(400, error.message, error.kind.value, error.fields or None)

    application = result.application
    try:
        outcome = await process_application(application, photo_file, resume_file, cache)
    except ResourceAcquisitionError as e:
        logger.error(f"Application {application.id} failed: {e}")
        return _failure(500, FAILURE_MESSAGE, "resource_unavailable")
    except Exception as e:
        logger.exception(f"Error processing job application {application.id}: {e}")
        return _failure(500, FAILURE_MESSAGE, "internal_error")

    logger.info(f"Application {outcome.application_id} processed ({outcome.document_size} byte PDF)")
    return ApplicationAccepted(message=SUCCESS_MESSAGE, application_id=application.id)
