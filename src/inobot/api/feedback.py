"""Feedback form endpoint."""

from fastapi import APIRouter, File, Form, Request, UploadFile

from inobot.core.feedback import (
    SUCCESS_MESSAGE,
    ClientContext,
    FeedbackImage,
    validate_submission,
)
from inobot.infra.real_ip import UNKNOWN_IP

from .deps import AppConfigDep, FeedbackServiceDep, RealIPDep
from .models import ErrorResponse, FeedbackResponse

router = APIRouter(prefix="/api/v1", tags=["feedback"])


async def _read_image(image: UploadFile | None) -> FeedbackImage | None:
    if image is None or not image.filename:
        return None
    data = await image.read()
    if not data:
        return None
    return FeedbackImage(
        filename=image.filename,
        content_type=image.content_type or "",
        data=data,
    )


def client_context(request: Request, real_ip: str) -> ClientContext:
    """Collect what the proxy headers say about the sender."""
    headers = request.headers
    return ClientContext(
        user_agent=headers.get("user-agent") or "Unknown",
        remote_ip=None if real_ip == UNKNOWN_IP else real_ip,
        country=headers.get("cf-ipcountry"),
        colo=headers.get("cf-colo"),
        ray=headers.get("cf-ray"),
    )


@router.post(
    "/feedback",
    response_model=FeedbackResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def feedback(
    request: Request,
    service: FeedbackServiceDep,
    config: AppConfigDep,
    real_ip: RealIPDep,
    type: str | None = Form(None),
    subject: str | None = Form(None),
    description: str | None = Form(None),
    contact_email: str | None = Form(None, alias="contactEmail"),
    image: UploadFile | None = File(None),
    captcha_token: str | None = Form(None, alias="cf-turnstile-response"),
) -> FeedbackResponse:
    """Validate a bug report or suggestion and forward it to Discord."""
    submission = validate_submission(
        type,
        subject,
        description,
        contact_email,
        await _read_image(image),
        config.feedback,
    )
    await service.submit(submission, client_context(request, real_ip), captcha_token)
    return FeedbackResponse(message=SUCCESS_MESSAGE)
