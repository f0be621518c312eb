"""Document upload endpoint."""

from fastapi import APIRouter, File, Form, UploadFile

from inobot.core.errors import InputValidationError

from .deps import UploadServiceDep
from .models import ErrorResponse, UploadResponse

router = APIRouter(prefix="/api/v1", tags=["upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload(
    service: UploadServiceDep,
    file: UploadFile | None = File(None),
    metadata: str | None = Form(None),
) -> UploadResponse:
    """Store a document in blob storage and vectorize its text.

    ``metadata`` is an optional JSON object merged into every chunk's
    metadata; invalid JSON is ignored.
    """
    if file is None or not file.filename:
        raise InputValidationError("Missing file")

    data = await file.read()
    result = await service.upload(file.filename, file.content_type, data, metadata)
    return UploadResponse.from_result(result)
