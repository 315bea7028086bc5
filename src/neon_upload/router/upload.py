"""Router – media upload (mock storage)."""

import logging

from fastapi import APIRouter, File, UploadFile

from src.neon_upload.config import UPLOAD_ENDPOINT
from src.neon_upload.exceptions import UploadError, UploadInternalError, UploadValidationError
from src.neon_upload.schemas.upload import CapabilitiesResponse, ErrorResponse, UploadResponse
from src.neon_upload.services.upload_service import capabilities, mock_upload, validate_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


@router.post(
    UPLOAD_ENDPOINT,
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_media(file: UploadFile | None = File(None)) -> UploadResponse:
    """
    Upload a single image, video or audio file.

    Parameters
    ----------
    file : UploadFile – media file sent as the ``file`` multipart field.

    Returns
    -------
    UploadResponse with:
        - url            : mock public URL of the stored file
        - serverFilename : generated ``<timestamp>_<random>.<ext>`` name
        - previewUrl     : base64 data URL for files under the preview threshold
        - size / contentType / fileType / uploadedAt
    """
    if file is None:
        raise UploadValidationError("No file provided")

    # ── reject by declared type/size before reading the body ──
    if file.size is not None:
        validate_upload(file.filename, file.content_type, file.size)

    try:
        content = await file.read()
        return await mock_upload(file.filename or "", file.content_type or "", content)
    except UploadError:
        raise
    except Exception as exc:
        logger.exception("Upload of %s failed", file.filename)
        raise UploadInternalError(exc) from exc
    finally:
        await file.close()


@router.get(UPLOAD_ENDPOINT, response_model=CapabilitiesResponse)
def describe_upload() -> CapabilitiesResponse:
    """Supported MIME types and size limits of the upload endpoint."""
    return capabilities()
