from typing import List

from fastapi import APIRouter, File, UploadFile

from app.core.common_deps import CurrentUserDep, OCRServiceDep, StaffUserDep
from app.core.config import settings
from app.core.exceptions import PayloadTooLargeError, ValidationError
from app.schemas.ocr import (
    MultiOCRResult,
    OCRResult,
    OCRStatus,
    SaveReservationsRequest,
    SaveReservationsResponse,
)
from app.services.ocr_service import (
    MAX_FILES_PER_REQUEST,
    SUPPORTED_CONTENT_TYPES,
    UploadedDocument,
    is_supported_content_type,
)

router = APIRouter()


async def read_upload(file: UploadFile) -> UploadedDocument:
    """Check the type and size of an upload and read it into memory."""
    if not is_supported_content_type(file.content_type):
        raise ValidationError(
            f"Unsupported file type {file.content_type!r} for {file.filename}. "
            f"Supported: {', '.join(SUPPORTED_CONTENT_TYPES)}",
            "file",
            file.content_type,
        )

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise PayloadTooLargeError(
            file.filename or "upload", settings.MAX_UPLOAD_SIZE_MB
        )
    return UploadedDocument(
        filename=file.filename or "upload",
        content=content,
        content_type=file.content_type,
    )


@router.post("/process", response_model=OCRResult)
async def process_document(
    service: OCRServiceDep,
    current_user: StaffUserDep,
    file: UploadFile = File(...),
):
    """Extract reservations from one PDF or image."""
    document = await read_upload(file)
    return await service.process_file(document)


@router.post("/process-multiple", response_model=MultiOCRResult)
async def process_multiple_documents(
    service: OCRServiceDep,
    current_user: StaffUserDep,
    files: List[UploadFile] = File(...),
):
    if len(files) > MAX_FILES_PER_REQUEST:
        raise ValidationError(
            f"At most {MAX_FILES_PER_REQUEST} files per request",
            "files",
            str(len(files)),
        )
    documents = [await read_upload(file) for file in files]
    return await service.process_multiple_files(documents)


@router.post("/save-reservations", response_model=SaveReservationsResponse)
async def save_reservations(
    request: SaveReservationsRequest,
    service: OCRServiceDep,
    current_user: StaffUserDep,
):
    """Create the reviewed reservations; failures are reported per record."""
    if not request.reservations:
        raise ValidationError("No reservations to save", "reservations")
    return await service.save_reservations(request.reservations)


@router.get("/status", response_model=OCRStatus)
async def get_ocr_status(service: OCRServiceDep, current_user: CurrentUserDep):
    return service.status()
