"""
Document Pydantic schemas and upload validation
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from app.core.config import ALLOWED_MIME_TYPES, MAX_FILE_SIZE
from app.core.exceptions import FileUploadError
from app.core.schemas import CamelModel, error_details


class DocumentUpload(CamelModel):
    """Metadata of a file already written to the blob store"""
    file_name: str = Field(..., min_length=1, max_length=255)
    original_name: str = Field(..., min_length=1, max_length=255)
    file_path: str = Field(..., min_length=1, max_length=500)
    file_type: str = Field(..., max_length=10)
    file_size: int = Field(..., ge=0)
    mime_type: str = Field(..., min_length=1, max_length=100)


class DocumentResponse(CamelModel):
    """Document response schema"""
    id: int
    candidate_id: int
    file_name: str
    original_name: str
    file_path: str
    file_type: str
    file_size: int
    mime_type: str
    document_type: str
    uploaded_at: Optional[datetime] = None


def is_allowed_mime_type(mime_type: Optional[str]) -> bool:
    return mime_type in ALLOWED_MIME_TYPES


def validate_upload(file_meta: Any) -> DocumentUpload:
    """
    Check uploaded file metadata.

    Runs after the transport filter has already screened type and size, so a
    failure here means the two layers disagree; both report FileUploadError.
    """
    if isinstance(file_meta, DocumentUpload):
        meta = file_meta
    else:
        try:
            meta = DocumentUpload.model_validate(file_meta)
        except PydanticValidationError as e:
            raise FileUploadError(
                "Invalid file metadata", details=error_details(e.errors())
            ) from e

    if not is_allowed_mime_type(meta.mime_type):
        raise FileUploadError("File type not allowed. Only PDF and DOCX files are accepted.")
    if meta.file_size > MAX_FILE_SIZE:
        raise FileUploadError("File too large. Maximum size is 5MB.")
    return meta
