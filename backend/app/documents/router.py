"""
Candidate document routes
"""
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
import structlog

from app.core.config import MAX_FILE_SIZE
from app.core.database import get_db
from app.core.exceptions import FileUploadError
from app.core.responses import envelope
from app.documents import service
from app.documents.schemas import DocumentResponse, is_allowed_mime_type, validate_upload
from app.documents.storage import LocalFileStorage, get_storage

router = APIRouter(prefix="/api/candidates", tags=["Documents"])
logger = structlog.get_logger()


@router.post("/{candidate_id}/documents", status_code=status.HTTP_201_CREATED)
def upload_document(
    candidate_id: int,
    file: Optional[UploadFile] = File(None),
    document_type: Optional[str] = Form(None, alias="documentType"),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    """Upload a PDF or DOCX document for a candidate"""
    if file is None or not file.filename:
        raise FileUploadError("No file was provided")

    # Upload filter: reject before anything is written
    if not is_allowed_mime_type(file.content_type):
        raise FileUploadError("File type not allowed. Only PDF and DOCX files are accepted.")

    content = file.file.read(MAX_FILE_SIZE + 1)
    if len(content) > MAX_FILE_SIZE:
        raise FileUploadError("File too large. Maximum size is 5MB.")

    file_name = storage.build_filename(candidate_id, file.filename)
    file_path = storage.save(file_name, content)

    try:
        meta = validate_upload(
            {
                "file_name": file_name,
                "original_name": file.filename,
                "file_path": file_path,
                "file_type": Path(file.filename).suffix.lower().lstrip("."),
                "file_size": len(content),
                "mime_type": file.content_type,
            }
        )
        document = service.upload_document(db, candidate_id, meta, document_type or "cv")
    except Exception:
        storage.delete(file_path)
        raise

    return envelope(
        data=DocumentResponse.model_validate(document),
        message="Document uploaded successfully",
    )


@router.get("/{candidate_id}/documents")
def list_documents(
    candidate_id: int,
    db: Session = Depends(get_db),
):
    """List a candidate's documents, newest first"""
    documents = service.list_documents(db, candidate_id)
    return envelope(data=[DocumentResponse.model_validate(d) for d in documents])


@router.delete("/{candidate_id}/documents/{document_id}")
def delete_document(
    candidate_id: int,
    document_id: int,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    """Delete a candidate's document and its stored file"""
    result = service.delete_document(db, candidate_id, document_id)
    storage.delete(result["file_path"])
    return envelope(message=result["message"])
