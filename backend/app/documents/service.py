"""
Document service layer

Only metadata rows are handled here. Bytes are written and removed by the blob
store, driven by the transport layer.
"""
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from app.core.exceptions import AppError, DatabaseError, NotFoundError
from app.documents.schemas import DocumentUpload
from app.models.candidate import Candidate
from app.models.document import Document

logger = structlog.get_logger()


def _ensure_candidate(db: Session, candidate_id: int) -> None:
    if db.query(Candidate.id).filter(Candidate.id == candidate_id).first() is None:
        raise NotFoundError("Candidate", candidate_id)


def upload_document(
    db: Session,
    candidate_id: int,
    file_meta: DocumentUpload,
    document_type: str = "cv",
) -> Document:
    """Record an already stored file against an existing candidate"""
    try:
        _ensure_candidate(db, candidate_id)

        document = Document(
            candidate_id=candidate_id,
            file_name=file_meta.file_name,
            original_name=file_meta.original_name,
            file_path=file_meta.file_path,
            file_type=file_meta.file_type,
            file_size=file_meta.file_size,
            mime_type=file_meta.mime_type,
            document_type=document_type or "cv",
        )
        db.add(document)
        db.commit()
        db.refresh(document)

        logger.info(
            "document_uploaded",
            candidate_id=candidate_id,
            document_id=document.id,
            document_type=document.document_type,
        )
        return document
    except AppError:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("document_upload_failed", candidate_id=candidate_id, error=str(e))
        raise DatabaseError("Error uploading document") from e


def list_documents(db: Session, candidate_id: int) -> List[Document]:
    """All documents of a candidate, newest first"""
    try:
        _ensure_candidate(db, candidate_id)
        return (
            db.query(Document)
            .filter(Document.candidate_id == candidate_id)
            .order_by(Document.uploaded_at.desc(), Document.id.desc())
            .all()
        )
    except AppError:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("document_list_failed", candidate_id=candidate_id, error=str(e))
        raise DatabaseError("Error fetching documents") from e


def delete_document(db: Session, candidate_id: int, document_id: int) -> dict:
    """
    Delete a document row scoped to its candidate.

    A document id that belongs to another candidate is reported as not found.
    The stored path is returned so the caller can remove the file.
    """
    try:
        document = (
            db.query(Document)
            .filter(Document.id == document_id, Document.candidate_id == candidate_id)
            .first()
        )
        if not document:
            raise NotFoundError("Document", document_id)

        file_path = document.file_path
        db.delete(document)
        db.commit()

        logger.info("document_deleted", candidate_id=candidate_id, document_id=document_id)
        return {"message": "Document deleted successfully", "file_path": file_path}
    except AppError:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "document_delete_failed",
            candidate_id=candidate_id,
            document_id=document_id,
            error=str(e),
        )
        raise DatabaseError("Error deleting document") from e
