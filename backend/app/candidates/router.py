"""
Candidate routes
"""
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.orm import Session
import structlog

from app.core.database import get_db
from app.core.responses import envelope
from app.documents.storage import LocalFileStorage, get_storage
from app.candidates import service
from app.candidates.schemas import (
    CandidateResponse,
    validate_create,
    validate_filters,
    validate_update,
)

router = APIRouter(prefix="/api/candidates", tags=["Candidates"])
logger = structlog.get_logger()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_candidate(
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    """Create a new candidate with optional education and experience"""
    data = validate_create(payload)
    candidate = service.create_candidate(db, data)
    return envelope(
        data=CandidateResponse.model_validate(candidate),
        message="Candidate created successfully",
    )


@router.get("")
def list_candidates(
    request: Request,
    db: Session = Depends(get_db),
):
    """List candidates (page, limit, search, status, sortBy, sortOrder)"""
    filters = validate_filters(request.query_params)
    result = service.list_candidates(db, filters)
    return envelope(data=result.items, pagination=result.pagination)


@router.get("/{candidate_id}")
def get_candidate(
    candidate_id: int,
    db: Session = Depends(get_db),
):
    """Get candidate details"""
    candidate = service.get_candidate(db, candidate_id)
    return envelope(data=CandidateResponse.model_validate(candidate))


@router.put("/{candidate_id}")
def update_candidate(
    candidate_id: int,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    """Update candidate"""
    patch = validate_update({} if payload is None else payload)
    candidate = service.update_candidate(db, candidate_id, patch)
    return envelope(
        data=CandidateResponse.model_validate(candidate),
        message="Candidate updated successfully",
    )


@router.delete("/{candidate_id}")
def delete_candidate(
    candidate_id: int,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    """Delete candidate together with its records and stored files"""
    result = service.delete_candidate(db, candidate_id)
    for path in result["file_paths"]:
        storage.delete(path)
    return envelope(message=result["message"])
