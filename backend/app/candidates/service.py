"""
Candidate service layer

Stateless functions over an explicit SQLAlchemy session. Known failures are
raised as the typed errors from ``app.core.exceptions``; unexpected persistence
failures are logged and wrapped in ``DatabaseError``.
"""
import math
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
import structlog

from app.core.exceptions import AppError, DatabaseError, DuplicateError, NotFoundError
from app.models.candidate import Candidate, Education, Experience
from app.models.document import Document
from app.documents.schemas import DocumentResponse
from app.candidates.schemas import (
    CandidateCreate,
    CandidateFilters,
    CandidatePage,
    CandidateResponse,
    CandidateUpdate,
    EducationResponse,
    ExperienceResponse,
    Pagination,
)

logger = structlog.get_logger()

SORT_COLUMNS = {
    "createdAt": Candidate.created_at,
    "lastName": Candidate.last_name,
    "email": Candidate.email,
}


def start_date_order(model) -> list:
    """Most recent first; undated entries last, newest row first on ties"""
    return [model.start_date.desc().nullslast(), model.id.desc()]


def _to_decimal(value: Optional[float]) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_email_violation(error: IntegrityError) -> bool:
    return "email" in str(error.orig).lower()


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Candidate.id).filter(Candidate.email == email)
    if exclude_id is not None:
        query = query.filter(Candidate.id != exclude_id)
    return query.first() is not None


def _load_candidate(db: Session, candidate_id: int) -> Candidate:
    candidate = (
        db.query(Candidate)
        .options(
            selectinload(Candidate.education),
            selectinload(Candidate.experience),
            selectinload(Candidate.documents),
        )
        .filter(Candidate.id == candidate_id)
        .populate_existing()
        .first()
    )
    if not candidate:
        raise NotFoundError("Candidate", candidate_id)
    return candidate


def _fail(db: Session, event: str, message: str, error: Exception, **context):
    db.rollback()
    logger.error(event, error=str(error), **context)
    raise DatabaseError(message) from error


def create_candidate(db: Session, data: CandidateCreate) -> Candidate:
    """Create a candidate together with its education and experience"""
    try:
        if _email_taken(db, data.email):
            raise DuplicateError("email")

        candidate = Candidate(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            address=data.address,
            notes=data.notes,
        )
        candidate.education = [
            Education(
                institution=edu.institution,
                degree=edu.degree,
                field_of_study=edu.field_of_study,
                start_date=edu.start_date,
                end_date=edu.end_date,
                is_current=edu.is_current,
                gpa=_to_decimal(edu.gpa),
                description=edu.description,
            )
            for edu in data.education
        ]
        candidate.experience = [
            Experience(
                company=exp.company,
                position=exp.position,
                department=exp.department,
                location=exp.location,
                description=exp.description,
                start_date=exp.start_date,
                end_date=exp.end_date,
                is_current=exp.is_current,
                salary=_to_decimal(exp.salary),
                currency=exp.currency,
            )
            for exp in data.experience
        ]

        db.add(candidate)
        db.commit()

        logger.info(
            "candidate_created",
            candidate_id=candidate.id,
            education=len(data.education),
            experience=len(data.experience),
        )
        return _load_candidate(db, candidate.id)
    except AppError:
        raise
    except IntegrityError as e:
        db.rollback()
        if _is_email_violation(e):
            # Lost the race against a concurrent insert of the same email
            logger.info("candidate_duplicate_email")
            raise DuplicateError("email") from e
        _fail(db, "candidate_create_failed", "Error creating candidate", e)
    except SQLAlchemyError as e:
        _fail(db, "candidate_create_failed", "Error creating candidate", e)


def _latest_per_candidate(db: Session, model, candidate_ids: List[int], *criteria) -> Dict[int, object]:
    """First row per candidate under the start-date ordering (or upload time for documents)"""
    if not candidate_ids:
        return {}

    order = (
        [model.uploaded_at.desc(), model.id.desc()]
        if model is Document
        else start_date_order(model)
    )
    ranked = (
        db.query(
            model.id.label("id"),
            func.row_number()
            .over(partition_by=model.candidate_id, order_by=order)
            .label("rank"),
        )
        .filter(model.candidate_id.in_(candidate_ids), *criteria)
        .subquery()
    )
    rows = (
        db.query(model)
        .join(ranked, model.id == ranked.c.id)
        .filter(ranked.c.rank == 1)
        .all()
    )
    return {row.candidate_id: row for row in rows}


def _list_item(candidate: Candidate, education, experience, document) -> CandidateResponse:
    columns = {column.key: getattr(candidate, column.key) for column in Candidate.__table__.columns}
    return CandidateResponse(
        **columns,
        education=[EducationResponse.model_validate(education)] if education else [],
        experience=[ExperienceResponse.model_validate(experience)] if experience else [],
        documents=[DocumentResponse.model_validate(document)] if document else [],
    )


def list_candidates(db: Session, filters: CandidateFilters) -> CandidatePage:
    """
    Filtered, sorted and paginated candidates.

    Each item carries only its most recent education and experience entry and
    at most one ``cv`` document. The count ignores pagination and runs in the
    same transaction as the page query.
    """
    try:
        query = db.query(Candidate)
        if filters.search:
            term = f"%{_escape_like(filters.search)}%"
            query = query.filter(
                or_(
                    Candidate.first_name.ilike(term, escape="\\"),
                    Candidate.last_name.ilike(term, escape="\\"),
                    Candidate.email.ilike(term, escape="\\"),
                )
            )
        if filters.status:
            query = query.filter(Candidate.status == filters.status)

        total = query.count()

        column = SORT_COLUMNS[filters.sort_by]
        if filters.sort_order == "asc":
            ordering = [column.asc(), Candidate.id.asc()]
        else:
            ordering = [column.desc(), Candidate.id.desc()]

        candidates = (
            query.order_by(*ordering)
            .offset(filters.offset)
            .limit(filters.limit)
            .all()
        )

        ids = [c.id for c in candidates]
        education = _latest_per_candidate(db, Education, ids)
        experience = _latest_per_candidate(db, Experience, ids)
        cvs = _latest_per_candidate(db, Document, ids, Document.document_type == "cv")

        items = [
            _list_item(c, education.get(c.id), experience.get(c.id), cvs.get(c.id))
            for c in candidates
        ]
    except SQLAlchemyError as e:
        _fail(db, "candidate_list_failed", "Error fetching candidates", e)

    return CandidatePage(
        items=items,
        pagination=Pagination(
            page=filters.page,
            limit=filters.limit,
            total=total,
            total_pages=math.ceil(total / filters.limit),
        ),
    )


def get_candidate(db: Session, candidate_id: int) -> Candidate:
    """Candidate with all education, experience and documents"""
    try:
        return _load_candidate(db, candidate_id)
    except AppError:
        raise
    except SQLAlchemyError as e:
        _fail(db, "candidate_get_failed", "Error fetching candidate", e, candidate_id=candidate_id)


def update_candidate(db: Session, candidate_id: int, patch: CandidateUpdate) -> Candidate:
    """Apply the fields present in ``patch``"""
    try:
        candidate = _load_candidate(db, candidate_id)
        changes = patch.changes()

        email = changes.get("email")
        if email is not None and email != candidate.email:
            if _email_taken(db, email, exclude_id=candidate_id):
                raise DuplicateError("email")

        for field, value in changes.items():
            setattr(candidate, field, value)

        db.commit()
        logger.info("candidate_updated", candidate_id=candidate_id, fields=sorted(changes))
        return _load_candidate(db, candidate_id)
    except AppError:
        raise
    except IntegrityError as e:
        db.rollback()
        if _is_email_violation(e):
            raise DuplicateError("email") from e
        _fail(db, "candidate_update_failed", "Error updating candidate", e, candidate_id=candidate_id)
    except SQLAlchemyError as e:
        _fail(db, "candidate_update_failed", "Error updating candidate", e, candidate_id=candidate_id)


def delete_candidate(db: Session, candidate_id: int) -> dict:
    """
    Delete a candidate; education, experience and document rows go with it.

    Returns the stored paths of the removed documents so the caller can clear
    the blob store.
    """
    try:
        candidate = _load_candidate(db, candidate_id)
        file_paths = [document.file_path for document in candidate.documents]

        db.delete(candidate)
        db.commit()

        logger.info("candidate_deleted", candidate_id=candidate_id, documents=len(file_paths))
        return {"message": "Candidate deleted successfully", "file_paths": file_paths}
    except AppError:
        raise
    except SQLAlchemyError as e:
        _fail(db, "candidate_delete_failed", "Error deleting candidate", e, candidate_id=candidate_id)
