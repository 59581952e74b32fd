"""
Candidate Pydantic schemas

Inbound payloads are validated here before they reach the service layer. The
``validate_*`` functions are the public entry points: they either return a
validated model or raise the application's ``ValidationError`` with one
``{field, message}`` pair per offending field.
"""
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BeforeValidator, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.core.schemas import CamelModel, error_details
from app.documents.schemas import DocumentResponse

CandidateStatus = Literal["active", "in_review", "hired", "rejected", "archived"]
SortBy = Literal["createdAt", "lastName", "email"]
SortOrder = Literal["asc", "desc"]

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


def _coerce_date(value: Any) -> Any:
    if value == "":
        return None
    if isinstance(value, str) and "T" in value:
        # ISO datetime from a browser date picker; keep the calendar date
        return value.split("T", 1)[0]
    return value


def _decimal_to_float(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


DateInput = Annotated[Optional[date], BeforeValidator(_coerce_date)]
Money = Annotated[Optional[float], BeforeValidator(_decimal_to_float)]


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


class EducationCreate(CamelModel):
    """Education entry submitted together with a new candidate"""
    institution: str = Field(..., min_length=1, max_length=255)
    degree: Optional[str] = Field(None, max_length=255)
    field_of_study: Optional[str] = Field(None, max_length=255)
    start_date: DateInput = None
    end_date: DateInput = None
    is_current: bool = False
    gpa: Optional[float] = Field(None, ge=0, le=4)
    description: Optional[str] = None


class ExperienceCreate(CamelModel):
    """Experience entry submitted together with a new candidate"""
    company: str = Field(..., min_length=1, max_length=255)
    position: str = Field(..., min_length=1, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    start_date: DateInput = None
    end_date: DateInput = None
    is_current: bool = False
    salary: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class CandidateCreate(CamelModel):
    """Candidate creation schema"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=1000)
    notes: Optional[str] = Field(None, max_length=2000)
    education: List[EducationCreate] = Field(default_factory=list)
    experience: List[ExperienceCreate] = Field(default_factory=list)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, value):
        return _strip(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        if len(value) > 255:
            raise ValueError("Email must be at most 255 characters")
        return value.lower()


class CandidateUpdate(CamelModel):
    """Partial update; only the keys present in the payload are applied"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=1000)
    notes: Optional[str] = Field(None, max_length=2000)
    status: Optional[CandidateStatus] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, value):
        return _strip(value)

    @field_validator("first_name", "last_name", "status")
    @classmethod
    def reject_null(cls, value):
        # Only reached for an explicit null; omitted keys keep the default
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Field cannot be null")
        if len(value) > 255:
            raise ValueError("Email must be at most 255 characters")
        return value.lower()

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(value: Any) -> Optional[int]:
    """Leading-integer parse of a query string value (``"2abc"`` -> 2)"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


class CandidateFilters(CamelModel):
    """Normalized list query"""
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: Optional[str] = None
    status: Optional[CandidateStatus] = None
    sort_by: SortBy = "createdAt"
    sort_order: SortOrder = "desc"

    @field_validator("page", mode="before")
    @classmethod
    def parse_page(cls, value):
        page = _parse_int(value)
        return page if page is not None and page >= 1 else 1

    @field_validator("limit", mode="before")
    @classmethod
    def parse_limit(cls, value):
        limit = _parse_int(value)
        if limit is None:
            return DEFAULT_PAGE_SIZE
        return min(max(limit, 1), MAX_PAGE_SIZE)

    @field_validator("search", "status", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return _strip(value) or None

    @field_validator("sort_by", mode="before")
    @classmethod
    def default_sort_by(cls, value):
        return _strip(value) or "createdAt"

    @field_validator("sort_order", mode="before")
    @classmethod
    def default_sort_order(cls, value):
        return _strip(value) or "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


class EducationResponse(CamelModel):
    id: int
    institution: str
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: bool = False
    gpa: Money = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class ExperienceResponse(CamelModel):
    id: int
    company: str
    position: str
    department: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: bool = False
    salary: Money = None
    currency: Optional[str] = None
    created_at: Optional[datetime] = None


class CandidateResponse(CamelModel):
    """Candidate with its education, experience and documents"""
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    education: List[EducationResponse] = Field(default_factory=list)
    experience: List[ExperienceResponse] = Field(default_factory=list)
    documents: List[DocumentResponse] = Field(default_factory=list)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CandidatePage(CamelModel):
    items: List[CandidateResponse]
    pagination: Pagination


# ---------------------------------------------------------------------------
# Validation entry points
# ---------------------------------------------------------------------------


def _validate(model, payload: Any):
    if not isinstance(payload, dict):
        raise ValidationError(
            details=[{"field": "body", "message": "Request body must be a JSON object"}]
        )
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(details=error_details(e.errors())) from e


def validate_create(payload: Any) -> CandidateCreate:
    return _validate(CandidateCreate, payload)


def validate_update(payload: Any) -> CandidateUpdate:
    return _validate(CandidateUpdate, payload)


def validate_filters(raw_query: Dict[str, Any]) -> CandidateFilters:
    """Normalize list query parameters (all values arrive as strings)"""
    return _validate(CandidateFilters, dict(raw_query or {}))
