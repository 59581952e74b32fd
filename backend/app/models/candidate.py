"""
Candidate models
"""
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.models.document import Document

CANDIDATE_STATUSES = ("active", "in_review", "hired", "rejected", "archived")


class Candidate(Base):
    """Candidate model"""

    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)

    # Personal information
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(20))
    address = Column(String(1000))

    # Status
    status = Column(String(20), nullable=False, default="active", server_default="active")
    notes = Column(Text)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    education = relationship(
        "Education",
        back_populates="candidate",
        order_by=lambda: [Education.start_date.desc().nullslast(), Education.id.desc()],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    experience = relationship(
        "Experience",
        back_populates="candidate",
        order_by=lambda: [Experience.start_date.desc().nullslast(), Experience.id.desc()],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    documents = relationship(
        "Document",
        back_populates="candidate",
        order_by=lambda: [Document.uploaded_at.desc(), Document.id.desc()],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Education(Base):
    """Education entry owned by a candidate"""

    __tablename__ = "candidate_education"

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(
        Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    institution = Column(String(255), nullable=False)
    degree = Column(String(255))
    field_of_study = Column(String(255))
    start_date = Column(Date)
    end_date = Column(Date)
    is_current = Column(Boolean, nullable=False, default=False)
    gpa = Column(Numeric(3, 2))  # 0.00 - 4.00
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    candidate = relationship("Candidate", back_populates="education")


class Experience(Base):
    """Work experience entry owned by a candidate"""

    __tablename__ = "candidate_experience"

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(
        Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    company = Column(String(255), nullable=False)
    position = Column(String(255), nullable=False)
    department = Column(String(255))
    location = Column(String(255))
    description = Column(Text)
    start_date = Column(Date)
    end_date = Column(Date)
    is_current = Column(Boolean, nullable=False, default=False)
    salary = Column(Numeric(12, 2))
    currency = Column(String(3))  # ISO 4217
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    candidate = relationship("Candidate", back_populates="experience")
