"""
Database models
"""
from app.models.candidate import Candidate, Education, Experience, CANDIDATE_STATUSES
from app.models.document import Document

__all__ = [
    "Candidate",
    "Education",
    "Experience",
    "Document",
    "CANDIDATE_STATUSES",
]
