"""
Initialize database tables and, optionally, demo candidates
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import Database
from app.core.exceptions import DuplicateError
from app.core.logging_config import configure_logging
from app.candidates import service
from app.candidates.schemas import validate_create
import structlog

logger = structlog.get_logger()

DEMO_CANDIDATES = [
    {
        "firstName": "Ana",
        "lastName": "García",
        "email": "ana.garcia@example.com",
        "phone": "+34 600 111 222",
        "address": "Calle Mayor 1, Madrid",
        "education": [
            {
                "institution": "Universidad Complutense de Madrid",
                "degree": "BSc",
                "fieldOfStudy": "Computer Science",
                "startDate": "2014-09-01",
                "endDate": "2018-06-30",
                "gpa": 3.6,
            }
        ],
        "experience": [
            {
                "company": "Acme Corp",
                "position": "Backend Engineer",
                "location": "Madrid",
                "startDate": "2019-01-15",
                "isCurrent": True,
                "salary": 48000,
                "currency": "EUR",
            },
            {
                "company": "Startup SL",
                "position": "Junior Developer",
                "startDate": "2018-07-01",
                "endDate": "2018-12-31",
            },
        ],
    },
    {
        "firstName": "Luis",
        "lastName": "Fernández",
        "email": "luis.fernandez@example.com",
        "notes": "Referred by the data team",
        "experience": [
            {"company": "DataWorks", "position": "Data Analyst", "startDate": "2020-03-01"}
        ],
    },
]


def create_demo_candidates(db: Session):
    """Create demo candidates, skipping the ones that already exist"""
    for payload in DEMO_CANDIDATES:
        try:
            candidate = service.create_candidate(db, validate_create(payload))
            logger.info("demo_candidate_created", candidate_id=candidate.id)
        except DuplicateError:
            logger.info("demo_candidate_exists", email=payload["email"])


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--demo", action="store_true", help="insert demo candidates")
    args = parser.parse_args()

    configure_logging()
    database = Database(settings.DATABASE_URL)
    database.connect()
    try:
        if args.demo:
            db = database.session()
            try:
                create_demo_candidates(db)
            finally:
                db.close()
        print("\n✅ Database initialized successfully!")
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
