from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.database import SessionLocal
from app.services.student.store import StudentStore
from app.services.student.student import StudentRepository


def get_db() -> Generator:
    """
    Database session for one request.
    Always closed after the request finishes, even on errors.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_student_repository(db: Session = Depends(get_db)) -> StudentRepository:
    return StudentRepository(StudentStore(db))
