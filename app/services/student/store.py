import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.core.exceptions import DuplicateKeyError, NotFoundError, StorageError
from app.models.student import STUDENT_FIELDS, Student, utcnow

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _contains_pattern(value: str) -> str:
    """LIKE pattern matching ``value`` anywhere, with its wildcards taken literally."""
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _is_email_collision(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "email" in message and ("unique" in message or "duplicate" in message)


def _next_timestamp(previous: Optional[datetime]) -> datetime:
    # updated_at must move forward even when the clock has not ticked
    now = utcnow()
    if previous is not None and now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


class StudentStore:
    """
    Persistence for student rows on top of a SQLAlchemy session.

    Every read filters out soft-deleted rows (``deleted_at IS NULL``), so a
    deleted record behaves exactly like a missing one.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str, email: Optional[str] = None) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            if _is_email_collision(e):
                raise DuplicateKeyError("email", email) from e
            logger.error(f"Integrity error while trying to {action} student: {e}")
            raise StorageError(f"Failed to {action} student") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error while trying to {action} student: {e}")
            raise StorageError(f"Failed to {action} student") from e

    def _live(self) -> Query:
        return self.db.query(Student).filter(Student.deleted_at.is_(None))

    @staticmethod
    def _page(query: Query, skip: int, limit: Optional[int]) -> Query:
        query = query.order_by(Student.id.asc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query

    def insert(self, fields: Mapping[str, Any]) -> Student:
        now = utcnow()
        values: Dict[str, Any] = {key: fields[key] for key in STUDENT_FIELDS if key in fields}
        student = Student(**values, created_at=now, updated_at=now)
        with self._guard("create", values.get("email")):
            self.db.add(student)
            self.db.commit()
            self.db.refresh(student)
        return student

    def find_by_id(self, student_id: int) -> Student:
        with self._guard("fetch"):
            student = self._live().filter(Student.id == student_id).first()
        if student is None:
            raise NotFoundError("Student not found")
        return student

    def find_by_email(self, email: str, exclude_id: Optional[int] = None) -> Optional[Student]:
        with self._guard("fetch"):
            query = self._live().filter(Student.email == email)
            if exclude_id is not None:
                query = query.filter(Student.id != exclude_id)
            return query.first()

    def find_all(self, skip: int = 0, limit: Optional[int] = None) -> List[Student]:
        with self._guard("list"):
            return self._page(self._live(), skip, limit).all()

    def find(
        self,
        name: Optional[str] = None,
        major: Optional[str] = None,
        grade: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Student]:
        """
        Live students matching every given filter.

        ``name`` and ``major`` match case-insensitive substrings, ``grade``
        matches exactly. Empty filters are ignored.
        """
        with self._guard("search"):
            query = self._live()
            if name:
                query = query.filter(Student.name.ilike(_contains_pattern(name), escape=LIKE_ESCAPE))
            if major:
                query = query.filter(Student.major.ilike(_contains_pattern(major), escape=LIKE_ESCAPE))
            if grade:
                query = query.filter(Student.grade == grade)
            return self._page(query, skip, limit).all()

    def update_fields(self, student_id: int, partial: Mapping[str, Any]) -> Student:
        student = self.find_by_id(student_id)
        for key in STUDENT_FIELDS:
            if key in partial:
                setattr(student, key, partial[key])
        student.updated_at = _next_timestamp(student.updated_at)

        with self._guard("update", partial.get("email")):
            self.db.commit()
            self.db.refresh(student)
        return student

    def soft_delete(self, student_id: int) -> None:
        student = self.find_by_id(student_id)
        student.deleted_at = utcnow()
        with self._guard("delete"):
            self.db.commit()
