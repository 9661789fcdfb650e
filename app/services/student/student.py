import logging
from typing import Any, List, Mapping, Optional

from app.core.exceptions import DuplicateKeyError, FieldError, ValidationError
from app.models.student import Student
from app.services.student.store import StudentStore
from app.services.student.validation import validate_student

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = FieldError("email", "already exists")


def _empty_to_none(value: Optional[str]) -> Optional[str]:
    # Only "" is unset; " " still searches for names containing a space
    if not value:
        return None
    return value


class StudentRepository:
    """
    Student use cases: validate, call the store, normalize errors.

    A duplicate email is always reported as a ValidationError on ``email``,
    whether the pre-check caught it or the database unique index did.
    """

    def __init__(self, store: StudentStore):
        self.store = store

    def create(self, data: Mapping[str, Any]) -> Student:
        """Validate and store a new student."""
        errors = validate_student(data, is_create=True)
        if errors:
            raise ValidationError(errors)

        if self.store.find_by_email(data["email"]) is not None:
            raise ValidationError([DUPLICATE_EMAIL])

        try:
            student = self.store.insert(data)
        except DuplicateKeyError:
            # Another request inserted the same email after our pre-check
            raise ValidationError([DUPLICATE_EMAIL])

        logger.info(f"Created student id={student.id}")
        return student

    def get(self, student_id: int) -> Student:
        """Get one live student by id."""
        return self.store.find_by_id(student_id)

    def list(self, skip: int = 0, limit: Optional[int] = None) -> List[Student]:
        """All live students, ordered by id."""
        return self.store.find_all(skip=skip, limit=limit)

    def search(
        self,
        name: Optional[str] = None,
        major: Optional[str] = None,
        grade: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Student]:
        """
        Filter live students.

        Empty filters mean "no constraint", the way an empty query parameter
        does over HTTP. With no filters at all this is the same as list().
        """
        return self.store.find(
            name=_empty_to_none(name),
            major=_empty_to_none(major),
            grade=_empty_to_none(grade),
            skip=skip,
            limit=limit,
        )

    def update(self, student_id: int, data: Mapping[str, Any]) -> Student:
        """Apply a partial update; fields left out keep their value."""
        errors = validate_student(data, is_create=False)
        if errors:
            raise ValidationError(errors)

        self.store.find_by_id(student_id)

        email = data.get("email")
        if email is not None and self.store.find_by_email(email, exclude_id=student_id) is not None:
            raise ValidationError([DUPLICATE_EMAIL])

        try:
            student = self.store.update_fields(student_id, data)
        except DuplicateKeyError:
            raise ValidationError([DUPLICATE_EMAIL])

        logger.info(f"Updated student id={student_id} fields={sorted(data)}")
        return student

    def delete(self, student_id: int) -> None:
        """Soft-delete a student."""
        self.store.soft_delete(student_id)
        logger.info(f"Soft-deleted student id={student_id}")
