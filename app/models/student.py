from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String, text
from app.core.database import Base


GENDERS = ("male", "female")

# Client-settable columns, in the order they are validated and displayed
STUDENT_FIELDS = ("name", "age", "gender", "email", "phone", "major", "grade")

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20
MAJOR_MAX_LENGTH = 100
GRADE_MAX_LENGTH = 50
GENDER_MAX_LENGTH = 10


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every backend stores and returns unchanged."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Student(Base):
    __tablename__ = "students"
    __table_args__ = (
        # One live record per email; soft-deleted rows free the address again
        Index(
            "uq_students_email_live",
            "email",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
        # AUTOINCREMENT keeps SQLite from reusing the ids of deleted rows
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String(GENDER_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), nullable=False)
    phone = Column(String(PHONE_MAX_LENGTH), nullable=False)
    major = Column(String(MAJOR_MAX_LENGTH), nullable=False)
    grade = Column(String(GRADE_MAX_LENGTH), nullable=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
    deleted_at = Column(DateTime, nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self) -> str:
        return f"<Student id={self.id} email={self.email!r}>"
