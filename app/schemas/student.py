from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, StrictInt, field_serializer


class StudentBase(BaseModel):
    # Request shapes only check JSON types; business rules live in
    # app.services.student.validation so create and update report them alike
    name: Optional[str] = None
    # StrictInt: JSON true or "20" must not be coerced into an age
    age: Optional[StrictInt] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    major: Optional[str] = None
    grade: Optional[str] = None


class StudentCreate(StudentBase):
    pass


class StudentUpdate(StudentBase):
    """Partial update: only the keys present in the request body are applied."""
    pass


class Student(BaseModel):
    id: int
    name: str
    age: int
    gender: str
    email: str
    phone: str
    major: str
    grade: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at")
    def serialize_utc(self, value: datetime) -> str:
        # Stored naive, always UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()


# Response envelopes

class StudentListResponse(BaseModel):
    data: List[Student]
    count: int


class StudentResponse(BaseModel):
    data: Student


class StudentMutationResponse(BaseModel):
    message: str
    data: Student


class MessageResponse(BaseModel):
    message: str
