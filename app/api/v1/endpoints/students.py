from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from app.api.deps import get_student_repository
from app.services.student.student import StudentRepository
from app.schemas.student import (
    MessageResponse,
    Student,
    StudentCreate,
    StudentListResponse,
    StudentMutationResponse,
    StudentResponse,
    StudentUpdate,
)

router = APIRouter()

MAX_PAGE_SIZE = 1000
# Largest id a 32-bit INTEGER column holds; bigger values are a bad request
MAX_ID = 2**31 - 1


def _list_response(students) -> StudentListResponse:
    data = [Student.model_validate(student) for student in students]
    return StudentListResponse(data=data, count=len(data))


@router.get("", response_model=StudentListResponse)
@router.get("/", response_model=StudentListResponse, include_in_schema=False)
def get_students(
    skip: int = Query(0, ge=0, le=MAX_ID),
    limit: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
    repo: StudentRepository = Depends(get_student_repository)
):
    """
    List all students

    - **skip**: skip the first n records (default: 0)
    - **limit**: maximum number of records (default: no limit)
    """
    return _list_response(repo.list(skip=skip, limit=limit))


@router.get("/search", response_model=StudentListResponse)
def search_students(
    name: Optional[str] = None,
    major: Optional[str] = None,
    grade: Optional[str] = None,
    skip: int = Query(0, ge=0, le=MAX_ID),
    limit: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
    repo: StudentRepository = Depends(get_student_repository)
):
    """
    Search students; every given filter must match

    - **name**: case-insensitive substring
    - **major**: case-insensitive substring
    - **grade**: exact match
    """
    students = repo.search(name=name, major=major, grade=grade, skip=skip, limit=limit)
    return _list_response(students)


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int = Path(..., ge=1, le=MAX_ID),
    repo: StudentRepository = Depends(get_student_repository)
):
    """
    Get one student by ID
    """
    return StudentResponse(data=Student.model_validate(repo.get(student_id)))


@router.post("", response_model=StudentMutationResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=StudentMutationResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_student(
    student: StudentCreate,
    repo: StudentRepository = Depends(get_student_repository)
):
    """
    Create a student

    All fields are required: name, age, gender, email (unique), phone, major, grade.
    """
    created = repo.create(student.model_dump())
    return StudentMutationResponse(
        message="Student created successfully",
        data=Student.model_validate(created)
    )


@router.put("/{student_id}", response_model=StudentMutationResponse)
def update_student(
    student: StudentUpdate,
    student_id: int = Path(..., ge=1, le=MAX_ID),
    repo: StudentRepository = Depends(get_student_repository)
):
    """
    Update a student; only the fields sent are changed
    """
    updated = repo.update(student_id, student.model_dump(exclude_unset=True))
    return StudentMutationResponse(
        message="Student updated successfully",
        data=Student.model_validate(updated)
    )


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(
    student_id: int = Path(..., ge=1, le=MAX_ID),
    repo: StudentRepository = Depends(get_student_repository)
):
    """
    Delete a student (soft delete, the row is kept with deleted_at set)
    """
    repo.delete(student_id)
    return MessageResponse(message="Student deleted successfully")
