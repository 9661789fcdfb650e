# tests/conftest.py

import os

# Point settings at an in-memory database BEFORE importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from app.core.database import SessionLocal, create_database_tables, drop_database_tables
from app.main import app
from app.models.student import Student  # noqa: F401
from app.services.student.store import StudentStore
from app.services.student.student import StudentRepository


@pytest.fixture(autouse=True)
def tables():
    """Fresh students table for every test"""
    create_database_tables()
    yield
    drop_database_tables()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return StudentStore(db)


@pytest.fixture
def repo(store):
    return StudentRepository(store)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def student_data():
    return {
        "name": "Zhang San",
        "age": 20,
        "gender": "male",
        "email": "zs@example.com",
        "phone": "13800000000",
        "major": "CS",
        "grade": "2023",
    }


@pytest.fixture
def make_student_data(student_data):
    """Build valid student payloads with a unique email per call"""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = dict(student_data, email=f"student{counter['n']}@example.com")
        data.update(overrides)
        return data

    return _make
