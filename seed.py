import logging
from app.core.database import SessionLocal, create_database_tables
from app.core.exceptions import ValidationError
from app.services.student.store import StudentStore
from app.services.student.student import StudentRepository

# Setup logging to see output
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_STUDENTS = [
    {
        "name": "Zhang San",
        "age": 20,
        "gender": "male",
        "email": "zs@example.com",
        "phone": "13800000000",
        "major": "Computer Science",
        "grade": "2023",
    },
    {
        "name": "Li Si",
        "age": 21,
        "gender": "female",
        "email": "ls@example.com",
        "phone": "13800000001",
        "major": "Mathematics",
        "grade": "2022",
    },
    {
        "name": "Wang Wu",
        "age": 19,
        "gender": "male",
        "email": "ww@example.com",
        "phone": "13800000002",
        "major": "Computer Engineering",
        "grade": "2024",
    },
]


def seed_data():
    """
    Insert sample students, skipping when the table already has live records.
    """
    create_database_tables()

    db = SessionLocal()
    try:
        repo = StudentRepository(StudentStore(db))
        if repo.list(limit=1):
            logger.info("Database already contains data. Skipping seed.")
            return

        logger.info("Seeding data...")
        for data in SAMPLE_STUDENTS:
            try:
                repo.create(data)
            except ValidationError as e:
                logger.warning(f"Skipping {data['email']}: {e.details}")

        logger.info("✅ Data seeded successfully!")
    finally:
        db.close() # Always close the connection

if __name__ == "__main__":
    seed_data()
