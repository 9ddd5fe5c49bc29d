import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from dailydose.core.auth import create_token
from dailydose.core.config import Settings
from dailydose.core.database import Database
from dailydose.main import create_app
from dailydose.models.orm import Role, ExamCategory, Difficulty, Option, Subject, User, Question, StudentAttempt

BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

class Seeder:
    """Writes fixtures through short-lived sessions and hands back ids."""

    def __init__(self, database: Database):
        self.database = database

    def subject(self, name="Mathematics", category=ExamCategory.JEE) -> str:
        with self.database.session() as s:
            subj = Subject(name=name, exam_category=category)
            s.add(subj); s.commit()
            return subj.id

    def user(self, role=Role.STUDENT, primary_subject_id=None, email=None) -> str:
        with self.database.session() as s:
            u = User(email=email or f"{role.value.lower()}-{uuid4().hex[:8]}@example.com", role=role,
                     primary_subject_id=primary_subject_id)
            s.add(u); s.commit()
            return u.id

    def questions(self, subject_id, author_id, count, correct="A", start=BASE_TIME) -> list:
        ids = []
        with self.database.session() as s:
            for i in range(count):
                q = Question(
                    title=f"Question {i + 1}", content=f"What is item {i + 1}?",
                    option_a=f"A{i}", option_b=f"B{i}", option_c=f"C{i}", option_d=f"D{i}",
                    correct_option=Option(correct), difficulty=Difficulty.MEDIUM,
                    subject_id=subject_id, created_by=author_id, created_at=start + timedelta(minutes=i),
                )
                s.add(q); s.flush()
                ids.append(q.id)
            s.commit()
        return ids

    def attempt(self, student_id, question_id, option="A", correct=True) -> None:
        with self.database.session() as s:
            s.add(StudentAttempt(student_id=student_id, question_id=question_id, selected_option=Option(option), is_correct=correct))
            s.commit()

@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", ENVIRONMENT="testing", APP_SECRET="test-secret", DAILY_SET_SIZE=10)

@pytest.fixture
def database(settings):
    database = Database(settings.DATABASE_URL)
    database.create_all()
    yield database
    database.dispose()

@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()

@pytest.fixture
def seed(database):
    return Seeder(database)

@pytest.fixture
def client(settings, database):
    app = create_app(settings, database)
    return TestClient(app)

@pytest.fixture
def auth(settings):
    def headers(user_id):
        return {"Authorization": f"Bearer {create_token(user_id, settings)}"}
    return headers

@pytest.fixture
def math_student(seed):
    """A student committed to Mathematics with 12 unattempted questions waiting."""
    subject_id = seed.subject("Mathematics")
    author_id = seed.user(Role.QAUTHOR)
    question_ids = seed.questions(subject_id, author_id, 12)
    student_id = seed.user(Role.STUDENT, primary_subject_id=subject_id)
    return {"subject_id": subject_id, "author_id": author_id, "question_ids": question_ids, "student_id": student_id}
