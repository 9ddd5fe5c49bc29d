import enum
import datetime as dt
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Text, Boolean, Integer, Date, DateTime, ForeignKey, JSON, Enum, UniqueConstraint, Index

class Role(str, enum.Enum):
    """User roles."""
    SUPERADMIN = "SUPERADMIN"
    QAUTHOR = "QAUTHOR"
    STUDENT = "STUDENT"

class ExamCategory(str, enum.Enum):
    UPSC = "UPSC"
    JEE = "JEE"
    NEET = "NEET"
    SSC = "SSC"
    OTHER = "OTHER"

class Difficulty(str, enum.Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

class Option(str, enum.Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"

def _uuid() -> str: return str(uuid4())
def _now() -> datetime: return datetime.now(timezone.utc)

class Base(DeclarativeBase): pass

class Subject(Base):
    __tablename__ = "subjects"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), unique=True)
    exam_category: Mapped[ExamCategory] = mapped_column(Enum(ExamCategory, native_enum=False, length=16))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

class User(Base):
    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    role: Mapped[Role] = mapped_column(Enum(Role, native_enum=False, length=16))
    # set once, by the student, never changed afterwards
    primary_subject_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("subjects.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

class Question(Base):
    __tablename__ = "questions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(500))
    content: Mapped[str] = mapped_column(Text)
    option_a: Mapped[str] = mapped_column(Text)
    option_b: Mapped[str] = mapped_column(Text)
    option_c: Mapped[str] = mapped_column(Text)
    option_d: Mapped[str] = mapped_column(Text)
    correct_option: Mapped[Option] = mapped_column(Enum(Option, native_enum=False, length=1))
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty: Mapped[Difficulty] = mapped_column(Enum(Difficulty, native_enum=False, length=8))
    subject_id: Mapped[str] = mapped_column(String(36), ForeignKey("subjects.id"), index=True)
    created_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    def option_texts(self) -> dict[str, str]:
        return {"A": self.option_a, "B": self.option_b, "C": self.option_c, "D": self.option_d}

class DailyQuestionSet(Base):
    __tablename__ = "daily_question_sets"
    __table_args__ = (UniqueConstraint("student_id", "date", name="uq_daily_set_student_date"),)
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"))
    date: Mapped[dt.date] = mapped_column(Date)
    question_ids: Mapped[list] = mapped_column(JSON)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

class StudentAttempt(Base):
    __tablename__ = "student_attempts"
    __table_args__ = (Index("ix_student_attempts_student_id", "student_id"),)
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"))
    question_id: Mapped[str] = mapped_column(String(36), ForeignKey("questions.id", ondelete="CASCADE"))
    selected_option: Mapped[Option] = mapped_column(Enum(Option, native_enum=False, length=1))
    is_correct: Mapped[bool] = mapped_column(Boolean)
    attempted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
