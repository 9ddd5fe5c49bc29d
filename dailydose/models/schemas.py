import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr
from pydantic.alias_generators import to_camel

from dailydose.models.orm import Role, Option, Difficulty, ExamCategory

class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

# ---- auth ----

class MockLogin(BaseModel):
    user_id: str

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role

class MeOut(CamelModel):
    id: str
    email: str
    role: Role
    primary_subject_id: Optional[str] = None

class PrimarySubjectIn(CamelModel):
    primary_subject_id: constr(min_length=1)

# ---- subjects ----

class SubjectOut(CamelModel):
    id: str
    name: str
    exam_category: ExamCategory
    description: Optional[str] = None

# ---- daily question sets ----

class OptionOut(BaseModel):
    key: Option
    value: str

class DailyQuestionOut(CamelModel):
    id: str
    title: str
    content: str
    options: List[OptionOut]

class DailySetOut(CamelModel):
    date: dt.date
    questions: Optional[List[DailyQuestionOut]] = None
    completed: bool
    score: Optional[int] = None
    message: Optional[str] = None

class AnswerIn(CamelModel):
    question_id: constr(min_length=1)
    selected_option: Option

class SubmissionIn(CamelModel):
    date: dt.date
    answers: List[AnswerIn]

class GradeOut(CamelModel):
    date: dt.date
    completed: bool = True
    score: int
    total_questions: int

# ---- practice ----

class PracticeQuestionOut(DailyQuestionOut):
    subject_id: str
    difficulty: Difficulty
    year: Optional[int] = None
    source: Optional[str] = None

class PracticeQuestionList(BaseModel):
    questions: List[PracticeQuestionOut]
    total: int

class PracticeAnswerIn(CamelModel):
    question_id: constr(min_length=1)
    selected_option: Option

class AttemptOut(CamelModel):
    id: str
    question_id: str
    selected_option: Option
    is_correct: bool
    attempted_at: dt.datetime

class PracticeResultOut(CamelModel):
    already_attempted: bool
    attempt: AttemptOut
    correct_option: Option
    explanation: Optional[str] = None

# ---- authoring ----

class QuestionIn(CamelModel):
    title: constr(min_length=1)
    content: constr(min_length=1)
    option_a: constr(min_length=1)
    option_b: constr(min_length=1)
    option_c: constr(min_length=1)
    option_d: constr(min_length=1)
    correct_option: Option
    explanation: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    subject_id: constr(min_length=1)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    source: Optional[str] = None

class QuestionOut(CamelModel):
    id: str
    title: str
    content: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_option: Option
    explanation: Optional[str] = None
    difficulty: Difficulty
    subject_id: str
    created_by: str
    year: Optional[int] = None
    source: Optional[str] = None
    created_at: dt.datetime

class QuestionList(BaseModel):
    questions: List[QuestionOut]
    total: int

# ---- progress ----

class RecentSetOut(CamelModel):
    date: dt.date
    score: Optional[int] = None
    total_questions: int

class ProgressOut(CamelModel):
    total_attempts: int
    correct_attempts: int
    accuracy: float
    completed_sets: int
    recent_sets: List[RecentSetOut]

# ---- administration ----

class UserOut(CamelModel):
    id: str
    email: str
    role: Role
    primary_subject_id: Optional[str] = None
    created_at: dt.datetime

class QAuthorIn(CamelModel):
    email: constr(strip_whitespace=True, to_lower=True, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
