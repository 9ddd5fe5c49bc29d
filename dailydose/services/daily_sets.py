"""
Daily question sets: per-student, per-day assembly and one-shot grading.

A set moves ``absent -> assembled (completed=False) -> graded (completed=True)``.
When the student's subject has nothing left to attempt, assembly reports a
"caught up" result instead and nothing is written.
"""
import datetime as dt
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dailydose.core.errors import NoPrimarySubject, SetNotFound, AlreadyCompleted, InvalidSubmission
from dailydose.models.orm import DailyQuestionSet, Question, User, Option
from dailydose.services.attempts import GradedAnswer, attempted_question_ids, record_attempts

logger = logging.getLogger(__name__)

DEFAULT_SET_SIZE = 10
CAUGHT_UP_MESSAGE = "Congratulations, you solved all questions posted for this Subject."

@dataclass
class DailySetView:
    date: dt.date
    completed: bool
    questions: List[dict] = field(default_factory=list)
    score: Optional[int] = None
    message: Optional[str] = None

    @property
    def caught_up(self) -> bool:
        return self.message is not None

@dataclass
class SubmittedAnswer:
    question_id: str
    selected_option: Option

@dataclass
class GradeResult:
    date: dt.date
    score: int
    total_questions: int

def shuffled_options(question: Question, rng=random) -> List[dict]:
    # keys stay bound to their stored letter; only the display order changes
    options = [{"key": key, "value": text or ""} for key, text in question.option_texts().items()]
    rng.shuffle(options)
    return options

def _find_set(db: Session, student_id: str, day: dt.date) -> Optional[DailyQuestionSet]:
    return db.scalar(select(DailyQuestionSet).where(DailyQuestionSet.student_id == student_id, DailyQuestionSet.date == day))

def _load_in_order(db: Session, question_ids: Sequence[str]) -> List[Question]:
    rows = db.scalars(select(Question).where(Question.id.in_(list(question_ids)))).all()
    by_id = {q.id: q for q in rows}
    return [by_id[qid] for qid in question_ids if qid in by_id]

def _present(questions: Sequence[Question], rng) -> List[dict]:
    return [
        {"id": q.id, "title": q.title, "content": q.content, "options": shuffled_options(q, rng)}
        for q in questions
    ]

def _view(db: Session, qset: DailyQuestionSet, rng) -> DailySetView:
    questions = _load_in_order(db, qset.question_ids)
    return DailySetView(date=qset.date, completed=qset.completed, questions=_present(questions, rng), score=qset.score)

def fetch_or_assemble(db: Session, student: User, today: dt.date, size: int = DEFAULT_SET_SIZE, rng=random) -> DailySetView:
    """Return the student's set for ``today``, building it on first request."""
    existing = _find_set(db, student.id, today)
    if existing is not None:
        return _view(db, existing, rng)

    if not student.primary_subject_id:
        raise NoPrimarySubject()

    attempted = attempted_question_ids(db, student.id)
    stmt = select(Question).where(Question.subject_id == student.primary_subject_id)
    if attempted:
        stmt = stmt.where(Question.id.not_in(sorted(attempted)))
    stmt = stmt.order_by(Question.created_at.asc(), Question.id.asc()).limit(size)
    questions = db.scalars(stmt).all()

    if not questions:
        logger.info("Student %s caught up on subject %s", student.id, student.primary_subject_id)
        return DailySetView(date=today, completed=True, message=CAUGHT_UP_MESSAGE)

    qset = DailyQuestionSet(student_id=student.id, date=today, question_ids=[q.id for q in questions], completed=False)
    db.add(qset)
    try:
        db.commit()
    except IntegrityError:
        # lost the race against a concurrent request for the same day
        db.rollback()
        winner = _find_set(db, student.id, today)
        if winner is None:
            raise
        logger.info("Daily set for student %s on %s already created concurrently", student.id, today)
        return _view(db, winner, rng)

    logger.info("Assembled daily set %s for student %s on %s with %d questions", qset.id, student.id, today, len(questions))
    return DailySetView(date=today, completed=False, questions=_present(questions, rng))

def grade(db: Session, student: User, set_date: dt.date, answers: Sequence[SubmittedAnswer]) -> GradeResult:
    """Score a submission against the set assembled for ``set_date`` and close the set."""
    qset = _find_set(db, student.id, set_date)
    if qset is None:
        raise SetNotFound()
    if qset.completed:
        raise AlreadyCompleted()

    members = set(qset.question_ids)
    invalid = [a.question_id for a in answers if a.question_id not in members]
    if invalid:
        raise InvalidSubmission(hint=f"Not part of the set for {set_date.isoformat()}: {', '.join(invalid)}")

    correct = dict(db.execute(select(Question.id, Question.correct_option).where(Question.id.in_(qset.question_ids))).all())
    graded = [GradedAnswer(a.question_id, a.selected_option, correct.get(a.question_id) == a.selected_option) for a in answers]
    score = sum(1 for g in graded if g.is_correct)
    # questions deleted since assembly score as wrong and leave no ledger row
    recorded = [g for g in graded if g.question_id in correct]
    total = len(qset.question_ids)

    result = db.execute(
        update(DailyQuestionSet)
        .where(DailyQuestionSet.id == qset.id, DailyQuestionSet.completed.is_(False))
        .values(completed=True, score=score)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Rejected concurrent grading of set %s for student %s", qset.id, student.id)
        raise AlreadyCompleted()
    record_attempts(db, student.id, recorded)
    db.commit()

    logger.info("Graded set %s for student %s: %d/%d", qset.id, student.id, score, total)
    return GradeResult(date=set_date, score=score, total_questions=total)
