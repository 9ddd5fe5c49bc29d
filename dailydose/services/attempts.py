from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy import select, func, case
from sqlalchemy.orm import Session

from dailydose.models.orm import StudentAttempt, DailyQuestionSet, Question, Option

@dataclass
class GradedAnswer:
    question_id: str
    selected_option: Option
    is_correct: bool

def attempted_question_ids(db: Session, student_id: str) -> Set[str]:
    return set(db.scalars(select(StudentAttempt.question_id).where(StudentAttempt.student_id == student_id).distinct()))

def record_attempts(db: Session, student_id: str, graded: Iterable[GradedAnswer]) -> List[StudentAttempt]:
    """Append one ledger row per graded answer. The caller owns the transaction."""
    now = datetime.now(timezone.utc)
    rows = [
        StudentAttempt(student_id=student_id, question_id=g.question_id, selected_option=g.selected_option,
                       is_correct=g.is_correct, attempted_at=now)
        for g in graded
    ]
    db.add_all(rows)
    return rows

def first_attempt(db: Session, student_id: str, question_id: str) -> Optional[StudentAttempt]:
    return db.scalar(
        select(StudentAttempt)
        .where(StudentAttempt.student_id == student_id, StudentAttempt.question_id == question_id)
        .order_by(StudentAttempt.attempted_at.asc(), StudentAttempt.id.asc())
        .limit(1)
    )

def answer_question(db: Session, student_id: str, question: Question, selected: Option) -> Tuple[StudentAttempt, bool]:
    """Grade a single practice answer. A question already in the ledger is not graded again.

    Returns the attempt and whether it existed before this call.
    """
    existing = first_attempt(db, student_id, question.id)
    if existing is not None:
        return existing, True
    graded = GradedAnswer(question.id, selected, selected == question.correct_option)
    attempt = record_attempts(db, student_id, [graded])[0]
    db.commit()
    db.refresh(attempt)
    return attempt, False

def progress_summary(db: Session, student_id: str, recent: int = 7) -> dict:
    total, correct = db.execute(
        select(func.count(StudentAttempt.id), func.coalesce(func.sum(case((StudentAttempt.is_correct.is_(True), 1), else_=0)), 0))
        .where(StudentAttempt.student_id == student_id)
    ).one()
    graded_sets = db.scalars(
        select(DailyQuestionSet)
        .where(DailyQuestionSet.student_id == student_id, DailyQuestionSet.completed.is_(True))
        .order_by(DailyQuestionSet.date.desc())
    ).all()
    accuracy = round(100.0 * correct / total, 1) if total else 0.0
    return {
        "total_attempts": int(total),
        "correct_attempts": int(correct),
        "accuracy": accuracy,
        "completed_sets": len(graded_sets),
        "recent_sets": [
            {"date": s.date, "score": s.score, "total_questions": len(s.question_ids or [])}
            for s in graded_sets[:recent]
        ],
    }
