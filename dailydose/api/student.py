import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dailydose.core.auth import require_roles
from dailydose.core.database import get_db
from dailydose.core.errors import QuestionNotFound
from dailydose.models.orm import Role, Question, User
from dailydose.models.schemas import ProgressOut, PracticeAnswerIn, PracticeResultOut, AttemptOut
from dailydose.services.attempts import progress_summary, answer_question

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/progress", response_model=ProgressOut)
def progress(user: User = Depends(require_roles(Role.STUDENT)), db: Session = Depends(get_db)):
    return ProgressOut.model_validate(progress_summary(db, user.id))

@router.post("/answers", response_model=PracticeResultOut)
def submit_practice_answer(payload: PracticeAnswerIn, user: User = Depends(require_roles(Role.STUDENT)), db: Session = Depends(get_db)):
    question = db.get(Question, payload.question_id)
    if question is None:
        raise QuestionNotFound()
    attempt, already = answer_question(db, user.id, question, payload.selected_option)
    if not already:
        logger.info("Student %s practiced question %s (correct=%s)", user.id, question.id, attempt.is_correct)
    return PracticeResultOut(
        already_attempted=already,
        attempt=AttemptOut.model_validate(attempt),
        correct_option=question.correct_option,
        explanation=question.explanation,
    )
