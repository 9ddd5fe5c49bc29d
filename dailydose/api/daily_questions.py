from datetime import date

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dailydose.core.auth import require_roles
from dailydose.core.database import get_db
from dailydose.models.orm import Role, User
from dailydose.models.schemas import DailySetOut, SubmissionIn, GradeOut
from dailydose.services.daily_sets import fetch_or_assemble, grade, SubmittedAnswer

router = APIRouter()

@router.get("", response_model=DailySetOut, response_model_exclude_none=True)
def get_daily_questions(request: Request, user: User = Depends(require_roles(Role.STUDENT)), db: Session = Depends(get_db)):
  view = fetch_or_assemble(db, user, date.today(), size=request.app.state.settings.DAILY_SET_SIZE)
  return DailySetOut(date=view.date, questions=None if view.caught_up else view.questions, completed=view.completed, score=view.score, message=view.message)

@router.post("", response_model=GradeOut)
def submit_daily_answers(payload: SubmissionIn, user: User = Depends(require_roles(Role.STUDENT)), db: Session = Depends(get_db)):
  answers = [SubmittedAnswer(question_id=a.question_id, selected_option=a.selected_option) for a in payload.answers]
  result = grade(db, user, payload.date, answers)
  return GradeOut(date=result.date, completed=True, score=result.score, total_questions=result.total_questions)
