from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from dailydose.core.auth import get_current_user
from dailydose.core.database import get_db
from dailydose.core.errors import SubjectNotFound
from dailydose.models.orm import Question, Subject
from dailydose.models.schemas import PracticeQuestionOut, PracticeQuestionList
from dailydose.services.daily_sets import shuffled_options

router = APIRouter()

@router.get("", response_model=PracticeQuestionList, dependencies=[Depends(get_current_user)])
def browse_questions(subject_id: str = Query(..., alias="subjectId", min_length=1), limit: int = Query(50, ge=1, le=200),
                     db: Session = Depends(get_db)):
    if db.get(Subject, subject_id) is None:
        raise SubjectNotFound()
    rows = db.scalars(
        select(Question).where(Question.subject_id == subject_id)
        .order_by(Question.created_at.asc(), Question.id.asc()).limit(limit)
    ).all()
    # answers stay server-side; practice answers are graded by POST /student/answers
    questions = [
        PracticeQuestionOut(id=q.id, title=q.title, content=q.content, options=shuffled_options(q),
                            subject_id=q.subject_id, difficulty=q.difficulty, year=q.year, source=q.source)
        for q in rows
    ]
    return PracticeQuestionList(questions=questions, total=len(questions))
