import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from dailydose.core.auth import require_roles
from dailydose.core.database import get_db
from dailydose.core.errors import Forbidden, QuestionNotFound, SubjectNotFound
from dailydose.models.orm import Role, Question, Subject, User
from dailydose.models.schemas import QuestionIn, QuestionOut, QuestionList

logger = logging.getLogger(__name__)

router = APIRouter()

def _own_question(db: Session, question_id: str, user: User) -> Question:
    q = db.get(Question, question_id)
    if q is None:
        raise QuestionNotFound()
    if q.created_by != user.id:
        raise Forbidden("You can only modify your own questions")
    return q

def _check_subject(db: Session, subject_id: str) -> None:
    if db.get(Subject, subject_id) is None:
        raise SubjectNotFound()

@router.get("/questions", response_model=QuestionList)
def list_questions(user: User = Depends(require_roles(Role.QAUTHOR)), db: Session = Depends(get_db)):
    rows = db.scalars(select(Question).where(Question.created_by == user.id).order_by(Question.created_at.desc())).all()
    return QuestionList(questions=[QuestionOut.model_validate(q) for q in rows], total=len(rows))

@router.post("/questions", response_model=QuestionOut, status_code=201)
def create_question(payload: QuestionIn, user: User = Depends(require_roles(Role.QAUTHOR)), db: Session = Depends(get_db)):
    _check_subject(db, payload.subject_id)
    q = Question(created_by=user.id, **payload.model_dump())
    db.add(q); db.commit(); db.refresh(q)
    logger.info("Author %s created question %s in subject %s", user.id, q.id, q.subject_id)
    return QuestionOut.model_validate(q)

@router.put("/questions/{question_id}", response_model=QuestionOut)
def update_question(question_id: str, payload: QuestionIn, user: User = Depends(require_roles(Role.QAUTHOR)), db: Session = Depends(get_db)):
    q = _own_question(db, question_id, user)
    _check_subject(db, payload.subject_id)
    for field, value in payload.model_dump().items():
        setattr(q, field, value)
    db.commit(); db.refresh(q)
    return QuestionOut.model_validate(q)

@router.delete("/questions/{question_id}", status_code=204)
def delete_question(question_id: str, user: User = Depends(require_roles(Role.QAUTHOR)), db: Session = Depends(get_db)):
    q = _own_question(db, question_id, user)
    db.delete(q); db.commit()
    logger.info("Author %s deleted question %s", user.id, question_id)
    return Response(status_code=204)
