import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import update
from sqlalchemy.orm import Session

from dailydose.core.auth import create_token, get_current_user, require_roles
from dailydose.core.database import get_db
from dailydose.core.errors import Unauthenticated, PrimarySubjectLocked, SubjectNotFound
from dailydose.models.orm import Role, Subject, User
from dailydose.models.schemas import MockLogin, TokenOut, MeOut, PrimarySubjectIn

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/mock-login", response_model=TokenOut)
def mock_login(payload: MockLogin, request: Request, db: Session = Depends(get_db)):
    settings = request.app.state.settings
    if settings.is_production():
        raise HTTPException(status_code=404, detail="Not Found")
    user = db.get(User, payload.user_id)
    if user is None:
        raise Unauthenticated("Unknown user")
    token = create_token(user.id, settings)
    return TokenOut(access_token=token, role=user.role)

@router.get("/me", response_model=MeOut)
def me(user: User = Depends(get_current_user)):
    return MeOut.model_validate(user)

@router.put("/primary-subject", response_model=MeOut)
def set_primary_subject(payload: PrimarySubjectIn, user: User = Depends(require_roles(Role.STUDENT)), db: Session = Depends(get_db)):
    if user.primary_subject_id:
        raise PrimarySubjectLocked(hint=f"Current primary subject: {user.primary_subject_id}")
    if db.get(Subject, payload.primary_subject_id) is None:
        raise SubjectNotFound()
    result = db.execute(
        update(User)
        .where(User.id == user.id, User.primary_subject_id.is_(None))
        .values(primary_subject_id=payload.primary_subject_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Rejected second primary subject for student %s", user.id)
        raise PrimarySubjectLocked()
    db.commit()
    db.refresh(user)
    logger.info("Student %s selected primary subject %s", user.id, user.primary_subject_id)
    return MeOut.model_validate(user)
