import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dailydose.core.auth import require_roles
from dailydose.core.database import get_db
from dailydose.core.errors import EmailTaken
from dailydose.models.orm import Role, User
from dailydose.models.schemas import UserOut, QAuthorIn

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/users", response_model=List[UserOut], dependencies=[Depends(require_roles(Role.SUPERADMIN))])
def list_users(role: Optional[Role] = None, db: Session = Depends(get_db)):
    stmt = select(User).order_by(User.created_at.desc(), User.email.asc())
    if role is not None:
        stmt = stmt.where(User.role == role)
    return db.scalars(stmt).all()

@router.post("/qauthors", response_model=UserOut, status_code=201)
def create_qauthor(payload: QAuthorIn, admin: User = Depends(require_roles(Role.SUPERADMIN)), db: Session = Depends(get_db)):
    if db.scalar(select(User.id).where(User.email == payload.email)) is not None:
        raise EmailTaken()
    author = User(email=payload.email, role=Role.QAUTHOR)
    db.add(author)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailTaken()
    db.refresh(author)
    logger.info("Admin %s created question author %s", admin.id, author.id)
    return UserOut.model_validate(author)
