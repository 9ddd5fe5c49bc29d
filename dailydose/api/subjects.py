from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from dailydose.core.auth import get_current_user
from dailydose.core.database import get_db
from dailydose.models.orm import Subject
from dailydose.models.schemas import SubjectOut

router = APIRouter()

@router.get("", response_model=List[SubjectOut], dependencies=[Depends(get_current_user)])
def list_subjects(db: Session = Depends(get_db)):
    return db.scalars(select(Subject).order_by(Subject.name)).all()
