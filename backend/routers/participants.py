"""Participants router: list and add group participants."""

from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user
from utils.roster import add_participant as add_placeholder_participant
from utils.validation import verify_group_access


router = APIRouter(prefix="/groups/{group_id}", tags=["participants"])


@router.get("/participants", response_model=list[schemas.Participant])
def read_participants(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    verify_group_access(db, group_id, current_user.id)
    return db.query(models.Participant).filter(
        models.Participant.group_id == group_id
    ).order_by(models.Participant.id).all()


@router.post("/participants", response_model=schemas.Participant)
def add_participant(
    group_id: int,
    participant: schemas.ParticipantCreate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    """Add a placeholder participant (no linked account) to the group."""
    verify_group_access(db, group_id, current_user.id)
    return add_placeholder_participant(db, group_id, participant.name)
