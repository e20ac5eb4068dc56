"""Groups router: create, list, read, update, delete groups."""

from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db, commit_or_rollback
from dependencies import get_current_user
from utils.balances import compute_user_balance, count_by_group
from utils.roster import check_group_limit, create_group as create_group_with_creator, delete_group as delete_group_cascade
from utils.validation import verify_group_access, verify_group_ownership
from utils.errors import ValidationError


router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=schemas.Group)
def create_group(
    group: schemas.GroupCreate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    check_group_limit(db, current_user.id)
    return create_group_with_creator(db, group.name, group.description, current_user)


@router.get("", response_model=list[schemas.GroupSummary])
def read_groups(
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    # Groups the user created or is linked to as a participant
    linked_group_ids = select(models.Participant.group_id).where(
        models.Participant.user_id == current_user.id
    )
    groups = db.query(models.Group).filter(
        or_(
            models.Group.created_by_id == current_user.id,
            models.Group.id.in_(linked_group_ids)
        )
    ).order_by(models.Group.id).all()

    counts = count_by_group(db, [g.id for g in groups])

    return [
        schemas.GroupSummary(
            id=g.id,
            name=g.name,
            description=g.description,
            created_by_id=g.created_by_id,
            participant_count=counts[g.id][0],
            expense_count=counts[g.id][1],
            balance=compute_user_balance(db, g.id, current_user.id)
        )
        for g in groups
    ]


@router.get("/{group_id}", response_model=schemas.GroupWithParticipants)
def get_group(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    group = verify_group_access(db, group_id, current_user.id)

    participants = db.query(models.Participant).filter(
        models.Participant.group_id == group_id
    ).order_by(models.Participant.id).all()

    return schemas.GroupWithParticipants(
        id=group.id,
        name=group.name,
        description=group.description,
        created_by_id=group.created_by_id,
        participants=[schemas.Participant.model_validate(p) for p in participants]
    )


@router.put("/{group_id}", response_model=schemas.Group)
def update_group(
    group_id: int,
    group_update: schemas.GroupUpdate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    group = verify_group_ownership(db, group_id, current_user.id)

    name = group_update.name.strip()
    if not name:
        raise ValidationError("Group name is required")

    group.name = name
    group.description = (group_update.description or "").strip() or None
    commit_or_rollback(db, f"update group {group_id}")
    db.refresh(group)
    return group


@router.delete("/{group_id}")
def delete_group(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    verify_group_ownership(db, group_id, current_user.id)
    delete_group_cascade(db, group_id)
    return {"message": "Group deleted successfully"}
