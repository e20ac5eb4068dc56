"""Balances router: per-participant group balances and the caller's dashboard."""

from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user
from utils.balances import compute_balance, compute_group_balances
from utils.validation import verify_group_access


router = APIRouter(tags=["balances"])


@router.get("/groups/{group_id}/balances", response_model=list[schemas.ParticipantBalance])
def get_group_balances(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    verify_group_access(db, group_id, current_user.id)

    return [
        schemas.ParticipantBalance(
            participant_id=participant.id,
            name=participant.name,
            user_id=participant.user_id,
            balance=balance,
            is_current_user=participant.user_id == current_user.id
        )
        for participant, balance in compute_group_balances(db, group_id)
    ]


@router.get("/groups/{group_id}/participants/{participant_id}/balance", response_model=schemas.ParticipantBalance)
def get_participant_balance(
    group_id: int,
    participant_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    verify_group_access(db, group_id, current_user.id)

    participant = db.query(models.Participant).filter(
        models.Participant.id == participant_id,
        models.Participant.group_id == group_id
    ).first()
    if not participant:
        raise HTTPException(status_code=404, detail="Participant not found")

    return schemas.ParticipantBalance(
        participant_id=participant.id,
        name=participant.name,
        user_id=participant.user_id,
        balance=compute_balance(db, group_id, participant.id),
        is_current_user=participant.user_id == current_user.id
    )


@router.get("/balances", response_model=schemas.BalanceDashboard)
def get_balances(
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    """Totals across every group where the caller is a linked participant."""
    linked = db.query(models.Participant, models.Group).join(
        models.Group, models.Participant.group_id == models.Group.id
    ).filter(
        models.Participant.user_id == current_user.id
    ).order_by(models.Group.id).all()

    groups = []
    to_receive = 0
    to_pay = 0
    for participant, group in linked:
        balance = compute_balance(db, group.id, participant.id)
        if balance > 0:
            to_receive += balance
        else:
            to_pay += -balance
        groups.append(schemas.GroupBalance(group_id=group.id, group_name=group.name, balance=balance))

    return schemas.BalanceDashboard(
        to_receive=to_receive,
        to_pay=to_pay,
        net=to_receive - to_pay,
        groups=groups
    )
