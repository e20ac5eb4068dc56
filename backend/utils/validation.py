"""Validation utilities for group access, expense participants and passwords."""

import re
from sqlalchemy.orm import Session
from fastapi import HTTPException

import models
from utils.errors import ValidationError


PASSWORD_MIN_LENGTH = 8


def get_user_by_email(db: Session, email: str):
    """Get a user by their email address."""
    return db.query(models.User).filter(models.User.email == email).first()


def validate_password(password: str) -> None:
    """Password policy: at least 8 characters with letters and numbers."""
    if (
        len(password) < PASSWORD_MIN_LENGTH
        or not re.search(r"[a-zA-Z]", password)
        or not re.search(r"[0-9]", password)
    ):
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long and include letters and numbers"
        )


def get_group_or_404(db: Session, group_id: int):
    """Get a group by ID or raise 404 if not found."""
    group = db.query(models.Group).filter(models.Group.id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def verify_group_access(db: Session, group_id: int, user_id: int):
    """Verify the user created the group or is linked to one of its participants, raise 403 if not."""
    group = get_group_or_404(db, group_id)
    if group.created_by_id == user_id:
        return group

    linked = db.query(models.Participant).filter(
        models.Participant.group_id == group_id,
        models.Participant.user_id == user_id
    ).first()
    if not linked:
        raise HTTPException(status_code=403, detail="You are not a member of this group")
    return group


def verify_group_ownership(db: Session, group_id: int, user_id: int):
    """Verify that a user owns a group, raise 403 if not."""
    group = get_group_or_404(db, group_id)
    if group.created_by_id != user_id:
        raise HTTPException(status_code=403, detail="Only the group owner can perform this action")
    return group


def get_expense_or_404(db: Session, expense_id: int):
    """Get a group expense by ID or raise 404 if not found."""
    expense = db.query(models.Expense).filter(models.Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


def validate_expense_participants(
    db: Session,
    group_id: int,
    payer_id: int,
    participant_ids: list[int]
) -> None:
    """Validate that the payer and every split participant belong to the group."""
    group_participant_ids = {
        pid for (pid,) in db.query(models.Participant.id).filter(
            models.Participant.group_id == group_id
        ).all()
    }

    if payer_id not in group_participant_ids:
        raise ValidationError(f"Payer with ID {payer_id} is not a participant of this group")

    for participant_id in participant_ids:
        if participant_id not in group_participant_ids:
            raise ValidationError(f"Participant with ID {participant_id} is not part of this group")
