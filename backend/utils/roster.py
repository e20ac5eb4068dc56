"""Group roster management: creating groups, adding participants, deleting groups."""

import os
import logging
from typing import Optional
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

import models
from database import commit_or_rollback
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

# Free plan: how many groups a user may create. 0 disables the limit.
FREE_PLAN_GROUP_LIMIT = int(os.getenv("FREE_PLAN_GROUP_LIMIT", "2"))

# Shown for the creator when their profile has no name
DEFAULT_CREATOR_NAME = "You"


def _clean_name(name: Optional[str], what: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"{what} name is required")
    return cleaned


def check_group_limit(db: Session, user_id: int) -> None:
    """Raise 403 when the user already owns as many groups as the free plan allows."""
    if FREE_PLAN_GROUP_LIMIT <= 0:
        return

    owned = db.query(models.Group).filter(models.Group.created_by_id == user_id).count()
    if owned >= FREE_PLAN_GROUP_LIMIT:
        raise HTTPException(
            status_code=403,
            detail=f"You have reached the limit of {FREE_PLAN_GROUP_LIMIT} groups on the free plan. "
                   "Upgrade to PRO for unlimited groups."
        )


def create_group(
    db: Session,
    name: str,
    description: Optional[str],
    creator: models.User
) -> models.Group:
    """
    Create a group with its creator as the first participant.

    Both rows are written in a single transaction.
    """
    db_group = models.Group(
        name=_clean_name(name, "Group"),
        description=(description or "").strip() or None,
        created_by_id=creator.id
    )
    db.add(db_group)
    db.flush()  # assigns db_group.id

    db_participant = models.Participant(
        group_id=db_group.id,
        name=(creator.full_name or "").strip() or DEFAULT_CREATOR_NAME,
        user_id=creator.id
    )
    db.add(db_participant)

    commit_or_rollback(db, f"create group for user {creator.id}")
    db.refresh(db_group)
    logger.info(f"User {creator.id} created group {db_group.id}")
    return db_group


def add_participant(db: Session, group_id: int, name: str) -> models.Participant:
    """Add a placeholder participant with no linked account. Duplicate names are allowed."""
    db_participant = models.Participant(
        group_id=group_id,
        name=_clean_name(name, "Participant"),
        user_id=None
    )
    db.add(db_participant)
    commit_or_rollback(db, f"add participant to group {group_id}")
    db.refresh(db_participant)
    return db_participant


def delete_group(db: Session, group_id: int) -> None:
    """Delete a group with all of its shares, expenses and participants in one transaction."""
    expense_ids = select(models.Expense.id).where(models.Expense.group_id == group_id)

    db.query(models.Share).filter(
        models.Share.expense_id.in_(expense_ids)
    ).delete(synchronize_session=False)
    db.query(models.Expense).filter(models.Expense.group_id == group_id).delete(synchronize_session=False)
    db.query(models.Participant).filter(models.Participant.group_id == group_id).delete(synchronize_session=False)
    db.query(models.Group).filter(models.Group.id == group_id).delete(synchronize_session=False)

    commit_or_rollback(db, f"delete group {group_id}")
    logger.info(f"Deleted group {group_id}")
