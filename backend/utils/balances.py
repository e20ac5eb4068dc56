"""Balance calculation: what each participant paid minus what they owe.

Balances are never stored; every call recomputes them from expenses and shares.
"""

from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

import models


def compute_balance(db: Session, group_id: int, participant_id: int) -> int:
    """
    Net balance of one participant in a group, in cents.

    Positive means the participant is owed money, negative means they owe.
    """
    total_paid = db.query(func.coalesce(func.sum(models.Expense.amount), 0)).filter(
        models.Expense.group_id == group_id,
        models.Expense.payer_id == participant_id
    ).scalar()

    total_owed = db.query(func.coalesce(func.sum(models.Share.amount_owed), 0)).join(
        models.Expense, models.Share.expense_id == models.Expense.id
    ).filter(
        models.Expense.group_id == group_id,
        models.Share.participant_id == participant_id
    ).scalar()

    return int(total_paid) - int(total_owed)


def compute_group_balances(db: Session, group_id: int) -> list[tuple[models.Participant, int]]:
    """Balance for every participant of a group, in roster order."""
    participants = db.query(models.Participant).filter(
        models.Participant.group_id == group_id
    ).order_by(models.Participant.id).all()

    paid_rows = db.query(
        models.Expense.payer_id, func.sum(models.Expense.amount)
    ).filter(
        models.Expense.group_id == group_id
    ).group_by(models.Expense.payer_id).all()
    paid = {payer_id: int(total) for payer_id, total in paid_rows}

    owed_rows = db.query(
        models.Share.participant_id, func.sum(models.Share.amount_owed)
    ).join(
        models.Expense, models.Share.expense_id == models.Expense.id
    ).filter(
        models.Expense.group_id == group_id
    ).group_by(models.Share.participant_id).all()
    owed = {participant_id: int(total) for participant_id, total in owed_rows}

    return [
        (p, paid.get(p.id, 0) - owed.get(p.id, 0))
        for p in participants
    ]


def get_user_participant(db: Session, group_id: int, user_id: int) -> Optional[models.Participant]:
    """The participant row linked to a user account in a group, if any."""
    return db.query(models.Participant).filter(
        models.Participant.group_id == group_id,
        models.Participant.user_id == user_id
    ).order_by(models.Participant.id).first()


def compute_user_balance(db: Session, group_id: int, user_id: int) -> int:
    """Balance of the user's own participant in a group; 0 if they are not linked."""
    participant = get_user_participant(db, group_id, user_id)
    if not participant:
        return 0
    return compute_balance(db, group_id, participant.id)


def count_by_group(db: Session, group_ids: list[int]) -> dict[int, tuple[int, int]]:
    """
    Participant and expense counts for several groups at once.

    Returns:
        group_id -> (participant_count, expense_count)
    """
    if not group_ids:
        return {}

    participant_counts = dict(
        db.query(models.Participant.group_id, func.count(models.Participant.id)).filter(
            models.Participant.group_id.in_(group_ids)
        ).group_by(models.Participant.group_id).all()
    )
    expense_counts = dict(
        db.query(models.Expense.group_id, func.count(models.Expense.id)).filter(
            models.Expense.group_id.in_(group_ids)
        ).group_by(models.Expense.group_id).all()
    )

    return {
        group_id: (participant_counts.get(group_id, 0), expense_counts.get(group_id, 0))
        for group_id in group_ids
    }
