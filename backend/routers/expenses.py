"""Expenses router: create, read, update, delete group expenses."""

import logging
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db, commit_or_rollback
from dependencies import get_current_user
from utils.dates import normalize_date
from utils.errors import ValidationError
from utils.splits import compute_shares
from utils.validation import get_expense_or_404, verify_group_access, validate_expense_participants


logger = logging.getLogger(__name__)

router = APIRouter(tags=["expenses"])


def prepare_expense(db: Session, group_id: int, expense: schemas.ExpenseBase) -> tuple[str, str, dict[int, int]]:
    """Validate an expense payload and compute its shares. Nothing is written."""
    title = expense.title.strip()
    if not title:
        raise ValidationError("Expense title is required")

    shares = compute_shares(
        total=expense.amount,
        participant_ids=expense.participant_ids,
        split_type=expense.split_type,
        manual_values=expense.manual_values
    )

    validate_expense_participants(
        db=db,
        group_id=group_id,
        payer_id=expense.payer_id,
        participant_ids=expense.participant_ids
    )

    return title, normalize_date(expense.date), shares


def add_shares(db: Session, expense_id: int, shares: dict[int, int]) -> None:
    db.add_all([
        models.Share(expense_id=expense_id, participant_id=participant_id, amount_owed=amount)
        for participant_id, amount in shares.items()
    ])


def participant_names(db: Session, group_id: int) -> dict[int, str]:
    return {
        p.id: p.name
        for p in db.query(models.Participant).filter(models.Participant.group_id == group_id).all()
    }


@router.post("/groups/{group_id}/expenses", response_model=schemas.Expense)
def create_expense(
    group_id: int,
    expense: schemas.ExpenseCreate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    verify_group_access(db, group_id, current_user.id)
    title, expense_date, shares = prepare_expense(db, group_id, expense)

    db_expense = models.Expense(
        group_id=group_id,
        title=title,
        amount=expense.amount,
        date=expense_date,
        payer_id=expense.payer_id,
        split_type=expense.split_type,
        created_by_id=current_user.id
    )
    db.add(db_expense)
    db.flush()  # assigns db_expense.id
    add_shares(db, db_expense.id, shares)

    commit_or_rollback(db, f"create expense in group {group_id}")
    db.refresh(db_expense)
    logger.info(f"User {current_user.id} created expense {db_expense.id} in group {group_id}")
    return db_expense


@router.get("/groups/{group_id}/expenses", response_model=list[schemas.ExpenseListItem])
def read_group_expenses(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    verify_group_access(db, group_id, current_user.id)

    expenses = db.query(models.Expense).filter(
        models.Expense.group_id == group_id
    ).order_by(models.Expense.date.desc(), models.Expense.id.desc()).all()

    names = participant_names(db, group_id)

    return [
        schemas.ExpenseListItem(
            id=e.id,
            group_id=e.group_id,
            title=e.title,
            amount=e.amount,
            date=e.date,
            payer_id=e.payer_id,
            split_type=e.split_type,
            created_by_id=e.created_by_id,
            payer_name=names.get(e.payer_id, "Unknown")
        )
        for e in expenses
    ]


@router.get("/expenses/{expense_id}", response_model=schemas.ExpenseWithShares)
def get_expense(
    expense_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    expense = get_expense_or_404(db, expense_id)
    verify_group_access(db, expense.group_id, current_user.id)

    names = participant_names(db, expense.group_id)
    shares = db.query(models.Share).filter(
        models.Share.expense_id == expense_id
    ).order_by(models.Share.id).all()

    return schemas.ExpenseWithShares(
        id=expense.id,
        group_id=expense.group_id,
        title=expense.title,
        amount=expense.amount,
        date=expense.date,
        payer_id=expense.payer_id,
        split_type=expense.split_type,
        created_by_id=expense.created_by_id,
        payer_name=names.get(expense.payer_id, "Unknown"),
        shares=[
            schemas.ShareDetail(
                participant_id=s.participant_id,
                participant_name=names.get(s.participant_id, "Unknown"),
                amount_owed=s.amount_owed
            )
            for s in shares
        ]
    )


@router.put("/expenses/{expense_id}", response_model=schemas.Expense)
def update_expense(
    expense_id: int,
    expense_update: schemas.ExpenseUpdate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    expense = get_expense_or_404(db, expense_id)
    # All group members can edit expenses
    verify_group_access(db, expense.group_id, current_user.id)

    title, expense_date, shares = prepare_expense(db, expense.group_id, expense_update)

    expense.title = title
    expense.amount = expense_update.amount
    expense.date = expense_date
    expense.payer_id = expense_update.payer_id
    expense.split_type = expense_update.split_type

    # Shares are replaced wholesale, in the same transaction as the expense update
    db.query(models.Share).filter(models.Share.expense_id == expense_id).delete(synchronize_session=False)
    add_shares(db, expense_id, shares)

    commit_or_rollback(db, f"update expense {expense_id}")
    db.refresh(expense)
    logger.info(f"User {current_user.id} updated expense {expense_id}")
    return expense


@router.delete("/expenses/{expense_id}")
def delete_expense(
    expense_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    expense = get_expense_or_404(db, expense_id)
    verify_group_access(db, expense.group_id, current_user.id)

    db.query(models.Share).filter(models.Share.expense_id == expense_id).delete(synchronize_session=False)
    db.delete(expense)
    commit_or_rollback(db, f"delete expense {expense_id}")
    logger.info(f"User {current_user.id} deleted expense {expense_id}")

    return {"message": "Expense deleted successfully"}
