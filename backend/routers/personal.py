"""Personal finance router: personal expenses, monthly budgets and the monthly summary."""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user
from utils.dates import normalize_date, resolve_month, month_bounds
from utils.errors import ValidationError
from utils.personal import get_monthly_budget, summarize_month


router = APIRouter(tags=["personal"])


def month_expenses(db: Session, user_id: int, year: int, month: int) -> list[models.PersonalExpense]:
    first_day, last_day = month_bounds(year, month)
    return db.query(models.PersonalExpense).filter(
        models.PersonalExpense.user_id == user_id,
        models.PersonalExpense.date >= first_day,
        models.PersonalExpense.date <= last_day
    ).order_by(models.PersonalExpense.date.desc(), models.PersonalExpense.id.desc()).all()


@router.post("/personal-expenses", response_model=schemas.PersonalExpense)
def create_personal_expense(
    expense: schemas.PersonalExpenseCreate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    title = expense.title.strip()
    if not title or expense.amount <= 0:
        raise ValidationError("Fill in a title and an amount greater than zero")

    db_expense = models.PersonalExpense(
        user_id=current_user.id,
        title=title,
        amount=expense.amount,
        category=expense.category,
        date=normalize_date(expense.date)
    )
    db.add(db_expense)
    db.commit()
    db.refresh(db_expense)
    return db_expense


@router.get("/personal-expenses", response_model=list[schemas.PersonalExpense])
def read_personal_expenses(
    current_user: Annotated[models.User, Depends(get_current_user)],
    year: Optional[int] = None,
    month: Optional[int] = None,
    db: Session = Depends(get_db)
):
    year, month = resolve_month(year, month)
    return month_expenses(db, current_user.id, year, month)


@router.get("/personal-expenses/summary", response_model=schemas.MonthlySummary)
def get_monthly_summary(
    current_user: Annotated[models.User, Depends(get_current_user)],
    year: Optional[int] = None,
    month: Optional[int] = None,
    db: Session = Depends(get_db)
):
    year, month = resolve_month(year, month)
    summary = summarize_month(
        month_expenses(db, current_user.id, year, month),
        get_monthly_budget(db, current_user.id, year, month)
    )
    return schemas.MonthlySummary(year=year, month=month, **summary)


@router.delete("/personal-expenses/{expense_id}")
def delete_personal_expense(
    expense_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    expense = db.query(models.PersonalExpense).filter(
        models.PersonalExpense.id == expense_id,
        models.PersonalExpense.user_id == current_user.id
    ).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    db.delete(expense)
    db.commit()
    return {"message": "Expense deleted successfully"}


@router.get("/budgets/{year}/{month}", response_model=schemas.MonthlyBudget)
def read_budget(
    year: int,
    month: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    year, month = resolve_month(year, month)
    return schemas.MonthlyBudget(
        year=year, month=month, amount=get_monthly_budget(db, current_user.id, year, month)
    )


@router.put("/budgets/{year}/{month}", response_model=schemas.MonthlyBudget)
def set_budget(
    year: int,
    month: int,
    budget: schemas.BudgetUpdate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    year, month = resolve_month(year, month)
    if budget.amount <= 0:
        raise ValidationError("Budget must be greater than zero")

    db_budget = db.query(models.MonthlyBudget).filter(
        models.MonthlyBudget.user_id == current_user.id,
        models.MonthlyBudget.year == year,
        models.MonthlyBudget.month == month
    ).first()
    if db_budget:
        db_budget.amount = budget.amount
    else:
        db.add(models.MonthlyBudget(user_id=current_user.id, year=year, month=month, amount=budget.amount))
    db.commit()

    return schemas.MonthlyBudget(year=year, month=month, amount=budget.amount)
