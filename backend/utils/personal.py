"""Personal spending: categories, monthly budgets and the monthly summary."""

import os
from sqlalchemy.orm import Session

import models

# (name, icon) in display order; "Outros" is the catch-all
CATEGORIES = [
    ("Alimentação", "🍔"),
    ("Transporte", "🚗"),
    ("Lazer", "🎮"),
    ("Saúde", "💊"),
    ("Educação", "📚"),
    ("Moradia", "🏠"),
    ("Outros", "📦"),
]
CATEGORY_NAMES = tuple(name for name, _ in CATEGORIES)
CATEGORY_ICONS = dict(CATEGORIES)
DEFAULT_CATEGORY = "Alimentação"
FALLBACK_CATEGORY = "Outros"

# Used for months the user never set a budget for (R$ 3.000,00)
DEFAULT_MONTHLY_BUDGET = int(os.getenv("DEFAULT_MONTHLY_BUDGET", "300000"))


def get_monthly_budget(db: Session, user_id: int, year: int, month: int) -> int:
    budget = db.query(models.MonthlyBudget).filter(
        models.MonthlyBudget.user_id == user_id,
        models.MonthlyBudget.year == year,
        models.MonthlyBudget.month == month
    ).first()
    return budget.amount if budget else DEFAULT_MONTHLY_BUDGET


def summarize_month(expenses: list[models.PersonalExpense], budget: int) -> dict:
    """
    Totals for one month of personal expenses against a budget.

    Categories are sorted by total spent, largest first.
    """
    total_spent = sum(e.amount for e in expenses)

    by_category = {}
    for expense in expenses:
        by_category[expense.category] = by_category.get(expense.category, 0) + expense.amount

    categories = [
        {
            "name": name,
            "icon": CATEGORY_ICONS.get(name, CATEGORY_ICONS[FALLBACK_CATEGORY]),
            "total": total,
        }
        for name, total in sorted(by_category.items(), key=lambda item: (-item[1], item[0]))
    ]

    percentage_used = round(total_spent / budget * 100, 1) if budget > 0 else 0.0

    return {
        "total_spent": total_spent,
        "budget": budget,
        "remaining": budget - total_spent,
        "percentage_used": percentage_used,
        "categories": categories,
    }
