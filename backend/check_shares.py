"""
Report (and optionally repair) expenses whose shares do not add up to the total.

Usage:
  python check_shares.py                  # Report every group
  python check_shares.py --group-id 3     # Report one group
  python check_shares.py --fix --dry-run  # Preview repairs of equal splits
  python check_shares.py --fix            # Recompute equal splits in place

Manual splits are only reported; their intended amounts cannot be recovered.
"""

import argparse
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

import models
from database import SessionLocal
from utils.splits import SPLIT_EQUAL, SPLIT_TOLERANCE, calculate_equal_shares


def find_inconsistent_expenses(db: Session, group_id: Optional[int] = None) -> list[tuple[models.Expense, int]]:
    """Expenses whose share sum is off by more than the tolerance, with that sum."""
    share_sums = dict(
        db.query(models.Share.expense_id, func.sum(models.Share.amount_owed))
        .group_by(models.Share.expense_id).all()
    )

    query = db.query(models.Expense)
    if group_id is not None:
        query = query.filter(models.Expense.group_id == group_id)

    inconsistent = []
    for expense in query.order_by(models.Expense.id).all():
        total_split = int(share_sums.get(expense.id) or 0)
        if abs(expense.amount - total_split) > SPLIT_TOLERANCE:
            inconsistent.append((expense, total_split))
    return inconsistent


def repair_equal_split(db: Session, expense: models.Expense) -> bool:
    """Recompute an equal split over its current participants. Returns False if it cannot."""
    if expense.split_type != SPLIT_EQUAL:
        return False

    shares = db.query(models.Share).filter(
        models.Share.expense_id == expense.id
    ).order_by(models.Share.id).all()
    if not shares:
        return False

    amounts = calculate_equal_shares(expense.amount, [s.participant_id for s in shares])
    for share in shares:
        share.amount_owed = amounts[share.participant_id]
    return True


def main():
    parser = argparse.ArgumentParser(description='Check that expense shares add up to expense totals')
    parser.add_argument('--group-id', type=int, help='Only check this group')
    parser.add_argument('--fix', action='store_true', help='Recompute shares of inconsistent equal splits')
    parser.add_argument('--dry-run', action='store_true', help='With --fix, preview without saving')
    args = parser.parse_args()

    db = SessionLocal()
    try:
        inconsistent = find_inconsistent_expenses(db, args.group_id)
        if not inconsistent:
            print("All expenses are consistent.")
            return

        repaired = 0
        for expense, total_split in inconsistent:
            print(
                f"Expense {expense.id} '{expense.title}' (group {expense.group_id}, {expense.split_type}): "
                f"amount {expense.amount}, shares {total_split}"
            )
            if args.fix and repair_equal_split(db, expense):
                repaired += 1
                print("  -> shares recomputed")

        if args.fix and not args.dry_run:
            db.commit()
            print(f"\nRepaired {repaired} of {len(inconsistent)} expenses.")
        elif args.fix:
            db.rollback()
            print(f"\nDry run: would repair {repaired} of {len(inconsistent)} expenses.")
        else:
            print(f"\nFound {len(inconsistent)} inconsistent expenses.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
