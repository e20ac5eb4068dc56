"""Split calculation for group expenses."""

from typing import Optional

from utils.currency import format_currency
from utils.errors import ValidationError, SplitMismatchError

SPLIT_EQUAL = "equal"
SPLIT_MANUAL = "manual"
SPLIT_TYPES = (SPLIT_EQUAL, SPLIT_MANUAL)

# Allowed gap between the sum of manual shares and the total (1 cent = R$ 0,01)
SPLIT_TOLERANCE = 1


def calculate_equal_shares(total: int, participant_ids: list[int]) -> dict[int, int]:
    """
    Divide `total` cents evenly.

    Everyone gets total // n; the leftover cents go one each to the first
    participants in the order given, so the shares always add up to total.
    """
    count = len(participant_ids)
    share_per_person = total // count
    remainder = total % count

    return {
        participant_id: share_per_person + (1 if idx < remainder else 0)
        for idx, participant_id in enumerate(participant_ids)
    }


def validate_manual_shares(
    total: int,
    participant_ids: list[int],
    manual_values: dict[int, int]
) -> dict[int, int]:
    """Check caller-supplied shares against the selection and the total."""
    unknown = set(manual_values) - set(participant_ids)
    if unknown:
        raise ValidationError(
            f"Manual values given for participants not in the split: {sorted(unknown)}"
        )

    shares = {}
    for participant_id in participant_ids:
        amount = manual_values.get(participant_id, 0)
        if amount < 0:
            raise ValidationError("Manual split amounts cannot be negative")
        shares[participant_id] = amount

    total_split = sum(shares.values())
    discrepancy = total - total_split
    if abs(discrepancy) > SPLIT_TOLERANCE:
        raise SplitMismatchError(
            f"Split amounts ({format_currency(total_split)}) do not match "
            f"the total ({format_currency(total)})",
            discrepancy=discrepancy
        )

    return shares


def compute_shares(
    total: int,
    participant_ids: list[int],
    split_type: str,
    manual_values: Optional[dict[int, int]] = None
) -> dict[int, int]:
    """
    Compute what each selected participant owes for an expense.

    Args:
        total: Expense total in cents, must be positive
        participant_ids: Selected participants, in display order
        split_type: "equal" or "manual"
        manual_values: participant_id -> cents, required for "manual"

    Returns:
        Mapping of participant_id to the cents that participant owes.

    Raises:
        ValidationError: bad input; SplitMismatchError when manual shares
            miss the total by more than one cent.
    """
    if total <= 0:
        raise ValidationError("Expense amount must be greater than zero")
    if not participant_ids:
        raise ValidationError("Select at least one participant to split the expense")
    if len(set(participant_ids)) != len(participant_ids):
        raise ValidationError("Each participant can only appear once in a split")

    if split_type == SPLIT_EQUAL:
        return calculate_equal_shares(total, participant_ids)
    if split_type == SPLIT_MANUAL:
        if manual_values is None:
            raise ValidationError("Manual split requires an amount for each participant")
        return validate_manual_shares(total, participant_ids, manual_values)

    raise ValidationError(f"Split type must be one of {list(SPLIT_TYPES)}")
