from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0) -> float:
    """Round away from banker's rounding: 12.5 -> 13, 0.25 -> 0.3 at one digit."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_to_int(value: float) -> int:
    return int(round_half_up(value))


def progress_percentage(count: int, goal: int) -> int:
    if goal <= 0:
        return 0
    return min(round_to_int(count / goal * 100), 100)


def remaining_units(count: int, goal: int) -> int:
    return max(goal - count, 0)


def is_goal_met(count: int, goal: int) -> bool:
    return count >= goal
