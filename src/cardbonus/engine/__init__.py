from cardbonus.engine.activity import (
    ClockRequiredError,
    active_bonuses,
    days_until_expiry,
    is_active,
    is_expiring_soon,
    sort_bonuses_for_display,
)
from cardbonus.engine.evaluator import best_bonus, evaluate_card
from cardbonus.engine.expiry import find_expiring_bonuses
from cardbonus.engine.matcher import matches, normalize_category
from cardbonus.engine.selectors import find_best_cards

__all__ = [
    "ClockRequiredError",
    "active_bonuses",
    "best_bonus",
    "days_until_expiry",
    "evaluate_card",
    "find_best_cards",
    "find_expiring_bonuses",
    "is_active",
    "is_expiring_soon",
    "matches",
    "normalize_category",
    "sort_bonuses_for_display",
]
