from cardbonus.agents.orchestrator import ExpiryReminder, RecommendationOrchestrator
from cardbonus.domain.models import (
    Bonus,
    Card,
    Category,
    MatchResult,
    NotificationDescriptor,
    RewardType,
)
from cardbonus.engine import (
    ClockRequiredError,
    days_until_expiry,
    find_best_cards,
    find_expiring_bonuses,
    is_active,
    matches,
)
from cardbonus.repository import CategoryRepository, JsonCardStore
from cardbonus.schemas.requests import RecommendRequest

__all__ = [
    "Bonus",
    "Card",
    "Category",
    "CategoryRepository",
    "ClockRequiredError",
    "ExpiryReminder",
    "JsonCardStore",
    "MatchResult",
    "NotificationDescriptor",
    "RecommendRequest",
    "RecommendationOrchestrator",
    "RewardType",
    "days_until_expiry",
    "find_best_cards",
    "find_expiring_bonuses",
    "is_active",
    "matches",
]
