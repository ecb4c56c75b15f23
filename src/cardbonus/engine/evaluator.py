import logging
import math
from datetime import date, datetime

from cardbonus.domain.models import Bonus, Card, MatchResult
from cardbonus.engine.activity import as_day, is_active
from cardbonus.engine.matcher import matches

logger = logging.getLogger(__name__)


def is_well_formed(bonus: Bonus) -> bool:
    if not math.isfinite(bonus.reward_rate) or not 0 < bonus.reward_rate <= 100:
        return False
    if bonus.start_date and bonus.end_date and bonus.start_date > bonus.end_date:
        return False
    return True


def _bonus_priority(bonus: Bonus) -> tuple:
    # Highest rate first, then the soonest defined end date; open-ended last.
    if bonus.end_date is None:
        return (-bonus.reward_rate, 1, date.max)
    return (-bonus.reward_rate, 0, bonus.end_date)


def best_bonus(card: Card, requested_category: str, now: date | datetime) -> Bonus | None:
    today = as_day(now)
    candidates: list[Bonus] = []
    for bonus in card.bonuses:
        if not matches(bonus.category_name, requested_category):
            continue
        if not is_well_formed(bonus):
            logger.debug("Skipping malformed bonus %s on card %s", bonus.bonus_id, card.card_id)
            continue
        if is_active(bonus, today):
            candidates.append(bonus)

    if not candidates:
        return None
    # min() keeps the first of equal keys, so insertion order breaks the last tie.
    return min(candidates, key=_bonus_priority)


def evaluate_card(card: Card, requested_category: str, now: date | datetime) -> MatchResult:
    bonus = best_bonus(card, requested_category, now)
    if bonus is None:
        return MatchResult(
            card_id=card.card_id,
            card_name=card.card_name,
            issuer=card.issuer,
            image_url=card.image_url,
            is_default=True,
            category_name=(requested_category or "").strip(),
            reward_rate=card.default_reward_rate,
        )

    return MatchResult(
        card_id=card.card_id,
        card_name=card.card_name,
        issuer=card.issuer,
        image_url=card.image_url,
        is_default=False,
        category_name=bonus.category_name,
        reward_rate=bonus.reward_rate,
        reward_type=bonus.reward_type,
        start_date=bonus.start_date,
        end_date=bonus.end_date,
        notes=bonus.notes,
    )
