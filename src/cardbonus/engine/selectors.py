from datetime import date, datetime

from cardbonus.domain.models import Card, MatchResult
from cardbonus.engine.activity import as_day
from cardbonus.engine.evaluator import evaluate_card


def find_best_cards(cards: list[Card], requested_category: str, now: date | datetime) -> list[MatchResult]:
    today = as_day(now)
    results = [evaluate_card(card, requested_category, today) for card in cards]
    # list.sort is stable: equal keys keep card insertion order.
    results.sort(key=lambda item: (-item.reward_rate, item.is_default))
    return results
