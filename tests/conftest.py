from datetime import date

import pytest

from cardbonus.domain.models import Bonus, Card


def make_bonus(category: str, rate: float, start: date | None = None, end: date | None = None, **extra) -> Bonus:
    return Bonus(category_name=category, reward_rate=rate, start_date=start, end_date=end, **extra)


def make_card(card_id: str, default_rate: float = 1.0, bonuses: list[Bonus] | None = None, **extra) -> Card:
    return Card(
        card_id=card_id,
        card_name=extra.pop("card_name", card_id.title()),
        default_reward_rate=default_rate,
        bonuses=bonuses or [],
        **extra,
    )


@pytest.fixture
def today() -> date:
    return date(2025, 6, 10)


@pytest.fixture
def wallet() -> list[Card]:
    return [
        make_card("dining_card", 1.0, [make_bonus("Dining", 5)]),
        make_card("flat_card", 2.0),
        make_card(
            "travel_card",
            1.5,
            [make_bonus("Travel", 3, date(2025, 1, 1), date(2025, 1, 31))],
        ),
    ]
