from datetime import date, datetime

import pytest

from cardbonus.domain.models import RewardType
from cardbonus.engine.activity import ClockRequiredError
from cardbonus.engine.expiry import find_expiring_bonuses
from conftest import make_bonus, make_card


def test_emits_today_and_tomorrow_only(today) -> None:
    card = make_card(
        "c1",
        bonuses=[
            make_bonus("Dining", 5, end=date(2025, 6, 11)),
            make_bonus("Gas", 3, end=date(2025, 6, 10)),
            make_bonus("Travel", 2, end=date(2025, 6, 15)),
            make_bonus("Hotels", 2, end=date(2025, 6, 9)),
            make_bonus("Groceries", 4),
        ],
    )

    descriptors = find_expiring_bonuses([card], today)

    assert [(d.category_name, d.days_until_expiry) for d in descriptors] == [
        ("Dining", 1),
        ("Gas", 0),
    ]
    assert descriptors[0].title == "Bonus Expiring Tomorrow"
    assert descriptors[1].title == "Bonus Expiring Today!"


def test_descriptor_carries_render_and_correlation_data(today) -> None:
    card = make_card(
        "gold",
        card_name="Gold Card",
        bonuses=[make_bonus("Dining", 4, end=date(2025, 6, 10), reward_type=RewardType.POINTS)],
    )

    (descriptor,) = find_expiring_bonuses([card], today)

    assert descriptor.card_id == "gold"
    assert descriptor.card_name == "Gold Card"
    assert descriptor.reward_rate == 4
    assert descriptor.body == "Gold Card: 4x on Dining"


def test_time_of_day_is_ignored() -> None:
    card = make_card("c1", bonuses=[make_bonus("Dining", 5, end=date(2025, 6, 11))])

    descriptors = find_expiring_bonuses([card], datetime(2025, 6, 10, 23, 30))

    assert [d.days_until_expiry for d in descriptors] == [1]


def test_repeated_calls_are_not_deduplicated(today) -> None:
    cards = [make_card("c1", bonuses=[make_bonus("Dining", 5, end=date(2025, 6, 10))])]

    assert find_expiring_bonuses(cards, today) == find_expiring_bonuses(cards, today)
    assert len(find_expiring_bonuses(cards, today)) == 1


def test_missing_today_fails_fast() -> None:
    with pytest.raises(ClockRequiredError):
        find_expiring_bonuses([], None)
