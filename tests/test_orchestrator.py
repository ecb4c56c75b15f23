from datetime import date

import pytest

from cardbonus.agents.orchestrator import ExpiryReminder, RecommendationOrchestrator
from cardbonus.repository.category_store import CategoryRepository, InMemoryKeyValueStore
from cardbonus.schemas.requests import RecommendRequest
from conftest import make_bonus, make_card


class StaticCardStore:
    def __init__(self, cards):
        self.cards = cards
        self.loads = 0

    def load_cards(self):
        self.loads += 1
        return list(self.cards)


@pytest.fixture
def categories() -> CategoryRepository:
    return CategoryRepository(InMemoryKeyValueStore(), "user-1")


def test_recommend_resolves_canonical_category(wallet, categories) -> None:
    orchestrator = RecommendationOrchestrator(
        StaticCardStore(wallet), categories, clock=lambda: date(2025, 6, 10)
    )

    response = orchestrator.recommend(RecommendRequest(category="  DINING "))

    assert response.category == "Dining"
    assert response.known_category.category_id == "dining"
    assert response.best_card.card_id == "dining_card"
    assert len(response.ranked_cards) == len(wallet)


def test_recommend_uses_request_date_over_clock(wallet) -> None:
    orchestrator = RecommendationOrchestrator(StaticCardStore(wallet), clock=lambda: date(2025, 6, 10))

    in_window = orchestrator.recommend(RecommendRequest(category="Travel", today=date(2025, 1, 15)))
    out_of_window = orchestrator.recommend(RecommendRequest(category="Travel"))

    assert in_window.best_card.card_id == "travel_card"
    assert out_of_window.best_card.card_id == "flat_card"
    assert out_of_window.known_category is None


def test_recommend_discovers_custom_categories(categories) -> None:
    store = StaticCardStore([make_card("c1", bonuses=[make_bonus("Coffee Shops", 5)])])
    orchestrator = RecommendationOrchestrator(store, categories, clock=lambda: date(2025, 6, 10))

    orchestrator.recommend(RecommendRequest(category="Dining"))

    assert categories.resolve("coffee shops") is not None


def test_recommend_requires_category(wallet) -> None:
    orchestrator = RecommendationOrchestrator(StaticCardStore(wallet), clock=lambda: date(2025, 6, 10))

    with pytest.raises(ValueError):
        orchestrator.recommend(RecommendRequest(category="   "))


def test_recommend_with_no_cards() -> None:
    orchestrator = RecommendationOrchestrator(StaticCardStore([]), clock=lambda: date(2025, 6, 10))

    response = orchestrator.recommend(RecommendRequest(category="Dining"))

    assert response.best_card is None
    assert response.ranked_cards == []


def test_expiry_reminder_delivers_each_notification_once() -> None:
    store = StaticCardStore(
        [
            make_card(
                "c1",
                bonuses=[
                    make_bonus("Dining", 5, end=date(2025, 6, 10)),
                    make_bonus("Gas", 3, end=date(2025, 6, 11)),
                ],
            )
        ]
    )
    delivered = []
    reminder = ExpiryReminder(store, delivered.append, clock=lambda: date(2025, 6, 10))

    assert reminder.run() == 2
    assert reminder.run() == 0
    assert [d.category_name for d in delivered] == ["Dining", "Gas"]
    assert store.loads == 2


def test_expiry_reminder_sends_again_when_bonus_moves_into_today() -> None:
    store = StaticCardStore([make_card("c1", bonuses=[make_bonus("Gas", 3, end=date(2025, 6, 11))])])
    days = iter([date(2025, 6, 10), date(2025, 6, 11)])
    delivered = []
    reminder = ExpiryReminder(store, delivered.append, clock=lambda: next(days))

    reminder.run()
    reminder.run()

    assert [d.title for d in delivered] == ["Bonus Expiring Tomorrow", "Bonus Expiring Today!"]


def test_expiry_reminder_forgets_bonuses_that_have_ended() -> None:
    store = StaticCardStore([make_card("c1", bonuses=[make_bonus("Gas", 3, end=date(2025, 6, 10))])])
    days = iter([date(2025, 6, 10), date(2025, 6, 11)])
    reminder = ExpiryReminder(store, lambda descriptor: None, clock=lambda: next(days))

    assert reminder.run() == 1
    assert len(reminder._delivered) == 1

    assert reminder.run() == 0
    assert reminder._delivered == set()


def test_expiry_reminder_pending_and_mark_delivered() -> None:
    store = StaticCardStore([make_card("c1", bonuses=[make_bonus("Dining", 5, end=date(2025, 6, 11))])])
    reminder = ExpiryReminder(store, clock=lambda: date(2025, 6, 10))

    (descriptor,) = reminder.pending()
    assert reminder.pending() == [descriptor]

    reminder.mark_delivered(descriptor)
    assert reminder.pending() == []

    with pytest.raises(ValueError):
        reminder.run()
