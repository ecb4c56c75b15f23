import logging
from collections.abc import Callable
from datetime import date

from cardbonus.domain.models import NotificationDescriptor
from cardbonus.engine.expiry import find_expiring_bonuses
from cardbonus.engine.selectors import find_best_cards
from cardbonus.repository.card_store import CardStore
from cardbonus.repository.category_store import CategoryRepository
from cardbonus.schemas.requests import RecommendRequest
from cardbonus.schemas.responses import RecommendResponse

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


class RecommendationOrchestrator:
    def __init__(
        self,
        card_store: CardStore,
        category_repository: CategoryRepository | None = None,
        clock: Clock = date.today,
    ):
        self.card_store = card_store
        self.category_repository = category_repository
        self.clock = clock

    def _resolve_category(self, requested: str):
        if self.category_repository is None:
            return requested, None
        known = self.category_repository.resolve(requested)
        if known is None:
            return requested, None
        return known.name, known

    def recommend(self, request: RecommendRequest) -> RecommendResponse:
        requested = (request.category or "").strip()
        if not requested:
            raise ValueError("A category is required.")

        category_name, known = self._resolve_category(requested)
        cards = self.card_store.load_cards()
        if self.category_repository is not None:
            self.category_repository.discover_from_cards(cards)

        today = request.today or self.clock()
        ranked = find_best_cards(cards, category_name, today)
        logger.info("Ranked %d card(s) for category %r", len(ranked), category_name)

        return RecommendResponse(
            category=category_name,
            known_category=known,
            best_card=ranked[0] if ranked else None,
            ranked_cards=ranked,
        )

    def expiring(self, today: date | None = None) -> list[NotificationDescriptor]:
        cards = self.card_store.load_cards()
        return find_expiring_bonuses(cards, today or self.clock())


class ExpiryReminder:
    """Delivers expiring-bonus notifications, each at most once per reminder.

    Async delivery channels call pending() and mark_delivered() themselves;
    synchronous ones pass ``deliver`` and call run().
    """

    def __init__(
        self,
        card_store: CardStore,
        deliver: Callable[[NotificationDescriptor], None] | None = None,
        clock: Clock = date.today,
    ):
        self.card_store = card_store
        self.deliver = deliver
        self.clock = clock
        self._delivered: set[tuple] = set()

    @staticmethod
    def _key(descriptor: NotificationDescriptor) -> tuple:
        return (
            descriptor.card_id,
            descriptor.category_name.casefold(),
            descriptor.end_date,
            descriptor.days_until_expiry,
        )

    def pending(self) -> list[NotificationDescriptor]:
        today = self.clock()
        # Keys for bonuses that already ended can never match again.
        self._delivered = {key for key in self._delivered if key[2] >= today}
        cards = self.card_store.load_cards()
        return [d for d in find_expiring_bonuses(cards, today) if self._key(d) not in self._delivered]

    def mark_delivered(self, descriptor: NotificationDescriptor) -> None:
        self._delivered.add(self._key(descriptor))

    def run(self) -> int:
        if self.deliver is None:
            raise ValueError("run() needs a deliver callable; use pending() instead.")
        sent = 0
        for descriptor in self.pending():
            self.deliver(descriptor)
            self.mark_delivered(descriptor)
            sent += 1

        if sent:
            logger.info("Scheduled %d expiry notification(s)", sent)
        return sent
