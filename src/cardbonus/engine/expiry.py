from datetime import date, datetime

from cardbonus.domain.models import Card, NotificationDescriptor
from cardbonus.engine.activity import as_day

EXPIRY_HORIZON_DAYS = (0, 1)


def find_expiring_bonuses(cards: list[Card], today: date | datetime) -> list[NotificationDescriptor]:
    """Describe every bonus that ends today or tomorrow.

    Stateless: calling this twice on the same day yields the same descriptors,
    so delivery layers must dedupe on their own.
    """
    day = as_day(today, name="today")
    descriptors: list[NotificationDescriptor] = []

    for card in cards:
        for bonus in card.bonuses:
            if bonus.end_date is None:
                continue
            days_left = (bonus.end_date - day).days
            if days_left not in EXPIRY_HORIZON_DAYS:
                continue
            descriptors.append(
                NotificationDescriptor(
                    card_id=card.card_id,
                    card_name=card.card_name,
                    category_name=bonus.category_name,
                    reward_rate=bonus.reward_rate,
                    reward_type=bonus.reward_type,
                    end_date=bonus.end_date,
                    days_until_expiry=days_left,
                )
            )

    return descriptors
