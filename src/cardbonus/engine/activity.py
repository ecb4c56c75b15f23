from datetime import date, datetime

from cardbonus.domain.models import Bonus, Card


class ClockRequiredError(ValueError):
    pass


def as_day(now: date | datetime | None, name: str = "now") -> date:
    if now is None:
        raise ClockRequiredError(f"'{name}' is required; the engine never reads the system clock.")
    if isinstance(now, datetime):
        return now.date()
    return now


def is_active(bonus: Bonus, now: date | datetime) -> bool:
    today = as_day(now)
    if bonus.start_date is not None and bonus.start_date > today:
        return False
    if bonus.end_date is not None and bonus.end_date < today:
        return False
    return True


def days_until_expiry(bonus: Bonus, now: date | datetime) -> int | None:
    today = as_day(now)
    if bonus.end_date is None:
        return None
    return (bonus.end_date - today).days


def is_expiring_soon(bonus: Bonus, now: date | datetime, within_days: int = 7) -> bool:
    days = days_until_expiry(bonus, now)
    return days is not None and 0 <= days <= within_days and is_active(bonus, now)


def active_bonuses(card: Card, now: date | datetime) -> list[Bonus]:
    return [bonus for bonus in card.bonuses if is_active(bonus, now)]


def sort_bonuses_for_display(bonuses: list[Bonus], now: date | datetime) -> list[Bonus]:
    """Active bonuses first, then by reward rate, highest first."""
    today = as_day(now)
    return sorted(bonuses, key=lambda bonus: (not is_active(bonus, today), -bonus.reward_rate))
