import json
import logging
import uuid
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from cardbonus.domain.models import Bonus, Card
from cardbonus.repository.files import write_json_atomic

logger = logging.getLogger(__name__)


class CardNotFoundError(LookupError):
    pass


class CardStoreError(RuntimeError):
    """The stored card data cannot be read."""


class CardStore(Protocol):
    def load_cards(self) -> list[Card]:
        """Return a snapshot of every card with its bonuses."""


class JsonCardStore:
    """Cards kept in a local JSON file, one array of card objects."""

    def __init__(self, card_file: str | Path):
        self.card_file = Path(card_file)

    def load_cards(self) -> list[Card]:
        if not self.card_file.exists():
            raise FileNotFoundError(f"Card file not found: {self.card_file}")

        try:
            with self.card_file.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
            if not isinstance(data, list):
                raise CardStoreError(f"Card file must hold a JSON array: {self.card_file}")
            return [Card.model_validate(item) for item in data]
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.error("Unreadable card file %s: %s", self.card_file, exc)
            raise CardStoreError(f"Card file is corrupt: {self.card_file}") from exc

    def save_cards(self, cards: list[Card]) -> None:
        payload = [card.model_dump(mode="json", by_alias=True) for card in cards]
        write_json_atomic(self.card_file, payload)

    def _load_or_empty(self) -> list[Card]:
        if not self.card_file.exists():
            return []
        return self.load_cards()

    def get_card(self, card_id: str) -> Card:
        for card in self._load_or_empty():
            if card.card_id == card_id:
                return card
        raise CardNotFoundError(f"Card not found: {card_id}")

    def upsert_card(self, card: Card) -> Card:
        cards = self._load_or_empty()
        for index, existing in enumerate(cards):
            if existing.card_id == card.card_id:
                cards[index] = card
                break
        else:
            cards.append(card)
        self.save_cards(cards)
        logger.info("Saved card %s", card.card_id)
        return card

    def delete_card(self, card_id: str) -> bool:
        cards = self._load_or_empty()
        remaining = [card for card in cards if card.card_id != card_id]
        if len(remaining) == len(cards):
            return False
        # Bonuses live inside the card record and go with it.
        self.save_cards(remaining)
        logger.info("Deleted card %s", card_id)
        return True

    def add_bonus(self, card_id: str, bonus: Bonus) -> Bonus:
        card = self.get_card(card_id)
        if bonus.bonus_id is None:
            bonus = bonus.model_copy(update={"bonus_id": uuid.uuid4().hex})
        card.bonuses.append(bonus)
        self.upsert_card(card)
        return bonus

    def update_bonus(self, card_id: str, bonus_id: str, bonus: Bonus) -> Bonus:
        card = self.get_card(card_id)
        updated = bonus.model_copy(update={"bonus_id": bonus_id})
        for index, existing in enumerate(card.bonuses):
            if existing.bonus_id == bonus_id:
                card.bonuses[index] = updated
                break
        else:
            raise CardNotFoundError(f"Bonus {bonus_id} not found on card {card_id}")
        self.upsert_card(card)
        return updated

    def delete_bonus(self, card_id: str, bonus_id: str) -> bool:
        card = self.get_card(card_id)
        remaining = [bonus for bonus in card.bonuses if bonus.bonus_id != bonus_id]
        if len(remaining) == len(card.bonuses):
            return False
        card.bonuses = remaining
        self.upsert_card(card)
        return True
