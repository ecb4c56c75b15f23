from datetime import date

from pydantic import BaseModel, field_validator, model_validator

from cardbonus.domain.models import Bonus, Card, RewardType

RATE_ERROR = "Please enter a valid rate (0-100)"


class BonusForm(BaseModel):
    category_name: str
    reward_rate: float
    reward_type: RewardType = RewardType.PERCENTAGE
    start_date: date | None = None
    end_date: date | None = None
    is_rotating: bool = False
    notes: str = ""

    @field_validator("category_name")
    @classmethod
    def _category_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please select a category")
        return value

    @field_validator("reward_rate")
    @classmethod
    def _rate_in_range(cls, value: float) -> float:
        # Zero is reserved for a card's default rate.
        if not 0 < value <= 100:
            raise ValueError(RATE_ERROR)
        return value

    @field_validator("notes")
    @classmethod
    def _strip_notes(cls, value: str) -> str:
        return value.strip()

    @model_validator(mode="after")
    def _dates_in_order(self) -> "BonusForm":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("End date must be after start date")
        return self

    def to_bonus(self, bonus_id: str | None = None) -> Bonus:
        return Bonus(bonus_id=bonus_id, **self.model_dump())


class CardForm(BaseModel):
    card_name: str
    issuer: str = ""
    default_reward_rate: float = 1.0
    image_url: str | None = None

    @field_validator("card_name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Card name is required")
        return value

    @field_validator("issuer")
    @classmethod
    def _strip_issuer(cls, value: str) -> str:
        return value.strip()

    @field_validator("default_reward_rate")
    @classmethod
    def _rate_in_range(cls, value: float) -> float:
        if not 0 <= value <= 100:
            raise ValueError(RATE_ERROR)
        return value

    def to_card(self, card_id: str, bonuses: list[Bonus] | None = None) -> Card:
        return Card(
            card_id=card_id,
            card_name=self.card_name,
            issuer=self.issuer or None,
            default_reward_rate=self.default_reward_rate,
            image_url=self.image_url,
            bonuses=bonuses or [],
        )
