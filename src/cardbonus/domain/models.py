from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class RewardType(str, Enum):
    PERCENTAGE = "percentage"
    POINTS = "points"

    @property
    def unit(self) -> str:
        return "%" if self is RewardType.PERCENTAGE else "x"


class _ApiModel(BaseModel):
    # The card API speaks camelCase; Python code uses field names.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_date(value):
    """Reduce API timestamps like ``2025-01-31T00:00:00.000Z`` to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if "T" in value:
            return value.split("T", 1)[0]
    return value


class Bonus(_ApiModel):
    bonus_id: str | None = Field(default=None, alias="id")
    category_name: str
    reward_rate: float
    reward_type: RewardType = RewardType.PERCENTAGE
    start_date: date | None = None
    end_date: date | None = None
    is_rotating: bool = False
    notes: str = ""

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _truncate_timestamp(cls, value):
        return _as_date(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _none_notes(cls, value):
        return value or ""


class Card(_ApiModel):
    card_id: str = Field(alias="id")
    card_name: str
    issuer: str | None = None
    default_reward_rate: float = 1.0
    image_url: str | None = None
    bonuses: list[Bonus] = Field(default_factory=list)

    @field_validator("bonuses", mode="before")
    @classmethod
    def _none_bonuses(cls, value):
        return value or []


class Category(_ApiModel):
    category_id: str = Field(alias="id")
    name: str
    icon: str = "category"
    color: str = "#666666"
    is_custom: bool = False


class MatchResult(_ApiModel):
    card_id: str
    card_name: str
    issuer: str | None = None
    image_url: str | None = None
    is_default: bool
    category_name: str
    reward_rate: float
    reward_type: RewardType = RewardType.PERCENTAGE
    start_date: date | None = None
    end_date: date | None = None
    notes: str = ""

    @computed_field(alias="displayLabel")
    @property
    def display_label(self) -> str:
        return "All purchases" if self.is_default else self.category_name


class NotificationDescriptor(_ApiModel):
    card_id: str
    card_name: str
    category_name: str
    reward_rate: float
    reward_type: RewardType = RewardType.PERCENTAGE
    end_date: date
    days_until_expiry: int

    @computed_field
    @property
    def title(self) -> str:
        if self.days_until_expiry == 0:
            return "Bonus Expiring Today!"
        return "Bonus Expiring Tomorrow"

    @computed_field
    @property
    def body(self) -> str:
        return f"{self.card_name}: {self.reward_rate:g}{self.reward_type.unit} on {self.category_name}"
