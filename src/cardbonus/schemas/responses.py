from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cardbonus.domain.models import Category, MatchResult


class RecommendResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: str
    known_category: Category | None = None
    best_card: MatchResult | None = None
    ranked_cards: list[MatchResult]


class CategoryView(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: Category
    is_favorite: bool = False
