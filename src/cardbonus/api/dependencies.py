from functools import lru_cache

from cardbonus.agents.orchestrator import RecommendationOrchestrator
from cardbonus.repository import build_card_store, build_category_repository
from cardbonus.repository.category_store import CategoryRepository


@lru_cache
def get_category_repository() -> CategoryRepository:
    return build_category_repository()


@lru_cache
def get_orchestrator() -> RecommendationOrchestrator:
    return RecommendationOrchestrator(build_card_store(), get_category_repository())
