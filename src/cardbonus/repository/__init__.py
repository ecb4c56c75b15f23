from cardbonus.config import Settings, settings
from cardbonus.repository.api_client import CardApiClient, CardApiError
from cardbonus.repository.card_store import CardNotFoundError, CardStore, CardStoreError, JsonCardStore
from cardbonus.repository.category_store import (
    DEFAULT_CATEGORIES,
    CategoryRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)


def build_card_store(config: Settings = settings) -> CardStore:
    if config.card_store == "api":
        return CardApiClient(
            base_url=config.api_base_url,
            api_key=config.api_key,
            token=config.api_token,
            timeout=config.api_timeout,
        )
    if config.card_store == "json":
        return JsonCardStore(config.card_data_file)
    raise ValueError(f"Unknown card store: {config.card_store!r} (expected 'json' or 'api')")


def build_category_repository(config: Settings = settings) -> CategoryRepository:
    return CategoryRepository(JsonFileKeyValueStore(config.category_state_file), config.user_id)


__all__ = [
    "DEFAULT_CATEGORIES",
    "CardApiClient",
    "CardApiError",
    "CardNotFoundError",
    "CardStore",
    "CardStoreError",
    "CategoryRepository",
    "InMemoryKeyValueStore",
    "JsonCardStore",
    "JsonFileKeyValueStore",
    "build_card_store",
    "build_category_repository",
]
