"""
Category bookkeeping: built-in categories, user-defined ones and favorites.

Custom categories and favorite ids are device-local preferences, stored per
user in a key-value store under ``@custom_categories:<user>`` and
``@favorite_categories:<user>``.
"""

import json
import logging
import re
from pathlib import Path
from typing import Protocol

from cardbonus.domain.models import Card, Category
from cardbonus.engine.matcher import normalize_category
from cardbonus.repository.files import write_json_atomic

logger = logging.getLogger(__name__)

CUSTOM_CATEGORIES_KEY = "@custom_categories"
FAVORITE_CATEGORIES_KEY = "@favorite_categories"

DEFAULT_CATEGORIES: tuple[Category, ...] = tuple(
    Category(category_id=category_id, name=name, icon=icon, color=color)
    for category_id, name, icon, color in (
        ("groceries", "Groceries", "shopping-cart", "#4CAF50"),
        ("gas", "Gas", "local-gas-station", "#FF9800"),
        ("dining", "Dining", "restaurant", "#F44336"),
        ("travel", "Travel", "flight", "#2196F3"),
        ("online-shopping", "Online Shopping", "computer", "#9C27B0"),
        ("entertainment", "Entertainment", "movie", "#E91E63"),
        ("streaming", "Streaming Services", "play-circle-outline", "#00BCD4"),
        ("utilities", "Utilities", "power", "#607D8B"),
        ("pharmacy", "Pharmacy", "local-pharmacy", "#009688"),
        ("home-improvement", "Home Improvement", "home", "#795548"),
        ("department-stores", "Department Stores", "store", "#FF5722"),
        ("wholesale", "Wholesale Clubs", "warehouse", "#3F51B5"),
        ("transit", "Transit", "train", "#8BC34A"),
        ("rideshare", "Rideshare", "local-taxi", "#FFC107"),
        ("hotels", "Hotels", "hotel", "#673AB7"),
        ("fitness", "Fitness", "fitness-center", "#FF4081"),
        ("subscription", "Subscriptions", "autorenew", "#00ACC1"),
        ("office-supplies", "Office Supplies", "business-center", "#5C6BC0"),
        ("insurance", "Insurance", "security", "#78909C"),
        ("other", "Other", "more-horiz", "#9E9E9E"),
    )
)


class DuplicateCategoryError(ValueError):
    pass


class BuiltinCategoryError(ValueError):
    pass


class CategoryNotFoundError(ValueError):
    pass


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileKeyValueStore:
    """Key-value pairs persisted as one JSON object on disk."""

    def __init__(self, state_file: str | Path):
        self.state_file = Path(state_file)

    def _read(self) -> dict[str, str]:
        if not self.state_file.exists():
            return {}
        try:
            with self.state_file.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable state file %s", self.state_file)
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        write_json_atomic(self.state_file, data)


def slugify(name: str) -> str:
    return re.sub(r"\s+", "_", normalize_category(name))


class CategoryRepository:
    def __init__(self, kv: KeyValueStore, user_id: str):
        self.kv = kv
        self.user_id = user_id

    @property
    def _custom_key(self) -> str:
        return f"{CUSTOM_CATEGORIES_KEY}:{self.user_id}"

    @property
    def _favorites_key(self) -> str:
        return f"{FAVORITE_CATEGORIES_KEY}:{self.user_id}"

    def _load_json_list(self, key: str) -> list:
        raw = self.kv.get_item(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable value stored under %s", key)
            return []
        return data if isinstance(data, list) else []

    def custom_categories(self) -> list[Category]:
        return [Category.model_validate(item) for item in self._load_json_list(self._custom_key)]

    def _save_custom(self, categories: list[Category]) -> None:
        payload = [c.model_dump(mode="json", by_alias=True) for c in categories]
        self.kv.set_item(self._custom_key, json.dumps(payload))

    def list_categories(self) -> list[Category]:
        categories = [*DEFAULT_CATEGORIES, *self.custom_categories()]
        return sorted(categories, key=lambda c: c.name.casefold())

    def get_by_id(self, category_id: str) -> Category | None:
        return next((c for c in self.list_categories() if c.category_id == category_id), None)

    def get_by_name(self, name: str) -> Category | None:
        wanted = normalize_category(name)
        if not wanted:
            return None
        return next((c for c in self.list_categories() if normalize_category(c.name) == wanted), None)

    def resolve(self, name: str) -> Category | None:
        """Map a human-entered category string to its canonical category."""
        return self.get_by_name(name)

    def search(self, query: str = "") -> list[Category]:
        """Categories whose name contains ``query``, favorites first, then by name."""
        needle = normalize_category(query)
        favorites = self.favorite_ids()
        found = [c for c in self.list_categories() if needle in c.name.casefold()]
        return sorted(found, key=lambda c: (c.category_id not in favorites, c.name.casefold()))

    def favorite_categories(self) -> list[Category]:
        favorites = self.favorite_ids()
        return [c for c in self.list_categories() if c.category_id in favorites]

    def _unique_id(self, base: str, taken: set[str]) -> str:
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}_{suffix}"
            suffix += 1
        return candidate

    def add_category(self, name: str, icon: str = "category", color: str = "#666666") -> Category:
        name = name.strip()
        if not name:
            raise ValueError("Category name is required")
        if self.get_by_name(name) is not None:
            raise DuplicateCategoryError(f"Category already exists: {name}")

        custom = self.custom_categories()
        taken = {c.category_id for c in self.list_categories()}
        category = Category(
            category_id=self._unique_id(f"custom_{slugify(name)}", taken),
            name=name,
            icon=icon,
            color=color,
            is_custom=True,
        )
        self._save_custom([*custom, category])
        logger.info("Added custom category %s", category.category_id)
        return category

    def update_category(
        self,
        category_id: str,
        name: str | None = None,
        icon: str | None = None,
        color: str | None = None,
    ) -> Category:
        if any(c.category_id == category_id for c in DEFAULT_CATEGORIES):
            raise BuiltinCategoryError(f"Built-in category cannot be edited: {category_id}")

        custom = self.custom_categories()
        for index, category in enumerate(custom):
            if category.category_id != category_id:
                continue
            update = {}
            if name is not None:
                name = name.strip()
                if not name:
                    raise ValueError("Category name is required")
                clash = self.get_by_name(name)
                if clash is not None and clash.category_id != category_id:
                    raise DuplicateCategoryError(f"Category already exists: {name}")
                update["name"] = name
            if icon is not None:
                update["icon"] = icon
            if color is not None:
                update["color"] = color
            custom[index] = category.model_copy(update=update)
            self._save_custom(custom)
            return custom[index]

        raise CategoryNotFoundError(f"Category not found: {category_id}")

    def delete_category(self, category_id: str) -> None:
        if any(c.category_id == category_id for c in DEFAULT_CATEGORIES):
            raise BuiltinCategoryError(f"Built-in category cannot be deleted: {category_id}")

        custom = self.custom_categories()
        remaining = [c for c in custom if c.category_id != category_id]
        if len(remaining) == len(custom):
            raise CategoryNotFoundError(f"Category not found: {category_id}")
        self._save_custom(remaining)

    def discover_from_cards(self, cards: list[Card]) -> list[Category]:
        """Promote bonus category names missing from the active set to custom categories.

        Safe to run on every load: names are compared normalized, so a second
        pass over the same cards creates nothing.
        """
        known = {normalize_category(c.name) for c in self.list_categories()}
        taken = {c.category_id for c in self.list_categories()}
        discovered: list[Category] = []

        for card in cards:
            for bonus in card.bonuses:
                key = normalize_category(bonus.category_name)
                if not key or key in known:
                    continue
                known.add(key)
                category_id = self._unique_id(f"custom_{slugify(bonus.category_name)}", taken)
                taken.add(category_id)
                discovered.append(
                    Category(category_id=category_id, name=bonus.category_name.strip(), is_custom=True)
                )

        if discovered:
            self._save_custom([*self.custom_categories(), *discovered])
            logger.info("Discovered %d new categories from card bonuses", len(discovered))
        return discovered

    def favorite_ids(self) -> set[str]:
        return {str(item) for item in self._load_json_list(self._favorites_key)}

    def is_favorite(self, category_id: str) -> bool:
        return category_id in self.favorite_ids()

    def toggle_favorite(self, category_id: str) -> bool:
        favorites = self.favorite_ids()
        if category_id in favorites:
            favorites.remove(category_id)
        else:
            favorites.add(category_id)
        self.kv.set_item(self._favorites_key, json.dumps(sorted(favorites)))
        return category_id in favorites
