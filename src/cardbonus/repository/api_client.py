"""
Remote card API client.

Mirrors the endpoints of the hosted card backend: card and bonus CRUD,
the server-side best-card lookup and the user profile.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError

from cardbonus.config import settings
from cardbonus.domain.models import Bonus, Card, Category, MatchResult

logger = logging.getLogger(__name__)


class CardApiError(RuntimeError):
    """Raised when the card API request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CardApiClient:
    """
    Client for the remote card API.

    Satisfies the CardStore protocol through load_cards(), so the
    orchestrator can rank cards fetched over the network.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        token_refresher: Callable[[], str | None] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API base URL. Defaults to settings.api_base_url.
            api_key: Value for the X-API-Key header.
            token: Bearer token of the signed-in user.
            timeout: Request timeout in seconds.
            token_refresher: Called once when the API reports an invalid
                token; returns a new token or None.
            transport: Optional httpx transport, used by tests.
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.api_key = settings.api_key if api_key is None else api_key
        self.token = settings.api_token if token is None else token
        self.timeout = settings.api_timeout if timeout is None else timeout
        self.token_refresher = token_refresher
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def _is_invalid_token(response: httpx.Response) -> bool:
        if response.status_code != 401:
            return False
        try:
            return response.json().get("error") == "Invalid token"
        except ValueError:
            return False

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        logger.info("API Request: %s %s", method, path)
        try:
            with httpx.Client(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = client.request(method, path, headers=self._headers(), **kwargs)

                if self._is_invalid_token(response) and self.token_refresher is not None:
                    new_token = self.token_refresher()
                    if new_token:
                        logger.info("Token refreshed, retrying %s %s", method, path)
                        self.token = new_token
                        response = client.request(method, path, headers=self._headers(), **kwargs)

                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("API Response Error: %s %s", exc.response.status_code, path)
            raise CardApiError(
                f"{method} {path} failed with status {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("API Request Error: %s %s: %s", method, path, exc)
            raise CardApiError(f"{method} {path} failed: {exc}") from exc

        logger.info("API Response: %s %s", response.status_code, path)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Cards

    def get_cards(self) -> list[Card]:
        data = self._request("GET", "/cards") or []
        try:
            return [Card.model_validate(item) for item in data]
        except ValidationError as exc:
            logger.error("API returned invalid cards: %s", exc)
            raise CardApiError(f"GET /cards returned invalid card data: {exc}") from exc

    def load_cards(self) -> list[Card]:
        return self.get_cards()

    def get_card(self, card_id: str) -> Card:
        return Card.model_validate(self._request("GET", f"/cards/{card_id}"))

    def create_card(self, card_data: dict) -> Card:
        return Card.model_validate(self._request("POST", "/cards", json=card_data))

    def update_card(self, card_id: str, card_data: dict) -> Card:
        return Card.model_validate(self._request("PUT", f"/cards/{card_id}", json=card_data))

    def delete_card(self, card_id: str) -> None:
        self._request("DELETE", f"/cards/{card_id}")

    # Bonuses

    def create_bonus(self, card_id: str, bonus_data: dict) -> Bonus:
        return Bonus.model_validate(self._request("POST", f"/cards/{card_id}/bonuses", json=bonus_data))

    def update_bonus(self, card_id: str, bonus_id: str, bonus_data: dict) -> Bonus:
        return Bonus.model_validate(
            self._request("PUT", f"/cards/{card_id}/bonuses/{bonus_id}", json=bonus_data)
        )

    def delete_bonus(self, card_id: str, bonus_id: str) -> None:
        self._request("DELETE", f"/cards/{card_id}/bonuses/{bonus_id}")

    # Server-side ranking and user data

    def find_best_card(self, category: str) -> list[MatchResult]:
        data = self._request("GET", "/best-card", params={"category": category}) or []
        return [MatchResult.model_validate(item) for item in data]

    def get_user_profile(self) -> dict:
        return self._request("GET", "/user/profile") or {}

    def update_user_categories(self, custom_categories: list[Category]) -> dict:
        payload = {
            "customCategories": [c.model_dump(mode="json", by_alias=True) for c in custom_categories]
        }
        return self._request("PUT", "/user/categories", json=payload) or {}
