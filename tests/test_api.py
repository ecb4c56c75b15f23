from datetime import date

import pytest
from fastapi.testclient import TestClient

from cardbonus.agents.orchestrator import RecommendationOrchestrator
from cardbonus.api.app import app
from cardbonus.api.dependencies import get_category_repository, get_orchestrator
from cardbonus.repository.card_store import JsonCardStore
from cardbonus.repository.category_store import CategoryRepository, InMemoryKeyValueStore
from conftest import make_bonus, make_card


@pytest.fixture
def categories() -> CategoryRepository:
    return CategoryRepository(InMemoryKeyValueStore(), "user-1")


@pytest.fixture
def client(tmp_path, categories):
    store = JsonCardStore(tmp_path / "cards.json")
    store.save_cards(
        [
            make_card("a", 1.0, [make_bonus("Dining", 5, end=date(2025, 6, 11))]),
            make_card("b", 2.0),
        ]
    )
    orchestrator = RecommendationOrchestrator(store, categories, clock=lambda: date(2025, 6, 10))
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_category_repository] = lambda: categories

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_best_card_returns_camel_case_ranking(client) -> None:
    response = client.get("/best-card", params={"category": "dining"})

    assert response.status_code == 200
    data = response.json()
    assert [item["cardId"] for item in data] == ["a", "b"]
    assert data[0]["isDefault"] is False
    assert data[0]["endDate"] == "2025-06-11"
    assert data[1]["isDefault"] is True


def test_best_card_requires_category(client) -> None:
    assert client.get("/best-card").status_code == 422
    assert client.get("/best-card", params={"category": "   "}).status_code == 400


def test_recommend_endpoint(client) -> None:
    response = client.post("/recommend", json={"category": "Dining", "today": "2025-06-12"})

    assert response.status_code == 200
    data = response.json()
    assert data["category"] == "Dining"
    assert data["bestCard"]["cardId"] == "b"
    assert data["knownCategory"]["id"] == "dining"


def test_expiring_endpoint(client) -> None:
    response = client.get("/expiring")

    assert response.status_code == 200
    (item,) = response.json()
    assert item["cardId"] == "a"
    assert item["daysUntilExpiry"] == 1


def test_missing_card_file_is_service_unavailable(tmp_path, categories) -> None:
    orchestrator = RecommendationOrchestrator(JsonCardStore(tmp_path / "absent.json"), categories)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        with TestClient(app) as test_client:
            response = test_client.get("/best-card", params={"category": "Dining"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503


def test_categories_and_favorites(client) -> None:
    toggled = client.post("/categories/dining/favorite")
    assert toggled.status_code == 200
    assert toggled.json()["isFavorite"] is True

    listing = client.get("/categories").json()
    favorites = [item["category"]["id"] for item in listing if item["isFavorite"]]
    assert favorites == ["dining"]

    assert client.post("/categories/nope/favorite").status_code == 404


def test_corrupt_card_file_is_service_unavailable(tmp_path, categories) -> None:
    card_file = tmp_path / "cards.json"
    card_file.write_text('[{"id": "a"}]', encoding="utf-8")
    orchestrator = RecommendationOrchestrator(JsonCardStore(card_file), categories)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        with TestClient(app) as test_client:
            best = test_client.get("/best-card", params={"category": "Dining"})
            expiring = test_client.get("/expiring")
    finally:
        app.dependency_overrides.clear()

    assert best.status_code == 503
    assert expiring.status_code == 503


def test_category_search_lists_favorites_first(client) -> None:
    client.post("/categories/rideshare/favorite")

    found = client.get("/categories", params={"q": "sh"}).json()
    assert [item["category"]["name"] for item in found] == ["Rideshare", "Online Shopping"]
    assert [item["isFavorite"] for item in found] == [True, False]

    favorites = client.get("/categories", params={"favorites_only": True}).json()
    assert [item["category"]["id"] for item in favorites] == ["rideshare"]
