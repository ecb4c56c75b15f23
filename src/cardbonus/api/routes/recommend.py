from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from cardbonus.agents.orchestrator import RecommendationOrchestrator
from cardbonus.api.dependencies import get_orchestrator
from cardbonus.domain.models import MatchResult, NotificationDescriptor
from cardbonus.repository.api_client import CardApiError
from cardbonus.repository.card_store import CardStoreError
from cardbonus.schemas.requests import RecommendRequest
from cardbonus.schemas.responses import RecommendResponse

router = APIRouter(tags=["recommend"])

# Card store failures are never the caller's fault.
STORE_ERRORS = (FileNotFoundError, CardStoreError, CardApiError)


def _store_error(exc: Exception) -> HTTPException:
    if isinstance(exc, CardApiError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


def _recommend(orchestrator: RecommendationOrchestrator, request: RecommendRequest) -> RecommendResponse:
    if not (request.category or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A category is required.")
    try:
        return orchestrator.recommend(request)
    except STORE_ERRORS as exc:
        raise _store_error(exc) from exc


@router.post("/recommend", response_model=RecommendResponse)
def recommend(
    request: RecommendRequest,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> RecommendResponse:
    return _recommend(orchestrator, request)


@router.get("/best-card", response_model=list[MatchResult])
def best_card(
    category: str = Query(..., min_length=1),
    today: date | None = None,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> list[MatchResult]:
    return _recommend(orchestrator, RecommendRequest(category=category, today=today)).ranked_cards


@router.get("/expiring", response_model=list[NotificationDescriptor])
def expiring(
    today: date | None = None,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> list[NotificationDescriptor]:
    try:
        return orchestrator.expiring(today)
    except STORE_ERRORS as exc:
        raise _store_error(exc) from exc
