from fastapi import APIRouter, Depends, HTTPException, status

from cardbonus.api.dependencies import get_category_repository
from cardbonus.repository.category_store import CategoryRepository
from cardbonus.schemas.responses import CategoryView

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryView])
def list_categories(
    q: str = "",
    favorites_only: bool = False,
    repository: CategoryRepository = Depends(get_category_repository),
) -> list[CategoryView]:
    if favorites_only:
        return [CategoryView(category=category, is_favorite=True) for category in repository.favorite_categories()]

    favorites = repository.favorite_ids()
    return [
        CategoryView(category=category, is_favorite=category.category_id in favorites)
        for category in repository.search(q)
    ]


@router.post("/{category_id}/favorite", response_model=CategoryView)
def toggle_favorite(
    category_id: str,
    repository: CategoryRepository = Depends(get_category_repository),
) -> CategoryView:
    category = repository.get_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category not found: {category_id}")
    return CategoryView(category=category, is_favorite=repository.toggle_favorite(category_id))
