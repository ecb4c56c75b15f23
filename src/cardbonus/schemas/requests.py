from datetime import date

from pydantic import BaseModel


class RecommendRequest(BaseModel):
    category: str | None = None
    today: date | None = None
