import uvicorn
from fastapi import FastAPI

from cardbonus.api.routes.categories import router as categories_router
from cardbonus.api.routes.health import router as health_router
from cardbonus.api.routes.recommend import router as recommend_router
from cardbonus.config import settings

app = FastAPI(title="CardBonus API", version="0.1.0")
app.include_router(health_router)
app.include_router(recommend_router)
app.include_router(categories_router)


def run() -> None:
    uvicorn.run("cardbonus.api.app:app", host=settings.app_host, port=settings.app_port, reload=False)
