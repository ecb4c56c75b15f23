import argparse
import json
import logging
from datetime import date

from cardbonus.agents.orchestrator import RecommendationOrchestrator
from cardbonus.api.app import run as run_api
from cardbonus.config import settings
from cardbonus.integrations.telegram_bot import main as run_bot
from cardbonus.repository import JsonCardStore, build_card_store, build_category_repository
from cardbonus.schemas.requests import RecommendRequest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CardBonus unified entrypoint")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["api", "bot", "best", "expiring"],
        default="api",
        help="Run mode: api (default), bot, best <category>, expiring",
    )
    parser.add_argument("category", nargs="?", help="Spending category for 'best'")
    parser.add_argument("--cards", help="Card JSON file, overrides CARD_DATA_FILE")
    parser.add_argument("--today", type=date.fromisoformat, help="Evaluate as of this date (YYYY-MM-DD)")
    return parser


def _orchestrator(args: argparse.Namespace) -> RecommendationOrchestrator:
    store = JsonCardStore(args.cards) if args.cards else build_card_store()
    return RecommendationOrchestrator(store, build_category_repository())


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.mode == "api":
        run_api()
        return

    if args.mode == "bot":
        run_bot()
        return

    if args.mode == "best":
        if not args.category:
            parser.error("'best' needs a category, e.g. main.py best Dining")
        response = _orchestrator(args).recommend(RecommendRequest(category=args.category, today=args.today))
        print(json.dumps(response.model_dump(mode="json", by_alias=True)["rankedCards"], indent=2))
        return

    descriptors = _orchestrator(args).expiring(args.today)
    print(json.dumps([d.model_dump(mode="json", by_alias=True) for d in descriptors], indent=2))


if __name__ == "__main__":
    main()
