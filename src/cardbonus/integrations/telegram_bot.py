import asyncio

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from cardbonus.agents.orchestrator import ExpiryReminder, RecommendationOrchestrator
from cardbonus.config import settings
from cardbonus.domain.models import NotificationDescriptor
from cardbonus.repository import CardApiError, build_card_store, build_category_repository
from cardbonus.repository.card_store import CardStoreError
from cardbonus.schemas.requests import RecommendRequest
from cardbonus.schemas.responses import RecommendResponse

STORE_ERRORS = (FileNotFoundError, CardStoreError, CardApiError)

orchestrator = RecommendationOrchestrator(build_card_store(), build_category_repository())


def format_ranking(payload: RecommendResponse, limit: int = 5) -> str:
    if payload.best_card is None:
        return "No cards yet. Add a card first."

    lines = [f"Best card for {payload.category}:"]
    for position, result in enumerate(payload.ranked_cards[:limit], start=1):
        line = f"{position}. {result.card_name}: {result.reward_rate:g}{result.reward_type.unit} ({result.display_label})"
        if result.end_date and not result.is_default:
            line += f", expires {result.end_date.isoformat()}"
        lines.append(line)
    return "\n".join(lines)


def format_expiring(descriptors: list[NotificationDescriptor]) -> str:
    if not descriptors:
        return "No bonuses expire today or tomorrow."
    return "\n".join(f"{d.title}\n{d.body}" for d in descriptors)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(
        "Send a spending category, e.g. 'Dining', and I will rank your cards. "
        "Use /expiring to see bonuses ending today or tomorrow, "
        "/remind to get those reminders automatically and /stop to end them."
    )


async def expiring(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    try:
        descriptors = orchestrator.expiring()
    except STORE_ERRORS as exc:
        await update.message.reply_text(f"Could not load cards: {exc}")
        return
    await update.message.reply_text(format_expiring(descriptors))


async def send_reminders(context: ContextTypes.DEFAULT_TYPE) -> None:
    job = context.job
    reminder: ExpiryReminder = job.data
    try:
        descriptors = reminder.pending()
    except STORE_ERRORS as exc:
        await context.bot.send_message(chat_id=job.chat_id, text=f"Could not load cards: {exc}")
        return

    for descriptor in descriptors:
        await context.bot.send_message(chat_id=job.chat_id, text=f"{descriptor.title}\n{descriptor.body}")
        reminder.mark_delivered(descriptor)


async def remind(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    chat_id = update.effective_chat.id
    name = f"expiry-{chat_id}"
    if context.job_queue.get_jobs_by_name(name):
        await update.message.reply_text("Expiry reminders are already on.")
        return

    context.job_queue.run_repeating(
        send_reminders,
        interval=settings.reminder_interval_seconds,
        first=5,
        chat_id=chat_id,
        name=name,
        data=ExpiryReminder(orchestrator.card_store, clock=orchestrator.clock),
    )
    await update.message.reply_text("Expiry reminders are on. I will message you when a bonus ends today or tomorrow.")


async def stop(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    jobs = context.job_queue.get_jobs_by_name(f"expiry-{update.effective_chat.id}")
    for job in jobs:
        job.schedule_removal()
    await update.message.reply_text("Expiry reminders are off." if jobs else "Expiry reminders were not on.")


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    text = update.message.text or ""
    try:
        result = orchestrator.recommend(RecommendRequest(category=text))
    except STORE_ERRORS as exc:
        await update.message.reply_text(f"Could not load cards: {exc}")
        return
    except ValueError as exc:
        await update.message.reply_text(f"Search failed: {exc}")
        return
    await update.message.reply_text(format_ranking(result))


def main() -> None:
    if not settings.telegram_bot_token:
        raise ValueError("TELEGRAM_BOT_TOKEN is required.")

    app = Application.builder().token(settings.telegram_bot_token).build()
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("expiring", expiring))
    app.add_handler(CommandHandler("remind", remind))
    app.add_handler(CommandHandler("stop", stop))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    app.run_polling()


if __name__ == "__main__":
    asyncio.run(asyncio.to_thread(main))
