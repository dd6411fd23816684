"""Application entry point for the Chat Ledger Telegram bot."""

from __future__ import annotations

import asyncio
import sys

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage
from pydantic import ValidationError
import structlog

from chatledger.audit import configure_logging
from chatledger.config import get_settings
from chatledger.orchestrator import create_app_components
from chatledger.services.storage import StorageError
from chatledger.transport import build_router

logger = structlog.get_logger(__name__)


class StartupError(RuntimeError):
    """Raised when the bot cannot reach its ledger at startup."""


async def on_startup() -> tuple[Dispatcher, Bot]:
    """Configure application components and return dispatcher and bot."""

    settings = get_settings()
    configure_logging(settings.app.log_level)

    command_flow, sheets_client, _ = create_app_components(use_storage=True)

    # Authorization failures are fatal here, never per message
    try:
        title = await asyncio.to_thread(sheets_client.verify_access)
    except StorageError as error:
        raise StartupError(str(error)) from error
    logger.info("sheets_access_verified", spreadsheet=title)

    telegram = settings.telegram
    bot = Bot(token=telegram.bot_token)
    dispatcher = Dispatcher(storage=MemoryStorage())
    dispatcher.include_router(build_router())

    dispatcher["command_flow"] = command_flow
    dispatcher["audit_logger"] = command_flow.audit_logger
    dispatcher["allowed_chat_ids"] = telegram.allowed_chat_ids_set

    return dispatcher, bot


async def main() -> None:
    """Run polling using the configured dispatcher and bot."""

    dispatcher, bot = await on_startup()

    try:
        logger.info("bot_polling_started")
        await dispatcher.start_polling(bot)
    finally:
        await dispatcher.storage.close()
        await bot.session.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (ValidationError, StartupError) as error:
        configure_logging("ERROR")
        logger.error("startup_failed", error=str(error))
        sys.exit(1)
