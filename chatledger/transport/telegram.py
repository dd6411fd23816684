"""Telegram transport: text messages in, ledger replies out."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Optional

from aiogram import F, Router
from aiogram.types import Message
import structlog

from chatledger.audit import AuditLogger, create_correlation_id
from chatledger.orchestrator import LedgerCommandFlow

logger = structlog.get_logger(__name__)


def is_allowed(chat_id: int, allowed_chat_ids: set[int]) -> bool:
    """An empty allow-list accepts every chat."""

    return not allowed_chat_ids or chat_id in allowed_chat_ids


async def send_reply(
    send: Callable[[str], Awaitable[object]],
    reply: Optional[str],
    *,
    sender: Optional[str] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> bool:
    """Send a reply, swallowing delivery failures.

    Returns True when a reply was sent.
    """

    if reply is None:
        return False
    try:
        await send(reply)
    except Exception as error:
        logger.warning("reply_delivery_failed", sender=sender, error=str(error))
        if audit_logger is not None:
            await audit_logger.log_reply_failed(sender=sender, error_message=str(error))
        return False
    return True


def build_router() -> Router:
    """Return a router handling every plain text message."""

    router = Router()

    @router.message(F.text)
    async def on_text(
        message: Message,
        command_flow: LedgerCommandFlow,
        audit_logger: AuditLogger,
        allowed_chat_ids: set[int],
    ) -> None:
        if not is_allowed(message.chat.id, allowed_chat_ids):
            return

        sender = str(message.from_user.id) if message.from_user else str(message.chat.id)
        reply = await command_flow.handle_message(
            message.text or "",
            sender=sender,
            correlation_id=create_correlation_id(),
        )
        await send_reply(message.reply, reply, sender=sender, audit_logger=audit_logger)

    return router


__all__ = ["build_router", "is_allowed", "send_reply"]
