"""Tests for the chat transport helpers."""

import asyncio
import pytest
from structlog.testing import capture_logs

from chatledger.audit import AuditLogger
from chatledger.services.storage import InMemoryLedgerStore
from chatledger.transport import build_router, is_allowed, send_reply


class TestIsAllowed:
    """Tests for the chat allow-list."""

    def test_empty_list_allows_everyone(self):
        assert is_allowed(42, set()) is True

    def test_listed_chat(self):
        assert is_allowed(42, {42, 7}) is True

    def test_unlisted_chat(self):
        assert is_allowed(5, {42}) is False


class TestSendReply:
    """Tests for best-effort reply delivery."""

    def test_sends_reply(self):
        sent = []

        async def send(text):
            sent.append(text)

        assert asyncio.run(send_reply(send, "✅ ok")) is True
        assert sent == ["✅ ok"]

    def test_no_reply_for_ignored_messages(self):
        sent = []

        async def send(text):
            sent.append(text)

        assert asyncio.run(send_reply(send, None)) is False
        assert sent == []

    def test_delivery_failure_is_swallowed_and_audited(self):
        store = InMemoryLedgerStore(sheets={"AuditLog": []})
        audit_logger = AuditLogger(store, "AuditLog")

        async def send(text):
            raise RuntimeError("chat closed")

        delivered = asyncio.run(
            send_reply(send, "✅ ok", sender="42", audit_logger=audit_logger)
        )

        assert delivered is False
        rows = store.snapshot("AuditLog")
        assert rows[0][2] == "reply_failed"
        assert rows[0][4] == "42"

    def test_delivery_failure_is_a_structured_log_line(self):
        async def send(text):
            raise RuntimeError("chat closed")

        with capture_logs() as logs:
            asyncio.run(send_reply(send, "✅ ok", sender="42"))

        assert {
            "event": "reply_delivery_failed",
            "sender": "42",
            "error": "chat closed",
            "log_level": "warning",
        } in logs


class TestRouter:
    """Tests for router construction."""

    def test_router_has_message_handler(self):
        router = build_router()
        assert len(router.message.handlers) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
