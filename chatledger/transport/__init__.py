"""Chat transports feeding messages into the ledger flow."""

from chatledger.transport.telegram import build_router, is_allowed, send_reply

__all__ = ["build_router", "is_allowed", "send_reply"]
