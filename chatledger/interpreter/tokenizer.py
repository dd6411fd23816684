"""
Message Tokenizer

Splits a chat message into whitespace-delimited tokens. Casing is kept
as typed so values can be echoed back; matching uses the lowered view
on ChatCommand.
"""

from chatledger.models.command import ChatCommand


class EmptyMessageError(ValueError):
    """Message is empty or whitespace only."""
    pass


def tokenize(text: str) -> ChatCommand:
    """
    Build a ChatCommand from raw message text.

    Raises:
        EmptyMessageError: If nothing is left after trimming
    """
    raw = (text or "").strip()
    if not raw:
        raise EmptyMessageError("Message has no content")
    return ChatCommand(raw_text=raw, tokens=tuple(raw.split()))
