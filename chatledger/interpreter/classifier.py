"""
Command Classifier

Maps the leading keyword of a message to an operation kind and returns
the tokens left for field extraction.

    venta / sale     -> RECORD_SALE
    gastos           -> RECORD_PERSONAL_EXPENSE
    facturado        -> RECORD_BILLED_OUTFLOW
    sin facturar     -> RECORD_UNBILLED_OUTFLOW
    anything else    -> UNRECOGNIZED
"""

from chatledger.models.command import ChatCommand, OperationKind


SINGLE_KEYWORDS: dict[str, OperationKind] = {
    "venta": OperationKind.RECORD_SALE,
    "sale": OperationKind.RECORD_SALE,
    "gastos": OperationKind.RECORD_PERSONAL_EXPENSE,
    "facturado": OperationKind.RECORD_BILLED_OUTFLOW,
}

# Two-word commands: (first, second) -> kind
PAIR_KEYWORDS: dict[tuple[str, str], OperationKind] = {
    ("sin", "facturar"): OperationKind.RECORD_UNBILLED_OUTFLOW,
}


def classify(command: ChatCommand) -> tuple[OperationKind, tuple[str, ...]]:
    """
    Classify a command.

    Returns:
        (kind, remaining_tokens) - the command word(s) are dropped from
        the remaining tokens. UNRECOGNIZED returns every token.
    """
    lowered = command.lowered

    kind = SINGLE_KEYWORDS.get(lowered[0])
    if kind is not None:
        return kind, command.tokens[1:]

    if len(lowered) >= 2:
        kind = PAIR_KEYWORDS.get((lowered[0], lowered[1]))
        if kind is not None:
            return kind, command.tokens[2:]

    return OperationKind.UNRECOGNIZED, command.tokens
