"""
Message Interpretation Package

Tokenizer -> classifier -> field extractor. Pure functions over text;
nothing here touches the ledger.
"""

from chatledger.interpreter.classifier import classify
from chatledger.interpreter.extractor import FieldExtractor, coerce_amount
from chatledger.interpreter.tokenizer import EmptyMessageError, tokenize

__all__ = [
    "EmptyMessageError",
    "FieldExtractor",
    "classify",
    "coerce_amount",
    "tokenize",
]
