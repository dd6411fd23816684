"""
Chat Ledger - Source Package

Turns short chat messages ("venta ...", "gastos ...", "facturado ...",
"sin facturar ...") into rows written to a month-organised Google Sheets
ledger.

DESIGN PRINCIPLES:
1. Best effort on human text, never block on a malformed amount
2. Unrecognised chatter is ignored silently
3. Every handled message is auditable
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Chat Ledger Team"
