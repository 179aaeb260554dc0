"""
Token matchers for transaction messages.

DESIGN DECISION: The patterns live on an object built once and handed to
the parser, instead of module-level compiled globals. Tests and callers
can build their own set (e.g. a different payee sigil) without touching
process-wide state.
"""

import re
from enum import Enum
from typing import Optional


class TokenKind(str, Enum):
    """What a single whitespace-delimited token was classified as."""
    DATE = "date"
    PAYEE = "payee"
    AMOUNT = "amount"
    CURRENCY = "currency"
    OTHER = "other"


class TokenMatchers:
    """
    Classifies tokens by shape.

    Priority order is fixed: date > payee > amount > currency > other.
    A token is given the first kind whose pattern it matches, so an
    upper-case three letter word always reads as a currency and any
    number reads as an amount.
    """

    DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
    CURRENCY_PATTERN = r"^[A-Z]{3}$"
    AMOUNT_PATTERN = r"""
        ^(?:
            \d+(?:\.\d*)?   # 12, 12.4, 12.
            |
            \.\d+           # .5
        )$
    """

    def __init__(self, payee_sigil: str = "@", arrow: str = ">"):
        self.payee_sigil = payee_sigil
        self.arrow = arrow
        self.date_re = re.compile(self.DATE_PATTERN)
        self.payee_re = re.compile(rf"^{re.escape(payee_sigil)}\w+")
        self.amount_re = re.compile(self.AMOUNT_PATTERN, re.VERBOSE)
        self.currency_re = re.compile(self.CURRENCY_PATTERN)

    def tokenize(self, text: str) -> list[str]:
        """
        Split a message into tokens.

        Runs of whitespace count as one separator and the arrow is always
        its own token, so ``cba>food`` and ``cba > food`` tokenize alike.
        """
        return text.replace(self.arrow, f" {self.arrow} ").split()

    def classify(self, token: str) -> TokenKind:
        if self.date_re.match(token):
            return TokenKind.DATE
        if self.payee_re.match(token):
            return TokenKind.PAYEE
        if self.amount_re.match(token):
            return TokenKind.AMOUNT
        if self.currency_re.match(token):
            return TokenKind.CURRENCY
        return TokenKind.OTHER

    def is_arrow(self, token: str) -> bool:
        return token == self.arrow

    def payee_name(self, token: str) -> Optional[str]:
        """Payee without its sigil, or None if the token is not a payee."""
        if not self.payee_re.match(token):
            return None
        return token[len(self.payee_sigil):]
