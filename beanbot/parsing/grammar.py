"""
Strict grammar mode.

Fields must appear in a fixed relative order:

    [date] @payee [narration] amount [currency] from > to

Whitespace between fields is free-form. Trades the flexibility of the
token classifier for a single, unambiguous failure when the order is
wrong.
"""

import re

from beanbot.models.transaction import Transaction
from beanbot.parsing.errors import GrammarMismatch
from beanbot.parsing.parser import TransactionParser


TRANSACTION_GRAMMAR = re.compile(
    r"""
    ^\s*
    (?:(?P<date>\d{4}-\d{2}-\d{2})\s+)?         # optional date
    @(?P<payee>\w[^\s>]*)                       # payee, sigil stripped
    (?:\s+(?P<narration>[^>]+?))?               # optional free text
    \s+(?P<amount>\d+(?:\.\d*)?|\.\d+)          # amount
    (?:\s+(?P<currency>[A-Z]{3}))?              # optional currency
    \s+(?P<from_account>[^\s>]+)
    \s*>\s*
    (?P<to_account>[^\s>]+)
    \s*$
    """,
    re.VERBOSE,
)


class StrictTransactionParser(TransactionParser):
    """Positional parser. Shares account resolution and defaulting."""

    grammar = TRANSACTION_GRAMMAR

    def parse(self, text: str) -> Transaction:
        match = self.grammar.match(text)
        if match is None:
            raise GrammarMismatch(text)

        narration = match.group("narration") or ""
        return self._build(
            date_token=match.group("date"),
            payee=match.group("payee"),
            narration=" ".join(narration.split()),
            amount_token=match.group("amount"),
            currency=match.group("currency"),
            from_alias=match.group("from_account"),
            to_alias=match.group("to_account"),
        )
