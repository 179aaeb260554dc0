"""
Parsing package.

Two strategies share one error taxonomy:
- TransactionParser: order independent, classifies tokens by shape (default)
- StrictTransactionParser: fixed field order grammar
"""

from datetime import date
from typing import Callable, Optional

from beanbot.config import LedgerSettings
from beanbot.models.transaction import Transaction
from beanbot.parsing.errors import (
    DuplicateField,
    GrammarMismatch,
    InvalidDate,
    MalformedAmount,
    MisplacedAccountSeparator,
    MissingAccountSeparator,
    MissingAmount,
    ParseError,
    UnknownAccount,
)
from beanbot.parsing.grammar import StrictTransactionParser
from beanbot.parsing.matchers import TokenKind, TokenMatchers
from beanbot.parsing.parser import TransactionParser


def create_parser(
    settings: LedgerSettings,
    strict: bool = False,
    matchers: Optional[TokenMatchers] = None,
    clock: Callable[[], date] = date.today,
) -> TransactionParser:
    """Build the parser for the configured mode."""
    parser_cls = StrictTransactionParser if strict else TransactionParser
    return parser_cls(settings, matchers=matchers, clock=clock)


def parse_transaction(
    text: str,
    settings: LedgerSettings,
    strict: bool = False,
    clock: Callable[[], date] = date.today,
) -> Transaction:
    """
    Parse one message with the given settings.

    Raises:
        ParseError: If the message cannot become a transaction
    """
    return create_parser(settings, strict=strict, clock=clock).parse(text)


__all__ = [
    # Parsers
    "StrictTransactionParser",
    "TokenKind",
    "TokenMatchers",
    "TransactionParser",
    "create_parser",
    "parse_transaction",
    # Errors
    "DuplicateField",
    "GrammarMismatch",
    "InvalidDate",
    "MalformedAmount",
    "MisplacedAccountSeparator",
    "MissingAccountSeparator",
    "MissingAmount",
    "ParseError",
    "UnknownAccount",
]
