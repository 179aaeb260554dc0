"""
Transaction Parser

Turns a chat message into a Transaction by looking at the shape of each
token rather than its position:

    2021-09-08 @KFC hamburger 12.40 AUD cba > food
    @KFL 22.34 cba>food
    22.34 USD @KFL cba > food

all converge on the same structured result. The only positional rule is
that the arrow sits between the two account aliases.

Known limitations of shape-based classification:
- A narration word that looks like a number is taken as the amount if it
  comes first. Only the first amount-shaped token is used.
- An upper-case three letter word is always a currency.
- Aliases are single tokens; an alias shaped like a date, payee, number or
  currency never reaches the account lookup.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

import structlog

from beanbot.config import LedgerSettings
from beanbot.models.transaction import Transaction
from beanbot.parsing.errors import (
    DuplicateField,
    InvalidDate,
    MalformedAmount,
    MisplacedAccountSeparator,
    MissingAccountSeparator,
    MissingAmount,
    UnknownAccount,
)
from beanbot.parsing.matchers import TokenKind, TokenMatchers


logger = structlog.get_logger(__name__)


class TransactionParser:
    """
    Field-order independent parser.

    Owns the ledger settings for account resolution and defaulting, and a
    TokenMatchers instance for classification. The processing date comes
    from ``clock`` so repeated parses of the same text are reproducible.
    """

    def __init__(
        self,
        settings: LedgerSettings,
        matchers: Optional[TokenMatchers] = None,
        clock: Callable[[], date] = date.today,
    ):
        self._settings = settings
        self._matchers = matchers or TokenMatchers()
        self._clock = clock

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    def parse(self, text: str) -> Transaction:
        """
        Parse a message into a transaction.

        Raises:
            ParseError: A subclass naming the field or rule that failed
        """
        buckets: dict[TokenKind, list[str]] = {kind: [] for kind in TokenKind}
        for token in self._matchers.tokenize(text):
            buckets[self._matchers.classify(token)].append(token)

        dates = buckets[TokenKind.DATE]
        payees = buckets[TokenKind.PAYEE]
        amounts = buckets[TokenKind.AMOUNT]
        currencies = buckets[TokenKind.CURRENCY]

        if len(dates) > 1:
            raise DuplicateField("date", dates)
        if len(payees) > 1:
            raise DuplicateField("payee", payees)
        if not amounts:
            raise MissingAmount()
        if len(amounts) > 1:
            logger.debug("extra_amounts_ignored", used=amounts[0], ignored=amounts[1:])
        if len(currencies) > 1:
            logger.debug("extra_currencies_ignored", used=currencies[0], ignored=currencies[1:])

        from_alias, to_alias, narration = self._split_accounts(buckets[TokenKind.OTHER])

        return self._build(
            date_token=dates[0] if dates else None,
            payee=self._matchers.payee_name(payees[0]) if payees else "",
            narration=" ".join(narration),
            amount_token=amounts[0],
            currency=currencies[0] if currencies else None,
            from_alias=from_alias,
            to_alias=to_alias,
        )

    def _split_accounts(self, others: list[str]) -> tuple[str, str, list[str]]:
        """
        Find ``from > to`` among the unclassified tokens.

        Returns (from_alias, to_alias, remaining_tokens).
        """
        arrows = [i for i, token in enumerate(others) if self._matchers.is_arrow(token)]
        if not arrows:
            raise MissingAccountSeparator()
        if len(arrows) > 1:
            raise DuplicateField("arrow", [others[i] for i in arrows])

        index = arrows[0]
        if index == 0:
            raise MisplacedAccountSeparator("before")
        if index == len(others) - 1:
            raise MisplacedAccountSeparator("after")

        remaining = others[:index - 1] + others[index + 2:]
        return others[index - 1], others[index + 1], remaining

    def _build(
        self,
        date_token: Optional[str],
        payee: str,
        narration: str,
        amount_token: str,
        currency: Optional[str],
        from_alias: str,
        to_alias: str,
    ) -> Transaction:
        from_account = self._resolve_account(from_alias)
        to_account = self._resolve_account(to_alias)

        return Transaction(
            date=self._parse_date(date_token) if date_token else self._clock(),
            payee=payee,
            narration=narration,
            amount=self._parse_amount(amount_token),
            currency=currency or self._settings.default_currency,
            from_account=from_account,
            to_account=to_account,
        )

    def _resolve_account(self, alias: str) -> str:
        account = self._settings.resolve_account(alias)
        if account is None:
            raise UnknownAccount(alias)
        return account

    @staticmethod
    def _parse_amount(token: str) -> Decimal:
        try:
            amount = Decimal(token)
        except InvalidOperation:
            raise MalformedAmount(token)
        if not amount.is_finite() or amount < 0:
            raise MalformedAmount(token)
        return amount

    @staticmethod
    def _parse_date(token: str) -> date:
        try:
            return date.fromisoformat(token)
        except ValueError:
            raise InvalidDate(token)
