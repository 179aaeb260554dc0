"""
Parse errors.

Every error names the field or rule that failed so the reply can tell
the user exactly what to fix. None of them are fatal: the caller turns
them into a reply and the ledger is never touched.
"""

from typing import Optional


class ParseError(Exception):
    """Base exception for messages that cannot become a transaction."""

    field: Optional[str] = None

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        if field is not None:
            self.field = field

    @property
    def code(self) -> str:
        return type(self).__name__


class MissingAmount(ParseError):
    field = "amount"

    def __init__(self):
        super().__init__("No amount found in input.")


class MalformedAmount(ParseError):
    field = "amount"

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Amount {token!r} is not a valid number.")


class InvalidDate(ParseError):
    field = "date"

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Date {token!r} is not a valid calendar date.")


class MissingAccountSeparator(ParseError):
    field = "accounts"

    def __init__(self):
        super().__init__("Could not find > in input.")


class MisplacedAccountSeparator(ParseError):
    field = "accounts"

    def __init__(self, side: str):
        self.side = side
        super().__init__(f"Expected an account alias {side} >.")


class UnknownAccount(ParseError):
    field = "accounts"

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"account {alias} doesn't exist in current setting")


class DuplicateField(ParseError):
    def __init__(self, field: str, values: list[str]):
        self.values = values
        super().__init__(
            f"Expected at most one {field}, found {len(values)}: {', '.join(values)}",
            field=field,
        )


class GrammarMismatch(ParseError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(
            "Input does not match [date] @payee [narration] amount [currency] from > to"
        )
