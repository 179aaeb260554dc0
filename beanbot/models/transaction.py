"""
Transaction Model

The canonical double-entry record produced by the parser and written
to the ledger. One transaction moves ``amount`` from ``from_account``
to ``to_account``.

DESIGN DECISION: The model is frozen. Once a message has been parsed
the record never changes; renderings are pure functions of it.
The ledger text layout (two-space indent, eight spaces before the
amount) is a contract with the tools reading the ledger files.
"""

from datetime import date as Date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


ACCOUNT_PATH_PATTERN = r"^[^\s:]+(?::[^\s:]+)*$"

SUCCESS_BANNER = "✅\n==============================\n"
FAILURE_BANNER = "⚠️\n==============================\n"


def quote(value: str) -> str:
    """Ledger string literal for ``value``."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class Transaction(BaseModel):
    """A single double-entry transaction."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    date: Date = Field(
        ...,
        description="Transaction date"
    )
    payee: str = Field(
        default="",
        description="Counterparty, without the @ sigil"
    )
    narration: str = Field(
        default="",
        description="Free text description"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount moved between the two accounts"
    )
    currency: str = Field(
        ...,
        pattern=r"^[A-Z]{3}$",
        description="Three letter currency code"
    )
    from_account: str = Field(
        ...,
        min_length=1,
        pattern=ACCOUNT_PATH_PATTERN,
        description="Canonical account the money leaves"
    )
    to_account: str = Field(
        ...,
        min_length=1,
        pattern=ACCOUNT_PATH_PATTERN,
        description="Canonical account the money enters"
    )

    def year(self) -> str:
        """Partition key of the ledger file this transaction belongs to."""
        return self.date.isoformat()[:4]

    def formatted_amount(self) -> str:
        return f"{self.amount:.2f}"

    def to_ledger_text(self) -> str:
        """
        Render the transaction in ledger file format.

            2021-09-08 * "KFC" "hamburger"
              Assets:MasterCard:CBA        -12.40 AUD
              Expense:Food        12.40 AUD
        """
        amount = self.formatted_amount()
        return (
            f"{self.date.isoformat()} * {quote(self.payee)} {quote(self.narration)}\n"
            f"  {self.from_account}        -{amount} {self.currency}\n"
            f"  {self.to_account}        {amount} {self.currency}\n"
        )

    def to_confirmation_text(self) -> str:
        """Ledger text prefixed with the success banner shown to the user."""
        return SUCCESS_BANNER + self.to_ledger_text()
