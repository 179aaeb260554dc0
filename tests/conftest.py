"""Shared fixtures."""

from datetime import date

import pytest

from beanbot.config import LedgerSettings
from beanbot.parsing import TransactionParser
from beanbot.services.storage import InMemoryContentStore, LedgerStore


TODAY = date(2024, 3, 15)

ACCOUNTS = {
    "cba": "Assets:MasterCard:CBA",
    "amex": "Liabilities:CreditCard:AMEX:Liang",
    "food": "Expense:Food",
}


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    return LedgerSettings(default_currency="AUD", accounts=ACCOUNTS)


@pytest.fixture
def parser(ledger_settings) -> TransactionParser:
    return TransactionParser(ledger_settings, clock=lambda: TODAY)


@pytest.fixture
def content_store() -> InMemoryContentStore:
    return InMemoryContentStore()


@pytest.fixture
def ledger_store(content_store) -> LedgerStore:
    return LedgerStore(content_store)
