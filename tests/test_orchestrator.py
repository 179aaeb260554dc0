"""Tests for the end-to-end transaction flow."""

import pytest

from beanbot.audit import AuditLogger
from beanbot.models.audit import AuditEventType
from beanbot.orchestrator import FlowResult, TransactionFlow, create_app_components
from beanbot.parsing import StrictTransactionParser, TransactionParser
from beanbot.services.storage import InMemoryContentStore, LedgerStore
from tests.conftest import TODAY
from tests.test_ledger_store import EXISTING, FailingStore, RacingStore


@pytest.fixture
def flow(parser, ledger_store) -> TransactionFlow:
    return TransactionFlow(parser=parser, ledger_store=ledger_store)


class SpyStore(InMemoryContentStore):
    """Records every call so tests can assert the store was not touched."""

    def __init__(self, blobs=None):
        super().__init__(blobs)
        self.calls = []

    def fetch_blob(self, path):
        self.calls.append(("fetch", path))
        return super().fetch_blob(path)

    def create_blob(self, path, content):
        self.calls.append(("create", path))
        super().create_blob(path, content)

    def write_blob(self, path, content, expected_version):
        self.calls.append(("write", path))
        super().write_blob(path, content, expected_version)


class TestTransactionFlow:
    """Tests for TransactionFlow.process and preview."""

    def test_success(self, flow, content_store):
        """Test a parsed message is saved and confirmed."""
        result = flow.process("2021-09-08 @KFC hamburger 12.40 AUD cba > food")

        assert isinstance(result, FlowResult)
        assert result.success is True
        assert result.reply_text == result.transaction.to_confirmation_text()
        assert content_store.read_text("2021.bean") == "\n" + result.ledger_text

    def test_defaults_date_to_today(self, flow, content_store):
        result = flow.process("@KFL 22.34 cba > food")
        assert result.transaction.date == TODAY
        assert f"{TODAY.year}.bean" in content_store

    def test_parse_failure_does_not_touch_store(self, parser):
        """Test a bad message gets a reply and no store call."""
        store = SpyStore()
        flow = TransactionFlow(parser=parser, ledger_store=LedgerStore(store))

        result = flow.process("I am testing here")

        assert result.success is False
        assert result.error_kind == "MissingAmount"
        assert result.reply_text.startswith("⚠️\n==============================\nFailed to parse input: ")
        assert result.transaction is None
        assert store.calls == []

    def test_unknown_account_reply_names_alias(self, flow):
        result = flow.process("2022-08-14 @MelbourneZoo 33.7 abc > home")
        assert result.error_kind == "UnknownAccount"
        assert "abc" in result.reply_text

    def test_concurrent_modification_keeps_ledger_text(self, parser):
        """Test the lost write is reported with the transaction shown."""
        store = RacingStore({"2021.bean": EXISTING})
        flow = TransactionFlow(parser=parser, ledger_store=LedgerStore(store))

        result = flow.process("2021-09-08 @KFC hamburger 12.40 AUD cba > food")

        assert result.success is False
        assert result.error_kind == "ConcurrentModification"
        assert result.transaction is not None
        assert result.ledger_text in result.reply_text
        assert "Failed to save transaction" in result.reply_text
        assert result.ledger_text not in store.read_text("2021.bean")

    def test_write_failure(self, parser):
        store = FailingStore("write", {"2021.bean": EXISTING})
        flow = TransactionFlow(parser=parser, ledger_store=LedgerStore(store))

        result = flow.process("2021-09-08 @KFC hamburger 12.40 AUD cba > food")

        assert result.success is False
        assert result.error_kind == "WriteFailed"
        assert result.ledger_text in result.reply_text

    def test_very_long_amount_is_saved(self, flow, content_store):
        """Test audit records never abort the flow, however long the input."""
        amount = "9" * 600
        result = flow.process(f"@KFC {amount} cba > food")

        assert result.success is True
        assert f"{amount}.00 AUD" in content_store.read_text(f"{TODAY.year}.bean")

    def test_failing_audit_logger_does_not_abort(self, parser, ledger_store):
        """Test an audit event that cannot be emitted is reported, not raised."""

        class BrokenAuditLogger(AuditLogger):
            def log(self, event):
                raise RuntimeError("log sink unavailable")

        flow = TransactionFlow(
            parser=parser,
            ledger_store=ledger_store,
            audit_logger=BrokenAuditLogger(),
        )
        assert flow.process("@KFL 22.34 cba > food").success is True

    def test_unexpected_store_error(self, parser):
        """Test an exception outside the store taxonomy is logged and reported."""

        class ExplodingStore(InMemoryContentStore):
            def fetch_blob(self, path):
                raise RuntimeError("socket closed")

        class RecordingAuditLogger(AuditLogger):
            def __init__(self):
                super().__init__()
                self.events = []

            def log(self, event):
                self.events.append(event)

        audit_logger = RecordingAuditLogger()
        flow = TransactionFlow(
            parser=parser,
            ledger_store=LedgerStore(ExplodingStore()),
            audit_logger=audit_logger,
        )

        result = flow.process("2021-09-08 @KFC hamburger 12.40 AUD cba > food")

        assert result.success is False
        assert result.error_kind == "UnexpectedError"
        assert "socket closed" in result.reply_text
        assert result.ledger_text in result.reply_text
        assert AuditEventType.SYSTEM_ERROR in [e.event_type for e in audit_logger.events]

    def test_without_storage(self, parser):
        """Test a flow with no store reports it instead of pretending to save."""
        result = TransactionFlow(parser=parser).process("@KFL 22.34 cba > food")
        assert result.success is False
        assert result.error_kind == "StorageNotConfigured"
        assert result.ledger_text in result.reply_text

    def test_preview_writes_nothing(self, parser):
        store = SpyStore()
        flow = TransactionFlow(parser=parser, ledger_store=LedgerStore(store))

        result = flow.preview("@KFL 22.34 cba > food")

        assert result.success is True
        assert result.reply_text == result.ledger_text
        assert store.calls == []

    def test_preview_parse_failure(self, flow):
        result = flow.preview("@KFL cba > food")
        assert result.success is False
        assert result.error_kind == "MissingAmount"

    def test_each_request_has_its_own_correlation_id(self, flow):
        first = flow.process("@KFL 22.34 cba > food")
        second = flow.process("@KFL 22.34 cba > food")
        assert first.correlation_id != second.correlation_id


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_with_injected_store(self, ledger_settings, content_store):
        flow, store = create_app_components(
            ledger_settings=ledger_settings,
            content_store=content_store,
        )
        assert store is content_store
        assert flow.process("2021-09-08 @KFL 22.34 cba > food").success is True
        assert "2021.bean" in content_store

    def test_without_storage(self, ledger_settings):
        flow, store = create_app_components(use_storage=False, ledger_settings=ledger_settings)
        assert store is None
        assert flow.preview("@KFL 22.34 cba > food").success is True

    def test_strict_mode_from_settings(self, ledger_settings, monkeypatch):
        from beanbot.config import get_settings

        monkeypatch.setenv("STRICT_PARSING", "true")
        get_settings.cache_clear()
        flow, _ = create_app_components(use_storage=False, ledger_settings=ledger_settings)
        assert isinstance(flow._parser, StrictTransactionParser)

        monkeypatch.setenv("STRICT_PARSING", "false")
        flow, _ = create_app_components(use_storage=False, ledger_settings=ledger_settings)
        assert type(flow._parser) is TransactionParser
