"""
Main Orchestrator for Beanbot

Ties the parser and the ledger store together and defines the
end-to-end flow for one message:

    text -> parse -> Transaction -> append to <year>.bean -> reply text

DESIGN DECISION: The orchestrator enforces the boundaries:
- A message that does not parse never touches the store
- A store failure never hides the parsed transaction; the reply carries
  the rendered ledger text together with the error
- Every step is audited under one correlation ID

Outer surfaces (webhook, Streamlit page) only ever see a FlowResult.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ValidationError

from beanbot.audit import AuditLogger, create_correlation_id
from beanbot.config import ConfigurationError, LedgerSettings, get_settings
from beanbot.models.transaction import FAILURE_BANNER, Transaction
from beanbot.parsing import ParseError, TransactionParser, create_parser
from beanbot.services.storage import (
    ContentStoreInterface,
    GitHubContentStore,
    LedgerStore,
    LedgerStoreError,
    ledger_path,
)


class FlowResult(BaseModel):
    """Outcome of processing one message."""

    correlation_id: UUID
    success: bool
    reply_text: str
    transaction: Optional[Transaction] = None
    ledger_text: Optional[str] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None


class TransactionFlow:
    """
    Orchestrates the message -> ledger flow.

    Flow:
    1. Parse → Transaction, or a reply naming the failed field
    2. Append → Ledger file updated, or a reply with error and ledger text
    3. Reply → Confirmation text

    No step is retried.
    """

    def __init__(
        self,
        parser: TransactionParser,
        ledger_store: Optional[LedgerStore] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._parser = parser
        self._ledger_store = ledger_store
        self._audit_logger = audit_logger or AuditLogger()

    def preview(self, text: str) -> FlowResult:
        """Parse only. Nothing is written."""
        correlation_id = create_correlation_id()
        transaction = self._parse(text, correlation_id)
        if isinstance(transaction, FlowResult):
            return transaction

        ledger_text = transaction.to_ledger_text()
        return FlowResult(
            correlation_id=correlation_id,
            success=True,
            reply_text=ledger_text,
            transaction=transaction,
            ledger_text=ledger_text,
        )

    def process(self, text: str) -> FlowResult:
        """
        Parse a message and append it to its ledger.

        Returns:
            FlowResult whose reply_text is ready to send back to the user
        """
        correlation_id = create_correlation_id()
        self._audit_logger.log_message_received(text=text, correlation_id=correlation_id)

        transaction = self._parse(text, correlation_id)
        if isinstance(transaction, FlowResult):
            return transaction

        ledger_text = transaction.to_ledger_text()

        if self._ledger_store is None:
            return self._store_failure(
                correlation_id,
                transaction,
                path=ledger_path(transaction),
                error_kind="StorageNotConfigured",
                error_message="Ledger storage is not configured",
            )

        try:
            confirmation = self._ledger_store.append(transaction, correlation_id)
        except LedgerStoreError as e:
            return self._store_failure(
                correlation_id,
                transaction,
                path=e.path,
                error_kind=e.code,
                error_message=str(e),
            )
        except Exception as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"path": ledger_path(transaction)},
                correlation_id=correlation_id,
            )
            return self._store_failure(
                correlation_id,
                transaction,
                path=ledger_path(transaction),
                error_kind="UnexpectedError",
                error_message=str(e),
            )

        self._audit_logger.log_transaction_saved(
            path=ledger_path(transaction),
            ledger_text=ledger_text,
            correlation_id=correlation_id,
        )
        return FlowResult(
            correlation_id=correlation_id,
            success=True,
            reply_text=confirmation,
            transaction=transaction,
            ledger_text=ledger_text,
        )

    def _parse(self, text: str, correlation_id: UUID):
        """Transaction on success, a failed FlowResult otherwise."""
        try:
            transaction = self._parser.parse(text)
        except ParseError as e:
            self._audit_logger.log_parse_failed(
                text=text,
                error_code=e.code,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return FlowResult(
                correlation_id=correlation_id,
                success=False,
                reply_text=f"{FAILURE_BANNER}Failed to parse input: {e}",
                error_kind=e.code,
                error_message=str(e),
            )

        self._audit_logger.log_transaction_parsed(
            year=transaction.year(),
            amount=transaction.formatted_amount(),
            currency=transaction.currency,
            correlation_id=correlation_id,
        )
        return transaction

    def _store_failure(
        self,
        correlation_id: UUID,
        transaction: Transaction,
        path: Optional[str],
        error_kind: str,
        error_message: str,
    ) -> FlowResult:
        self._audit_logger.log_store_failed(
            path=path,
            error_code=error_kind,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        ledger_text = transaction.to_ledger_text()
        return FlowResult(
            correlation_id=correlation_id,
            success=False,
            reply_text=(
                f"{FAILURE_BANNER}Failed to save transaction: {error_message}\n\n"
                f"{ledger_text}"
            ),
            transaction=transaction,
            ledger_text=ledger_text,
            error_kind=error_kind,
            error_message=error_message,
        )


def create_app_components(
    use_storage: bool = True,
    ledger_settings: Optional[LedgerSettings] = None,
    content_store: Optional[ContentStoreInterface] = None,
) -> tuple[TransactionFlow, Optional[ContentStoreInterface]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to connect the ledger store.
                    Set to False to only parse and preview.
        ledger_settings: Accounts and default currency. Loaded from
                    configuration if None.
        content_store: Remote store to use instead of GitHub.

    Returns:
        (transaction_flow, content_store)

    Raises:
        ConfigurationError: If required settings are missing or malformed
    """
    settings = get_settings()
    try:
        app_settings = settings.app
    except ValidationError as e:
        raise ConfigurationError(f"Application settings are invalid: {e}") from e
    if ledger_settings is None:
        ledger_settings = settings.ledger
    audit_logger = AuditLogger()

    ledger_store = None
    if use_storage:
        if content_store is None:
            try:
                content_store = GitHubContentStore(settings.github)
            except ValidationError as e:
                raise ConfigurationError(f"GitHub settings are invalid: {e}") from e
        ledger_store = LedgerStore(content_store, audit_logger=audit_logger)
    else:
        content_store = None

    parser = create_parser(ledger_settings, strict=app_settings.strict_parsing)
    flow = TransactionFlow(
        parser=parser,
        ledger_store=ledger_store,
        audit_logger=audit_logger,
    )
    return flow, content_store
