"""Session state container sequencing extraction and question answering."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TypeVar

from app.analysis.analyzer import Analyzer
from app.config.models import SessionConfig
from app.config.store_base import BaseConfigStore
from app.documents.models import AnalysisTurn, DocumentHandle, ExtractionResult
from app.exceptions import (
    BusyError,
    ConfigStoreError,
    DocumentIntakeError,
    OperationCancelledError,
    ValidationError,
)
from app.extraction.base import BaseExtractionClient
from app.logging.logger import Log
from app.workflow.models import SessionState, WorkflowStatus

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowCoordinator:
    """Owns one session and runs extraction -> analysis for it.

    At most one extraction and one analysis are in flight at a time; a second
    call of the same kind is rejected with BusyError. Replacing the document
    or resetting cancels in-flight work, and outcomes of work started for a
    replaced document are discarded. Errors are recorded in `state.error` and
    never raised to the caller; earlier good results are kept.
    """

    def __init__(
        self,
        *,
        extraction_client: BaseExtractionClient,
        analyzer: Analyzer,
        config_store: BaseConfigStore | None = None,
        config: SessionConfig | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._extraction_client = extraction_client
        self._analyzer = analyzer
        self._config_store = config_store
        self._clock = clock
        self._state = SessionState(config=config or SessionConfig())
        self._extraction_task: asyncio.Task[ExtractionResult] | None = None
        self._analysis_task: asyncio.Task[str] | None = None
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def has_document(self) -> bool:
        return self._state.document is not None

    @property
    def has_result(self) -> bool:
        return self._state.extraction is not None

    @property
    def has_analysis_result(self) -> bool:
        return bool(self._state.analysis_result)

    @property
    def is_configured(self) -> bool:
        return self._state.config.is_configured

    @property
    def is_busy(self) -> bool:
        return _in_flight(self._extraction_task) or _in_flight(self._analysis_task)

    def select_document(self, document: DocumentHandle) -> None:
        """Replace the document and drop everything derived from the old one."""
        self._abandon_in_flight()
        self._state.document = document
        self._state.clear_document_data()
        self._state.status = WorkflowStatus.DOCUMENT_SELECTED
        Log.info(
            f"Selected document {document.filename or '<unnamed>'} "
            f"({document.media_type}, {len(document.content)} bytes)"
        )

    def reset(self) -> None:
        """Forget the document and its results; configuration is kept."""
        self._abandon_in_flight()
        self._state.document = None
        self._state.clear_document_data()
        self._state.status = WorkflowStatus.IDLE
        Log.info("Session reset")

    def cancel(self) -> bool:
        """Cancel in-flight work for the current document.

        Returns True if anything was cancelled. The cancelled operation records
        an OperationCancelledError message.
        """
        cancelled = False
        for task in (self._extraction_task, self._analysis_task):
            if _in_flight(task):
                task.cancel()
                cancelled = True
        return cancelled

    async def run_extraction(self) -> ExtractionResult | None:
        """Extract the selected document. Returns the result, or None on error."""
        if _in_flight(self._extraction_task):
            self._record_error(BusyError("Extraction is already in progress"))
            return None
        document = self._state.document
        if document is None:
            self._record_error(ValidationError("No document has been selected"))
            return None

        generation = self._generation
        self._begin(WorkflowStatus.EXTRACTING)
        task = asyncio.ensure_future(
            self._extraction_client.extract(document, self._state.config.extraction_credentials)
        )
        self._extraction_task = task
        try:
            result = await self._await_operation(task, generation, "Extraction")
        finally:
            if self._extraction_task is task:
                self._extraction_task = None

        if result is None or generation != self._generation:
            return None
        self._state.extraction = result
        self._state.status = WorkflowStatus.EXTRACTED
        self._state.error = None
        return result

    async def ask_question(self, question: str) -> str | None:
        """Answer `question` about the extracted document. Returns None on error."""
        if _in_flight(self._analysis_task):
            self._record_error(BusyError("A question is already being analyzed"))
            return None
        extraction = self._state.extraction
        if extraction is None or not extraction.text:
            self._record_error(ValidationError("No document text available for analysis"))
            return None
        if not question.strip():
            self._record_error(ValidationError("Question is required"))
            return None

        generation = self._generation
        self._begin(WorkflowStatus.ANALYZING)
        task = asyncio.ensure_future(
            self._analyzer.answer(question, extraction, self._state.config.analysis_key)
        )
        self._analysis_task = task
        try:
            answer = await self._await_operation(task, generation, "Analysis")
        finally:
            if self._analysis_task is task:
                self._analysis_task = None

        if answer is None or generation != self._generation:
            return None
        self._state.history.append(
            AnalysisTurn(question=question, answer=answer, timestamp=self._clock())
        )
        self._state.analysis_result = answer
        self._state.status = WorkflowStatus.ANSWERED
        self._state.error = None
        return answer

    def save_config(self, config: SessionConfig) -> bool:
        """Use `config` for this session and persist it if a store is attached."""
        self._state.config = config
        if self._config_store is None:
            return True
        try:
            self._config_store.save(config)
        except ConfigStoreError as exc:
            self._record_error(exc)
            return False
        return True

    def load_config(self, fallback: SessionConfig | None = None) -> SessionConfig:
        """Load the persisted configuration; empty fields come from `fallback`."""
        config = SessionConfig()
        if self._config_store is not None:
            try:
                config = self._config_store.load()
            except ConfigStoreError as exc:
                self._record_error(exc)
        if fallback is not None:
            config = config.merged_with(fallback)
        self._state.config = config
        return config

    async def _await_operation(
        self,
        task: Awaitable[T],
        generation: int,
        operation: str,
    ) -> T | None:
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            self._fail(generation, OperationCancelledError(f"{operation} was cancelled"))
        except DocumentIntakeError as exc:
            self._fail(generation, exc)
        except Exception as exc:
            Log.error(f"{operation} failed unexpectedly: {exc!r}")
            self._fail(generation, DocumentIntakeError(f"{operation} failed: {exc}"))
        return None

    def _begin(self, status: WorkflowStatus) -> None:
        self._state.status = status
        self._state.error = None

    def _fail(self, generation: int, exc: DocumentIntakeError) -> None:
        if generation != self._generation:
            Log.info(f"Discarding outcome for a replaced document: {exc}")
            return
        self._state.status = WorkflowStatus.ERROR
        self._record_error(exc)

    def _record_error(self, exc: DocumentIntakeError) -> None:
        Log.error(f"{type(exc).__name__}: {exc}")
        self._state.error = str(exc)

    def _abandon_in_flight(self) -> None:
        self._generation += 1
        self.cancel()
        self._extraction_task = None
        self._analysis_task = None


def _in_flight(task: asyncio.Task | None) -> bool:  # type: ignore[type-arg]
    return task is not None and not task.done()
