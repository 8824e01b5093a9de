import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.analysis.analyzer import Analyzer
from app.analysis.client_base import BaseAnalysisClient
from app.config.models import SessionConfig
from app.config.store_base import BaseConfigStore
from app.documents.models import (
    DocumentHandle,
    ExtractionCredentials,
    ExtractionResult,
    KeyValuePair,
)
from app.exceptions import ConfigStoreError, TransportError
from app.extraction.base import BaseExtractionClient
from app.workflow.coordinator import WorkflowCoordinator
from app.workflow.models import WorkflowStatus

CONFIG = SessionConfig(
    extraction_endpoint="https://x.test",
    extraction_key="azure-key",
    analysis_key="llm-key",
)
INVOICE = ExtractionResult(
    text="Invoice #1",
    tables=[[["A", "B"], ["1", "2"]]],
    key_value_pairs=[KeyValuePair(key="Total", value="$10")],
)


class FakeExtractionClient(BaseExtractionClient):
    """Returns queued results; blocks on `gate` when one is set."""

    def __init__(self, *results: ExtractionResult | Exception) -> None:
        self.results = list(results) or [INVOICE]
        self.calls: list[tuple[DocumentHandle, ExtractionCredentials]] = []
        self.gate: asyncio.Event | None = None

    async def extract(
        self,
        document: DocumentHandle,
        credentials: ExtractionCredentials,
    ) -> ExtractionResult:
        self.calls.append((document, credentials))
        outcome = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeAnalysisClient(BaseAnalysisClient):
    def __init__(self) -> None:
        self.prompts: list[str] = []
        self.gate: asyncio.Event | None = None
        self.error: Exception | None = None

    async def create_message(
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        prompt: str,
    ) -> str:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return f"answer {len(self.prompts)}"


def _clock() -> MagicMock:
    start = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)
    return MagicMock(side_effect=[start + timedelta(seconds=i) for i in range(10)])


def _coordinator(
    extraction: FakeExtractionClient | None = None,
    analysis: FakeAnalysisClient | None = None,
    **kwargs,
) -> WorkflowCoordinator:
    return WorkflowCoordinator(
        extraction_client=extraction or FakeExtractionClient(),
        analyzer=Analyzer(client=analysis or FakeAnalysisClient(), model="m"),
        config=kwargs.pop("config", CONFIG),
        **kwargs,
    )


def _document(name: str = "invoice.pdf") -> DocumentHandle:
    return DocumentHandle(content=b"%PDF-1.4 ...", media_type="application/pdf", filename=name)


async def _wait_for(predicate) -> None:
    for _ in range(100):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


class TestDocumentSelection:
    def test_initial_state(self) -> None:
        coordinator = _coordinator()
        assert coordinator.state.status is WorkflowStatus.IDLE
        assert not coordinator.has_document
        assert not coordinator.has_result
        assert not coordinator.has_analysis_result
        assert not coordinator.is_busy
        assert coordinator.is_configured

    @pytest.mark.asyncio
    async def test_selecting_document_resets_derived_data(self) -> None:
        coordinator = _coordinator()
        coordinator.select_document(_document("first.pdf"))
        await coordinator.run_extraction()
        await coordinator.ask_question("What is the total?")
        assert coordinator.has_analysis_result

        coordinator.select_document(_document("second.pdf"))

        state = coordinator.state
        assert state.document.filename == "second.pdf"
        assert state.status is WorkflowStatus.DOCUMENT_SELECTED
        assert state.document_text == ""
        assert state.document_tables == []
        assert state.document_key_value_pairs == []
        assert state.analysis_result == ""
        assert state.history == []
        assert state.error is None

    @pytest.mark.asyncio
    async def test_reset_keeps_configuration(self) -> None:
        coordinator = _coordinator()
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        coordinator.reset()

        assert not coordinator.has_document
        assert not coordinator.has_result
        assert coordinator.state.status is WorkflowStatus.IDLE
        assert coordinator.state.config == CONFIG


class TestExtraction:
    @pytest.mark.asyncio
    async def test_stores_result_and_passes_credentials(self) -> None:
        extraction = FakeExtractionClient()
        coordinator = _coordinator(extraction)
        coordinator.select_document(_document())

        result = await coordinator.run_extraction()

        assert result == INVOICE
        assert coordinator.state.status is WorkflowStatus.EXTRACTED
        assert coordinator.state.document_text == "Invoice #1"
        assert extraction.calls[0][1] == ExtractionCredentials(
            endpoint="https://x.test", key="azure-key"
        )

    @pytest.mark.asyncio
    async def test_without_document_records_error(self) -> None:
        extraction = FakeExtractionClient()
        coordinator = _coordinator(extraction)

        assert await coordinator.run_extraction() is None

        assert coordinator.state.error == "No document has been selected"
        assert extraction.calls == []

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_result(self) -> None:
        extraction = FakeExtractionClient(INVOICE, TransportError("returned HTTP 500"))
        coordinator = _coordinator(extraction)
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        assert await coordinator.run_extraction() is None

        assert coordinator.state.status is WorkflowStatus.ERROR
        assert coordinator.state.error == "returned HTTP 500"
        assert coordinator.state.extraction == INVOICE

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_recorded(self) -> None:
        coordinator = _coordinator(FakeExtractionClient(RuntimeError("boom")))
        coordinator.select_document(_document())

        assert await coordinator.run_extraction() is None

        assert coordinator.state.error == "Extraction failed: boom"

    @pytest.mark.asyncio
    async def test_second_extraction_while_busy_is_rejected(self) -> None:
        extraction = FakeExtractionClient()
        extraction.gate = asyncio.Event()
        coordinator = _coordinator(extraction)
        coordinator.select_document(_document())

        first = asyncio.ensure_future(coordinator.run_extraction())
        await _wait_for(lambda: coordinator.is_busy)

        assert await coordinator.run_extraction() is None
        assert coordinator.state.error == "Extraction is already in progress"
        assert len(extraction.calls) == 1

        extraction.gate.set()
        assert await first == INVOICE
        assert coordinator.state.error is None
        assert not coordinator.is_busy

    @pytest.mark.asyncio
    async def test_replacing_document_discards_in_flight_extraction(self) -> None:
        extraction = FakeExtractionClient()
        extraction.gate = asyncio.Event()
        coordinator = _coordinator(extraction)
        coordinator.select_document(_document("first.pdf"))

        first = asyncio.ensure_future(coordinator.run_extraction())
        await _wait_for(lambda: coordinator.is_busy)
        coordinator.select_document(_document("second.pdf"))

        assert await first is None
        assert coordinator.state.status is WorkflowStatus.DOCUMENT_SELECTED
        assert coordinator.state.error is None
        assert not coordinator.has_result

    @pytest.mark.asyncio
    async def test_new_document_can_be_extracted_right_after_replacement(self) -> None:
        extraction = FakeExtractionClient()
        extraction.gate = asyncio.Event()
        coordinator = _coordinator(extraction)
        coordinator.select_document(_document("first.pdf"))

        first = asyncio.ensure_future(coordinator.run_extraction())
        await _wait_for(lambda: coordinator.is_busy)
        coordinator.select_document(_document("second.pdf"))
        extraction.gate.set()

        result = await coordinator.run_extraction()

        assert result == INVOICE
        assert coordinator.state.error is None
        assert coordinator.state.status is WorkflowStatus.EXTRACTED
        assert extraction.calls[-1][0].filename == "second.pdf"
        assert await first is None
        assert coordinator.state.extraction == INVOICE

    @pytest.mark.asyncio
    async def test_cancel_records_cancellation(self) -> None:
        extraction = FakeExtractionClient()
        extraction.gate = asyncio.Event()
        coordinator = _coordinator(extraction)
        coordinator.select_document(_document())

        pending = asyncio.ensure_future(coordinator.run_extraction())
        await _wait_for(lambda: coordinator.is_busy)

        assert coordinator.cancel() is True
        assert await pending is None
        assert coordinator.state.status is WorkflowStatus.ERROR
        assert coordinator.state.error == "Extraction was cancelled"
        assert coordinator.cancel() is False


class TestQuestions:
    @pytest.mark.asyncio
    async def test_question_without_extraction_makes_no_request(self) -> None:
        analysis = FakeAnalysisClient()
        coordinator = _coordinator(analysis=analysis)
        coordinator.select_document(_document())

        assert await coordinator.ask_question("What is the total?") is None

        assert coordinator.state.error == "No document text available for analysis"
        assert analysis.prompts == []

    @pytest.mark.asyncio
    async def test_empty_extracted_text_makes_no_request(self) -> None:
        analysis = FakeAnalysisClient()
        coordinator = _coordinator(FakeExtractionClient(ExtractionResult()), analysis)
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        assert await coordinator.ask_question("Anything?") is None
        assert analysis.prompts == []

    @pytest.mark.asyncio
    async def test_blank_question_is_rejected(self) -> None:
        analysis = FakeAnalysisClient()
        coordinator = _coordinator(analysis=analysis)
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        assert await coordinator.ask_question("  ") is None
        assert coordinator.state.error == "Question is required"
        assert analysis.prompts == []

    @pytest.mark.asyncio
    async def test_history_keeps_turns_in_order(self) -> None:
        clock = _clock()
        analysis = FakeAnalysisClient()
        coordinator = _coordinator(analysis=analysis, clock=clock)
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        await coordinator.ask_question("What is the total?")
        await coordinator.ask_question("Who is the vendor?")

        history = coordinator.state.history
        assert [turn.question for turn in history] == ["What is the total?", "Who is the vendor?"]
        assert [turn.answer for turn in history] == ["answer 1", "answer 2"]
        assert history[0].timestamp < history[1].timestamp
        assert coordinator.state.analysis_result == "answer 2"
        assert coordinator.state.status is WorkflowStatus.ANSWERED
        assert "Invoice #1" in analysis.prompts[0]
        assert "Total: $10" in analysis.prompts[0]

    @pytest.mark.asyncio
    async def test_failed_question_keeps_extraction_and_history(self) -> None:
        analysis = FakeAnalysisClient()
        coordinator = _coordinator(analysis=analysis)
        coordinator.select_document(_document())
        await coordinator.run_extraction()
        await coordinator.ask_question("What is the total?")

        analysis.error = TransportError("Language model network error")
        assert await coordinator.ask_question("Again?") is None

        state = coordinator.state
        assert state.status is WorkflowStatus.ERROR
        assert state.error == "Language model network error"
        assert state.extraction == INVOICE
        assert len(state.history) == 1
        assert state.analysis_result == "answer 1"

    @pytest.mark.asyncio
    async def test_missing_analysis_key_is_recorded(self) -> None:
        analysis = FakeAnalysisClient()
        coordinator = _coordinator(
            analysis=analysis,
            config=SessionConfig(extraction_endpoint="e", extraction_key="k"),
        )
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        assert await coordinator.ask_question("What is the total?") is None
        assert coordinator.state.error == "Language model API key is required"
        assert analysis.prompts == []

    @pytest.mark.asyncio
    async def test_second_question_while_busy_is_rejected(self) -> None:
        analysis = FakeAnalysisClient()
        analysis.gate = asyncio.Event()
        coordinator = _coordinator(analysis=analysis)
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        first = asyncio.ensure_future(coordinator.ask_question("First?"))
        await _wait_for(lambda: coordinator.is_busy)

        assert await coordinator.ask_question("Second?") is None
        assert coordinator.state.error == "A question is already being analyzed"

        analysis.gate.set()
        assert await first == "answer 1"
        assert len(coordinator.state.history) == 1

    @pytest.mark.asyncio
    async def test_reset_discards_in_flight_answer(self) -> None:
        analysis = FakeAnalysisClient()
        analysis.gate = asyncio.Event()
        coordinator = _coordinator(analysis=analysis)
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        pending = asyncio.ensure_future(coordinator.ask_question("What is the total?"))
        await _wait_for(lambda: coordinator.is_busy)
        coordinator.reset()

        assert await pending is None
        assert coordinator.state.history == []
        assert coordinator.state.status is WorkflowStatus.IDLE


class TestConfig:
    def test_save_config_persists_to_store(self) -> None:
        store = MagicMock(spec=BaseConfigStore)
        coordinator = _coordinator(config_store=store, config=SessionConfig())

        assert coordinator.save_config(CONFIG) is True

        store.save.assert_called_once_with(CONFIG)
        assert coordinator.is_configured

    def test_save_config_without_store(self) -> None:
        coordinator = _coordinator(config=SessionConfig())
        assert coordinator.save_config(CONFIG) is True
        assert coordinator.state.config == CONFIG

    def test_save_config_failure_is_recorded(self) -> None:
        store = MagicMock(spec=BaseConfigStore)
        store.save.side_effect = ConfigStoreError("disk full")
        coordinator = _coordinator(config_store=store)

        assert coordinator.save_config(CONFIG) is False
        assert coordinator.state.error == "disk full"

    def test_load_config_merges_fallback(self) -> None:
        store = MagicMock(spec=BaseConfigStore)
        store.load.return_value = SessionConfig(extraction_endpoint="https://saved.test")
        coordinator = _coordinator(config_store=store, config=SessionConfig())

        config = coordinator.load_config(SessionConfig(extraction_key="env", analysis_key="env"))

        assert config == SessionConfig(
            extraction_endpoint="https://saved.test",
            extraction_key="env",
            analysis_key="env",
        )
        assert coordinator.state.config == config

    def test_load_config_failure_uses_fallback(self) -> None:
        store = MagicMock(spec=BaseConfigStore)
        store.load.side_effect = ConfigStoreError("unreadable")
        coordinator = _coordinator(config_store=store, config=SessionConfig())

        config = coordinator.load_config(CONFIG)

        assert config == CONFIG
        assert coordinator.state.error == "unreadable"


class TestStatePropertiesWithMockAnalyzer:
    @pytest.mark.asyncio
    async def test_has_analysis_result_after_answer(self) -> None:
        analyzer = MagicMock(spec=Analyzer)
        analyzer.answer = AsyncMock(return_value="ok")
        coordinator = WorkflowCoordinator(
            extraction_client=FakeExtractionClient(),
            analyzer=analyzer,
            config=CONFIG,
        )
        coordinator.select_document(_document())
        await coordinator.run_extraction()

        await coordinator.ask_question("q")

        analyzer.answer.assert_awaited_once_with("q", INVOICE, "llm-key")
        assert coordinator.has_analysis_result
