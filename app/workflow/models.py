from dataclasses import dataclass, field
from enum import Enum

from app.config.models import SessionConfig
from app.documents.models import AnalysisTurn, DocumentHandle, ExtractionResult, KeyValuePair


class WorkflowStatus(str, Enum):
    IDLE = "idle"
    DOCUMENT_SELECTED = "document_selected"
    EXTRACTING = "extracting"
    EXTRACTED = "extracted"
    ANALYZING = "analyzing"
    ANSWERED = "answered"
    ERROR = "error"


@dataclass
class SessionState:
    """Everything one document-and-question session knows."""

    config: SessionConfig = field(default_factory=SessionConfig)
    status: WorkflowStatus = WorkflowStatus.IDLE
    document: DocumentHandle | None = None
    extraction: ExtractionResult | None = None
    analysis_result: str = ""
    history: list[AnalysisTurn] = field(default_factory=list)
    error: str | None = None

    @property
    def document_text(self) -> str:
        return self.extraction.text if self.extraction else ""

    @property
    def document_tables(self) -> list[list[list[str]]]:
        return self.extraction.tables if self.extraction else []

    @property
    def document_key_value_pairs(self) -> list[KeyValuePair]:
        return self.extraction.key_value_pairs if self.extraction else []

    def clear_document_data(self) -> None:
        self.extraction = None
        self.analysis_result = ""
        self.history = []
        self.error = None
