from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class DocumentHandle:
    """User-selected binary content with its declared media type."""

    content: bytes
    media_type: str = "application/octet-stream"
    filename: str = ""


@dataclass(frozen=True)
class KeyValuePair:
    """A key/value field recognized in a document."""

    key: str
    value: str


@dataclass(frozen=True)
class ExtractionResult:
    """Canonical extraction output: flat text, dense table grids, key/value pairs."""

    text: str = ""
    tables: list[list[list[str]]] = field(default_factory=list)
    key_value_pairs: list[KeyValuePair] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.tables and not self.key_value_pairs


@dataclass(frozen=True)
class ExtractionCredentials:
    """Endpoint and subscription key of the extraction service."""

    endpoint: str = ""
    key: str = ""


@dataclass(frozen=True)
class AnalysisTurn:
    """One answered question of the session history."""

    question: str
    answer: str
    timestamp: datetime
