from dataclasses import dataclass, fields

from app.documents.models import ExtractionCredentials


@dataclass(frozen=True)
class SessionConfig:
    """Credentials a session needs for both external services."""

    extraction_endpoint: str = ""
    extraction_key: str = ""
    analysis_key: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.extraction_endpoint and self.extraction_key and self.analysis_key)

    @property
    def extraction_credentials(self) -> ExtractionCredentials:
        return ExtractionCredentials(endpoint=self.extraction_endpoint, key=self.extraction_key)

    def merged_with(self, fallback: "SessionConfig") -> "SessionConfig":
        """Fill empty fields from `fallback`."""
        return SessionConfig(
            **{
                f.name: getattr(self, f.name) or getattr(fallback, f.name)
                for f in fields(self)
            }
        )

    def to_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
