from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.documents.models import ExtractionResult, KeyValuePair


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class KeyValuePairModel(_CamelModel):
    key: str
    value: str


class ProcessDocumentResponse(_CamelModel):
    document_text: str = ""
    document_tables: list[list[list[str]]] = Field(default_factory=list)
    document_key_value_pairs: list[KeyValuePairModel] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ProcessDocumentResponse":
        return cls(
            document_text=result.text,
            document_tables=result.tables,
            document_key_value_pairs=[
                KeyValuePairModel(key=pair.key, value=pair.value)
                for pair in result.key_value_pairs
            ],
        )


class AnalyzeRequest(_CamelModel):
    question: str = ""
    document_text: str = ""
    document_tables: list[list[list[str]]] = Field(default_factory=list)
    document_key_value_pairs: list[KeyValuePairModel] = Field(default_factory=list)

    def to_result(self) -> ExtractionResult:
        return ExtractionResult(
            text=self.document_text,
            tables=self.document_tables,
            key_value_pairs=[
                KeyValuePair(key=pair.key, value=pair.value)
                for pair in self.document_key_value_pairs
            ],
        )


class AnalyzeResponse(_CamelModel):
    analysis: str
