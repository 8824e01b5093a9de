"""Serializes an extraction result and a question into one prompt."""

from app.analysis.prompt_loader import load_prompt_template
from app.documents.models import ExtractionResult, KeyValuePair

_DEFAULT_TEMPLATE = load_prompt_template()


def compose(
    question: str,
    result: ExtractionResult,
    template: str | None = None,
) -> str:
    """Build the analysis prompt. Pure: equal inputs give equal output.

    Sections appear in a fixed order: instruction, document text, tables
    (only if any), key/value pairs (only if any), question, closing line.
    """
    return (template or _DEFAULT_TEMPLATE).format(
        document_text=result.text,
        tables_section=render_tables(result.tables),
        key_value_section=render_key_value_pairs(result.key_value_pairs),
        question=question,
    )


def render_tables(tables: list[list[list[str]]]) -> str:
    if not tables:
        return ""
    parts = ["\nTables from the document:\n"]
    for index, table in enumerate(tables, start=1):
        parts.append(f"Table {index}:\n")
        parts.extend(" | ".join(row) + "\n" for row in table)
        parts.append("\n")
    return "".join(parts)


def render_key_value_pairs(pairs: list[KeyValuePair]) -> str:
    if not pairs:
        return ""
    lines = "".join(f"{pair.key}: {pair.value}\n" for pair in pairs)
    return f"\nKey-value pairs from the document:\n{lines}"
