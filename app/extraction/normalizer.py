"""Reshapes raw analyze results into the canonical ExtractionResult."""

from collections.abc import Iterable, Mapping
from typing import Any

from app.documents.models import ExtractionResult, KeyValuePair


def build_extraction_result(analyze_result: Mapping[str, Any]) -> ExtractionResult:
    """Build an ExtractionResult from the service's `analyzeResult` object."""
    return ExtractionResult(
        text=flatten_text(analyze_result.get("pages")),
        tables=[
            build_table_grid(table.get("cells"))
            for table in analyze_result.get("tables") or []
        ],
        key_value_pairs=build_key_value_pairs(analyze_result.get("keyValuePairs")),
    )


def flatten_text(pages: Iterable[Mapping[str, Any]] | None) -> str:
    """Join every recognized line of every page, in order, with newlines."""
    lines = [
        _as_text(line.get("content"))
        for page in pages or []
        for line in page.get("lines") or []
    ]
    return "\n".join(lines)


def build_table_grid(cells: Iterable[Mapping[str, Any]] | None) -> list[list[str]]:
    """Reassemble a cell list into a dense row-major grid.

    The grid is max(rowIndex)+1 rows by max(columnIndex)+1 columns;
    cells the service did not report stay as empty strings.
    """
    cell_list = list(cells or [])
    if not cell_list:
        return []
    row_count = max(int(cell.get("rowIndex", 0)) for cell in cell_list) + 1
    col_count = max(int(cell.get("columnIndex", 0)) for cell in cell_list) + 1
    grid = [[""] * col_count for _ in range(row_count)]
    for cell in cell_list:
        row = int(cell.get("rowIndex", 0))
        col = int(cell.get("columnIndex", 0))
        grid[row][col] = _as_text(cell.get("content"))
    return grid


def build_grid_from_rows(rows: Iterable[Iterable[Any]] | None) -> list[list[str]]:
    """Pad ragged rows (None for empty cells) into a dense grid."""
    text_rows = [[_as_text(value) for value in row] for row in rows or []]
    if not text_rows:
        return []
    col_count = max(len(row) for row in text_rows)
    return [row + [""] * (col_count - len(row)) for row in text_rows]


def build_key_value_pairs(
    raw_pairs: Iterable[Mapping[str, Any]] | None,
) -> list[KeyValuePair]:
    """Keep only pairs where both key and value were recognized."""
    pairs: list[KeyValuePair] = []
    for raw in raw_pairs or []:
        key = raw.get("key")
        value = raw.get("value")
        if not key or not value:
            continue
        key_text = key.get("content")
        value_text = value.get("content")
        if key_text is None or value_text is None:
            continue
        pairs.append(KeyValuePair(key=str(key_text), value=str(value_text)))
    return pairs


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)
