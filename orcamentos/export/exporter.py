"""
Collection Export

DESIGN DECISION: Export is a full backup. It always serializes the whole
stored collection, never the filtered list currently on screen.

Formats:
- JSON: array of records with their stored field names, 2-space indent
- CSV: fixed columns, bare header, every value double-quoted
"""

import json
from typing import Any, Sequence

from pydantic import BaseModel

from orcamentos.models.budget import BUDGET_COLUMNS, BudgetItem


JSON_FILENAME = "orcamentos.json"
JSON_MIME_TYPE = "application/json"
CSV_FILENAME = "orcamentos.csv"
CSV_MIME_TYPE = "text/csv;charset=utf-8"


class ExportError(Exception):
    """Base exception for export operations."""
    pass


class EmptyCollectionError(ExportError):
    """There are no records to export."""

    def __init__(self, message: str = "Nenhum orçamento a exportar."):
        super().__init__(message)


class ExportFile(BaseModel):
    """A generated export, ready to be offered as a download."""

    filename: str
    mime_type: str
    content: str

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _quote(value: Any) -> str:
    return '"' + _stringify(value).replace('"', '""') + '"'


def to_json(records: Sequence[BudgetItem]) -> str:
    """Pretty-printed JSON array of every record."""
    return json.dumps(
        [item.to_storage_dict() for item in records],
        ensure_ascii=False,
        indent=2,
    )


def to_csv(records: Sequence[BudgetItem]) -> str:
    """
    CSV text of every record.

    Raises:
        EmptyCollectionError: If there are no records
    """
    if not records:
        raise EmptyCollectionError()

    lines = [",".join(BUDGET_COLUMNS)]
    for item in records:
        row = item.to_storage_dict()
        lines.append(",".join(_quote(row.get(column)) for column in BUDGET_COLUMNS))
    return "\n".join(lines)


def export_json_file(records: Sequence[BudgetItem]) -> ExportFile:
    return ExportFile(
        filename=JSON_FILENAME,
        mime_type=JSON_MIME_TYPE,
        content=to_json(records),
    )


def export_csv_file(records: Sequence[BudgetItem]) -> ExportFile:
    return ExportFile(
        filename=CSV_FILENAME,
        mime_type=CSV_MIME_TYPE,
        content=to_csv(records),
    )
