"""Export package."""

from orcamentos.export.exporter import (
    CSV_FILENAME,
    CSV_MIME_TYPE,
    JSON_FILENAME,
    JSON_MIME_TYPE,
    EmptyCollectionError,
    ExportError,
    ExportFile,
    export_csv_file,
    export_json_file,
    to_csv,
    to_json,
)

__all__ = [
    "CSV_FILENAME",
    "CSV_MIME_TYPE",
    "JSON_FILENAME",
    "JSON_MIME_TYPE",
    "EmptyCollectionError",
    "ExportError",
    "ExportFile",
    "export_csv_file",
    "export_json_file",
    "to_csv",
    "to_json",
]
