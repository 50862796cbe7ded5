"""Application layer - request handling and orchestration."""

from .csv_import import CsvImportResult, parse_csv_content, parse_csv_file
from .packing_service import MaterialLayout, PackingReport, PackingService

__all__ = [
    "CsvImportResult",
    "MaterialLayout",
    "PackingReport",
    "PackingService",
    "parse_csv_content",
    "parse_csv_file",
]
