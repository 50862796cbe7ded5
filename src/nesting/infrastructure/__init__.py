"""Infrastructure layer: output formatting and export."""

from nesting.infrastructure.formatters import JsonExporter, LayoutReportFormatter

__all__ = [
    "JsonExporter",
    "LayoutReportFormatter",
]
