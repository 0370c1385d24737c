"""Output formatters."""

from fittrack.export.formatters import (
    JSONFormatter,
    MarkdownFormatter,
    TableFormatter,
    format_report,
)

__all__ = ["TableFormatter", "JSONFormatter", "MarkdownFormatter", "format_report"]
