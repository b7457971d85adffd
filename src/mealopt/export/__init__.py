"""Export meal plans to terminal tables and JSON."""

from mealopt.export.formatters import JSONFormatter, TableFormatter, format_result

__all__ = ["TableFormatter", "JSONFormatter", "format_result"]
