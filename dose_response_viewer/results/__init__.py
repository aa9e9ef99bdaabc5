"""Metric and data export utilities.

Example:
    >>> from dose_response_viewer.results import MetricsExporter
    >>> exporter = MetricsExporter("./exports")
    >>> exporter.best_models_table(report)
    >>> exporter.export(report, table="summary", fmt="txt")
"""

from .exporter import (
    METRIC_COLUMNS,
    PREDICTED_COLUMN,
    EXPORT_FORMATS,
    MetricsExporter,
)

__all__ = [
    'METRIC_COLUMNS',
    'PREDICTED_COLUMN',
    'EXPORT_FORMATS',
    'MetricsExporter',
]
