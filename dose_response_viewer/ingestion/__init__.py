"""Data ingestion: reading, column detection and cleaning.

Example:
    >>> from dose_response_viewer.ingestion import read_table, detect, clean
    >>> rows = read_table("plate_01.csv")
    >>> mapping = detect(rows)
    >>> samples = clean(rows, mapping)
"""

from .reader import (
    SAMPLE_DATA,
    SAMPLE_NAME,
    read_table,
    read_table_text,
    load_sample_rows,
)
from .column_mapper import detect, available_columns
from .cleaner import (
    DataSummary,
    parse_number,
    clean,
    samples_for_compound,
    group_by_compound,
    list_compounds,
    summarize,
)

__all__ = [
    # Reading
    "SAMPLE_DATA",
    "SAMPLE_NAME",
    "read_table",
    "read_table_text",
    "load_sample_rows",
    # Column detection
    "detect",
    "available_columns",
    # Cleaning
    "DataSummary",
    "parse_number",
    "clean",
    "samples_for_compound",
    "group_by_compound",
    "list_compounds",
    "summarize",
]
