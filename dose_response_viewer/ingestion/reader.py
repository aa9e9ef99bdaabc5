"""Tabular data reading for dose-response files.

Reads CSV or TSV content into raw rows (one dict per line, every cell
kept as text). Column interpretation happens later, in the column mapper
and the cleaner.
"""

from pathlib import Path
from typing import BinaryIO, TextIO
import csv
import io

import pandas as pd

from ..core import RawRow


# Bundled example: one compound, eight-point dilution
SAMPLE_DATA = """Compound,Conc,Rab10,Rep
MP-1-008,0,1.00,1
MP-1-008,0.1,0.95,1
MP-1-008,0.3,0.92,1
MP-1-008,1.0,0.85,1
MP-1-008,3.0,0.78,1
MP-1-008,10.0,0.65,1
MP-1-008,30.0,0.45,1
MP-1-008,100.0,0.25,1
"""

SAMPLE_NAME = "mp-1-008.csv"


def read_table(source: str | Path | bytes | BinaryIO | TextIO) -> list[RawRow]:
    """Read CSV/TSV data into raw rows.
    
    The delimiter is sniffed, so comma and tab separated files both work.
    Blank cells become empty strings.
    
    Parameters
    ----------
    source : str, Path, bytes or file-like
        Path to a file, raw file bytes, or an open file object
        
    Returns
    -------
    list[dict]
        One dict per data line, keyed by header name
        
    Raises
    ------
    ValueError
        If the content cannot be parsed as a delimited table
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    
    try:
        df = pd.read_csv(
            source,
            sep=None,
            engine="python",
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, csv.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Failed to read table: {e}") from e
    
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")


def read_table_text(content: str) -> list[RawRow]:
    """Read CSV/TSV text already held in memory."""
    return read_table(io.StringIO(content))


def load_sample_rows() -> list[RawRow]:
    """Rows of the bundled example dataset."""
    return read_table_text(SAMPLE_DATA)
