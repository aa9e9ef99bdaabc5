"""Column role auto-detection.

Guesses which raw columns hold the compound, concentration and response
from their names. The guess is a heuristic: the user can always override
the returned mapping.
"""

from typing import Sequence

from ..core import ColumnMapping, RawRow


# Lower-case substrings that mark a column as candidate for a role
COMPOUND_KEYWORDS = ("compound", "drug")
CONCENTRATION_KEYWORDS = ("conc", "dose")
RESPONSE_KEYWORDS = ("response", "rab", "signal")


def _matches(column: str, keywords: tuple[str, ...]) -> bool:
    name = column.lower()
    return any(keyword in name for keyword in keywords)


def detect(rows: Sequence[RawRow]) -> ColumnMapping:
    """Infer a ColumnMapping from the columns of the first row.
    
    Every role starts at the first column. Columns are then scanned in
    declaration order and each keyword match overwrites its role, so the
    last matching column wins.
    
    Parameters
    ----------
    rows : sequence of dict
        Raw rows as produced by the table reader
        
    Returns
    -------
    ColumnMapping
        Detected mapping; an unresolved (empty) mapping when ``rows`` is
        empty or has no columns
        
    Example
    -------
    >>> detect([{"Compound": "A", "Conc": "1", "Rab10": "0.9"}])
    ColumnMapping(compound='Compound', concentration='Conc', response='Rab10')
    """
    if not rows:
        return ColumnMapping()
    
    columns = [str(c) for c in rows[0].keys()]
    if not columns:
        return ColumnMapping()
    
    compound = concentration = response = columns[0]
    for column in columns:
        if _matches(column, COMPOUND_KEYWORDS):
            compound = column
        if _matches(column, CONCENTRATION_KEYWORDS):
            concentration = column
        if _matches(column, RESPONSE_KEYWORDS):
            response = column
    
    return ColumnMapping(
        compound=compound,
        concentration=concentration,
        response=response,
    )


def available_columns(rows: Sequence[RawRow]) -> list[str]:
    """Column names of the loaded data (keys of the first row)."""
    if not rows:
        return []
    return [str(c) for c in rows[0].keys()]
