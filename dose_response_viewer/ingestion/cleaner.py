"""Row cleaning: raw table rows to validated numeric samples.

The cleaned samples feed the fitting engine and the log-scaled plot, so
concentrations must be strictly positive and every value finite. Rows
that cannot satisfy this are dropped, never coerced.
"""

from dataclasses import dataclass, field
from typing import Any, Sequence
import math

from ..core import CleanedSample, ColumnMapping, RawRow


@dataclass
class DataSummary:
    """Overview of a loaded dataset under a column mapping."""
    total_rows: int = 0
    compounds: list[str] = field(default_factory=list)
    concentration_range: tuple[float, float] = (0.0, 0.0)
    response_range: tuple[float, float] = (0.0, 0.0)


def parse_number(value: Any) -> float:
    """Parse a raw cell into a float, returning NaN when it is not numeric."""
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def compound_name(value: Any) -> str:
    """Trimmed string form of a compound cell ("" when absent)."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def clean(rows: Sequence[RawRow], mapping: ColumnMapping) -> list[CleanedSample]:
    """Filter and coerce raw rows into CleanedSamples.
    
    A row is kept when its compound is non-empty, both concentration and
    response parse as finite numbers, and concentration > 0. Input order
    is preserved. Columns missing from a row make that row unparsable.
    
    Parameters
    ----------
    rows : sequence of dict
        Raw rows
    mapping : ColumnMapping
        Column role assignment
        
    Returns
    -------
    list[CleanedSample]
        Valid samples in input order
    """
    samples = []
    for row in rows:
        compound = compound_name(row.get(mapping.compound))
        if not compound:
            continue
        
        concentration = parse_number(row.get(mapping.concentration))
        response = parse_number(row.get(mapping.response))
        if not (math.isfinite(concentration) and math.isfinite(response)):
            continue
        if concentration <= 0:
            continue
        
        samples.append(CleanedSample(compound, concentration, response))
    
    return samples


def samples_for_compound(
    samples: Sequence[CleanedSample],
    compound: str,
) -> list[CleanedSample]:
    """Subset of ``samples`` belonging to ``compound``, order preserved."""
    return [s for s in samples if s.compound == compound]


def group_by_compound(samples: Sequence[CleanedSample]) -> dict[str, list[CleanedSample]]:
    """Group samples per compound, keeping first-seen compound order."""
    groups: dict[str, list[CleanedSample]] = {}
    for sample in samples:
        groups.setdefault(sample.compound, []).append(sample)
    return groups


def list_compounds(rows: Sequence[RawRow], mapping: ColumnMapping) -> list[str]:
    """Distinct non-empty compound names in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        name = compound_name(row.get(mapping.compound))
        if name:
            seen.setdefault(name, None)
    return list(seen)


def summarize(rows: Sequence[RawRow], mapping: ColumnMapping) -> DataSummary:
    """Summarize row count, compounds and value ranges.
    
    Ranges are computed over every parseable value, before cleaning.
    """
    if not rows:
        return DataSummary()
    
    concentrations = [parse_number(row.get(mapping.concentration)) for row in rows]
    concentrations = [v for v in concentrations if math.isfinite(v)]
    responses = [parse_number(row.get(mapping.response)) for row in rows]
    responses = [v for v in responses if math.isfinite(v)]
    
    return DataSummary(
        total_rows=len(rows),
        compounds=list_compounds(rows, mapping),
        concentration_range=(min(concentrations), max(concentrations)) if concentrations else (0.0, 0.0),
        response_range=(min(responses), max(responses)) if responses else (0.0, 0.0),
    )
