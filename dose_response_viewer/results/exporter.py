"""Export of fit metrics and per-compound data.

Handles:
- Best-model table (one row per compound)
- Summary table (every successful candidate model)
- Per-compound raw data with predicted responses
- CSV / tab-separated text rendering and timestamped files
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Sequence
import logging
import math

import numpy as np
import pandas as pd

from ..core import ColumnMapping, FitReport, FittedModelResult, RawRow
from ..fitting import get_model
from ..ingestion.cleaner import compound_name, parse_number

logger = logging.getLogger(__name__)


METRIC_COLUMNS = ["Compound", "Model", "IC50", "RMSE", "AIC"]
PREDICTED_COLUMN = "Predicted_Response"

EXPORT_FORMATS = ("csv", "txt")
MISSING = "N/A"


def _metric_row(result: FittedModelResult) -> dict[str, Any]:
    return {
        "Compound": result.compound,
        "Model": result.model_name,
        "IC50": result.ic50 if result.success else math.nan,
        "RMSE": result.rmse if result.success else math.nan,
        "AIC": result.aic if result.aic is not None else math.nan,
    }


def _format_cell(value: Any, quote_text: bool) -> str:
    if value is None:
        return MISSING
    if isinstance(value, (float, np.floating)):
        if not math.isfinite(value):
            return MISSING
        return f"{value:.6f}"
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return str(value)
    text = str(value)
    if quote_text:
        return '"' + text.replace('"', '""') + '"'
    return text


class MetricsExporter:
    """Builds metric tables and writes them as CSV or text files.

    Example:
        >>> exporter = MetricsExporter("./exports")
        >>> df = exporter.best_models_table(report)
        >>> path = exporter.export(report, table="best", fmt="csv")
    """

    def __init__(self, base_dir: Path | str = "."):
        """Initialize exporter.

        Parameters
        ----------
        base_dir : Path or str
            Directory that receives exported files (created if needed)
        """
        self.base_dir = Path(base_dir)

    def best_models_table(self, report: FitReport) -> pd.DataFrame:
        """One row per compound with its best model's metrics."""
        rows = [_metric_row(result) for result in report.best.values()]
        return pd.DataFrame(rows, columns=METRIC_COLUMNS)

    def summary_table(self, report: FitReport) -> pd.DataFrame:
        """One row per successfully fitted candidate model."""
        rows = [_metric_row(result) for result in report.summary]
        return pd.DataFrame(rows, columns=METRIC_COLUMNS)

    def compound_data_table(
        self,
        rows: Sequence[RawRow],
        mapping: ColumnMapping,
        compound: str,
        result: FittedModelResult | None = None,
    ) -> pd.DataFrame:
        """Raw rows of one compound, with predicted responses when fitted.

        Parameters
        ----------
        rows : sequence of dict
            Raw rows of the dataset
        mapping : ColumnMapping
            Column role assignment
        compound : str
            Compound to export
        result : FittedModelResult, optional
            Fit of the compound. When successful, a ``Predicted_Response``
            column is added; rows without a positive concentration get NaN.

        Returns
        -------
        pd.DataFrame
            Columns named after the mapped compound, concentration and
            response columns (plus ``Predicted_Response``)
        """
        selected = [r for r in rows if compound_name(r.get(mapping.compound)) == compound]
        concentrations = np.array(
            [parse_number(r.get(mapping.concentration)) for r in selected], dtype=float
        )
        df = pd.DataFrame({
            mapping.compound: [compound] * len(selected),
            mapping.concentration: concentrations,
            mapping.response: [parse_number(r.get(mapping.response)) for r in selected],
        })

        if result is not None and result.success and result.n_params == 4:
            model = get_model(result.model_name)
            valid = np.isfinite(concentrations) & (concentrations > 0)
            predicted = np.full(len(selected), np.nan)
            if valid.any():
                predicted[valid] = model.predict(result.fitted_params, concentrations[valid])
            df[PREDICTED_COLUMN] = predicted

        return df

    def to_text(self, df: pd.DataFrame, fmt: str = "csv") -> str:
        """Render a table as CSV or tab-separated text.

        Numbers are written with six decimals and missing numbers as
        ``N/A``. In CSV, text cells are wrapped in double quotes.

        Raises
        ------
        ValueError
            If ``fmt`` is not "csv" or "txt"
        """
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unknown export format: {fmt}. Use one of {EXPORT_FORMATS}")

        sep = "," if fmt == "csv" else "\t"
        quote_text = fmt == "csv"

        lines = [sep.join(str(c) for c in df.columns)]
        for record in df.itertuples(index=False, name=None):
            lines.append(sep.join(_format_cell(v, quote_text) for v in record))
        return "\n".join(lines)

    def export(
        self,
        report: FitReport,
        table: str = "best",
        fmt: str = "csv",
    ) -> Path:
        """Write the best-model or summary table to a timestamped file.

        Parameters
        ----------
        report : FitReport
            Fitting results
        table : str, default="best"
            "best" (``best_models_<timestamp>``) or "summary"
            (``dose_response_summary_<timestamp>``)
        fmt : str, default="csv"
            "csv" or "txt"

        Returns
        -------
        Path
            Path of the written file
        """
        if table == "best":
            df = self.best_models_table(report)
            stem = "best_models"
        elif table == "summary":
            df = self.summary_table(report)
            stem = "dose_response_summary"
        else:
            raise ValueError(f"Unknown table: {table}. Use 'best' or 'summary'")

        content = self.to_text(df, fmt)
        timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
        return self._write(f"{stem}_{timestamp}.{fmt}", content)

    def export_compound_data(
        self,
        rows: Sequence[RawRow],
        mapping: ColumnMapping,
        compound: str,
        result: FittedModelResult | None = None,
    ) -> Path:
        """Write one compound's data to ``<compound>-data.csv``."""
        df = self.compound_data_table(rows, mapping, compound, result)
        content = self.to_text(df, "csv")
        return self._write(f"{self._sanitize_filename(compound)}-data.csv", content)

    def _write(self, filename: str, content: str) -> Path:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        path = self.base_dir / filename
        path.write_text(content, encoding="utf-8")
        logger.info(f"Exported {path}")
        return path

    @staticmethod
    def _sanitize_filename(name: str) -> str:
        """Sanitize string for use as filename."""
        invalid_chars = '<>:"/\\|?*'
        result = name
        for char in invalid_chars:
            result = result.replace(char, '_')

        result = result.strip('. ')

        if len(result) > 100:
            result = result[:100]

        return result or "unnamed"
