"""Reactive state for a dose-response viewing session.

DoseResponseSession holds the authoritative inputs (raw rows, column
mapping, plot configuration, fit report, selected compound, theme) and
republishes a fresh PlotDescription whenever any of them changes.
Fitting runs on a worker thread; ingestion and fitting problems are
reported through ``error_message`` rather than raised.

Example:
    >>> from dose_response_viewer.session import DoseResponseSession
    >>> session = DoseResponseSession()
    >>> session.load_sample_data()
    >>> session.run_analysis()
    >>> session.update_plot_config(show_dmax_lines=False, plot_style="ggplot")
    >>> session.description.status
"""

from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Any, BinaryIO, Sequence
import logging

import param

from .configs import PlotConfig, get_default_plot_config
from .core import CleanedSample, ColumnMapping, FitReport, RawRow
from .fitting import FittingEngine, HillModelFitter
from .ingestion import (
    DataSummary,
    clean,
    detect,
    list_compounds,
    load_sample_rows,
    read_table,
    summarize,
    SAMPLE_NAME,
)
from .plotting import PlotAssembler, PlotDescription

logger = logging.getLogger(__name__)


NO_DATA_MESSAGE = "No data loaded"
NO_VALID_ROWS_MESSAGE = "No valid data rows after cleaning"


class DoseResponseSession(param.Parameterized):
    """Application state and the reactive plot pipeline.

    Every change to ``raw_rows``, ``column_mapping``, ``plot_config``,
    ``fit_report``, ``selected_compound`` or ``dark_mode`` re-runs cleaning
    and assembly and publishes a new ``description``.
    """

    # Inputs
    raw_rows = param.List(default=[], doc="Raw table rows")
    column_mapping = param.ClassSelector(
        class_=ColumnMapping, default=ColumnMapping(), instantiate=False,
        doc="Column role assignment",
    )
    plot_config = param.ClassSelector(
        class_=PlotConfig, default=None, allow_None=True, instantiate=False,
        doc="Visual configuration",
    )
    fit_report = param.ClassSelector(
        class_=FitReport, default=None, allow_None=True, instantiate=False,
        doc="Latest fitting results",
    )
    selected_compound = param.String(default="", doc="Compound being plotted")
    dark_mode = param.Boolean(default=False, doc="Application theme is dark")
    data_name = param.String(default="", doc="Name of the loaded dataset")

    # Published outputs
    description = param.ClassSelector(
        class_=PlotDescription, default=None, allow_None=True, instantiate=False,
        doc="Plot description of the selected compound",
    )
    compounds = param.List(default=[], doc="Compounds in the loaded data")
    error_message = param.String(default="")
    is_analyzing = param.Boolean(default=False)

    def __init__(self, engine: FittingEngine | None = None, **params):
        if params.get("plot_config") is None:
            params["plot_config"] = get_default_plot_config()
        super().__init__(**params)
        self.engine = engine if engine is not None else HillModelFitter()
        self.assembler = PlotAssembler(engine=self.engine)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fitting")
        self._data_version = 0
        self._refresh()

    # -------------------------------------------------------------------------
    # Loading data
    # -------------------------------------------------------------------------

    def load_rows(self, rows: Sequence[RawRow], name: str = "") -> None:
        """Replace the dataset, auto-detect columns and select the first compound.

        Previous fit results are discarded.
        """
        rows = [dict(r) for r in rows]
        mapping = detect(rows)
        compounds = list_compounds(rows, mapping)
        self._data_version += 1

        logger.info(f"Loaded {len(rows)} rows ({name or 'unnamed'}), mapping {mapping.to_dict()}")
        self.param.update(
            raw_rows=rows,
            column_mapping=mapping,
            fit_report=None,
            data_name=name,
            selected_compound=compounds[0] if compounds else "",
        )

    def load_file(self, source: str | Path | bytes | BinaryIO, name: str = "") -> bool:
        """Read a CSV/TSV source and load it.

        Returns
        -------
        bool
            False when the source could not be parsed (see ``error_message``)
        """
        try:
            rows = read_table(source)
        except (ValueError, OSError) as e:
            logger.warning(f"Could not read {name or source!r}: {e}")
            self.error_message = f"Could not read file: {e}"
            return False

        if not name and isinstance(source, (str, Path)):
            name = Path(source).name
        self.load_rows(rows, name=name)
        return True

    def load_sample_data(self) -> None:
        """Load the bundled example dataset."""
        self.load_rows(load_sample_rows(), name=SAMPLE_NAME)

    def set_column_mapping(self, mapping: ColumnMapping) -> None:
        """Override the detected mapping; previous fit results are discarded."""
        compounds = list_compounds(self.raw_rows, mapping)
        selected = self.selected_compound
        if selected not in compounds:
            selected = compounds[0] if compounds else ""
        self._data_version += 1
        self.param.update(
            column_mapping=mapping,
            fit_report=None,
            selected_compound=selected,
        )

    def update_plot_config(self, **changes: Any) -> PlotConfig:
        """Shallow-merge ``changes`` into the plot configuration.

        Raises
        ------
        ValueError
            If a key is not a PlotConfig field
        """
        self.plot_config = self.plot_config.updated(**changes)
        return self.plot_config

    # -------------------------------------------------------------------------
    # Derived data
    # -------------------------------------------------------------------------

    def cleaned_samples(self) -> list[CleanedSample]:
        """Samples of the loaded rows under the current mapping."""
        if not self.raw_rows or not self.column_mapping.is_resolved:
            return []
        return clean(self.raw_rows, self.column_mapping)

    def summary(self) -> DataSummary:
        """Row count, compounds and value ranges of the loaded rows."""
        return summarize(self.raw_rows, self.column_mapping)

    def all_descriptions(self) -> dict[str, PlotDescription]:
        """Plot descriptions of every compound with valid samples."""
        return self.assembler.assemble_all(
            self.cleaned_samples(),
            self.fit_report,
            self.plot_config,
            self.dark_mode,
        )

    @param.depends(
        "raw_rows",
        "column_mapping",
        "plot_config",
        "fit_report",
        "selected_compound",
        "dark_mode",
        watch=True,
    )
    def _refresh(self):
        """Recompute compounds and the selected compound's description."""
        compounds = list_compounds(self.raw_rows, self.column_mapping) if self.raw_rows else []
        if compounds != self.compounds:
            self.compounds = compounds

        if self.selected_compound not in compounds:
            fallback = compounds[0] if compounds else ""
            if fallback != self.selected_compound:
                # Re-enters _refresh with the new selection
                self.selected_compound = fallback
                return

        if not self.raw_rows:
            self.description = None
            return

        samples = self.cleaned_samples()
        if not samples:
            self.error_message = NO_VALID_ROWS_MESSAGE
            self.description = None
            return
        if self.error_message == NO_VALID_ROWS_MESSAGE:
            self.error_message = ""

        if not self.selected_compound:
            self.description = None
            return

        result = self.fit_report.get(self.selected_compound) if self.fit_report else None
        try:
            self.description = self.assembler.assemble(
                self.selected_compound,
                samples,
                result,
                self.plot_config,
                ambient_is_dark=self.dark_mode,
            )
        except Exception as e:
            logger.error(f"Plot assembly failed for {self.selected_compound}: {e}")
            self.error_message = f"Plot assembly failed: {e}"
            self.description = None

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    def submit_analysis(self) -> Future | None:
        """Start fitting the cleaned samples on the worker thread.

        When the fit completes, ``is_analyzing`` is reset and the report is
        published to ``fit_report``, unless the data changed in the meantime.
        Failures are reported through ``error_message``.

        Returns
        -------
        Future or None
            Future resolving, after publication, to the published FitReport
            (None when the fit failed or was discarded), or None when there
            is nothing to fit (``error_message`` says why)
        """
        if not self.raw_rows:
            self.error_message = NO_DATA_MESSAGE
            return None
        samples = self.cleaned_samples()
        if not samples:
            self.error_message = NO_VALID_ROWS_MESSAGE
            return None

        logger.info(f"Submitting analysis of {len(samples)} samples")
        self.error_message = ""
        self.is_analyzing = True

        version = self._data_version
        published: Future = Future()
        fitting = self._executor.submit(self.engine.fit, samples)
        fitting.add_done_callback(
            lambda f: self._complete_analysis(f, version, published)
        )
        return published

    def _complete_analysis(self, fitting: Future, version: int, published: Future) -> None:
        """Done-callback of the fitting future; resolves ``published``."""
        try:
            published.set_result(self._publish_report(fitting, version))
        except Exception as e:
            logger.error(f"Publishing analysis results failed: {e}")
            published.set_exception(e)

    def _publish_report(self, fitting: Future, version: int) -> FitReport | None:
        self.is_analyzing = False

        error = fitting.exception()
        if error is not None:
            logger.error(f"Analysis failed: {error}")
            self.error_message = f"Analysis failed: {error}"
            return None

        if version != self._data_version:
            logger.warning("Data changed during analysis; discarding results")
            return None

        report = fitting.result()
        self.fit_report = report
        failed = report.failed_compounds
        if failed:
            self.error_message = f"No model could be fitted for: {', '.join(failed)}"
        logger.info(f"Analysis finished: {len(report.best)} compound(s)")
        return report

    def run_analysis(self, timeout: float | None = None) -> FitReport | None:
        """Fit the current data and wait for the report to be published.

        Parameters
        ----------
        timeout : float, optional
            Seconds to wait for the worker. On timeout the fit keeps
            running and publishes its report when it completes.

        Returns
        -------
        FitReport or None
            The published report, or None on failure, timeout or when the
            data changed while fitting
        """
        future = self.submit_analysis()
        if future is None:
            return None

        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.warning(f"Analysis did not finish within {timeout} s")
            self.error_message = "Analysis timed out"
            return None
        except Exception as e:
            self.error_message = f"Analysis failed: {e}"
            return None

    def reset(self) -> None:
        """Clear data, results and configuration."""
        self._data_version += 1
        self.param.update(
            raw_rows=[],
            column_mapping=ColumnMapping(),
            plot_config=get_default_plot_config(),
            fit_report=None,
            selected_compound="",
            data_name="",
            error_message="",
        )

    def close(self) -> None:
        """Shut down the worker thread."""
        self._executor.shutdown(wait=False)
