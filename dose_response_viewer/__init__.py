"""Dose-Response Viewer - curve fitting and plotting for dose-response assays.

Reads tabular assay data, detects the compound / concentration / response
columns, fits Hill models per compound and builds a complete plot
description (data points, fitted curve, IC50 and Dmax reference lines,
styling) for each compound.

Example workflow:
    1. Load a CSV/TSV file (or the bundled example data)
    2. Check the detected column mapping
    3. Run the analysis (one best Hill model per compound)
    4. Browse compounds and style the plot
    5. Export metrics

Quick start:
    from dose_response_viewer import DoseResponseSession
    session = DoseResponseSession()
    session.load_file("plate_01.csv")
    session.run_analysis()
    figure = session.description.to_dict()

Without the session:
    from dose_response_viewer import (
        read_table, detect, clean, HillModelFitter, PlotAssembler,
        get_default_plot_config,
    )
    rows = read_table("plate_01.csv")
    samples = clean(rows, detect(rows))
    report = HillModelFitter().fit(samples)
    plots = PlotAssembler().assemble_all(samples, report, get_default_plot_config())
"""

from .core import (
    ColumnMapping,
    CleanedSample,
    FittedModelResult,
    FitReport,
    ReferenceQuantities,
    CurveGeometry,
    CompoundMetrics,
)

from .configs import (
    PlotConfig,
    get_default_plot_config,
    get_plot_style,
    list_plot_styles,
)

from .ingestion import (
    read_table,
    load_sample_rows,
    detect,
    clean,
    list_compounds,
    summarize,
)

from .fitting import (
    FittingEngine,
    HillModelFitter,
    list_models,
)

from .plotting import (
    GeometryError,
    CurveResolutionError,
    resolve_axis_range,
    resolve_curve,
    derive_reference_quantities,
    build_shapes,
    build_annotations,
    resolve_colors,
    resolve_legend,
    PlotStatus,
    PlotDescription,
    PlotAssembler,
    to_holoviews,
)

from .results import MetricsExporter

from .session import DoseResponseSession

__version__ = "0.1.0"

__all__ = [
    # Core types
    'ColumnMapping',
    'CleanedSample',
    'FittedModelResult',
    'FitReport',
    'ReferenceQuantities',
    'CurveGeometry',
    'CompoundMetrics',
    # Configuration
    'PlotConfig',
    'get_default_plot_config',
    'get_plot_style',
    'list_plot_styles',
    # Ingestion
    'read_table',
    'load_sample_rows',
    'detect',
    'clean',
    'list_compounds',
    'summarize',
    # Fitting
    'FittingEngine',
    'HillModelFitter',
    'list_models',
    # Plotting
    'GeometryError',
    'CurveResolutionError',
    'resolve_axis_range',
    'resolve_curve',
    'derive_reference_quantities',
    'build_shapes',
    'build_annotations',
    'resolve_colors',
    'resolve_legend',
    'PlotStatus',
    'PlotDescription',
    'PlotAssembler',
    'to_holoviews',
    # Export
    'MetricsExporter',
    # Session
    'DoseResponseSession',
]
