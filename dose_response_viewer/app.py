"""Panel GUI for dose-response curve viewing.

A small interface around DoseResponseSession:
1. Upload a CSV/TSV file (or load the example dataset)
2. Check the detected columns
3. Run the analysis
4. Browse compounds and adjust the plot
5. Export metrics

Run with:
    panel serve app.py --show --autoreload

Or programmatically:
    from dose_response_viewer.app import serve
    serve(port=5006)
"""

import io

import panel as pn
import param
import pandas as pd

pn.extension('tabulator', notifications=True)

from .configs import PlotConfig, list_plot_styles
from .core import ColumnMapping
from .ingestion import available_columns
from .plotting import LEGEND_POSITIONS, to_holoviews
from .plotting.styles import LINE_DASHES, MARKER_SYMBOLS
from .results import MetricsExporter
from .session import DoseResponseSession


class DoseResponseApp(param.Parameterized):
    """Dose-response viewer application.

    Workflow:
    1. Data: upload a file or load the example, review column detection
    2. Plot: run the analysis, select a compound, style the plot
    3. Results: best-model table and exports
    """

    status = param.String(default="Ready. Upload a CSV/TSV file or load the example data.")

    def __init__(self, session: DoseResponseSession | None = None, **params):
        super().__init__(**params)
        self.session = session if session is not None else DoseResponseSession()
        self.exporter = MetricsExporter()

        self._build_ui()

        self.session.param.watch(self._on_description_change, 'description')
        self.session.param.watch(self._on_compounds_change, 'compounds')
        self.session.param.watch(self._on_error_change, 'error_message')
        self.session.param.watch(self._on_fit_report_change, 'fit_report')
        self.session.param.watch(self._on_rows_change, ['raw_rows', 'column_mapping'])

    def _build_ui(self):
        """Build UI components."""
        config = self.session.plot_config

        # === Tab 1: Data ===
        self._file_input = pn.widgets.FileInput(
            accept=".csv,.tsv,.txt",
            name="Upload Data",
        )
        self._file_input.param.watch(self._on_file_upload, 'value')

        self._sample_btn = pn.widgets.Button(
            name="Load Example Data",
            button_type="light",
            width=200,
        )
        self._sample_btn.on_click(self._on_load_sample)

        self._compound_column = pn.widgets.Select(name="Compound Column", options=[], width=200)
        self._concentration_column = pn.widgets.Select(name="Concentration Column", options=[], width=200)
        self._response_column = pn.widgets.Select(name="Response Column", options=[], width=200)

        self._apply_mapping_btn = pn.widgets.Button(
            name="Apply Columns",
            button_type="default",
            width=150,
        )
        self._apply_mapping_btn.on_click(self._on_apply_mapping)

        self._summary_pane = pn.pane.Markdown("*No data loaded*")

        self._data_table = pn.widgets.Tabulator(
            pd.DataFrame(),
            height=250,
            sizing_mode='stretch_width',
            disabled=True,
            pagination='local',
            page_size=25,
        )

        # === Tab 2: Plot ===
        self._analyse_btn = pn.widgets.Button(
            name="Run Analysis",
            button_type="success",
            width=150,
        )
        self._analyse_btn.on_click(self._on_analyse)

        self._compound_select = pn.widgets.Select(name="Compound", options=[], width=250)
        self._compound_select.param.watch(self._on_compound_select, 'value')

        self._style_select = pn.widgets.Select(
            name="Plot Style", options=list_plot_styles(), value=config.plot_style, width=180,
        )
        self._legend_select = pn.widgets.Select(
            name="Legend", options=list(LEGEND_POSITIONS), value=config.legend_position, width=180,
        )
        self._marker_select = pn.widgets.Select(
            name="Marker", options=list(MARKER_SYMBOLS), value=config.point_marker_style, width=150,
        )
        self._line_style_select = pn.widgets.Select(
            name="Line Style", options=list(LINE_DASHES), value=config.line_style, width=150,
        )
        self._point_color = pn.widgets.ColorPicker(name="Points", value=config.data_point_color)
        self._line_color = pn.widgets.ColorPicker(name="Curve", value=config.line_color)
        self._ic50_checkbox = pn.widgets.Checkbox(name="IC50 lines", value=config.show_ic50_lines)
        self._dmax_checkbox = pn.widgets.Checkbox(name="Dmax lines", value=config.show_dmax_lines)
        self._grid_checkbox = pn.widgets.Checkbox(name="Grid", value=config.grid_enabled)
        self._dark_toggle = pn.widgets.Toggle(name="Dark Mode", value=self.session.dark_mode, width=120)
        self._dark_toggle.param.watch(self._on_dark_mode, 'value')

        # Widget name -> PlotConfig field
        self._config_widgets = {
            "plot_style": self._style_select,
            "legend_position": self._legend_select,
            "point_marker_style": self._marker_select,
            "line_style": self._line_style_select,
            "data_point_color": self._point_color,
            "line_color": self._line_color,
            "show_ic50_lines": self._ic50_checkbox,
            "show_dmax_lines": self._dmax_checkbox,
            "grid_enabled": self._grid_checkbox,
        }
        for field_name, widget in self._config_widgets.items():
            widget.param.watch(
                lambda event, name=field_name: self._on_config_change(name, event.new),
                'value',
            )

        self._reset_config_btn = pn.widgets.Button(name="Reset Style", button_type="light", width=120)
        self._reset_config_btn.on_click(self._on_reset_config)

        self._plot_pane = pn.pane.HoloViews(None, sizing_mode='fixed')
        self._metrics_pane = pn.pane.Markdown("")

        # === Tab 3: Results ===
        self._results_table = pn.widgets.Tabulator(
            pd.DataFrame(),
            height=300,
            sizing_mode='stretch_width',
            disabled=True,
        )

        self._export_format = pn.widgets.RadioButtonGroup(
            name="Format", options=["csv", "txt"], value="csv",
        )
        self._export_best_btn = pn.widgets.FileDownload(
            callback=self._best_models_file,
            filename="best_models.csv",
            button_type="primary",
            label="Download Best Models",
            width=220,
        )
        self._export_summary_btn = pn.widgets.FileDownload(
            callback=self._summary_file,
            filename="dose_response_summary.csv",
            button_type="default",
            label="Download All Models",
            width=220,
        )
        self._export_compound_btn = pn.widgets.FileDownload(
            callback=self._compound_file,
            filename="compound-data.csv",
            button_type="default",
            label="Download Compound Data",
            width=220,
        )
        self._export_format.param.watch(self._on_export_format_change, 'value')

        # Status bar
        self._status_pane = pn.pane.Alert(
            self.status,
            alert_type="info",
            sizing_mode='stretch_width',
        )

    # -------------------------------------------------------------------------
    # Session events
    # -------------------------------------------------------------------------

    def _on_description_change(self, event):
        description = event.new
        if description is None:
            self._plot_pane.object = None
            self._metrics_pane.object = ""
            return

        self._plot_pane.object = to_holoviews(description)

        lines = [f"**Status:** {description.status.value}"]
        if description.metrics is not None:
            m = description.metrics
            lines.append(f"**Model:** {m.model}")
            lines.append(f"**IC50:** {m.ic50:.4g}" if m.ic50 is not None else "**IC50:** N/A")
            lines.append(f"**RMSE:** {m.rmse:.4g}" if m.rmse is not None else "**RMSE:** N/A")
            lines.append(f"**AIC:** {m.aic:.4g}" if m.aic is not None else "**AIC:** N/A")
        for message in description.messages:
            lines.append(f"*{message}*")
        self._metrics_pane.object = "\n\n".join(lines)

    def _on_compounds_change(self, event):
        self._compound_select.options = list(event.new)
        if self.session.selected_compound in event.new:
            self._compound_select.value = self.session.selected_compound

    def _on_error_change(self, event):
        if event.new:
            self.status = event.new
            self._update_status("danger")

    def _on_fit_report_change(self, event):
        report = event.new
        if report is None:
            self._results_table.value = pd.DataFrame()
            return
        self._results_table.value = self.exporter.best_models_table(report)

    def _on_rows_change(self, event):
        rows = self.session.raw_rows
        columns = available_columns(rows)
        mapping = self.session.column_mapping
        for widget, value in (
            (self._compound_column, mapping.compound),
            (self._concentration_column, mapping.concentration),
            (self._response_column, mapping.response),
        ):
            widget.options = columns
            if value in columns:
                widget.value = value

        self._data_table.value = pd.DataFrame(rows)

        summary = self.session.summary()
        if summary.total_rows:
            self._summary_pane.object = (
                f"**Rows:** {summary.total_rows} | "
                f"**Compounds:** {len(summary.compounds)} | "
                f"**Concentration:** {summary.concentration_range[0]:g} - {summary.concentration_range[1]:g} | "
                f"**Response:** {summary.response_range[0]:g} - {summary.response_range[1]:g}"
            )
        else:
            self._summary_pane.object = "*No data loaded*"

    # -------------------------------------------------------------------------
    # Widget events
    # -------------------------------------------------------------------------

    def _on_file_upload(self, event):
        """Handle file upload."""
        if event.new is None:
            return
        name = self._file_input.filename or "upload.csv"
        if self.session.load_file(event.new, name=name):
            self.status = f"Loaded {name}: {len(self.session.raw_rows)} rows"
            self._update_status("success")

    def _on_load_sample(self, event):
        self.session.load_sample_data()
        self.status = f"Loaded example data ({self.session.data_name})"
        self._update_status("success")

    def _on_apply_mapping(self, event):
        mapping = ColumnMapping(
            compound=self._compound_column.value or "",
            concentration=self._concentration_column.value or "",
            response=self._response_column.value or "",
        )
        self.session.set_column_mapping(mapping)
        self.status = "Column mapping updated. Run the analysis again to refit."
        self._update_status("info")

    def _on_analyse(self, event):
        """Run fitting for every compound."""
        self._analyse_btn.disabled = True
        self.status = "Fitting models..."
        self._update_status("info")
        try:
            report = self.session.run_analysis()
        finally:
            self._analyse_btn.disabled = False

        if report is None:
            return
        if report.failed_compounds:
            self.status = f"Fitted {len(report.best) - len(report.failed_compounds)} of {len(report.best)} compounds"
            self._update_status("warning")
        else:
            self.status = f"Fitted {len(report.best)} compound(s)"
            self._update_status("success")

    def _on_dark_mode(self, event):
        self.session.dark_mode = event.new

    def _on_compound_select(self, event):
        if event.new and event.new != self.session.selected_compound:
            self.session.selected_compound = event.new

    def _on_config_change(self, name: str, value):
        if getattr(self.session.plot_config, name) != value:
            self.session.update_plot_config(**{name: value})

    def _on_reset_config(self, event):
        defaults = PlotConfig()
        self.session.plot_config = defaults
        for field_name, widget in self._config_widgets.items():
            widget.value = getattr(defaults, field_name)

    def _on_export_format_change(self, event):
        fmt = event.new
        self._export_best_btn.filename = f"best_models.{fmt}"
        self._export_summary_btn.filename = f"dose_response_summary.{fmt}"

    def _best_models_file(self) -> io.StringIO:
        report = self.session.fit_report
        if report is None:
            return io.StringIO("")
        df = self.exporter.best_models_table(report)
        return io.StringIO(self.exporter.to_text(df, self._export_format.value))

    def _summary_file(self) -> io.StringIO:
        report = self.session.fit_report
        if report is None:
            return io.StringIO("")
        df = self.exporter.summary_table(report)
        return io.StringIO(self.exporter.to_text(df, self._export_format.value))

    def _compound_file(self) -> io.StringIO:
        compound = self.session.selected_compound
        self._export_compound_btn.filename = f"{compound or 'compound'}-data.csv"
        result = self.session.fit_report.get(compound) if self.session.fit_report else None
        df = self.exporter.compound_data_table(
            self.session.raw_rows, self.session.column_mapping, compound, result,
        )
        return io.StringIO(self.exporter.to_text(df, "csv"))

    def _update_status(self, alert_type: str):
        """Update status pane."""
        self._status_pane.alert_type = alert_type
        self._status_pane.object = self.status

    def view(self) -> pn.viewable.Viewable:
        """Create the main application view."""
        # Tab 1: Data
        data_tab = pn.Column(
            pn.pane.Markdown("## 1. Load Data"),
            pn.Row(self._file_input, self._sample_btn),
            pn.pane.Markdown("### Columns"),
            pn.Row(
                self._compound_column,
                self._concentration_column,
                self._response_column,
                self._apply_mapping_btn,
            ),
            self._summary_pane,
            self._data_table,
            sizing_mode='stretch_width',
        )

        # Tab 2: Plot
        plot_tab = pn.Column(
            pn.pane.Markdown("## 2. Dose-Response Plot"),
            pn.Row(self._analyse_btn, self._compound_select, self._dark_toggle),
            pn.Row(
                pn.Column(
                    self._style_select,
                    self._legend_select,
                    self._marker_select,
                    self._line_style_select,
                    self._point_color,
                    self._line_color,
                    self._ic50_checkbox,
                    self._dmax_checkbox,
                    self._grid_checkbox,
                    self._reset_config_btn,
                    width=260,
                ),
                self._plot_pane,
            ),
            self._metrics_pane,
            sizing_mode='stretch_width',
        )

        # Tab 3: Results
        results_tab = pn.Column(
            pn.pane.Markdown("## 3. Results"),
            self._results_table,
            pn.Row(self._export_format),
            pn.Row(self._export_best_btn, self._export_summary_btn, self._export_compound_btn),
            sizing_mode='stretch_width',
        )

        tabs = pn.Tabs(
            ("1. Data", data_tab),
            ("2. Plot", plot_tab),
            ("3. Results", results_tab),
            sizing_mode='stretch_width',
        )

        layout = pn.Column(
            pn.pane.Markdown("# Dose-Response Viewer"),
            self._status_pane,
            tabs,
            sizing_mode='stretch_width',
        )

        return layout


def create_app(load_example: bool = False) -> DoseResponseApp:
    """Create the application.

    Parameters
    ----------
    load_example : bool
        Start with the bundled example dataset loaded

    Returns
    -------
    DoseResponseApp
        The application instance
    """
    app = DoseResponseApp()
    if load_example:
        app.session.load_sample_data()
    return app


def serve(load_example: bool = False, **kwargs):
    """Serve the application.

    Parameters
    ----------
    load_example : bool
        Start with the bundled example dataset loaded
    **kwargs
        Additional arguments passed to pn.serve()
    """
    app = create_app(load_example=load_example)
    pn.serve(app.view(), **kwargs)


# For panel serve
if __name__.startswith("bokeh"):
    app = create_app(load_example=True)
    app.view().servable()
