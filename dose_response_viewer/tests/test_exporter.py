"""Tests for MetricsExporter."""

import math
import re

import pytest


@pytest.fixture
def report(fitted_result, failed_result):
    """Report with one fitted and one failed compound."""
    from dataclasses import replace
    from dose_response_viewer.core import FitReport

    failed = replace(failed_result, compound="B")
    alternative = replace(fitted_result, model_name="Hill_3P_Bottom0", aic=-40.0)
    return FitReport(
        best={"A": fitted_result, "B": failed},
        summary=[fitted_result, alternative],
    )


class TestTables:
    """Tests for best-model and summary tables."""

    def test_best_models_table(self, temp_dir, report):
        """Test one row per compound with metric columns."""
        from dose_response_viewer.results import METRIC_COLUMNS, MetricsExporter

        df = MetricsExporter(temp_dir).best_models_table(report)

        assert list(df.columns) == METRIC_COLUMNS
        assert list(df["Compound"]) == ["A", "B"]
        assert df.loc[0, "IC50"] == 5.0
        assert math.isnan(df.loc[1, "IC50"])
        assert math.isnan(df.loc[1, "AIC"])

    def test_summary_table(self, temp_dir, report):
        """Test every candidate model is listed."""
        from dose_response_viewer.results import MetricsExporter

        df = MetricsExporter(temp_dir).summary_table(report)

        assert list(df["Model"]) == ["Hill_4P", "Hill_3P_Bottom0"]
        assert list(df["AIC"]) == [-50.0, -40.0]

    def test_empty_report(self, temp_dir):
        """Test tables of an empty report keep their columns."""
        from dose_response_viewer.core import FitReport
        from dose_response_viewer.results import METRIC_COLUMNS, MetricsExporter

        df = MetricsExporter(temp_dir).best_models_table(FitReport())

        assert df.empty
        assert list(df.columns) == METRIC_COLUMNS


class TestToText:
    """Tests for CSV and text rendering."""

    def test_csv_formatting(self, temp_dir, report):
        """Test quoting, six decimals and N/A."""
        from dose_response_viewer.results import MetricsExporter

        exporter = MetricsExporter(temp_dir)
        lines = exporter.to_text(exporter.best_models_table(report), "csv").split("\n")

        assert lines == [
            "Compound,Model,IC50,RMSE,AIC",
            '"A","Hill_4P",5.000000,0.010000,-50.000000',
            '"B","none",N/A,N/A,N/A',
        ]

    def test_txt_is_tab_separated(self, temp_dir, report):
        """Test tab-separated text without quoting."""
        from dose_response_viewer.results import MetricsExporter

        exporter = MetricsExporter(temp_dir)
        lines = exporter.to_text(exporter.best_models_table(report), "txt").split("\n")

        assert lines[0] == "Compound\tModel\tIC50\tRMSE\tAIC"
        assert lines[1] == "A\tHill_4P\t5.000000\t0.010000\t-50.000000"

    def test_embedded_quotes_doubled(self, temp_dir, fitted_result):
        """Test CSV escaping of double quotes."""
        from dataclasses import replace
        from dose_response_viewer.core import FitReport
        from dose_response_viewer.results import MetricsExporter

        report = FitReport(best={'A"1': replace(fitted_result, compound='A"1')})
        exporter = MetricsExporter(temp_dir)
        text = exporter.to_text(exporter.best_models_table(report), "csv")

        assert text.split("\n")[1].startswith('"A""1",')

    def test_unknown_format_raises(self, temp_dir, report):
        """Test formats other than csv and txt."""
        from dose_response_viewer.results import MetricsExporter

        exporter = MetricsExporter(temp_dir)

        with pytest.raises(ValueError, match="Unknown export format"):
            exporter.to_text(exporter.best_models_table(report), "xlsx")


class TestExport:
    """Tests for file export."""

    @pytest.mark.parametrize("table, fmt, pattern", [
        ("best", "csv", r"best_models_\d{8}T\d{6}\.csv"),
        ("best", "txt", r"best_models_\d{8}T\d{6}\.txt"),
        ("summary", "csv", r"dose_response_summary_\d{8}T\d{6}\.csv"),
    ])
    def test_timestamped_files(self, temp_dir, report, table, fmt, pattern):
        """Test file naming and contents."""
        from dose_response_viewer.results import MetricsExporter

        path = MetricsExporter(temp_dir).export(report, table=table, fmt=fmt)

        assert path.parent == temp_dir
        assert re.fullmatch(pattern, path.name)
        assert path.read_text(encoding="utf-8").startswith("Compound")

    def test_creates_directory(self, temp_dir, report):
        """Test missing export directories are created."""
        from dose_response_viewer.results import MetricsExporter

        path = MetricsExporter(temp_dir / "nested" / "exports").export(report)

        assert path.exists()

    def test_unknown_table_raises(self, temp_dir, report):
        """Test table names other than best and summary."""
        from dose_response_viewer.results import MetricsExporter

        with pytest.raises(ValueError, match="Unknown table"):
            MetricsExporter(temp_dir).export(report, table="everything")


class TestCompoundData:
    """Tests for per-compound data export."""

    def test_table_without_fit(self, temp_dir, raw_rows, mapping):
        """Test mapped column names and parsed values."""
        from dose_response_viewer.results import PREDICTED_COLUMN, MetricsExporter

        df = MetricsExporter(temp_dir).compound_data_table(raw_rows, mapping, "A")

        assert list(df.columns) == ["Compound", "Conc", "Response"]
        assert list(df["Conc"]) == [0.1, 1.0, 10.0, 100.0]
        assert PREDICTED_COLUMN not in df.columns

    def test_predicted_response(self, temp_dir, raw_rows, mapping, fitted_result):
        """Test predictions for positive concentrations only."""
        from dataclasses import replace
        from dose_response_viewer.fitting import hill_curve
        from dose_response_viewer.results import PREDICTED_COLUMN, MetricsExporter

        result = replace(fitted_result, compound="B")
        df = MetricsExporter(temp_dir).compound_data_table(raw_rows, mapping, "B", result)
        predicted = list(df[PREDICTED_COLUMN])

        assert len(df) == 4
        assert math.isnan(predicted[0])
        assert predicted[1] == pytest.approx(hill_curve(5.0, 1.2, 0.1, 0.9, 5.0))
        assert math.isnan(predicted[2])
        assert predicted[3] == pytest.approx(hill_curve(50.0, 1.2, 0.1, 0.9, 5.0))

    def test_failed_fit_has_no_predictions(self, temp_dir, raw_rows, mapping, failed_result):
        """Test unsuccessful fits add no prediction column."""
        from dose_response_viewer.results import PREDICTED_COLUMN, MetricsExporter

        df = MetricsExporter(temp_dir).compound_data_table(raw_rows, mapping, "A", failed_result)

        assert PREDICTED_COLUMN not in df.columns

    def test_export_file_name_sanitized(self, temp_dir, mapping):
        """Test unsafe characters in compound names."""
        from dose_response_viewer.results import MetricsExporter

        rows = [{"Compound": "A/B", "Conc": "1", "Response": "0.5"}]
        path = MetricsExporter(temp_dir).export_compound_data(rows, mapping, "A/B")

        assert path.name == "A_B-data.csv"
        assert path.read_text(encoding="utf-8").split("\n") == [
            "Compound,Conc,Response",
            '"A/B",1.000000,0.500000',
        ]
