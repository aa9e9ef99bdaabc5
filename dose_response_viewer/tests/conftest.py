"""Shared pytest fixtures and configuration.

This module provides common fixtures used across test modules:
- Temporary directories for export tests
- Raw rows and cleaned samples
- Fit results and fitting engine doubles
"""

import tempfile
import shutil
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import numpy as np


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that is cleaned up after the test."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def mapping():
    """Mapping for the two-compound raw rows."""
    from dose_response_viewer.core import ColumnMapping

    return ColumnMapping(compound="Compound", concentration="Conc", response="Response")


@pytest.fixture
def raw_rows():
    """Raw rows for two compounds, including rows the cleaner drops."""
    return [
        {"Compound": "A", "Conc": "0.1", "Response": "0.9"},
        {"Compound": "A", "Conc": "1", "Response": "0.8"},
        {"Compound": "A", "Conc": "10", "Response": "0.4"},
        {"Compound": "A", "Conc": "100", "Response": "0.2"},
        {"Compound": "B", "Conc": "0", "Response": "1.0"},
        {"Compound": "B", "Conc": "5", "Response": "0.7"},
        {"Compound": "B", "Conc": "abc", "Response": "0.5"},
        {"Compound": "", "Conc": "1", "Response": "0.5"},
        {"Compound": " B ", "Conc": "50", "Response": "0.3"},
    ]


@pytest.fixture
def samples_a():
    """Cleaned samples of compound A."""
    from dose_response_viewer.core import CleanedSample

    return [
        CleanedSample("A", 0.1, 0.9),
        CleanedSample("A", 1.0, 0.8),
        CleanedSample("A", 10.0, 0.4),
        CleanedSample("A", 100.0, 0.2),
    ]


@pytest.fixture
def synthetic_samples():
    """Noise-free Hill curve samples (hill 1, bottom 0.1, top 1, IC50 10), duplicated."""
    from dose_response_viewer.core import CleanedSample
    from dose_response_viewer.fitting import hill_curve

    concentrations = np.logspace(-2, 3, 11)
    responses = hill_curve(concentrations, 1.0, 0.1, 1.0, 10.0)
    samples = []
    for _ in range(2):
        samples.extend(
            CleanedSample("SYN", float(c), float(r))
            for c, r in zip(concentrations, responses)
        )
    return samples


# =============================================================================
# Fit Fixtures
# =============================================================================

@pytest.fixture
def fitted_result():
    """A successful Hill_4P fit of compound A."""
    from dose_response_viewer.core import FittedModelResult

    return FittedModelResult(
        compound="A",
        model_name="Hill_4P",
        fitted_params=[1.2, 0.1, 0.9, 5.0],
        ic50=5.0,
        rmse=0.01,
        aic=-50.0,
    )


@pytest.fixture
def failed_result():
    """A fit in which no model converged."""
    from dose_response_viewer.core import FittedModelResult

    return FittedModelResult(
        compound="A",
        model_name="none",
        success=False,
        errors=["Hill_4P: needs at least 4 samples, got 1"],
    )


@pytest.fixture
def default_config():
    """Default plot configuration."""
    from dose_response_viewer.configs import get_default_plot_config

    return get_default_plot_config()


@pytest.fixture
def failing_engine():
    """Fitting engine whose curve prediction always fails."""
    from dose_response_viewer.fitting import FittingEngine

    engine = MagicMock(spec=FittingEngine)
    engine.predict_curve.side_effect = RuntimeError("solver exploded")
    return engine


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
