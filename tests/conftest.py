import pytest

from factorysim.simulation import Simulation

STAGES = ["machining", "assembly", "quality_control", "packaging"]


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    """Runs write their default report into a temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_line():
    """Factory of single product type lines with one pool per stage.

    No random arrivals and no shift changes unless overridden.
    """

    def _make_line(capacity=10, **kwargs):
        if isinstance(capacity, int):
            capacity = {stage: capacity for stage in STAGES}
        cfg = {
            "capacities": capacity,
            "product_types": {
                "ProductA": {"durations": [2.0, 1.5, 1.0, 1.0], "setup": 0.5}
            },
            "stage_names": STAGES,
            "stage_resources": {stage: stage for stage in STAGES},
            "arrivals": {},
            "shift_length": None,
            "seed": 0,
            "monitor": -1,
            "start": "2024-01-01T00:00:00+00:00",
        }
        cfg.update(kwargs)
        return Simulation(**cfg)

    return _make_line
