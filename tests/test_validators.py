"""Tests for spline config validation and loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from bezier_road.geometry.control_points import DEFAULT_CONTROL_POINTS
from bezier_road.geometry.lanes import CountPlan, DistancePlan
from bezier_road.utils import validators

REPO_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG = REPO_ROOT / "configs" / "spline.v1.yaml"


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "spline.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestSplineSchema:
    def test_defaults(self) -> None:
        cfg = validators.SplineConfigV1()
        assert cfg.schema_version == "spline.v1"
        assert [tuple(p) for p in cfg.control_points] == list(DEFAULT_CONTROL_POINTS)
        assert cfg.sampling.mode == "distance"
        assert cfg.logging.level == "INFO"

    def test_schema_alias(self) -> None:
        cfg = validators.SplineConfigV1(**{"schema": "spline.v1"})
        assert cfg.schema_version == "spline.v1"

    def test_wrong_schema(self) -> None:
        with pytest.raises(ValidationError):
            validators.SplineConfigV1(**{"schema": "spline.v2"})

    @pytest.mark.parametrize("n", [1, 11])
    def test_control_point_count_bounds(self, n: int) -> None:
        with pytest.raises(ValidationError):
            validators.SplineConfigV1(control_points=[(float(i), 0.0, 0.0) for i in range(n)])

    def test_control_point_must_be_3d(self) -> None:
        with pytest.raises(ValidationError):
            validators.SplineConfigV1(control_points=[(0.0, 0.0), (1.0, 0.0)])

    @pytest.mark.parametrize(
        "field, value",
        [
            ("lane_width", 0.0),
            ("curve_resolution", 9),
            ("curve_resolution", 201),
            ("arc_length_samples", 0),
        ],
    )
    def test_out_of_range(self, field: str, value) -> None:
        with pytest.raises(ValidationError):
            validators.SplineConfigV1(**{field: value})

    @pytest.mark.parametrize(
        "sampling",
        [{"distance": 0.05}, {"distance": 25.0}, {"count": 1}, {"count": 101}, {"mode": "arc"}],
    )
    def test_sampling_bounds(self, sampling: dict) -> None:
        with pytest.raises(ValidationError):
            validators.SplineConfigV1(sampling=sampling)

    def test_sample_plan(self) -> None:
        cfg = validators.SplineConfigV1(sampling={"mode": "count", "count": 7})
        assert cfg.sample_plan() == CountPlan(7)
        cfg = validators.SplineConfigV1(sampling={"mode": "distance", "distance": 2.5})
        assert cfg.sample_plan() == DistancePlan(2.5)


class TestLoadSave:
    def test_shipped_config_is_valid(self) -> None:
        cfg = validators.load_spline_config(DEFAULT_CONFIG)
        assert len(cfg.control_points) == 4
        assert cfg.lane_width == 4.0

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            validators.load_spline_config(tmp_path / "nope.yaml")

    def test_invalid_file_message(self, tmp_path: Path) -> None:
        path = _write(tmp_path, {"schema": "spline.v1", "lane_width": -1})
        with pytest.raises(ValueError, match="lane_width"):
            validators.load_spline_config(path)

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert validators.load_spline_config(path).lane_width == 4.0

    def test_save_and_reload(self, tmp_path: Path) -> None:
        cfg = validators.SplineConfigV1(lane_width=3.0, sampling={"mode": "count", "count": 9})
        path = tmp_path / "out" / "spline.yaml"
        validators.save_spline_config(cfg, path)
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert raw["schema"] == "spline.v1"
        reloaded = validators.load_spline_config(path)
        assert reloaded.lane_width == 3.0
        assert reloaded.sampling.count == 9
