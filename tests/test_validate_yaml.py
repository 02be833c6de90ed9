#!/usr/bin/env python3
"""Tests for validate_yaml schema validation."""

from pathlib import Path

import pytest

from validate_yaml import detect_kind, load_schema, main, validate_file

ROOT = Path(__file__).parent.parent


class TestLoadSchema:
    """Tests for load_schema function."""

    @pytest.mark.parametrize("kind", ["catalog", "vehicle"])
    def test_returns_dict(self, kind):
        schema = load_schema(kind)
        assert isinstance(schema, dict)
        assert schema["type"] == "object"

    def test_vehicle_schema_structure(self):
        props = load_schema("vehicle")["properties"]
        assert "vehicle" in props
        assert "history" in props

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            load_schema("garage")


class TestDetectKind:
    def test_vehicle(self):
        assert detect_kind({"vehicle": {"id": "x"}}) == "vehicle"

    def test_catalog(self):
        assert detect_kind({"items": []}) == "catalog"
        assert detect_kind({"overrides": {}}) == "catalog"

    def test_unknown(self):
        assert detect_kind({"car": {}}) is None
        assert detect_kind(["a"]) is None


class TestValidateFile:
    """Tests for validate_file function."""

    def test_valid_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("""
items:
  - component: Oil Change
    intervalMiles: 5000
    intervalMonths: 6
    estimatedCost: 60
  - component: Brake Fluid
    intervalMonths: 24
    safetyClass: safety-critical
""")
        assert validate_file(path) == []

    def test_valid_overrides(self, tmp_path):
        path = tmp_path / "mine.yaml"
        path.write_text("overrides:\n  Oil Change:\n    intervalMiles: 7500\n")
        assert validate_file(path) == []

    def test_disabled_catalog_item(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "items:\n  - component: Wipers\n    intervalMonths: 12\n    disabled: true\n"
        )
        assert validate_file(path) == []

    def test_catalog_item_without_interval(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("items:\n  - component: Oil Change\n")
        errors = validate_file(path)
        assert errors
        assert errors[0].startswith("Schema validation error")

    def test_bad_safety_class(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "items:\n  - component: Oil Change\n    intervalMiles: 5000\n"
            "    safetyClass: urgent\n"
        )
        errors = validate_file(path)
        assert any("urgent" in e for e in errors)

    def test_valid_vehicle(self, tmp_path):
        path = tmp_path / "civic.yaml"
        path.write_text("""
vehicle:
  id: civic
  make: Honda
  year: 2019
  referenceDate: '2019-05-01'
state:
  currentOdometer: 16000
history:
  - component: Oil Change
    date: '2025-01-15'
    odometer: 10000
""")
        assert validate_file(path) == []

    def test_vehicle_missing_id(self, tmp_path):
        path = tmp_path / "civic.yaml"
        path.write_text("vehicle:\n  make: Honda\n")
        errors = validate_file(path)
        assert errors[0].startswith("Schema validation error")
        assert "at path: vehicle" in errors[1]

    def test_forced_kind(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("items: []\n")
        assert validate_file(path, kind="vehicle")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("items: [unclosed\n")
        errors = validate_file(path)
        assert errors[0].startswith("YAML parse error")

    def test_missing_file(self, tmp_path):
        errors = validate_file(tmp_path / "nope.yaml")
        assert errors[0].startswith("Error:")

    def test_unknown_kind(self, tmp_path):
        path = tmp_path / "other.yaml"
        path.write_text("car:\n  make: Subaru\n")
        assert validate_file(path) == [
            "Error: cannot tell whether this is a catalog or vehicle file"
        ]

    @pytest.mark.parametrize("name", ["civic.yaml", "wrx.yaml"])
    def test_sample_vehicles_valid(self, name):
        assert validate_file(ROOT / "vehicles" / name) == []


class TestMain:
    def test_reports_each_file(self, tmp_path, capsys):
        good = tmp_path / "good.yaml"
        good.write_text("vehicle:\n  id: civic\n")
        bad = tmp_path / "bad.yaml"
        bad.write_text("vehicle:\n  make: Honda\n")

        assert main([str(good), str(bad)]) == 1

        out = capsys.readouterr().out
        assert "OK: good.yaml" in out
        assert "FAIL: bad.yaml" in out

    def test_all_valid(self, tmp_path):
        good = tmp_path / "good.yaml"
        good.write_text("vehicle:\n  id: civic\n")
        assert main([str(good)]) == 0
