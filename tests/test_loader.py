#!/usr/bin/env python3
"""Tests for YAML loading and saving utilities."""

from datetime import date

import pytest
import yaml

from autocare import (
    CatalogError,
    DueState,
    MaintenanceRecommendation,
    PriorityLevel,
    SafetyClass,
    VehicleSnapshot,
    evaluate,
    load_catalog,
    load_overrides,
    load_recommendations,
    load_vehicle,
    save_recommendations,
)

CATALOG_YAML = """
items:
  - component: Oil Change
    description: "Change oil ({percent}%)"
    intervalMiles: 5000
    intervalMonths: 6
    estimatedCost: 60
  - component: Brake Service
    intervalMiles: 15000
    safetyClass: safety-critical
  - component: Wiper Blades
    intervalMonths: 12
"""

VEHICLE_YAML = """
vehicle:
  id: civic
  make: Honda
  model: Civic
  year: 2019
  referenceDate: '2019-05-01'

state:
  currentOdometer: 16000
  asOfDate: '2025-06-01'

history:
  - component: Oil Change
    date: '2025-01-15'
    odometer: 10000
    performedBy: Quick Lube
    cost: 55.0
  - component: Tire Rotation
    date: 'last spring'
    odometer: 9000
  - date: '2024-01-01'
    notes: component missing
"""

# =============================================================================
# load_catalog tests
# =============================================================================


class TestLoadCatalog:
    """Tests for load_catalog function."""

    def test_loads_items(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(CATALOG_YAML)

        catalog = load_catalog(path)

        assert len(catalog) == 3
        oil = catalog.get("oil change")
        assert oil.interval_miles == 5000
        assert oil.interval_months == 6
        assert oil.estimated_cost == 60
        assert oil.description == "Change oil ({percent}%)"
        assert catalog.get("Brake Service").safety_class is SafetyClass.SAFETY_CRITICAL
        assert catalog.get("Wiper Blades").interval_miles is None

    def test_overrides_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(CATALOG_YAML)
        overrides = tmp_path / "mine.yaml"
        overrides.write_text("""
overrides:
  oil change:
    intervalMiles: 7500
  wiper blades:
    disabled: true
  Timing Belt:
    intervalMiles: 100000
    safetyClass: safety-critical
""")

        catalog = load_catalog(path, overrides=overrides)

        assert catalog.get("Oil Change").interval_miles == 7500
        assert "Wiper Blades" not in catalog
        assert catalog.get("Timing Belt").is_safety_critical

    def test_inline_overrides_section(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(CATALOG_YAML + "\noverrides:\n  Oil Change:\n    intervalMonths: 3\n")
        assert load_catalog(path).get("Oil Change").interval_months == 3

    def test_overrides_mapping(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(CATALOG_YAML)
        catalog = load_catalog(path, overrides={"Oil Change": {"estimated_cost": 80}})
        assert catalog.get("Oil Change").estimated_cost == 80

    def test_disabled_item_left_out(self, tmp_path):
        """An item marked disabled is not loaded."""
        path = tmp_path / "catalog.yaml"
        path.write_text(
            CATALOG_YAML + "  - component: Wipers\n    intervalMonths: 12\n    disabled: true\n"
        )

        catalog = load_catalog(path)

        assert len(catalog) == 3
        assert "Wipers" not in catalog

    def test_disabled_false_keeps_item(self, tmp_path):
        """disabled: false is the same as leaving the field out."""
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "items:\n  - component: Wipers\n    intervalMonths: 12\n    disabled: false\n"
        )
        assert "Wipers" in load_catalog(path)

    def test_unknown_field_rejected(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("items:\n  - component: Oil\n    intervalMiles: 5000\n    every: 3\n")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_item_without_interval_rejected(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("items:\n  - component: Oil\n")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_empty_file_is_empty_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("")
        assert len(load_catalog(path)) == 0

    def test_load_overrides_translates_keys(self, tmp_path):
        path = tmp_path / "mine.yaml"
        path.write_text("overrides:\n  Oil Change:\n    intervalMiles: 7500\n")
        assert load_overrides(path) == {"Oil Change": {"interval_miles": 7500}}


# =============================================================================
# load_vehicle tests
# =============================================================================


class TestLoadVehicle:
    """Tests for load_vehicle function."""

    def test_loads_snapshot(self, tmp_path):
        path = tmp_path / "civic.yaml"
        path.write_text(VEHICLE_YAML)

        snapshot = load_vehicle(path)

        assert isinstance(snapshot, VehicleSnapshot)
        assert snapshot.vehicle_id == "civic"
        assert snapshot.name == "2019 Honda Civic"
        assert snapshot.current_odometer == 16000
        assert snapshot.as_of_date == date(2025, 6, 1)
        assert snapshot.registration_date == date(2019, 5, 1)

    def test_history_without_component_dropped(self, tmp_path):
        path = tmp_path / "civic.yaml"
        path.write_text(VEHICLE_YAML)

        snapshot = load_vehicle(path)

        assert len(snapshot.history) == 2
        oil = snapshot.history[0]
        assert oil.component == "Oil Change"
        assert oil.odometer == 10000
        assert oil.performed_by == "Quick Lube"
        assert oil.cost == 55.0

    def test_malformed_dates_kept_and_skipped_at_evaluation(self, tmp_path):
        path = tmp_path / "civic.yaml"
        path.write_text(VEHICLE_YAML)
        snapshot = load_vehicle(path)
        assert snapshot.history[1].date == "last spring"
        assert snapshot.service_points("Tire Rotation") == []

    def test_id_defaults_to_filename(self, tmp_path):
        path = tmp_path / "old-truck.yaml"
        path.write_text("vehicle:\n  referenceDate: '2010-01-01'\n")
        snapshot = load_vehicle(path)
        assert snapshot.vehicle_id == "old-truck"
        assert snapshot.history == []
        assert snapshot.current_odometer == 0

    def test_as_of_override(self, tmp_path):
        path = tmp_path / "civic.yaml"
        path.write_text(VEHICLE_YAML)
        snapshot = load_vehicle(path, as_of_date=date(2025, 12, 1))
        assert snapshot.as_of_date == date(2025, 12, 1)

    def test_unquoted_yaml_dates(self, tmp_path):
        """Unquoted dates load as date objects and evaluate the same."""
        path = tmp_path / "civic.yaml"
        path.write_text("""
vehicle:
  id: civic
  referenceDate: 2019-05-01
state:
  currentOdometer: 16000
  asOfDate: 2025-06-01
history:
  - component: Oil Change
    date: 2025-01-15
    odometer: 10000
""")
        snapshot = load_vehicle(path)
        catalog_path = tmp_path / "catalog.yaml"
        catalog_path.write_text(CATALOG_YAML)
        results = evaluate(snapshot, load_catalog(catalog_path))
        oil = [r for r in results if r.component == "Oil Change"][0]
        assert oil.state is DueState.DUE
        assert oil.baseline_date == date(2025, 1, 15)


# =============================================================================
# Recommendation persistence tests
# =============================================================================


class TestRecommendationFiles:
    """Tests for load_recommendations / save_recommendations."""

    def test_missing_file_means_none_open(self, tmp_path):
        assert load_recommendations(tmp_path / "open.yaml") == []

    def test_save_then_load(self, tmp_path):
        rec = MaintenanceRecommendation(
            id="abc",
            vehicle_id="civic",
            component="Oil Change",
            description="Change oil (120%)",
            priority=PriorityLevel.MEDIUM,
            recommended_by=date(2025, 7, 1),
            due_state=DueState.DUE,
            estimated_cost=60.0,
            recommended_mileage=15000.0,
            miles_overdue=1000.0,
            acknowledged=True,
            created_date=date(2025, 6, 1),
        )
        path = tmp_path / "open.yaml"

        save_recommendations(path, [rec], as_of=date(2025, 6, 1))

        assert load_recommendations(path) == [rec]

    def test_saved_format(self, tmp_path):
        rec = MaintenanceRecommendation(
            id="abc",
            vehicle_id="civic",
            component="Oil Change",
            description="",
            priority=PriorityLevel.CRITICAL,
            recommended_by=date(2025, 6, 1),
        )
        path = tmp_path / "open.yaml"

        save_recommendations(path, [rec])

        data = yaml.safe_load(path.read_text())
        assert data["recommendations"][0] == {
            "id": "abc",
            "vehicleId": "civic",
            "component": "Oil Change",
            "description": "",
            "priority": "critical",
            "recommendedBy": "2025-06-01",
        }
