#!/usr/bin/env python3
"""Tests for validate_yaml schema validation."""

from pathlib import Path

from validate_yaml import check_references, load_schema, validate_fleet_file

SAMPLE_FLEETS = Path(__file__).parent.parent / "fleets"


class TestLoadSchema:
    """Tests for load_schema function."""

    def test_returns_dict(self):
        schema = load_schema()
        assert isinstance(schema, dict)

    def test_has_expected_structure(self):
        properties = load_schema()["properties"]
        assert "owner" in properties
        assert "vehicles" in properties
        assert "fuelLogs" in properties


class TestValidateFleetFile:
    """Tests for validate_fleet_file function."""

    def test_fixture_fleet_is_valid(self, fleet_file):
        assert validate_fleet_file(fleet_file, load_schema()) == []

    def test_sample_fleets_are_valid(self):
        schema = load_schema()
        for path in SAMPLE_FLEETS.glob("*.yaml"):
            assert validate_fleet_file(path, schema) == [], path.name

    def test_unquoted_timestamps_are_accepted(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text("""
owner:
  userId: u1
vehicles:
  - id: v1
    currentOdometer: 1000
    oilChangeInterval: 5000
    lastOilChangeOdometer: 1000
fuelLogs:
  - id: l1
    vehicleId: v1
    createdAt: 2024-06-01T12:00:00Z
    odometerReading: 1000
""")
        assert validate_fleet_file(path, load_schema()) == []

    def test_missing_owner_returns_errors(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("vehicles: []\n")
        errors = validate_fleet_file(path, load_schema())
        assert any("Schema validation" in e for e in errors)

    def test_bad_mission_status_reports_path(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("""
owner:
  userId: u1
vehicles:
  - id: v1
    currentOdometer: 1000
    oilChangeInterval: 5000
    lastOilChangeOdometer: 1000
missions:
  - id: m1
    vehicleId: v1
    origin: A
    destination: B
    offerAmount: 100
    status: lost
""")
        errors = validate_fleet_file(path, load_schema())
        assert any("at path: missions.0.status" in e for e in errors)

    def test_invalid_yaml_returns_parse_error(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("owner:\n  userId: [unclosed\n")
        errors = validate_fleet_file(path, load_schema())
        assert any("YAML" in e for e in errors)

    def test_nonexistent_file_returns_errors(self, tmp_path):
        errors = validate_fleet_file(tmp_path / "does_not_exist.yaml", load_schema())
        assert len(errors) >= 1
        assert any("Error" in e for e in errors)


class TestCheckReferences:
    """Tests for check_references."""

    def test_unknown_vehicle(self):
        data = {
            "vehicles": [{"id": "v1"}],
            "fuelLogs": [{"vehicleId": "v1"}, {"vehicleId": "v9"}],
        }
        assert check_references(data) == ["Unknown vehicle 'v9' at fuelLogs.1"]

    def test_empty_sections(self):
        assert check_references({"owner": {"userId": "u1"}}) == []
