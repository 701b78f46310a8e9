"""Shared fixtures: a small fleet file and a fixed clock."""

from datetime import datetime, timezone

import pytest

FLEET_YAML = """
owner:
  userId: alpha-user
  callsign: Alpha Haulers
vehicles:
  - id: rig1
    name: Big Blue
    year: 2019
    make: Freightliner
    model: Cascadia
    currentOdometer: 100000
    oilChangeInterval: 5000
    lastOilChangeOdometer: 98000
  - id: rig2
    name: Old Yeller
    currentOdometer: 50000
    oilChangeInterval: 5000
    lastOilChangeOdometer: 44500
fuelLogs:
  - id: l1
    vehicleId: rig1
    createdAt: '2024-06-01T12:00:00+00:00'
    odometerReading: 99000
  - id: l3
    vehicleId: rig1
    createdAt: '2024-06-14T12:00:00+00:00'
    odometerReading: 100000
    gallonsAdded: 50
    totalCost: 210
    tripMiles: 500
    mpg: 10.0
  - id: l2
    vehicleId: rig1
    createdAt: '2024-06-10T12:00:00+00:00'
    odometerReading: 99500
    gallonsAdded: 50
    totalCost: 200
    tripMiles: 500
    mpg: 10.0
  - id: l4
    vehicleId: rig2
    createdAt: '2024-05-01T12:00:00+00:00'
    odometerReading: 49000
    gallonsAdded: 100
    totalCost: 400
missions:
  - id: m1-completed
    vehicleId: rig1
    origin: Dallas
    destination: Tulsa
    offerAmount: 1000
    estimatedMiles: 380
    actualMiles: 400
    status: completed
    createdAt: '2024-06-05T08:00:00+00:00'
  - id: m2-active
    vehicleId: rig1
    origin: Tulsa
    destination: Wichita
    offerAmount: 500
    estimatedMiles: 180
    status: active
    podRequired: true
    createdAt: '2024-06-12T08:00:00+00:00'
  - id: m3-history
    vehicleId: rig1
    origin: Austin
    destination: Dallas
    offerAmount: 600
    actualMiles: 200
    status: history
    isPaid: true
    createdAt: '2024-05-20T08:00:00+00:00'
expenses:
  - id: e1
    vehicleId: rig1
    category: Tolls
    amount: 25.5
    expenseDate: '2024-06-02'
  - id: e2
    vehicleId: rig1
    category: Maintenance
    amount: 300
    expenseDate: '2024-06-09'
fieldReports:
  - id: r1
    userId: alpha-user
    imageUrl: https://example.com/r1.jpg
    caption: Sunset at the yard
    status: PENDING
    createdAt: '2024-06-14T08:00:00+00:00'
"""


@pytest.fixture
def now():
    """Reference time one day after the newest rig1 fuel log."""
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fleet_file(tmp_path):
    path = tmp_path / "alpha.yaml"
    path.write_text(FLEET_YAML)
    return path
