import pytest

from infra_stats.ledger import Ledger


def test_new_ledger_is_zeroed() -> None:
    ledger = Ledger()
    snapshot = ledger.to_dict()
    assert snapshot["centerline_length"] == 0
    assert snapshot["bridge_count"] == 0
    assert snapshot["lengths_by_road_class"] == {}
    assert snapshot["speed_limited_lengths_by_road_class"] == {}


def test_add_by_name() -> None:
    ledger = Ledger()
    ledger.add("alley_length", 12.5)
    ledger.add("alley_length", 2.5)
    assert ledger.alley_length == pytest.approx(15.0)


def test_merge_sums_totals_and_class_maps() -> None:
    ways = Ledger()
    ways.centerline_length = 100.0
    ways.bridge_count = 2
    ways.lengths_by_road_class["primary"] += 100.0

    more_ways = Ledger()
    more_ways.centerline_length = 50.0
    more_ways.lengths_by_road_class["primary"] += 30.0
    more_ways.lengths_by_road_class["service"] += 20.0

    areas = Ledger()
    areas.building_count = 3
    areas.building_cover_area = 450.0

    merged = ways.merge(more_ways).merge(areas)
    assert merged.centerline_length == pytest.approx(150.0)
    assert merged.bridge_count == 2
    assert merged.building_count == 3
    assert merged.building_cover_area == pytest.approx(450.0)
    assert dict(merged.lengths_by_road_class) == {"primary": 130.0, "service": 20.0}

    # Inputs are left untouched
    assert ways.centerline_length == pytest.approx(100.0)
    assert dict(ways.lengths_by_road_class) == {"primary": 100.0}


def test_centerline_ranges() -> None:
    ledger = Ledger()
    ledger.centerline_length = 1000.0
    ledger.oneway_centerline_length = 400.0
    ledger.public_centerline_length = 800.0
    ledger.oneway_public_centerline_length = 200.0
    assert ledger.centerline_range() == (800.0, 1000.0)
    assert ledger.public_centerline_range() == (700.0, 800.0)


def test_interstate_centerline_and_speed_coverage() -> None:
    ledger = Ledger()
    assert ledger.speed_limit_coverage() == 0.0

    ledger.interstate_centerline_length = 300.0
    ledger.centerline_length = 400.0
    ledger.speed_limited_length = 100.0
    assert ledger.interstate_centerline() == pytest.approx(150.0)
    assert ledger.speed_limit_coverage() == pytest.approx(0.25)
