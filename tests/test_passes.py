import logging

import pytest

from infra_stats.ledger import Ledger
from infra_stats.models import Area, Way
from infra_stats.passes import AreaPass, WayPass, run_area_pass, run_way_pass


def _bridge(way_id, first, last):
    return Way(way_id, {"highway": "primary", "bridge": "yes"}, 10.0, (first, last))


def test_run_way_pass_accumulates() -> None:
    ways = [
        Way(1, {"highway": "residential"}, 100.0, (1, 2)),
        Way(2, {"highway": "footway", "footway": "sidewalk"}, 50.0, (3, 4)),
        Way(3, {"name": "Unclassified"}, 70.0, (5, 6)),
    ]
    ledger = run_way_pass(iter(ways))
    assert ledger.way_count == 3
    assert ledger.road_count == 1
    assert ledger.centerline_length == pytest.approx(100.0)
    assert ledger.sidewalk_length == pytest.approx(50.0)


def test_run_way_pass_into_existing_ledger() -> None:
    ledger = Ledger()
    ledger.centerline_length = 5.0
    result = run_way_pass([Way(1, {"highway": "residential"}, 10.0, (1, 2))], ledger)
    assert result is ledger
    assert ledger.centerline_length == pytest.approx(15.0)


def test_bridge_index_is_scoped_to_a_pass() -> None:
    first = run_way_pass([_bridge(1, 1, 2), _bridge(2, 2, 3)])
    second = run_way_pass([_bridge(3, 3, 4)])
    assert first.bridge_count == 1
    assert second.bridge_count == 1


def test_way_pass_finish_clears_bridge_index() -> None:
    way_pass = WayPass()
    way_pass.feed(_bridge(1, 1, 2))
    assert len(way_pass.bridges) == 2
    way_pass.finish()
    assert len(way_pass.bridges) == 0


def test_progress_is_logged_without_resetting_ledger(caplog) -> None:
    ways = [Way(i, {"highway": "residential"}, 1.0, (i, i + 1000)) for i in range(5)]
    with caplog.at_level(logging.INFO, logger="infra_stats.passes"):
        ledger = run_way_pass(ways, progress_interval=2)

    progress = [r for r in caplog.records if "centerline meters" in r.getMessage()]
    assert len(progress) == 2
    assert ledger.centerline_length == pytest.approx(5.0)


def test_stream_error_propagates() -> None:
    def broken_stream():
        yield Way(1, {"highway": "residential"}, 10.0, (1, 2))
        raise IOError("truncated block")

    with pytest.raises(IOError):
        run_way_pass(broken_stream())


def test_run_area_pass_continues_past_degenerate_area() -> None:
    areas = [
        Area(1, {"building": "yes"}, None),
        Area(2, {"building": "yes"}, 80.0),
        Area(3, {"landuse": "farmland"}, 1000.0),
    ]
    ledger = run_area_pass(areas)
    assert ledger.area_count == 3
    assert ledger.degenerate_area_count == 1
    assert ledger.building_count == 1
    assert ledger.building_cover_area == pytest.approx(80.0)
    assert ledger.farm_count == 1


def test_way_and_area_passes_merge() -> None:
    ways = WayPass()
    ways.feed(Way(1, {"highway": "residential"}, 10.0, (1, 2)))
    areas = AreaPass()
    areas.feed(Area(1, {"building": "yes"}, 25.0))

    merged = ways.finish().merge(areas.finish())
    assert merged.centerline_length == pytest.approx(10.0)
    assert merged.building_cover_area == pytest.approx(25.0)
