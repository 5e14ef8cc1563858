import pytest

osmium = pytest.importorskip("osmium")

from infra_stats.pbf import (  # noqa: E402
    compute_area_stats,
    compute_stats,
    compute_way_stats,
    is_measured_area,
    is_measured_way,
)

EXTRACT = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="tests">
  <node id="1" version="1" lat="0.0" lon="0.0"/>
  <node id="2" version="1" lat="0.001" lon="0.0"/>
  <node id="3" version="1" lat="0.002" lon="0.0"/>
  <node id="4" version="1" lat="0.0" lon="0.01"/>
  <node id="5" version="1" lat="0.0" lon="0.011"/>
  <node id="6" version="1" lat="0.001" lon="0.011"/>
  <node id="7" version="1" lat="0.001" lon="0.01"/>
  <way id="100" version="1">
    <nd ref="1"/>
    <nd ref="2"/>
    <tag k="highway" v="primary"/>
    <tag k="bridge" v="yes"/>
  </way>
  <way id="101" version="1">
    <nd ref="2"/>
    <nd ref="3"/>
    <tag k="highway" v="primary"/>
    <tag k="bridge" v="yes"/>
  </way>
  <way id="102" version="1">
    <nd ref="3"/>
    <nd ref="99"/>
    <tag k="highway" v="residential"/>
  </way>
  <way id="103" version="1">
    <nd ref="4"/>
    <nd ref="5"/>
    <nd ref="6"/>
    <nd ref="7"/>
    <nd ref="4"/>
    <tag k="building" v="yes"/>
  </way>
</osm>
"""


@pytest.fixture
def extract_path(tmp_path):
    path = tmp_path / "region.osm"
    path.write_text(EXTRACT)
    return str(path)


def test_measured_feature_filters() -> None:
    assert is_measured_way({"highway": "residential"}) is True
    assert is_measured_way({"railway": "rail"}) is True
    assert is_measured_way({"building": "yes"}) is False
    assert is_measured_area({"building": "yes"}) is True
    assert is_measured_area({"landuse": "farmland"}) is True
    assert is_measured_area({"landuse": "forest"}) is False


def test_way_pass_over_extract(extract_path) -> None:
    ledger = compute_way_stats(extract_path)
    assert ledger.road_count == 2
    assert ledger.skipped_way_count == 1
    assert ledger.bridge_count == 1
    assert ledger.centerline_length == pytest.approx(2 * 110.57, rel=1e-3)
    assert ledger.building_count == 0


def test_area_pass_over_extract(extract_path) -> None:
    ledger = compute_area_stats(extract_path)
    assert ledger.building_count == 1
    assert ledger.building_cover_area == pytest.approx(12_309, rel=1e-2)
    assert ledger.centerline_length == 0


def test_both_passes_merge(extract_path) -> None:
    ledger = compute_stats(extract_path)
    assert ledger.road_count == 2
    assert ledger.building_count == 1
