"""
Streaming passes over way and area features.

A pass classifies one feature at a time in the order delivered by its
source, so memory stays proportional to the number of road classes and
open bridge endpoints rather than to the number of features. Way and area
passes touch disjoint parts of the ledger and can run on separate Ledger
instances that are merged afterwards.
"""

import logging
from typing import Iterable, Optional

from infra_stats.areas import classify_area
from infra_stats.config import PROGRESS_INTERVAL
from infra_stats.ledger import Ledger
from infra_stats.models import Area, Way
from infra_stats.roads import BridgeDeduplicator, classify_way

logger = logging.getLogger(__name__)


class WayPass:
    """Classify ways into a ledger, with a bridge index scoped to the pass."""

    def __init__(self, ledger: Optional[Ledger] = None, progress_interval: int = PROGRESS_INTERVAL):
        self.ledger = ledger if ledger is not None else Ledger()
        self.bridges = BridgeDeduplicator()
        self.progress_interval = progress_interval
        self.processed = 0

    def feed(self, way: Way) -> None:
        classify_way(way, self.ledger, self.bridges)
        self.processed += 1
        if self.progress_interval and self.processed % self.progress_interval == 0:
            logger.info(
                "%d ways spanning %.0f centerline meters",
                self.processed,
                self.ledger.centerline_length,
            )

    def finish(self) -> Ledger:
        logger.info(
            "Way pass finished: %d ways, %d roads, %d bridges",
            self.processed,
            self.ledger.road_count,
            self.ledger.bridge_count,
        )
        self.bridges.clear()
        return self.ledger


class AreaPass:
    """Classify areas into a ledger."""

    def __init__(self, ledger: Optional[Ledger] = None, progress_interval: int = PROGRESS_INTERVAL):
        self.ledger = ledger if ledger is not None else Ledger()
        self.progress_interval = progress_interval
        self.processed = 0

    def feed(self, area: Area) -> None:
        classify_area(area, self.ledger)
        self.processed += 1
        if self.progress_interval and self.processed % self.progress_interval == 0:
            logger.info(
                "%d areas, %d buildings covering %.0f square meters",
                self.processed,
                self.ledger.building_count,
                self.ledger.building_cover_area,
            )

    def finish(self) -> Ledger:
        logger.info(
            "Area pass finished: %d areas, %d degenerate",
            self.processed,
            self.ledger.degenerate_area_count,
        )
        return self.ledger


def run_way_pass(
    ways: Iterable[Way],
    ledger: Optional[Ledger] = None,
    progress_interval: int = PROGRESS_INTERVAL,
) -> Ledger:
    """
    Classify every way from a stream.

    Errors raised by the stream propagate; no ledger is returned for a pass
    that did not complete.
    """
    way_pass = WayPass(ledger, progress_interval)
    for way in ways:
        way_pass.feed(way)
    return way_pass.finish()


def run_area_pass(
    areas: Iterable[Area],
    ledger: Optional[Ledger] = None,
    progress_interval: int = PROGRESS_INTERVAL,
) -> Ledger:
    """Classify every area from a stream."""
    area_pass = AreaPass(ledger, progress_interval)
    for area in areas:
        area_pass.feed(area)
    return area_pass.finish()
