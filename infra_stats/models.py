"""
Feature records consumed by the classifiers.

Records are built by a source (extract reader, ohsome query) with their
geometry already reduced to a length or an area, and are consumed once.
"""

from dataclasses import dataclass
from typing import Hashable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Way:
    """A tagged linear feature with its geodesic length in meters."""
    id: int
    tags: Mapping[str, str]
    length: float
    node_refs: Tuple[Hashable, Hashable]

    @property
    def first_node(self) -> Hashable:
        return self.node_refs[0]

    @property
    def last_node(self) -> Hashable:
        return self.node_refs[-1]


@dataclass(frozen=True)
class Area:
    """
    A tagged area feature with its geodesic area in square meters.

    ``area`` is None when the source could not resolve the geometry into a
    valid polygon.
    """
    id: int
    tags: Mapping[str, str]
    area: Optional[float]
