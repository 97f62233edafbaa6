# spatial/index.py

"""Spatial indexing using R-tree for nearest-player lookups."""

from typing import Hashable, Iterable, Optional

import rtree.index

from playsim.logging import get_logger
from playsim.models import Point

from .geometry import calculate_distance

logger = get_logger(__name__)


class SpatialIndex:
    """R-tree based spatial index for 2D field positions.

    Keys are arbitrary hashables (player ids). Ties in nearest-neighbour
    queries are broken by insertion order so results are reproducible.
    """

    def __init__(self, items: Optional[Iterable[tuple[Hashable, Point]]] = None):
        """Initialize spatial index with R-tree backend.

        Args:
            items: Optional (key, point) pairs to insert up front
        """
        properties = rtree.index.Property()
        properties.dimension = 2
        self._rtree = rtree.index.Index(properties=properties)

        # rtree requires integer ids; map them back to caller keys
        self._next_id = 0
        self._ids: dict[Hashable, int] = {}
        self._keys: dict[int, Hashable] = {}
        self._positions: dict[Hashable, Point] = {}

        for key, point in items or ():
            self.insert(key, point)

    def __len__(self) -> int:
        return len(self._positions)

    @staticmethod
    def _bbox(point: Point) -> tuple[float, float, float, float]:
        return (point[0], point[1], point[0], point[1])

    def insert(self, key: Hashable, point: Point) -> None:
        """Insert a key at a point, replacing any previous entry.

        Args:
            key: Caller key (e.g. player id)
            point: (x, y) position
        """
        if key in self._positions:
            item_id = self._ids[key]
            self._rtree.delete(item_id, self._bbox(self._positions[key]))
        else:
            item_id = self._next_id
            self._next_id += 1
            self._ids[key] = item_id
            self._keys[item_id] = key

        self._positions[key] = point
        self._rtree.insert(item_id, self._bbox(point))

    def nearest(self, point: Point, count: int = 1) -> list[Hashable]:
        """Keys of the ``count`` nearest entries, closest first.

        Args:
            point: Query point
            count: Number of neighbours wanted

        Returns:
            Up to ``count`` keys ordered by (distance, insertion order)
        """
        if count <= 0 or not self._positions:
            return []

        # rtree may return extra items on ties; order them deterministically
        candidates = {self._keys[i] for i in self._rtree.nearest(self._bbox(point), count)}
        ranked = sorted(
            candidates,
            key=lambda k: (calculate_distance(point, self._positions[k]), self._ids[k]),
        )

        logger.debug(
            "spatial_index.nearest",
            point=point,
            count=count,
            candidates=len(candidates),
        )
        return ranked[:count]
