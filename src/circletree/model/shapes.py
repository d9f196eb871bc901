"""
Shape Registry
==============
Owns the fixed, ordered collection of circles the tree is built from.

Index 0 is the universe circle; indices 1..N-1 are the working circles, by
convention in strictly decreasing radius order (a tree node at depth k is
bound to circle k+1). Circles are created once at initialization (or when a
document is loaded) and only removed by a full clear.

Rendering-side handles never need runtime type inspection to get back to the
model: a circle is addressed by its `index`, a knot by its `Knot` identity.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from itertools import combinations
from typing import Dict, Iterator, List, Optional

from circletree.config import EPSILON
from circletree.model.geometry_primitives import Point, ORIGIN
from circletree.model.geometry_utils import intersect_circles

logger = logging.getLogger(__name__)


@dataclass
class CircleShape:
    """
    One registry entry.

    `enabled` gates picking/dragging, `visible` gates rendering and knot
    computation. `opaque` and `filled` are highlight flags consumed by the
    renderer only.
    """
    index: int
    center: Point
    radius: float
    enabled: bool = True
    visible: bool = True
    opaque: bool = True
    filled: bool = False

    def contains_point(self, point: Point) -> bool:
        """UI hit-test: inside, with the rim counted in (tolerance EPSILON)."""
        return self.center.distance_to(point) < self.radius + EPSILON

    def strictly_contains(self, point: Point) -> bool:
        """Geometric test used by the evaluator: the rim counts as outside."""
        return self.center.distance_to(point) < self.radius

    def is_near_outline(self, point: Point, tolerance: float) -> bool:
        return abs(self.center.distance_to(point) - self.radius) < tolerance


@dataclass(eq=False)
class Knot:
    """A marked construction point. Compared by identity."""
    point: Point


class ShapeRegistry:
    """Index-keyed store of CircleShape objects."""

    def __init__(self) -> None:
        self._circles: Dict[int, CircleShape] = {}

    def __len__(self) -> int:
        return len(self._circles)

    def __iter__(self) -> Iterator[CircleShape]:
        for index in sorted(self._circles):
            yield self._circles[index]

    def __contains__(self, index: int) -> bool:
        return index in self._circles

    def __getitem__(self, index: int) -> CircleShape:
        return self._circles[index]

    def get(self, index: int) -> Optional[CircleShape]:
        return self._circles.get(index)

    @property
    def universe(self) -> Optional[CircleShape]:
        return self._circles.get(0)

    @property
    def innermost_index(self) -> int:
        return len(self._circles) - 1

    @property
    def max_depth(self) -> int:
        """Number of decision slots: every circle except the universe and the innermost target."""
        return max(0, len(self._circles) - 2)

    def create_circle(self, center: Point = ORIGIN, radius: float = 1.0) -> CircleShape:
        if radius <= 0.0:
            raise ValueError(f"Circle radius must be positive, got {radius}")
        index = max(self._circles) + 1 if self._circles else 0
        circle = CircleShape(index=index, center=center, radius=float(radius))
        self._circles[index] = circle
        logger.debug(f"Created circle {index} (r={radius:g}).")
        return circle

    def remove_circle(self, index: int) -> bool:
        if self._circles.pop(index, None) is None:
            return False
        logger.debug(f"Removed circle {index}.")
        return True

    def clear(self) -> None:
        for index in sorted(self._circles, reverse=True):
            self.remove_circle(index)

    def radii(self, include_universe: bool = False) -> List[float]:
        return [c.radius for c in self if include_universe or c.index != 0]

    def circle_at(self, point: Point, tolerance: float) -> Optional[CircleShape]:
        """Topmost (highest index) enabled, visible circle whose outline is within `tolerance` of `point`."""
        for circle in reversed(list(self)):
            if circle.enabled and circle.visible and circle.is_near_outline(point, tolerance):
                return circle
        return None

    def intersections(self) -> List[Point]:
        """All pairwise intersection points of the visible circles."""
        visible = [c for c in self if c.visible]
        points: List[Point] = []
        for first, second in combinations(visible, 2):
            points.extend(intersect_circles(first.center, first.radius, second.center, second.radius))
        return points
