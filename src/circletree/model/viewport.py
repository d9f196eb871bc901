"""
Viewport: the affine map between view (scene pixel) space and model space.

    model = (view - center) / scale, y negated
    view  = center + scale * (x, -y)

Pan/zoom state is owned by the UI; the core only needs the pure transforms
and the wheel-zoom update rule.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from circletree.config import ZOOM_FACTOR
from circletree.model.geometry_primitives import Point, ORIGIN

if TYPE_CHECKING:
    import numpy.typing as npt

_FLIP_Y = np.array([1.0, -1.0])


@dataclass
class Viewport:
    center: Point = ORIGIN
    scale: float = 1.0

    @classmethod
    def fit(cls, width: float, height: float) -> Viewport:
        """Center on a width x height scene rect, universe circle filling it."""
        return cls(center=Point(width / 2.0, height / 2.0), scale=max(width, height) * 2.0)

    def to_model_space(self, view: Point) -> Point:
        p: npt.NDArray[np.float64] = (view.to_array() - self.center.to_array()) / self.scale * _FLIP_Y
        return Point(float(p[0]), float(p[1]))

    def to_view_space(self, model: Point) -> Point:
        p: npt.NDArray[np.float64] = self.center.to_array() + self.scale * (model.to_array() * _FLIP_Y)
        return Point(float(p[0]), float(p[1]))

    def to_model_length(self, view_length: float) -> float:
        return view_length / self.scale

    def zoom(self, view_pos: Point, delta: float) -> None:
        """Wheel zoom keeping the model point under `view_pos` fixed."""
        f = 1.0 / ZOOM_FACTOR if delta < 0 else ZOOM_FACTOR
        c = (1.0 - f) * view_pos.to_array() + f * self.center.to_array()
        self.center = Point(float(c[0]), float(c[1]))
        self.scale *= f
