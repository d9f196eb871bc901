"""Shared test fixtures."""

from __future__ import annotations

import pytest

from circletree.model.geometry_primitives import Point
from circletree.model.monitor import RecordingMonitor
from circletree.model.scene import CircleScene, Mode
from circletree.model.viewport import Viewport

# universe + 4 working circles: 3 decision levels, circle 4 is the target
RADII = (1.0, 0.8, 0.6, 0.4, 0.2)


@pytest.fixture
def monitor() -> RecordingMonitor:
    return RecordingMonitor()


@pytest.fixture
def free_scene(monitor: RecordingMonitor) -> CircleScene:
    # scale 100: pick tolerance 0.1, knot pick radius 0.05 in model units
    scene = CircleScene(monitor=monitor)
    scene.init(RADII, viewport=Viewport(center=Point(0.0, 0.0), scale=100.0))
    return scene


@pytest.fixture
def scene(free_scene: CircleScene) -> CircleScene:
    free_scene.set_mode(Mode.TREE)
    return free_scene


@pytest.fixture
def inner_path_scene(scene: CircleScene) -> CircleScene:
    """All circles concentric at the origin, path '111' committed down to the target circle."""
    for _ in range(3):
        assert scene.descend(True)
    assert scene.commit()
    return scene
