"""Tests for the Qt signal bridge."""

from __future__ import annotations

import pytest

QtCore = pytest.importorskip("PySide6.QtCore")

from circletree.app.monitor import QtMonitor  # noqa: E402
from circletree.config import INCORRECT_FORMAT_MESSAGE  # noqa: E402
from circletree.model.geometry_primitives import Point  # noqa: E402
from circletree.model.scene import CircleScene, Mode  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtCore.QCoreApplication.instance()
    if app is None:
        app = QtCore.QCoreApplication([])
    return app


@pytest.fixture
def qt_monitor(qapp) -> QtMonitor:
    return QtMonitor()


class TestQtMonitor:
    def test_signals_carry_the_reports(self, qt_monitor: QtMonitor):
        positions, paths, errors = [], [], []
        qt_monitor.position_reported.connect(lambda x, y, fixed: positions.append((x, y, fixed)))
        qt_monitor.path_reported.connect(lambda path, fixed: paths.append((path, fixed)))
        qt_monitor.error_reported.connect(errors.append)

        qt_monitor.report_position(Point(0.25, -0.5), True)
        qt_monitor.report_path("1x", False)
        qt_monitor.report_error("boom")

        assert positions == [(0.25, -0.5, True)]
        assert paths == [("1x", False)]
        assert errors == ["boom"]
        assert qt_monitor.last_error == "boom"

    def test_scene_reports_through_signals(self, qt_monitor: QtMonitor):
        paths, errors = [], []
        qt_monitor.path_reported.connect(lambda path, fixed: paths.append(path))
        qt_monitor.error_reported.connect(errors.append)

        scene = CircleScene(monitor=qt_monitor)
        scene.init((1.0, 0.5, 0.25))
        scene.set_mode(Mode.TREE)
        scene.descend(False)
        assert not scene.place_from_text("x", "y")

        assert paths[-1] == "0"
        assert errors == [INCORRECT_FORMAT_MESSAGE]
