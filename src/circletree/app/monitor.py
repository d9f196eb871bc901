"""
Qt Monitor
==========
Bridges the scene's Monitor calls to Qt signals, so widgets (status label,
path label, error dialog) can connect to them like to any other signal.
"""
from __future__ import annotations

from PySide6.QtCore import QObject, Signal

from circletree.model.geometry_primitives import Point


class QtMonitor(QObject):
    """Monitor implementation that re-emits every report as a signal."""
    position_reported = Signal(float, float, bool)
    path_reported = Signal(str, bool)
    error_reported = Signal(str)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.last_error: str | None = None

    def report_position(self, point: Point, fixed: bool) -> None:
        self.position_reported.emit(float(point.x), float(point.y), bool(fixed))

    def report_path(self, text_path: str, fixed: bool) -> None:
        self.path_reported.emit(text_path, bool(fixed))

    def report_error(self, message: str) -> None:
        self.last_error = message
        self.error_reported.emit(message)
