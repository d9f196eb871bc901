"""
Monitor boundary.

The scene reports to an external observer (the UI shell) on three occasions.
Calls are fire-and-forget; return values are ignored.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, List, Tuple

from circletree.model.geometry_primitives import Point


class Monitor(Protocol):
    def report_position(self, point: Point, fixed: bool) -> None: ...
    def report_path(self, text_path: str, fixed: bool) -> None: ...
    def report_error(self, message: str) -> None: ...


class NullMonitor:
    """Default observer: drops everything."""

    def report_position(self, point: Point, fixed: bool) -> None:
        pass

    def report_path(self, text_path: str, fixed: bool) -> None:
        pass

    def report_error(self, message: str) -> None:
        pass


@dataclass
class RecordingMonitor:
    """Keeps every report; used by tests and headless sessions."""
    positions: List[Tuple[Point, bool]] = field(default_factory=list)
    paths: List[Tuple[str, bool]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def report_position(self, point: Point, fixed: bool) -> None:
        self.positions.append((point, fixed))

    def report_path(self, text_path: str, fixed: bool) -> None:
        self.paths.append((text_path, fixed))

    def report_error(self, message: str) -> None:
        self.errors.append(message)

    @property
    def last_path(self) -> Tuple[str, bool] | None:
        return self.paths[-1] if self.paths else None
