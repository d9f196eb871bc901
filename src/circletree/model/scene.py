"""
Circle Scene (Navigation Engine)
================================
This module defines the state machine the UI shell drives while the user
builds and tests a decision tree of nested circles.

Why is this file needed?
------------------------
1. State Management: It owns the Shape Registry, the Decision Tree, the walk
   through the tree (NavigationState) and the pointer selection
   (SelectionState) in one place.
2. Consistency: Every transition keeps the circles' enabled/visible flags in
   step with the node being edited, so the renderer only has to read them.
3. Decoupling: The shell forwards pointer positions already in model space and
   listens to a Monitor; it never touches the model objects directly.

Classes:
    Mode: Free (move circles and knots), Tree (build), Test (evaluate points).
    NavigationState: current node, ancestors and the decision string.
    SelectionState: dragged circle and the (at most two) selected knots.
    CircleScene: the engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
import logging
import math
from typing import Dict, FrozenSet, List, Optional, Sequence

from circletree.config import (
    DEFAULT_RADII, UNIVERSE_RADIUS, UNDECIDED, PICK_TOLERANCE, KNOT_PICK_RADIUS,
    KNOT_MERGE_TOLERANCE, BAD_SOLUTION_MESSAGE, OPERATION_FAILED_MESSAGE,
    INCORRECT_FORMAT_MESSAGE,
)
from circletree.model.geometry_primitives import Point, ORIGIN
from circletree.model.geometry_utils import (
    place_in_local_frame, place_on_chord_from_midpoint, project_center_through,
)
from circletree.model.monitor import Monitor, NullMonitor
from circletree.model.shapes import CircleShape, Knot, ShapeRegistry
from circletree.model.tree import DecisionTree, TreeNode
from circletree.model.viewport import Viewport

logger = logging.getLogger(__name__)


class Mode(StrEnum):
    FREE = "free"
    TREE = "tree"
    TEST = "test"


# Modes in which each operation is accepted.
_ACCEPTED_MODES: Dict[str, FrozenSet[Mode]] = {
    "place": frozenset({Mode.TREE}),
    "reset": frozenset({Mode.TREE}),
    "evaluate": frozenset({Mode.TEST}),
    "pick": frozenset({Mode.FREE, Mode.TREE}),
    # walking the tree drops the construction knots, except while testing a point
    "walk_clears_knots": frozenset({Mode.FREE, Mode.TREE}),
    # candidate knots are only offered while constructing
    "candidate_knots": frozenset({Mode.FREE, Mode.TREE}),
}


def parse_coordinates(x_text: str, y_text: str) -> Optional[Point]:
    """Parse a coordinate pair typed by the user; None if either is not a finite number."""
    try:
        x = float(str(x_text).strip())
        y = float(str(y_text).strip())
    except ValueError:
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return Point(x, y)


@dataclass
class NavigationState:
    """
    The walk through the tree.

    Invariant: current_node.circle_index == len(ancestors) + 1 and the first
    len(ancestors) slots of text_path are decided.
    """
    mode: Mode = Mode.FREE
    current_node: Optional[TreeNode] = None
    ancestors: List[TreeNode] = field(default_factory=list)
    text_path: List[str] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return len(self.ancestors)

    @property
    def path(self) -> str:
        return "".join(self.text_path)

    def last_answer(self) -> Optional[bool]:
        if not self.ancestors:
            return None
        return self.text_path[len(self.ancestors) - 1] == "1"

    def restart(self, max_depth: int) -> None:
        self.text_path = [UNDECIDED] * max_depth
        self.ancestors.clear()


@dataclass
class SelectionState:
    circle: Optional[CircleShape] = None
    knot1: Optional[Knot] = None
    knot2: Optional[Knot] = None
    anchor: Point = ORIGIN  # last pointer position while dragging

    def clear_knots(self) -> None:
        self.knot1 = None
        self.knot2 = None

    def clear(self) -> None:
        self.circle = None
        self.clear_knots()

    def toggle_knot(self, knot: Knot) -> None:
        """Clicking a knot: deselect it if selected, otherwise add it (a third click starts over)."""
        if self.knot2 is knot:
            self.knot2 = None
        elif self.knot1 is knot:
            self.knot1 = self.knot2
            self.knot2 = None
        elif self.knot2 is not None:
            self.knot1 = knot
            self.knot2 = None
        elif self.knot1 is not None:
            self.knot2 = knot
        else:
            self.knot1 = knot

    def is_selected(self, knot: Knot) -> bool:
        return knot is self.knot1 or knot is self.knot2


class CircleScene:
    """
    Builds and tests a decision tree of nested circles.

    Every operation returns a success flag instead of raising: wrong mode,
    missing knots, a geometric non-solution or the depth limit are all
    expected outcomes.
    """

    def __init__(self, monitor: Optional[Monitor] = None, viewport: Optional[Viewport] = None) -> None:
        self.registry = ShapeRegistry()
        self.tree = DecisionTree()
        self.navigation = NavigationState()
        self.selection = SelectionState()
        self.knots: List[Knot] = []
        self.viewport = viewport or Viewport()
        self.monitor: Monitor = monitor or NullMonitor()
        self.visible_knots = True
        self.filled_area = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def mode(self) -> Mode:
        return self.navigation.mode

    @property
    def path(self) -> str:
        return self.navigation.path

    @property
    def current_node(self) -> Optional[TreeNode]:
        return self.navigation.current_node

    @property
    def current_circle(self) -> Optional[CircleShape]:
        node = self.navigation.current_node
        return self.registry.get(node.circle_index) if node is not None else None

    @property
    def rendered_knots(self) -> List[Knot]:
        if self.visible_knots:
            return list(self.knots)
        return [k for k in self.knots if self.selection.is_selected(k)]

    def _accepts(self, operation: str) -> bool:
        return self.navigation.mode in _ACCEPTED_MODES[operation]

    def _require(self, operation: str) -> bool:
        if self._accepts(operation):
            return True
        logger.warning(f"'{operation}' is not available in {self.navigation.mode} mode.")
        return False

    def set_monitor(self, monitor: Optional[Monitor]) -> None:
        self.monitor = monitor or NullMonitor()

    def to_model_space(self, view: Point) -> Point:
        return self.viewport.to_model_space(view)

    def to_view_space(self, model: Point) -> Point:
        return self.viewport.to_view_space(model)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def init(self, radii: Sequence[float] = DEFAULT_RADII, viewport: Optional[Viewport] = None) -> None:
        """Create the working set of circles (index 0 is the universe), all at the origin."""
        self.clear()
        if viewport is not None:
            self.viewport = viewport
        for r in radii:
            self.registry.create_circle(ORIGIN, r)
        self.navigation.mode = Mode.FREE
        logger.info(f"Scene initialized with {len(self.registry)} circles.")
        self.start()

    def rebuild(self, radii: Sequence[float], search: Optional[dict]) -> None:
        """Replace the whole model: universe + one circle per radius, tree from its document form."""
        self.clear()
        self.registry.create_circle(ORIGIN, UNIVERSE_RADIUS)
        for r in radii:
            self.registry.create_circle(ORIGIN, r)

        if 1 in self.registry and search:
            self.tree = DecisionTree.from_document(search, start_index=1, max_index=self.registry.innermost_index)
        else:
            self.tree = DecisionTree()

        if self.navigation.mode == Mode.FREE:
            self.navigation.mode = Mode.TREE
        self.start()

    def clear(self) -> None:
        """Full teardown: circles, tree, walk and knots."""
        self.registry.clear()
        self.tree.detach()
        self.navigation.current_node = None
        self.navigation.ancestors.clear()
        self.navigation.text_path = []
        self.selection.clear()
        self.knots = []
        logger.info("Scene cleared.")
        self.update_knots()

    def set_mode(self, mode: Mode) -> None:
        self.selection.clear()
        previous, self.navigation.mode = self.navigation.mode, mode
        match (previous, mode):
            case (Mode.TEST, Mode.TREE):
                # keep the walk the last evaluation left behind
                circle = self.current_circle
                if circle is not None:
                    circle.enabled = True
                self.update_knots()
            case _:
                self.start()

    def set_visible_knots(self, visible: bool) -> None:
        self.visible_knots = visible
        self.update_knots()

    def set_filled_area(self, filled: bool) -> None:
        self.filled_area = filled
        self.refresh()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Reset the walk to the root and the circles' flags to match it."""
        nav = self.navigation
        nav.restart(self.registry.max_depth)

        match nav.mode:
            case Mode.TREE:
                self._start_tree()
            case Mode.TEST:
                if self.tree.root is None:
                    self._start_tree()
                self._start_test()
            case Mode.FREE:
                nav.current_node = None
                for circle in self.registry:
                    circle.enabled = True
                    circle.visible = True

        self.update_knots()

    def _start_tree(self) -> None:
        nav = self.navigation
        first = self.registry.get(1)
        if first is None:
            nav.current_node = None
            return

        root = self.tree.ensure_root(first.center)
        nav.current_node = root
        first.center = root.center
        for circle in self.registry:
            if circle.index > 1:
                circle.enabled = False
                circle.visible = False
            elif circle.index < 1:
                circle.enabled = False
                circle.visible = True
        first.enabled = True
        first.visible = True

    def _start_test(self) -> None:
        nav = self.navigation
        for circle in self.registry:
            if circle.index > 0:
                circle.visible = False
            circle.enabled = False

        root = self.tree.root
        nav.current_node = root
        if root is not None:
            self.registry[root.circle_index].center = root.center

    def descend(self, answer: bool) -> bool:
        """Take branch `answer` from the current node, creating a tentative node if it is missing."""
        nav = self.navigation
        node = nav.current_node
        if node is None or nav.depth >= self.registry.max_depth:
            return False

        index = node.circle_index + 1
        new_circle = self.registry.get(index)
        if new_circle is None:
            return False

        target = node.child(answer)
        if target is None:
            target = TreeNode(circle_index=index, center=new_circle.center)

        old_circle = self.registry[node.circle_index]
        node.center = old_circle.center
        old_circle.enabled = False
        old_circle.visible = True

        target.circle_index = index
        new_circle.center = target.center
        new_circle.enabled = True
        new_circle.visible = True

        nav.ancestors.append(node)
        nav.current_node = target
        nav.text_path[index - 2] = "1" if answer else "0"
        logger.debug(f"Descended to '{nav.path}' (circle {index}, fixed={target.fixed}).")

        if self._accepts("walk_clears_knots"):
            self.selection.clear_knots()
        self.update_knots()
        return True

    def ascend(self) -> bool:
        """Step back to the parent of the current node."""
        nav = self.navigation
        if not nav.ancestors:
            return False

        parent = nav.ancestors.pop()
        node = nav.current_node
        circle = self.registry[node.circle_index]
        node.center = circle.center
        circle.visible = False

        parent_circle = self.registry[parent.circle_index]
        parent_circle.enabled = True
        parent_circle.center = parent.center
        nav.current_node = parent
        nav.text_path[nav.depth] = UNDECIDED
        logger.debug(f"Ascended to '{nav.path}'.")

        if self._accepts("walk_clears_knots"):
            self.selection.clear_knots()
        self.update_knots()
        return True

    def invert(self) -> bool:
        """Switch to the sibling of the current node."""
        answer = self.navigation.last_answer()
        if self.navigation.current_node is None or answer is None:
            return False
        if not self.ascend():
            return False
        return self.descend(not answer)

    def replay_path(self, path: str) -> bool:
        """Walk from the root along a '0'/'1' string; any other character is skipped."""
        self.start()
        if self.navigation.current_node is None:
            return False
        for c in path:
            if c not in "01":
                continue
            if not self.descend(c == "1"):
                return False
        return True

    def commit(self) -> bool:
        """Make the current walk permanent in the tree."""
        nav = self.navigation
        if nav.current_node is None:
            return False
        DecisionTree.commit_path(nav.ancestors, nav.text_path, nav.current_node)
        logger.debug(f"Committed path '{nav.path}'.")
        self.refresh()
        return True

    def reset(self) -> bool:
        """
        Throw away what was built below the current node.

        Below the root, the branch leading to the current node is detached and
        replaced by a fresh tentative node. At the root, the whole tree is
        dropped.
        """
        nav = self.navigation
        if nav.current_node is None or not self._require("reset"):
            return False

        if nav.current_node is not self.tree.root:
            answer = nav.last_answer()
            self.ascend()
            parent = nav.current_node
            parent.branch[int(answer)] = None
            # the fresh node starts from the origin, like a fresh root
            self.registry[parent.circle_index + 1].center = ORIGIN
            logger.debug(f"Reset branch {int(answer)} below '{nav.path}'.")
            self.descend(answer)
            return True

        self.registry[self.tree.root.circle_index].center = ORIGIN
        self.tree.detach()
        logger.debug("Reset the whole tree.")
        self.start()
        return True

    def is_fixed_path(self) -> bool:
        node = self.navigation.current_node
        return node is not None and node.fixed

    def open_paths(self) -> List[str]:
        """Decision strings of the committed nodes that still miss a branch."""
        return self.tree.enumerate_open_paths(self.registry.max_depth)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def evaluate(self, point: Point) -> bool:
        """
        Walk the tree with `point` from the root; succeed if it ends strictly
        inside the innermost circle.
        """
        if not self._require("evaluate"):
            return False
        universe = self.registry.universe
        if universe is None or not universe.contains_point(point):
            logger.warning(f"Point ({point.x:g}, {point.y:g}) is outside the domain.")
            return False

        knot = Knot(point)
        self.knots = [knot]
        self.selection.knot1 = knot
        self.selection.knot2 = None
        self.start()

        circle: Optional[CircleShape] = None
        while (node := self.navigation.current_node) is not None:
            circle = self.registry[node.circle_index]
            circle.center = node.center
            inside = circle.strictly_contains(point)
            circle.visible = True
            circle.opaque = inside
            if node.child(inside) is None or not self.descend(inside):
                break

        if (circle is None
                or circle.index < self.registry.innermost_index
                or not circle.strictly_contains(point)):
            logger.info(f"Evaluation failed at '{self.navigation.path}'.")
            self.monitor.report_error(BAD_SOLUTION_MESSAGE)
            return False
        return True

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def place_to_point(self, position: Point) -> bool:
        circle = self.current_circle
        if not self._require("place") or circle is None:
            return False
        circle.center = position
        self.update_knots()
        return True

    def place_to_local(self, offset: Point, invert: bool = False) -> bool:
        """Place the current circle at `offset` in the frame of the two selected knots."""
        circle = self.current_circle
        sel = self.selection
        if not self._require("place") or circle is None or sel.knot1 is None or sel.knot2 is None:
            return False
        circle.center = place_in_local_frame(sel.knot1.point, sel.knot2.point, offset, invert)
        self.update_knots()
        return True

    def place_to_chord(self, invert: bool = False) -> bool:
        """
        Put the current circle through the selected knots.

        With two knots the circle passes through both (`invert` picks the
        other side of the chord); with one, the circle is centered on it.
        """
        circle = self.current_circle
        sel = self.selection
        if not self._require("place") or circle is None or sel.knot1 is None:
            return False

        if sel.knot2 is None:
            circle.center = sel.knot1.point
        else:
            p1, p2 = sel.knot1.point, sel.knot2.point
            if invert:
                p1, p2 = p2, p1
            result = place_on_chord_from_midpoint(p1, p2, circle.radius)
            if not result:
                logger.warning(f"Chord longer than the diameter of circle {circle.index}.")
                return False
            circle.center = result[0]
        self.update_knots()
        return True

    def place(self, point: Optional[Point] = None, chord: bool = False, invert: bool = False) -> bool:
        """
        Single entry point for the shell's "Place" action.

        In Test mode a point is evaluated instead. A failed placement is
        reported to the monitor.
        """
        if self.navigation.mode == Mode.TEST:
            return self.evaluate(point) if point is not None else False

        if point is not None:
            ok = self.place_to_local(point, invert) if chord else self.place_to_point(point)
        else:
            ok = self.place_to_chord(invert)
        if not ok:
            self.monitor.report_error(OPERATION_FAILED_MESSAGE)
        return ok

    def place_from_text(self, x_text: str, y_text: str, chord: bool = False, invert: bool = False) -> bool:
        point = parse_coordinates(x_text, y_text)
        if point is None:
            self.monitor.report_error(INCORRECT_FORMAT_MESSAGE)
            return False
        return self.place(point, chord=chord, invert=invert)

    # ------------------------------------------------------------------
    # Pointer gestures (model space)
    # ------------------------------------------------------------------
    def knot_at(self, point: Point, tolerance: float) -> Optional[Knot]:
        best: Optional[Knot] = None
        best_distance = tolerance
        for knot in self.rendered_knots:
            d = knot.point.distance_to(point)
            if d < best_distance:
                best, best_distance = knot, d
        return best

    def press(self, point: Point) -> None:
        if not self._accepts("pick"):
            if self.navigation.mode == Mode.TEST:
                self.evaluate(point)
            self.monitor.report_position(point, True)
            return

        sel = self.selection
        knot = self.knot_at(point, self.viewport.to_model_length(KNOT_PICK_RADIUS))
        if knot is not None:
            sel.toggle_knot(knot)
            self.update_knots()
            return

        circle = self.registry.circle_at(point, self.viewport.to_model_length(PICK_TOLERANCE))
        if circle is not None:
            sel.circle = circle
            if sel.knot1 is not None and sel.knot2 is not None:
                sel.clear_knots()
            sel.anchor = point
            self.refresh()
            return

        sel.clear()
        self.update_knots()
        self.monitor.report_position(point, True)

    def move(self, point: Point) -> None:
        self.monitor.report_position(point, False)
        sel = self.selection
        if not self._accepts("pick") or sel.circle is None:
            return

        circle = sel.circle
        circle.center = circle.center + (point - sel.anchor)
        sel.anchor = point
        if sel.knot1 is not None and sel.knot2 is None:
            # keep the circle passing through the single selected knot
            circle.center = project_center_through(sel.knot1.point, circle.center, circle.radius)
        self.update_knots()

    def release(self) -> None:
        self.selection.circle = None
        self.refresh()

    def zoom(self, view_pos: Point, delta: float) -> None:
        self.viewport.zoom(view_pos, delta)
        self.refresh()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    def update_knots(self) -> None:
        """Drop unselected knots and, while constructing, re-derive them from the visible circles."""
        sel = self.selection
        self.knots = [k for k in self.knots if sel.is_selected(k)]

        if self._accepts("candidate_knots"):
            selected = [k.point for k in (sel.knot1, sel.knot2) if k is not None]
            for p in self.registry.intersections():
                if any(p.is_close(s, KNOT_MERGE_TOLERANCE) for s in selected):
                    continue
                self.knots.append(Knot(p))

        self.refresh()

    def refresh(self) -> None:
        """Report the path and recompute the highlight flags the renderer reads."""
        nav = self.navigation
        self.monitor.report_path(nav.path, self.is_fixed_path())

        if nav.current_node is not None:
            for i, slot in enumerate(nav.text_path):
                circle = self.registry.get(i + 1)
                if circle is None:
                    continue
                outside = slot == "0"
                circle.opaque = not outside
                circle.filled = self.filled_area and outside
            # the live circle is the source of truth for the node being edited
            nav.current_node.center = self.registry[nav.current_node.circle_index].center
        else:
            picked = self.selection.circle
            for circle in self.registry:
                circle.opaque = picked is None
                circle.filled = False
            if picked is not None:
                picked.opaque = True
