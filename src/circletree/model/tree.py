"""
Decision Tree
=============
A rooted binary tree of TreeNode objects built by the user.

Each node is bound to one circle by index (depth + 1) and stores the center
that circle had when the node was last visited. branch[0] is taken when the
query point is outside the node's circle, branch[1] when it is inside.

Ownership is strict: a node is owned by its parent's branch slot (or by the
root pointer). Nodes carry no parent pointers; the navigation engine keeps its
own list of ancestors while walking.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

from circletree.config import UNDECIDED
from circletree.model.geometry_primitives import Point, ORIGIN

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _parse_center(raw: Any) -> Point:
    if not isinstance(raw, (list, tuple)):
        return ORIGIN
    values = [_as_float(v) for v in raw[:2]]
    values += [0.0] * (2 - len(values))
    return Point(values[0], values[1])


@dataclass(eq=False)
class TreeNode:
    circle_index: int
    center: Point = ORIGIN
    fixed: bool = False
    branch: List[Optional[TreeNode]] = field(default_factory=lambda: [None, None])

    def child(self, answer: bool) -> Optional[TreeNode]:
        return self.branch[int(answer)]

    def is_complete(self) -> bool:
        return all(b is not None for b in self.branch)

    def to_document(self) -> Dict[str, Any]:
        return {
            "center": self.center.to_list(),
            "branch": [b.to_document() if b is not None else {} for b in self.branch],
        }

    @staticmethod
    def from_document(
        doc: Dict[str, Any],
        start_index: int = 1,
        max_index: Optional[int] = None,
    ) -> TreeNode:
        """
        Rebuild a subtree from its document form. Every node is marked fixed.

        Children that would be bound beyond `max_index` are dropped.
        """
        node = TreeNode(
            circle_index=start_index,
            center=_parse_center(doc.get("center")),
            fixed=True,
        )
        raw_branch = doc.get("branch")
        if not isinstance(raw_branch, (list, tuple)):
            return node

        for i, raw_child in enumerate(raw_branch[:2]):
            if not isinstance(raw_child, dict) or not raw_child:
                continue
            if max_index is not None and start_index + 1 > max_index:
                logger.warning(f"Dropping branch below circle {start_index}: no circle {start_index + 1}.")
                continue
            node.branch[i] = TreeNode.from_document(raw_child, start_index + 1, max_index)
        return node


class DecisionTree:
    """Root holder plus the whole-tree operations (commit, enumeration, documents)."""

    def __init__(self, root: Optional[TreeNode] = None) -> None:
        self.root = root

    def __bool__(self) -> bool:
        return self.root is not None

    def ensure_root(self, center: Point) -> TreeNode:
        """Create the root lazily, bound to circle 1."""
        if self.root is None:
            self.root = TreeNode(circle_index=1, center=center)
            logger.debug("Created tree root.")
        return self.root

    def detach(self) -> None:
        self.root = None

    def nodes(self) -> Iterator[TreeNode]:
        """Pre-order walk, branch 0 first."""
        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            yield node
            for child in reversed(node.branch):
                if child is not None:
                    stack.append(child)

    @staticmethod
    def commit_path(
        ancestors: Sequence[TreeNode],
        text_path: Sequence[str],
        current: TreeNode,
    ) -> None:
        """
        Make the walk root..current permanent.

        Links each ancestor to the next ancestor of the walk, but never
        replaces an existing link, so subtrees saved earlier are kept. The
        parent of `current` is always linked to it.
        """
        for depth in range(1, len(ancestors)):
            prev, node = ancestors[depth - 1], ancestors[depth]
            answer = int(text_path[depth - 1] == "1")
            if prev.branch[answer] is None:
                prev.branch[answer] = node

        current.fixed = True
        for node in ancestors:
            node.fixed = True

        if ancestors:
            answer = int(text_path[len(ancestors) - 1] == "1")
            ancestors[-1].branch[answer] = current

    def enumerate_open_paths(self, max_depth: int) -> List[str]:
        """
        List the walks that still end in a missing branch.

        Each node with an unset branch contributes its own decision string,
        padded with UNDECIDED up to `max_depth`; existing branches are explored
        branch 0 first. Nodes at `max_depth` are final and never reported.
        """
        result: List[str] = []
        if self.root is None:
            return result

        def visit(node: TreeNode, path: str) -> None:
            if len(path) >= max_depth:
                return
            if not node.is_complete():
                result.append(path.ljust(max_depth, UNDECIDED))
            for answer, child in enumerate(node.branch):
                if child is not None:
                    visit(child, path + str(answer))

        visit(self.root, "")
        return result

    def to_document(self) -> Dict[str, Any]:
        if self.root is None:
            return {}
        return self.root.to_document()

    @classmethod
    def from_document(
        cls,
        doc: Dict[str, Any],
        start_index: int = 1,
        max_index: Optional[int] = None,
    ) -> DecisionTree:
        if not isinstance(doc, dict) or not doc:
            return cls()
        return cls(TreeNode.from_document(doc, start_index, max_index))
