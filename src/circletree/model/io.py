"""
Input/Output Manager (JSON)
Handles saving and loading a CircleScene to .json documents.

Document layout:
    {
      "radius": [r1, ..., rN-1],      # working circles, outer to inner, universe excluded
      "search": {                     # root node, bound to circle 1
        "center": [x, y],
        "branch": [<node> or {}, <node> or {}]
      }
    }
"""
import json
import logging
from typing import Any, Dict, List
from importlib.metadata import version, PackageNotFoundError

from circletree.model.scene import CircleScene

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("circletree")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


class DocumentError(ValueError):
    """Raised when a document is not JSON at all."""


class IOManager:

    @staticmethod
    def to_document(scene: CircleScene) -> Dict[str, Any]:
        return {
            "radius": scene.registry.radii(include_universe=False),
            "search": scene.tree.to_document(),
        }

    @staticmethod
    def dumps(scene: CircleScene) -> str:
        return json.dumps(IOManager.to_document(scene), separators=(",", ":"))

    @staticmethod
    def _parse_radii(raw: Any) -> List[float]:
        if not isinstance(raw, list):
            if raw is not None:
                logger.warning(f"Ignoring 'radius' of type {type(raw).__name__}.")
            return []
        radii = []
        for value in raw:
            try:
                r = float(value)
            except (TypeError, ValueError):
                logger.warning(f"Skipping non-numeric radius {value!r}.")
                continue
            if r <= 0.0:
                logger.warning(f"Skipping non-positive radius {r}.")
                continue
            radii.append(r)
        return radii

    @staticmethod
    def apply_document(scene: CircleScene, doc: Any) -> None:
        """Replace the scene content with a parsed document; missing fields degrade to empty."""
        if not isinstance(doc, dict):
            logger.warning(f"Document root is {type(doc).__name__}, expected an object.")
            doc = {}
        radii = IOManager._parse_radii(doc.get("radius"))
        search = doc.get("search")
        if not isinstance(search, dict):
            search = None
        scene.rebuild(radii, search)
        logger.debug(f"Document applied: {len(radii)} working circles, tree={'yes' if scene.tree else 'no'}.")

    @staticmethod
    def loads(scene: CircleScene, text: str) -> None:
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentError(f"Not a JSON document: {e}") from e
        IOManager.apply_document(scene, doc)

    @staticmethod
    def save_project(scene: CircleScene, filepath: str) -> bool:
        if not scene.tree:
            logger.warning("Nothing to save: no tree has been built.")
            return False

        logger.info(f"Saving tree to: {filepath}")
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(IOManager.dumps(scene))
        except Exception as e:
            logger.exception(f"Failed to save tree: {e}")
            raise e

        logger.info(f"Tree saved to: {filepath} (circletree {APP_VERSION})")
        return True

    @staticmethod
    def load_project(scene: CircleScene, filepath: str) -> bool:
        logger.info(f"Loading tree from: {filepath}")
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                IOManager.loads(scene, f.read())
        except Exception as e:
            logger.exception(f"Failed to load tree: {e}")
            raise e

        logger.info(f"Tree loaded from: {filepath}")
        return True
