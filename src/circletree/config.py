"""
Configuration & Constants
=========================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Tolerances: The geometric epsilon, the knot merge tolerance and the pick
   tolerance are shared by the geometry helpers, the shape registry and the
   scene. They must agree, so they live in one place.
2. Defaults: The initial set of radii and the universe radius used when a
   document is loaded.
3. Messages: The user-facing error strings sent through the Monitor.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    EXAMPLES_PATH (str): Absolute path to the bundled example documents.
"""
import sys
import os
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/circletree/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Paths
ASSETS_PATH: str = get_resource_path("assets")
EXAMPLES_PATH: str = os.path.join(ASSETS_PATH, "examples")

# Geometry
EPSILON: float = 1e-7
KNOT_MERGE_TOLERANCE: float = 1e-7
PICK_TOLERANCE: float = 10.0  # view pixels around a circle outline
KNOT_PICK_RADIUS: float = 5.0  # view pixels around a knot

# Viewport
ZOOM_FACTOR: float = 1.03125

# Tree
UNDECIDED: str = "x"
UNIVERSE_RADIUS: float = 1.0
DEFAULT_RADII: tuple[float, ...] = (1.0, 0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2)

# Messages
BAD_SOLUTION_MESSAGE: str = "Bad solution!"
OPERATION_FAILED_MESSAGE: str = "Operation failed!"
INCORRECT_FORMAT_MESSAGE: str = "Incorrect format!"
