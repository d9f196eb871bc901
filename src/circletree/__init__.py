"""
circletree: build and test binary decision trees of nested circles.

The package is split the same way the UI shell consumes it:
    circletree.model  - geometry, shapes, tree, navigation engine, JSON I/O (no Qt)
    circletree.app    - Qt adapters for the embedding shell
"""
