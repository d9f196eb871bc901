"""
Qt-side adapters. Importing this package requires PySide6.
"""
