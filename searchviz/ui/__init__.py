"""PySide6 widgets for grid and graph visualization."""
