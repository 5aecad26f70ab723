"""Standalone NiceGUI explorer app (run facestats.explorer_app.app)."""

from facestats.explorer_app.config import ExplorerConfig

__all__ = ["ExplorerConfig"]
