from .resolver import ActiveWindow, resolve
from .tracker import WindowTracker

__all__ = ["ActiveWindow", "WindowTracker", "resolve"]
