"""Live selection state and the capture/restore bridge."""

from glossmark.selection.bridge import SelectionBridge, SelectionSnapshot
from glossmark.selection.state import Selection, SessionStore

__all__ = ["Selection", "SelectionBridge", "SelectionSnapshot", "SessionStore"]
