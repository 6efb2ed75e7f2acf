"""Map overlay adapters - Implementations of MapOverlayPort.

Available implementations:
- FoliumMapOverlay: keeps endpoint markers and renders them with Folium
"""

from .folium_overlay import FoliumMapOverlay

__all__ = ["FoliumMapOverlay"]
