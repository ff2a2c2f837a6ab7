"""
PalmOrbit Gallery Module

Photo discovery and helix layout.
"""
from .catalogue import PhotoSlot, discover_photos, focused_slot, layout_photos

__all__ = [
    'PhotoSlot',
    'discover_photos',
    'focused_slot',
    'layout_photos',
]
