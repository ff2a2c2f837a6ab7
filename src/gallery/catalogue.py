"""
Photo discovery for the gallery.

Photos are numbered 01, 02, ... in a directory. Discovery looks for them in
small batches and stops at the first empty batch after the first one, so a
single missing number does not end the sequence.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence
import logging
import math

import cv2

logger = logging.getLogger(__name__)

EXTENSIONS = ('.jpg', '.jpeg', '.png', '.webp')


@dataclass(frozen=True)
class PhotoSlot:
    """A photo and its place on the display helix."""
    path: Path
    y: float
    angle: float


def _find_photo(photo_dir: Path, number: int) -> Optional[Path]:
    stem = f"{number:02d}"
    for ext in EXTENSIONS:
        candidate = photo_dir / f"{stem}{ext}"
        # Reject files that only carry an image extension
        if candidate.is_file() and cv2.haveImageReader(str(candidate)):
            return candidate
    return None


def discover_photos(photo_dir: Path, max_count: int = 99, batch_size: int = 4) -> List[Path]:
    """
    Find photos 01..max_count in photo_dir.

    Returns:
        Paths in numeric order; empty if the directory does not exist.
    """
    photo_dir = Path(photo_dir)
    if not photo_dir.is_dir():
        logger.info("Photo directory %s not found", photo_dir)
        return []

    discovered: List[Path] = []
    for start in range(1, max_count + 1, batch_size):
        batch = range(start, min(start + batch_size, max_count + 1))
        found = [p for p in (_find_photo(photo_dir, n) for n in batch) if p is not None]
        if not found:
            if start > batch_size:
                break
            continue
        discovered.extend(found)

    logger.info("Discovered %d photos in %s", len(discovered), photo_dir)
    return discovered


def layout_photos(paths: Sequence[Path]) -> List[PhotoSlot]:
    """Spread photos along a helix: four turns, bottom to top."""
    count = len(paths)
    slots = []
    for i, path in enumerate(paths):
        t = i / count
        slots.append(PhotoSlot(path=Path(path), y=t * 2.2 - 1.1, angle=t * math.pi * 8))
    return slots


def focused_slot(slots: Sequence[PhotoSlot], index: Optional[int]) -> Optional[PhotoSlot]:
    """The slot for a focused index, or None without focus or photos."""
    if index is None or not 0 <= index < len(slots):
        return None
    return slots[index]
