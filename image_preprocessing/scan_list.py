from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

import cv2
import numpy as np

from common.constants import THUMBNAIL_SIZE


@dataclass
class ScanEntry:
    name: str
    image: np.ndarray


@dataclass
class ScanList:
    """
    Ordered collection of completed scans, keyed by insertion index.

    Owned by the caller. The pipeline only appends finished pages to it.
    """
    entries: List[ScanEntry] = field(default_factory=list)

    def append(self, name: str, image: np.ndarray) -> int:
        """Add a finished page and return its index."""
        self.entries.append(ScanEntry(name, image))
        return len(self.entries) - 1

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> ScanEntry:
        return self.entries[index]

    def __iter__(self) -> Iterator[ScanEntry]:
        return iter(self.entries)

    def thumbnail(self, index: int, size: Tuple[int, int] = THUMBNAIL_SIZE) -> np.ndarray:
        """
        Downscaled preview of a scan.

        Args:
            index: Insertion index
            size: (width, height) of the thumbnail

        Returns:
            Thumbnail image
        """
        image = self.entries[index].image
        return cv2.resize(image, size, interpolation=cv2.INTER_AREA)
