"""Image decoding for still images, animations and video files.

Still and animated images go through Pillow; video containers are read
with OpenCV. Either way the caller gets a single Pillow image.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import cv2
from PIL import Image

logger = logging.getLogger(__name__)

VIDEO_SUFFIXES = (".mp4", ".avi", ".mov", ".mkv", ".webm")


@dataclass
class ImageInfo:
    """Metadata about the input file."""

    path: Path
    format: str  # "image" or "video"
    frame_count: int
    width: int
    height: int


def detect_format(path: Path) -> str:
    """Detect media format from file extension."""
    if path.suffix.lower() in VIDEO_SUFFIXES:
        return "video"
    return "image"


class StillReader:
    """Pillow-backed reader. Animated images expose one frame per index."""

    def __init__(self, path: Path) -> None:
        self.path = path
        with Image.open(path) as img:
            self._frame_count = getattr(img, "n_frames", 1)
            self._size = img.size
            self._decoder = img.format

    @property
    def info(self) -> ImageInfo:
        return ImageInfo(
            path=self.path,
            format="image",
            frame_count=self._frame_count,
            width=self._size[0],
            height=self._size[1],
        )

    def seek(self, frame_idx: int = 0) -> Image.Image:
        """Decode one frame. Animation frames are composited up to frame_idx."""
        if not 0 <= frame_idx < self._frame_count:
            raise IndexError(f"Frame {frame_idx} not found")

        with Image.open(self.path) as img:
            if self._frame_count == 1:
                img.load()
                return img.copy()

            canvas = Image.new("RGBA", img.size, (0, 0, 0, 0))
            for i in range(frame_idx + 1):
                img.seek(i)
                frame = img.convert("RGBA")
                canvas.paste(frame, (0, 0), frame)
        logger.debug("Decoded frame %d of %s (%s)", frame_idx, self.path, self._decoder)
        return canvas


class VideoReader:
    """OpenCV-backed reader for video containers."""

    def __init__(self, path: Path) -> None:
        self.path = path
        cap = cv2.VideoCapture(str(path))
        if not cap.isOpened():
            raise IOError(f"Cannot open video: {path}")
        self._frame_count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
        self._width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self._height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        cap.release()

    @property
    def info(self) -> ImageInfo:
        return ImageInfo(
            path=self.path,
            format="video",
            frame_count=self._frame_count,
            width=self._width,
            height=self._height,
        )

    def seek(self, frame_idx: int = 0) -> Image.Image:
        """Get a specific frame by index."""
        if frame_idx < 0:
            raise IndexError(f"Frame {frame_idx} not found")
        cap = cv2.VideoCapture(str(self.path))
        cap.set(cv2.CAP_PROP_POS_FRAMES, frame_idx)
        ret, bgr = cap.read()
        cap.release()
        if not ret:
            raise IndexError(f"Frame {frame_idx} not found")
        rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
        logger.debug("Decoded frame %d of %s", frame_idx, self.path)
        return Image.fromarray(rgb)


def open_media(path: str | Path) -> StillReader | VideoReader:
    """Open an image or video file and return the appropriate reader."""
    local_path = Path(path)
    if not local_path.exists():
        raise FileNotFoundError(f"File not found: {local_path}")

    if detect_format(local_path) == "video":
        return VideoReader(local_path)
    return StillReader(local_path)


def open_image(path: str | Path, frame: int = 0) -> Image.Image:
    """Decode a single frame of an image or video file."""
    return open_media(path).seek(frame)
