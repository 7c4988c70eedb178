"""
Freehand stroke surface.

A fixed 500x500 BGR raster that mirrors the browser canvas: pointer input
arrives as begin/extend/end, each extend draws one straight segment from the
previous position, and export() hands back a PNG data URL ready to be posted
to /analyze-drawing.

OpenCV draws thick lines with rounded endings, so consecutive segments join
smoothly the same way lineCap/lineJoin = 'round' does in the browser.
"""
import base64
import re

import cv2
import numpy as np

from doodle_guess.orchestrator.contracts import DisplayRect, Point

SURFACE_SIZE = 500
BACKGROUND = "#ffffff"

PALETTE = [
    "#000000", "#FF0000", "#00FF00", "#0000FF",
    "#FFFF00", "#FF00FF", "#00FFFF", "#FFA500",
    "#800080", "#8B4513", "#808080", "#FFC0CB",
]

MIN_BRUSH, MAX_BRUSH = 1, 20
DEFAULT_BRUSH = 5

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def hex_to_bgr(color: str) -> tuple[int, int, int]:
    m = _HEX_RE.match(color.strip())
    if not m:
        raise ValueError(f"bad colour: {color!r}")
    h = m.group(1)
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return (b, g, r)


def to_surface(client_x: float, client_y: float, rect: DisplayRect, size: int = SURFACE_SIZE) -> Point:
    """Map a screen-space pointer position onto surface coordinates.

    The canvas may be displayed smaller or larger than its raster (CSS
    width: 100%), so the offset from the displayed top-left is scaled by
    raster size / displayed size.
    """
    sx = size / rect.width if rect.width else 1.0
    sy = size / rect.height if rect.height else 1.0
    return Point(x=(client_x - rect.left) * sx, y=(client_y - rect.top) * sy)


class StrokeSurface:
    def __init__(self, size: int = SURFACE_SIZE, background: str = BACKGROUND):
        self.size = size
        self.background = background
        self._bg_bgr = hex_to_bgr(background)
        self._img = np.empty((size, size, 3), dtype=np.uint8)
        self._color = PALETTE[0]
        self._color_bgr = hex_to_bgr(self._color)
        self._brush_size = DEFAULT_BRUSH
        self._active = False
        self._last: Point | None = None
        self.reset()

    # ── selection state ────────────────────────────────────────────────────

    @property
    def color(self) -> str:
        return self._color

    @color.setter
    def color(self, value: str):
        self._color_bgr = hex_to_bgr(value)
        self._color = value

    @property
    def brush_size(self) -> int:
        return self._brush_size

    @brush_size.setter
    def brush_size(self, value: int):
        self._brush_size = max(MIN_BRUSH, min(MAX_BRUSH, int(value)))

    # ── stroke input ───────────────────────────────────────────────────────

    @property
    def active(self) -> bool:
        return self._active

    @property
    def last_position(self) -> Point | None:
        return self._last

    def begin(self, position: Point):
        if self._active:
            return
        self._active = True
        self._last = position

    def extend(self, position: Point):
        if not self._active or self._last is None:
            return
        p0 = (int(round(self._last.x)), int(round(self._last.y)))
        p1 = (int(round(position.x)), int(round(position.y)))
        cv2.line(self._img, p0, p1, self._color_bgr, self._brush_size, cv2.LINE_AA)
        self._last = position

    def end(self):
        self._active = False
        self._last = None

    def reset(self):
        self._img[:, :] = self._bg_bgr

    # ── output ─────────────────────────────────────────────────────────────

    def pixels(self) -> np.ndarray:
        """Copy of the raster (H, W, 3) in BGR order."""
        return self._img.copy()

    def export(self) -> str:
        ok, buf = cv2.imencode(".png", self._img)
        if not ok:
            raise RuntimeError("png encode failed")
        b64 = base64.standard_b64encode(buf.tobytes()).decode("utf-8")
        return f"data:image/png;base64,{b64}"
