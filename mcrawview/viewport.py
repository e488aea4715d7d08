"""Placement of the raw image inside the window and tracking of its GPU size."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from mcrawview.debuglog import log_to_file


@dataclass(frozen=True)
class Viewport:
    """Rectangle, in window pixels, that the image is drawn into."""

    x: float
    y: float
    width: float
    height: float
    min_depth: float = 0.0
    max_depth: float = 1.0


@dataclass(frozen=True)
class Scissor:
    """Integer clip rectangle, in window pixels."""

    x: int
    y: int
    width: int
    height: int


def compute_viewport(
    image_width: int,
    image_height: int,
    window_width: int,
    window_height: int,
    zoom_native: bool = False,
    pan_x: float = 0.0,
    pan_y: float = 0.0,
) -> Tuple[Viewport, Scissor]:
    """Viewport and scissor for drawing an image into a window.

    Without an image the whole window is used. In native-pixel zoom the image
    is drawn at its own size offset by the pan. Otherwise it is fitted to the
    window, keeping its aspect ratio, and centred.
    """
    whole_window = Scissor(0, 0, int(window_width), int(window_height))

    if image_width <= 0 or image_height <= 0:
        return Viewport(0.0, 0.0, float(window_width), float(window_height)), whole_window

    if zoom_native:
        viewport = Viewport(float(pan_x), float(pan_y), float(image_width), float(image_height))
        return viewport, whole_window

    img_aspect = image_width / image_height
    win_aspect = window_width / window_height if window_height else math.inf
    if img_aspect > win_aspect:
        vp_width = float(window_width)
        vp_height = vp_width / img_aspect
        vp_x = 0.0
        vp_y = (window_height - vp_height) / 2.0
    else:
        vp_height = float(window_height)
        vp_width = vp_height * img_aspect
        vp_y = 0.0
        vp_x = (window_width - vp_width) / 2.0

    scissor = Scissor(
        int(max(0.0, vp_x)),
        int(max(0.0, vp_y)),
        int(max(0.0, vp_width)),
        int(max(0.0, vp_height)),
    )
    return Viewport(vp_x, vp_y, vp_width, vp_height), scissor


@dataclass
class FrameView:
    """Size of the GPU raw image together with zoom and pan state."""

    image_width: int = 0
    image_height: int = 0
    zoom_native: bool = False
    pan_x: float = 0.0
    pan_y: float = 0.0

    def set_pan_offsets(self, x: float, y: float) -> None:
        self.pan_x = x
        self.pan_y = y

    def reset_pan_offsets(self) -> None:
        self.pan_x = 0.0
        self.pan_y = 0.0

    def reset_dimensions(self) -> None:
        """Forget the image size so the next frame counts as a size change."""
        log_to_file("[Renderer_VK::resetDimensions] Resetting current raw dimensions to 0x0.")
        self.image_width = 0
        self.image_height = 0

    def ensure_capacity(self, width: int, height: int) -> bool:
        """Grow the image to hold ``width`` x ``height``; return True if it was recreated.

        A recreated image takes exactly the requested size; an image already
        large enough in both directions is left as it is.
        """
        if width <= self.image_width and height <= self.image_height:
            return False
        log_to_file(
            f"[Renderer_VK::ensureRawImageCapacity] Capacity insufficient (current: "
            f"{self.image_width}x{self.image_height}, required: {width}x{height}). "
            "Resizing GPU image."
        )
        self.image_width = width
        self.image_height = height
        return True

    def prepare_frame(self, width: int, height: int, force_upload: bool = False) -> bool:
        """Account for a new frame's size; return True if its pixels must be uploaded."""
        if width <= 0 or height <= 0:
            log_to_file(
                f"[Renderer_VK::prepareAndUploadFrameData] Invalid dimensions "
                f"{width}x{height}. Skipping upload."
            )
            width = max(1, width)
            height = max(1, height)
            force_upload = False

        if width != self.image_width or height != self.image_height:
            log_to_file(
                f"[Renderer_VK::prepareAndUploadFrameData] Dimensions changed from "
                f"{self.image_width}x{self.image_height} to {width}x{height}. "
                "Recreating GPU image resources if necessary."
            )
            self.ensure_capacity(width, height)
            force_upload = True
        return force_upload

    def viewport(self, window_width: int, window_height: int) -> Tuple[Viewport, Scissor]:
        """Viewport and scissor for the current image in a window of the given size."""
        return compute_viewport(
            self.image_width,
            self.image_height,
            window_width,
            window_height,
            self.zoom_native,
            self.pan_x,
            self.pan_y,
        )