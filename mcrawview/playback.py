"""Playhead tracking against a wall clock, with pause, stepping and seeking."""

from __future__ import annotations

import re
import threading
import time
from bisect import bisect_left
from typing import Any, Callable, Mapping, Optional, Sequence

from mcrawview.debuglog import log_to_file

KEY_SPACE = 32

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_NS_PER_SECOND = 1_000_000_000


def _parse_timestamp(value: Any) -> Optional[int]:
    """Read an integer timestamp from a metadata value, or None if it has none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            raise ValueError(f"no integer in timestamp string {value!r}")
        parsed = int(match.group(1))
        if not _INT64_MIN <= parsed <= _INT64_MAX:
            raise ValueError(f"timestamp out of range: {value!r}")
        return parsed
    return None


class PlaybackController:
    """Tracks the current frame of a segment from elapsed wall-clock time.

    Wall-clock values are integer nanoseconds from ``clock`` (monotonic by default).
    """

    _display_fps = 0.0

    def __init__(self, clock: Callable[[], int] = time.monotonic_ns) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._paused = False
        self._zoom_native_pixels = False
        self._current_frame_idx = 0
        self._total_frames = 0
        self._first_frame_ts: Optional[int] = None
        self._segment_start = 0
        self._frames_for_avg = 0
        self._fps_avg_start = clock()
        log_to_file("[PlaybackController] Constructor: Initialized, paused = false.")

    @classmethod
    def display_fps(cls) -> float:
        """Frames per second measured over the most recent one-second window."""
        return cls._display_fps

    @property
    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    @property
    def is_zoom_native_pixels(self) -> bool:
        with self._lock:
            return self._zoom_native_pixels

    @property
    def current_frame_index(self) -> int:
        with self._lock:
            return self._current_frame_idx

    @property
    def first_frame_media_timestamp(self) -> Optional[int]:
        with self._lock:
            return self._first_frame_ts

    @property
    def wall_clock_anchor(self) -> int:
        with self._lock:
            return self._segment_start

    @wall_clock_anchor.setter
    def wall_clock_anchor(self, value: int) -> None:
        with self._lock:
            log_to_file(
                f"[PB::setWallClockAnchor] Wall clock anchor updated by App. "
                f"Old: {self._segment_start}, New: {value}"
            )
            self._segment_start = value

    def handle_key(self, key: int) -> None:
        """React to a key press; only space (toggle pause) is handled."""
        if key == KEY_SPACE:
            self.toggle_pause()
            state = "true" if self.is_paused else "false"
            log_to_file(
                f"[PlaybackController::handleKey] Space pressed. "
                f"New Paused state (after toggle): {state}"
            )

    def toggle_pause(self) -> None:
        with self._lock:
            self._paused = not self._paused
            log_to_file(
                f"[PlaybackController::togglePause] Paused state is now: "
                f"{'true' if self._paused else 'false'}"
            )

    def process_new_segment(
        self,
        first_frame_metadata: Mapping[str, Any],
        total_frames_in_segment: int,
        segment_wall_clock_start: int,
    ) -> None:
        """Reset to the start of a new segment anchored at the given wall clock."""
        with self._lock:
            self._total_frames = total_frames_in_segment
            self._current_frame_idx = 0
            self._first_frame_ts = None
            self._segment_start = segment_wall_clock_start
            log_to_file(
                f"[PB::processNewSegment] NEW SEGMENT. Total frames: {total_frames_in_segment}, "
                f"WallClockAnchorEpochNs (at segment start): {segment_wall_clock_start}"
            )
            if "timestamp" not in first_frame_metadata:
                log_to_file(
                    "[PB::processNewSegment] First frame metadata does not contain "
                    "'timestamp'. First Video Frame Media Timestamp will be unset."
                )
                return
            raw = first_frame_metadata["timestamp"]
            try:
                self._first_frame_ts = _parse_timestamp(raw)
            except ValueError as exc:
                self._first_frame_ts = None
                log_to_file(
                    f"[PB::processNewSegment] Exception parsing first frame timestamp: {exc}"
                )
                return
            parsed = "NOT_SET" if self._first_frame_ts is None else str(self._first_frame_ts)
            log_to_file(
                f"[PB::processNewSegment] Using firstFrameMetaTS (raw): {raw!r}, "
                f"Parsed FirstVideoFrameMediaTS: {parsed}"
            )

    def _track_display_fps(self) -> None:
        now = self._clock()
        self._frames_for_avg += 1
        elapsed = (now - self._fps_avg_start) / _NS_PER_SECOND
        if elapsed >= 1.0:
            type(self)._display_fps = self._frames_for_avg / elapsed
            self._fps_avg_start = now
            self._frames_for_avg = 0

    def update_playhead(
        self, current_wall_clock: int, media_frame_timestamps: Sequence[int]
    ) -> bool:
        """Move to the frame due at ``current_wall_clock``; return True when the segment ended."""
        self._track_display_fps()
        with self._lock:
            if self._paused or not media_frame_timestamps or self._first_frame_ts is None:
                return False

            elapsed = current_wall_clock - self._segment_start
            target = self._first_frame_ts + elapsed
            pos = bisect_left(media_frame_timestamps, target)
            last = len(media_frame_timestamps) - 1

            segment_ended = False
            if pos == len(media_frame_timestamps):
                new_idx = last
                segment_ended = True
            elif pos == 0:
                new_idx = 0
            else:
                new_idx = pos - 1 if media_frame_timestamps[pos] > target else pos
            new_idx = min(new_idx, last)

            if new_idx != self._current_frame_idx:
                log_to_file(
                    f"[PB::updatePlayhead] OldIdx: {self._current_frame_idx}, NewIdx: {new_idx}, "
                    f"NewIdx MediaTS: {media_frame_timestamps[new_idx]}, "
                    f"SegmentEnded: {'T' if segment_ended else 'F'}"
                )
            self._current_frame_idx = new_idx
            return segment_ended

    def step_forward(self, total_frames_in_segment: int = 0) -> None:
        """Advance one frame, stopping at the last frame."""
        with self._lock:
            total = total_frames_in_segment if total_frames_in_segment > 0 else self._total_frames
            if total > 0:
                self._current_frame_idx = min(self._current_frame_idx + 1, total - 1)
            log_to_file(
                f"[PlaybackController::stepForward] Stepped forward to frame: "
                f"{self._current_frame_idx}"
            )

    def step_backward(self, total_frames_in_segment: int = 0) -> None:
        """Go back one frame, stopping at the first frame."""
        with self._lock:
            self._current_frame_idx = max(self._current_frame_idx - 1, 0)
            log_to_file(
                f"[PlaybackController::stepBackward] Stepped backward to frame: "
                f"{self._current_frame_idx}"
            )

    def seek_frame(self, frame_idx: int, total_frames_in_segment: int) -> None:
        """Jump to a frame without touching the wall-clock anchor."""
        with self._lock:
            self._total_frames = total_frames_in_segment
            if total_frames_in_segment == 0:
                self._current_frame_idx = 0
                log_to_file(
                    "[PlaybackController::seekFrame] Seek (old method) in empty segment, "
                    "index set to 0."
                )
                return
            self._current_frame_idx = min(frame_idx, total_frames_in_segment - 1)
            log_to_file(
                f"[PlaybackController::seekFrame] (Old method) Seeked to frame: "
                f"{self._current_frame_idx}"
            )

    def seek_to_frame(self, new_idx: int, media_frame_timestamps: Sequence[int]) -> None:
        """Jump to a frame and re-anchor the wall clock so playback resumes from it."""
        with self._lock:
            if not media_frame_timestamps:
                self._current_frame_idx = 0
                log_to_file(
                    f"[PB::seekToFrame] Input newIdx: {new_idx}, "
                    "No media timestamps, index set to 0."
                )
                return

            self._total_frames = len(media_frame_timestamps)
            self._current_frame_idx = min(new_idx, self._total_frames - 1)

            if self._first_frame_ts is None:
                self._first_frame_ts = media_frame_timestamps[0]
                log_to_file(
                    f"[PB::seekToFrame] RECOVERED FirstFrameMediaTS for segment: "
                    f"{self._first_frame_ts}"
                )

            target_ts = media_frame_timestamps[self._current_frame_idx]
            delta = max(target_ts - self._first_frame_ts, 0)
            now = self._clock()
            self._segment_start = now - delta
            log_to_file(
                f"[PB::seekToFrame] Input newIdx: {new_idx}, "
                f"Clamped m_currentFrameIdx: {self._current_frame_idx}, "
                f"TargetFrameMediaTs (abs): {target_ts}, DeltaVideoNsFromSegStart: {delta}, "
                f"New WallClockAnchorEpochNs: {self._segment_start}"
            )

    def toggle_zoom_native_pixels(self) -> None:
        with self._lock:
            self._zoom_native_pixels = not self._zoom_native_pixels
            log_to_file(
                f"[PlaybackController::toggleZoomNativePixels] Zoom native pixels: "
                f"{'ON' if self._zoom_native_pixels else 'OFF'}"
            )

    def current_frame_media_timestamp(
        self, media_frame_timestamps: Sequence[int]
    ) -> Optional[int]:
        """Timestamp of the current frame, or None when the index is out of range."""
        with self._lock:
            if self._current_frame_idx < len(media_frame_timestamps):
                return media_frame_timestamps[self._current_frame_idx]
            return None