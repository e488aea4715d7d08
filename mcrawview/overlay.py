"""Data and text shown by the on-screen overlay: metrics, playlist and context menu."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from mcrawview.playback import PlaybackController
from mcrawview.timefmt import format_hms

SAVE_DNG = "Save Current Frame as DNG"
SOFT_DELETE = "Soft Delete MCRAW"
SEND_CURRENT = "Send Current to motioncam-fs"
SEND_ALL = "Send All in Playlist to motioncam-fs"


@dataclass
class UIData:
    """Snapshot of player state gathered once per frame for the overlay."""

    is_paused: bool = True
    is_zoomed_to_native: bool = False
    current_frame_index: int = 0
    actual_display_fps: float = 0.0
    current_file_name: str = "N/A"
    total_frames_in_file: int = 0
    current_video_time_sec: float = 0.0
    video_timestamp_str: str = ""
    total_duration_sec: float = 0.0
    captured_fps: float = 0.0
    audio_timestamp_str: str = ""
    av_sync_delta_str: str = "N/A"
    cfa_override: Optional[int] = None
    cfa_from_metadata_str: str = ""
    is_fullscreen: bool = False
    show_metrics: bool = False
    show_help_page: bool = False
    decoded_width: int = 0
    decoded_height: int = 0
    total_loop_time_ms: float = 0.0
    gpu_wait_time_ms: float = 0.0
    decode_time_ms: float = 0.0
    render_prep_time_ms: float = 0.0
    gui_render_time_ms: float = 0.0
    vk_submit_present_time_ms: float = 0.0
    app_logic_time_ms: float = 0.0
    sleep_time_ms: float = 0.0


def format_av_sync(audio_ts_ns: int, video_ts_ns: int) -> str:
    """Signed audio-minus-video offset in seconds with three decimals, e.g. ``+0.040s``."""
    delta = (audio_ts_ns - video_ts_ns) * 1e-9
    return f"{delta:+.3f}s"


def gather_ui_data(
    playback: Optional[PlaybackController],
    frame_timestamps: Optional[Sequence[int]],
    file_list: Sequence[Union[str, Path]],
    current_file_index: int,
    audio_timestamp_ns: Optional[int] = None,
) -> UIData:
    """Collect what the overlay displays.

    ``frame_timestamps`` is None when no file is decoded; ``audio_timestamp_ns`` is
    the media timestamp of the last queued audio, or None without audio.
    """
    data = UIData(video_timestamp_str=format_hms(0), audio_timestamp_str=format_hms(0))

    if playback is not None:
        data.is_paused = playback.is_paused
        data.is_zoomed_to_native = playback.is_zoom_native_pixels
        data.current_frame_index = playback.current_frame_index
    data.actual_display_fps = PlaybackController.display_fps()

    if 0 <= current_file_index < len(file_list):
        data.current_file_name = Path(file_list[current_file_index]).name

    segment_first_ts = playback.first_frame_media_timestamp if playback is not None else None

    if frame_timestamps is not None:
        frames = frame_timestamps
        data.total_frames_in_file = len(frames)
        if segment_first_ts is not None:
            first_ts = segment_first_ts
        elif frames:
            first_ts = frames[0]
        else:
            first_ts = 0

        idx = data.current_frame_index
        if idx < len(frames):
            offset = frames[idx] - first_ts
            data.current_video_time_sec = max(offset * 1e-9, 0.0)
            data.video_timestamp_str = format_hms(offset)

        if len(frames) >= 2:
            data.total_duration_sec = max((frames[-1] - first_ts) * 1e-9, 0.0)
            if data.total_duration_sec > 1e-6:
                data.captured_fps = (len(frames) - 1) / data.total_duration_sec

    if audio_timestamp_ns is not None:
        base = segment_first_ts if segment_first_ts is not None else 0
        data.audio_timestamp_str = format_hms(audio_timestamp_ns - base)

    if playback is not None and frame_timestamps is not None and audio_timestamp_ns is not None:
        if data.current_frame_index < len(frame_timestamps):
            data.av_sync_delta_str = format_av_sync(
                audio_timestamp_ns, frame_timestamps[data.current_frame_index]
            )
        else:
            data.av_sync_delta_str = "N/A (idx err)"

    return data


def playlist_entries(file_list: Sequence[Union[str, Path]]) -> List[str]:
    """Numbered playlist labels showing each file's name without its extension."""
    return [f"{number:2d}. {Path(path).stem} " for number, path in enumerate(file_list, start=1)]


def context_menu_items(
    can_operate_on_current: bool, playlist_not_empty: bool
) -> List[Tuple[str, bool]]:
    """Context-menu labels in display order, each with whether it is enabled."""
    return [
        (SAVE_DNG, can_operate_on_current),
        (SOFT_DELETE, can_operate_on_current),
        (SEND_CURRENT, can_operate_on_current),
        (SEND_ALL, playlist_not_empty),
    ]


def metrics_lines(data: UIData) -> List[str]:
    """Text lines of the metrics window."""
    shown_frame = data.current_frame_index + (1 if data.total_frames_in_file > 0 else 0)
    cfa = str(data.cfa_override) if data.cfa_override is not None else "Auto"
    mode = "Fullscreen" if data.is_fullscreen else "Windowed"
    zoom = "Native Pixels" if data.is_zoomed_to_native else "Fit to Window"
    total_time = format_hms(int(data.total_duration_sec * 1e9))
    return [
        f"File: {data.current_file_name}",
        f"Frame: {shown_frame} / {data.total_frames_in_file}",
        f"Time: {data.video_timestamp_str} / {total_time}",
        f"Decoded Res: {data.decoded_width} x {data.decoded_height}",
        f"Captured FPS: {data.captured_fps:.2f}",
        f"Display FPS: {data.actual_display_fps:.1f}",
        f"Audio TS: {data.audio_timestamp_str}",
        f"A/V Sync: {data.av_sync_delta_str}",
        f"Loop Times (ms): Total: {data.total_loop_time_ms:.1f}",
        f"  GPU Wait: {data.gpu_wait_time_ms:.1f}, Decode: {data.decode_time_ms:.1f}",
        f"  RenderPrep: {data.render_prep_time_ms:.1f}, GUI: {data.gui_render_time_ms:.1f}",
        f"  VK Submit/Present: {data.vk_submit_present_time_ms:.1f}",
        f"  App Logic (Events/PB/Audio): {data.app_logic_time_ms:.1f}",
        f"  Sleep: {data.sleep_time_ms:.1f}",
        f"CFA: {cfa} (Meta: {data.cfa_from_metadata_str})",
        f"Mode: {mode}, Zoom: {zoom}",
    ]