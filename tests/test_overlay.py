import dataclasses

import pytest

from mcrawview import debuglog
from mcrawview.overlay import (
    UIData,
    context_menu_items,
    format_av_sync,
    gather_ui_data,
    metrics_lines,
    playlist_entries,
)
from mcrawview.playback import PlaybackController
from mcrawview.timefmt import format_hms


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path):
    debuglog.set_log_path(tmp_path / "log.txt")
    yield


def _controller(first_ts, total):
    pb = PlaybackController(clock=lambda: 0)
    pb.process_new_segment({"timestamp": first_ts}, total, 0)
    return pb


FRAMES = [1000, 1000 + 500_000_000, 1000 + 1_000_000_000]


def test_without_playback_or_decoder():
    data = gather_ui_data(None, None, [], -1, None)
    assert data.is_paused is True
    assert data.current_frame_index == 0
    assert data.current_file_name == "N/A"
    assert data.total_frames_in_file == 0
    assert data.video_timestamp_str == format_hms(0)
    assert data.audio_timestamp_str == format_hms(0)
    assert data.av_sync_delta_str == "N/A"


def test_file_name_taken_from_current_index():
    data = gather_ui_data(None, None, ["/a/b/first.mcraw", "/a/b/clip.mcraw"], 1, None)
    assert data.current_file_name == "clip.mcraw"


def test_index_out_of_playlist_gives_na():
    data = gather_ui_data(None, None, ["/a/clip.mcraw"], 3, None)
    assert data.current_file_name == "N/A"


def test_times_relative_to_segment_start():
    pb = _controller(FRAMES[0], len(FRAMES))
    pb.seek_frame(1, len(FRAMES))
    data = gather_ui_data(pb, FRAMES, ["x.mcraw"], 0, None)
    assert data.total_frames_in_file == len(FRAMES)
    assert data.current_frame_index == 1
    assert data.current_video_time_sec == pytest.approx((FRAMES[1] - FRAMES[0]) * 1e-9)
    assert data.video_timestamp_str == format_hms(FRAMES[1] - FRAMES[0])
    assert data.total_duration_sec == pytest.approx((FRAMES[-1] - FRAMES[0]) * 1e-9)
    assert data.captured_fps * data.total_duration_sec == pytest.approx(len(FRAMES) - 1)


def test_single_frame_has_no_duration():
    pb = _controller(5, 1)
    data = gather_ui_data(pb, [5], [], -1, None)
    assert data.total_duration_sec == 0.0
    assert data.captured_fps == 0.0


def test_without_playback_uses_first_frame_as_origin():
    data = gather_ui_data(None, FRAMES, [], -1, None)
    assert data.current_video_time_sec == 0.0
    assert data.video_timestamp_str == format_hms(0)
    assert data.total_duration_sec == pytest.approx((FRAMES[-1] - FRAMES[0]) * 1e-9)


def test_playback_state_is_copied():
    pb = _controller(FRAMES[0], len(FRAMES))
    pb.toggle_pause()
    pb.toggle_zoom_native_pixels()
    data = gather_ui_data(pb, FRAMES, [], -1, None)
    assert data.is_paused is True
    assert data.is_zoomed_to_native is True


def test_audio_timestamp_relative_to_segment():
    pb = _controller(FRAMES[0], len(FRAMES))
    audio = FRAMES[0] + 2_000_000_000
    data = gather_ui_data(pb, FRAMES, [], -1, audio)
    assert data.audio_timestamp_str == format_hms(2_000_000_000)
    assert data.av_sync_delta_str == format_av_sync(audio, FRAMES[0])


def test_av_sync_index_error():
    pb = _controller(FRAMES[0], 10)
    pb.seek_frame(5, 10)
    data = gather_ui_data(pb, FRAMES, [], -1, FRAMES[0])
    assert data.av_sync_delta_str == "N/A (idx err)"
    assert data.current_video_time_sec == 0.0


def test_format_av_sync_sign():
    assert format_av_sync(1_500_000_000, 1_000_000_000) == "+0.500s"
    assert format_av_sync(1_000_000_000, 1_500_000_000).startswith("-")
    assert format_av_sync(7, 7).endswith("s")


def test_playlist_entries():
    assert playlist_entries(["x/one.mcraw", "two.mcraw"]) == [" 1. one ", " 2. two "]
    assert playlist_entries([]) == []


def test_context_menu_items():
    items = context_menu_items(False, True)
    assert [label for label, _ in items] == [
        "Save Current Frame as DNG",
        "Soft Delete MCRAW",
        "Send Current to motioncam-fs",
        "Send All in Playlist to motioncam-fs",
    ]
    assert [enabled for _, enabled in items] == [False, False, False, True]
    assert all(enabled for _, enabled in context_menu_items(True, True))


def test_metrics_lines_content():
    data = UIData(current_file_name="clip.mcraw", cfa_from_metadata_str="RGGB")
    lines = metrics_lines(data)
    assert lines[0] == "File: clip.mcraw"
    assert "CFA: Auto (Meta: RGGB)" in lines
    assert "Mode: Windowed, Zoom: Fit to Window" in lines
    assert "Frame: 0 / 0" in lines


def test_metrics_lines_override_and_frame_numbering():
    data = dataclasses.replace(
        UIData(),
        cfa_override=2,
        cfa_from_metadata_str="BGGR",
        current_frame_index=4,
        total_frames_in_file=10,
        is_fullscreen=True,
        is_zoomed_to_native=True,
    )
    lines = metrics_lines(data)
    assert "CFA: 2 (Meta: BGGR)" in lines
    assert "Frame: 5 / 10" in lines
    assert "Mode: Fullscreen, Zoom: Native Pixels" in lines