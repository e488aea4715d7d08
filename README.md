# mcrawview

This package holds the core logic of a player for MotionCam RAW (`.mcraw`) video. It draws
nothing itself. It works out what a renderer and an on-screen overlay need.

- **Playback timing** (`mcrawview.playback`). `PlaybackController` maps wall-clock time onto
  the media timestamps of a segment. Times are integer nanoseconds, and the clock is
  `time.monotonic_ns` unless you pass another. The controller also handles pause (space key
  via `handle_key`), stepping, seeking with `seek_frame` and with `seek_to_frame`, and
  native-pixel zoom. It keeps a display-FPS estimate, which `PlaybackController.display_fps()`
  returns.
- **Shader parameters** (`mcrawview.shader_params`). `build_shader_params` reads the metadata
  of one frame:
  - dynamic black and white levels,
  - `asShotNeutral`,
  - `ColorMatrix2` or `ColorMatrix`.

  From these it builds a frozen `ShaderParams`. `ShaderParams.pack()` returns the
  uniform-buffer bytes, which are `SHADER_PARAMS_SIZE` long. `cfa_type` maps a Bayer pattern
  name to its shader code (BGGR 0, RGGB 1, GBRG 2, GRBG 3). Case does not matter, and an
  unknown name gives 0.
- **Frame geometry** (`mcrawview.viewport`). `compute_viewport` returns a `Viewport` and a
  `Scissor`. It either fits the image to the window with letterboxing, or places it at native
  pixel size offset by the pan. `FrameView` tracks the size of the current raw image, the zoom
  and the pan. Its `prepare_frame` reports whether a frame's pixels must be uploaded.
- **Resource bookkeeping** (`mcrawview.resources`).
  - `read_shader` reads a compiled shader file. It raises `OSError` when the file cannot be
    read and `ValueError` when the file is empty.
  - `shader_paths` gives the paths `shaders_spv/fullscreen_quad.vert.spv` and
    `shaders_spv/image_process.frag.spv` under a base directory.
  - `descriptor_pool_size` sizes the descriptor pool.
  - `SwapchainResources` holds the shaders, one uniform buffer per swapchain image and the
    descriptor sets. Its `recreate` and `cleanup` build and release them.
- **Overlay data** (`mcrawview.overlay`).
  - `gather_ui_data` collects a `UIData` snapshot: time strings, duration, captured FPS and
    A/V sync.
  - `format_av_sync` formats an audio/video offset.
  - `playlist_entries` gives numbered playlist labels.
  - `context_menu_items` gives the context-menu labels, each with whether it is enabled.
  - `metrics_lines` gives the text of the metrics window.
- **Utilities**.
  - `mcrawview.timefmt` has `format_hms` (`HH:MM:SS.mmm` from nanoseconds) and
    `format_mm_ss`.
  - `mcrawview.debuglog` has `log_to_file`, which writes timestamped lines to
    `mcraw_player_debug_log.txt` unless `set_log_path` names another file, and
    `format_log_line`.
  - `mcrawview.inputs` has `validate_input_path`.

## Example

```python
from mcrawview.playback import PlaybackController
from mcrawview.shader_params import build_shader_params, cfa_type
from mcrawview.timefmt import format_hms
from mcrawview.viewport import compute_viewport

timestamps = [1_000_000_000, 1_033_333_333, 1_066_666_666]

playback = PlaybackController()
playback.process_new_segment({"timestamp": timestamps[0]}, len(timestamps), 0)
playback.step_forward(len(timestamps))
print(playback.current_frame_index)  # 1

params = build_shader_params(
    4000, 3000,
    {"dynamicBlackLevel": [64, 64, 64, 64], "asShotNeutral": [0.5, 1.0, 0.6]},
    64.0, 1023.0, cfa_type("rggb"),
)
data = params.pack()

viewport, scissor = compute_viewport(4000, 3000, 1920, 1080, False, 0.0, 0.0)

print(format_hms(timestamps[-1] - timestamps[0]))  # 00:00:00.067
```

`validate_input_path` raises `InputFileError`, a subclass of `ValueError`, in two cases:

- the path is not an existing regular file;
- the path does not have the `.mcraw` extension.

## What this package does not do

This package does not decode `.mcraw` files, so you supply frame timestamps and frame
metadata yourself. It also does not do any of the following:

- play audio;
- open a window;
- talk to a GPU;
- draw the overlay;
- lay out the control panel or handle timeline scrubbing.

It installs no command. A program that uses it provides the decoding, the window, the
rendering and the input handling.

## Tests

The test suite uses pytest. Install the package with its `test` extra to get it.