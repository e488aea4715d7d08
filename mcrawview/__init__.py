"""Playback timing, frame geometry, shader parameters, resource bookkeeping and overlay data for .mcraw video players."""

__version__ = "0.5.0"

__all__ = [
    "debuglog",
    "inputs",
    "overlay",
    "playback",
    "resources",
    "shader_params",
    "timefmt",
    "viewport",
]