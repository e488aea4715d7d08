"""Checks on the file the player is asked to open."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from mcrawview.debuglog import log_to_file

MCRAW_SUFFIX = ".mcraw"


class InputFileError(ValueError):
    """The input path is missing, not a regular file, or not an .mcraw file."""

    def __init__(self, message: str, path: Union[str, Path]) -> None:
        super().__init__(message)
        self.path = Path(path)


def validate_input_path(path: Union[str, Path]) -> Path:
    """Return ``path`` as a Path if it names an existing regular ``.mcraw`` file."""
    candidate = Path(path)
    if not candidate.is_file():
        message = f"Input file not found or not a regular file: {path}"
        log_to_file(f"[main] {message}")
        raise InputFileError(message, candidate)
    if candidate.suffix != MCRAW_SUFFIX:
        message = f"Input file must have a .mcraw extension: {path}"
        log_to_file(f"[main] {message}")
        raise InputFileError(message, candidate)
    return candidate