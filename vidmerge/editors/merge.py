"""Merge editor: joins the playlist into one file without re-encoding."""

import logging
from pathlib import Path

from vidmerge.ffutil import FFmpegClient, FFmpegError


class MergeError(RuntimeError):
    """Concatenation failed; ``fallback_command`` re-encodes instead."""

    def __init__(self, message: str, fallback_command: str) -> None:
        super().__init__(message)
        self.fallback_command = fallback_command


def reencode_command(list_path: Path, output_path: Path) -> str:
    return (
        f"ffmpeg -f concat -safe 0 -i '{list_path}' "
        f"-c:v libx264 -c:a aac '{output_path}'"
    )


def merge_playlist(
    client: FFmpegClient,
    list_path: Path,
    output_path: Path,
    logger: logging.Logger,
) -> Path:
    """Concatenate the files listed in *list_path* into *output_path*.

    Inputs must share codec parameters; otherwise ffmpeg fails and MergeError
    carries a re-encoding command the user can run instead.
    """
    logger.info("Starting merge process with format preservation...")
    logger.info("Output file: %s", output_path)
    try:
        client.concat(list_path, output_path)
    except FFmpegError as e:
        raise MergeError(
            f"Failed to merge files: {e}",
            fallback_command=reencode_command(list_path, output_path),
        ) from e
    logger.info("Files merged successfully with original format preserved!")
    return output_path
