"""Input file discovery."""

import logging
from pathlib import Path

from vidmerge.models import Playlist


class InputDirectoryError(FileNotFoundError):
    pass


class NoInputFilesError(RuntimeError):
    pass


def discover_inputs(
    input_dir: Path,
    extension: str = ".mp4",
    logger: logging.Logger | None = None,
) -> Playlist:
    """Return the sorted, absolute paths of files in *input_dir* ending in *extension*.

    Non-recursive and case-sensitive on the extension. Symlinks are skipped,
    like ``find -type f``.
    """
    log = logger or logging.getLogger(__name__)

    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise InputDirectoryError(f"Directory does not exist: {input_dir}")
    input_dir = input_dir.resolve()

    log.info("Creating file list from directory: %s", input_dir)
    files = sorted(
        (
            p for p in input_dir.iterdir()
            if p.name.endswith(extension) and p.is_file() and not p.is_symlink()
        ),
        key=lambda p: p.name,
    )
    if not files:
        raise NoInputFilesError(f"No {extension} files found in directory: {input_dir}")

    for p in files:
        log.info("Added: %s", p.name)
    label = extension.lstrip(".").upper() or "input"
    log.info("Found %d %s files", len(files), label)

    return tuple(p.resolve() for p in files)
