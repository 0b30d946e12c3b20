"""Normalize editor: lifts the audio peak to the target level."""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from vidmerge.analyzers.loudness import TARGET_PEAK_DB, analyze_peak, required_gain
from vidmerge.ffutil import FFmpegClient, FFmpegError


class NormalizeError(RuntimeError):
    pass


@dataclass
class NormalizeResult:
    output: Path
    peak_db: float
    gain_db: float | None = None

    @property
    def renamed(self) -> bool:
        """True when the source was moved into place without re-encoding."""
        return self.gain_db is None


def normalize_audio(
    client: FFmpegClient,
    input_path: Path,
    output_path: Path,
    logger: logging.Logger,
    target_db: float = TARGET_PEAK_DB,
) -> NormalizeResult:
    """Bring the audio peak of *input_path* up to *target_db*.

    If the peak is already at or above the target the source file is moved
    to *output_path*. Otherwise a gain is applied into a new file and the
    source is left in place.
    """
    logger.info("Starting audio normalization to %sdB peak...", target_db)
    logger.info("Input: %s", input_path)
    logger.info("Output: %s", output_path)

    peak = analyze_peak(client, input_path, logger)
    if peak is None:
        raise NormalizeError("Could not detect audio levels")

    gain = required_gain(peak, target_db)
    if gain is None:
        logger.info("Peak level (%sdB) is already at or above target (%sdB)", peak, target_db)
        logger.info("Skipping normalization and renaming file...")
        try:
            shutil.move(input_path, output_path)
        except OSError as e:
            raise NormalizeError(f"Failed to rename file: {e}") from e
        logger.info("File renamed as normalized version (no processing needed)")
        return NormalizeResult(output=output_path, peak_db=peak)

    logger.info("Applying gain: %.2fdB to reach %sdB peak", gain, target_db)
    try:
        client.apply_gain(input_path, output_path, gain)
    except FFmpegError as e:
        raise NormalizeError(
            f"Failed to normalize audio ({e}); the video may not have an audio stream"
        ) from e
    return NormalizeResult(output=output_path, peak_db=peak, gain_db=gain)
