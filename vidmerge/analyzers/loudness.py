"""Peak loudness analyzer."""

import logging
from pathlib import Path

from vidmerge.ffutil import FFmpegClient

TARGET_PEAK_DB = -0.5


def analyze_peak(client: FFmpegClient, input_path: Path, logger: logging.Logger) -> float | None:
    """Measure the peak volume (dB) of *input_path*'s audio, or None if unavailable."""
    logger.info("Analyzing audio levels...")
    peak = client.max_volume(input_path)
    if peak is not None:
        logger.info("Current peak level: %sdB", peak)
    return peak


def required_gain(peak_db: float, target_db: float = TARGET_PEAK_DB) -> float | None:
    """Gain in dB that lifts *peak_db* to *target_db*.

    None when the peak already sits at or above the target; otherwise the
    result is always positive.
    """
    if peak_db >= target_db:
        return None
    return target_db - peak_db
