"""Human-readable reporting of stage results."""

import logging
from pathlib import Path

from vidmerge.ffutil import FFmpegClient
from vidmerge.models import MediaInfo, Session
from vidmerge.timestamps import format_duration, format_size


def log_media_info(logger: logging.Logger, info: MediaInfo) -> None:
    logger.info("Video codec: %s", info.video_codec)
    logger.info("Audio codec: %s", info.audio_codec)
    logger.info("Resolution: %s", info.resolution)
    logger.info("Frame rate: %s", info.frame_rate)
    logger.info("Audio sample rate: %s Hz", info.sample_rate)
    logger.info("Audio bitrate: %s bps", info.audio_bitrate)


def report_file(
    logger: logging.Logger,
    client: FFmpegClient,
    path: Path,
    label: str = "Output",
) -> float:
    """Log size and duration of *path*; returns the duration in seconds."""
    if not path.is_file():
        logger.warning("%s file is missing: %s", label, path)
        return 0.0

    duration = client.duration(path)
    logger.info("%s file: %s", label, path)
    logger.info("%s file size: %s", label, format_size(path.stat().st_size))
    logger.info("%s duration: %s (%s seconds)", label, format_duration(duration), duration)
    return duration


def summarize(logger: logging.Logger, session: Session) -> list[Path]:
    """Log every session output present on disk and return their paths."""
    logger.info("Processing Summary")
    logger.info("Created files with prefix '%s':", session.prefix)
    found = []
    for label, path in session.existing_outputs():
        logger.info("✓ %s: %s", label, path)
        found.append(path)
    return found
