"""Cut editor: trims the merged video to a user-chosen range."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from vidmerge import prompts, timestamps
from vidmerge.ffutil import FFmpegClient, FFmpegError
from vidmerge.models import CutState
from vidmerge.prompts import InputProvider
from vidmerge.timestamps import TIMESTAMP_HELP, format_duration

INVALID_FORMAT = f"Invalid timestamp format. Use {TIMESTAMP_HELP}"


@dataclass
class CutResult:
    state: CutState
    output: Path | None = None
    start: int = 0
    end: int = 0


def check_start(start: str, duration: float) -> str | None:
    """Return an error message, or None if *start* is acceptable."""
    if not timestamps.validate(start):
        return INVALID_FORMAT
    start_s = timestamps.to_seconds(start)
    if start_s >= duration:
        return (
            f"Start time ({start_s} seconds) cannot be greater than "
            f"video duration ({round(duration)} seconds)"
        )
    return None


def check_end(end: str, start: str, duration: float) -> str | None:
    """Return an error message, or None if *end* is acceptable."""
    if not timestamps.validate(end):
        return INVALID_FORMAT
    end_s = timestamps.to_seconds(end)
    start_s = timestamps.to_seconds(start)
    if end_s <= start_s or end_s > duration:
        return (
            "End time must be after start time and within video duration "
            f"({round(duration)} seconds)"
        )
    return None


def _ask_until_valid(
    provider: InputProvider,
    key: str,
    question: str,
    check: Callable[[str], str | None],
    logger: logging.Logger,
) -> str:
    while True:
        answer = provider.ask(key, question)
        error = check(answer)
        if error is None:
            return answer
        logger.error(error)


def ask_cut_range(
    provider: InputProvider,
    duration: float,
    logger: logging.Logger,
) -> tuple[str, str] | None:
    """Ask whether to cut and, if so, for a valid start/end pair."""
    if not provider.confirm(prompts.CUT, "Do you want to cut/trim the merged video?", default=False):
        return None

    logger.info("Total video duration: %s", format_duration(duration))
    logger.info("Timestamp format: %s (examples: 01:30:45, 15:30, 90)", TIMESTAMP_HELP)

    start = _ask_until_valid(
        provider, prompts.CUT_START, "   start time",
        lambda s: check_start(s, duration), logger,
    )
    end = _ask_until_valid(
        provider, prompts.CUT_END, "     end time",
        lambda e: check_end(e, start, duration), logger,
    )
    return start, end


def cut_video(
    client: FFmpegClient,
    input_path: Path,
    output_path: Path,
    start: str,
    end: str,
    logger: logging.Logger,
) -> Path:
    """Stream-copy ``[start, end)`` of *input_path* into *output_path*."""
    start_s = timestamps.to_seconds(start)
    end_s = timestamps.to_seconds(end)
    length = end_s - start_s
    if length <= 0:
        raise ValueError("End time must be after start time")

    logger.info("Cutting video from %s to %s...", start, end)
    logger.info("Cut duration will be: %s (%d seconds)", format_duration(length), length)
    client.trim(input_path, output_path, start=start_s, duration=length)
    return output_path


def run_cut_stage(
    client: FFmpegClient,
    provider: InputProvider,
    input_path: Path,
    output_path: Path,
    logger: logging.Logger,
) -> CutResult:
    duration = client.duration(input_path)
    chosen = ask_cut_range(provider, duration, logger)
    if chosen is None:
        logger.info("Skipping video cutting, using merged file for audio processing")
        return CutResult(state=CutState.SKIPPED)

    start, end = chosen
    try:
        cut_video(client, input_path, output_path, start, end, logger)
    except FFmpegError as e:
        logger.error("Failed to cut video: %s", e)
        logger.error("Video cutting failed, proceeding with original merged file")
        return CutResult(state=CutState.FAILED)

    logger.info("Video cut successfully!")
    return CutResult(
        state=CutState.DONE,
        output=output_path,
        start=timestamps.to_seconds(start),
        end=timestamps.to_seconds(end),
    )
