"""Orchestrator: runs merge, cut, normalize and MP3 extraction in order."""

import logging
from pathlib import Path
from typing import Callable

from vidmerge import ffutil, prompts
from vidmerge.discovery import discover_inputs
from vidmerge.editors.audio import extract_mp3
from vidmerge.editors.cut import run_cut_stage
from vidmerge.editors.merge import merge_playlist
from vidmerge.editors.normalize import NormalizeError, normalize_audio
from vidmerge.ffutil import FFmpegClient, FFmpegError
from vidmerge.log import get_logger
from vidmerge.manifest import RunConfig, parse_policy
from vidmerge.models import (
    CutState,
    ExistingPolicy,
    Session,
    SessionPaths,
    StageOutcome,
    StageStatus,
)
from vidmerge.prompts import InputProvider
from vidmerge.report import log_media_info, report_file, summarize

MERGE = "merge"
CUT = "cut"
NORMALIZE = "normalize"
AUDIO = "audio"

_CUT_STATUS = {
    CutState.DONE: StageStatus.DONE,
    CutState.SKIPPED: StageStatus.SKIPPED,
    CutState.FAILED: StageStatus.FAILED,
}


class RunCancelled(Exception):
    """The user chose to cancel; nothing was changed."""


def resolve_existing(
    merged_path: Path,
    provider: InputProvider,
    logger: logging.Logger,
) -> ExistingPolicy | None:
    """Ask what to do with an existing merged file. None if there is none."""
    if not merged_path.is_file():
        return None

    logger.warning("Merged file '%s' already exists", merged_path)
    logger.info("Options:")
    logger.info("  s) Skip merging and use existing file")
    logger.info("  o) Override existing file with new merge")
    logger.info("  c) Cancel operation")

    while True:
        reply = provider.choose(prompts.ON_EXISTING, "Choose option", ["s", "o", "c"])
        try:
            policy = parse_policy(reply)
        except ValueError:
            policy = None
        if policy is not None:
            return policy
        logger.error("Invalid option. Please choose 's', 'o', or 'c'")


def process(
    config: RunConfig,
    provider: InputProvider,
    logger: logging.Logger | None = None,
    client: FFmpegClient | None = None,
    on_progress: Callable[[str, float], None] | None = None,
) -> Session:
    """Execute the full pipeline and return the finished session.

    Raises FFmpegNotFoundError, InputDirectoryError, NoInputFilesError and
    MergeError for fatal conditions and RunCancelled when the user cancels.
    Cut, normalization and extraction failures are logged and the previous
    artifact is carried forward.
    """
    logger = logger or get_logger()
    client = client or FFmpegClient(logger=logger)

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    logger.info("MP4 File Merger, Cutter & Audio Processor")
    logger.info("Output prefix: %s", config.prefix)

    _progress("Checking for ffmpeg", 0.0)
    client.check()

    _progress("Discovering input files", 0.02)
    playlist = discover_inputs(config.input_dir, config.extension, logger)

    logger.info("Format information (based on first file):")
    log_media_info(logger, client.inspect(playlist[0]))

    session = Session(
        prefix=config.prefix,
        paths=SessionPaths.for_prefix(config.prefix, Path(config.output_dir)),
        playlist=playlist,
    )
    merged = session.paths.merged

    # --- Merge ---
    with ffutil.playlist_file(playlist) as list_path:
        logger.info("Generated file list:")
        for line in ffutil.render_playlist(playlist).splitlines():
            logger.info("  %s", line)

        policy = resolve_existing(merged, provider, logger)
        if policy is ExistingPolicy.CANCEL:
            logger.info("Operation cancelled by user")
            raise RunCancelled()

        if policy is ExistingPolicy.SKIP:
            logger.info("Skipping merge, using existing file: %s", merged)
            report_file(logger, client, merged, "Existing")
            session.record(MERGE, StageOutcome(StageStatus.REUSED, merged))
        else:
            if policy is ExistingPolicy.OVERRIDE:
                logger.info("Will override existing file with new merge")
            _progress("Merging files", 0.1)
            merged.parent.mkdir(parents=True, exist_ok=True)
            merge_playlist(client, list_path, merged, logger)
            report_file(logger, client, merged, "Merged")
            log_media_info(logger, client.inspect(merged))
            session.record(MERGE, StageOutcome(StageStatus.DONE, merged))

    # --- Cut ---
    _progress("Cutting", 0.4)
    cut = run_cut_stage(client, provider, session.current, session.paths.cut, logger)
    session.record(CUT, StageOutcome(_CUT_STATUS[cut.state], cut.output))
    if cut.state is CutState.DONE:
        report_file(logger, client, session.paths.cut, "Cut")

    # --- Normalize ---
    _progress("Normalizing audio", 0.6)
    try:
        result = normalize_audio(
            client,
            session.current,
            session.paths.normalized,
            logger,
            target_db=config.normalize.target_peak_db,
        )
    except NormalizeError as e:
        logger.error(str(e))
        logger.warning("Audio normalization failed, using previous file for MP3 extraction")
        session.record(NORMALIZE, StageOutcome(StageStatus.FAILED, message=str(e)))
    else:
        logger.info("Audio normalization completed!")
        report_file(logger, client, result.output, "Normalized")
        if result.renamed:
            logger.info("Audio already at optimal level (%sdB)", result.peak_db)
        else:
            logger.info("Audio peak normalized to %sdB", config.normalize.target_peak_db)
        session.record(NORMALIZE, StageOutcome(StageStatus.DONE, result.output))

    # --- MP3 ---
    # stored directly: the MP3 never becomes the current video artifact
    _progress("Extracting MP3", 0.85)
    try:
        extract_mp3(client, session.current, session.paths.audio, logger, config.audio)
    except FFmpegError as e:
        logger.error("Failed to extract MP3 audio: %s", e)
        logger.warning("MP3 extraction failed")
        session.stages[AUDIO] = StageOutcome(StageStatus.FAILED, message=str(e))
    else:
        logger.info("MP3 extraction completed!")
        report_file(logger, client, session.paths.audio, "MP3")
        session.stages[AUDIO] = StageOutcome(StageStatus.DONE, session.paths.audio)

    summarize(logger, session)
    _progress("Done", 1.0)
    return session
