"""Audio editor: extracts an MP3 track from the final video."""

import logging
from pathlib import Path

from vidmerge.ffutil import FFmpegClient
from vidmerge.manifest import AudioConfig


def extract_mp3(
    client: FFmpegClient,
    input_path: Path,
    output_path: Path,
    logger: logging.Logger,
    config: AudioConfig | None = None,
) -> Path:
    config = config or AudioConfig()
    logger.info("Extracting high-quality MP3 audio...")
    logger.info("Input: %s", input_path)
    logger.info("Output: %s", output_path)
    client.extract_mp3(
        input_path,
        output_path,
        bitrate=config.bitrate,
        sample_rate=config.sample_rate,
        codec=config.codec,
    )
    logger.info("Quality: %sbps, %dHz sampling rate", config.bitrate, config.sample_rate)
    return output_path
