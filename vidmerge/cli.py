"""Thin CLI entry point: builds a RunConfig and calls the engine."""

import argparse
import logging
import signal
import sys
from pathlib import Path

from vidmerge.discovery import InputDirectoryError, NoInputFilesError
from vidmerge.editors.merge import MergeError
from vidmerge.engine import RunCancelled, process
from vidmerge.ffutil import INSTALL_HINT, FFmpegNotFoundError
from vidmerge.log import configure
from vidmerge.manifest import RunConfig, load_manifest
from vidmerge.prompts import ConsoleInput, InputExhaustedError, ScriptedInput

EPILOG = """\
examples:
  vidmerge                     creates processed_merged.mp4, processed_cut.mp4, ...
  vidmerge ./videos            same files from ./videos
  vidmerge ./videos final      custom prefix: final_merged.mp4, final_cut.mp4, ...

output files (default prefix 'processed'):
  processed_merged.mp4         merged video
  processed_cut.mp4            cut/trimmed video (if cutting enabled)
  processed_normalized.mp4     video with audio peak normalized to -0.5dB
  processed_audio.mp3          320kbps / 48kHz MP3

requires ffmpeg and ffprobe on PATH; inputs should share codecs for a lossless merge.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vidmerge",
        description="Merge MP4 files, optionally cut, normalize audio and extract an MP3.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input_dir", nargs="?", type=Path, help="Directory containing MP4 files (default: current directory)")
    parser.add_argument("prefix", nargs="?", help="Prefix for all output files (default: processed)")
    parser.add_argument("--manifest", "-m", type=Path, help="Path to a JSON run manifest")
    parser.add_argument("--output-dir", type=Path, help="Directory for output files (default: current directory)")
    parser.add_argument("--extension", help="Input file extension (default: .mp4)")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Log ffmpeg command lines")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    return parser


def _terminate(signum, frame) -> None:
    raise SystemExit(128 + signum)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logger = configure(level)

    try:
        config = load_manifest(args.manifest) if args.manifest else RunConfig()
    except (OSError, ValueError) as e:
        logger.error("Could not load manifest %s: %s", args.manifest, e)
        return 1

    if args.input_dir is not None:
        config.input_dir = args.input_dir
    if args.prefix is not None:
        config.prefix = args.prefix
    if args.output_dir is not None:
        config.output_dir = args.output_dir
    if args.extension is not None:
        config.extension = args.extension

    provider = ScriptedInput.from_config(config, fallback=ConsoleInput())
    signal.signal(signal.SIGTERM, _terminate)

    try:
        process(config, provider, logger=logger)
    except FFmpegNotFoundError as e:
        logger.error("%s", e)
        logger.info(INSTALL_HINT)
        return 1
    except (InputDirectoryError, NoInputFilesError) as e:
        logger.error("%s", e)
        return 1
    except MergeError as e:
        logger.error("%s", e)
        logger.warning("This might happen if the MP4 files have incompatible formats")
        logger.info("Common solutions:")
        logger.info("  1. Ensure all MP4 files have the same codec and format")
        logger.info("  2. Try re-encoding method (slower): %s", e.fallback_command)
        return 1
    except (InputExhaustedError, EOFError) as e:
        logger.error("%s", str(e) or "End of input")
        return 1
    except RunCancelled:
        return 0
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    logger.info("All operations completed!")
    return 0


def serve_main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="vidmerge-web", description="Launch the vidmerge web API.")
    parser.add_argument("--port", type=int, default=8321, help="Port to listen on")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--work-dir", type=Path, help="Directory for job outputs")
    args = parser.parse_args(argv)

    configure(logging.INFO)
    from vidmerge.web import create_app
    app = create_app(work_dir=args.work_dir)
    print(f"vidmerge web API: http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
