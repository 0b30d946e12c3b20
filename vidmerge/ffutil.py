"""FFmpeg/ffprobe subprocess helpers.

Everything that builds an ffmpeg command line or parses ffmpeg/ffprobe output
lives here; the stages only see ``FFmpegClient`` and plain Python values.
"""

import contextlib
import json
import logging
import math
import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Iterator

from vidmerge.models import UNKNOWN, MediaInfo, Playlist

INSTALL_HINT = "Install FFmpeg with: sudo apt update && sudo apt install ffmpeg"

_MAX_VOLUME_RE = re.compile(r"max_volume:\s*(-?\d+(?:\.\d+)?) dB")


class FFmpegNotFoundError(RuntimeError):
    pass


class FFmpegError(RuntimeError):
    """Raised when an ffmpeg/ffprobe invocation exits non-zero."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr or ""
        lines = self.stderr.strip().splitlines()
        detail = f": {lines[-1]}" if lines else ""
        super().__init__(f"{cmd[0]} failed (rc={returncode}){detail}")


def check_ffmpeg(ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe") -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in (ffmpeg, ffprobe):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} is not installed or not in PATH")


def parse_max_volume(stderr: str) -> float | None:
    """Pull the peak level out of volumedetect output.

    Returns None when no finite ``max_volume`` line is present (ffmpeg prints
    ``-inf dB`` for digital silence).
    """
    m = _MAX_VOLUME_RE.search(stderr)
    if m is None:
        return None
    value = float(m.group(1))
    return value if math.isfinite(value) else None


def _field(stream: dict | None, key: str) -> str:
    if stream is None:
        return UNKNOWN
    value = stream.get(key)
    if value in (None, "", "N/A"):
        return UNKNOWN
    return str(value)


def parse_media_info(data: dict) -> MediaInfo:
    """Build a MediaInfo from ffprobe JSON; each field is extracted independently."""
    streams = data.get("streams") or []
    video = next((s for s in streams if s.get("codec_type") == "video"), None)
    audio = next((s for s in streams if s.get("codec_type") == "audio"), None)

    width, height = _field(video, "width"), _field(video, "height")
    resolution = f"{width}x{height}" if UNKNOWN not in (width, height) else UNKNOWN

    try:
        duration = float(data.get("format", {}).get("duration", 0.0))
    except (TypeError, ValueError):
        duration = 0.0

    return MediaInfo(
        video_codec=_field(video, "codec_name"),
        audio_codec=_field(audio, "codec_name"),
        resolution=resolution,
        frame_rate=_field(video, "r_frame_rate"),
        sample_rate=_field(audio, "sample_rate"),
        audio_bitrate=_field(audio, "bit_rate"),
        duration=duration,
    )


def _concat_quote(path: Path) -> str:
    # concat demuxer syntax: close quote, escaped quote, reopen
    return "'" + str(path).replace("'", "'\\''") + "'"


def render_playlist(playlist: Playlist) -> str:
    return "".join(f"file {_concat_quote(p)}\n" for p in playlist)


@contextlib.contextmanager
def playlist_file(playlist: Playlist) -> Iterator[Path]:
    """Write the concat list to a temp file and remove it on every exit path."""
    tmp = tempfile.NamedTemporaryFile(
        mode="w", prefix="ffmpeg_filelist_", suffix=".txt", delete=False, encoding="utf-8"
    )
    path = Path(tmp.name)
    try:
        with tmp:
            tmp.write(render_playlist(playlist))
        yield path
    finally:
        path.unlink(missing_ok=True)


class FFmpegClient:
    """Typed wrapper around the ffmpeg and ffprobe executables."""

    def __init__(
        self,
        ffmpeg: str = "ffmpeg",
        ffprobe: str = "ffprobe",
        logger: logging.Logger | None = None,
    ) -> None:
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        self.logger = logger or logging.getLogger(__name__)

    def check(self) -> None:
        check_ffmpeg(self.ffmpeg, self.ffprobe)

    def _run(self, cmd: list[str], check: bool = True) -> subprocess.CompletedProcess:
        self.logger.debug("Running: %s", " ".join(cmd))
        result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
        if check and result.returncode != 0:
            raise FFmpegError(cmd, result.returncode, result.stderr)
        return result

    # --- queries ---

    def probe(self, path: Path) -> dict | None:
        """Raw ffprobe JSON for *path*, or None when ffprobe cannot read it."""
        cmd = [
            self.ffprobe,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]
        result = self._run(cmd, check=False)
        if result.returncode != 0:
            return None
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError:
            return None

    def inspect(self, path: Path) -> MediaInfo:
        data = self.probe(path)
        if data is None:
            return MediaInfo()
        return parse_media_info(data)

    def duration(self, path: Path) -> float:
        """Container duration in seconds; 0.0 if unknown."""
        if not Path(path).is_file():
            return 0.0
        return self.inspect(path).duration

    def max_volume(self, path: Path) -> float | None:
        """Run a decode-only volumedetect pass and return the peak in dB."""
        cmd = [
            self.ffmpeg,
            "-i", str(path),
            "-af", "volumedetect",
            "-vn", "-sn", "-dn",
            "-f", "null", "-",
        ]
        result = self._run(cmd, check=False)
        return parse_max_volume(result.stderr or "")

    # --- transforms ---

    def concat(self, list_path: Path, output_path: Path) -> None:
        """Demuxer-level concatenation, no re-encoding."""
        cmd = [
            self.ffmpeg,
            "-f", "concat",
            "-safe", "0",
            "-i", str(list_path),
            "-c", "copy",
            "-avoid_negative_ts", "make_zero",
            str(output_path),
            "-y",
        ]
        self._run(cmd)

    def trim(self, input_path: Path, output_path: Path, start: int, duration: int) -> None:
        """Stream-copy ``duration`` seconds starting at ``start``."""
        cmd = [
            self.ffmpeg,
            "-ss", str(start),
            "-i", str(input_path),
            "-t", str(duration),
            "-c", "copy",
            "-avoid_negative_ts", "make_zero",
            str(output_path),
            "-y",
        ]
        self._run(cmd)

    def apply_gain(self, input_path: Path, output_path: Path, gain_db: float) -> None:
        """Apply a uniform audio gain; the video stream is copied."""
        cmd = [
            self.ffmpeg,
            "-i", str(input_path),
            "-af", f"volume={gain_db:.2f}dB",
            "-c:v", "copy",
            str(output_path),
            "-y",
        ]
        self._run(cmd)

    def extract_mp3(
        self,
        input_path: Path,
        output_path: Path,
        bitrate: str = "320k",
        sample_rate: int = 48000,
        codec: str = "libmp3lame",
    ) -> None:
        cmd = [
            self.ffmpeg,
            "-i", str(input_path),
            "-vn",
            "-acodec", codec,
            "-b:a", bitrate,
            "-ar", str(sample_rate),
            str(output_path),
            "-y",
        ]
        self._run(cmd)
