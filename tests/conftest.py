"""Shared test fixtures."""

import logging
from pathlib import Path

import pytest

from vidmerge.ffutil import FFmpegClient, FFmpegError
from vidmerge.models import MediaInfo

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeClient(FFmpegClient):
    """FFmpegClient stand-in that writes placeholder files instead of running ffmpeg.

    ``durations`` maps file names to seconds (default 60.0). Operations named
    in ``fail`` raise FFmpegError. Every transform is recorded in ``calls`` as
    ``(op, input_path, output_path)``.
    """

    def __init__(self, durations=None, peak=-3.0, fail=()):
        super().__init__(logger=logging.getLogger("vidmerge.test"))
        self.durations = dict(durations or {})
        self.default_duration = 60.0
        self.peak = peak
        self.fail = set(fail)
        self.calls: list[tuple] = []
        self.playlist_text = None
        self.list_path = None
        self.trim_args = None
        self.gain = None

    def check(self) -> None:
        pass

    def inspect(self, path: Path) -> MediaInfo:
        return MediaInfo(
            video_codec="h264",
            audio_codec="aac",
            resolution="320x240",
            frame_rate="30/1",
            sample_rate="48000",
            audio_bitrate="128000",
            duration=self.duration(path),
        )

    def duration(self, path: Path) -> float:
        path = Path(path)
        if not path.is_file():
            return 0.0
        return self.durations.get(path.name, self.default_duration)

    def max_volume(self, path: Path):
        self.calls.append(("max_volume", Path(path), None))
        return self.peak

    def _produce(self, op: str, input_path, output_path, content: bytes) -> None:
        self.calls.append((op, Path(input_path), Path(output_path)))
        if op in self.fail:
            raise FFmpegError([self.ffmpeg], 1, f"{op} failed")
        Path(output_path).write_bytes(content)

    def concat(self, list_path: Path, output_path: Path) -> None:
        self.list_path = Path(list_path)
        self.playlist_text = self.list_path.read_text()
        self._produce("concat", list_path, output_path, b"merged")

    def trim(self, input_path, output_path, start, duration) -> None:
        self.trim_args = (start, duration)
        self.durations[Path(output_path).name] = float(duration)
        self._produce("trim", input_path, output_path, b"cut")

    def apply_gain(self, input_path, output_path, gain_db) -> None:
        self.gain = gain_db
        self._produce("apply_gain", input_path, output_path, b"normalized")

    def extract_mp3(self, input_path, output_path, bitrate="320k", sample_rate=48000, codec="libmp3lame") -> None:
        self._produce("extract_mp3", input_path, output_path, b"mp3")

    def ops(self) -> list[str]:
        return [c[0] for c in self.calls]

    def call(self, op: str) -> tuple:
        return next(c for c in self.calls if c[0] == op)


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("vidmerge.test")


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def clip_dir(tmp_path: Path) -> Path:
    """A directory holding a.mp4, b.mp4 and c.mp4 placeholder files."""
    d = tmp_path / "clips"
    d.mkdir()
    for name in ("c.mp4", "a.mp4", "b.mp4"):
        (d / name).write_bytes(name.encode())
    return d


@pytest.fixture
def make_client():
    """Factory for FakeClient with custom durations, peak or failures."""
    return FakeClient
