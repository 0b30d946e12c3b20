"""Shared data types used across vidmerge."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

UNKNOWN = "unknown"

Playlist = tuple[Path, ...]


class ExistingPolicy(str, Enum):
    """What to do when the merged output already exists."""

    SKIP = "s"
    OVERRIDE = "o"
    CANCEL = "c"


class CutState(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


class StageStatus(str, Enum):
    DONE = "done"
    REUSED = "reused"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class MediaInfo:
    """Best-effort metadata for a media file. Missing fields are 'unknown'."""

    video_codec: str = UNKNOWN
    audio_codec: str = UNKNOWN
    resolution: str = UNKNOWN
    frame_rate: str = UNKNOWN
    sample_rate: str = UNKNOWN
    audio_bitrate: str = UNKNOWN
    duration: float = 0.0


@dataclass(frozen=True)
class SessionPaths:
    """The four candidate outputs of one run."""

    merged: Path
    cut: Path
    normalized: Path
    audio: Path

    @classmethod
    def for_prefix(cls, prefix: str, output_dir: Path = Path(".")) -> "SessionPaths":
        return cls(
            merged=output_dir / f"{prefix}_merged.mp4",
            cut=output_dir / f"{prefix}_cut.mp4",
            normalized=output_dir / f"{prefix}_normalized.mp4",
            audio=output_dir / f"{prefix}_audio.mp3",
        )

    def labeled(self) -> list[tuple[str, Path]]:
        return [
            ("Merged video", self.merged),
            ("Cut video", self.cut),
            ("Normalized video", self.normalized),
            ("MP3 audio", self.audio),
        ]


@dataclass
class StageOutcome:
    """Result of a single pipeline stage."""

    status: StageStatus
    output: Path | None = None
    message: str | None = None


@dataclass
class Session:
    """State of one processing run.

    ``current`` is the artifact the next stage consumes; each stage that
    produces a file moves it forward, failed stages leave it alone.
    """

    prefix: str
    paths: SessionPaths
    playlist: Playlist = ()
    current: Path | None = None
    stages: dict[str, StageOutcome] = field(default_factory=dict)

    def record(self, stage: str, outcome: StageOutcome) -> None:
        self.stages[stage] = outcome
        if outcome.status in (StageStatus.DONE, StageStatus.REUSED) and outcome.output:
            self.current = outcome.output

    def existing_outputs(self) -> list[tuple[str, Path]]:
        return [(label, path) for label, path in self.paths.labeled() if path.is_file()]
