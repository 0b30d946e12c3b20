"""JSON run manifest: the contract between CLI/API and engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from vidmerge.models import ExistingPolicy

_POLICY_NAMES = {
    "skip": ExistingPolicy.SKIP,
    "override": ExistingPolicy.OVERRIDE,
    "cancel": ExistingPolicy.CANCEL,
}


@dataclass
class CutConfig:
    """Pre-answered cut prompts. ``None`` means ask interactively."""

    enabled: bool | None = None
    start: str | None = None
    end: str | None = None


@dataclass
class NormalizeConfig:
    """Peak normalization settings."""

    target_peak_db: float = -0.5


@dataclass
class AudioConfig:
    """MP3 extraction settings."""

    codec: str = "libmp3lame"
    bitrate: str = "320k"
    sample_rate: int = 48000


@dataclass
class RunConfig:
    """Top-level run manifest."""

    input_dir: Path = Path(".")
    prefix: str = "processed"
    output_dir: Path = Path(".")
    extension: str = ".mp4"
    on_existing: ExistingPolicy | None = None
    cut: CutConfig = field(default_factory=CutConfig)
    normalize: NormalizeConfig = field(default_factory=NormalizeConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)


def parse_policy(value: str | None) -> ExistingPolicy | None:
    """Accept ``skip``/``override``/``cancel`` or their one-letter forms."""
    if value is None:
        return None
    key = value.strip().lower()
    if key in _POLICY_NAMES:
        return _POLICY_NAMES[key]
    for policy in ExistingPolicy:
        if key == policy.value:
            return policy
    raise ValueError(f"on_existing must be one of skip, override, cancel (got {value!r})")


def config_from_dict(data: dict) -> RunConfig:
    if "input_dir" not in data:
        raise ValueError("Manifest must contain an 'input_dir' field")

    cut = CutConfig(**data["cut"]) if "cut" in data else CutConfig()
    normalize = NormalizeConfig(**data["normalize"]) if "normalize" in data else NormalizeConfig()
    audio = AudioConfig(**data["audio"]) if "audio" in data else AudioConfig()

    return RunConfig(
        input_dir=Path(data["input_dir"]),
        prefix=data.get("prefix", "processed"),
        output_dir=Path(data.get("output_dir", ".")),
        extension=data.get("extension", ".mp4"),
        on_existing=parse_policy(data.get("on_existing")),
        cut=cut,
        normalize=normalize,
        audio=audio,
    )


def load_manifest(path: str | Path) -> RunConfig:
    """Load and validate a run manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())
    return config_from_dict(data)
