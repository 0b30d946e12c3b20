#!/usr/bin/env python3
"""Generate a directory of synthetic clips for vidmerge pipeline testing.

Produces three clips with identical codec parameters so they merge losslessly:
  a.mp4  10s  blue   440 Hz tone
  b.mp4  20s  red    660 Hz tone
  c.mp4  30s  green  880 Hz tone

The tone is rendered at ``--peak`` dB (default -3) so the normalization stage
has a gain to apply.
"""

import argparse
import subprocess
from pathlib import Path

CLIPS = [
    ("a.mp4", 10, "blue", 440),
    ("b.mp4", 20, "red", 660),
    ("c.mp4", 30, "green", 880),
]


def generate_clip(output: Path, duration: int, color: str, freq: int, peak_db: float) -> None:
    # amplitude 1.0 is 0 dBFS, so this sets the peak directly
    amplitude = 10 ** (peak_db / 20)
    filter_complex = (
        f"color=c={color}:s=320x240:d={duration}:r=30[vout];"
        f"aevalsrc={amplitude:.6f}*sin(2*PI*{freq}*t):s=48000:d={duration}[aout]"
    )
    cmd = [
        "ffmpeg", "-y",
        "-filter_complex", filter_complex,
        "-map", "[vout]",
        "-map", "[aout]",
        "-c:v", "libx264",
        "-c:a", "aac",
        "-ar", "48000",
        "-shortest",
        str(output),
    ]
    subprocess.run(cmd, check=True)


def generate_test_clips(output_dir: Path, peak_db: float = -3.0) -> list[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for name, duration, color, freq in CLIPS:
        path = output_dir / name
        generate_clip(path, duration, color, freq, peak_db)
        print(f"Generated: {path}")
        paths.append(path)
    return paths


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("output_dir", nargs="?", type=Path, default=Path("tests/fixtures/clips"))
    parser.add_argument("--peak", type=float, default=-3.0, help="Tone level in dB")
    args = parser.parse_args()
    generate_test_clips(args.output_dir, args.peak)
