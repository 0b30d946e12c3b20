"""Tests for input discovery."""

from pathlib import Path

import pytest

from vidmerge.discovery import InputDirectoryError, NoInputFilesError, discover_inputs


class TestDiscoverInputs:
    def test_sorted_by_name(self, clip_dir: Path):
        playlist = discover_inputs(clip_dir)
        assert [p.name for p in playlist] == ["a.mp4", "b.mp4", "c.mp4"]

    def test_paths_are_absolute(self, clip_dir: Path, monkeypatch):
        monkeypatch.chdir(clip_dir.parent)
        playlist = discover_inputs(Path(clip_dir.name))
        assert all(p.is_absolute() for p in playlist)
        assert playlist[0] == (clip_dir / "a.mp4").resolve()

    def test_returns_tuple(self, clip_dir: Path):
        assert isinstance(discover_inputs(clip_dir), tuple)

    def test_extension_is_case_sensitive(self, clip_dir: Path):
        (clip_dir / "D.MP4").write_bytes(b"x")
        (clip_dir / "notes.txt").write_text("x")
        names = [p.name for p in discover_inputs(clip_dir)]
        assert "D.MP4" not in names
        assert "notes.txt" not in names

    def test_not_recursive(self, clip_dir: Path):
        sub = clip_dir / "nested"
        sub.mkdir()
        (sub / "0.mp4").write_bytes(b"x")
        (clip_dir / "folder.mp4").mkdir()
        names = [p.name for p in discover_inputs(clip_dir)]
        assert names == ["a.mp4", "b.mp4", "c.mp4"]

    def test_symlinks_skipped(self, clip_dir: Path):
        (clip_dir / "link.mp4").symlink_to(clip_dir / "a.mp4")
        names = [p.name for p in discover_inputs(clip_dir)]
        assert names == ["a.mp4", "b.mp4", "c.mp4"]

    def test_custom_extension(self, clip_dir: Path):
        (clip_dir / "x.mov").write_bytes(b"x")
        assert [p.name for p in discover_inputs(clip_dir, ".mov")] == ["x.mov"]

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(InputDirectoryError, match="does not exist"):
            discover_inputs(tmp_path / "missing")

    def test_file_instead_of_directory(self, clip_dir: Path):
        with pytest.raises(InputDirectoryError):
            discover_inputs(clip_dir / "a.mp4")

    def test_no_files(self, tmp_path: Path):
        with pytest.raises(NoInputFilesError, match="No .mp4 files found"):
            discover_inputs(tmp_path)

    def test_logs_each_file(self, clip_dir: Path, logger, caplog):
        with caplog.at_level("INFO", logger="vidmerge"):
            discover_inputs(clip_dir, logger=logger)
        assert "Added: a.mp4" in caplog.text
        assert "Found 3 MP4 files" in caplog.text
