"""Tests for utility modules: discovery, checksums, sidecars, subprocess helpers."""

import hashlib
import json
import subprocess
import sys
from pathlib import Path

import pytest

from contactsheet.utils.io import build_descriptor, discover, sha1_file, write_sidecar
from contactsheet.utils.subprocess_utils import resolve_binary, run_command


class TestChecksums:
    def test_sha1_matches_hashlib(self, tmp_path: Path):
        path = tmp_path / "v.mp4"
        data = b"x" * 3_000_000
        path.write_bytes(data)
        assert sha1_file(path, chunk_size=4096) == hashlib.sha1(data).digest()

    def test_same_content_same_namespace(self, tmp_path: Path):
        a = tmp_path / "a.mp4"
        b = tmp_path / "sub" / "b.mkv"
        b.parent.mkdir()
        a.write_bytes(b"same bytes")
        b.write_bytes(b"same bytes")
        assert build_descriptor(a).checksum_hex == build_descriptor(b).checksum_hex
        assert build_descriptor(a).checksum_hex == build_descriptor(a).checksum_hex

    def test_build_descriptor(self, tmp_path: Path):
        path = tmp_path / "movie.mov"
        path.write_bytes(b"abc")
        d = build_descriptor(path)
        assert d.filename == "movie.mov"
        assert d.location == path
        assert d.checksum_hex == hashlib.sha1(b"abc").hexdigest()
        assert not d.is_populated


class TestDiscover:
    @pytest.fixture
    def tree(self, tmp_path: Path) -> Path:
        root = tmp_path / "media"
        (root / "a" / "b").mkdir(parents=True)
        (root / "top.mp4").write_bytes(b"1")
        (root / "top.mp4.json").write_text("{}")
        (root / "top.mp4.png").write_bytes(b"png")
        (root / "a" / "mid.mkv").write_bytes(b"2")
        (root / "a" / "b" / "deep.avi").write_bytes(b"3")
        return root

    def test_walks_tree(self, tree: Path):
        names = sorted(p.name for p in discover([tree]))
        assert names == ["deep.avi", "mid.mkv", "top.mp4"]

    def test_walk_disabled(self, tree: Path):
        assert list(discover([tree], walk_directories=False)) == []
        assert list(discover([tree / "top.mp4"], walk_directories=False)) == [tree / "top.mp4"]

    def test_missing_inputs_ignored(self, tree: Path):
        assert list(discover([tree / "nope.mp4"])) == []


class TestSidecar:
    def test_write_sidecar(self, descriptor, tmp_path: Path):
        path = write_sidecar(descriptor, tmp_path / "out" / "clip.mp4.json")
        data = json.loads(path.read_text())
        assert data["filename"] == descriptor.filename
        assert data["checksum"]["hex"] == descriptor.checksum_hex
        assert data["duration"] == 120.0
        assert data["codec"] == "h264"


class TestSubprocessUtils:
    def test_run_command_success(self):
        result = run_command([sys.executable, "-c", "print('hi')"])
        assert result.stdout.strip() == "hi"

    def test_run_command_failure(self):
        with pytest.raises(subprocess.CalledProcessError) as info:
            run_command([sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"])
        assert info.value.returncode == 3
        assert "bad" in info.value.stderr

    def test_run_command_no_check(self):
        result = run_command([sys.executable, "-c", "import sys; sys.exit(2)"], check=False)
        assert result.returncode == 2

    def test_resolve_explicit_path_untouched(self, tmp_path: Path):
        explicit = str(tmp_path / "tools" / "ffmpeg")
        assert resolve_binary(explicit, tmp_path) == explicit

    def test_resolve_bundled(self, tmp_path: Path):
        exe = "ffmpeg.exe" if sys.platform == "win32" else "ffmpeg"
        (tmp_path / exe).write_text("")
        assert resolve_binary("ffmpeg", tmp_path) == str(tmp_path / exe)

    def test_resolve_falls_back_to_name(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: None)
        assert resolve_binary("ffprobe", tmp_path / "missing") == "ffprobe"
