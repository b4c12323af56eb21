"""I/O utilities: input discovery, content checksums, JSON sidecars."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Iterable, Iterator

from contactsheet.core.contracts import VideoDescriptor

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 20
IGNORED_SUFFIXES = {".json", ".png"}


# ── Discovery ────────────────────────────────────────────────────────

def discover(paths: Iterable[Path], walk_directories: bool = True) -> Iterator[Path]:
    """Yield candidate video files from files and (optionally) directory trees.

    Sidecars and sheets written by earlier runs are skipped. Paths that do
    not exist are logged and ignored.
    """
    for path in paths:
        path = Path(path)
        if path.is_file():
            if path.suffix.lower() not in IGNORED_SUFFIXES:
                yield path
        elif path.is_dir():
            if not walk_directories:
                logger.info(f"Skipping directory {path} (walking disabled)")
                continue
            logger.info(f"Walking {path}")
            for child in sorted(path.rglob("*")):
                if child.is_file() and child.suffix.lower() not in IGNORED_SUFFIXES:
                    yield child
        else:
            logger.warning(f"Input not found: {path}")


# ── Checksums ────────────────────────────────────────────────────────

def sha1_file(path: Path, chunk_size: int = CHUNK_SIZE) -> bytes:
    digest = hashlib.sha1()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.digest()


def build_descriptor(path: Path) -> VideoDescriptor:
    """Hash ``path`` into a fresh, not yet probed descriptor."""
    path = Path(path)
    return VideoDescriptor(filename=path.name, location=path, checksum=sha1_file(path))


# ── Sidecars ─────────────────────────────────────────────────────────

def write_sidecar(descriptor: VideoDescriptor, path: Path) -> Path:
    """Write the descriptor as indented JSON (checksum as base64 and hex)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(descriptor.model_dump_json(indent=2), encoding="utf-8")
    return path
