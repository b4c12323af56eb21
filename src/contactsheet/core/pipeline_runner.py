"""Per-video pipeline (probe -> sample -> compose) and batch orchestration."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Iterable

import yaml

from contactsheet.steps.s01_probe_metadata.contracts import ProbeInput
from contactsheet.steps.s01_probe_metadata.step import ProbeMetadataStep
from contactsheet.steps.s02_sample_frames.contracts import SampleInput
from contactsheet.steps.s02_sample_frames.step import SampleFramesStep
from contactsheet.steps.s03_compose_sheet._render import RenderResources
from contactsheet.steps.s03_compose_sheet.contracts import ComposeInput, ComposeOutput
from contactsheet.steps.s03_compose_sheet.step import ComposeSheetStep
from contactsheet.utils.io import build_descriptor, discover, write_sidecar
from contactsheet.utils.subprocess_utils import resolve_binary
from .contracts import ContactSheetConfig, VideoDescriptor
from .dispatcher import DispatchSummary, Dispatcher

logger = logging.getLogger(__name__)

# CLI-level names for settings that live in a step config.
_NESTED_KEYS = {
    "frame_width": ("sample", "frame_width"),
    "frames_per_row": ("compose", "frames_per_row"),
}


def load_config(config_path: Path) -> ContactSheetConfig:
    """Load and validate a contactsheet YAML config."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return ContactSheetConfig(**raw)


def apply_overrides(config: ContactSheetConfig, **overrides: Any) -> ContactSheetConfig:
    """Return a validated copy with every non-None override applied."""
    data = config.model_dump()
    for key, value in overrides.items():
        if value is None:
            continue
        if key in _NESTED_KEYS:
            section, field_name = _NESTED_KEYS[key]
            data[section][field_name] = value
        else:
            data[key] = value
    return ContactSheetConfig(**data)


def resolve_binaries(config: ContactSheetConfig) -> ContactSheetConfig:
    """Pin ffprobe/ffmpeg to concrete paths once, before any worker starts."""
    probe = config.probe.model_copy(update={"binary": resolve_binary(config.probe.binary, config.bin_dir)})
    sample = config.sample.model_copy(update={"binary": resolve_binary(config.sample.binary, config.bin_dir)})
    logger.info(f"Using ffprobe={probe.binary} ffmpeg={sample.binary}")
    return config.model_copy(update={"probe": probe, "sample": sample})


def prepare_directories(config: ContactSheetConfig) -> None:
    """Create output and temp directories. Failure here is fatal for the run."""
    if not config.in_place:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    config.frames_dir.mkdir(parents=True, exist_ok=True)


class VideoPipeline:
    """Runs probe -> sample -> compose for one video at a time.

    Holds immutable config and read-only render resources, so a single
    instance is shared by all dispatcher workers. Sampling and composition
    for one checksum run under a per-checksum lock: byte-identical files
    queued together take turns with the same ``{sha1}-{i}.png`` stills.
    """

    def __init__(self, config: ContactSheetConfig, resources: RenderResources | None = None):
        self.config = config
        self._namespace_locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        work_dir = config.frames_dir
        self.probe_step = ProbeMetadataStep(config=config.probe, work_dir=work_dir)
        self.sample_step = SampleFramesStep(config=config.sample, work_dir=work_dir)
        self.compose_step = ComposeSheetStep(
            config=config.compose,
            work_dir=work_dir,
            resources=resources or RenderResources.load(config.compose),
        )

    def process(self, descriptor: VideoDescriptor) -> ComposeOutput | None:
        """Build the sheet for ``descriptor``; ``None`` means skipped."""
        cfg = self.config
        if not descriptor.is_populated:
            descriptor = self.probe_step.execute(ProbeInput(descriptor=descriptor)).descriptor

        if cfg.skip_pipe_formats and "pipe" in descriptor.format_name:
            logger.info(f"Skipping {descriptor.filename}: pipe format '{descriptor.format_name}'")
            return None

        if cfg.write_info:
            write_sidecar(descriptor, cfg.output_path(descriptor, ".json"))

        # Identical files share a checksum and therefore a temp namespace.
        with self._namespace_lock(descriptor.checksum_hex):
            try:
                sampled = self.sample_step.execute(
                    SampleInput(descriptor=descriptor, frame_count=cfg.frame_count)
                )
                return self.compose_step.execute(
                    ComposeInput(
                        descriptor=descriptor,
                        frame_count=cfg.frame_count,
                        stills=sampled.stills,
                        output_path=cfg.output_path(descriptor),
                    )
                )
            finally:
                removed = self.sample_step.cleanup(descriptor, cfg.frame_count)
                if removed:
                    logger.debug(f"Removed {removed} leftover frames for {descriptor.filename}")

    __call__ = process

    def _namespace_lock(self, checksum_hex: str) -> threading.Lock:
        with self._locks_guard:
            return self._namespace_locks.setdefault(checksum_hex, threading.Lock())


def run_batch(
    paths: Iterable[Path],
    config: ContactSheetConfig,
    resources: RenderResources | None = None,
) -> DispatchSummary:
    """Discover videos under ``paths`` and build every sheet with the worker pool."""
    pipeline = VideoPipeline(config, resources)
    with Dispatcher(config, pipeline) as dispatcher:
        for path in discover(paths, config.walk_directories):
            try:
                descriptor = build_descriptor(path)
            except OSError as exc:
                logger.error(f"Cannot read {path}: {exc}")
                continue
            dispatcher.submit(descriptor)
    return dispatcher.summary
