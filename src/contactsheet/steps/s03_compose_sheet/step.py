"""Step 03: Compose sampled stills into one annotated PNG contact sheet."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar

from contactsheet.core.errors import ComposeError
from contactsheet.core.step_base import BaseStep
from ._composer import SheetComposer, load_frames
from ._render import RenderResources
from .config import ComposeConfig
from .contracts import ComposeInput, ComposeOutput

logger = logging.getLogger(__name__)


class ComposeSheetStep(BaseStep[ComposeInput, ComposeOutput, ComposeConfig]):
    name: ClassVar[str] = "compose"
    input_type: ClassVar = ComposeInput
    output_type: ClassVar = ComposeOutput
    config_type: ClassVar = ComposeConfig
    error_type: ClassVar = ComposeError

    def __init__(self, config: ComposeConfig, work_dir: Path, resources: RenderResources | None = None):
        super().__init__(config=config, work_dir=work_dir)
        self.composer = SheetComposer(config, resources or RenderResources.load(config))

    def validate_inputs(self, inputs: ComposeInput) -> bool:
        if not inputs.descriptor.is_populated:
            logger.error(f"{inputs.descriptor.filename} has not been probed")
            return False
        return True

    def run(self, inputs: ComposeInput) -> ComposeOutput:
        frames = load_frames(inputs.descriptor, inputs.stills, inputs.frame_count)
        sheet = self.composer.compose(inputs.descriptor, frames)
        sheet.save(inputs.output_path)
        logger.info(f"Wrote {inputs.output_path}")
        return ComposeOutput(
            output_path=inputs.output_path,
            width=sheet.geometry.width,
            height=sheet.geometry.height,
            rows=sheet.geometry.rows,
            frame_count=sheet.geometry.frame_count,
        )
