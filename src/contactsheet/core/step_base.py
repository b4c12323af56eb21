"""Base class for all pipeline steps.

Every step declares typed Input, Output, Config via Pydantic models.
This keeps each stage (probe, sample, compose) independently testable.
"""

from __future__ import annotations

import time
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, TypeVar, ClassVar

from pydantic import BaseModel

from .errors import ContactSheetError

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """Abstract base for pipeline steps.

    Subclasses must:
    1. Define concrete Pydantic models for InputT, OutputT, ConfigT
    2. Set class variables: input_type, output_type, config_type, error_type
    3. Implement run() and validate_inputs()

    Steps hold nothing but their frozen config, so one instance is shared
    by every worker thread.
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]
    error_type: ClassVar[type[ContactSheetError]] = ContactSheetError

    def __init__(self, config: ConfigT, work_dir: Path):
        self.config = config
        self.work_dir = Path(work_dir)

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        """Execute this pipeline step. Returns output model."""
        ...

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """Check that all required input artifacts exist and are valid."""
        ...

    def execute(self, inputs: InputT) -> OutputT:
        """Run with logging, timing, and validation."""
        step_name = self.name or self.__class__.__name__
        descriptor = getattr(inputs, "descriptor", None)
        subject = descriptor.filename if descriptor is not None else "-"

        if not self.validate_inputs(inputs):
            raise self.error_type(f"[{step_name}] Input validation failed", subject)

        logger.info(f"[{step_name}] {subject}: starting")
        t0 = time.time()
        result = self.run(inputs)
        elapsed = time.time() - t0
        logger.info(f"[{step_name}] {subject}: done in {elapsed:.1f}s")
        return result
