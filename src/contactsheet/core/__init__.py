"""contactsheet core: base step, shared contracts, worker pool."""

from .step_base import BaseStep
from .contracts import ContactSheetConfig, VideoDescriptor
from .dispatcher import DispatchSummary, Dispatcher
from .errors import ComposeError, ContactSheetError, ProbeError, SampleFailure
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "ContactSheetConfig",
    "VideoDescriptor",
    "DispatchSummary",
    "Dispatcher",
    "ComposeError",
    "ContactSheetError",
    "ProbeError",
    "SampleFailure",
    "setup_logging",
]
