"""photomesh core: base step, shared contracts, errors."""

from .step_base import BaseStep
from .contracts import (
    ErrorPayload,
    OutputArtifacts,
    PipelineRunResult,
    Session,
    StepMeta,
    SuccessPayload,
)
from .errors import PhotomeshError
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "ErrorPayload",
    "OutputArtifacts",
    "PipelineRunResult",
    "Session",
    "StepMeta",
    "SuccessPayload",
    "PhotomeshError",
    "setup_logging",
]
