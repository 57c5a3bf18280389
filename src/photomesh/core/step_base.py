"""Base class for all pipeline steps.

Every step declares typed Input, Output, Config via Pydantic models.
This lets the session runner chain steps with validated hand-offs
and lets the CLI introspect each step's JSON Schema.
"""

from __future__ import annotations

import time
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, TypeVar, ClassVar, Optional

from pydantic import BaseModel

from .contracts import StepMeta
from .errors import PhotomeshError, ValidationError

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """Abstract base for pipeline steps.

    Subclasses must:
    1. Define concrete Pydantic models for InputT, OutputT, ConfigT
    2. Set class variables: input_type, output_type, config_type
    3. Implement run() and validate_inputs()

    ``input_error`` is the exception raised by execute() when
    validate_inputs() rejects the inputs; input_error_message() may
    override its default message.

    Example:
        class LocateOutputsStep(BaseStep[LocateInput, LocateOutput, LocateConfig]):
            input_type = LocateInput
            output_type = LocateOutput
            config_type = LocateConfig

            def run(self, inputs: LocateInput) -> LocateOutput: ...
            def validate_inputs(self, inputs: LocateInput) -> bool: ...
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]
    input_error: ClassVar[type[PhotomeshError]] = ValidationError

    def __init__(self, config: ConfigT, work_root: Path):
        self.config = config
        self.work_root = Path(work_root)
        self.meta: Optional[StepMeta] = None

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        """Execute this pipeline step. Returns output model."""
        ...

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """Check that all required inputs exist and are valid."""
        ...

    def execute(self, inputs: InputT) -> OutputT:
        """Run with logging, timing, and validation."""
        step_name = self.name or self.__class__.__name__
        logger.info(f"[{step_name}] Validating inputs...")

        if not self.validate_inputs(inputs):
            raise self.input_error(self.input_error_message(inputs))

        logger.info(f"[{step_name}] Starting...")
        t0 = time.time()
        result = self.run(inputs)
        elapsed = time.time() - t0
        self.meta = StepMeta(
            step_name=step_name,
            elapsed_seconds=elapsed,
            params=self.config.model_dump(mode="json"),
        )
        logger.info(f"[{step_name}] Done in {elapsed:.1f}s")
        return result

    def input_error_message(self, inputs: InputT) -> Optional[str]:
        return None

    @classmethod
    def get_input_schema(cls) -> dict:
        """Return JSON schema for inputs."""
        return cls.input_type.model_json_schema()

    @classmethod
    def get_output_schema(cls) -> dict:
        """Return JSON schema for outputs."""
        return cls.output_type.model_json_schema()

    @classmethod
    def get_config_schema(cls) -> dict:
        """Return JSON schema for config."""
        return cls.config_type.model_json_schema()
