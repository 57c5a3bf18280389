"""Step 04: check that the reconstruction actually delivered a mesh.

A zero exit status from Meshroom does not imply a mesh; with poor
overlap it can finish cleanly and write nothing.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from photomesh.core.errors import NoOutputError
from photomesh.core.step_base import BaseStep
from .config import LocateOutputsConfig
from .contracts import LocateOutputsInput, LocateOutputsOutput

logger = logging.getLogger(__name__)


class LocateOutputsStep(BaseStep[LocateOutputsInput, LocateOutputsOutput, LocateOutputsConfig]):
    name: ClassVar[str] = "locate_outputs"
    input_type: ClassVar = LocateOutputsInput
    output_type: ClassVar = LocateOutputsOutput
    config_type: ClassVar = LocateOutputsConfig
    input_error: ClassVar = NoOutputError

    def validate_inputs(self, inputs: LocateOutputsInput) -> bool:
        if not inputs.output_dir.is_dir():
            logger.error(f"Output directory not found: {inputs.output_dir}")
            return False
        return True

    def run(self, inputs: LocateOutputsInput) -> LocateOutputsOutput:
        mesh_path = inputs.output_dir / self.config.mesh_relpath
        if not mesh_path.is_file():
            logger.error(f"No mesh at {mesh_path}")
            raise NoOutputError()

        texture_path = inputs.output_dir / self.config.texture_relpath
        if not texture_path.is_file():
            logger.info(f"No texture at {texture_path}")
            texture_path = None

        return LocateOutputsOutput(mesh_path=mesh_path, texture_path=texture_path)
