"""Step 05: convert the OBJ mesh to GLB for web viewers.

Every failure surfaces as ConversionError; the session runner treats it
as a soft failure and responds without the GLB.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import ClassVar

from photomesh.core.errors import ConversionError
from photomesh.core.step_base import BaseStep
from photomesh.utils.subprocess_utils import run_command
from .config import ConvertConfig
from .contracts import ConvertInput, ConvertOutput

logger = logging.getLogger(__name__)


class ConvertStep(BaseStep[ConvertInput, ConvertOutput, ConvertConfig]):
    name: ClassVar[str] = "convert"
    input_type: ClassVar = ConvertInput
    output_type: ClassVar = ConvertOutput
    config_type: ClassVar = ConvertConfig
    input_error: ClassVar = ConversionError

    def validate_inputs(self, inputs: ConvertInput) -> bool:
        if not inputs.mesh_path.is_file():
            logger.error(f"Mesh not found: {inputs.mesh_path}")
            return False
        return True

    def run(self, inputs: ConvertInput) -> ConvertOutput:
        if not self.config.enabled:
            raise ConversionError(details="GLB conversion disabled")

        converter_bin = shutil.which(self.config.executable)
        if converter_bin is None:
            raise ConversionError(details=f"'{self.config.executable}' not found on PATH")

        glb_path = inputs.output_dir / self.config.output_filename
        try:
            run_command(
                [converter_bin, "-i", str(inputs.mesh_path), "-o", str(glb_path)],
                timeout=self.config.timeout_seconds,
            )
        except (subprocess.SubprocessError, OSError) as e:
            raise ConversionError(details=str(e)) from e

        if not glb_path.is_file():
            raise ConversionError(details=f"{self.config.executable} produced no {glb_path.name}")
        logger.info(f"Converted {inputs.mesh_path.name} -> {glb_path.name}")
        return ConvertOutput(glb_path=glb_path)
