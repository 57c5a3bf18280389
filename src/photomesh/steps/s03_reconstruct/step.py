"""Step 03: run meshroom_compute on the session graph.

Any failure here is fatal for the request. Diagnostics are passed
through verbatim as error details and never parsed.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from typing import ClassVar

from photomesh.core.contracts import PipelineRunResult
from photomesh.core.errors import (
    CaptureOverflowError,
    FilesystemError,
    PipelineExecutionError,
    PipelineTimeoutError,
)
from photomesh.core.step_base import BaseStep
from photomesh.utils.subprocess_utils import OutputLimitExceeded, run_command
from .config import ReconstructConfig
from .contracts import ReconstructInput, ReconstructOutput

logger = logging.getLogger(__name__)


def _diagnostics(stdout: str | None, stderr: str | None) -> str:
    return "\n".join(s for s in (stderr, stdout) if s)


class ReconstructStep(BaseStep[ReconstructInput, ReconstructOutput, ReconstructConfig]):
    name: ClassVar[str] = "reconstruct"
    input_type: ClassVar = ReconstructInput
    output_type: ClassVar = ReconstructOutput
    config_type: ClassVar = ReconstructConfig
    input_error: ClassVar = FilesystemError

    def validate_inputs(self, inputs: ReconstructInput) -> bool:
        if not inputs.config_path.exists():
            logger.error(f"Pipeline config not found: {inputs.config_path}")
            return False
        if not inputs.output_dir.is_dir():
            logger.error(f"Output directory not found: {inputs.output_dir}")
            return False
        return True

    def run(self, inputs: ReconstructInput) -> ReconstructOutput:
        meshroom_bin = shutil.which(self.config.executable)
        if meshroom_bin is None:
            raise PipelineExecutionError(
                details=f"'{self.config.executable}' not found. Install Meshroom and add it to PATH."
            )

        cmd = [
            meshroom_bin, str(inputs.config_path),
            "--output", str(inputs.output_dir),
            *self.config.extra_args,
        ]
        logger.info("Starting Meshroom processing...")
        t0 = time.time()
        try:
            result = run_command(
                cmd,
                cwd=inputs.config_path.parent,
                timeout=self.config.timeout_seconds,
                max_output_bytes=self.config.max_capture_bytes,
            )
        except subprocess.TimeoutExpired as e:
            raise PipelineTimeoutError(
                details=f"Timed out after {self.config.timeout_seconds:g}s\n{_diagnostics(e.output, e.stderr)}"
            ) from e
        except OutputLimitExceeded as e:
            raise CaptureOverflowError(
                details=f"Output exceeded {e.limit} bytes\n{_diagnostics(e.stdout, e.stderr)}"
            ) from e
        except subprocess.CalledProcessError as e:
            logger.error(f"Meshroom exited with {e.returncode}")
            raise PipelineExecutionError(
                details=f"Exit status {e.returncode}\n{_diagnostics(e.stdout, e.stderr)}"
            ) from e
        except OSError as e:
            raise PipelineExecutionError(details=str(e)) from e

        elapsed = time.time() - t0
        if result.stderr:
            logger.info(f"Meshroom stderr: {result.stderr[-500:]}")
        logger.info(f"Meshroom finished in {elapsed:.1f}s")

        return ReconstructOutput(
            output_dir=inputs.output_dir,
            run=PipelineRunResult(
                stdout=result.stdout,
                stderr=result.stderr,
                returncode=result.returncode,
                success=True,
                elapsed_seconds=elapsed,
            ),
        )
