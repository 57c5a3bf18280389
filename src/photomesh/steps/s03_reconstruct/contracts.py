"""I/O contracts for Step 03: Meshroom reconstruction."""

from pathlib import Path

from pydantic import BaseModel, Field

from photomesh.core.contracts import PipelineRunResult


class ReconstructInput(BaseModel):
    config_path: Path = Field(..., description="Serialized job graph")
    output_dir: Path = Field(..., description="Directory Meshroom writes stage outputs into")


class ReconstructOutput(BaseModel):
    output_dir: Path = Field(..., description="Directory holding per-stage outputs")
    run: PipelineRunResult = Field(..., description="Captured diagnostics of the run")
