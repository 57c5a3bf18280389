"""Step 02: build and serialize the Meshroom job graph."""

from __future__ import annotations

import logging
from typing import ClassVar

from photomesh.core.errors import FilesystemError
from photomesh.core.step_base import BaseStep
from ._graph import build_meshroom_graph, write_graph
from .config import JobGraphConfig
from .contracts import JobGraphInput, JobGraphOutput

logger = logging.getLogger(__name__)


class JobGraphStep(BaseStep[JobGraphInput, JobGraphOutput, JobGraphConfig]):
    name: ClassVar[str] = "job_graph"
    input_type: ClassVar = JobGraphInput
    output_type: ClassVar = JobGraphOutput
    config_type: ClassVar = JobGraphConfig
    input_error: ClassVar = FilesystemError

    def validate_inputs(self, inputs: JobGraphInput) -> bool:
        if not inputs.work_dir.is_dir():
            logger.error(f"Workspace not found: {inputs.work_dir}")
            return False
        if not inputs.photo_paths:
            logger.error("No photos to build a graph from")
            return False
        return True

    def run(self, inputs: JobGraphInput) -> JobGraphOutput:
        graph = build_meshroom_graph(inputs.photo_paths, intrinsic=self.config.intrinsic)
        config_path = write_graph(graph, inputs.work_dir / self.config.config_filename)
        return JobGraphOutput(
            config_path=config_path,
            stages=graph.stage_names,
            num_viewpoints=len(inputs.photo_paths),
        )
