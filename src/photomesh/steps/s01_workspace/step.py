"""Step 01: allocate an isolated workspace and write the photos into it."""

from __future__ import annotations

import logging
from typing import ClassVar

from photomesh.core.errors import FilesystemError
from photomesh.core.step_base import BaseStep
from photomesh.core.workspace import cleanup_session, create_session, persist_photos
from .config import WorkspaceConfig
from .contracts import WorkspaceInput, WorkspaceOutput

logger = logging.getLogger(__name__)


class WorkspaceStep(BaseStep[WorkspaceInput, WorkspaceOutput, WorkspaceConfig]):
    name: ClassVar[str] = "workspace"
    input_type: ClassVar = WorkspaceInput
    output_type: ClassVar = WorkspaceOutput
    config_type: ClassVar = WorkspaceConfig

    def validate_inputs(self, inputs: WorkspaceInput) -> bool:
        # Checked before anything touches the disk.
        if len(inputs.photos) < self.config.min_photos:
            logger.error(f"Need at least {self.config.min_photos} photos, got {len(inputs.photos)}")
            return False
        return True

    def input_error_message(self, inputs: WorkspaceInput) -> str:
        return f"At least {self.config.min_photos} photos required for photogrammetry"

    def run(self, inputs: WorkspaceInput) -> WorkspaceOutput:
        session = create_session(self.work_root)
        try:
            photo_paths = persist_photos(
                session,
                inputs.photos,
                prefix=self.config.photo_prefix,
                extension=self.config.photo_extension,
                padding=self.config.index_padding,
            )
        except FilesystemError:
            # A partially written photo set is never handed to the pipeline.
            logger.error(f"[{session.session_id}] Photo persistence failed; removing workspace")
            cleanup_session(session, enabled=True)
            raise
        return WorkspaceOutput(session=session, photo_paths=photo_paths)
