"""Session orchestrator: runs the steps of one photogrammetry request in order.

Received -> WorkspaceReady -> PhotosPersisted -> GraphBuilt -> PrimaryRunning
-> PrimarySucceeded -> OutputChecked -> OutputFound -> ConversionAttempted.
PrimaryFailed and NoOutput are terminal and surface as exceptions; a failed
conversion only drops the GLB. ResponseAssembled is logged by the caller once
the payload exists.
"""

from __future__ import annotations

import importlib
import logging
import time
from enum import Enum
from typing import Optional, Sequence

from .config import ServiceConfig
from .contracts import SessionOutcome
from .errors import ConversionError, NoOutputError, PipelineExecutionError
from .responder import collect_artifacts
from .workspace import cleanup_session

logger = logging.getLogger(__name__)

STEP_MODULES = (
    ("workspace", "photomesh.steps.s01_workspace"),
    ("job_graph", "photomesh.steps.s02_job_graph"),
    ("reconstruct", "photomesh.steps.s03_reconstruct"),
    ("locate_outputs", "photomesh.steps.s04_locate_outputs"),
    ("convert", "photomesh.steps.s05_convert"),
)


class SessionState(str, Enum):
    RECEIVED = "Received"
    WORKSPACE_READY = "WorkspaceReady"
    PHOTOS_PERSISTED = "PhotosPersisted"
    GRAPH_BUILT = "GraphBuilt"
    PRIMARY_RUNNING = "PrimaryRunning"
    PRIMARY_FAILED = "PrimaryFailed"
    PRIMARY_SUCCEEDED = "PrimarySucceeded"
    OUTPUT_CHECKED = "OutputChecked"
    NO_OUTPUT = "NoOutput"
    OUTPUT_FOUND = "OutputFound"
    CONVERSION_ATTEMPTED = "ConversionAttempted"
    RESPONSE_ASSEMBLED = "ResponseAssembled"


def import_step_class(module_path: str):
    """Import the step class from ``<module_path>.step``.

    Looks for a class ending in 'Step' other than BaseStep.
    """
    step_module = importlib.import_module(f"{module_path}.step")
    for attr_name in dir(step_module):
        attr = getattr(step_module, attr_name)
        if (
            isinstance(attr, type)
            and hasattr(attr, "run")
            and attr_name.endswith("Step")
            and attr_name != "BaseStep"
        ):
            return attr
    raise ImportError(f"No Step class found in {module_path}.step")


def _build_steps(config: ServiceConfig) -> dict:
    steps = {}
    for key, module_path in STEP_MODULES:
        step_cls = import_step_class(module_path)
        steps[key] = step_cls(config=getattr(config, key), work_root=config.tmp_root)
    return steps


def run_session(photos: Sequence[bytes], config: Optional[ServiceConfig] = None) -> SessionOutcome:
    """Run one request end to end and return the artifacts read into memory.

    Raises the PhotomeshError subclass of the terminal state on failure.
    """
    config = config or ServiceConfig()
    steps = _build_steps(config)
    tag = "-"

    def transition(state: SessionState) -> None:
        logger.info(f"[{tag}] {state.value}")

    transition(SessionState.RECEIVED)
    logger.info(f"Starting photogrammetry with {len(photos)} photos")
    t0 = time.time()

    ws = steps["workspace"].execute(steps["workspace"].input_type(photos=list(photos)))
    session = ws.session
    tag = session.session_id
    transition(SessionState.WORKSPACE_READY)
    transition(SessionState.PHOTOS_PERSISTED)

    try:
        graph = steps["job_graph"].execute(
            steps["job_graph"].input_type(work_dir=session.work_dir, photo_paths=ws.photo_paths)
        )
        transition(SessionState.GRAPH_BUILT)

        transition(SessionState.PRIMARY_RUNNING)
        try:
            recon = steps["reconstruct"].execute(
                steps["reconstruct"].input_type(
                    config_path=graph.config_path, output_dir=session.output_dir
                )
            )
        except PipelineExecutionError as e:
            transition(SessionState.PRIMARY_FAILED)
            logger.error(f"[{tag}] Meshroom execution error: {e.message}")
            raise
        transition(SessionState.PRIMARY_SUCCEEDED)

        try:
            located = steps["locate_outputs"].execute(
                steps["locate_outputs"].input_type(output_dir=recon.output_dir)
            )
        except NoOutputError:
            transition(SessionState.OUTPUT_CHECKED)
            transition(SessionState.NO_OUTPUT)
            raise
        transition(SessionState.OUTPUT_CHECKED)
        transition(SessionState.OUTPUT_FOUND)

        glb_path = None
        conversion_error = None
        try:
            converted = steps["convert"].execute(
                steps["convert"].input_type(mesh_path=located.mesh_path, output_dir=session.output_dir)
            )
            glb_path = converted.glb_path
        except ConversionError as e:
            # Continue with OBJ only.
            conversion_error = str(e)
            logger.warning(f"[{tag}] GLB conversion error: {conversion_error}")
        transition(SessionState.CONVERSION_ATTEMPTED)

        artifacts = collect_artifacts(located.mesh_path, located.texture_path, glb_path)
    finally:
        cleanup_session(session, enabled=config.cleanup_sessions)

    logger.info(f"[{tag}] Photogrammetry completed in {time.time() - t0:.1f}s")
    return SessionOutcome(
        session=session,
        artifacts=artifacts,
        photo_count=len(ws.photo_paths),
        run=recon.run,
        conversion_error=conversion_error,
    )
