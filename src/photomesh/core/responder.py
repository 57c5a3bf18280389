"""Read artifacts from disk and assemble response payloads."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Optional

from .contracts import (
    ErrorPayload,
    OutputArtifacts,
    ResponseFiles,
    ResponseStats,
    SuccessPayload,
)
from .errors import FilesystemError, PhotomeshError

logger = logging.getLogger(__name__)


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FilesystemError(details=f"Cannot read {path}: {e}") from e


def _read_optional(path: Optional[Path]) -> Optional[bytes]:
    if path is None or not path.is_file():
        return None
    return _read(path)


def collect_artifacts(
    mesh_path: Path,
    texture_path: Optional[Path] = None,
    glb_path: Optional[Path] = None,
) -> OutputArtifacts:
    """Mesh is mandatory; texture and GLB are read only when present."""
    return OutputArtifacts(
        mesh=_read(mesh_path),
        texture=_read_optional(texture_path),
        glb=_read_optional(glb_path),
    )


def encode_artifact(data: Optional[bytes]) -> Optional[str]:
    if data is None:
        return None
    return base64.b64encode(data).decode("ascii")


def build_success_payload(session_id: str, artifacts: OutputArtifacts, photo_count: int) -> SuccessPayload:
    # meshVertices/processingTime stay literal placeholders; see DESIGN.md.
    return SuccessPayload(
        session_id=session_id,
        files=ResponseFiles(
            mesh=encode_artifact(artifacts.mesh),
            texture=encode_artifact(artifacts.texture),
            glb=encode_artifact(artifacts.glb),
        ),
        stats=ResponseStats(photos_processed=photo_count),
    )


def build_error_payload(error: Exception) -> tuple[int, ErrorPayload]:
    """Map any exception to ``(status_code, payload)``."""
    if isinstance(error, PhotomeshError):
        return error.status_code, ErrorPayload(error=error.message, details=error.details)
    return 500, ErrorPayload(error="Internal server error", details=str(error))
