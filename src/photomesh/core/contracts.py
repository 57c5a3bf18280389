"""Common Pydantic models shared across pipeline steps."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class StepMeta(BaseModel):
    """Metadata attached to a step run for reproducibility."""

    step_name: str
    elapsed_seconds: float = 0.0
    params: dict[str, Any] = Field(default_factory=dict)


class Session(BaseModel):
    """An isolated on-disk workspace for one request."""

    session_id: str
    work_dir: Path
    photos_dir: Path
    output_dir: Path


class PipelineRunResult(BaseModel):
    """Outcome of one external process run. Never persisted."""

    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    success: bool = False
    elapsed_seconds: float = 0.0


class OutputArtifacts(BaseModel):
    """Raw bytes of the produced artifacts; only the mesh is mandatory."""

    mesh: bytes
    texture: Optional[bytes] = None
    glb: Optional[bytes] = None


class SessionOutcome(BaseModel):
    """Everything a finished session hands to the responder."""

    session: Session
    artifacts: OutputArtifacts
    photo_count: int
    run: PipelineRunResult
    conversion_error: Optional[str] = None


class ResponseFiles(BaseModel):
    mesh: str
    texture: Optional[str] = None
    glb: Optional[str] = None


class ResponseStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    photos_processed: int = Field(..., alias="photosProcessed")
    mesh_vertices: str = Field("unknown", alias="meshVertices")
    processing_time: str = Field("calculated", alias="processingTime")


class SuccessPayload(BaseModel):
    """Body of a successful photogrammetry response."""

    model_config = ConfigDict(populate_by_name=True)

    success: Literal[True] = True
    session_id: str = Field(..., alias="sessionId")
    files: ResponseFiles
    stats: ResponseStats


class ErrorPayload(BaseModel):
    error: str
    details: Optional[str] = None
