"""I/O contracts for Step 01: session workspace."""

from pathlib import Path

from pydantic import BaseModel, Field

from photomesh.core.contracts import Session


class WorkspaceInput(BaseModel):
    photos: list[bytes] = Field(..., description="Uploaded image blobs in upload order")


class WorkspaceOutput(BaseModel):
    session: Session = Field(..., description="Freshly allocated session workspace")
    photo_paths: list[Path] = Field(..., description="Persisted photo paths in upload order")
