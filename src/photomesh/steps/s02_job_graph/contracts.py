"""I/O contracts for Step 02: job graph."""

from pathlib import Path

from pydantic import BaseModel, Field


class JobGraphInput(BaseModel):
    work_dir: Path = Field(..., description="Session workspace root")
    photo_paths: list[Path] = Field(..., description="Persisted photos in upload order")


class JobGraphOutput(BaseModel):
    config_path: Path = Field(..., description="Serialized graph consumed by meshroom_compute")
    stages: list[str] = Field(..., description="Stage names in graph order")
    num_viewpoints: int = Field(..., description="CameraInit viewpoint count")
