"""Configuration for Step 03: Meshroom reconstruction."""

from pydantic import BaseModel, Field


class ReconstructConfig(BaseModel):
    executable: str = Field("meshroom_compute", description="Meshroom batch executable (name on PATH or absolute path)")
    timeout_seconds: float = Field(300.0, gt=0, description="Wall-clock limit; the process is killed past it")
    max_capture_bytes: int = Field(10 * 1024 * 1024, gt=0, description="Bound on combined stdout+stderr capture")
    extra_args: list[str] = Field(default_factory=list, description="Appended after --output <dir>")
