"""Configuration for Step 05: OBJ -> GLB conversion."""

from typing import Optional

from pydantic import BaseModel, Field


class ConvertConfig(BaseModel):
    enabled: bool = Field(True, description="Attempt the conversion at all")
    executable: str = Field("obj2gltf", description="Converter executable (name on PATH or absolute path)")
    output_filename: str = Field("model.glb", description="Converted file, written into the output dir")
    timeout_seconds: Optional[float] = Field(None, description="No limit by default")
