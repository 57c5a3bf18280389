"""I/O contracts for Step 05: OBJ -> GLB conversion."""

from pathlib import Path

from pydantic import BaseModel, Field


class ConvertInput(BaseModel):
    mesh_path: Path = Field(..., description="Source mesh (OBJ)")
    output_dir: Path = Field(..., description="Directory for the converted file")


class ConvertOutput(BaseModel):
    glb_path: Path = Field(..., description="Converted binary glTF model")
