"""I/O contracts for Step 04: locate reconstruction outputs."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class LocateOutputsInput(BaseModel):
    output_dir: Path = Field(..., description="Meshroom output directory")


class LocateOutputsOutput(BaseModel):
    mesh_path: Path = Field(..., description="Textured mesh (OBJ)")
    texture_path: Optional[Path] = Field(None, description="Texture atlas, when Meshroom produced one")
