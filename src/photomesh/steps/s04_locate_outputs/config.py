"""Configuration for Step 04: locate reconstruction outputs."""

from pydantic import BaseModel, Field


class LocateOutputsConfig(BaseModel):
    mesh_relpath: str = Field("Texturing/texturedMesh.obj", description="Mandatory mesh, relative to the output dir")
    texture_relpath: str = Field("Texturing/texture_1001.jpg", description="Optional texture, relative to the output dir")
