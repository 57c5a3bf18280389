"""Configuration for Step 01: session workspace."""

from pydantic import BaseModel, Field


class WorkspaceConfig(BaseModel):
    min_photos: int = Field(3, ge=1, description="Minimum photos for a well-posed reconstruction")
    photo_prefix: str = Field("photo", description="Filename prefix for persisted photos")
    photo_extension: str = Field("jpg", description="Extension given to every persisted photo")
    index_padding: int = Field(3, ge=1, description="Zero-padding width of the photo index")
