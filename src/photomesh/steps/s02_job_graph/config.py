"""Configuration for Step 02: job graph."""

from pydantic import BaseModel, Field


class JobGraphConfig(BaseModel):
    config_filename: str = Field("pipeline.mg", description="Graph file written into the session workspace")
    intrinsic: str = Field("unknown", description="Intrinsic marker for every viewpoint; calibration is left to Meshroom")
