"""Service configuration loaded from service.yaml."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from photomesh.steps.s01_workspace.config import WorkspaceConfig
from photomesh.steps.s02_job_graph.config import JobGraphConfig
from photomesh.steps.s03_reconstruct.config import ReconstructConfig
from photomesh.steps.s04_locate_outputs.config import LocateOutputsConfig
from photomesh.steps.s05_convert.config import ConvertConfig

CONFIG_ENV_VAR = "PHOTOMESH_CONFIG"


class ServiceConfig(BaseModel):
    """Top-level configuration; one nested section per pipeline step."""

    service_name: str = "photomesh"
    tmp_root: Path = Field(Path("temp"), description="Session workspaces live under <tmp_root>/<sessionId>")
    cleanup_sessions: bool = Field(False, description="Delete each workspace once its response is assembled")
    log_level: str = "INFO"

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    job_graph: JobGraphConfig = Field(default_factory=JobGraphConfig)
    reconstruct: ReconstructConfig = Field(default_factory=ReconstructConfig)
    locate_outputs: LocateOutputsConfig = Field(default_factory=LocateOutputsConfig)
    convert: ConvertConfig = Field(default_factory=ConvertConfig)


def load_service_config(config_path: Optional[Path] = None) -> ServiceConfig:
    """Load and validate service.yaml; defaults when no path is given.

    Falls back to $PHOTOMESH_CONFIG when ``config_path`` is None.
    """
    if config_path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        if not env_path:
            return ServiceConfig()
        config_path = Path(env_path)
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return ServiceConfig(**raw)
