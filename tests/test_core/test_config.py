"""Tests for service configuration loading and the error taxonomy."""

from pathlib import Path

import yaml

from photomesh.core.config import CONFIG_ENV_VAR, ServiceConfig, load_service_config
from photomesh.core.errors import (
    CaptureOverflowError,
    PipelineExecutionError,
    PipelineTimeoutError,
)


class TestServiceConfig:
    def test_defaults(self):
        cfg = ServiceConfig()
        assert cfg.tmp_root == Path("temp")
        assert cfg.cleanup_sessions is False
        assert cfg.workspace.min_photos == 3
        assert cfg.reconstruct.executable == "meshroom_compute"
        assert cfg.reconstruct.timeout_seconds == 300
        assert cfg.reconstruct.max_capture_bytes == 10 * 1024 * 1024
        assert cfg.convert.timeout_seconds is None
        assert cfg.locate_outputs.mesh_relpath == "Texturing/texturedMesh.obj"

    def test_load_partial_yaml(self, tmp_path: Path):
        config_file = tmp_path / "service.yaml"
        with open(config_file, "w") as f:
            yaml.dump({"tmp_root": str(tmp_path / "ws"), "reconstruct": {"timeout_seconds": 60}}, f)

        cfg = load_service_config(config_file)
        assert cfg.tmp_root == tmp_path / "ws"
        assert cfg.reconstruct.timeout_seconds == 60
        assert cfg.reconstruct.executable == "meshroom_compute"

    def test_env_var(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / "service.yaml"
        config_file.write_text("cleanup_sessions: true\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
        assert load_service_config().cleanup_sessions is True

    def test_no_env_var(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_service_config() == ServiceConfig()

    def test_repo_config_matches_defaults(self):
        repo_config = Path(__file__).resolve().parents[2] / "configs" / "service.yaml"
        assert load_service_config(repo_config) == ServiceConfig()


class TestErrors:
    def test_runner_failures_share_a_class(self):
        assert issubclass(PipelineTimeoutError, PipelineExecutionError)
        assert issubclass(CaptureOverflowError, PipelineExecutionError)

    def test_details_in_str(self):
        err = PipelineExecutionError(details="exit 3")
        assert str(err) == "Photogrammetry processing failed: exit 3"
        assert err.message == "Photogrammetry processing failed"
