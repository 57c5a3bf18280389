"""Tests for artifact collection and payload assembly."""

import base64
from pathlib import Path

import pytest

from photomesh.core.contracts import OutputArtifacts
from photomesh.core.errors import NoOutputError, PipelineTimeoutError, ValidationError
from photomesh.core.responder import (
    build_error_payload,
    build_success_payload,
    collect_artifacts,
    encode_artifact,
)


class TestCollectArtifacts:
    def test_mesh_only(self, tmp_path: Path):
        mesh = tmp_path / "mesh.obj"
        mesh.write_bytes(b"v 0 0 0\n")
        artifacts = collect_artifacts(mesh, tmp_path / "missing.jpg", None)
        assert artifacts.mesh == b"v 0 0 0\n"
        assert artifacts.texture is None
        assert artifacts.glb is None

    def test_all_artifacts(self, tmp_path: Path):
        for name, data in [("m.obj", b"mesh"), ("t.jpg", b"tex"), ("m.glb", b"glb")]:
            (tmp_path / name).write_bytes(data)
        artifacts = collect_artifacts(tmp_path / "m.obj", tmp_path / "t.jpg", tmp_path / "m.glb")
        assert (artifacts.mesh, artifacts.texture, artifacts.glb) == (b"mesh", b"tex", b"glb")


class TestSuccessPayload:
    def test_wire_shape(self):
        payload = build_success_payload("abc", OutputArtifacts(mesh=b"mesh", texture=b"tex"), 3)
        body = payload.model_dump(mode="json", by_alias=True)

        assert body["success"] is True
        assert body["sessionId"] == "abc"
        assert base64.b64decode(body["files"]["mesh"]) == b"mesh"
        assert base64.b64decode(body["files"]["texture"]) == b"tex"
        assert body["files"]["glb"] is None
        assert body["stats"] == {
            "photosProcessed": 3,
            "meshVertices": "unknown",
            "processingTime": "calculated",
        }

    def test_encode_none(self):
        assert encode_artifact(None) is None


class TestErrorPayload:
    def test_validation_is_400(self):
        status, payload = build_error_payload(ValidationError())
        assert status == 400
        assert payload.error == "At least 3 photos required for photogrammetry"
        assert payload.details is None

    def test_no_output_message(self):
        status, payload = build_error_payload(NoOutputError())
        assert status == 500
        assert payload.error == "No mesh generated - check photo quality and overlap"

    def test_execution_details_verbatim(self):
        status, payload = build_error_payload(PipelineTimeoutError(details="killed\nstderr tail"))
        assert status == 500
        assert payload.error == "Photogrammetry processing failed"
        assert payload.details == "killed\nstderr tail"

    @pytest.mark.parametrize("exc", [RuntimeError("disk on fire"), KeyError("x")])
    def test_unexpected_is_internal(self, exc):
        status, payload = build_error_payload(exc)
        assert status == 500
        assert payload.error == "Internal server error"
        assert payload.details == str(exc)
