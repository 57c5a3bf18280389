"""Tests for S04: locate reconstruction outputs."""

from pathlib import Path

import pytest

from photomesh.core.errors import NoOutputError
from photomesh.steps.s04_locate_outputs.config import LocateOutputsConfig
from photomesh.steps.s04_locate_outputs.contracts import LocateOutputsInput
from photomesh.steps.s04_locate_outputs.step import LocateOutputsStep


@pytest.fixture
def step(tmp_path: Path) -> LocateOutputsStep:
    return LocateOutputsStep(config=LocateOutputsConfig(), work_root=tmp_path)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "output"
    (out / "Texturing").mkdir(parents=True)
    return out


class TestLocateOutputsStep:
    def test_mesh_and_texture(self, step, output_dir):
        (output_dir / "Texturing" / "texturedMesh.obj").write_text("v 0 0 0\n")
        (output_dir / "Texturing" / "texture_1001.jpg").write_bytes(b"\xff\xd8")

        located = step.execute(LocateOutputsInput(output_dir=output_dir))
        assert located.mesh_path.name == "texturedMesh.obj"
        assert located.texture_path.name == "texture_1001.jpg"

    def test_texture_optional(self, step, output_dir):
        (output_dir / "Texturing" / "texturedMesh.obj").write_text("v 0 0 0\n")
        located = step.execute(LocateOutputsInput(output_dir=output_dir))
        assert located.texture_path is None

    def test_missing_mesh(self, step, output_dir):
        (output_dir / "Texturing" / "texture_1001.jpg").write_bytes(b"\xff\xd8")
        with pytest.raises(NoOutputError) as exc_info:
            step.execute(LocateOutputsInput(output_dir=output_dir))
        assert exc_info.value.message == "No mesh generated - check photo quality and overlap"

    def test_missing_output_dir(self, step, tmp_path):
        with pytest.raises(NoOutputError):
            step.execute(LocateOutputsInput(output_dir=tmp_path / "nope"))
