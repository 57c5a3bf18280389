"""Shared pytest fixtures for photomesh tests.

External tools are replaced by small Python scripts written into tmp_path
and configured by absolute path.
"""

import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from photomesh.core.config import ServiceConfig
from photomesh.steps.s03_reconstruct.config import ReconstructConfig
from photomesh.steps.s05_convert.config import ConvertConfig

MESHROOM_OK = """
import pathlib, sys
out = pathlib.Path(sys.argv[sys.argv.index("--output") + 1])
tex = out / "Texturing"
tex.mkdir(parents=True, exist_ok=True)
(tex / "texturedMesh.obj").write_text("v 0 0 0\\nv 1 0 0\\nv 0 1 0\\nf 1 2 3\\n")
(tex / "texture_1001.jpg").write_bytes(b"\\xff\\xd8texture")
print("Meshroom compute finished")
"""

MESHROOM_NO_MESH = """
import sys
print("Meshroom compute finished")
sys.stderr.write("SfM: 0 cameras reconstructed\\n")
"""

MESHROOM_CRASH = """
import sys
sys.stderr.write("FeatureExtraction failed: boom\\n")
sys.exit(3)
"""

MESHROOM_HANG = """
import time
time.sleep(30)
"""

MESHROOM_NOISY = """
import sys
sys.stdout.write("x" * 200000)
sys.stdout.flush()
"""

OBJ2GLTF_OK = """
import pathlib, sys
out = pathlib.Path(sys.argv[sys.argv.index("-o") + 1])
out.write_bytes(b"glTF\\x02\\x00\\x00\\x00")
"""

OBJ2GLTF_FAIL = """
import sys
sys.stderr.write("Unsupported material\\n")
sys.exit(1)
"""


@pytest.fixture
def make_tool(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an executable Python script standing in for an external tool."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        path = bin_dir / name
        path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    return tmp_path / "temp"


@pytest.fixture
def jpeg_blobs() -> list[bytes]:
    """Three distinct 1 KB 'JPEGs'."""
    return [b"\xff\xd8\xff\xe0" + bytes([i]) * 1020 for i in range(3)]


@pytest.fixture
def service_config(work_root: Path, make_tool) -> ServiceConfig:
    """Config wired to a succeeding Meshroom and a succeeding converter."""
    return ServiceConfig(
        tmp_root=work_root,
        reconstruct=ReconstructConfig(executable=str(make_tool("meshroom_compute", MESHROOM_OK))),
        convert=ConvertConfig(executable=str(make_tool("obj2gltf", OBJ2GLTF_OK))),
    )
