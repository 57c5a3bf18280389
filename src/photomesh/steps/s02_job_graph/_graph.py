"""Typed job graph for the Meshroom compute engine.

Stages are nodes; a node's inputs may hold ``Ref`` handles obtained from
nodes already in the graph. Handles render to Meshroom's placeholder
syntax ``{Stage.attribute}`` only at serialization time, so a reference
to an undefined stage or attribute fails when the graph is built rather
than inside the external tool.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Sequence

from photomesh.core.errors import FilesystemError, GraphReferenceError

logger = logging.getLogger(__name__)

REF_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\.([A-Za-z_][A-Za-z0-9_]*)\}")

MESHROOM_STAGES = (
    "CameraInit",
    "FeatureExtraction",
    "ImageMatching",
    "FeatureMatching",
    "StructureFromMotion",
    "PrepareDenseScene",
    "DepthMap",
    "DepthMapFilter",
    "Meshing",
    "MeshFiltering",
    "Texturing",
)


@dataclass(frozen=True)
class Ref:
    """Handle to one attribute of a stage already in the graph."""

    stage: str
    attribute: str

    def render(self) -> str:
        return "{%s.%s}" % (self.stage, self.attribute)

    def __str__(self) -> str:
        return self.render()


@dataclass
class GraphNode:
    name: str
    inputs: dict[str, Any]
    outputs: tuple[str, ...] = ("output",)

    def declares(self, attribute: str) -> bool:
        return attribute in self.outputs or attribute in self.inputs

    def output(self, attribute: str = "output") -> Ref:
        """Handle to one of this stage's outputs."""
        if attribute not in self.outputs:
            raise GraphReferenceError(details=f"{self.name} has no output '{attribute}'")
        return Ref(self.name, attribute)

    def attr(self, attribute: str) -> Ref:
        """Handle to any declared attribute, inputs included (pass-through wiring)."""
        if not self.declares(attribute):
            raise GraphReferenceError(details=f"{self.name} has no attribute '{attribute}'")
        return Ref(self.name, attribute)


def _iter_refs(value: Any) -> Iterator[Ref]:
    if isinstance(value, Ref):
        yield value
    elif isinstance(value, dict):
        for v in value.values():
            yield from _iter_refs(v)
    elif isinstance(value, (list, tuple)):
        for v in value:
            yield from _iter_refs(v)


def _render(value: Any) -> Any:
    if isinstance(value, Ref):
        return value.render()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {k: _render(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_render(v) for v in value]
    return value


class PipelineGraph:
    """Ordered set of stages; insertion order is the serialization order."""

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self._nodes.values())

    def __contains__(self, name: str) -> bool:
        return name in self._nodes

    def node(self, name: str) -> GraphNode:
        return self._nodes[name]

    @property
    def stage_names(self) -> list[str]:
        return list(self._nodes)

    def add_node(
        self,
        name: str,
        inputs: dict[str, Any],
        outputs: Sequence[str] = ("output",),
    ) -> GraphNode:
        if name in self._nodes:
            raise GraphReferenceError(details=f"Duplicate stage '{name}'")
        for ref in _iter_refs(inputs):
            target = self._nodes.get(ref.stage)
            if target is None:
                raise GraphReferenceError(details=f"{name} references undefined stage '{ref.stage}'")
            if not target.declares(ref.attribute):
                raise GraphReferenceError(
                    details=f"{name} references unknown attribute '{ref.render()}'"
                )
        node = GraphNode(name=name, inputs=dict(inputs), outputs=tuple(outputs))
        self._nodes[name] = node
        return node

    def to_dict(self) -> dict:
        """Meshroom wire format: ``{"graph": {Stage: {"inputs": {...}}}}``."""
        return {"graph": {n.name: {"inputs": _render(n.inputs)} for n in self._nodes.values()}}


def build_meshroom_graph(photo_paths: Sequence[Path], intrinsic: str = "unknown") -> PipelineGraph:
    """Photos -> textured mesh chain. Viewpoints keep the given photo order."""
    graph = PipelineGraph()

    camera_init = graph.add_node(
        "CameraInit",
        {"viewpoints": [{"path": str(p), "intrinsic": intrinsic} for p in photo_paths]},
    )
    features = graph.add_node("FeatureExtraction", {"input": camera_init.output()})
    image_matching = graph.add_node(
        "ImageMatching",
        {"input": features.attr("input"), "features": features.output()},
    )
    feature_matching = graph.add_node(
        "FeatureMatching",
        {
            "input": image_matching.attr("input"),
            "features": features.output(),
            "matches": image_matching.output(),
        },
    )
    sfm = graph.add_node(
        "StructureFromMotion",
        {
            "input": feature_matching.attr("input"),
            "features": features.output(),
            "matches": feature_matching.output(),
        },
    )
    dense_scene = graph.add_node("PrepareDenseScene", {"input": sfm.output()})
    depth_map = graph.add_node(
        "DepthMap",
        {"input": dense_scene.attr("input"), "imagesFolder": dense_scene.output()},
    )
    depth_filter = graph.add_node(
        "DepthMapFilter",
        {"input": depth_map.attr("input"), "depthMapsFolder": depth_map.output()},
    )
    meshing = graph.add_node(
        "Meshing",
        {
            "input": depth_filter.attr("input"),
            "depthMapsFolder": depth_filter.attr("depthMapsFolder"),
            "depthMapsFilterFolder": depth_filter.output(),
        },
    )
    mesh_filtering = graph.add_node(
        "MeshFiltering", {"inputMesh": meshing.output()}, outputs=("outputMesh",)
    )
    # MeshFiltering has no sfm input of its own; take it from Meshing.
    graph.add_node(
        "Texturing",
        {"input": meshing.attr("input"), "inputMesh": mesh_filtering.output("outputMesh")},
    )
    return graph


def check_references(document) -> list[str]:
    """Topologically validate a serialized graph document.

    Every ``{Stage.attr}`` placeholder must name a stage that appears
    earlier in the document. Returns a list of problems, empty when valid.
    """
    if not isinstance(document, dict):
        return ["document is not a JSON object"]
    stages = document.get("graph")
    if not isinstance(stages, dict):
        return ["document has no 'graph' mapping"]

    problems = []
    seen: set[str] = set()
    for name, body in stages.items():
        if body is not None and not isinstance(body, dict):
            problems.append(f"{name}: stage body is not an object")
            seen.add(name)
            continue
        text = json.dumps((body or {}).get("inputs", {}))
        for stage, attribute in REF_PATTERN.findall(text):
            if stage == name:
                problems.append(f"{name}: self reference {{{stage}.{attribute}}}")
            elif stage not in seen:
                kind = "forward" if stage in stages else "undefined"
                problems.append(f"{name}: {kind} reference {{{stage}.{attribute}}}")
        seen.add(name)
    return problems


def write_graph(graph: PipelineGraph, path: Path) -> Path:
    try:
        path.write_text(json.dumps(graph.to_dict(), indent=2), encoding="utf-8")
    except OSError as e:
        raise FilesystemError(details=f"Cannot write pipeline config {path}: {e}") from e
    logger.info(f"Pipeline graph with {len(graph)} stages written to {path}")
    return path
