"""CLI entry point for photomesh.

Usage:
    photomesh serve                          # Run the HTTP API
    photomesh reconstruct a.jpg b.jpg c.jpg  # Run one session locally
    photomesh graph a.jpg b.jpg c.jpg        # Print the Meshroom job graph
    photomesh check-graph pipeline.mg        # Validate graph references
    photomesh info                           # Show pipeline steps
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from photomesh.core.logging import setup_logging

app = typer.Typer(name="photomesh", help="Photos to textured mesh via Meshroom")
console = Console()


def _load_config(config: Optional[Path]):
    from photomesh.core.config import load_service_config

    return load_service_config(config)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    config: Optional[Path] = typer.Option(None, help="Service config path"),
) -> None:
    """Run the photogrammetry HTTP API."""
    import uvicorn

    from photomesh.api.app import create_app

    cfg = _load_config(config)
    setup_logging(cfg.log_level)
    uvicorn.run(create_app(cfg), host=host, port=port)


@app.command()
def reconstruct(
    photos: List[Path] = typer.Argument(..., help="Photos in capture order"),
    config: Optional[Path] = typer.Option(None, help="Service config path"),
    out: Path = typer.Option(Path("reconstruction"), "--out", "-o", help="Directory for the artifacts"),
) -> None:
    """Run one reconstruction session locally and write its artifacts."""
    from photomesh.core.errors import PhotomeshError
    from photomesh.core.pipeline_runner import run_session

    cfg = _load_config(config)
    setup_logging(cfg.log_level)

    try:
        outcome = run_session([p.read_bytes() for p in photos], cfg)
    except PhotomeshError as e:
        console.print(f"[red]{e.message}[/red]")
        if e.details:
            console.print(e.details, markup=False)
        raise typer.Exit(1)

    out.mkdir(parents=True, exist_ok=True)
    written = {"model.obj": outcome.artifacts.mesh}
    if outcome.artifacts.texture is not None:
        written["texture.jpg"] = outcome.artifacts.texture
    if outcome.artifacts.glb is not None:
        written["model.glb"] = outcome.artifacts.glb
    for name, data in written.items():
        (out / name).write_bytes(data)

    console.print(f"[green]Session {outcome.session.session_id} done.[/green]")
    for name in written:
        console.print(f"  {out / name}")
    if outcome.conversion_error:
        console.print(f"[yellow]GLB skipped: {outcome.conversion_error}[/yellow]")


@app.command()
def graph(
    photos: List[Path] = typer.Argument(..., help="Photos in capture order"),
    intrinsic: str = typer.Option("unknown", help="Intrinsic marker for every viewpoint"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write to file instead of stdout"),
) -> None:
    """Print the Meshroom job graph for a photo list."""
    from photomesh.steps.s02_job_graph._graph import build_meshroom_graph, write_graph

    pipeline_graph = build_meshroom_graph([p.resolve() for p in photos], intrinsic=intrinsic)
    if out is not None:
        write_graph(pipeline_graph, out)
        console.print(f"[green]Wrote {out}[/green]")
    else:
        console.print_json(json.dumps(pipeline_graph.to_dict()))


@app.command()
def check_graph(path: Path = typer.Argument(..., help="Serialized job graph (.mg)")) -> None:
    """Validate that every {Stage.attr} reference points at an earlier stage."""
    from photomesh.steps.s02_job_graph._graph import check_references

    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    problems = check_references(document)
    if problems:
        for problem in problems:
            console.print(f"[red]{problem}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{len(document['graph'])} stages, all references resolve.[/green]")


@app.command()
def info(config: Optional[Path] = typer.Option(None, help="Service config path")) -> None:
    """Show pipeline steps and their configuration."""
    from photomesh.core.pipeline_runner import STEP_MODULES, import_step_class

    cfg = _load_config(config)
    table = Table(title=f"Service: {cfg.service_name} (workspaces under {cfg.tmp_root})")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan", no_wrap=True)
    table.add_column("Module", style="green", no_wrap=True)

    for i, (_, module_path) in enumerate(STEP_MODULES, 1):
        step_cls = import_step_class(module_path)
        table.add_row(str(i), step_cls.name, module_path)
    console.print(table)

    for key, _ in STEP_MODULES:
        params = getattr(cfg, key).model_dump(mode="json")
        console.print(f"[cyan]{key}[/cyan]: " + escape(", ".join(f"{k}={v}" for k, v in params.items())))


if __name__ == "__main__":
    app()
