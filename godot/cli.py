# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# GODOT - COMMAND LINE INTERFACE
# -----------------------------------------------------------------------------
# Commands:
# - godot run <repository>   clone, render Dockerfile.godot, build the image
# - godot render <README>    render Dockerfile.godot from a local README
#
# Any pipeline failure prints "Error: [STAGE] message" to stderr and exits 1.
# -----------------------------------------------------------------------------

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from godot import __version__
from godot.config import GodotSettings
from godot.core.pipeline import GodotPipeline, PipelineResult
from godot.errors import GodotError

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    add_completion=False,
    help="Build a development environment image from a repository README.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"godot {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """godot run https://github.com/pmalmgren/godot"""


def _fail(error: GodotError) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] [{error.stage}] {escape(error.message)}")
    raise typer.Exit(code=1)


def _load_settings() -> GodotSettings:
    try:
        return GodotSettings.from_env()
    except GodotError as e:
        _fail(e)


def _summarize(result: PipelineResult) -> None:
    lines = [
        f"Dockerfile: {result.dockerfile_path}",
        f"Image tag:  {result.config.image_tag}",
    ]
    if result.build is not None:
        lines.append(f"Progress:   {result.build.units} messages in {result.build.duration_seconds:.1f}s")
        for message in result.build.errors:
            lines.append(f"[red]Daemon error: {escape(message)}[/red]")
    console.print(Panel("\n".join(lines), title="godot", border_style="green"))


@app.command("run")
def run(
    repository: str = typer.Argument(..., help="Git URL (or path) of the repository to build."),
    image_tag: str | None = typer.Option(
        None,
        "--image-tag",
        help="Image tag for the Docker image (default: README image-tag, else godot-dev).",
    ),
    output_dir: Path = typer.Option(
        Path("."), "--output-dir", help="Output directory for Dockerfile.godot."
    ),
    no_build: bool = typer.Option(
        False, "--no-build", help="Only render Dockerfile.godot, skip the Docker build."
    ),
    keep_clone: bool = typer.Option(
        False, "--keep-clone", help="Keep the temporary clone of the repository."
    ),
) -> None:
    """Clone a repository and build the image described in its README."""
    settings = _load_settings()
    pipeline = GodotPipeline(settings)

    try:
        result = pipeline.run(
            repository,
            output_dir=output_dir,
            image_tag=image_tag,
            build=not no_build,
            keep_clone=keep_clone,
        )
    except GodotError as e:
        _fail(e)

    _summarize(result)


app.command("r", hidden=True, help="Alias for run.")(run)


@app.command("render")
def render(
    readme: Path = typer.Argument(..., help="README holding the godot configuration."),
    repo_dir: Path | None = typer.Option(
        None, "--repo-dir", help="Repository root (default: the README's directory)."
    ),
    output_dir: Path = typer.Option(
        Path("."), "--output-dir", help="Output directory for Dockerfile.godot."
    ),
    image_tag: str | None = typer.Option(None, "--image-tag", help="Image tag override."),
    show: bool = typer.Option(False, "--show", help="Print the rendered Dockerfile."),
) -> None:
    """Render Dockerfile.godot from a local README without building."""
    settings = _load_settings()
    pipeline = GodotPipeline(settings)

    try:
        result = pipeline.run_local(
            readme,
            repo_dir or readme.resolve().parent,
            output_dir=output_dir,
            image_tag=image_tag,
            build=False,
        )
    except GodotError as e:
        _fail(e)

    if show:
        console.print(Syntax(result.config.dockerfile_rendered, "docker"))
    _summarize(result)
