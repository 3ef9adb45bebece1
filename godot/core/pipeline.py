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
# THE PIPELINE - README TO IMAGE
# -----------------------------------------------------------------------------
# Responsibility: Run the stages in order for one repository.
#
#   clone -> extract -> decode -> render -> write -> assemble -> build
#
# Every stage fails fast with its own GodotError subclass. Nothing is retried.
# Temporary clones and build contexts are removed on every exit path.
# -----------------------------------------------------------------------------

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from rich.console import Console

from godot.config import GodotSettings
from godot.core.assembler import ContextAssembler
from godot.core.decoder import decode_config
from godot.core.driver import BuildDriver, BuildResult, ProgressUnit
from godot.core.extractor import extract_config_block_from_file
from godot.core.renderer import RecipeRenderer
from godot.domain.build import BuildService
from godot.domain.models import GodotConfig
from godot.infra.docker_client import DockerBuildService
from godot.infra.git_client import GitRepository

console = Console()


@dataclass
class PipelineResult:
    """What a pipeline run produced."""

    config: GodotConfig
    dockerfile_path: Path
    build: BuildResult | None = None


def resolve_image_tag(explicit: str | None, config: GodotConfig, settings: GodotSettings) -> str:
    """
    Pick the image tag: explicit argument, then README, then the default.

    A tag without a version gets ":latest".
    """
    tag = explicit or config.image_tag or settings.default_image_tag
    # A ":" after the last "/" is a version, before it a registry port
    if ":" not in tag.rsplit("/", 1)[-1]:
        tag = f"{tag}:latest"
    return tag


class GodotPipeline:
    """
    Orchestrates one README-to-image run.

    The build service is created lazily, so rendering alone never needs a
    Docker daemon.
    """

    def __init__(
        self,
        settings: GodotSettings,
        build_service: BuildService | None = None,
        service_factory: Callable[[GodotSettings], BuildService] | None = None,
    ) -> None:
        self._settings = settings
        self._build_service = build_service
        self._service_factory = service_factory or DockerBuildService
        self._renderer = RecipeRenderer(settings)
        self._assembler = ContextAssembler(settings)

    def _service(self) -> BuildService:
        if self._build_service is None:
            self._build_service = self._service_factory(self._settings)
        return self._build_service

    def load_config(self, readme_path: str | Path, repo_directory: str | Path) -> GodotConfig:
        """Extract and decode the README configuration, attached to its repository."""
        raw = extract_config_block_from_file(readme_path, self._settings)
        config = decode_config(raw)
        return config.model_copy(update={"repo_directory": str(Path(repo_directory).resolve())})

    def render(self, config: GodotConfig) -> GodotConfig:
        """Return a copy of config with the rendered Dockerfile attached."""
        rendered = self._renderer.render(config)
        return config.model_copy(update={"dockerfile_rendered": rendered})

    def run_local(
        self,
        readme_path: str | Path,
        repo_directory: str | Path,
        output_dir: str | Path = ".",
        image_tag: str | None = None,
        build: bool = True,
        on_progress: Callable[[ProgressUnit], None] | None = None,
    ) -> PipelineResult:
        """
        Run every stage after the clone for a repository already on disk.

        Args:
            readme_path: README holding the configuration section.
            repo_directory: Root the dotfile directory is relative to.
            output_dir: Where Dockerfile.godot is written.
            image_tag: Overrides the README image-tag when given.
            build: When False, stop after writing the Dockerfile.
            on_progress: Receives build progress units.
        """
        config = self.load_config(readme_path, repo_directory)
        config = config.model_copy(
            update={
                "image_tag": resolve_image_tag(image_tag, config, self._settings),
                "output_directory": str(output_dir),
            }
        )
        config = self.render(config)
        dockerfile_path = self._renderer.write(config.dockerfile_rendered, output_dir)

        if not build:
            console.print("[yellow][PIPELINE] Image build skipped[/yellow]")
            return PipelineResult(config=config, dockerfile_path=dockerfile_path)

        dotfiles = Path(config.repo_directory) / config.dotfile_directory
        driver = BuildDriver(self._service(), self._settings)
        with self._assembler.build_context(dockerfile_path, dotfiles) as archive_path:
            result = driver.build(archive_path, config.image_tag, on_progress=on_progress)

        return PipelineResult(config=config, dockerfile_path=dockerfile_path, build=result)

    def run(
        self,
        remote: str,
        output_dir: str | Path = ".",
        image_tag: str | None = None,
        build: bool = True,
        keep_clone: bool = False,
        on_progress: Callable[[ProgressUnit], None] | None = None,
    ) -> PipelineResult:
        """
        Clone a repository and build the image its README describes.

        The clone lives in a fresh directory under the workspace and is
        removed afterwards unless keep_clone is set.
        """
        repo = GitRepository.from_remote(remote, self._settings.workspace)
        try:
            repo.pull()
            readme_path = repo.resolve(self._settings.readme_name)
            return self.run_local(
                readme_path,
                repo.repo_directory,
                output_dir=output_dir,
                image_tag=image_tag,
                build=build,
                on_progress=on_progress,
            )
        finally:
            if keep_clone:
                console.print(f"[cyan][PIPELINE] Clone kept at {repo.repo_directory}[/cyan]")
            else:
                shutil.rmtree(repo.repo_directory, ignore_errors=True)
