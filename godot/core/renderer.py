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
# THE RENDERER - CONFIGURATION TO DOCKERFILE
# -----------------------------------------------------------------------------
# Responsibility: Apply a GodotConfig to the Dockerfile template.
#
# Template directives in use:
# - {{ field }}          verbatim substitution (no shell escaping)
# - {% if packages %}    the package install line only when packages exist
# - {% for ... %}        one package / one setup command per element, in order
#
# Template problems are deployment defects and raise TemplateError, never
# MalformedConfig.
# -----------------------------------------------------------------------------

from pathlib import Path

import jinja2
from jinja2 import Environment, FileSystemLoader, StrictUndefined
from rich.console import Console

from godot.config import GodotSettings
from godot.domain.models import GodotConfig
from godot.errors import RecipeWriteError, TemplateError

console = Console()


class RecipeRenderer:
    """Renders the Dockerfile for a configuration record."""

    def __init__(self, settings: GodotSettings) -> None:
        self._settings = settings
        self._template_path = Path(settings.template_path)
        self._env = Environment(
            loader=FileSystemLoader(str(self._template_path.parent)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def _load_template(self) -> jinja2.Template:
        try:
            return self._env.get_template(self._template_path.name)
        except jinja2.TemplateNotFound as e:
            raise TemplateError(f"Dockerfile template not found: {self._template_path}") from e
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(
                f"Error parsing template file {self._template_path} (line {e.lineno}): {e.message}"
            ) from e

    def render(self, config: GodotConfig) -> str:
        """
        Render the Dockerfile text for a configuration.

        Args:
            config: A decoded configuration with repo_directory set.

        Returns:
            The rendered Dockerfile.

        Raises:
            TemplateError: The template is missing or invalid, or the
                configuration was never attached to a repository.
        """
        if not config.repo_directory:
            raise TemplateError("Configuration has no repository directory; cannot render")

        template = self._load_template()
        context = {
            "base_image": self._settings.base_image,
            "username": config.username,
            "dotfile_directory": config.dotfile_directory,
            "packages": config.packages,
            "system_setup": config.system_setup,
            "user_setup": config.user_setup,
            "entrypoint": config.entrypoint,
            "image_tag": config.image_tag,
            "repo_directory": config.repo_directory,
        }

        try:
            rendered = template.render(**context)
        except jinja2.TemplateError as e:
            raise TemplateError(f"Error rendering {self._template_path.name}: {e}") from e

        console.print(f"[green][RENDERER] Rendered {self._template_path.name}[/green]")
        return rendered

    def write(self, rendered: str, output_dir: str | Path) -> Path:
        """
        Persist rendered Dockerfile text.

        Returns:
            Path of the written file (<output_dir>/Dockerfile.godot).

        Raises:
            RecipeWriteError: The directory or file cannot be written.
        """
        path = Path(output_dir) / self._settings.rendered_filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(rendered, encoding="utf-8")
        except OSError as e:
            raise RecipeWriteError(f"Error writing rendered Dockerfile to {path}: {e}") from e

        console.print(f"[cyan][RENDERER] Dockerfile written: {path}[/cyan]")
        return path
