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
# SETTINGS
# -----------------------------------------------------------------------------
# Responsibility: The single immutable settings object shared by every stage.
# Holds the README markers, the canonical Dockerfile name and the knobs for
# the Docker connection. Values come from GODOT_* environment variables,
# optionally loaded from a .env file in the working directory.
# -----------------------------------------------------------------------------

import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from godot.errors import SettingsError

PACKAGE_DIR = Path(__file__).parent
DEFAULT_TEMPLATE_PATH = PACKAGE_DIR / "templates" / "Dockerfile.j2"

CONFIG_HEADER = "## godot configuration"
BOUNDARY_TOKEN = "```"

# Environment variable -> settings field
ENV_VARS = {
    "GODOT_CONFIG_HEADER": "config_header",
    "GODOT_BOUNDARY_TOKEN": "boundary_token",
    "GODOT_RECIPE_FILENAME": "recipe_filename",
    "GODOT_RENDERED_FILENAME": "rendered_filename",
    "GODOT_README_NAME": "readme_name",
    "GODOT_TEMPLATE_PATH": "template_path",
    "GODOT_BASE_IMAGE": "base_image",
    "GODOT_DEFAULT_IMAGE_TAG": "default_image_tag",
    "GODOT_WORKSPACE": "workspace",
    "GODOT_DOCKER_API_VERSION": "docker_api_version",
    "GODOT_DOCKER_TIMEOUT": "docker_timeout",
}


class GodotSettings(BaseModel):
    """
    Shared constants for the extractor, renderer, assembler and driver.

    Passed explicitly to each component so every stage can be tested
    with its own settings instead of module globals.
    """

    config_header: str = Field(CONFIG_HEADER, min_length=1)
    boundary_token: str = Field(BOUNDARY_TOKEN, min_length=1)
    recipe_filename: str = Field("Dockerfile", min_length=1)
    rendered_filename: str = Field("Dockerfile.godot", min_length=1)
    readme_name: str = Field("README.md", min_length=1)
    template_path: Path = DEFAULT_TEMPLATE_PATH
    base_image: str = "debian:stretch-slim"
    default_image_tag: str = "godot-dev"
    workspace: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    docker_api_version: str = "auto"
    docker_timeout: int = Field(600, gt=0)

    class Config:
        """Settings never change after startup."""

        frozen = True

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "GodotSettings":
        """
        Build settings from GODOT_* environment variables.

        Args:
            env_file: .env file to load first, defaults to .env in the
                working directory. Existing environment variables take
                precedence over the file.

        Raises:
            SettingsError: If a variable holds an invalid value.
        """
        load_dotenv(env_file or Path.cwd() / ".env")

        values = {
            field: os.environ[var] for var, field in ENV_VARS.items() if os.environ.get(var)
        }
        try:
            return cls(**values)
        except ValidationError as e:
            raise SettingsError(f"Invalid environment configuration: {e}") from e
