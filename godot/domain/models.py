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
# DOMAIN MODELS - README CONFIGURATION
# -----------------------------------------------------------------------------
# The Pydantic model for the configuration block a repository embeds in its
# README. The Decoder fills the YAML fields; the caller adds the repository
# path, output directory and image tag; the Renderer adds the Dockerfile text.
#
# Every field has a zero value: a README that omits a key is still valid.
# -----------------------------------------------------------------------------

from typing import Any

from pydantic import BaseModel, Field, field_validator

# Keys a README block may set. Anything else in the block is ignored.
README_KEYS = (
    "username",
    "dotfile-directory",
    "packages",
    "system-setup",
    "user-setup",
    "entrypoint",
    "image-tag",
)


class GodotConfig(BaseModel):
    """
    Configuration for one development environment image.

    Fields decoded from the README block:
    - username: account created inside the image
    - dotfile_directory: repository-relative directory copied into the image
    - packages: apt packages to install, in order
    - system_setup: Dockerfile instructions run as root, in order
    - user_setup: Dockerfile instructions run as the user, in order
    - entrypoint: command run when a container starts
    - image_tag: logical tag for the produced image

    Fields set outside the README:
    - repo_directory: absolute path of the fetched repository
    - output_directory: where the rendered Dockerfile is written
    - dockerfile_rendered: the rendered Dockerfile text
    """

    username: str = ""
    dotfile_directory: str = Field("", alias="dotfile-directory")
    packages: list[str] = Field(default_factory=list)
    system_setup: list[str] = Field(default_factory=list, alias="system-setup")
    user_setup: list[str] = Field(default_factory=list, alias="user-setup")
    entrypoint: str = ""
    image_tag: str = Field("", alias="image-tag")

    repo_directory: str = Field("", exclude=True)
    output_directory: str = Field("", exclude=True)
    dockerfile_rendered: str = Field("", exclude=True)

    class Config:
        """Unknown README keys are ignored; Python names work alongside YAML keys."""

        extra = "ignore"
        populate_by_name = True

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_absent(cls, value: Any, info) -> Any:
        """A YAML key with no value decodes to None; treat it as missing."""
        if value is None:
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)
        return value
