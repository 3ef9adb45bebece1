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
# ERROR TAXONOMY
# -----------------------------------------------------------------------------
# Every stage of the pipeline raises a subclass of GodotError. The stage label
# tells the operator where the run stopped:
#
#   CONFIG     - settings could not be loaded from the environment
#   SOURCE     - the repository could not be fetched or a file is missing
#   EXTRACTOR  - the README has no configuration section
#   DECODER    - the configuration block is not valid YAML for our schema
#   RENDERER   - the Dockerfile template is missing or broken
#   ASSEMBLER  - the build context archive could not be written
#   DRIVER     - the Docker daemon rejected the build or the stream broke
# -----------------------------------------------------------------------------


class GodotError(Exception):
    """Base class for every failure raised by the build pipeline."""

    stage = "GODOT"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SettingsError(GodotError):
    """Raised when environment configuration is invalid."""

    stage = "CONFIG"


# --- SOURCE ------------------------------------------------------------------


class SourceError(GodotError):
    """Raised when the source repository cannot provide a document."""

    stage = "SOURCE"


class SourceNotFound(SourceError):
    """Raised when a file does not exist inside the fetched repository."""

    pass


class GitError(SourceError):
    """Raised when a Git operation fails."""

    pass


# --- CONFIGURATION -----------------------------------------------------------


class ConfigError(GodotError):
    """Raised when the README configuration section cannot be read."""

    stage = "EXTRACTOR"


class MissingConfigHeader(ConfigError):
    """The document never contains the configuration header line."""

    pass


class MissingConfigBlock(ConfigError):
    """The header exists but no fenced block follows it."""

    pass


class MalformedConfig(ConfigError):
    """
    The fenced block is not a valid configuration document.

    Carries the underlying parser diagnostic so the user can fix the README.
    """

    stage = "DECODER"

    def __init__(self, message: str, diagnostic: str = "") -> None:
        super().__init__(f"{message}: {diagnostic}" if diagnostic else message)
        self.diagnostic = diagnostic


# --- RECIPE ------------------------------------------------------------------


class TemplateError(GodotError):
    """
    Raised when the Dockerfile template is missing or cannot be rendered.

    This is a deployment defect, not a problem with the user's README.
    """

    stage = "RENDERER"


class RecipeWriteError(GodotError):
    """Raised when the rendered Dockerfile cannot be persisted."""

    stage = "RENDERER"


# --- BUILD -------------------------------------------------------------------


class ContextAssemblyError(GodotError):
    """Raised when the build context archive cannot be assembled."""

    stage = "ASSEMBLER"


class BuildError(GodotError):
    """Base class for failures at or after submission to the build service."""

    stage = "DRIVER"


class BuildRequestError(BuildError):
    """The build service refused the request before any output streamed."""

    pass


class BuildStreamError(BuildError):
    """Reading the build progress stream failed mid-flight."""

    pass
