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
# THE ASSEMBLER - DOCKER BUILD CONTEXT
# -----------------------------------------------------------------------------
# Responsibility: Package a Dockerfile and the dotfile directories into one
# tar archive the Docker daemon can build from.
#
# Archive layout:
#   Dockerfile          <- the recipe, whatever its original name/location
#   <dir>/<path>        <- each directory under its own basename, in order
#
# The recipe is first copied into a private temporary directory so that
# none of its sibling files end up in the context. That directory is always
# removed. The archive itself belongs to the caller once returned.
# -----------------------------------------------------------------------------

import os
import shutil
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Iterator

from rich.console import Console

from godot.config import GodotSettings
from godot.errors import ContextAssemblyError

console = Console()

ARCHIVE_NAME = "buildcontext.tar"


def _raise(error: OSError) -> None:
    """os.walk swallows errors unless told otherwise."""
    raise error


class ContextAssembler:
    """Builds Docker build context archives."""

    def __init__(self, settings: GodotSettings) -> None:
        self._settings = settings

    def _isolate_recipe(self, recipe_path: Path, isolation_dir: Path) -> Path:
        """Copy the recipe alone into isolation_dir under the canonical name."""
        isolated = isolation_dir / self._settings.recipe_filename
        try:
            shutil.copyfile(recipe_path, isolated)
        except OSError as e:
            raise ContextAssemblyError(f"Error reading Dockerfile {recipe_path}: {e}") from e
        return isolated

    def _add_directory(self, tar: tarfile.TarFile, directory: Path) -> int:
        """
        Add a directory recursively under its own name.

        Only files, symlinks and empty directories get entries, so a
        directory X holding Y is archived as exactly X/Y.

        Returns:
            Number of entries written.
        """
        if not directory.is_dir():
            raise ContextAssemblyError(f"Directory {directory} does not exist")

        root_name = directory.resolve().name
        added = 0
        for current, dirnames, filenames in os.walk(directory, onerror=_raise):
            dirnames.sort()
            current_path = Path(current)
            prefix = PurePosixPath(root_name, *current_path.relative_to(directory).parts)

            # Symlinked directories are not descended, archive the link itself
            links = [name for name in dirnames if (current_path / name).is_symlink()]
            for name in sorted(filenames + links):
                tar.add(current_path / name, arcname=str(prefix / name), recursive=False)
                added += 1

            if not dirnames and not filenames:
                tar.add(current_path, arcname=str(prefix), recursive=False)
                added += 1

        return added

    def assemble(
        self, recipe_path: str | Path, *dirs: str | Path, output_dir: str | Path | None = None
    ) -> Path:
        """
        Create a build context archive.

        Args:
            recipe_path: The rendered Dockerfile, any name, any location.
            *dirs: Directories to include, each under its own basename.
                Order is kept; duplicates produce duplicate entries.
            output_dir: Where to write the archive. Defaults to a fresh
                temporary directory under the workspace.

        Returns:
            Path of the closed archive. The caller is responsible for cleanup.

        Raises:
            ContextAssemblyError: Any file or archive operation failed. No
                archive is left behind in that case.
        """
        recipe_path = Path(recipe_path)
        owns_output_dir = output_dir is None

        try:
            self._settings.workspace.mkdir(parents=True, exist_ok=True)
            if owns_output_dir:
                output_dir = tempfile.mkdtemp(
                    prefix="godot-buildcontext-", dir=self._settings.workspace
                )
            archive_path = Path(output_dir) / ARCHIVE_NAME
        except OSError as e:
            raise ContextAssemblyError(f"Error creating a temporary directory: {e}") from e

        try:
            with tempfile.TemporaryDirectory(
                prefix="godot-dockerfile-", dir=self._settings.workspace
            ) as isolation_dir:
                isolated = self._isolate_recipe(recipe_path, Path(isolation_dir))

                with tarfile.open(archive_path, mode="w") as tar:
                    tar.add(isolated, arcname=self._settings.recipe_filename, recursive=False)
                    entries = 1
                    for directory in dirs:
                        try:
                            entries += self._add_directory(tar, Path(directory))
                        except (OSError, tarfile.TarError) as e:
                            raise ContextAssemblyError(
                                f"Error adding directory {directory} to build context: {e}"
                            ) from e

        except ContextAssemblyError:
            self._discard(archive_path, owns_output_dir)
            raise
        except (OSError, tarfile.TarError) as e:
            self._discard(archive_path, owns_output_dir)
            raise ContextAssemblyError(f"Error writing build context {archive_path}: {e}") from e

        console.print(
            f"[green][ASSEMBLER] Build context ready: {archive_path} ({entries} entries)[/green]"
        )
        return archive_path

    @staticmethod
    def _discard(archive_path: Path, owns_output_dir: bool) -> None:
        """Remove a partially written archive."""
        if owns_output_dir:
            shutil.rmtree(archive_path.parent, ignore_errors=True)
        else:
            archive_path.unlink(missing_ok=True)
        console.print(f"[yellow][ASSEMBLER] Discarded partial build context {archive_path}[/yellow]")

    @contextmanager
    def build_context(self, recipe_path: str | Path, *dirs: str | Path) -> Iterator[Path]:
        """
        Assemble an archive in its own temporary directory and remove it on exit.

        Yields:
            Path of the archive.
        """
        self._settings.workspace.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(
            prefix="godot-buildcontext-", dir=self._settings.workspace
        ) as output_dir:
            yield self.assemble(recipe_path, *dirs, output_dir=output_dir)
