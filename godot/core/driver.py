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
# THE DRIVER - BUILD SUBMISSION & PROGRESS STREAM
# -----------------------------------------------------------------------------
# Responsibility: Hand a build context to a BuildService and relay the
# daemon's progress output as it arrives.
#
# The Driver has NO knowledge of Docker itself. Anything implementing
# BuildService.submit() can stand in for the daemon, which is how the tests
# run without one.
#
# Stream policy:
# - progress units are JSON objects separated by a delimiter (\r)
# - each unit is decoded and forwarded as soon as it is complete
# - a unit that fails to decode is skipped, the stream continues
# - a read error on the stream itself fails the build (BuildStreamError)
# -----------------------------------------------------------------------------

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

from rich.console import Console

from godot.config import GodotSettings
from godot.domain.build import BuildOptions, BuildService
from godot.errors import BuildError, BuildRequestError, BuildStreamError

console = Console()

PROGRESS_DELIMITER = b"\r"


@dataclass
class ProgressUnit:
    """A single decoded progress message from the build daemon."""

    stream: str = ""
    status: str = ""
    error: str = ""
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """Human-readable text of the unit."""
        if self.stream:
            return self.stream
        if self.status:
            item = self.raw.get("id")
            return f"{item}: {self.status}" if item else self.status
        return self.error

    @classmethod
    def decode(cls, payload: bytes) -> "ProgressUnit | None":
        """Decode one delimited payload; None when it is blank, malformed or carries no progress."""
        payload = payload.strip()
        if not payload:
            return None
        try:
            data = json.loads(payload)
        except (ValueError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        # aux payloads (image ids) carry no progress text
        if not any(key in data for key in ("stream", "status", "error")):
            return None

        return cls(
            stream=str(data.get("stream") or ""),
            status=str(data.get("status") or ""),
            error=str(data.get("error") or ""),
            raw=data,
        )


@dataclass
class BuildResult:
    """Outcome of streaming a build to completion."""

    tag: str
    units: int
    duration_seconds: float
    errors: list[str] = field(default_factory=list)


def iter_progress(
    chunks: Iterable[bytes], delimiter: bytes = PROGRESS_DELIMITER
) -> Iterator[ProgressUnit]:
    """
    Lazily decode a raw progress stream into ProgressUnits.

    Units are yielded as soon as their delimiter arrives; a final unit
    without a trailing delimiter is decoded at end of stream. Malformed
    units are dropped. Single pass, not restartable.

    Raises:
        BuildStreamError: Reading from the stream failed.
    """
    buffer = b""
    source = iter(chunks)

    while True:
        try:
            chunk = next(source)
        except StopIteration:
            break
        except BuildStreamError:
            raise
        except Exception as e:
            raise BuildStreamError(f"Error reading from build stream: {e}") from e

        buffer += chunk
        *complete, buffer = buffer.split(delimiter)
        for payload in complete:
            unit = ProgressUnit.decode(payload)
            if unit is not None:
                yield unit

    unit = ProgressUnit.decode(buffer)
    if unit is not None:
        yield unit


def print_progress(unit: ProgressUnit) -> None:
    """Default progress sink: echo the daemon's text verbatim."""
    text = unit.text
    if not text:
        return
    if unit.error:
        console.print(text, style="red", markup=False, highlight=False)
        return
    console.print(text, end="" if text.endswith("\n") else "\n", markup=False, highlight=False)


class BuildDriver:
    """
    Submits build contexts to a BuildService.

    The driver does not judge whether the image is good. A build that
    streams to the end without a transport error is complete; errors the
    daemon reports in-stream are collected on the BuildResult.
    """

    def __init__(
        self,
        service: BuildService,
        settings: GodotSettings,
        delimiter: bytes = PROGRESS_DELIMITER,
    ) -> None:
        self._service = service
        self._settings = settings
        self._delimiter = delimiter

    def build(
        self,
        archive_path: str | Path,
        tag: str,
        on_progress: Callable[[ProgressUnit], None] | None = None,
    ) -> BuildResult:
        """
        Build an image from a context archive.

        Args:
            archive_path: Tar archive produced by the ContextAssembler.
            tag: Full image tag (e.g. "godot-dev:latest").
            on_progress: Called with every decoded unit as it arrives.
                Defaults to printing to the console.

        Raises:
            BuildRequestError: The archive could not be opened or the
                service rejected the request.
            BuildStreamError: The progress stream broke mid-build.
        """
        sink = on_progress or print_progress
        options = BuildOptions(tags=[tag], dockerfile=self._settings.recipe_filename)
        start = time.monotonic()
        units = 0
        errors: list[str] = []

        console.print(f"[cyan][DRIVER] Building {tag} from build context {archive_path}[/cyan]")

        try:
            archive = open(archive_path, "rb")
        except OSError as e:
            raise BuildRequestError(f"Error opening build context {archive_path}: {e}") from e

        with archive:
            try:
                response = self._service.submit(archive, options)
            except BuildError:
                raise
            except Exception as e:
                raise BuildRequestError(f"Error building Docker image: {e}") from e

            try:
                for unit in iter_progress(response.body, self._delimiter):
                    units += 1
                    if unit.error:
                        errors.append(unit.error)
                    sink(unit)
            finally:
                response.close()

        duration = time.monotonic() - start
        if errors:
            console.print(f"[yellow][DRIVER] Daemon reported {len(errors)} error(s) for {tag}[/yellow]")
        else:
            console.print(f"[green][DRIVER] Build stream complete: {tag} ({duration:.1f}s)[/green]")

        return BuildResult(tag=tag, units=units, duration_seconds=duration, errors=errors)
