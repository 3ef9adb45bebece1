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
# DOCKER BUILD SERVICE
# -----------------------------------------------------------------------------
# Responsibility: The BuildService the Driver talks to in production.
# A thin wrapper around the Docker SDK's low-level build endpoint with
# connection validation and clear error reporting.
#
# This is part of the Infrastructure layer - it keeps the SDK out of the
# core pipeline.
# -----------------------------------------------------------------------------

import itertools
from typing import BinaryIO, Iterable, Iterator

import docker
import requests
from docker import APIClient
from docker.errors import DockerException
from rich.console import Console
from rich.panel import Panel

from godot.config import GodotSettings
from godot.domain.build import BuildOptions, BuildResponse
from godot.errors import BuildRequestError, BuildStreamError

console = Console()


class DockerBuildService:
    """
    Docker SDK implementation of BuildService.

    Connects using the standard DOCKER_HOST / DOCKER_TLS_VERIFY environment,
    pinned to the API version from settings.
    """

    def __init__(self, settings: GodotSettings, api: APIClient | None = None) -> None:
        """
        Initialize the build service.

        Args:
            settings: Supplies the API version and client timeout.
            api: Pre-built low-level client (mainly for tests). When omitted
                a client is created from the environment.

        Raises:
            BuildRequestError: If the Docker daemon is unreachable.
        """
        self._settings = settings
        self._api = api if api is not None else self._connect()

    def _connect(self) -> APIClient:
        """Establish and verify a connection to the Docker daemon."""
        try:
            client = docker.from_env(
                version=self._settings.docker_api_version,
                timeout=self._settings.docker_timeout,
            )
            client.ping()
        except DockerException as e:
            console.print(
                Panel(
                    "[bold red]Docker Engine Unavailable[/bold red]\n\n"
                    "1. Start the Docker daemon (or Docker Desktop)\n"
                    "2. Check DOCKER_HOST if you use a remote engine\n"
                    "3. Run godot again",
                    title="BUILD HALTED",
                    border_style="red",
                )
            )
            raise BuildRequestError(f"Error initializing Docker client: {e}") from e

        console.print("[green][DOCKER] Connected to Docker Engine[/green]")
        return client.api

    def submit(self, archive: BinaryIO, options: BuildOptions) -> BuildResponse:
        """
        Send a build context to the daemon.

        The first chunk is read before returning so that a rejected request
        surfaces here as BuildRequestError rather than mid-stream.
        """
        try:
            chunks = self._api.build(
                fileobj=archive,
                custom_context=True,
                tag=options.tags[0] if options.tags else None,
                rm=options.remove_intermediates,
                forcerm=options.force_remove,
                pull=options.pull_parent,
                dockerfile=options.dockerfile,
                decode=False,
            )
            first = next(chunks, b"")
        except (DockerException, requests.RequestException) as e:
            raise BuildRequestError(f"Error building Docker image: {e}") from e

        return BuildResponse(
            body=_relay(itertools.chain([first], chunks)),
            closer=getattr(chunks, "close", None),
        )


def _relay(chunks: Iterable[bytes | str]) -> Iterator[bytes]:
    """
    Translate transport failures while streaming into BuildStreamError.

    A non-chunked reply arrives from the SDK as one str; it is re-encoded.
    """
    try:
        for chunk in chunks:
            yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk
    except (DockerException, requests.RequestException) as e:
        raise BuildStreamError(f"Error reading from Docker: {e}") from e
