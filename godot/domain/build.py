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
# DOMAIN MODELS - BUILD SERVICE CONTRACT
# -----------------------------------------------------------------------------
# The narrow contract between the Driver (core) and whatever performs the
# build (infra). A BuildService accepts a context archive and returns the
# daemon's raw progress stream. Nothing else.
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterable, Protocol


@dataclass
class BuildOptions:
    """Options sent along with a build context."""

    tags: list[str]
    remove_intermediates: bool = True
    force_remove: bool = True
    pull_parent: bool = True
    dockerfile: str = "Dockerfile"


@dataclass
class BuildResponse:
    """
    What a BuildService returns: the raw progress stream.

    body yields raw byte chunks in whatever sizes the transport delivers.
    """

    body: Iterable[bytes]
    closer: Callable[[], None] | None = None

    def close(self) -> None:
        if self.closer is not None:
            self.closer()


class BuildService(Protocol):
    """Anything that accepts a build context and streams progress back."""

    def submit(self, archive: BinaryIO, options: BuildOptions) -> BuildResponse:
        ...
