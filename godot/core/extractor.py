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
# THE EXTRACTOR - README CONFIGURATION SCANNER
# -----------------------------------------------------------------------------
# Responsibility: Find the configuration block inside a README.
#
# A three-state scan, one line at a time:
#   AWAITING_HEADER   -> the line equal to "## godot configuration"
#   AWAITING_BOUNDARY -> the opening ``` fence (prose in between is ignored)
#   INSIDE_BLOCK      -> collect lines until the closing ``` fence
#
# Comparisons are exact and case-sensitive. Only the first header and the
# first fence after it matter.
# -----------------------------------------------------------------------------

from enum import Enum
from pathlib import Path
from typing import Iterable

from rich.console import Console

from godot.config import GodotSettings
from godot.errors import ConfigError, MissingConfigBlock, MissingConfigHeader, SourceNotFound

console = Console()


class ScanState(str, Enum):
    """Position of the scanner relative to the configuration block."""

    AWAITING_HEADER = "awaiting_header"
    AWAITING_BOUNDARY = "awaiting_boundary"
    INSIDE_BLOCK = "inside_block"


def _strip_newline(line: str) -> str:
    """Drop a single trailing newline (LF or CRLF), nothing else."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def extract_config_block(lines: Iterable[str], settings: GodotSettings) -> str:
    """
    Return the text between the configuration fences.

    Args:
        lines: The document, line by line (trailing newlines allowed).
        settings: Supplies the header line and boundary token.

    Returns:
        The block interior, each line terminated by a newline.

    Raises:
        MissingConfigHeader: The header line never appears.
        MissingConfigBlock: The header appears but no fence follows it.
    """
    state = ScanState.AWAITING_HEADER
    block: list[str] = []

    for raw_line in lines:
        line = _strip_newline(raw_line)

        if state is ScanState.AWAITING_HEADER:
            if line == settings.config_header:
                state = ScanState.AWAITING_BOUNDARY
            continue

        if state is ScanState.AWAITING_BOUNDARY:
            if line == settings.boundary_token:
                state = ScanState.INSIDE_BLOCK
            continue

        if line == settings.boundary_token:
            return "".join(block)
        block.append(line + "\n")

    if state is ScanState.AWAITING_HEADER:
        raise MissingConfigHeader(f"Your README needs a `{settings.config_header}` header")

    if state is ScanState.AWAITING_BOUNDARY:
        raise MissingConfigBlock(
            f"Your README needs a YAML code block fenced by {settings.boundary_token} "
            f"after the `{settings.config_header}` header"
        )

    # Unterminated block: keep what was collected
    console.print(
        "[yellow][EXTRACTOR] Configuration block is never closed, "
        "using the rest of the document[/yellow]"
    )
    return "".join(block)


def extract_config_block_from_file(path: str | Path, settings: GodotSettings) -> str:
    """
    Read a README from disk and extract its configuration block.

    Raises:
        SourceNotFound: The file does not exist.
        ConfigError: The file exists but cannot be read.
    """
    path = Path(path)
    console.print(f"[cyan][EXTRACTOR] Scanning {path}[/cyan]")

    try:
        with open(path, encoding="utf-8", newline="") as f:
            raw = extract_config_block(f, settings)
    except FileNotFoundError as e:
        raise SourceNotFound(f"{path} does not exist") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error opening {path}: {e}") from e

    console.print(f"[green][EXTRACTOR] Found configuration block ({len(raw)} bytes)[/green]")
    return raw
