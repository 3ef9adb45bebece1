"""
Pytest configuration and fixtures for godot tests.
"""

import io
import sys
import tarfile
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from godot.config import GodotSettings
from godot.domain.build import BuildOptions, BuildResponse

# The boundary is ```, kept out of the literal so editors don't get confused
FENCE = "```"

SAMPLE_README = (
    "# Test README\n"
    "\n"
    "## godot configuration\n"
    "\n"
    "hey nothing here should matter!\n"
    f"{FENCE}\n"
    "username: test-user\n"
    "dotfile-directory: dotfiles\n"
    "entrypoint: test-entrypoint\n"
    "image-tag: test-dev-env\n"
    "\n"
    "packages:\n"
    "  - neovim\n"
    "  - git\n"
    "\n"
    "# system-setup runs as root, define volumes etc.\n"
    "system-setup:\n"
    "  - RUN ls\n"
    "  - RUN touch system-setup\n"
    "\n"
    "# user-setup runs as the user defined above in username.\n"
    "user-setup:\n"
    "  - RUN mkdir user-setup\n"
    "  - RUN cd user-setup\n"
    f"{FENCE}\n"
)


class FakeBuildService:
    """
    BuildService test double.

    Records the options and the archive member names it was given and
    replays canned progress chunks.
    """

    def __init__(self, chunks=None, error: Exception | None = None) -> None:
        self.chunks = list(chunks or [])
        self.error = error
        self.options: BuildOptions | None = None
        self.members: dict[str, bytes] = {}
        self.closed = False

    def submit(self, archive, options: BuildOptions) -> BuildResponse:
        self.options = options
        if self.error is not None:
            raise self.error

        with tarfile.open(fileobj=io.BytesIO(archive.read()), mode="r") as tar:
            for member in tar.getmembers():
                data = tar.extractfile(member) if member.isfile() else None
                self.members[member.name] = data.read() if data else b""

        return BuildResponse(body=iter(self.chunks), closer=self._close)

    def _close(self) -> None:
        self.closed = True


@pytest.fixture
def settings(tmp_path):
    """Default settings with a private workspace."""
    return GodotSettings(workspace=tmp_path / "workspace")


@pytest.fixture
def sample_repo(tmp_path):
    """A repository on disk with a configured README and a dotfiles directory."""
    repo = tmp_path / "repo"
    dotfiles = repo / "dotfiles"
    (dotfiles / "vim").mkdir(parents=True)
    (dotfiles / "vim" / ".vimrc").write_text("set number\n")
    (repo / "README.md").write_text(SAMPLE_README)
    return repo


@pytest.fixture
def fake_build_service():
    """A build service that streams two progress messages."""
    return FakeBuildService(
        chunks=[b'{"stream": "Step 1/2 : FROM debian\\n"}\r\n', b'{"stream": "Done\\n"}\r\n']
    )


@pytest.fixture
def build_service_factory():
    """The FakeBuildService class, for tests that need custom chunks or errors."""
    return FakeBuildService


@pytest.fixture
def sample_readme():
    """Text of a README with a complete godot configuration section."""
    return SAMPLE_README
