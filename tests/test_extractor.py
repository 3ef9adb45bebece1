# =============================================================================
# GODOT EXTRACTOR TESTS
# =============================================================================
# Tests for the README configuration block scanner.
# =============================================================================

import pytest

from godot.config import GodotSettings
from godot.core.extractor import extract_config_block, extract_config_block_from_file
from godot.errors import ConfigError, MissingConfigBlock, MissingConfigHeader, SourceNotFound

FENCE = "```"


def lines_of(text: str) -> list[str]:
    return text.splitlines(keepends=True)


class TestExtractBlock:
    """Test the three-state scan over in-memory documents."""

    def test_concrete_scenario(self, settings):
        """The five lines between the fences are returned."""
        document = (
            "# Title\n\n## godot configuration\n\nprose\n"
            f"{FENCE}\n"
            "username: alice\n"
            "dotfile-directory: dots\n"
            "packages:\n"
            "  - git\n"
            "entrypoint: bash\n"
            "image-tag: demo\n"
            f"{FENCE}\n"
        )
        block = extract_config_block(lines_of(document), settings)
        assert block == (
            "username: alice\n"
            "dotfile-directory: dots\n"
            "packages:\n"
            "  - git\n"
            "entrypoint: bash\n"
            "image-tag: demo\n"
        )

    def test_lines_without_newlines(self, settings):
        """Lines may arrive already stripped."""
        document = ["## godot configuration", FENCE, "a: 1", "b: 2", FENCE]
        assert extract_config_block(document, settings) == "a: 1\nb: 2\n"

    def test_content_before_header_is_ignored(self, settings):
        """Fences and text before the header never count."""
        document = [FENCE, "junk: 1", FENCE, "## godot configuration", FENCE, "a: 1", FENCE]
        assert extract_config_block(document, settings) == "a: 1\n"

    def test_prose_between_header_and_fence_is_ignored(self, settings):
        """Free-form prose after the header is skipped."""
        document = ["## godot configuration", "Some prose.", "", "More prose.", FENCE, "a: 1", FENCE]
        assert extract_config_block(document, settings) == "a: 1\n"

    def test_crlf_lines(self, settings):
        """Windows line endings are stripped like LF."""
        document = ["## godot configuration\r\n", f"{FENCE}\r\n", "a: 1\r\n", f"{FENCE}\r\n"]
        assert extract_config_block(document, settings) == "a: 1\n"

    def test_stops_at_closing_fence(self, settings):
        """Content after the closing fence is not included."""
        document = ["## godot configuration", FENCE, "a: 1", FENCE, "b: 2", FENCE]
        assert extract_config_block(document, settings) == "a: 1\n"

    def test_second_header_has_no_effect(self, settings):
        """Only the first header matters; a later one is plain content."""
        document = [
            "## godot configuration",
            "## godot configuration",
            FENCE,
            "a: 1",
            "## godot configuration",
            FENCE,
        ]
        assert extract_config_block(document, settings) == "a: 1\n## godot configuration\n"

    def test_empty_block(self, settings):
        """Two adjacent fences yield an empty block."""
        document = ["## godot configuration", FENCE, FENCE]
        assert extract_config_block(document, settings) == ""

    def test_unterminated_block_returns_buffer(self, settings):
        """End of document inside the block keeps what was collected."""
        document = ["## godot configuration", FENCE, "a: 1", "b: 2"]
        assert extract_config_block(document, settings) == "a: 1\nb: 2\n"

    def test_custom_markers(self, tmp_path):
        """Header and boundary come from settings."""
        custom = GodotSettings(
            config_header="## env", boundary_token="~~~", workspace=tmp_path
        )
        document = ["## godot configuration", FENCE, "x: 0", FENCE, "## env", "~~~", "a: 1", "~~~"]
        assert extract_config_block(document, custom) == "a: 1\n"


class TestExtractErrors:
    """Test structural failures."""

    def test_missing_header(self, settings):
        """No header at all."""
        with pytest.raises(MissingConfigHeader) as exc_info:
            extract_config_block(["# README", FENCE, "a: 1", FENCE], settings)
        assert "## godot configuration" in str(exc_info.value)

    def test_empty_document(self, settings):
        """An empty document has no header."""
        with pytest.raises(MissingConfigHeader):
            extract_config_block([], settings)

    def test_header_is_case_sensitive(self, settings):
        """A differently cased header does not match."""
        with pytest.raises(MissingConfigHeader):
            extract_config_block(["## Godot Configuration", FENCE, "a: 1", FENCE], settings)

    def test_header_is_not_trimmed(self, settings):
        """Trailing whitespace makes the header a different line."""
        with pytest.raises(MissingConfigHeader):
            extract_config_block(["## godot configuration ", FENCE, "a: 1", FENCE], settings)

    def test_missing_block(self, settings):
        """Header without any fence after it."""
        with pytest.raises(MissingConfigBlock):
            extract_config_block(["## godot configuration", "prose only"], settings)

    def test_fence_with_language_is_not_a_boundary(self, settings):
        """```yaml is not the boundary token."""
        with pytest.raises(MissingConfigBlock):
            extract_config_block(["## godot configuration", "```yaml", "a: 1", FENCE[:2]], settings)

    def test_errors_share_a_base_class(self):
        """Both structural errors are ConfigErrors."""
        assert issubclass(MissingConfigHeader, ConfigError)
        assert issubclass(MissingConfigBlock, ConfigError)


class TestExtractFromFile:
    """Test reading documents from disk."""

    def test_reads_file(self, sample_repo, settings):
        """The sample README yields its YAML block."""
        block = extract_config_block_from_file(sample_repo / "README.md", settings)
        assert block.startswith("username: test-user\n")
        assert block.endswith("  - RUN cd user-setup\n")

    def test_missing_file(self, tmp_path, settings):
        """A missing README is a SourceNotFound."""
        with pytest.raises(SourceNotFound):
            extract_config_block_from_file(tmp_path / "README.md", settings)

    def test_crlf_file(self, tmp_path, settings):
        """CRLF files are scanned like LF files."""
        path = tmp_path / "README.md"
        path.write_bytes(b"## godot configuration\r\n```\r\nusername: bob\r\n```\r\n")
        assert extract_config_block_from_file(path, settings) == "username: bob\n"
