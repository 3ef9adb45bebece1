# =============================================================================
# GODOT DECODER TESTS
# =============================================================================
# Tests for YAML block -> GodotConfig decoding.
# =============================================================================

import pytest

from godot.core.decoder import decode_config
from godot.errors import MalformedConfig

SCENARIO = (
    "username: alice\n"
    "dotfile-directory: dots\n"
    "packages:\n"
    "  - git\n"
    "entrypoint: bash\n"
    "image-tag: demo\n"
)


class TestDecodeConfig:
    """Test decoding of well-formed blocks."""

    def test_concrete_scenario(self):
        """Every field maps to its record attribute."""
        config = decode_config(SCENARIO)
        assert config.username == "alice"
        assert config.dotfile_directory == "dots"
        assert config.packages == ["git"]
        assert config.entrypoint == "bash"
        assert config.image_tag == "demo"
        assert config.system_setup == []
        assert config.user_setup == []

    def test_path_fields_left_for_caller(self):
        """Decoding never fills repository or rendering fields."""
        config = decode_config(SCENARIO)
        assert config.repo_directory == ""
        assert config.output_directory == ""
        assert config.dockerfile_rendered == ""

    def test_command_order_preserved(self):
        """Setup commands keep their order and duplicates."""
        config = decode_config(
            "system-setup:\n  - RUN b\n  - RUN a\n  - RUN b\n"
            "user-setup:\n  - RUN z\n  - RUN y\n"
        )
        assert config.system_setup == ["RUN b", "RUN a", "RUN b"]
        assert config.user_setup == ["RUN z", "RUN y"]

    def test_idempotent(self):
        """Decoding the same text twice gives equal records."""
        assert decode_config(SCENARIO) == decode_config(SCENARIO)

    def test_empty_block(self):
        """An empty block is an empty record, not an error."""
        config = decode_config("")
        assert config.username == ""
        assert config.packages == []

    def test_missing_keys_are_zero_values(self):
        """Only some keys present."""
        config = decode_config("username: bob\n")
        assert config.username == "bob"
        assert config.dotfile_directory == ""
        assert config.entrypoint == ""

    def test_null_values_are_zero_values(self):
        """A key with no value is treated as absent."""
        config = decode_config("packages:\nusername:\n")
        assert config.packages == []
        assert config.username == ""

    def test_unknown_keys_ignored(self):
        """Forward-compatible: unknown keys do nothing."""
        config = decode_config("username: bob\nshell: zsh\nextras:\n  - x\n")
        assert config.username == "bob"
        assert not hasattr(config, "shell")

    def test_scalars_keep_source_text(self):
        """Numbers and booleans are read as the text written in the README."""
        config = decode_config(
            "username: yes\n"
            "entrypoint: 42\n"
            "image-tag: 2024\n"
            "packages:\n  - 7zip\n  - 3\n  - 1.10\n"
        )
        assert config.username == "yes"
        assert config.entrypoint == "42"
        assert config.image_tag == "2024"
        assert config.packages == ["7zip", "3", "1.10"]

    def test_internal_fields_cannot_be_set_from_readme(self):
        """Python attribute names are not README keys."""
        config = decode_config("repo_directory: /etc\ndotfile_directory: nope\n")
        assert config.repo_directory == ""
        assert config.dotfile_directory == ""


class TestDecodeErrors:
    """Test rejection of malformed blocks."""

    def test_scalar_where_sequence_expected(self):
        """packages must be a list."""
        with pytest.raises(MalformedConfig) as exc_info:
            decode_config("packages: git\n")
        assert exc_info.value.diagnostic
        assert "packages" in exc_info.value.diagnostic

    def test_sequence_where_scalar_expected(self):
        """username must be a string."""
        with pytest.raises(MalformedConfig):
            decode_config("username:\n  - a\n  - b\n")

    def test_mapping_where_scalar_expected(self):
        """A nested mapping is not a package name."""
        with pytest.raises(MalformedConfig):
            decode_config("packages:\n  - name: git\n")

    def test_invalid_yaml(self):
        """YAML syntax errors carry the parser diagnostic."""
        with pytest.raises(MalformedConfig) as exc_info:
            decode_config("username: [unclosed\n")
        assert exc_info.value.diagnostic

    def test_top_level_must_be_mapping(self):
        """A list document is rejected."""
        with pytest.raises(MalformedConfig) as exc_info:
            decode_config("- username\n- packages\n")
        assert "mapping" in str(exc_info.value)

    def test_stage_label(self):
        """Decoder failures are labelled with their stage."""
        assert MalformedConfig("x").stage == "DECODER"
