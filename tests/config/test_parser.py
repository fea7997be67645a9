"""
Tests for lnbdist.yaml parsing and validation.
"""

import pytest

from lnbdist.config.parser import (
    DEFAULT_REPOSITORY,
    LnbDistConfig,
    load_config,
    parse_config,
)
from lnbdist.core.exceptions import ConfigError
from lnbdist.core.platform import ReleaseTarget


def _write(tmp_path, text):
    path = tmp_path / "lnbdist.yaml"
    path.write_text(text)
    return path


class TestParseConfig:
    """Tests for parse_config."""

    def test_full_config(self, sample_config_yaml):
        config = parse_config(sample_config_yaml)

        assert config.binary_name == "lnb"
        assert config.formula.description == "Link binaries onto your PATH"
        assert config.formula.repository == "https://github.com/example/lnb"
        assert config.formula.homepage == "https://github.com/example/lnb"
        assert [str(t) for t in config.formula.targets] == [
            "darwin-arm64",
            "darwin-amd64",
            "linux-amd64",
        ]
        assert config.release.remote == "upstream"
        assert config.release.tag_prefix == "v"

    def test_empty_file_gives_defaults(self, tmp_path):
        assert parse_config(_write(tmp_path, "")) == LnbDistConfig()

    def test_defaults(self):
        config = LnbDistConfig()

        assert config.version_file == "versions.txt"
        assert config.formula.repository == DEFAULT_REPOSITORY
        assert [str(t) for t in config.formula.targets] == ["darwin-arm64", "darwin-amd64"]

    def test_repository_trailing_slash_stripped(self, tmp_path):
        config = parse_config(
            _write(tmp_path, "formula:\n  repository: https://github.com/x/lnb/\n")
        )
        assert config.formula.repository == "https://github.com/x/lnb"

    def test_formula_name_defaults_to_binary_name(self, tmp_path):
        config = parse_config(_write(tmp_path, "binary_name: lnbx\n"))
        assert config.formula.name == "lnbx"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            parse_config(tmp_path / "lnbdist.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_config(_write(tmp_path, "formula: [unclosed\n"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            parse_config(_write(tmp_path, "- a\n- b\n"))


class TestValidation:
    """Invalid values are rejected with ConfigError."""

    @pytest.mark.parametrize(
        "text",
        [
            "binary_name: bin/lnb\n",
            "binary_name: 42\n",
            "formula: nope\n",
            "release:\n  tag_prefix: 1\n",
            "formula:\n  archive_template: '{binary}-{platform}.zip'\n",
            "formula:\n  targets: []\n",
            "formula:\n  targets: darwin-arm64\n",
            "formula:\n  targets: [3]\n",
            "formula:\n  targets: [macos-arm64]\n",
            "formula:\n  targets: [linux-amd64, linux-amd64]\n",
        ],
    )
    def test_rejected(self, tmp_path, text):
        with pytest.raises(ConfigError):
            parse_config(_write(tmp_path, text))

    def test_target_objects(self, tmp_path):
        config = parse_config(_write(tmp_path, "formula:\n  targets: [linux-arm64]\n"))
        assert config.formula.targets == [ReleaseTarget.parse("linux-arm64")]


class TestLoadConfig:
    """Tests for load_config."""

    def test_uses_project_file(self, tmp_path):
        _write(tmp_path, "binary_name: other\n")
        assert load_config(tmp_path).binary_name == "other"

    def test_defaults_without_file(self, tmp_path):
        assert load_config(tmp_path) == LnbDistConfig()

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, tmp_path / "custom.yaml")

    def test_explicit_path(self, tmp_path):
        custom = tmp_path / "custom.yaml"
        custom.write_text("version_file: VERSION\n")

        assert load_config(tmp_path, custom).version_file == "VERSION"
