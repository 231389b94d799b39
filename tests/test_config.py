"""Tests for relnotes.config."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from relnotes.config import (
    DEFAULTS,
    ConfigError,
    _deep_merge,
    _validate,
    load_config,
    resolve_changelog_path,
)


def write_config(root: Path, data: object) -> None:
    config_dir = root / ".relnotes"
    config_dir.mkdir(exist_ok=True)
    text = data if isinstance(data, str) else yaml.dump(data)
    (config_dir / "config.yaml").write_text(text)


class TestDeepMerge:
    def test_flat_merge(self) -> None:
        base = {"a": 1, "b": 2}
        override = {"b": 3, "c": 4}
        assert _deep_merge(base, override) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        base = {"x": {"a": 1, "b": 2}}
        override = {"x": {"b": 3}}
        assert _deep_merge(base, override) == {"x": {"a": 1, "b": 3}}

    def test_override_replaces_non_dict(self) -> None:
        base = {"x": {"a": 1}}
        override = {"x": "flat"}
        assert _deep_merge(base, override) == {"x": "flat"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base["a"]["b"] == 1


class TestValidate:
    def test_defaults_valid(self) -> None:
        _validate(_deep_merge(DEFAULTS, {}))  # Should not raise

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigError, match="Unknown format"):
            _validate(_deep_merge(DEFAULTS, {"format": "asciidoc"}))

    def test_every_format_accepted(self) -> None:
        for fmt in ("auto", "keep-a-changelog", "markdown", "underline"):
            _validate(_deep_merge(DEFAULTS, {"format": fmt}))

    def test_pattern_must_compile(self) -> None:
        with pytest.raises(ConfigError, match="does not compile"):
            _validate(_deep_merge(DEFAULTS, {"pattern": "^## ([unclosed"}))

    def test_pattern_needs_group(self) -> None:
        with pytest.raises(ConfigError, match="capture group"):
            _validate(_deep_merge(DEFAULTS, {"pattern": "^## Release"}))

    def test_pattern_must_be_string(self) -> None:
        with pytest.raises(ConfigError, match="'pattern' must be a string"):
            _validate(_deep_merge(DEFAULTS, {"pattern": 42}))

    def test_discovery_not_dict(self) -> None:
        with pytest.raises(ConfigError, match="discovery.*mapping"):
            _validate(_deep_merge(DEFAULTS, {"discovery": "bad"}))

    def test_filenames_must_be_list(self) -> None:
        with pytest.raises(ConfigError, match="discovery.filenames"):
            _validate(_deep_merge(DEFAULTS, {"discovery": {"filenames": "changelog"}}))

    def test_size_bounds_order(self) -> None:
        with pytest.raises(ConfigError, match="exceeds"):
            _validate(_deep_merge(DEFAULTS, {"discovery": {"min_bytes": 500, "max_bytes": 100}}))

    def test_timeout_positive(self) -> None:
        with pytest.raises(ConfigError, match="timeout"):
            _validate(_deep_merge(DEFAULTS, {"fetch": {"timeout": 0}}))

    def test_empty_ref(self) -> None:
        with pytest.raises(ConfigError, match="fetch.ref"):
            _validate(_deep_merge(DEFAULTS, {"fetch": {"ref": ""}}))


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config == DEFAULTS
        assert config is not DEFAULTS

    def test_defaults_not_shared(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        config["discovery"]["filenames"].append("mutated")
        assert "mutated" not in DEFAULTS["discovery"]["filenames"]

    def test_loads_and_merges_defaults(self, tmp_path: Path) -> None:
        write_config(tmp_path, {
            "format": "underline",
            "changelog": "docs/HISTORY.rst",
            "fetch": {"ref": "main"},
        })
        config = load_config(tmp_path)
        assert config["format"] == "underline"
        assert config["changelog"] == "docs/HISTORY.rst"
        assert config["fetch"]["ref"] == "main"
        # Defaults filled in
        assert config["fetch"]["timeout"] == 30.0
        assert config["discovery"]["min_bytes"] == 100
        assert config["discovery"]["filenames"][0] == "changelog"

    def test_empty_file(self, tmp_path: Path) -> None:
        write_config(tmp_path, "")
        assert load_config(tmp_path) == DEFAULTS

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        write_config(tmp_path, "just a string")
        with pytest.raises(ConfigError, match="YAML mapping"):
            load_config(tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        write_config(tmp_path, {"format": "nope"})
        with pytest.raises(ConfigError, match="Unknown format"):
            load_config(tmp_path)

    def test_uses_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write_config(tmp_path, {"format": "markdown"})
        monkeypatch.chdir(tmp_path)
        assert load_config()["format"] == "markdown"


class TestResolveChangelogPath:
    def test_configured(self, tmp_path: Path) -> None:
        config = _deep_merge(DEFAULTS, {"changelog": "docs/NEWS.md"})
        assert resolve_changelog_path(config, tmp_path) == tmp_path / "docs" / "NEWS.md"

    def test_not_configured(self, tmp_path: Path) -> None:
        assert resolve_changelog_path(DEFAULTS, tmp_path) is None
