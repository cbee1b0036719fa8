"""
Tests for install configuration loading.
"""

import json
from pathlib import Path

import pytest

from binfetch.config.settings import InstallConfig, load_config, load_metadata
from binfetch.core.exceptions import ConfigurationError

REQUIRED = {"owner": "andrioid", "repo": "md-social"}


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Keep a developer's ./package.json out of the tests."""
    monkeypatch.chdir(tmp_path)


class TestInstallConfig:
    """Test InstallConfig value object."""

    def test_defaults(self):
        config = InstallConfig(owner="o", repo="r", tool_name="tool")

        assert config.version == "latest"
        assert config.host == "github.com"
        assert config.timeout == 30.0
        assert config.destination == Path("bin") / "tool"
        assert config.artifact_base == "tool"

    def test_base_name_overrides_artifact_base(self):
        config = InstallConfig(owner="o", repo="r", tool_name="tool", base_name="t")
        assert config.artifact_base == "t"

    def test_frozen(self):
        config = InstallConfig(owner="o", repo="r", tool_name="tool")
        with pytest.raises(AttributeError):
            config.version = "v2"

    def test_repr_hides_token(self):
        config = InstallConfig(owner="o", repo="r", tool_name="t", token="ghp_secret")
        assert "ghp_secret" not in repr(config)
        assert "***" in repr(config)

    @pytest.mark.parametrize(
        "changes, message",
        [
            ({"owner": ""}, "owner"),
            ({"tool_name": "../evil"}, "plain file name"),
            ({"timeout": 0}, "Timeout"),
        ],
    )
    def test_validate(self, changes, message):
        values = {"owner": "o", "repo": "r", "tool_name": "t", **changes}
        with pytest.raises(ConfigurationError, match=message):
            InstallConfig(**values).validate()


class TestLoadMetadata:
    """Test metadata file loading."""

    def test_missing_optional(self, tmp_path):
        assert load_metadata(tmp_path / "package.json") == {}

    def test_missing_required(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_metadata(tmp_path / "package.json", required=True)

    def test_package_json(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"name": "md-social", "version": "1.4.0"}))

        assert load_metadata(path)["version"] == "1.4.0"

    def test_yaml(self, tmp_path):
        path = tmp_path / "binfetch.yaml"
        path.write_text("version: v2.0.0\nbinfetch:\n  owner: andrioid\n")

        data = load_metadata(path)

        assert data["version"] == "v2.0.0"
        assert data["binfetch"]["owner"] == "andrioid"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Invalid metadata"):
            load_metadata(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "binfetch.yml"
        path.write_text("version: [unterminated")

        with pytest.raises(ConfigurationError, match="Invalid metadata"):
            load_metadata(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_metadata(path)


class TestLoadConfig:
    """Test configuration precedence."""

    def test_minimal(self):
        config = load_config(REQUIRED, environ={})

        assert config.owner == "andrioid"
        assert config.tool_name == "md-social"
        assert config.version == "latest"
        assert config.token is None

    def test_missing_owner(self):
        with pytest.raises(ConfigurationError, match="owner"):
            load_config({"repo": "md-social"}, environ={})

    def test_environment_bare_names(self):
        env = {
            "OWNER": "andrioid",
            "REPO": "md-social",
            "VERSION": "v0.9.0",
            "ASSET": "custom.gz",
            "GITHUB_TOKEN": "tok",
        }
        config = load_config(environ=env)

        assert config.owner == "andrioid"
        assert config.version == "v0.9.0"
        assert config.asset == "custom.gz"
        assert config.token == "tok"

    def test_prefixed_environment_wins(self):
        env = {"OWNER": "plain", "BINFETCH_OWNER": "prefixed", "REPO": "r"}
        assert load_config(environ=env).owner == "prefixed"

    def test_environment_timeout_and_dir(self):
        env = {**{k.upper(): v for k, v in REQUIRED.items()}}
        env.update({"BINFETCH_TIMEOUT": "5", "BINFETCH_INSTALL_DIR": "tools/bin"})

        config = load_config(environ=env)

        assert config.timeout == 5.0
        assert config.install_dir == Path("tools/bin")

    def test_invalid_timeout(self):
        with pytest.raises(ConfigurationError, match="Invalid timeout"):
            load_config(REQUIRED, environ={"BINFETCH_TIMEOUT": "soon"})

    def test_overrides_beat_environment(self):
        config = load_config(
            {**REQUIRED, "version": "v3"}, environ={"VERSION": "v1"}
        )
        assert config.version == "v3"

    def test_none_overrides_ignored(self):
        config = load_config(
            {**REQUIRED, "version": None}, environ={"VERSION": "v1"}
        )
        assert config.version == "v1"

    def test_default_package_json_version(self, tmp_path):
        """Test ./package.json supplies the version when nothing else does."""
        (tmp_path / "package.json").write_text(json.dumps({"version": "1.2.3"}))

        config = load_config(REQUIRED, environ={})

        assert config.version == "1.2.3"

    def test_environment_beats_metadata(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"version": "1.2.3"}))

        config = load_config(REQUIRED, environ={"VERSION": "latest"})

        assert config.version == "latest"

    def test_metadata_section(self, tmp_path):
        path = tmp_path / "binfetch.yaml"
        path.write_text(
            "version: 2.0.0\n"
            "binfetch:\n"
            "  owner: andrioid\n"
            "  repo: md-social\n"
            "  tool: mds\n"
            "  install_dir: vendor/bin\n"
        )

        config = load_config(environ={}, metadata_path=path)

        assert config.tool_name == "mds"
        assert config.install_dir == Path("vendor/bin")
        assert config.version == "2.0.0"

    def test_numeric_yaml_version_kept_as_text(self, tmp_path):
        path = tmp_path / "meta.yaml"
        path.write_text("version: 1.5\n")

        config = load_config(REQUIRED, environ={}, metadata_path=path)

        assert config.version == "1.5"

    def test_explicit_metadata_must_exist(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(REQUIRED, environ={}, metadata_path=tmp_path / "nope.json")

    def test_unknown_setting(self, tmp_path):
        path = tmp_path / "meta.yaml"
        path.write_text("binfetch:\n  owner: o\n  repo: r\n")

        with pytest.raises(ConfigurationError, match="Unknown settings"):
            load_config({"colour": "blue"}, environ={}, metadata_path=path)
