"""Tests for menu loading."""

from pathlib import Path

import pytest
import yaml

from drivethru.core.config import build_menu, get_config_path, load_menu
from drivethru.core.exceptions import ConfigurationError


@pytest.fixture
def config_file(temp_dir: Path, menu_data: dict) -> Path:
    """Write menu_data as a YAML file."""
    path = temp_dir / "drivethru.yaml"
    path.write_text(yaml.safe_dump(menu_data, sort_keys=False))
    return path


class TestLoadMenu:
    """Tests for load_menu."""

    def test_load_from_file(self, config_file: Path, build_root: Path) -> None:
        menu = load_menu(config_file)
        assert menu.url == "builds.example.com:2468"
        assert menu.root == str(build_root) + "/"
        assert menu.profile_names() == ["agent", "tools", "ghost"]

    def test_profiles_normalized(self, config_file: Path) -> None:
        menu = load_menu(config_file)
        tools = menu.get_profile("tools")
        assert tools.source == "/builds/tools/"
        assert tools.destination == "/opt/tools/"
        assert tools.universal is True
        assert menu.get_profile("agent").extra == ("tools",)

    def test_path_from_environment(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DRIVETHRU_CONFIG", str(config_file))
        assert get_config_path() == config_file
        assert load_menu().profile_names() == ["agent", "tools", "ghost"]

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read configuration") as exc_info:
            load_menu(temp_dir / "missing.yaml")
        assert exc_info.value.config_file == str(temp_dir / "missing.yaml")

    def test_malformed_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "bad.yaml"
        path.write_text("root: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Malformed YAML"):
            load_menu(path)


class TestBuildMenu:
    """Tests for build_menu."""

    def test_root_required(self) -> None:
        with pytest.raises(ConfigurationError, match="root is required"):
            build_menu({"profiles": {}})

    def test_empty_values_use_defaults(self) -> None:
        """Blank host and port behave as if unset."""
        menu = build_menu({"root": "/srv", "host": "", "port": None})
        assert menu.host == "localhost"
        assert menu.port == 2468
        assert menu.url == "localhost:2468"

    def test_invalid_port(self) -> None:
        with pytest.raises(ConfigurationError, match="port"):
            build_menu({"root": "/srv", "port": "not-a-port"})

    def test_invalid_host(self) -> None:
        with pytest.raises(ConfigurationError, match="host"):
            build_menu({"root": "/srv", "host": "bad host"})

    def test_profile_without_source(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid profile agent") as exc_info:
            build_menu({"root": "/srv", "profiles": {"agent": {"universal": True}}})
        assert exc_info.value.config_key == "profiles.agent"

    @pytest.mark.parametrize("settings", ["/builds/agent/", ["source", "a"], 42])
    def test_profile_settings_must_be_mapping(self, settings: object) -> None:
        with pytest.raises(ConfigurationError, match="settings must be a mapping") as exc_info:
            build_menu({"root": "/srv", "profiles": {"agent": settings}})
        assert exc_info.value.config_key == "profiles.agent"

    def test_profile_without_settings(self) -> None:
        """An empty profile section still reports the missing source."""
        with pytest.raises(ConfigurationError, match="Invalid profile agent"):
            build_menu({"root": "/srv", "profiles": {"agent": None}})

    def test_variable_length_hash_algorithm(self) -> None:
        with pytest.raises(ConfigurationError, match="no fixed digest length"):
            build_menu({"root": "/srv", "hash_algorithm": "shake_128"})

    def test_profiles_must_be_mapping(self) -> None:
        with pytest.raises(ConfigurationError, match="profiles must be a mapping"):
            build_menu({"root": "/srv", "profiles": ["agent"]})

    def test_unknown_extra(self) -> None:
        data = {"root": "/srv", "profiles": {"agent": {"source": "a", "extra": ["nope"]}}}
        with pytest.raises(ConfigurationError, match="unknown profiles"):
            build_menu(data)

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DRIVETHRU_ROOT", "/override")
        monkeypatch.setenv("DRIVETHRU_URL", "cdn.example.com")
        menu = build_menu({"root": "/srv"})
        assert menu.root == "/override/"
        assert menu.url == "cdn.example.com"

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            build_menu(["root"])  # type: ignore[arg-type]
