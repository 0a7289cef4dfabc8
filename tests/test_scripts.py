"""Tests for install script generation."""

import shutil
from pathlib import Path

import pytest

from drivethru.core.models import Menu
from drivethru.scripts import (
    ERROR_SCRIPT,
    ScriptTemplate,
    download_url,
    generate_script,
    render_error_script,
)


class TestScriptTemplate:
    """Tests for ScriptTemplate rendering."""

    def test_render(self) -> None:
        template = ScriptTemplate(
            name="t", body_template="echo {{who}} {{who}}", required_vars=["who"]
        )
        assert template.render({"who": "hi"}) == "echo hi hi"

    def test_substituted_values_not_rendered_again(self) -> None:
        """A value that looks like a placeholder is inserted literally."""
        template = ScriptTemplate(
            name="t", body_template="{{github}} -> {{destination}}", required_vars=[]
        )
        rendered = template.render({"github": "https://x/{{destination}}", "destination": "/opt/"})
        assert rendered == "https://x/{{destination}} -> /opt/"

    def test_unknown_placeholder_left_alone(self) -> None:
        template = ScriptTemplate(name="t", body_template="{{a}} {{b}}")
        assert template.render({"a": "1"}) == "1 {{b}}"

    def test_missing_variable(self) -> None:
        with pytest.raises(ValueError, match="who"):
            ScriptTemplate(name="t", body_template="{{who}}", required_vars=["who"]).render({})

    def test_error_script_requires_name(self) -> None:
        with pytest.raises(ValueError):
            ERROR_SCRIPT.render({})


class TestDownloadUrl:
    """Tests for download_url."""

    def test_platform(self, menu: Menu) -> None:
        assert (
            download_url(menu, menu.get_profile("agent"))
            == "http://builds.example.com:2468/download/agent/$OS/$ARCH/"
        )

    def test_universal(self, menu: Menu) -> None:
        assert (
            download_url(menu, menu.get_profile("tools"))
            == "http://builds.example.com:2468/download/tools/"
        )


class TestGenerateScript:
    """Tests for generate_script."""

    def test_platform_script(self, menu: Menu) -> None:
        script = generate_script(menu, "agent")

        assert script.startswith("#!/bin/sh\n")
        assert "OS=$(uname)\nARCH=$(uname -m)\n" in script
        assert 'URL="http://builds.example.com:2468/download/agent/$OS/$ARCH/"' in script
        assert 'DEST="/usr/local/bin/"' in script
        assert "https://github.com/example/agent/releases" in script
        assert "{{" not in script

    def test_chain_installs_extras(self, menu: Menu) -> None:
        script = generate_script(menu, "agent")
        assert "        curl -s http://builds.example.com:2468/get/tools | sh\n" in script
        assert script.index("get/tools") < script.index('echo "Done!"')

    def test_universal_script(self, menu: Menu) -> None:
        script = generate_script(menu, "tools")

        assert "uname" not in script
        assert 'URL="http://builds.example.com:2468/download/tools/"' in script
        assert 'DEST="/opt/tools/"' in script
        assert "curl -s" not in script

    def test_unknown_artifact(self, menu: Menu) -> None:
        script = generate_script(menu, "nope")
        assert script == render_error_script("nope")
        assert "error building your script for the download of nope" in script
        assert script.rstrip().endswith("exit 1")

    def test_missing_source(self, menu: Menu) -> None:
        assert generate_script(menu, "ghost") == render_error_script("ghost")

    def test_source_removed_after_load(self, menu: Menu, build_root: Path) -> None:
        shutil.rmtree(build_root / "builds" / "tools")
        assert generate_script(menu, "tools") == render_error_script("tools")
