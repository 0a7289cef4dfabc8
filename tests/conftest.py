"""Pytest configuration and fixtures."""

import io
import os
import tarfile
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from drivethru.core.config import build_menu
from drivethru.core.models import Menu

# Keep environment overrides from leaking into menus built by tests
for _var in ("DRIVETHRU_ROOT", "DRIVETHRU_URL", "DRIVETHRU_CONFIG"):
    os.environ.pop(_var, None)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def build_root(temp_dir: Path) -> Path:
    """
    Provide a build root with one platform-specific and one universal artifact.

    Layout:
        builds/agent/linux/amd64/agent
        builds/agent/linux/amd64/VERSION
        builds/agent/darwin/arm64/agent
        builds/tools/README
        builds/tools/bin/tool
    """
    root = temp_dir / "root"

    linux = root / "builds" / "agent" / "linux" / "amd64"
    linux.mkdir(parents=True)
    (linux / "agent").write_bytes(b"\x7fELF agent binary")
    (linux / "VERSION").write_text("1.2.3\n")

    darwin = root / "builds" / "agent" / "darwin" / "arm64"
    darwin.mkdir(parents=True)
    (darwin / "agent").write_bytes(b"\xcf\xfa\xed\xfe agent binary")

    tools = root / "builds" / "tools"
    (tools / "bin").mkdir(parents=True)
    (tools / "README").write_text("tools\n")
    (tools / "bin" / "tool").write_text("#!/bin/sh\necho tool\n")

    return root


@pytest.fixture
def menu_data(build_root: Path) -> dict:
    """Raw configuration matching build_root."""
    return {
        "url": "builds.example.com:2468",
        "root": str(build_root),
        "profiles": {
            "agent": {
                "source": "/builds/agent/",
                "destination": "/usr/local/bin/",
                "github": "https://github.com/example/agent/releases",
                "extra": ["tools"],
            },
            "tools": {
                "source": "builds/tools",
                "destination": "/opt/tools",
                "universal": True,
            },
            "ghost": {
                "source": "/builds/ghost/",
                "destination": "/usr/local/bin/",
                "universal": True,
            },
        },
    }


@pytest.fixture
def menu(menu_data: dict) -> Menu:
    """Provide a Menu over build_root."""
    return build_menu(menu_data)


def read_archive(data: bytes, compressed: bool = True) -> dict[str, tarfile.TarInfo]:
    """Index the members of an in-memory archive by name."""
    mode = "r:gz" if compressed else "r:"
    with tarfile.open(fileobj=io.BytesIO(data), mode=mode) as tar:
        return {member.name: member for member in tar.getmembers()}


def read_member(data: bytes, name: str, compressed: bool = True) -> bytes:
    """Return the contents of one member of an in-memory archive."""
    mode = "r:gz" if compressed else "r:"
    with tarfile.open(fileobj=io.BytesIO(data), mode=mode) as tar:
        extracted = tar.extractfile(name)
        assert extracted is not None
        return extracted.read()
