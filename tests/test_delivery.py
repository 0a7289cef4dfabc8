"""Tests for the delivery service."""

import io
from pathlib import Path

import pytest

from conftest import read_archive
from drivethru.archive.sinks import DigestSink
from drivethru.core.config import build_menu
from drivethru.core.exceptions import (
    InvalidRequestError,
    SourceNotFoundError,
    UnknownArtifactError,
)
from drivethru.core.models import Menu
from drivethru.delivery import DeliveryService


@pytest.fixture
def service(menu: Menu) -> DeliveryService:
    return DeliveryService(menu)


class TestResolve:
    """Tests for DeliveryService.resolve."""

    def test_platform_artifact(self, service: DeliveryService, build_root: Path) -> None:
        artifact = service.resolve("agent", "linux", "x86_64")

        assert artifact.profile.name == "agent"
        assert artifact.arch_name == "amd64"
        assert artifact.source_path == build_root / "builds" / "agent" / "linux" / "amd64"
        assert artifact.archive_filename == "agent.tar.gz"

    def test_universal_artifact(self, service: DeliveryService, build_root: Path) -> None:
        artifact = service.resolve("tools")
        assert artifact.source_path == build_root / "builds" / "tools"

    def test_unknown(self, service: DeliveryService) -> None:
        with pytest.raises(UnknownArtifactError):
            service.resolve("nope", "linux", "amd64")

    def test_missing_qualifiers(self, service: DeliveryService) -> None:
        with pytest.raises(InvalidRequestError):
            service.resolve("agent")


class TestWriteArchive:
    """Tests for archive output."""

    def test_write_archive(self, service: DeliveryService) -> None:
        sink = io.BytesIO()
        summary = service.write_archive(service.resolve("agent", "darwin", "arm64"), sink)

        assert summary.entries == 2
        assert set(read_archive(sink.getvalue())) == {"agent", "agent/agent"}

    def test_download_matches_hash(self, service: DeliveryService) -> None:
        """The pipe streams exactly the bytes the digest was computed over."""
        artifact = service.resolve("agent", "linux", "amd64")
        digest = service.compute_hash(artifact)

        received = DigestSink()
        for chunk in service.start_download(artifact):
            received.write(chunk)

        assert received.hexdigest() == digest


class TestComputeHash:
    """Tests for DeliveryService.compute_hash."""

    def test_stable(self, service: DeliveryService) -> None:
        artifact = service.resolve("tools")
        assert service.compute_hash(artifact) == service.compute_hash(artifact)

    def test_md5_length(self, service: DeliveryService) -> None:
        assert len(service.compute_hash(service.resolve("tools"))) == 32

    def test_configured_algorithm(self, menu_data: dict) -> None:
        menu_data["hash_algorithm"] = "sha256"
        service = DeliveryService(build_menu(menu_data))
        assert len(service.compute_hash(service.resolve("tools"))) == 64

    def test_content_change_changes_hash(
        self, service: DeliveryService, build_root: Path
    ) -> None:
        artifact = service.resolve("tools")
        before = service.compute_hash(artifact)
        (build_root / "builds" / "tools" / "NEW").write_text("new file\n")
        assert service.compute_hash(artifact) != before

    def test_missing_source(self, service: DeliveryService) -> None:
        with pytest.raises(SourceNotFoundError):
            service.compute_hash(service.resolve("ghost"))
