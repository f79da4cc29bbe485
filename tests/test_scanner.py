# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for the scanner that runs every ecosystem adapter over a project."""

from pathlib import Path

import pytest
import requests

from sbomgraph.ecosystems.base import EcosystemAdapter
from sbomgraph.ecosystems.composer import Composer
from sbomgraph.errors import CommandError, ConfigurationError, SBOMGraphError
from sbomgraph.graph.assembler import RequirementNode
from sbomgraph.meta.package import Package
from sbomgraph.scanner import Scanner


class MockAdapter(EcosystemAdapter):
    """An adapter that is detected by a manifest file and fails with a given error, if any."""

    def __init__(self, name: str, error: Exception | None = None) -> None:
        super().__init__(name=name, purl_type="generic", manifest_files=[f"{name}.lock"])
        self.error = error

    def collect_packages(self, repo_path: str) -> list[Package]:
        if self.error:
            raise self.error
        return [Package(f"{self.name}-app", root=True), Package("dep")]

    def get_requirement_tree(self, repo_path: str, packages: list[Package]) -> RequirementNode | None:
        return None


class InvalidConfigAdapter(MockAdapter):
    """An adapter whose configuration cannot be loaded."""

    def load_defaults(self) -> None:
        raise ConfigurationError("invalid value")


@pytest.fixture(name="project")
def project(tmp_path: Path) -> Path:
    """Create a project that uses the ``first`` and ``second`` ecosystems."""
    for name in ("first", "second"):
        tmp_path.joinpath(f"{name}.lock").write_text("", encoding="utf-8")
    return tmp_path


def test_scan_detected_ecosystems(project: Path) -> None:
    """Test that only the detected ecosystems are scanned."""
    scanner = Scanner([MockAdapter("first"), MockAdapter("second"), MockAdapter("third")])

    graphs = scanner.scan(str(project))

    assert list(graphs) == ["first", "second"]
    assert graphs["first"].name == "first-app"
    assert list(graphs["first"].packages) == ["dep"]


@pytest.mark.parametrize(
    "error",
    [
        CommandError("cargo: command not found"),
        SBOMGraphError("unexpected"),
        OSError("permission denied"),
        requests.exceptions.ConnectionError("refused"),
    ],
)
def test_scan_failure_is_isolated(project: Path, error: Exception) -> None:
    """Test that a failing ecosystem does not prevent the others from being scanned."""
    scanner = Scanner([MockAdapter("first", error), MockAdapter("second")])

    graphs = scanner.scan(str(project))

    assert list(graphs) == ["second"]


def test_scan_undecodable_lock_file_is_isolated(project: Path) -> None:
    """Test that a lock file which is not UTF-8 only fails its own ecosystem."""
    project.joinpath("composer.json").write_text('{"name": "acme/webapp"}', encoding="utf-8")
    project.joinpath("composer.lock").write_bytes(b'{"packages": [{"name": "\xff"}]}')
    scanner = Scanner([Composer(), MockAdapter("second")])

    graphs = scanner.scan(str(project))

    assert list(graphs) == ["second"]


def test_scan_unexpected_error_propagates(project: Path) -> None:
    """Test that programming errors are not hidden."""
    scanner = Scanner([MockAdapter("first", KeyError("name"))])

    with pytest.raises(KeyError):
        scanner.scan(str(project))


def test_scan_selected_ecosystems(project: Path) -> None:
    """Test that the scan can be restricted to some ecosystems."""
    scanner = Scanner([MockAdapter("first"), MockAdapter("second")])

    assert list(scanner.scan(str(project), ["second", "unknown"])) == ["second"]
    assert list(scanner.scan(str(project), [])) == ["first", "second"]


def test_scan_nothing_detected(tmp_path: Path) -> None:
    """Test scanning a project that uses no supported ecosystem."""
    assert not Scanner([MockAdapter("first")]).scan(str(tmp_path))


def test_load_defaults() -> None:
    """Test loading the configuration of the adapters."""
    assert Scanner().load_defaults()
    assert not Scanner([MockAdapter("first"), InvalidConfigAdapter("second")]).load_defaults()


def test_default_ecosystems() -> None:
    """Test that every supported ecosystem is used by default."""
    assert [ecosystem.name for ecosystem in Scanner().ecosystems] == ["cargo", "composer", "go", "pip"]
