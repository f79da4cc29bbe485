# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for the Composer ecosystem adapter."""

import hashlib
import shutil
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from sbomgraph.ecosystems.composer import Composer, LockPackage
from sbomgraph.errors import CommandError, ParseError, RootProjectError
from sbomgraph.meta.package import Checksum, HashAlgorithm, Supplier, SupplierType


@pytest.fixture(name="composer_project")
def composer_project(resources_dir: Path, tmp_path: Path) -> Path:
    """Create a Composer project directory from the test resources."""
    for file_name in ["composer.json", "composer.lock", "package.json"]:
        shutil.copy(resources_dir.joinpath("composer", file_name), tmp_path)
    return tmp_path


@pytest.fixture(name="composer")
def composer_adapter(resources_dir: Path) -> Iterator[Composer]:
    """Create a Composer adapter whose commands return the recorded outputs."""
    outputs = {
        "composer show -s -f json": resources_dir.joinpath("composer", "show_self.json").read_text(encoding="utf-8"),
        "composer show -t -f json": resources_dir.joinpath("composer", "show_tree.json").read_text(encoding="utf-8"),
    }
    composer = Composer()
    composer.load_defaults()
    with patch.object(composer, "run", side_effect=lambda command, _: outputs[command]):
        yield composer


def test_is_detected(composer: Composer, composer_project: Path, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Test detecting a Composer project by its manifest."""
    assert composer.is_detected(str(composer_project))
    assert not composer.is_detected(str(tmp_path_factory.mktemp("empty")))


def test_root_package(composer: Composer, composer_project: Path) -> None:
    """Test building the root package from the project files."""
    root = composer.collect_packages(str(composer_project))[0]

    assert root.root
    assert root.name == "webapp"
    assert root.version == "2.1.0"
    assert root.package_url == "https://github.com/acme/webapp.git"
    assert root.purl == "pkg:composer/acme/webapp@2.1.0"
    assert root.supplier == Supplier("Jane Doe", "jane@acme.example.com", SupplierType.PERSON)
    expected_digest = hashlib.sha1(root.package_url.encode()).hexdigest()  # nosec B324
    assert root.checksum == Checksum(HashAlgorithm.SHA1, expected_digest)


def test_lock_packages(composer: Composer, composer_project: Path) -> None:
    """Test converting the packages of the lock file, including the dev packages."""
    packages = {package.name: package for package in composer.collect_packages(str(composer_project))[1:]}

    assert set(packages) == {"monolog", "log", "console", "phpunit"}

    log = packages["log"]
    assert log.checksum == Checksum(HashAlgorithm.SHA1, "4bc6cf6e4bf7bc4cbe1e4d9b2f7c5b1f0c3f4d2a")
    assert log.supplier == Supplier("PHP-FIG", "", SupplierType.ORGANIZATION)
    assert log.package_url == "https://github.com/php-fig/log.git"
    assert log.local_path == "./vendor/psr/log"
    assert log.license_declared == "MIT"

    console = packages["console"]
    assert console.version == "6.4.1"
    assert console.package_url == "https://github.com/symfony/console.git"
    assert console.download_location.startswith("https://api.github.com/repos/symfony/console/zipball/")
    assert console.supplier == Supplier("console", "", SupplierType.ORGANIZATION)
    assert console.checksum.value == hashlib.sha1(console.package_url.encode()).hexdigest()  # nosec B324
    assert console.purl == "pkg:composer/symfony/console@6.4.1"

    monolog = packages["monolog"]
    assert monolog.supplier.type == SupplierType.PERSON
    assert monolog.download_location == "https://github.com/Seldaek/monolog.git"


def test_build_graph(composer: Composer, composer_project: Path) -> None:
    """Test assembling the dependency graph from the tree of composer show."""
    root = composer.build_graph(str(composer_project))

    assert set(root.packages) == {"monolog", "phpunit", "console"}
    assert list(root.packages["monolog"].packages) == ["log"]
    assert list(root.packages["console"].packages) == ["log"]
    assert root.packages["monolog"].packages["log"] is not root.packages["console"].packages["log"]


def test_missing_lock_file(composer: Composer, tmp_path: Path) -> None:
    """Test that a project without a lock file cannot be scanned."""
    with pytest.raises(OSError):
        composer.collect_packages(str(tmp_path))


def test_command_failure(composer_project: Path) -> None:
    """Test that a failing composer command is reported."""
    composer = Composer()
    with patch.object(composer, "run", side_effect=CommandError("composer: not found")):
        with pytest.raises(CommandError):
            composer.build_graph(str(composer_project))


def test_lock_file_not_utf8(composer: Composer, composer_project: Path) -> None:
    """Test that a lock file that cannot be decoded is reported as a parse error."""
    composer_project.joinpath("composer.lock").write_bytes(b'{"packages": [{"name": "\xff"}]}')
    with pytest.raises(ParseError):
        composer.collect_packages(str(composer_project))


@pytest.mark.parametrize(
    "lock_content",
    [
        '{"packages": [{"version": "1.0.0"}]}',
        '{"packages": [], "packages-dev": [{"name": null, "version": "1.0.0"}]}',
    ],
)
def test_lock_package_without_name(composer: Composer, composer_project: Path, lock_content: str) -> None:
    """Test that a lock entry without a name is reported as a parse error."""
    composer_project.joinpath("composer.lock").write_text(lock_content, encoding="utf-8")
    with pytest.raises(ParseError):
        composer.collect_packages(str(composer_project))


def test_project_without_name(composer_project: Path) -> None:
    """Test that the root project must have a name."""
    composer = Composer()
    with patch.object(composer, "run", return_value='{"versions": ["1.0.0"]}'):
        with pytest.raises(RootProjectError):
            composer.collect_packages(str(composer_project))


@pytest.mark.parametrize(
    ("authors", "expected"),
    [
        ([], Supplier("console", "", SupplierType.ORGANIZATION)),
        ([{"name": "ACME"}], Supplier("ACME", "", SupplierType.ORGANIZATION)),
        ([{"name": "Jane", "email": "jane@example.com"}], Supplier("Jane", "jane@example.com", SupplierType.PERSON)),
    ],
)
def test_get_supplier(authors: list[dict], expected: Supplier) -> None:
    """Test the supplier of a locked package."""
    lock_package = LockPackage.from_json({"name": "symfony/console", "version": "1.0", "authors": authors})
    assert Composer.get_supplier(lock_package) == expected
