# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for the Go modules ecosystem adapter."""

import shutil
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from sbomgraph.ecosystems.gomod import GoMod, GoModule, iter_json_stream, parse_module_graph
from sbomgraph.errors import ParseError, RootProjectError
from sbomgraph.meta.package import SupplierType


@pytest.fixture(name="go_project")
def go_project(resources_dir: Path, tmp_path: Path) -> Path:
    """Create a Go module directory from the test resources."""
    shutil.copy(resources_dir.joinpath("go", "go.mod"), tmp_path)
    return tmp_path


@pytest.fixture(name="gomod")
def gomod_adapter(resources_dir: Path) -> Iterator[GoMod]:
    """Create a Go adapter whose commands return the recorded outputs."""
    outputs = {
        "go list -m -json all": resources_dir.joinpath("go", "go_list.json").read_text(encoding="utf-8"),
        "go mod graph": resources_dir.joinpath("go", "go_mod_graph.txt").read_text(encoding="utf-8"),
    }
    gomod = GoMod()
    gomod.load_defaults()
    with patch.object(gomod, "run", side_effect=lambda command, _: outputs[command]):
        yield gomod


def test_iter_json_stream() -> None:
    """Test decoding a stream of concatenated JSON objects."""
    assert list(iter_json_stream('{"Path": "a"}\n{"Path": "b"}{"Path": "c"}\n\n')) == [
        {"Path": "a"},
        {"Path": "b"},
        {"Path": "c"},
    ]
    assert not list(iter_json_stream(""))


def test_iter_json_stream_malformed() -> None:
    """Test that a truncated stream is reported."""
    with pytest.raises(ParseError):
        list(iter_json_stream('{"Path": "a"}\n{"Path": '))


def test_replace_overrides_module() -> None:
    """Test that a replace directive overrides the path, version and directory."""
    module = GoModule.from_json(
        {"Path": "github.com/old/logger", "Version": "v1.0.0", "Replace": {"Path": "../logger", "Dir": "/work/logger"}}
    )
    assert module.path == "../logger"
    assert module.version == "v1.0.0"
    assert module.dir == "/work/logger"
    assert module.original_path == "github.com/old/logger"


def test_parse_module_graph() -> None:
    """Test reading the edges of go mod graph without their versions."""
    edges = parse_module_graph("a b@v1\na@v0 b@v2\nb@v1 c@v1\nmalformed\n", {"c": "d"})
    assert edges == {"a": ["b"], "b": ["d"]}


def test_collect_packages(gomod: GoMod, go_project: Path) -> None:
    """Test converting the modules of the build list."""
    packages = gomod.collect_packages(str(go_project))

    root = packages[0]
    assert root.root
    assert root.name == "example.com/app"
    assert root.version == ""
    assert root.purl == "pkg:golang/example.com/app"
    assert root.package_url == "https://example.com/app"

    by_name = {package.name: package for package in packages}
    assert set(by_name) == {"example.com/app", "github.com/google/uuid", "golang.org/x/text", "github.com/new/logger"}

    uuid = by_name["github.com/google/uuid"]
    assert uuid.version == "1.4.0"
    assert uuid.purl == "pkg:golang/github.com/google/uuid@v1.4.0"
    assert uuid.package_url == "https://github.com/google/uuid.git"
    assert uuid.supplier.name == "github.com/google"
    assert uuid.supplier.type == SupplierType.ORGANIZATION
    assert uuid.checksum.value

    logger = by_name["github.com/new/logger"]
    assert logger.version == "1.2.0"
    assert logger.local_path == "/home/user/go/pkg/mod/github.com/new/logger@v1.2.0"


def test_build_graph(gomod: GoMod, go_project: Path) -> None:
    """Test assembling the module graph, including replaced modules and modules outside the build list."""
    root = gomod.build_graph(str(go_project))

    assert set(root.packages) == {"github.com/google/uuid", "github.com/new/logger", "golang.org/x/text"}
    assert list(root.packages["github.com/new/logger"].packages) == ["golang.org/x/text"]
    # golang.org/x/tools is not in the build list, so it is dropped.
    assert root.packages["golang.org/x/text"].packages == {}


def test_missing_main_module(go_project: Path) -> None:
    """Test that the main module must be reported."""
    gomod = GoMod()
    with patch.object(gomod, "run", return_value='{"Path": "golang.org/x/text", "Version": "v0.14.0"}'):
        with pytest.raises(RootProjectError):
            gomod.collect_packages(str(go_project))
