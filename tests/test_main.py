# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Simple tests for the main method."""

import os
from importlib import metadata as importlib_metadata
from pathlib import Path
from unittest.mock import patch

import pytest

from sbomgraph.__main__ import main
from sbomgraph.config.global_config import global_config
from sbomgraph.meta.package import Package
from sbomgraph.scanner import Scanner


@pytest.mark.parametrize(
    ("flag"),
    [
        "--version",
        "-V",
    ],
)
def test_version(capsys: pytest.CaptureFixture, flag: str) -> None:
    """Test the ``--version/-V`` flag.

    Stdout format should be correct and exit code should be 0.
    """
    with pytest.raises(SystemExit) as exc_info:
        main([flag])
    out, err = capsys.readouterr()

    # Test that we are indeed outputting sbomgraph version.
    assert out == f"sbomgraph {importlib_metadata.version('sbomgraph')}\n"
    assert err == ""
    assert exc_info.value.code == 0


def test_no_action() -> None:
    """Test that the help is printed when no action is given."""
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == os.EX_USAGE


def test_dump_defaults(tmp_path: Path) -> None:
    """Test dumping the defaults.ini file to the output directory."""
    output_dir = tmp_path.joinpath("output")
    with pytest.raises(SystemExit) as exc_info:
        main(["-o", str(output_dir), "dump-defaults"])

    assert exc_info.value.code == os.EX_OK
    assert output_dir.joinpath("defaults.ini").is_file()
    assert output_dir.joinpath("debug.log").is_file()


def test_invalid_defaults_path(tmp_path: Path) -> None:
    """Test that a missing user configuration stops sbomgraph."""
    with pytest.raises(SystemExit) as exc_info:
        main(["-o", str(tmp_path), "-dp", str(tmp_path.joinpath("missing.ini")), "scan"])
    assert exc_info.value.code == os.EX_NOINPUT


def test_scan_missing_project(tmp_path: Path) -> None:
    """Test scanning a directory that does not exist."""
    with pytest.raises(SystemExit) as exc_info:
        main(["-o", str(tmp_path), "scan", "-rp", str(tmp_path.joinpath("missing"))])
    assert exc_info.value.code == os.EX_NOINPUT


def test_scan_no_ecosystem(tmp_path: Path) -> None:
    """Test scanning a project that uses no supported ecosystem."""
    project = tmp_path.joinpath("project")
    project.mkdir()
    with pytest.raises(SystemExit) as exc_info:
        main(["-o", str(tmp_path.joinpath("output")), "scan", "-rp", str(project)])
    assert exc_info.value.code == os.EX_DATAERR


def test_scan_writes_graphs(tmp_path: Path) -> None:
    """Test that the graph of every scanned ecosystem is written to the output directory."""
    output_dir = tmp_path.joinpath("output")
    graphs = {"pip": Package(name="app", root=True)}
    with patch.object(Scanner, "scan", return_value=graphs) as scan:
        with pytest.raises(SystemExit) as exc_info:
            main(["-o", str(output_dir), "scan", "-rp", str(tmp_path), "-e", "pip"])

    assert exc_info.value.code == os.EX_OK
    scan.assert_called_once_with(str(tmp_path), ["pip"])
    assert output_dir.joinpath("pip.dependencies.json").is_file()
    assert global_config.output_path == str(output_dir)


def test_scan_unknown_ecosystem(tmp_path: Path) -> None:
    """Test that only supported ecosystems can be selected."""
    with pytest.raises(SystemExit) as exc_info:
        main(["-o", str(tmp_path), "scan", "-e", "maven"])
    assert exc_info.value.code == 2
