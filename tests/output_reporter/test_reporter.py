# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""
This module contains tests for the JSON reporter.
"""

import json
import os
from pathlib import Path

import pytest

from sbomgraph.meta.package import Checksum, HashAlgorithm, Package, Supplier, SupplierType
from sbomgraph.output_reporter.reporter import JSONReporter


@pytest.fixture(name="graphs")
def graphs() -> dict[str, Package]:
    """Create the dependency graphs of two ecosystems."""
    root = Package(
        name="app",
        version="1.0.0",
        root=True,
        checksum=Checksum(HashAlgorithm.SHA1, "da39a3ee5e6b4b0d3255bfef95601890afd80709"),
        supplier=Supplier("acme", type=SupplierType.ORGANIZATION),
    )
    root.packages["requests"] = Package(name="requests", version="2.31.0", license_declared="Apache-2.0")
    return {"pip": root, "go": Package(name="example.com/app", root=True)}


def test_gen_json_reports(graphs: dict[str, Package], tmp_path: Path) -> None:
    """Test that one JSON file is written per ecosystem."""
    written = JSONReporter().generate(str(tmp_path), graphs)

    assert written == [
        os.path.join(tmp_path, "pip.dependencies.json"),
        os.path.join(tmp_path, "go.dependencies.json"),
    ]
    with open(written[0], encoding="utf-8") as file:
        content = json.load(file)
    assert content == graphs["pip"].to_dict()
    assert content["checksum"] == {"algorithm": "SHA1", "value": "da39a3ee5e6b4b0d3255bfef95601890afd80709"}
    assert content["supplier"] == {"name": "acme", "email": "", "type": "Organization"}
    assert content["packages"]["requests"]["license_declared"] == "Apache-2.0"


def test_gen_json_reports_missing_dir(graphs: dict[str, Package], tmp_path: Path) -> None:
    """Test that a graph that cannot be written is not reported as written."""
    assert not JSONReporter().generate(str(tmp_path.joinpath("missing")), graphs)
