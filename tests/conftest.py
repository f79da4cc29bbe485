# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Fixtures for tests."""
import json
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import pytest

from sbomgraph.config.defaults import defaults, load_defaults

# We need to pass fixture names as arguments to maintain an order.
# pylint: disable=redefined-outer-name


@pytest.fixture()
def test_dir() -> Path:
    """Set the root test_dir path.

    Returns
    -------
    Path
        The root path to the test directory.
    """
    return Path(__file__).parent


@pytest.fixture()
def resources_dir(test_dir: Path) -> Path:
    """Return the directory of the shared test resources."""
    return test_dir.joinpath("resources")


@pytest.fixture(autouse=True)
def setup_test() -> NoReturn:  # type: ignore
    """Set up the necessary values for the tests.

    Returns
    -------
    NoReturn
    """
    # Load values from the bundled defaults.ini.
    load_defaults("")
    yield
    defaults.clear()


@pytest.fixture()
def load_resource(resources_dir: Path) -> Callable[[str], str]:
    """Return a function that reads a test resource as text."""

    def _load(file_name: str) -> str:
        return resources_dir.joinpath(file_name).read_text(encoding="utf-8")

    return _load


@pytest.fixture()
def load_json_resource(load_resource: Callable[[str], str]) -> Callable[[str], dict | list]:
    """Return a function that reads and decodes a JSON test resource."""

    def _load(file_name: str) -> dict | list:
        decoded: dict | list = json.loads(load_resource(file_name))
        return decoded

    return _load


@pytest.fixture()
def write_config(tmp_path: Path) -> Callable[[str], str]:
    """Return a function that writes a user defaults.ini and loads it on top of the bundled one."""

    def _write(content: str) -> str:
        config_path = tmp_path.joinpath("test_config.ini")
        config_path.write_text(content, encoding="utf-8")
        assert load_defaults(str(config_path)) is True
        return str(config_path)

    return _write
