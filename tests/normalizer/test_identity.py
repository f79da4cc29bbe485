# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for the identity and version normalizer."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sbomgraph.normalizer.identity import normalize_name, normalize_version


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("symfony/console", "console"),
        ("serde", "serde"),
        ("", ""),
        ("a/b/c", "b"),
        ("vendor/", ""),
    ],
)
def test_normalize_name(name: str, expected: str) -> None:
    """Test that the namespace of a name is dropped."""
    assert normalize_name(name) == expected


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("v1.2.3", "1.2.3"),
        ("1.2.3", "1.2.3"),
        ("v", ""),
        ("", ""),
        ("dev-main", "dev-main"),
        # Every "v" splits the version, so a later one truncates it.
        ("v1.0.0-vNext", "1.0.0-"),
        ("1.0.0-vNext", "1.0.0-vNext"),
    ],
)
def test_normalize_version(version: str, expected: str) -> None:
    """Test the normalization of raw version strings."""
    assert normalize_version(version) == expected


@given(st.text(alphabet=st.characters(exclude_characters="/")))
def test_normalize_name_without_namespace_is_identity(name: str) -> None:
    """Test that a name without a namespace is returned unchanged."""
    assert normalize_name(name) == name


@given(st.text(alphabet=st.characters(exclude_characters="v")))
def test_normalize_version_without_prefix_is_identity(version: str) -> None:
    """Test that a version without any "v" is returned unchanged."""
    assert normalize_version(version) == version


@given(
    st.text(alphabet=st.characters(exclude_characters="/")),
    st.text(alphabet=st.characters(exclude_characters="/")),
)
def test_normalize_name_idempotent(namespace: str, name: str) -> None:
    """Test that normalizing a normalized name does not change it."""
    normalized = normalize_name(f"{namespace}/{name}")
    assert normalized == name
    assert normalize_name(normalized) == normalized


@given(st.text())
def test_normalize_version_idempotent(version: str) -> None:
    """Test that normalizing a normalized version does not change it."""
    normalized = normalize_version(version)
    assert normalize_version(normalized) == normalized
