# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for the locator resolver."""

import pytest

from sbomgraph.normalizer.locator import canonicalize_locator, is_github_url, remove_url_protocol, resolve_locator


@pytest.mark.parametrize(
    ("locator", "expected"),
    [
        ("github.com/org/pkg", "https://github.com/org/pkg.git"),
        ("https://github.com/org/pkg", "https://github.com/org/pkg.git"),
        ("https://github.com/org/pkg/", "https://github.com/org/pkg.git"),
        ("https://github.com/org/pkg.git", "https://github.com/org/pkg.git"),
        ("https://www.github.com/org/pkg", "https://www.github.com/org/pkg.git"),
        ("https://example.com/pkg", "https://example.com/pkg"),
        ("http://example.com/pkg", "http://example.com/pkg"),
        ("example.com/pkg", "https://example.com/pkg"),
        ("", ""),
    ],
)
def test_canonicalize_locator(locator: str, expected: str) -> None:
    """Test that locators are protocol-qualified and GitHub locators end in .git."""
    assert canonicalize_locator(locator) == expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/org/pkg", True),
        ("https://GitHub.com/org/pkg", True),
        ("https://gitlab.com/org/pkg", False),
        ("https://example.com/github.com/pkg", False),
        ("not a url", False),
    ],
)
def test_is_github_url(url: str, expected: bool) -> None:
    """Test the detection of GitHub URLs by host name."""
    assert is_github_url(url) is expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/org/pkg", "github.com/org/pkg"),
        ("git+https://github.com/org/pkg", "github.com/org/pkg"),
        ("github.com/org/pkg", "github.com/org/pkg"),
    ],
)
def test_remove_url_protocol(url: str, expected: str) -> None:
    """Test removing the scheme of a URL."""
    assert remove_url_protocol(url) == expected


@pytest.mark.parametrize(
    ("repository", "homepage", "name", "expected"),
    [
        ("https://github.com/org/pkg", "https://pkg.org", "org/pkg", "https://github.com/org/pkg.git"),
        ("", "https://pkg.org", "org/pkg", "https://pkg.org"),
        ("", "", "org/pkg", "https://github.com/org/pkg.git"),
        ("  ", "https://pkg.org", "org/pkg", "https://pkg.org"),
        ("", "", "", ""),
    ],
)
def test_resolve_locator_priority(repository: str, homepage: str, name: str, expected: str) -> None:
    """Test that the repository is preferred over the homepage and the synthesized GitHub location."""
    assert resolve_locator(repository, homepage, name) == expected
