# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module assembles the flat list of discovered packages and a requirement tree into one dependency graph.

The graph is built copy-on-attach: every node of the result is a fresh copy of a discovered package, so the flat
collection is never modified, and a package required by several parents appears as an independent copy under each
of them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from sbomgraph.meta.package import Package
from sbomgraph.normalizer.identity import normalize_name

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class RequirementNode:
    """A node of a requirement tree, expressed with ecosystem-native names."""

    #: The ecosystem-native name of the package.
    name: str

    #: The direct requirements. None and an empty list both mean that there are no requirements.
    requires: list[RequirementNode] | None = None


def index_packages(packages: Iterable[Package]) -> dict[str, Package]:
    """Index packages by name. If two packages have the same name, the last one wins."""
    return {package.name: package for package in packages}


def assemble_graph(
    packages: Iterable[Package],
    tree: RequirementNode,
    name_normalizer: Callable[[str], str] = normalize_name,
) -> Package | None:
    """Build the dependency graph rooted at the package of the tree root.

    Every requirement is looked up by normalized name in the flat collection, at any depth. Requirements whose
    package was not discovered are dropped. A requirement that is already on the path from the root is attached
    but not expanded again, which bounds the recursion on cyclic trees.

    Adapters that build the tree from a dependency graph share one ``RequirementNode`` object between all the
    parents of a package. Such a shared node is expanded on its first occurrence in depth-first order only. Its
    later occurrences are attached without children, so the size of the result is linear in the number of edges.
    Distinct nodes with the same name, as found in explicit trees, are always expanded.

    Parameters
    ----------
    packages : Iterable[Package]
        The flat collection of discovered packages.
    tree : RequirementNode
        The requirement tree.
    name_normalizer : Callable[[str], str]
        The function that turns the ecosystem-native names of the tree into package names.

    Returns
    -------
    Package | None
        A copy of the root package with its ``packages`` populated, or None if the root was not discovered.
    """
    index = index_packages(packages)
    root_name = name_normalizer(tree.name)
    root_package = index.get(root_name)
    if root_package is None:
        logger.debug("The requirement tree root %s is not among the discovered packages.", tree.name)
        return None

    root = root_package.copy_for_attach()
    _attach_requirements(root, tree, index, (root_name,), name_normalizer, {id(tree)})
    return root


def _attach_requirements(
    parent: Package,
    node: RequirementNode,
    index: dict[str, Package],
    path: tuple[str, ...],
    name_normalizer: Callable[[str], str],
    expanded: set[int],
) -> None:
    if not node.requires:
        return

    for requirement in node.requires:
        child_name = name_normalizer(requirement.name)
        package = index.get(child_name)
        if package is None:
            logger.debug("Skipping %s required by %s: the package was not discovered.", requirement.name, node.name)
            continue

        child = package.copy_for_attach()
        parent.packages[child_name] = child

        if child_name in path:
            logger.debug("Dependency cycle detected: %s -> %s.", " -> ".join(path), child_name)
            continue

        # Requirement nodes shared by several parents are expanded on their first occurrence only.
        if requirement.requires and id(requirement) in expanded:
            logger.debug("The requirements of %s are already listed elsewhere in the graph.", requirement.name)
            continue
        expanded.add(id(requirement))

        _attach_requirements(child, requirement, index, path + (child_name,), name_normalizer, expanded)


def walk_graph(root: Package) -> Iterator[Package]:
    """Yield every node of the dependency graph in depth-first pre-order, starting with ``root``."""
    stack = [root]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(current.packages.values())))


def reachable_names(root: Package) -> set[str]:
    """Return the names of the packages that can be transitively reached from ``root``, including itself."""
    return {package.name for package in walk_graph(root)}


def find_unreachable(packages: Iterable[Package], root: Package) -> list[Package]:
    """Return the discovered packages that do not appear in the dependency graph."""
    reachable = reachable_names(root)
    return [package for package in packages if package.name not in reachable]
