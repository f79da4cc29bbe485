# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the Go modules ecosystem adapter.

Go module paths already are unique identifiers (``github.com/org/repo``), so the packages of this ecosystem are
named by their full module path.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass

from sbomgraph.config.defaults import defaults
from sbomgraph.ecosystems.base import EcosystemAdapter
from sbomgraph.errors import ParseError, RootProjectError
from sbomgraph.graph.assembler import RequirementNode
from sbomgraph.json_tools import json_get_str
from sbomgraph.meta.license import LicenseDetector, apply_license
from sbomgraph.meta.package import Package, Supplier, SupplierType
from sbomgraph.normalizer.checksum import resolve_checksum
from sbomgraph.normalizer.identity import normalize_version
from sbomgraph.normalizer.locator import resolve_locator

logger: logging.Logger = logging.getLogger(__name__)


def module_name(path: str) -> str:
    """Return the package name of a module, which is its path."""
    return path.strip()


def strip_module_version(module: str) -> str:
    """Remove the ``@version`` suffix of a ``go mod graph`` entry.

    Examples
    --------
    >>> strip_module_version("golang.org/x/text@v0.3.7")
    'golang.org/x/text'
    >>> strip_module_version("example.com/app")
    'example.com/app'
    """
    return module.split("@", 1)[0]


@dataclass(frozen=True)
class GoModuleReplace:
    """The replacement of a module declared by a ``replace`` directive."""

    path: str = ""
    version: str = ""
    dir: str = ""
    go_mod: str = ""
    go_version: str = ""

    @classmethod
    def from_json(cls, entry: dict) -> GoModuleReplace:
        """Build the replacement from its JSON object."""
        return cls(
            path=json_get_str(entry, "Path"),
            version=json_get_str(entry, "Version"),
            dir=json_get_str(entry, "Dir"),
            go_mod=json_get_str(entry, "GoMod"),
            go_version=json_get_str(entry, "GoVersion"),
        )


@dataclass(frozen=True)
class GoModule:
    """A module reported by ``go list -m -json``."""

    path: str
    version: str = ""
    main: bool = False
    indirect: bool = False
    dir: str = ""
    go_mod: str = ""
    go_version: str = ""
    replace: GoModuleReplace | None = None

    #: The path declared in go.mod, before any replacement.
    original_path: str = ""

    @classmethod
    def from_json(cls, entry: dict) -> GoModule:
        """Build the module from its JSON object. A replacement overrides the path, version and directory."""
        replace = entry.get("Replace")
        module = cls(
            path=json_get_str(entry, "Path"),
            version=json_get_str(entry, "Version"),
            main=bool(entry.get("Main", False)),
            indirect=bool(entry.get("Indirect", False)),
            dir=json_get_str(entry, "Dir"),
            go_mod=json_get_str(entry, "GoMod"),
            go_version=json_get_str(entry, "GoVersion"),
            replace=GoModuleReplace.from_json(replace) if isinstance(replace, dict) else None,
        )
        return module.resolve_replace()

    def resolve_replace(self) -> GoModule:
        """Return the module with its replacement applied."""
        if self.replace is None:
            return self
        return GoModule(
            path=self.replace.path or self.path,
            version=self.replace.version or self.version,
            main=self.main,
            indirect=self.indirect,
            dir=self.replace.dir or self.dir,
            go_mod=self.replace.go_mod or self.go_mod,
            go_version=self.replace.go_version or self.go_version,
            replace=self.replace,
            original_path=self.path,
        )


def iter_json_stream(content: str) -> Iterator[dict]:
    """Yield the objects of a stream of concatenated JSON documents, as printed by ``go list -json``.

    Raises
    ------
    ParseError
        If the stream is malformed.
    """
    decoder = json.JSONDecoder()
    index = 0
    while True:
        while index < len(content) and content[index].isspace():
            index += 1
        if index >= len(content):
            return
        try:
            document, index = decoder.raw_decode(content, index)
        except json.JSONDecodeError as error:
            raise ParseError(f"Unable to decode the go list output: {error}") from error
        if isinstance(document, dict):
            yield document


def parse_module_graph(content: str, replaced: dict[str, str] | None = None) -> dict[str, list[str]]:
    """Return the edges of ``go mod graph``, keyed by module path.

    Parameters
    ----------
    content : str
        The command output, one ``parent@version child@version`` edge per line.
    replaced : dict[str, str] | None
        The replacement path of every replaced module.
    """
    replaced = replaced or {}
    edges: dict[str, list[str]] = {}
    for line in content.splitlines():
        fields = line.split()
        if len(fields) != 2:
            continue
        parent, child = (strip_module_version(field) for field in fields)
        parent = replaced.get(parent, parent)
        child = replaced.get(child, child)
        children = edges.setdefault(parent, [])
        if child not in children:
            children.append(child)
    return edges


class GoMod(EcosystemAdapter):
    """This class contains the adapter of the Go modules ecosystem."""

    def __init__(self, license_detector: LicenseDetector | None = None) -> None:
        super().__init__(
            name="go",
            purl_type="golang",
            manifest_files=["go.mod"],
            license_detector=license_detector,
            name_normalizer=module_name,
        )
        self.modules_cmd = "go list -m -json all"
        self.graph_cmd = "go mod graph"
        self._replaced: dict[str, str] = {}

    def load_defaults(self) -> None:
        """Load the default values from defaults.ini."""
        super().load_defaults()
        if not defaults.has_section(self.section_name):
            return
        section = defaults[self.section_name]
        self.modules_cmd = section.get("modules_cmd", self.modules_cmd)
        self.graph_cmd = section.get("graph_cmd", self.graph_cmd)

    def get_modules(self, repo_path: str) -> list[GoModule]:
        """Return the modules of the build list."""
        output = self.run(self.modules_cmd, repo_path)
        return [GoModule.from_json(entry) for entry in iter_json_stream(output)]

    def collect_packages(self, repo_path: str) -> list[Package]:
        """Discover the main module and the modules of its build list."""
        modules = self.get_modules(repo_path)
        main_module = next((module for module in modules if module.main), None)
        if main_module is None:
            raise RootProjectError(f"The go list output at {repo_path} has no main module.")

        self._replaced = {}
        for module in modules:
            if module.original_path and module.original_path != module.path:
                self._replaced[module.original_path] = module.path

        packages = [self.convert_module(main_module, root=True)]
        for module in modules:
            if not module.main:
                packages.append(self.convert_module(module))
        return packages

    def get_requirement_tree(self, repo_path: str, packages: list[Package]) -> RequirementNode | None:
        """Return the module graph below the main module."""
        edges = parse_module_graph(self.run(self.graph_cmd, repo_path), self._replaced)
        return self.build_requirement_tree(packages[0].name, edges)

    @staticmethod
    def build_requirement_tree(root_path: str, edges: dict[str, list[str]]) -> RequirementNode:
        """Build the requirement tree from the module graph. Nodes are shared, so the tree may contain cycles."""
        nodes: dict[str, RequirementNode] = {}

        def get_node(path: str) -> RequirementNode:
            if path not in nodes:
                nodes[path] = RequirementNode(name=path, requires=[])
            return nodes[path]

        for parent, children in edges.items():
            parent_node = get_node(parent)
            for child in children:
                if parent_node.requires is not None:
                    parent_node.requires.append(get_node(child))

        return get_node(root_path)

    def convert_module(self, module: GoModule, root: bool = False) -> Package:
        """Build the canonical package of a module."""
        version = normalize_version(module.version)
        locator = resolve_locator(repository=module.path)
        namespace, _, name = module.path.rpartition("/")

        package = Package(
            name=module_name(module.path),
            version=version,
            root=root,
            package_url=locator,
            download_location=locator,
            checksum=resolve_checksum({}, locator),
            supplier=Supplier(name=namespace or name, type=SupplierType.ORGANIZATION),
            local_path=module.dir,
            purl=self.build_purl(name, module.version, namespace),
            comment=f"go {module.go_version}" if module.go_version else "",
        )
        apply_license(package, self.license_detector, module.dir)
        return package
