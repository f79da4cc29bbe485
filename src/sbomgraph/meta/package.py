# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the canonical package entity produced for every ecosystem."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class HashAlgorithm(str, Enum):
    """The digest algorithms a package checksum can be tagged with."""

    SHA512 = "SHA512"
    SHA384 = "SHA384"
    SHA256 = "SHA256"
    SHA224 = "SHA224"
    SHA1 = "SHA1"
    MD6 = "MD6"
    MD5 = "MD5"
    MD4 = "MD4"
    MD2 = "MD2"


class SupplierType(str, Enum):
    """The kinds of package suppliers."""

    PERSON = "Person"
    ORGANIZATION = "Organization"


@dataclass(frozen=True)
class Checksum:
    """An algorithm-tagged digest."""

    #: The algorithm that produced the digest.
    algorithm: HashAlgorithm = HashAlgorithm.SHA1

    #: The hex digest. Empty only when no digest could be derived at all.
    value: str = ""


@dataclass(frozen=True)
class Supplier:
    """The person or organization that distributes a package."""

    name: str = ""
    email: str = ""

    #: None when the ecosystem gives no hint about the kind of supplier.
    type: SupplierType | None = None


@dataclass
class Package:
    """The canonical, ecosystem-agnostic dependency entity.

    A package is built once from ecosystem-native data. Only ``packages`` is filled in afterwards, by the
    graph assembler, and only on the copies the assembler creates itself.
    """

    #: The ecosystem-local short name, without any group or vendor prefix.
    name: str

    #: The normalized version.
    version: str = ""

    #: Whether this package is the scanned project itself.
    root: bool = False

    #: The canonical, protocol-qualified locator of the package sources or project page.
    package_url: str = ""

    download_location: str = ""
    checksum: Checksum = field(default_factory=Checksum)
    supplier: Supplier = field(default_factory=Supplier)

    license_declared: str = ""
    license_concluded: str = ""
    copyright: str = ""
    comments_license: str = ""
    other_license: str = ""

    #: The on-disk location of the vendored package, following the ecosystem convention.
    local_path: str = ""

    #: The Package URL (``pkg:type/namespace/name@version``) identifying this package.
    purl: str = ""

    homepage: str = ""
    comment: str = ""

    #: The direct dependencies, keyed by normalized name. Each value is owned by this package.
    packages: dict[str, Package] = field(default_factory=dict)

    def copy_for_attach(self) -> Package:
        """Return a copy of this package that can be attached as a child in the dependency graph.

        The copy gets its own empty ``packages`` map, so populating it never changes this package.
        ``Checksum`` and ``Supplier`` are immutable and can be shared.
        """
        return replace(self, packages={})

    def to_dict(self) -> dict:
        """Return a JSON-serializable nested dictionary of this package and its dependencies."""
        return {
            "name": self.name,
            "version": self.version,
            "root": self.root,
            "purl": self.purl,
            "package_url": self.package_url,
            "download_location": self.download_location,
            "homepage": self.homepage,
            "checksum": {"algorithm": self.checksum.algorithm.value, "value": self.checksum.value},
            "supplier": {
                "name": self.supplier.name,
                "email": self.supplier.email,
                "type": self.supplier.type.value if self.supplier.type else "",
            },
            "license_declared": self.license_declared,
            "license_concluded": self.license_concluded,
            "copyright": self.copyright,
            "comments_license": self.comments_license,
            "other_license": self.other_license,
            "local_path": self.local_path,
            "comment": self.comment,
            "packages": {name: child.to_dict() for name, child in self.packages.items()},
        }
