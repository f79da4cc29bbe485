# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This package defines the adapters of the supported package-manager ecosystems."""

from sbomgraph.ecosystems.base import EcosystemAdapter
from sbomgraph.ecosystems.cargo import Cargo
from sbomgraph.ecosystems.composer import Composer
from sbomgraph.ecosystems.gomod import GoMod
from sbomgraph.ecosystems.pip import Pip


def create_ecosystems() -> list[EcosystemAdapter]:
    """Return a fresh instance of every supported ecosystem adapter."""
    return [
        Cargo(),
        Composer(),
        GoMod(),
        Pip(),
    ]


ECOSYSTEM_NAMES: list[str] = [ecosystem.name for ecosystem in create_ecosystems()]
