# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module runs the ecosystem adapters over a project and collects the dependency graphs."""

import logging
import os

import requests

from sbomgraph.ecosystems import create_ecosystems
from sbomgraph.ecosystems.base import EcosystemAdapter
from sbomgraph.errors import SBOMGraphError
from sbomgraph.meta.package import Package

logger: logging.Logger = logging.getLogger(__name__)


class Scanner:
    """This class scans a project with every applicable ecosystem adapter."""

    def __init__(self, ecosystems: list[EcosystemAdapter] | None = None) -> None:
        """Initialize the scanner.

        Parameters
        ----------
        ecosystems : list[EcosystemAdapter] | None
            The adapters to use. Every supported adapter is used if not set.
        """
        self.ecosystems = ecosystems if ecosystems is not None else create_ecosystems()

    def load_defaults(self) -> bool:
        """Load the configuration of every adapter.

        Returns
        -------
        bool
            True if succeeded else False.
        """
        for ecosystem in self.ecosystems:
            try:
                ecosystem.load_defaults()
            except SBOMGraphError as error:
                logger.error("Invalid configuration for the %s ecosystem: %s", ecosystem.name, error)
                return False
        return True

    def get_ecosystems(self, names: list[str] | None = None) -> list[EcosystemAdapter]:
        """Return the adapters selected by name, or all of them if no name is given."""
        if not names:
            return list(self.ecosystems)
        selected = [ecosystem for ecosystem in self.ecosystems if ecosystem.name in names]
        for name in set(names) - {ecosystem.name for ecosystem in selected}:
            logger.warning("The ecosystem %s is not supported.", name)
        return selected

    def scan(self, repo_path: str, names: list[str] | None = None) -> dict[str, Package]:
        """Build the dependency graph of the project for every detected ecosystem.

        A failure in one ecosystem is logged and does not prevent the others from being scanned.

        Parameters
        ----------
        repo_path : str
            The path to the project.
        names : list[str] | None
            The names of the ecosystems to scan. Every detected ecosystem is scanned if not set.

        Returns
        -------
        dict[str, Package]
            The root package of the dependency graph, keyed by ecosystem name.
        """
        repo_path = os.path.abspath(repo_path)
        graphs: dict[str, Package] = {}
        for ecosystem in self.get_ecosystems(names):
            if not ecosystem.is_detected(repo_path):
                logger.debug("The %s ecosystem is not used by %s.", ecosystem.name, repo_path)
                continue

            logger.info("Scanning %s with the %s ecosystem.", repo_path, ecosystem.name)
            try:
                graphs[ecosystem.name] = ecosystem.build_graph(repo_path)
            except (SBOMGraphError, OSError, requests.RequestException) as error:
                logger.error("Unable to scan the %s ecosystem: %s", ecosystem.name, error)

        if not graphs:
            logger.warning("No dependency graph could be built for %s.", repo_path)
        return graphs
