# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains reporter classes for writing the dependency graphs to disk."""

import abc
import json
import logging
import os

from sbomgraph.meta.package import Package

logger: logging.Logger = logging.getLogger(__name__)


class FileReporter(abc.ABC):
    """The reporter that handles writing data to disk files."""

    def __init__(self, mode: str = "w", encoding: str = "utf-8"):
        """Initialize instance.

        Parameters
        ----------
        mode : str, optional
            The mode to open the target files, by default "w".
        encoding : str, optional
            The encoding used to handle disk files, by default "utf-8".
        """
        self.mode = mode
        self.encoding = encoding

    def write_file(self, file_path: str, data: str) -> bool:
        """Write the data into a file.

        Parameters
        ----------
        file_path : str
            The path to the target file.
        data : str
            The data to write into the file.

        Returns
        -------
        bool
            True if succeeded else False.
        """
        try:
            with open(file_path, mode=self.mode, encoding=self.encoding) as file:
                logger.info("Writing to file %s", file_path)
                file.write(data)
                return True
        except OSError as error:
            logger.error("Cannot write to %s. Error: %s", file_path, error)
            return False

    @abc.abstractmethod
    def generate(self, target_dir: str, graphs: dict[str, Package]) -> list[str]:
        """Generate the report files.

        This method is implemented in subclasses.

        Parameters
        ----------
        target_dir : str
            The directory to store all output files.
        graphs : dict[str, Package]
            The root package of the dependency graph of each scanned ecosystem.

        Returns
        -------
        list[str]
            The paths of the files written.
        """


class JSONReporter(FileReporter):
    """This class handles writing dependency graphs to JSON files."""

    def __init__(self, mode: str = "w", encoding: str = "utf-8", indent: int = 4):
        """Initialize instance.

        Parameters
        ----------
        mode: str, optional
            The file operation mode.
        encoding: str, optional
            The encoding.
        indent : int, optional
            The indent for the JSON output, by default 4.
        """
        super().__init__(mode, encoding)
        self.indent = indent

    @staticmethod
    def get_file_name(ecosystem: str) -> str:
        """Return the name of the report file of an ecosystem."""
        return f"{ecosystem}.dependencies.json"

    def generate(self, target_dir: str, graphs: dict[str, Package]) -> list[str]:
        """Generate one ``<ecosystem>.dependencies.json`` file per scanned ecosystem.

        Parameters
        ----------
        target_dir : str
            The directory to store all output files.
        graphs : dict[str, Package]
            The root package of the dependency graph of each scanned ecosystem.

        Returns
        -------
        list[str]
            The paths of the files written.
        """
        written = []
        for ecosystem, root in graphs.items():
            file_name = os.path.join(target_dir, self.get_file_name(ecosystem))
            try:
                json_data = json.dumps(root.to_dict(), indent=self.indent)
            except (TypeError, ValueError) as error:
                logger.critical("Cannot serialize the %s dependency graph to JSON: %s", ecosystem, error)
                continue
            if self.write_file(file_name, json_data):
                written.append(file_name)
        return written
