# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module provides functions to manage default values."""

import configparser
import logging
import os
import pathlib
import shutil
from typing import Optional

logger: logging.Logger = logging.getLogger(__name__)


class ConfigParser(configparser.ConfigParser):
    """This class extends ConfigParser with useful methods."""

    def get_list(
        self,
        section: str,
        option: str,
        delimiter: Optional[str] = None,
        fallback: Optional[list[str]] = None,
        strip: bool = True,
        remove_duplicates: bool = True,
    ) -> list[str]:
        """Parse and return a list of strings from an ``option`` of ``section`` in ``defaults.ini``.

        If ``delimiter`` is not set (default: None), the value is split on any whitespace character
        and empty strings are discarded. If ``delimiter`` is set, it is the only separator used.

        Parameters
        ----------
        section : str
            The section in ``defaults.ini``.
        option : str
            The option whose value is parsed as a list.
        delimiter : Optional[str]
            The delimiter used to split the strings.
        fallback : Optional[list[str]]
            The fallback value in case the section or the option does not exist.
        strip : bool
            If True, strip leading and trailing whitespaces of every element and drop empty elements.
        remove_duplicates : bool
            If True, remove duplicated elements while keeping the original order.

        Returns
        -------
        list[str]
            The result list of strings, or the fallback (an empty list by default) if errors.

        Examples
        --------
        Given the following ``defaults.ini``

        .. code-block::

            [ecosystem.pip]
            skip_packages =
                pip setuptools
                wheel

        then ``defaults.get_list("ecosystem.pip", "skip_packages")`` returns ``["pip", "setuptools", "wheel"]``.
        """
        try:
            value = self.get(section, option)
        except (configparser.NoOptionError, configparser.NoSectionError) as error:
            logger.debug(error)
            return fallback or []

        content = value.split(sep=delimiter)
        if strip:
            content = [item.strip() for item in content if item.strip()]

        if remove_duplicates:
            return list(dict.fromkeys(content))

        return content


defaults = ConfigParser()


def load_defaults(user_config_path: str) -> bool:
    """Read the default values from ``defaults.ini`` file and store them in the defaults global object.

    Parameters
    ----------
    user_config_path : str
        The path to the user's defaults configuration file. Its values override the bundled ones.

    Returns
    -------
    bool
        Return True if succeeded or False if failed.
    """
    curr_dir = pathlib.Path(__file__).parent.absolute()
    config_files = [os.path.join(curr_dir, "defaults.ini")]
    if user_config_path:
        if not os.path.isfile(user_config_path):
            logger.error("The user defaults configuration at %s does not exist.", user_config_path)
            return False
        config_files.append(user_config_path)

    try:
        defaults.read(config_files, encoding="utf8")
        return True
    except (configparser.Error, ValueError) as error:
        logger.error("Failed to read the defaults.ini files.")
        logger.error(error)
        return False


def create_defaults(output_path: str, cwd_path: str) -> bool:
    """Create the ``defaults.ini`` file at the output directory for end users.

    Parameters
    ----------
    output_path : str
        The path where the ``defaults.ini`` will be created.
    cwd_path : str
        The path to the current working directory.

    Returns
    -------
    bool
        Return True if succeeded or False if failed.
    """
    src_path = os.path.join(pathlib.Path(__file__).parent.absolute(), "defaults.ini")
    dest_path = os.path.join(output_path, "defaults.ini")

    # ConfigParser.write does not preserve the comments, so we copy the file directly.
    try:
        shutil.copy2(src_path, dest_path)
        logger.info("Dumped the default values in %s.", os.path.relpath(dest_path, cwd_path))
        return True
    except (shutil.Error, OSError) as error:
        logger.error("Failed to create %s: %s.", os.path.relpath(dest_path, cwd_path), error)
        return False
