# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module includes utilities functions for sbomgraph."""

import json
import logging
import shlex
import subprocess  # nosec B404

import requests
from requests.models import Response

from sbomgraph.config.defaults import defaults
from sbomgraph.errors import CommandError, PackageDataFetchError, ParseError

logger: logging.Logger = logging.getLogger(__name__)


def send_get_http_raw(url: str, headers: dict | None = None, timeout: int | None = None) -> Response:
    """Send the GET HTTP request with the given url and headers.

    Unlike a best-effort fetch, this method does not retry and does not hide failures from the caller.

    Parameters
    ----------
    url : str
        The url of the request.
    headers : dict | None
        The dict that describes the headers of the request.
    timeout: int | None
        The request timeout (optional). The ``[requests] timeout`` default is used if not set.

    Returns
    -------
    Response
        The response, which always has a status code of 200 (OK).

    Raises
    ------
    PackageDataFetchError
        If the server answers with any status code other than 200.
    requests.exceptions.RequestException
        If the request cannot be sent. Transport errors are propagated as they are.
    """
    logger.debug("GET - %s", url)
    if not timeout:
        timeout = defaults.getint("requests", "timeout", fallback=10)

    response = requests.get(url=url, headers=headers, timeout=timeout)
    if response.status_code != 200:
        logger.debug("Receiving error code %s from server.", response.status_code)
        raise PackageDataFetchError(
            f"Could not fetch package data from {url} (status code {response.status_code}).",
            status_code=response.status_code,
        )

    return response


def send_get_http_json(path: str) -> dict:
    """Fetch a JSON document from a package registry.

    ``https://`` is always prepended to the given path, and the ``Accept: application/json`` header is set.

    Parameters
    ----------
    path : str
        The host and path of the document, e.g., ``pypi.org/pypi/requests/2.31.0/json``.

    Returns
    -------
    dict
        The decoded JSON object.

    Raises
    ------
    PackageDataFetchError
        If the registry does not answer with 200 (OK).
    ParseError
        If the body is not a JSON object.
    """
    response = send_get_http_raw("https://" + path, headers={"Accept": "application/json"})
    try:
        content = response.json()
    except requests.exceptions.JSONDecodeError as error:
        raise ParseError(f"The response from {path} is not valid JSON: {error}") from error

    if not isinstance(content, dict):
        raise ParseError(f"Expected a JSON object from {path}, got {type(content).__name__}.")

    return content


def run_command(command: str | list[str], cwd: str) -> str:
    """Run an external command and return its standard output.

    Parameters
    ----------
    command : str | list[str]
        The command line. A string is split with shell-like syntax.
    cwd : str
        The working directory of the command.

    Returns
    -------
    str
        The decoded standard output.

    Raises
    ------
    CommandError
        If the command cannot be found, times out or exits with a non-zero code.
    ParseError
        If the output is not UTF-8 encoded.
    """
    args = shlex.split(command) if isinstance(command, str) else command
    timeout = defaults.getint("command", "timeout", fallback=600)
    logger.debug("Running %s in %s", " ".join(args), cwd)
    try:
        # Suppressing Bandit's B603 report because the commands come from the configuration.
        result = subprocess.run(  # nosec B603
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=True,
            cwd=cwd,
            timeout=timeout,
        )
    except FileNotFoundError as error:
        raise CommandError(f"Unable to find the command {args[0]}: {error}") from error
    except subprocess.TimeoutExpired as error:
        raise CommandError(f"The command {' '.join(args)} timed out after {timeout} seconds.") from error
    except subprocess.CalledProcessError as error:
        stderr = error.stderr.decode("utf-8", errors="replace") if error.stderr else ""
        raise CommandError(f"The command {' '.join(args)} exited with code {error.returncode}: {stderr}") from error

    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as error:
        raise ParseError(f"The output of {' '.join(args)} is not valid UTF-8: {error}") from error


def load_json(content: str, source: str) -> dict | list:
    """Decode a JSON document produced by a package manager.

    Parameters
    ----------
    content : str
        The JSON text.
    source : str
        A human readable description of where the content comes from, used in error messages.

    Returns
    -------
    dict | list
        The decoded document.

    Raises
    ------
    ParseError
        If the content is not valid JSON or is not an object or an array.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as error:
        raise ParseError(f"Unable to decode {source}: {error}") from error

    if not isinstance(data, (dict, list)):
        raise ParseError(f"Unexpected JSON content in {source}.")
    return data
