# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This is the main entrypoint to run sbomgraph."""

import argparse
import logging
import os
import sys
from importlib import metadata as importlib_metadata

from sbomgraph.config.defaults import create_defaults, load_defaults
from sbomgraph.config.global_config import global_config
from sbomgraph.ecosystems import ECOSYSTEM_NAMES
from sbomgraph.output_reporter.reporter import JSONReporter
from sbomgraph.scanner import Scanner

logger: logging.Logger = logging.getLogger(__name__)


def scan(scan_args: argparse.Namespace) -> int:
    """Scan a project and write the dependency graph of every ecosystem to the output directory.

    Returns
    -------
    int
        Returns os.EX_OK if successful or the corresponding error code on failure.
    """
    if not os.path.isdir(scan_args.repo_path):
        logger.error("The project directory %s does not exist.", scan_args.repo_path)
        return os.EX_NOINPUT

    scanner = Scanner()
    if not scanner.load_defaults():
        return os.EX_USAGE

    graphs = scanner.scan(scan_args.repo_path, scan_args.ecosystem)
    if not graphs:
        return os.EX_DATAERR

    written = JSONReporter().generate(global_config.output_path, graphs)
    if len(written) != len(graphs):
        return os.EX_CANTCREAT

    for file_name in written:
        logger.info("The dependency graph is stored in %s", os.path.relpath(file_name, os.getcwd()))
    return os.EX_OK


def perform_action(action_args: argparse.Namespace) -> None:
    """Perform the indicated action of sbomgraph."""
    match action_args.action:
        case "dump-defaults":
            # Create the defaults.ini file in the output dir and exit.
            if not create_defaults(action_args.output_dir, os.getcwd()):
                sys.exit(os.EX_CANTCREAT)
            sys.exit(os.EX_OK)

        case "scan":
            sys.exit(scan(action_args))

        case _:
            logger.error("sbomgraph does not support command option %s.", action_args.action)
            sys.exit(os.EX_USAGE)


def main(argv: list[str] | None = None) -> None:
    """Execute sbomgraph as a standalone command-line tool.

    Parameters
    ----------
    argv: list[str] | None
        Command-line arguments.
        If ``argv`` is ``None``, argparse automatically looks at ``sys.argv``.
        Hence, we set ``argv = None`` by default.
    """
    main_parser = argparse.ArgumentParser(prog="sbomgraph")

    main_parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {importlib_metadata.version('sbomgraph')}",
        help="Show sbomgraph's version number and exit",
    )

    main_parser.add_argument(
        "-v",
        "--verbose",
        help="Run sbomgraph with more debug logs",
        action="store_true",
    )

    main_parser.add_argument(
        "-o",
        "--output-dir",
        default=os.path.join(os.getcwd(), "output"),
        help="The output destination path for sbomgraph",
    )

    main_parser.add_argument(
        "-dp",
        "--defaults-path",
        default="",
        help="The path to the defaults configuration file.",
    )

    # Add sub parsers for each action.
    sub_parser = main_parser.add_subparsers(dest="action", help="Run sbomgraph <action> --help for help")

    # Build the dependency graphs of one project.
    scan_parser = sub_parser.add_parser(name="scan")

    scan_parser.add_argument(
        "-rp",
        "--repo-path",
        default=os.getcwd(),
        type=str,
        help="The path to the project to scan, by default the current directory.",
    )

    scan_parser.add_argument(
        "-e",
        "--ecosystem",
        action="append",
        choices=ECOSYSTEM_NAMES,
        help="The ecosystem to scan. Can be repeated. Every detected ecosystem is scanned if not set.",
    )

    # Dump the default values.
    sub_parser.add_parser(name="dump-defaults", description="Dumps the defaults.ini file to the output directory.")

    args = main_parser.parse_args(argv)

    if not args.action:
        main_parser.print_help()
        sys.exit(os.EX_USAGE)

    if args.verbose:
        log_level = logging.DEBUG
        log_format = "%(asctime)s [%(name)s:%(funcName)s:%(lineno)d] [%(levelname)s] %(message)s"
    else:
        log_level = logging.INFO
        log_format = "%(asctime)s [%(levelname)s] %(message)s"

    # Set global logging config. We need the stream handler for the initial
    # output directory checking log messages.
    st_handler = logging.StreamHandler(sys.stdout)
    logging.basicConfig(format=log_format, handlers=[st_handler], force=True, level=log_level)

    # Set the output directory.
    if not args.output_dir:
        logger.error("The output path cannot be empty. Exiting ...")
        sys.exit(os.EX_USAGE)

    if os.path.isfile(args.output_dir):
        logger.error("The output directory already exists. Exiting ...")
        sys.exit(os.EX_USAGE)

    if os.path.isdir(args.output_dir):
        logger.info("Setting the output directory to %s", os.path.relpath(args.output_dir, os.getcwd()))
    else:
        logger.info("No directory at %s. Creating one ...", os.path.relpath(args.output_dir, os.getcwd()))
        os.makedirs(args.output_dir)

    # Add file handler to the root logger. Remove stream handler from the
    # root logger to prevent dependencies printing logs to stdout.
    debug_log_path = os.path.join(args.output_dir, "debug.log")
    log_file_handler = logging.FileHandler(debug_log_path, "w")
    log_file_handler.setFormatter(logging.Formatter(log_format))
    logging.getLogger().removeHandler(st_handler)
    logging.getLogger().addHandler(log_file_handler)

    # Add StreamHandler to the sbomgraph logger only.
    sbomgraph_logger = logging.getLogger("sbomgraph")
    sbomgraph_logger.addHandler(st_handler)

    logger.info("The logs will be stored in debug.log")

    global_config.load(output_path=args.output_dir)

    # Load the default values from defaults.ini files.
    if not load_defaults(args.defaults_path):
        logger.error("Exiting because the defaults configuration could not be loaded.")
        sys.exit(os.EX_NOINPUT)

    perform_action(args)


if __name__ == "__main__":
    main()
