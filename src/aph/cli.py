#!/usr/bin/env python3
# This file is part of the aph project
# https://github.com/mbarkhau/aph
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""CLI/Imperative shell for APH."""

import sys
import logging
from typing import List
from typing import Optional
from typing import NamedTuple

import click

import aph

from . import kdf
from . import report
from . import stamps
from . import common_types as ct

try:
    import pretty_traceback

    pretty_traceback.install(envvar='ENABLE_PRETTY_TRACEBACK')
except ImportError:
    pass  # no need to fail because of missing dev dependency


logger = logging.getLogger("aph.cli")


class LogConfig(NamedTuple):
    fmt: str
    lvl: int


LOG_FORMAT_DEFAULT = "%(levelname)-7s - %(message)s"

LOG_FORMAT_VERBOSE = "%(asctime)s.%(msecs)03d %(levelname)-7s %(name)-16s - %(message)s"


def _parse_logging_config(verbosity: int) -> LogConfig:
    if verbosity == 0:
        return LogConfig(LOG_FORMAT_DEFAULT, logging.WARNING)
    elif verbosity == 1:
        return LogConfig(LOG_FORMAT_VERBOSE, logging.INFO)
    else:
        assert verbosity >= 2
        return LogConfig(LOG_FORMAT_VERBOSE, logging.DEBUG)


_PREV_VERBOSITY: int = -1


def _configure_logging(verbosity: int = 0) -> None:
    # pylint: disable=global-statement
    global _PREV_VERBOSITY

    if verbosity <= _PREV_VERBOSITY:
        # allow function to be called multiple times
        return

    _PREV_VERBOSITY = verbosity

    # remove previous logging handlers
    for handler in list(logging.root.handlers):
        logging.root.removeHandler(handler)

    log_cfg = _parse_logging_config(verbosity)
    # stderr, so that stdout only has the report
    logging.basicConfig(level=log_cfg.lvl, format=log_cfg.fmt, datefmt="%Y-%m-%dT%H:%M:%S")


def echo(msg: str = "") -> bool:
    click.echo(msg)
    return True


NOT_ENOUGH_ARGS_MSG = "aph: not enough arguments provided"


_opt_verbose = click.option(
    '-v',
    '--verbose',
    count=True,
    help="Control log level. -vv for debug level.",
)


@click.command(
    context_settings={
        'help_option_names'      : ["-h", "--help"],
        # options only before TIME, a PASSWORD or SALT may start with "-"
        'allow_interspersed_args': False,
    }
)
@click.argument('time_stamp'  , metavar="TIME")
@click.argument('threads'     , metavar="THREADS", type=int)
@click.argument('memory_stamp', metavar="MEMORY")
@click.argument('length'      , metavar="LENGTH", type=int)
@click.argument('password'    , metavar="PASSWORD")
@click.argument('salt'        , required=False, default=None)
@click.version_option(version=aph.__version__, prog_name="aph")
@_opt_verbose
def cli(
    time_stamp  : str,
    threads     : int,
    memory_stamp: str,
    length      : int,
    password    : str,
    salt        : Optional[str] = None,
    verbose     : int = 0,
) -> None:
    """Generate an Argon2id hash and report how long it took.

    \b
    TIME    : time cost stamp, eg. 1s or 500ms
    MEMORY  : memory cost stamp, eg. 500KB, 64MB or 1GB
    LENGTH  : hash output length in bytes
    SALT    : optional, a random salt is generated if omitted
    """
    _configure_logging(verbose)

    try:
        time_cost = stamps.parse_duration(time_stamp)
        memory_kb = stamps.parse_size(memory_stamp)
        if salt is None:
            result = kdf.generate_hash(time_cost, threads, memory_kb, length, password)
        else:
            result = kdf.generate_hash_with_salt(time_cost, threads, memory_kb, length, password, salt)
    except ct.AphError as err:
        echo(str(err))
        sys.exit(1)

    output = report.format_result(result, salt_supplied=salt is not None)
    # bytes, so that non utf-8 arguments are written back unchanged
    click.echo(kdf.text2bytes(output))


def main(args: Optional[List[str]] = None) -> None:
    """Entry point for the aph console script.

    Usage errors are reported on stdout with exit status 1, the same
    as any other error.
    """
    try:
        exit_code = cli.main(args=args, prog_name="aph", standalone_mode=False)
    except click.MissingParameter:
        echo(NOT_ENOUGH_ARGS_MSG)
        sys.exit(1)
    except click.ClickException as err:
        echo(f"aph: {err.format_message()}")
        sys.exit(1)
    except click.Abort:
        echo("Aborted!")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == '__main__':
    main()
