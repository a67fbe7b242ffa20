# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Process boundary helpers.

These functions turn the results of :func:`cmdline_helpers.parser.parse` and of
an asynchronous program body into printed output and exit statuses. A typical
program looks like this::

    SCHEMA = ParameterSet(...)

    async def main() -> None:
        args = parse_command_line_arguments("serve", "serves files", SCHEMA)
        await serve(args.strings["root"], args.integers["port"])

    if __name__ == "__main__":
        run_main(main)
"""

import asyncio
import signal
import sys
from collections.abc import Awaitable, Callable, Sequence
from enum import IntEnum, unique
from typing import NoReturn

from cmdline_helpers.log import get_logger
from cmdline_helpers.parser import Failure, Help, Success, parse
from cmdline_helpers.schema import ArgumentSet, ParameterSet

logger = get_logger(__name__)


@unique
class ExitCodes(IntEnum):
    SUCCESS = 0
    GENERIC_ERROR = 1


def parse_command_line_arguments(
    name: str,
    help_text: str,
    schema: ParameterSet,
    argv: Sequence[str] | None = None,
) -> ArgumentSet:
    """Parses the process' command line or exits.

    On a help request the usage text is printed to stdout and the process
    exits successfully. On any problem the message is printed to stderr and
    the process exits with :attr:`ExitCodes.GENERIC_ERROR`.

    :param argv: Defaults to ``sys.argv``; the first entry (the program
                 path) is always skipped.
    """
    if argv is None:
        argv = sys.argv

    match parse(name, help_text, schema, argv[1:]):
        case Help(text=text):
            print(text)
            sys.exit(ExitCodes.SUCCESS)
        case Failure() as failure:
            print(failure.message, file=sys.stderr)
            sys.exit(ExitCodes.GENERIC_ERROR)
        case Success(values=values):
            return values


def run_main(main: Callable[[], Awaitable[None]]) -> NoReturn:
    """Runs ``main`` to completion and exits with a matching status.

    ``main`` is called once and awaited without a timeout. If it raises, the
    exception's message is printed to stderr and the process exits with
    :attr:`ExitCodes.GENERIC_ERROR`. A :class:`SystemExit` raised inside
    ``main`` keeps its status.
    """

    async def _run() -> None:
        await main()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        sys.exit(128 + signal.SIGINT)
    except Exception as e:
        print(e, file=sys.stderr)
        logger.debug("main failed", exc_info=e)
        sys.exit(ExitCodes.GENERIC_ERROR)

    sys.exit(ExitCodes.SUCCESS)
