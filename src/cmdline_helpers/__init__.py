# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Declarative command line parsing for string and integer parameters.

The public interface exposed by this package is the schema types, the
:func:`parse` function with its three outcomes, and the process boundary
helpers :func:`parse_command_line_arguments` and :func:`run_main`.
"""

from cmdline_helpers.cli import ExitCodes, parse_command_line_arguments, run_main
from cmdline_helpers.errors import CommandLineError
from cmdline_helpers.parser import Failure, Help, Outcome, Success, format_usage, parse
from cmdline_helpers.schema import (
    HELP_FLAGS,
    ArgumentSet,
    IntegerParameter,
    LengthRange,
    ParameterName,
    ParameterSet,
    StringParameter,
)

# Public Re-Exports
__all__ = (
    "HELP_FLAGS",
    "ArgumentSet",
    "CommandLineError",
    "ExitCodes",
    "Failure",
    "Help",
    "IntegerParameter",
    "LengthRange",
    "Outcome",
    "ParameterName",
    "ParameterSet",
    "StringParameter",
    "Success",
    "format_usage",
    "parse",
    "parse_command_line_arguments",
    "run_main",
)
