# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdline_helpers.schema import IntegerParameter, StringParameter

# ****************
# * Base classes *
# ****************


class CommandLineError(Exception):
    """A single, terminal diagnosis of a command line.

    ``str()`` of an instance is the message shown to the user.
    """

    def _message_core(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self._message_core()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({repr(str(self))})"


class ParameterError(CommandLineError):
    def __init__(self, parameter: StringParameter | IntegerParameter):
        self.parameter = parameter

        super().__init__(parameter.key)

    @property
    def label(self) -> str:
        return self.parameter.name.label


class InvalidArgument(ParameterError):
    def __init__(self, parameter: StringParameter | IntegerParameter, argument: str):
        self.argument = argument

        super().__init__(parameter)

    def _requirement(self) -> str:
        raise NotImplementedError

    def _message_core(self) -> str:
        return f"Argument for command-line parameter {self.label} {self._requirement()}."


# ********************
# * Flag scan errors *
# ********************


class DuplicateParameter(ParameterError):
    def _message_core(self) -> str:
        return f"Command-line parameter {self.label} specified multiple times."


class MissingArgument(ParameterError):
    def _message_core(self) -> str:
        return f"No argument given for command-line parameter {self.label}."


class ParameterNotSpecified(ParameterError):
    def _message_core(self) -> str:
        return f"Command-line parameter {self.label} not specified."


class UnexpectedArgument(CommandLineError):
    def __init__(self, token: str):
        self.token = token

        super().__init__(token)

    def _message_core(self) -> str:
        return f'Unexpected command-line argument "{self.token}".'


# **********************
# * Value check errors *
# **********************


class InvalidIntegerFormat(InvalidArgument):
    def _requirement(self) -> str:
        return "must be an integer"


class IntegerBelowMinimum(InvalidArgument):
    parameter: IntegerParameter

    def _requirement(self) -> str:
        return f"must be at least {self.parameter.minimum}"


class IntegerAboveMaximum(InvalidArgument):
    parameter: IntegerParameter

    def _requirement(self) -> str:
        return f"cannot be greater than {self.parameter.maximum}"


class StringTooShort(InvalidArgument):
    parameter: StringParameter

    def _requirement(self) -> str:
        return f"must contain at least {self.parameter.length.minimum} character(s)"


class StringTooLong(InvalidArgument):
    parameter: StringParameter

    def _requirement(self) -> str:
        return f"cannot contain more than {self.parameter.length.maximum} character(s)"
