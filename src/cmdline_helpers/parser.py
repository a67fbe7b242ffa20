# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Schema driven command line parsing.

:func:`parse` turns a list of raw tokens into exactly one :data:`Outcome`:

* :class:`Help` if any reserved help flag is present, regardless of
  everything else on the command line,
* :class:`Failure` carrying the first problem found,
* :class:`Success` carrying the validated :class:`ArgumentSet`.

The parse runs in phases, each of which stops the whole parse on its first
problem:

1. scan for flags, capture the token after each one as its raw value,
2. check that every declared parameter was given,
3. validate every raw value against its parameter,
4. reject tokens which were neither a flag nor a captured value.

Phases 2 and 3 walk the schema in declared order (strings, then integers),
so the reported problem does not depend on token order.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from cmdline_helpers.errors import (
    CommandLineError,
    DuplicateParameter,
    IntegerAboveMaximum,
    IntegerBelowMinimum,
    InvalidIntegerFormat,
    MissingArgument,
    ParameterNotSpecified,
    StringTooLong,
    StringTooShort,
    UnexpectedArgument,
)
from cmdline_helpers.log import get_logger
from cmdline_helpers.schema import (
    HELP_FLAGS,
    ArgumentSet,
    IntegerParameter,
    ParameterSet,
    StringParameter,
)

logger = get_logger(__name__)

_INTEGER_PATTERN = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class Help:
    text: str


@dataclass(frozen=True)
class Success:
    values: ArgumentSet


@dataclass(frozen=True)
class Failure:
    message: str
    error: CommandLineError = field(compare=False)

    @classmethod
    def from_error(cls, error: CommandLineError) -> Failure:
        return cls(str(error), error)


Outcome = Help | Success | Failure


@dataclass
class _Scan:
    raw: dict[str, str] = field(default_factory=dict)
    consumed: set[int] = field(default_factory=set)


def _slot(parameter: StringParameter | IntegerParameter) -> str:
    # String and integer keys live in separate namespaces.
    kind = "s" if isinstance(parameter, StringParameter) else "i"
    return f"{kind}:{parameter.key}"


def format_usage(name: str, help_text: str, schema: ParameterSet) -> str:
    lines = [
        f"{name} - {help_text}",
        f"  usage: {name} [options]",
        "  options:",
        f"    {', '.join(HELP_FLAGS)}: display this message",
    ]
    for parameter in (*schema.integers, *schema.strings):
        lines.append(
            f"    {parameter.name.short_flag}, {parameter.name.long_flag} "
            f"[{parameter.argument_help_text}]: {parameter.help_text}"
        )
    return "\n".join(lines)


def _wants_help(tokens: Sequence[str]) -> bool:
    return any(token in HELP_FLAGS for token in tokens)


def _scan(schema: ParameterSet, tokens: Sequence[str]) -> _Scan:
    flags = schema.flags()
    state = _Scan()

    i = 0
    while i < len(tokens):
        parameter = flags.get(tokens[i])
        if parameter is None:
            i += 1
            continue

        slot = _slot(parameter)
        if slot in state.raw:
            raise DuplicateParameter(parameter)

        # A value never looks like a flag; there is no escape syntax.
        if i + 1 >= len(tokens) or tokens[i + 1] in flags or tokens[i + 1] in HELP_FLAGS:
            raise MissingArgument(parameter)

        logger.trace(f"{tokens[i]} = {tokens[i + 1]!r}")
        state.raw[slot] = tokens[i + 1]
        state.consumed.update((i, i + 1))
        i += 2

    return state


def _check_present(schema: ParameterSet, state: _Scan) -> None:
    for parameter in schema.parameters():
        if _slot(parameter) not in state.raw:
            raise ParameterNotSpecified(parameter)


def _check_string(parameter: StringParameter, raw: str) -> str:
    if len(raw) < parameter.length.minimum:
        raise StringTooShort(parameter, raw)
    if len(raw) > parameter.length.maximum:
        raise StringTooLong(parameter, raw)
    return raw


def _check_integer(parameter: IntegerParameter, raw: str) -> int:
    if _INTEGER_PATTERN.fullmatch(raw) is None:
        raise InvalidIntegerFormat(parameter, raw)

    negative = raw.startswith("-")
    digits = raw.removeprefix("-").lstrip("0") or "0"

    # More digits than either bound is out of range, and may exceed the
    # interpreter's int conversion limit.
    width = max(len(str(abs(parameter.minimum))), len(str(abs(parameter.maximum))))
    if len(digits) > width:
        if negative:
            raise IntegerBelowMinimum(parameter, raw)
        raise IntegerAboveMaximum(parameter, raw)

    value = -int(digits, 10) if negative else int(digits, 10)
    if value < parameter.minimum:
        raise IntegerBelowMinimum(parameter, raw)
    if value > parameter.maximum:
        raise IntegerAboveMaximum(parameter, raw)
    return value


def _validate(schema: ParameterSet, state: _Scan) -> ArgumentSet:
    strings = {p.key: _check_string(p, state.raw[_slot(p)]) for p in schema.strings}
    integers = {p.key: _check_integer(p, state.raw[_slot(p)]) for p in schema.integers}
    return ArgumentSet(strings=strings, integers=integers)


def _check_leftovers(tokens: Sequence[str], state: _Scan) -> None:
    for i, token in enumerate(tokens):
        if i not in state.consumed:
            raise UnexpectedArgument(token)


def parse(
    name: str,
    help_text: str,
    schema: ParameterSet,
    tokens: Sequence[str],
) -> Outcome:
    """Parses ``tokens`` against ``schema``.

    :param name: Program name shown in the usage text.
    :param help_text: One line description shown in the usage text.
    :param schema: The accepted parameters.
    :param tokens: The command line without the program path.
    :return: :class:`Help`, :class:`Success` or :class:`Failure`.
    """
    if _wants_help(tokens):
        logger.debug("help requested")
        return Help(format_usage(name, help_text, schema))

    try:
        state = _scan(schema, tokens)
        _check_present(schema, state)
        values = _validate(schema, state)
        _check_leftovers(tokens, state)
    except CommandLineError as e:
        logger.debug(f"rejected: {e!r}")
        return Failure.from_error(e)

    logger.debug(f"accepted {len(tokens)} tokens")
    return Success(values)
