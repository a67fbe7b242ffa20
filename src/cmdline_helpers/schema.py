# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Declarative parameter schemas.

A :class:`ParameterSet` describes every parameter a program accepts. It is
built once by the caller, validated on construction and read-only afterwards.
The order of the ``strings`` and ``integers`` groups is significant: it fixes
the order of the generated help listing as well as the order in which missing
and invalid parameters are reported.

Parameters can be declared either as records carrying their own ``key``::

    ParameterSet(
        strings=[
            StringParameter(
                key="host",
                name=ParameterName(short="H", long="host"),
                help_text="host to connect to",
                argument_help_text="hostname",
                length=LengthRange(minimum=1, maximum=255),
            ),
        ],
    )

or as a mapping from key to the remaining fields, in which case the mapping's
insertion order is the declared order::

    ParameterSet(
        integers={
            "port": {
                "name": {"short": "p", "long": "port"},
                "help_text": "port to connect to",
                "argument_help_text": "number",
                "minimum": 1,
                "maximum": 65535,
            },
        },
    )
"""

from collections.abc import Iterator, Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HELP_FLAGS = ("-h", "--help", "/?")

NonEmptyStr = Annotated[str, Field(min_length=1)]


class ParameterName(BaseModel):
    model_config = ConfigDict(frozen=True)

    short: NonEmptyStr
    long: NonEmptyStr

    @property
    def short_flag(self) -> str:
        return f"-{self.short}"

    @property
    def long_flag(self) -> str:
        return f"--{self.long}"

    @property
    def label(self) -> str:
        """The quoted flag pair used in every diagnostic message."""
        return f'"{self.short_flag}"/"{self.long_flag}"'


class LengthRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    minimum: Annotated[int, Field(ge=0)]
    maximum: int

    @model_validator(mode="after")
    def check_order(self) -> "LengthRange":
        if self.minimum > self.maximum:
            raise ValueError(
                f"minimum length {self.minimum} exceeds maximum length {self.maximum}"
            )
        return self


class _Parameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: NonEmptyStr
    name: ParameterName
    help_text: str
    argument_help_text: str

    @property
    def flags(self) -> tuple[str, str]:
        return self.name.short_flag, self.name.long_flag


class StringParameter(_Parameter):
    length: LengthRange


class IntegerParameter(_Parameter):
    minimum: int
    maximum: int

    @model_validator(mode="after")
    def check_order(self) -> "IntegerParameter":
        if self.minimum > self.maximum:
            raise ValueError(
                f"{self.key}: minimum {self.minimum} exceeds maximum {self.maximum}"
            )
        return self


def _keyed(value: Any) -> Any:
    # {key: fields} -> [{"key": key, **fields}], keeping insertion order.
    if not isinstance(value, Mapping):
        return value

    items = []
    for key, fields in value.items():
        if isinstance(fields, _Parameter):
            items.append(fields.model_copy(update={"key": key}))
        else:
            items.append({**fields, "key": key})
    return items


class ParameterSet(BaseModel):
    """The schema of all parameters a program accepts.

    Invariants checked on construction:

    * every short and long flag is unique across both groups and none of them
      shadows one of the reserved help flags (:data:`HELP_FLAGS`),
    * keys are unique within each group,
    * every range has ``minimum <= maximum``.

    Violations raise :class:`pydantic.ValidationError`.
    """

    model_config = ConfigDict(frozen=True)

    strings: tuple[StringParameter, ...] = ()
    integers: tuple[IntegerParameter, ...] = ()

    @field_validator("strings", "integers", mode="before")
    @classmethod
    def accept_mapping(cls, v: Any) -> Any:
        return _keyed(v)

    @model_validator(mode="after")
    def check_unique(self) -> "ParameterSet":
        for group in (self.strings, self.integers):
            keys = [p.key for p in group]
            for key in keys:
                if keys.count(key) > 1:
                    raise ValueError(f"parameter key {key!r} declared multiple times")

        seen: dict[str, str] = {flag: "help" for flag in HELP_FLAGS}
        for parameter in self.parameters():
            for flag in parameter.flags:
                if flag in seen:
                    raise ValueError(
                        f"flag {flag!r} of parameter {parameter.key!r} "
                        f"collides with {seen[flag]!r}"
                    )
                seen[flag] = parameter.key
        return self

    def parameters(self) -> Iterator[StringParameter | IntegerParameter]:
        """All parameters in priority order: strings first, then integers."""
        yield from self.strings
        yield from self.integers

    def flags(self) -> dict[str, StringParameter | IntegerParameter]:
        return {flag: p for p in self.parameters() for flag in p.flags}


class ArgumentSet(BaseModel):
    """The validated values of a successful parse, grouped like the schema."""

    model_config = ConfigDict(frozen=True)

    strings: dict[str, str] = Field(default_factory=dict)
    integers: dict[str, int] = Field(default_factory=dict)
