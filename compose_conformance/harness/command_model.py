"""Declarative command model for compose tools under test.

Each tool is described by one YAML file, for example::

    name: docker-compose
    command: docker
    ps_command: docker ps
    global_opts:
      - name: compose
    up:
      name: up
      opts:
        - name: -d
    down:
      name: down

Tool CLIs are order-sensitive, so options are kept exactly as declared and
flattened by ``compose_arguments``: global options, then the verb name, then
the verb's own options. An option contributes its value only when the value
is non-empty.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from compose_conformance.harness.errors import DescriptorError


class Opt(BaseModel):
    """A command line option, optionally followed by its value."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def stringify_scalar(cls, v: Any) -> Any:
        # YAML turns `value: 3` or `value: true` into non-strings
        if v is None:
            return ""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v

    def arguments(self) -> list[str]:
        if self.value:
            return [self.name, self.value]
        return [self.name]


class Verb(BaseModel):
    """A sub-command (``up``, ``down``) and its own options."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    opts: list[Opt] = Field(default_factory=list)

    @field_validator("opts", mode="before")
    @classmethod
    def empty_opts(cls, v: Any) -> Any:
        return [] if v is None else v


class ToolDescriptor(BaseModel):
    """Invocation shape of one compose implementation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    command: str = Field(..., min_length=1)
    ps_command: str = Field(..., min_length=1)
    global_opts: list[Opt] = Field(default_factory=list)
    up: Verb
    down: Verb

    @field_validator("global_opts", mode="before")
    @classmethod
    def empty_global_opts(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("ps_command")
    @classmethod
    def splittable_ps_command(cls, v: str) -> str:
        if not shlex.split(v):
            raise ValueError("ps_command must name a program")
        return v

    def up_arguments(self) -> list[str]:
        return compose_arguments(self, self.up)

    def down_arguments(self) -> list[str]:
        return compose_arguments(self, self.down)

    def status_arguments(self) -> list[str]:
        """The status command split shell-style: program first, then arguments."""
        return shlex.split(self.ps_command)


def compose_arguments(descriptor: ToolDescriptor, verb: Verb) -> list[str]:
    """Flatten global options, verb name and verb options into argv order."""
    args: list[str] = []
    for opt in descriptor.global_opts:
        args.extend(opt.arguments())
    args.append(verb.name)
    for opt in verb.opts:
        args.extend(opt.arguments())
    return args


def parse_descriptor(text: str, source: object = "<string>") -> ToolDescriptor:
    """Parse descriptor YAML; any problem is reported as DescriptorError."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DescriptorError(source, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise DescriptorError(source, "expected a mapping at the top level")

    try:
        return ToolDescriptor.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise DescriptorError(source, problems) from e


def load_descriptor(path: Path | str) -> ToolDescriptor:
    """Read and validate a descriptor file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DescriptorError(path, f"cannot read file: {e}") from e
    return parse_descriptor(text, source=path)
