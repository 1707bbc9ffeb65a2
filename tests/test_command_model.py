"""Tests for tool descriptors and argument composition."""

from __future__ import annotations

import pytest

from compose_conformance.harness.command_model import (
    Opt,
    ToolDescriptor,
    Verb,
    compose_arguments,
    load_descriptor,
    parse_descriptor,
)
from compose_conformance.harness.errors import DescriptorError


def _descriptor(**overrides) -> ToolDescriptor:
    data = {
        "name": "docker-composeV2",
        "command": "docker",
        "ps_command": "docker ps",
        "global_opts": [{"name": "compose"}, {"name": "--ansi", "value": "never"}],
        "up": {"name": "up", "opts": [{"name": "-d"}, {"name": "--scale", "value": "web=3"}]},
        "down": {"name": "down", "opts": [{"name": "--timeout", "value": "5"}]},
    }
    data.update(overrides)
    return ToolDescriptor.model_validate(data)


class TestComposeArguments:
    """Global options, then verb name, then verb options."""

    def test_up_argument_order(self):
        descriptor = _descriptor()
        assert descriptor.up_arguments() == [
            "compose", "--ansi", "never", "up", "-d", "--scale", "web=3",
        ]

    def test_down_argument_order(self):
        descriptor = _descriptor()
        assert descriptor.down_arguments() == [
            "compose", "--ansi", "never", "down", "--timeout", "5",
        ]

    def test_without_global_options_verb_comes_first(self):
        descriptor = _descriptor(global_opts=[])
        assert descriptor.up_arguments()[0] == "up"

    def test_empty_value_emits_name_only(self):
        descriptor = _descriptor(global_opts=[{"name": "--verbose", "value": ""}])
        assert compose_arguments(descriptor, Verb(name="down")) == ["--verbose", "down"]

    def test_declared_order_is_preserved_not_sorted(self):
        verb = Verb(name="up", opts=[Opt(name="-z"), Opt(name="-a"), Opt(name="-m")])
        descriptor = _descriptor(global_opts=[{"name": "--b"}, {"name": "--a"}])
        assert compose_arguments(descriptor, verb) == ["--b", "--a", "up", "-z", "-a", "-m"]

    def test_status_arguments_split_shell_style(self):
        descriptor = _descriptor(ps_command="docker ps --format 'table {{.Names}}'")
        assert descriptor.status_arguments() == [
            "docker", "ps", "--format", "table {{.Names}}",
        ]


class TestParseDescriptor:
    """YAML deserialization and validation."""

    def test_minimal_descriptor(self):
        descriptor = parse_descriptor(
            "name: compose-ref\n"
            "command: compose-ref\n"
            "ps_command: docker ps\n"
            "up:\n  name: up\n"
            "down:\n  name: down\n"
        )
        assert descriptor.global_opts == []
        assert descriptor.up.opts == []
        assert descriptor.up_arguments() == ["up"]

    def test_numeric_and_boolean_values_become_strings(self):
        descriptor = parse_descriptor(
            "name: t\ncommand: t\nps_command: t ps\n"
            "global_opts:\n  - name: --parallel\n    value: 3\n"
            "up:\n  name: up\n  opts:\n    - name: --detach\n      value: true\n"
            "down:\n  name: down\n  opts: null\n"
        )
        assert descriptor.up_arguments() == ["--parallel", "3", "up", "--detach", "true"]
        assert descriptor.down.opts == []

    def test_invalid_yaml(self):
        with pytest.raises(DescriptorError, match="invalid YAML"):
            parse_descriptor("name: [unclosed")

    def test_non_mapping_document(self):
        with pytest.raises(DescriptorError, match="mapping"):
            parse_descriptor("- just\n- a list\n")

    def test_missing_required_field(self):
        with pytest.raises(DescriptorError, match="ps_command"):
            parse_descriptor("name: t\ncommand: t\nup:\n  name: up\ndown:\n  name: down\n")

    def test_unknown_key_rejected(self):
        with pytest.raises(DescriptorError, match="not permitted"):
            parse_descriptor(
                "name: t\ncommand: t\nps_command: t ps\nrestart: always\n"
                "up:\n  name: up\ndown:\n  name: down\n"
            )

    def test_empty_ps_command_rejected(self):
        with pytest.raises(DescriptorError):
            parse_descriptor(
                "name: t\ncommand: t\nps_command: '  '\n"
                "up:\n  name: up\ndown:\n  name: down\n"
            )

    def test_error_is_an_assertion_failure(self):
        """Malformed descriptors fail the test case rather than erroring the run."""
        with pytest.raises(AssertionError):
            parse_descriptor("")


class TestLoadDescriptor:
    def test_loads_from_file(self, write_descriptor):
        path = write_descriptor(name="docker-composeV1", command="docker-compose")
        descriptor = load_descriptor(path)
        assert descriptor.name == "docker-composeV1"
        assert descriptor.command == "docker-compose"

    def test_missing_file_names_path(self, tmp_path):
        path = tmp_path / "absent.yml"
        with pytest.raises(DescriptorError) as exc_info:
            load_descriptor(path)
        assert exc_info.value.path == path
        assert "cannot read" in str(exc_info.value)

    def test_shipped_descriptors_are_valid(self):
        """Every descriptor in the compliance suite parses."""
        from pathlib import Path

        commands = Path(__file__).parent.parent / "system_tests" / "commands"
        names = [load_descriptor(p).name for p in sorted(commands.glob("*.yml"))]
        assert names
        assert len(names) == len(set(names))
