"""
Compose compliance harness.

Drives compose implementations described by declarative descriptors through
up / verify / down / cleanup-check and observes the deployed target service
from outside.

Key pieces:
- Command model: per-tool descriptors flattened into argv
- Process runner: subprocess execution with outcome assertions
- Lifecycle driver: the five-step protocol per (scenario, tool)
- Verifier: HTTP/UDP probes with spec-referenced mismatch messages
"""

from compose_conformance.harness.catalogue import Scenario, list_descriptor_files
from compose_conformance.harness.command_model import (
    Opt,
    ToolDescriptor,
    Verb,
    compose_arguments,
    load_descriptor,
)
from compose_conformance.harness.config import ComplianceConfig, get_config
from compose_conformance.harness.lifecycle import LifecycleDriver, Step, count_records
from compose_conformance.harness.runner import CommandResult, Expect, ProcessRunner
from compose_conformance.harness.verification import Verifier, json_response

__all__ = [
    "CommandResult",
    "ComplianceConfig",
    "Expect",
    "LifecycleDriver",
    "Opt",
    "ProcessRunner",
    "Scenario",
    "Step",
    "ToolDescriptor",
    "Verb",
    "Verifier",
    "compose_arguments",
    "count_records",
    "get_config",
    "json_response",
    "list_descriptor_files",
    "load_descriptor",
]
