"""
Compliance Suite Configuration - pytest fixtures and parametrization.

Every test that takes a ``descriptor_path`` argument runs once per descriptor
file in the commands directory. The tests drive real compose tools, so they
must run sequentially (no xdist) against a Docker host with the target image
built:

    docker build -t compose-conformance-target:latest .
    pytest system_tests/
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator

import pytest

from compose_conformance.core.logging import setup_logging
from compose_conformance.harness.catalogue import (
    Scenario,
    assert_unique_names,
    descriptor_id,
    list_descriptor_files,
)
from compose_conformance.harness.config import ComplianceConfig, get_config
from compose_conformance.harness.errors import DescriptorError
from compose_conformance.harness.lifecycle import LifecycleDriver
from compose_conformance.harness.verification import Verifier


# =============================================================================
# PARAMETRIZATION
# =============================================================================


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    """Fan each compliance test out over the tool descriptors."""
    if "descriptor_path" not in metafunc.fixturenames:
        return
    config = get_config()
    try:
        paths = list_descriptor_files(config.commands_dir)
    except DescriptorError as e:
        pytest.fail(str(e), pytrace=False)
    metafunc.parametrize("descriptor_path", paths, ids=[descriptor_id(p) for p in paths])


# =============================================================================
# CONFIGURATION
# =============================================================================


@pytest.fixture(scope="session")
def compliance_config() -> ComplianceConfig:
    """Load compliance configuration from environment."""
    return get_config()


@pytest.fixture(scope="session", autouse=True)
def unique_tool_names(compliance_config: ComplianceConfig) -> None:
    """Skip matching relies on tool names being unique across descriptors."""
    assert_unique_names(list_descriptor_files(compliance_config.commands_dir))


# =============================================================================
# LIFECYCLE AND VERIFICATION
# =============================================================================


@pytest.fixture(scope="session")
def lifecycle(compliance_config: ComplianceConfig) -> LifecycleDriver:
    return LifecycleDriver(compliance_config)


@pytest.fixture
def verifier_for(
    compliance_config: ComplianceConfig,
) -> Generator[Callable[[Scenario], Verifier], None, None]:
    """
    Build verifiers bound to a scenario's spec reference.

    Usage:
        def test_network(descriptor_path, lifecycle, verifier_for):
            verifier = verifier_for(SIMPLE_NETWORK)
            lifecycle.run(SIMPLE_NETWORK, descriptor_path, lambda: verifier.check_response(...))
    """
    verifiers: list[Verifier] = []

    def factory(scenario: Scenario) -> Verifier:
        verifier = Verifier(compliance_config, scenario)
        verifiers.append(verifier)
        return verifier

    yield factory

    for verifier in verifiers:
        verifier.close()


# =============================================================================
# PYTEST HOOKS
# =============================================================================


def pytest_configure(config):
    """Register markers and route harness logs to the console."""
    setup_logging(log_format="text")
    config.addinivalue_line(
        "markers",
        "compliance: Drives a real compose tool through a deployment fixture",
    )


def pytest_collection_modifyitems(config, items):
    """Mark everything under system_tests/ as a compliance test."""
    here = Path(__file__).parent
    for item in items:
        if here in Path(str(item.fspath)).parents:
            item.add_marker(pytest.mark.compliance)
