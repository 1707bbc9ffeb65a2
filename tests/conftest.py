"""Pytest configuration and fixtures."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from compose_conformance.harness.config import ComplianceConfig
from compose_conformance.harness.runner import CommandResult, Expect, ProcessRunner
from compose_conformance.services.udp_listener import UdpListener


DESCRIPTOR_YAML = """\
name: {name}
command: {command}
ps_command: docker ps
global_opts:
  - name: compose
up:
  name: up
  opts:
    - name: -d
down:
  name: down
"""


# =============================================================================
# TARGET SERVICE
# =============================================================================


@pytest.fixture
def udp_listener() -> UdpListener:
    """Listener bound to an ephemeral localhost port."""
    return UdpListener("127.0.0.1", 0)


@pytest.fixture
def app(udp_listener: UdpListener):
    from compose_conformance.api.app import create_app

    return create_app(udp_listener=udp_listener)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client with the lifespan running (UDP listener started)."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def volumes_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point /volumefile at a temporary mount root."""
    from compose_conformance.core.config import settings

    root = tmp_path / "volumes"
    root.mkdir()
    monkeypatch.setattr(settings, "volumes_root", str(root))
    return root


# =============================================================================
# HARNESS
# =============================================================================


@dataclass
class FakeRunner(ProcessRunner):
    """
    Records invocations instead of spawning processes.

    ``outputs`` maps a program name to the stdout it should produce;
    ``failing`` lists programs whose invocation must fail.
    """

    outputs: dict[str, str] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    missing: set[str] = field(default_factory=set)
    calls: list[tuple[list[str], Path | None]] = field(default_factory=list)
    timeout: float | None = None

    def which(self, command: str) -> str | None:
        return None if command in self.missing else f"/usr/bin/{command}"

    def run(self, command, args=(), cwd=None, expect=Expect.SUCCESS) -> CommandResult:
        argv = [command, *args]
        self.calls.append((argv, Path(cwd) if cwd is not None else None))
        result = CommandResult(
            command=argv,
            cwd=Path(cwd) if cwd is not None else None,
            exit_code=1 if command in self.failing else 0,
            stdout=self.outputs.get(command, ""),
            stderr="boom" if command in self.failing else "",
            duration=0.0,
        )
        self.assert_outcome(result, expect)
        return result


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner(outputs={"docker": "CONTAINER ID   IMAGE   STATUS\n"})


@pytest.fixture
def compliance_dirs(tmp_path: Path) -> tuple[Path, Path]:
    """Empty commands and deployments directories."""
    commands = tmp_path / "commands"
    deployments = tmp_path / "deployments"
    commands.mkdir()
    deployments.mkdir()
    return commands, deployments


@pytest.fixture
def compliance_config(tmp_path: Path, compliance_dirs) -> ComplianceConfig:
    commands, deployments = compliance_dirs
    return ComplianceConfig(
        commands_dir=commands,
        deployments_dir=deployments,
        report_dir=tmp_path / "reports",
        settle_seconds=0.0,
        ready_timeout=0.5,
    )


@pytest.fixture
def write_descriptor(compliance_dirs) -> Callable[..., Path]:
    """Write a descriptor file into the commands directory."""
    commands, _ = compliance_dirs

    def _write(
        filename: str = "docker.yml",
        name: str = "docker-composeV2",
        command: str = "docker",
        text: str | None = None,
    ) -> Path:
        path = commands / filename
        body = text if text is not None else DESCRIPTOR_YAML.format(name=name, command=command)
        path.write_text(textwrap.dedent(body))
        return path

    return _write


@pytest.fixture
def make_deployment(compliance_dirs) -> Callable[[str], Path]:
    _, deployments = compliance_dirs

    def _make(name: str) -> Path:
        path = deployments / name
        path.mkdir()
        (path / "docker-compose.yml").write_text("services:\n  entry:\n    image: target\n")
        return path

    return _make
