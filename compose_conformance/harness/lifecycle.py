"""
Lifecycle Driver - run one scenario against one tool.

Steps run strictly in order and stop at the first failure:

1. setup          load the descriptor, honour the skip list, locate the fixture
2. up             start the deployment; must succeed
3. verify         caller-supplied probes against the target service
4. down           tear the deployment down; must succeed
5. cleanup_check  the status command must list nothing but its header

The status command has to succeed for its output to count: an empty or
missing listing from a failed command is never taken as "no leftovers".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable

import pytest

from compose_conformance.core.logging import get_logger
from compose_conformance.harness.catalogue import Scenario
from compose_conformance.harness.command_model import ToolDescriptor, load_descriptor
from compose_conformance.harness.config import ComplianceConfig
from compose_conformance.harness.errors import (
    CommandFailedError,
    HarnessError,
    LifecycleError,
    ResidualStateError,
)
from compose_conformance.harness.report import FailureReport
from compose_conformance.harness.runner import CommandResult, ProcessRunner


logger = get_logger("harness.lifecycle")


class Step(str, Enum):
    SETUP = "setup"
    UP = "up"
    VERIFY = "verify"
    DOWN = "down"
    CLEANUP_CHECK = "cleanup_check"


def status_records(output: str) -> list[str]:
    """Records listed by a status command, header line discounted."""
    lines = output.strip("\n").split("\n")
    return lines[1:]


def count_records(output: str) -> int:
    return len(status_records(output))


@dataclass
class LifecycleRecord:
    """What happened while running one (scenario, tool) pair."""

    scenario: Scenario
    descriptor_path: Path
    tool: str = ""
    completed: list[Step] = field(default_factory=list)
    results: dict[Step, CommandResult] = field(default_factory=dict)


class LifecycleDriver:
    """
    Drive any tool through up / verify / down / cleanup-check.

    Usage:
        driver = LifecycleDriver(config)
        driver.run(
            Scenario("simple_network", spec_ref="Networks-top-level-element"),
            Path("system_tests/commands/docker-composeV2.yml"),
            verify=lambda: verifier.check_response("/ping", "PONG FROM TARGET"),
        )
    """

    def __init__(
        self,
        config: ComplianceConfig,
        runner: ProcessRunner | None = None,
    ):
        self.config = config
        self.runner = runner or ProcessRunner(timeout=config.command_timeout)

    def run(
        self,
        scenario: Scenario,
        descriptor_path: Path | str,
        verify: Callable[[], None],
    ) -> LifecycleRecord:
        """Run the full lifecycle; raises on the first failing step."""
        if verify is None:
            raise ValueError("verify callback cannot be None")

        record = LifecycleRecord(scenario=scenario, descriptor_path=Path(descriptor_path))
        started = datetime.now(timezone.utc)
        step = Step.SETUP

        try:
            descriptor = load_descriptor(record.descriptor_path)
            record.tool = descriptor.name
            if scenario.skips(descriptor.name):
                logger.info(f"Skipping {descriptor.name} for {scenario.deployment}")
                pytest.skip(
                    f"{descriptor.name} is excluded from scenario {scenario.deployment}"
                )
            workdir = self._prepare(scenario, descriptor)
            record.completed.append(step)

            step = Step.UP
            record.results[step] = self.runner.run(
                descriptor.command, descriptor.up_arguments(), cwd=workdir
            )
            record.completed.append(step)

            step = Step.VERIFY
            logger.info(f"Verifying {scenario.deployment} deployed by {descriptor.name}")
            verify()
            record.completed.append(step)

            step = Step.DOWN
            record.results[step] = self.runner.run(
                descriptor.command, descriptor.down_arguments(), cwd=workdir
            )
            record.completed.append(step)

            step = Step.CLEANUP_CHECK
            record.results[step] = self._check_cleanup(scenario, descriptor)
            record.completed.append(step)
        except Exception as e:
            self._report_failure(record, step, e, started)
            tool = record.tool or record.descriptor_path.name
            raise LifecycleError(scenario.deployment, tool, step.value, e) from e

        logger.info(f"{scenario.deployment} passed with {descriptor.name}")
        return record

    def _prepare(self, scenario: Scenario, descriptor: ToolDescriptor) -> Path:
        workdir = self.config.deployments_dir / scenario.deployment
        if not workdir.is_dir():
            raise HarnessError(f"Deployment fixture directory not found: {workdir}")
        if self.runner.which(descriptor.command) is None:
            raise HarnessError(
                f"Command {descriptor.command!r} of tool {descriptor.name} "
                "is not on PATH"
            )
        return workdir

    def _check_cleanup(
        self, scenario: Scenario, descriptor: ToolDescriptor
    ) -> CommandResult:
        program, *args = descriptor.status_arguments()
        result = self.runner.run(program, args)
        leftovers = status_records(result.stdout)
        if leftovers:
            raise ResidualStateError(
                leftovers, scenario.spec_reference(self.config.spec_url)
            )
        return result

    def _report_failure(
        self,
        record: LifecycleRecord,
        step: Step,
        error: BaseException,
        started: datetime,
    ) -> None:
        if self.config.report_dir is None:
            return
        commands = {s.value: r for s, r in record.results.items()}
        if isinstance(error, CommandFailedError) and error.result is not None:
            commands[step.value] = error.result
        report = FailureReport(
            deployment=record.scenario.deployment,
            tool=record.tool or record.descriptor_path.name,
            step=step.value,
            started=started,
            finished=datetime.now(timezone.utc),
            error=f"{error.__class__.__name__}: {error}",
            spec_reference=record.scenario.spec_reference(self.config.spec_url),
            completed_steps=[s.value for s in record.completed],
            commands=commands,
        )
        try:
            path = report.save(self.config.report_dir)
        except OSError as e:
            logger.warning(f"Could not write failure report: {e}")
            return
        logger.error(
            f"{record.scenario.deployment} failed at {step.value} "
            f"with {report.tool}; report: {path}"
        )
