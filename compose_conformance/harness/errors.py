"""Harness failure taxonomy.

Every harness failure is an AssertionError so pytest reports it as a failed
test case rather than an error in the harness itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from compose_conformance.harness.runner import CommandResult


class HarnessError(AssertionError):
    """Base class for conformance failures."""


class DescriptorError(HarnessError):
    """A tool descriptor could not be read or does not match the schema."""

    def __init__(self, path: object, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid tool descriptor {path}: {reason}")


class CommandFailedError(HarnessError):
    """A subprocess finished with an outcome other than the expected one."""

    def __init__(self, message: str, result: "CommandResult | None" = None):
        self.result = result
        if result is not None:
            message = f"{message}\n{result.describe()}"
        super().__init__(message)


class ResidualStateError(HarnessError):
    """Resources were still running after the tool tore the deployment down."""

    def __init__(self, records: list[str], spec_reference: str):
        self.records = records
        self.spec_reference = spec_reference
        listing = "\n".join(f"  {r}" for r in records)
        super().__init__(
            "Problem checking containers' state. "
            "There shouldn't be any containers before or after a test.\n"
            f"Leftover records ({len(records)}):\n{listing}\n"
            f"Please refer to: {spec_reference}"
        )


class VerificationError(HarnessError):
    """An observed value did not match the expected one."""


class LifecycleError(HarnessError):
    """A lifecycle step failed; names the scenario, tool and step."""

    def __init__(self, deployment: str, tool: str, step: str, cause: BaseException):
        self.deployment = deployment
        self.tool = tool
        self.step = step
        self.cause = cause
        super().__init__(
            f"[{deployment} / {tool}] step '{step}' failed: "
            f"{cause.__class__.__name__}: {cause}"
        )
