"""
Compliance Harness Configuration.

Controls where tool descriptors and deployment fixtures live, how the
deployed target service is reached, and where failure reports go.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


BASE_SPEC_URL = "https://github.com/compose-spec/compose-spec/blob/master/spec.md"


def _optional_float(value: str | None) -> float | None:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass
class ComplianceConfig:
    """Configuration for compliance runs."""

    # Declarative inputs
    commands_dir: Path = field(default_factory=lambda: Path("system_tests/commands"))
    deployments_dir: Path = field(
        default_factory=lambda: Path("system_tests/deployments")
    )

    # Where the deployed target service is published
    target_host: str = "127.0.0.1"
    http_port: int = 8080
    udp_port: int = 10001

    # Timeouts (seconds); command_timeout None means wait indefinitely
    http_timeout: float = 10.0
    command_timeout: float | None = None
    ready_timeout: float = 30.0

    # Pause used as the verification step of the lifecycle-only scenario
    settle_seconds: float = 1.0

    # Diagnostics
    spec_url: str = BASE_SPEC_URL
    report_dir: Path | None = field(
        default_factory=lambda: Path("test-results/compliance-reports")
    )

    @property
    def http_base_url(self) -> str:
        return f"http://{self.target_host}:{self.http_port}"

    @classmethod
    def from_env(cls) -> "ComplianceConfig":
        """Load config from environment variables."""
        report_dir = os.getenv("COMPLIANCE_REPORT_DIR", "test-results/compliance-reports")
        return cls(
            commands_dir=Path(os.getenv("COMPLIANCE_COMMANDS_DIR", "system_tests/commands")),
            deployments_dir=Path(
                os.getenv("COMPLIANCE_DEPLOYMENTS_DIR", "system_tests/deployments")
            ),
            target_host=os.getenv("COMPLIANCE_TARGET_HOST", "127.0.0.1"),
            http_port=int(os.getenv("COMPLIANCE_HTTP_PORT", "8080")),
            udp_port=int(os.getenv("COMPLIANCE_UDP_PORT", "10001")),
            http_timeout=float(os.getenv("COMPLIANCE_HTTP_TIMEOUT", "10")),
            command_timeout=_optional_float(os.getenv("COMPLIANCE_COMMAND_TIMEOUT")),
            ready_timeout=float(os.getenv("COMPLIANCE_READY_TIMEOUT", "30")),
            settle_seconds=float(os.getenv("COMPLIANCE_SETTLE_SECONDS", "1.0")),
            spec_url=os.getenv("COMPLIANCE_SPEC_URL", BASE_SPEC_URL),
            report_dir=Path(report_dir) if report_dir else None,
        )


# Global default config instance
_config: ComplianceConfig | None = None


def get_config() -> ComplianceConfig:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = ComplianceConfig.from_env()
    return _config
