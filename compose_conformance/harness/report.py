"""
Failure Report - structured record of a failed lifecycle.

JSON for machines, markdown for humans. Captures which step failed, every
command that ran with its output, and the spec section to consult.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from compose_conformance.harness.runner import CommandResult


@dataclass
class FailureReport:
    """Everything needed to triage one failed (scenario, tool) pair."""

    deployment: str
    tool: str
    step: str
    started: datetime
    finished: datetime
    error: str
    spec_reference: str
    completed_steps: list[str] = field(default_factory=list)
    commands: dict[str, CommandResult] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "deployment": self.deployment,
            "tool": self.tool,
            "failed_step": self.step,
            "started": self.started.isoformat(),
            "finished": self.finished.isoformat(),
            "duration_seconds": (self.finished - self.started).total_seconds(),
            "completed_steps": self.completed_steps,
            "error": self.error,
            "spec_reference": self.spec_reference,
            "commands": {
                step: {
                    "command": result.command_line,
                    "cwd": str(result.cwd) if result.cwd else None,
                    "exit_code": result.exit_code,
                    "stdout": result.stdout,
                    "stderr": result.stderr,
                    "duration_seconds": result.duration,
                }
                for step, result in self.commands.items()
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)

    def to_markdown(self) -> str:
        md = f"""# Compliance Failure

**Deployment:** `{self.deployment}`
**Tool:** `{self.tool}`
**Failed step:** `{self.step}`
**Spec:** {self.spec_reference}

## Error

```
{self.error}
```
"""
        for step, result in self.commands.items():
            md += f"\n## {step}: `{result.command_line}` (exit {result.exit_code})\n\n"
            if result.stdout:
                md += f"stdout:\n```\n{result.stdout[-2000:]}\n```\n"
            if result.stderr:
                md += f"stderr:\n```\n{result.stderr[-2000:]}\n```\n"
        return md

    def save(self, directory: Path | str) -> Path:
        """Write the JSON and markdown report; returns the JSON path."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        safe_tool = self.tool.replace("/", "_").replace(" ", "_")
        timestamp = self.started.strftime("%Y%m%d_%H%M%S_%f")
        stem = f"{self.deployment}_{safe_tool}_{timestamp}"
        attempt = 1
        while (directory / f"{stem}.json").exists():
            attempt += 1
            stem = f"{self.deployment}_{safe_tool}_{timestamp}_{attempt}"

        json_path = directory / f"{stem}.json"
        json_path.write_text(self.to_json())
        (directory / f"{stem}.md").write_text(self.to_markdown())
        return json_path
