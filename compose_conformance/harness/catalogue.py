"""
Scenario Catalogue - scenarios and the tool descriptors they run against.

Every scenario is executed once per descriptor file found in the commands
directory, unless the descriptor's tool name is in the scenario's skip list.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path

from compose_conformance.harness.command_model import load_descriptor
from compose_conformance.harness.errors import DescriptorError


DESCRIPTOR_SUFFIX = ".yml"


@dataclass(frozen=True)
class Scenario:
    """One deployment fixture, the tools that cannot run it, and its spec anchor."""

    deployment: str
    skip: tuple[str, ...] = ()
    spec_ref: str = ""

    def skips(self, tool_name: str) -> bool:
        return tool_name in self.skip

    def spec_reference(self, base_url: str) -> str:
        """Link to the spec section this scenario checks."""
        if self.spec_ref:
            return f"{base_url}#{self.spec_ref}"
        return base_url


def list_descriptor_files(commands_dir: Path | str) -> list[Path]:
    """All descriptor files in the directory, sorted by file name.

    Directories and files without the descriptor suffix are ignored.
    """
    commands_dir = Path(commands_dir)
    if not commands_dir.is_dir():
        raise DescriptorError(commands_dir, "commands directory does not exist")
    return sorted(
        p
        for p in commands_dir.iterdir()
        if p.is_file() and p.name.endswith(DESCRIPTOR_SUFFIX)
    )


def descriptor_id(path: Path) -> str:
    """Test id for a descriptor file (its file name)."""
    return path.name


def find_duplicate_names(paths: list[Path]) -> dict[str, list[Path]]:
    """Tool names declared by more than one descriptor file.

    Unreadable descriptors are ignored here; they fail in their own test case.
    """
    by_name: dict[str, list[Path]] = defaultdict(list)
    for path in paths:
        try:
            descriptor = load_descriptor(path)
        except DescriptorError:
            continue
        by_name[descriptor.name].append(path)
    return {name: files for name, files in by_name.items() if len(files) > 1}


def assert_unique_names(paths: list[Path]) -> None:
    duplicates = find_duplicate_names(paths)
    if duplicates:
        listing = "; ".join(
            f"{name}: {', '.join(p.name for p in files)}"
            for name, files in sorted(duplicates.items())
        )
        raise DescriptorError(paths[0].parent, f"duplicate tool names ({listing})")
