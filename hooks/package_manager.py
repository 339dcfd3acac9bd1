#!/usr/bin/env python3
"""
Package manager consistency check.

Detects which JavaScript package manager a command uses for a mutating
operation, looks for lock files from the working directory upwards, and
reports whether the command matches the project's package manager.

The nearest directory containing any lock file decides; lock files in
parent directories are never merged with it.
"""

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Pattern, Tuple, Union


class PackageManager(Enum):
    """JavaScript package managers. The value is the binary name."""

    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"

    @property
    def lock_files(self) -> Tuple[str, ...]:
        return LOCK_FILES[self]


LOCK_FILES = {
    PackageManager.NPM: ("package-lock.json",),
    PackageManager.PNPM: ("pnpm-lock.yaml",),
    PackageManager.YARN: ("yarn.lock",),
    PackageManager.BUN: ("bun.lockb", "bun.lock"),
}

# Mutating subcommands only; run/start/scripts never match.
PM_COMMAND_REGEX = (
    r"(?:^|[;&|()]\s*)(?:sudo\s+)?(?:npx\s+)?(?P<pm>npm|pnpm|yarn|bun)\s+"
    r"(?P<subcmd>install|add|remove|uninstall|ci|update|upgrade|link|rebuild|dedupe|i|rm|un|up)"
    r"(?:\s|$)"
)


# === RESULTS ===

@dataclass(frozen=True)
class Ok:
    """No package manager command detected, or no lock file found."""

    def to_dict(self) -> dict:
        return {"result": "ok"}


@dataclass(frozen=True)
class Matching:
    """Command uses the package manager the lock file indicates."""

    def to_dict(self) -> dict:
        return {"result": "matching"}


@dataclass(frozen=True)
class Mismatch:
    """Command uses a different package manager than the lock file indicates."""

    command_pm: PackageManager
    expected_pm: PackageManager

    def to_dict(self) -> dict:
        return {
            "result": "mismatch",
            "command_pm": self.command_pm.value,
            "expected_pm": self.expected_pm.value,
            "detected_lock_files": list(self.expected_pm.lock_files),
        }


@dataclass(frozen=True)
class Ambiguous:
    """Lock files of several package managers sit in the same directory."""

    command_pm: PackageManager
    detected_pms: Tuple[PackageManager, ...]

    def to_dict(self) -> dict:
        return {
            "result": "ambiguous",
            "command_pm": self.command_pm.value,
            "detected_pms": [pm.value for pm in self.detected_pms],
            "detected_lock_files": [
                lock_file for pm in self.detected_pms for lock_file in pm.lock_files
            ],
        }


PackageManagerCheck = Union[Ok, Matching, Mismatch, Ambiguous]


# === DETECTION ===

_command_pattern: Optional[Pattern] = None


def _get_command_pattern() -> Pattern:
    global _command_pattern
    if _command_pattern is None:
        _command_pattern = re.compile(PM_COMMAND_REGEX)
    return _command_pattern


def detect_command(cmd: str) -> Optional[PackageManager]:
    """
    Detect which package manager a command uses for a mutating operation.

    Examples:
        >>> detect_command("cd app && pnpm add lodash")
        <PackageManager.PNPM: 'pnpm'>
        >>> detect_command("npm run build") is None
        True
    """
    match = _get_command_pattern().search(cmd)
    if match is None:
        return None
    return PackageManager(match.group("pm"))


def _lock_file_exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError:
        return False


def find_lock_evidence(start_dir) -> List[PackageManager]:
    """
    Find package managers with lock files, searching upward from start_dir.

    Stops at the first directory holding at least one lock file and returns
    every package manager found there, in enumeration order.
    """
    start = Path(os.path.abspath(start_dir))

    for directory in (start, *start.parents):
        found = []
        for pm in PackageManager:
            if any(_lock_file_exists(directory / name) for name in pm.lock_files):
                found.append(pm)
        if found:
            return found

    return []


def check_package_manager(cmd: str, start_dir) -> PackageManagerCheck:
    """
    Check if a command uses a package manager other than the project's.

    Args:
        cmd: Full command text
        start_dir: Directory to start searching for lock files

    Returns:
        Ok, Matching, Mismatch(command_pm, expected_pm) or
        Ambiguous(command_pm, detected_pms)
    """
    command_pm = detect_command(cmd)
    if command_pm is None:
        return Ok()

    detected = find_lock_evidence(start_dir)

    if not detected:
        return Ok()

    if len(detected) > 1:
        return Ambiguous(command_pm=command_pm, detected_pms=tuple(detected))

    expected_pm = detected[0]
    if command_pm == expected_pm:
        return Matching()
    return Mismatch(command_pm=command_pm, expected_pm=expected_pm)


__all__ = [
    'PackageManager',
    'LOCK_FILES',
    'Ok',
    'Matching',
    'Mismatch',
    'Ambiguous',
    'PackageManagerCheck',
    'detect_command',
    'find_lock_evidence',
    'check_package_manager',
]
