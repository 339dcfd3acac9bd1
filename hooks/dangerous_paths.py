#!/usr/bin/env python3
"""
Dangerous path detection for rm/trash/mv commands.

Given a command and a caller-supplied list of protected path patterns,
report the first path argument of an rm, trash or mv invocation that
targets a protected location.

Pattern shapes:
  - Directory pattern (trailing "/", e.g. "~/"): matches the directory
    itself, or a wildcard token directly beneath it ("~/*", "~/.*").
    Named children such as "~/Documents" never match.
  - Exact pattern (no trailing "/", e.g. "/etc/nginx"): matches the path
    or any descendant, compared after ~ expansion and canonicalization.
"""

import os
import re
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Iterable, List, Optional

GUARDED_VERBS = ("rm", "trash", "mv")

SEGMENT_SEPARATORS = re.compile(r"[;&|]")


@dataclass(frozen=True)
class DangerousPathMatch:
    """A guarded verb targeting a protected path."""

    # The protected pattern as supplied by the caller
    matched_path: str
    # rm, trash or mv
    command_type: str

    def to_dict(self) -> dict:
        return asdict(self)


# === PATH HELPERS ===

def expand_home(path: str) -> str:
    """Expand a leading ~/ using $HOME. Other forms are returned unchanged."""
    if path.startswith("~/"):
        home = os.environ.get("HOME")
        if home:
            return home + path[1:]
    return path


def normalize_path(path: str) -> str:
    """
    Expand ~ and canonicalize the path if it exists on disk.

    Falls back to the expanded text when the path does not exist or cannot
    be resolved.
    """
    expanded = expand_home(path)
    try:
        return str(Path(expanded).resolve(strict=True))
    except (OSError, RuntimeError, ValueError):
        return expanded


def _has_wildcard(path: str) -> bool:
    return "*" in path or "?" in path


def _matches_directory_pattern(path: str, pattern: str) -> bool:
    base = pattern.rstrip("/")

    if path.rstrip("/") == base or path == pattern:
        return True

    if not _has_wildcard(path):
        return False

    expanded_base = expand_home(pattern).rstrip("/")
    expanded_path = expand_home(path)
    if not expanded_path.startswith(expanded_base):
        return False

    rest = expanded_path[len(expanded_base):]
    if not rest.startswith("/"):
        return False

    after_slash = rest[1:]
    return "/" not in after_slash and _has_wildcard(after_slash)


def _matches_exact_pattern(path: str, pattern: str) -> bool:
    normalized = normalize_path(path)
    pattern_normalized = normalize_path(pattern)
    return normalized == pattern_normalized or normalized.startswith(pattern_normalized + "/")


def is_dangerous_path(path: str, protected_patterns: Iterable[str]) -> Optional[str]:
    """
    Check a single path argument against the protected patterns.

    Returns:
        The first protected pattern the path matches, or None.
    """
    for pattern in protected_patterns:
        if pattern.endswith("/"):
            if _matches_directory_pattern(path, pattern):
                return pattern
        elif _matches_exact_pattern(path, pattern):
            return pattern
    return None


# === COMMAND PARSING ===

def split_segments(command: str) -> List[str]:
    """
    Split a command on ;, & and | into trimmed, non-empty segments.

    Unlike a shell, quoting is ignored: a separator inside quotes still
    splits the command.
    """
    segments = []
    for segment in SEGMENT_SEPARATORS.split(command.strip()):
        segment = segment.strip()
        if segment:
            segments.append(segment)
    return segments


def _split_guarded_verb(segment: str):
    """Return (verb, args) if the segment starts with a guarded verb."""
    if segment.startswith("sudo "):
        segment = segment[len("sudo "):].strip()

    for verb in GUARDED_VERBS:
        prefix = verb + " "
        if segment.startswith(prefix):
            return verb, segment[len(prefix):]
    return None, None


def check_dangerous_path(cmd: str, protected_patterns: Iterable[str]) -> Optional[DangerousPathMatch]:
    """
    Check if a command targets a protected path with rm, trash or mv.

    Args:
        cmd: Full command text (may be chained or piped)
        protected_patterns: Protected path patterns, e.g. ["~/", "/etc/nginx"]

    Returns:
        DangerousPathMatch for the first hit, or None.

    Examples:
        >>> check_dangerous_path("rm -rf ~/", ["~/"])
        DangerousPathMatch(matched_path='~/', command_type='rm')
        >>> check_dangerous_path("rm -rf ~/Documents", ["~/"]) is None
        True
    """
    patterns = list(protected_patterns)
    if not patterns:
        return None

    for segment in split_segments(cmd):
        verb, args = _split_guarded_verb(segment)
        if verb is None:
            continue

        for arg in args.split():
            if arg.startswith("-"):
                continue

            matched = is_dangerous_path(arg, patterns)
            if matched is not None:
                return DangerousPathMatch(matched_path=matched, command_type=verb)

    return None


def parse_path_list(value: str) -> List[str]:
    """Parse a comma-separated pattern list, dropping blank entries."""
    return [part.strip() for part in value.split(",") if part.strip()]


__all__ = [
    'DangerousPathMatch',
    'expand_home',
    'normalize_path',
    'is_dangerous_path',
    'split_segments',
    'check_dangerous_path',
    'parse_path_list',
]
