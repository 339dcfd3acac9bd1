#!/usr/bin/env python3
"""
Destructive command detection.

Recognizes deletion commands (rm and OS equivalents, xargs rm), destructive
find pipelines, and redirects to the Windows nul device. Every check works
on the full command text, since separators are part of the patterns.

Pattern tables are compiled on first use and never modified afterwards.
"""

import platform
import re
from typing import Dict, List, Optional, Pattern, Tuple

IS_WINDOWS = platform.system() == "Windows"

# === PATTERNS ===

# Command boundary, optional sudo/command/backslash escape, binary path prefix,
# then the deletion verb.
RM_REGEX_POSIX = (
    r"(^|[;&|()]\s*)(sudo\s+)?(command\s+)?(\\)?(\S*/)?"
    r"(rm|xargs\s+(sudo\s+)?(rm|rmdir))(\s|$)"
)

RM_REGEX_WINDOWS = (
    r"(^|[;&|()]\s*)(sudo\s+)?(command\s+)?(\\)?(\S*[\\/])?"
    r"(rm|del|rd|rmdir|remove-item|xargs\s+(sudo\s+)?(rm|rmdir))(\s|$)"
)

DESTRUCTIVE_FIND_POSIX = [
    (r"find\s+.*-delete", "find with -delete option"),
    (r"find\s+.*-exec\s+(sudo\s+)?(rm|rmdir)\s", "find with -exec rm/rmdir"),
    (r"find\s+.*-execdir\s+(sudo\s+)?(rm|rmdir)\s", "find with -execdir rm/rmdir"),
    (r"find\s+.*\|\s*(sudo\s+)?xargs\s+(sudo\s+)?(rm|rmdir)", "find piped to xargs rm/rmdir"),
    (r"find\s+.*-exec\s+(sudo\s+)?mv\s", "find with -exec mv"),
    (r"find\s+.*-ok\s+(sudo\s+)?(rm|rmdir)\s", "find with -ok rm/rmdir"),
]

DESTRUCTIVE_FIND_WINDOWS = [
    (r"\|\s*(move|move-item)\b", "piped to move/move-item"),
]

# Gate: destructive-find table is only consulted when this matches.
FIND_CHECK_POSIX = r"(^|[;&|()]\s*)find\s"
FIND_CHECK_WINDOWS = r"\|"

# > nul, 2> nul, &> nul, >> nul (optionally nul:)
NUL_REDIRECT_REGEX = r"(?:\d|&)?>{1,2}\s*nul(?![\w.\\/-])"


class _CompiledTables:
    """Compiled regexes for one platform flavour."""

    def __init__(self, windows: bool):
        if windows:
            self.rm = re.compile(RM_REGEX_WINDOWS, re.IGNORECASE)
            find_table = DESTRUCTIVE_FIND_WINDOWS
            self.find_check = re.compile(FIND_CHECK_WINDOWS)
        else:
            self.rm = re.compile(RM_REGEX_POSIX)
            find_table = DESTRUCTIVE_FIND_POSIX
            self.find_check = re.compile(FIND_CHECK_POSIX)

        self.destructive_find: List[Tuple[Pattern, str]] = [
            (re.compile(regex, re.IGNORECASE), description)
            for regex, description in find_table
        ]


_tables: Dict[bool, _CompiledTables] = {}
_nul_redirect: Optional[Pattern] = None


def _get_tables(windows: Optional[bool] = None) -> _CompiledTables:
    """Get the compiled tables for `windows` (defaults to the host platform)."""
    if windows is None:
        windows = IS_WINDOWS
    tables = _tables.get(windows)
    if tables is None:
        tables = _tables.setdefault(windows, _CompiledTables(windows))
    return tables


def _get_nul_redirect() -> Pattern:
    global _nul_redirect
    if _nul_redirect is None:
        _nul_redirect = re.compile(NUL_REDIRECT_REGEX, re.IGNORECASE)
    return _nul_redirect


# === CHECKS ===

def is_destructive_delete(cmd: str, windows: Optional[bool] = None) -> bool:
    """
    Check if a command contains an rm (or equivalent) invocation.

    The verb must sit at a command boundary (start of string or after one of
    `; & | ( )`), optionally behind sudo, `command`, a backslash escape or a
    binary path, and be followed by whitespace or end of string. Verbs
    embedded in longer tokens (`rma`, `grep`, `format`) do not match.

    Args:
        cmd: Full command text
        windows: Use the Windows verb table. Defaults to the host platform.

    Returns:
        True if the command deletes files and should be blocked.

    Examples:
        >>> is_destructive_delete("sudo rm -rf /tmp/x", windows=False)
        True
        >>> is_destructive_delete("grep -r rm .", windows=False)
        False
    """
    return _get_tables(windows).rm.search(cmd) is not None


def check_destructive_find(cmd: str, windows: Optional[bool] = None) -> Optional[str]:
    """
    Check if a command is a destructive find pipeline.

    Returns:
        Description of the first matching destructive pattern, or None.
    """
    tables = _get_tables(windows)

    if not tables.find_check.search(cmd):
        return None

    for regex, description in tables.destructive_find:
        if regex.search(cmd):
            return description

    return None


def has_nul_redirect(cmd: str) -> bool:
    """True if the command redirects output to the Windows `nul` device."""
    return _get_nul_redirect().search(cmd) is not None


__all__ = [
    'IS_WINDOWS',
    'is_destructive_delete',
    'check_destructive_find',
    'has_nul_redirect',
]
