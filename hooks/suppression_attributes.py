#!/usr/bin/env python3
"""
Lint-suppression attribute detection for Rust sources.

Finds #[allow(...)] / #![allow(...)] and #[expect(...)] / #![expect(...)]
attributes that appear in code, ignoring mentions inside comments and string
literals. The caller decides which files to check (see is_rust_file).
"""

import re
from enum import Enum
from pathlib import PurePath
from typing import Optional, Pattern, Tuple

from text_scanner import is_code_position

ALLOW_REGEX = r"#!?\[allow\s*\("
EXPECT_REGEX = r"#!?\[expect\s*\("


class SuppressionCheck(Enum):
    """Result of checking content for suppression attributes."""

    OK = "ok"
    HAS_ALLOW = "has_allow"
    HAS_EXPECT = "has_expect"
    HAS_BOTH = "has_both"

    def to_dict(self) -> dict:
        return {"result": self.value}


_patterns: Optional[Tuple[Pattern, Pattern]] = None


def _get_patterns() -> Tuple[Pattern, Pattern]:
    global _patterns
    if _patterns is None:
        _patterns = (re.compile(ALLOW_REGEX), re.compile(EXPECT_REGEX))
    return _patterns


def _has_real_match(content: str, pattern: Pattern) -> bool:
    for match in pattern.finditer(content):
        if is_code_position(content, match.start()):
            return True
    return False


def check_suppression(content: str) -> SuppressionCheck:
    """
    Check content for allow/expect attributes outside comments and strings.

    Args:
        content: Source text being written or inserted

    Returns:
        SuppressionCheck.OK, HAS_ALLOW, HAS_EXPECT or HAS_BOTH

    Examples:
        >>> check_suppression("// #[allow(x)]\\nfn f(){}")
        <SuppressionCheck.OK: 'ok'>
        >>> check_suppression("#![allow(unused)]")
        <SuppressionCheck.HAS_ALLOW: 'has_allow'>
    """
    allow_pattern, expect_pattern = _get_patterns()
    has_allow = _has_real_match(content, allow_pattern)
    has_expect = _has_real_match(content, expect_pattern)

    if has_allow and has_expect:
        return SuppressionCheck.HAS_BOTH
    if has_allow:
        return SuppressionCheck.HAS_ALLOW
    if has_expect:
        return SuppressionCheck.HAS_EXPECT
    return SuppressionCheck.OK


def is_rust_file(file_path: str) -> bool:
    """Check if a file path has a .rs extension (case-insensitive)."""
    return PurePath(file_path).suffix.lower() == ".rs"


__all__ = [
    'SuppressionCheck',
    'check_suppression',
    'is_rust_file',
]
