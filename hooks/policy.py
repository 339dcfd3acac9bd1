#!/usr/bin/env python3
"""
Policy facade for agent-hooks.

Re-exports the independent detectors and builds the human-readable reasons
that the platform adapters attach to their deny/ask decisions. Detectors do
not call each other; adapters decide which ones to run and how to combine
them.
"""

from typing import Optional

from dangerous_paths import DangerousPathMatch, check_dangerous_path, parse_path_list
from destructive_commands import check_destructive_find, has_nul_redirect, is_destructive_delete
from package_manager import (
    Ambiguous,
    Matching,
    Mismatch,
    Ok,
    PackageManager,
    PackageManagerCheck,
    check_package_manager,
    detect_command,
    find_lock_evidence,
)
from suppression_attributes import SuppressionCheck, check_suppression, is_rust_file
from text_scanner import is_code_position

RM_FORBIDDEN_REASON = "rm is forbidden. Use trash command to delete files. Example: trash <path...>"

NUL_REDIRECT_REASON = "Use /dev/null instead of nul. On Windows bash, '> nul' creates an undeletable file."

_ALLOW_MSG = (
    "Adding #[allow(...)] or #![allow(...)] attributes is not permitted. "
    "Fix the underlying issue instead of suppressing the warning."
)
_EXPECT_MSG = (
    "Adding #[expect(...)] or #![expect(...)] attributes is not permitted. "
    "Fix the underlying issue instead of suppressing the warning."
)
_BOTH_MSG = (
    "Adding #[allow(...)] or #[expect(...)] attributes is not permitted. "
    "Fix the underlying issue instead of suppressing the warning."
)
_USE_EXPECT_MSG = (
    "Adding #[allow(...)] or #![allow(...)] attributes is not permitted. "
    "Use #[expect(...)] instead, which will warn when the lint is no longer triggered."
)


def dangerous_path_reason(match: DangerousPathMatch, confirm: bool = True) -> str:
    """
    Reason for an rm/trash/mv on a protected path.

    Args:
        match: Detector result
        confirm: True when the adapter asks for confirmation, False when it denies
    """
    action = "Please confirm this operation." if confirm else "Please avoid this operation."
    return (
        f"Dangerous path operation detected: {match.command_type} command targeting "
        f"protected path '{match.matched_path}'. {action}"
    )


def destructive_find_reason(description: str, confirm: bool = True) -> str:
    if confirm:
        return (
            f"Destructive find command detected: {description}. "
            "This operation may delete or modify files. Please confirm."
        )
    return (
        f"Destructive find command detected: {description}. "
        "This operation may irreversibly delete or modify files."
    )


def package_manager_reason(result: PackageManagerCheck) -> Optional[str]:
    """Reason for denying a package manager mismatch. None for other results."""
    if not isinstance(result, Mismatch):
        return None
    expected = result.expected_pm
    return (
        f"Package manager mismatch: This project uses {expected.value} "
        f"(detected {expected.lock_files[0]}), but you are trying to use "
        f"{result.command_pm.value}. Please use {expected.value} instead."
    )


def suppression_reason(result: SuppressionCheck, expect: bool = False,
                       additional_context: Optional[str] = None) -> Optional[str]:
    """
    Reason for denying a suppression attribute.

    Args:
        result: Detector result
        expect: Only deny #[allow]; recommend #[expect] instead
        additional_context: Text appended to the reason

    Returns:
        Reason string, or None if the content should be allowed.
    """
    if expect:
        if result in (SuppressionCheck.HAS_ALLOW, SuppressionCheck.HAS_BOTH):
            message = _USE_EXPECT_MSG
        else:
            message = None
    else:
        message = {
            SuppressionCheck.OK: None,
            SuppressionCheck.HAS_ALLOW: _ALLOW_MSG,
            SuppressionCheck.HAS_EXPECT: _EXPECT_MSG,
            SuppressionCheck.HAS_BOTH: _BOTH_MSG,
        }[result]

    if message is None:
        return None
    if additional_context:
        message = f"{message} {additional_context}"
    return message


__all__ = [
    # detectors
    'is_code_position',
    'is_destructive_delete',
    'check_destructive_find',
    'has_nul_redirect',
    'check_dangerous_path',
    'parse_path_list',
    'check_suppression',
    'is_rust_file',
    'detect_command',
    'find_lock_evidence',
    'check_package_manager',
    # result types
    'DangerousPathMatch',
    'SuppressionCheck',
    'PackageManager',
    'PackageManagerCheck',
    'Ok',
    'Matching',
    'Mismatch',
    'Ambiguous',
    # reasons
    'RM_FORBIDDEN_REASON',
    'NUL_REDIRECT_REASON',
    'dangerous_path_reason',
    'destructive_find_reason',
    'package_manager_reason',
    'suppression_reason',
]
