#!/usr/bin/env python3
"""
agent-hooks: Copilot CLI hook adapter

Subcommand:
  pre-tool-use   preToolUse hook for bash/shell and edit/write/create tools

Input envelope: {"toolName": ..., "toolArgs": "<JSON string>", "cwd": ...}
(snake_case keys accepted too). Output, only when denying:
{"permissionDecision": "deny", "permissionDecisionReason": ...}

Copilot CLI has no "ask" decision, so every check that fires denies.
If the input cannot be read or parsed, nothing is printed.
"""

import argparse
import json
import os
import sys
from typing import List, Optional

import audit_log
from config_loader import ConfigLoader, get_loader
from policy import (
    NUL_REDIRECT_REASON,
    RM_FORBIDDEN_REASON,
    check_dangerous_path,
    check_destructive_find,
    check_package_manager,
    check_suppression,
    dangerous_path_reason,
    destructive_find_reason,
    has_nul_redirect,
    is_destructive_delete,
    is_rust_file,
    package_manager_reason,
    parse_path_list,
    suppression_reason,
)

SHELL_TOOLS = ("bash", "shell")
EDIT_TOOLS = ("edit", "write", "create")

BOOLEAN_OPTIONS = (
    "block_rm",
    "deny_rust_allow",
    "expect",
    "check_package_manager",
    "deny_destructive_find",
    "deny_nul_redirect",
)


# === INPUT ===

def read_hook_input(stream=None) -> Optional[dict]:
    """Read the hook envelope from stdin. Returns None if it is unusable."""
    stream = stream if stream is not None else sys.stdin
    try:
        data = json.load(stream)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        print(f"Warning: Could not parse hook input ({e}), skipping checks", file=sys.stderr)
        return None

    if not isinstance(data, dict):
        print("Warning: Hook input is not a JSON object, skipping checks", file=sys.stderr)
        return None
    return data


def _field(fields: dict, *names: str) -> str:
    """First string value among `names` (camelCase and snake_case aliases)."""
    for name in names:
        value = fields.get(name)
        if isinstance(value, str) and value:
            return value
    return ""


def parse_tool_args(raw: str) -> dict:
    """Decode the toolArgs JSON string. Malformed args decode to {}."""
    if not raw:
        return {}
    try:
        args = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return args if isinstance(args, dict) else {}


def is_tool_name(tool_name: str, candidates) -> bool:
    return tool_name.lower() in candidates


def parse_start_dir(cwd: str) -> str:
    return cwd if cwd else os.getcwd()


# === OUTPUT ===

def deny(reason: str) -> dict:
    return {
        "permissionDecision": "deny",
        "permissionDecisionReason": reason,
    }


def output_hook_result(output: dict):
    print(json.dumps(output))


# === OPTIONS ===

def resolve_options(args: argparse.Namespace, loader: Optional[ConfigLoader] = None) -> dict:
    """Merge command-line flags with the configuration file."""
    loader = loader or get_loader()
    options = {
        name: bool(getattr(args, name, False)) or loader.get_flag(name)
        for name in BOOLEAN_OPTIONS
    }

    if getattr(args, "dangerous_paths", None) is not None:
        options["dangerous_paths"] = parse_path_list(args.dangerous_paths)
    else:
        options["dangerous_paths"] = loader.get_dangerous_paths()

    context_arg = getattr(args, "additional_context", None)
    options["additional_context"] = context_arg if context_arg is not None else loader.get_additional_context()

    options["audit_log"] = loader.audit_enabled()
    return options


def any_check_enabled(options: dict) -> bool:
    return bool(options.get("dangerous_paths")) or any(
        options.get(name) for name in BOOLEAN_OPTIONS if name != "expect"
    )


# === HANDLERS ===

def _check_shell_command(cmd: str, cwd: str, options: dict) -> Optional[tuple]:
    if options.get("block_rm") and is_destructive_delete(cmd):
        return RM_FORBIDDEN_REASON, "rm"

    dangerous_paths = options.get("dangerous_paths") or []
    if dangerous_paths:
        match = check_dangerous_path(cmd, dangerous_paths)
        if match is not None:
            return dangerous_path_reason(match, confirm=False), "dangerous_path"

    if options.get("deny_nul_redirect") and has_nul_redirect(cmd):
        return NUL_REDIRECT_REASON, "nul_redirect"

    if options.get("deny_destructive_find"):
        description = check_destructive_find(cmd)
        if description is not None:
            return destructive_find_reason(description, confirm=False), "destructive_find"

    if options.get("check_package_manager"):
        reason = package_manager_reason(check_package_manager(cmd, parse_start_dir(cwd)))
        if reason is not None:
            return reason, "package_manager"

    return None


def _check_edit(tool_args: dict, options: dict) -> Optional[tuple]:
    file_path = _field(tool_args, "filePath", "file_path", "path").strip()
    if not file_path or not is_rust_file(file_path):
        return None

    content = _field(tool_args, "newString", "new_string") or _field(tool_args, "content")
    if not content:
        return None

    reason = suppression_reason(
        check_suppression(content),
        expect=options.get("expect", False),
        additional_context=options.get("additional_context"),
    )
    if reason is None:
        return None
    return reason, "suppression"


def handle_pre_tool_use(data: dict, options: dict) -> Optional[tuple]:
    """
    Run the enabled checks for one tool call.

    Shell order: rm, dangerous path, nul redirect, destructive find,
    package manager. Edits: suppression attributes in Rust files.

    Returns:
        (output, check, subject) or None if nothing should be emitted.
    """
    tool_name = _field(data, "toolName", "tool_name").strip()
    if not tool_name:
        return None

    tool_args = parse_tool_args(_field(data, "toolArgs", "tool_args"))

    if is_tool_name(tool_name, SHELL_TOOLS):
        cmd = _field(tool_args, "command").strip()
        if cmd:
            result = _check_shell_command(cmd, _field(data, "cwd").strip(), options)
            if result is not None:
                reason, check = result
                return deny(reason), check, cmd

    if options.get("deny_rust_allow") and is_tool_name(tool_name, EDIT_TOOLS):
        result = _check_edit(tool_args, options)
        if result is not None:
            reason, check = result
            return deny(reason), check, _field(tool_args, "filePath", "file_path", "path")

    return None


# === MAIN ===

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-hooks-copilot",
        description="Safety hooks for Copilot CLI",
    )
    subparsers = parser.add_subparsers(dest="subcommand")

    pre_tool = subparsers.add_parser(
        "pre-tool-use", help="Handle pre-tool-use checks for Copilot CLI hooks")
    pre_tool.add_argument("--block-rm", action="store_true",
                          help="Block rm command and suggest using trash instead")
    pre_tool.add_argument("--dangerous-paths", metavar="PATHS",
                          help="Comma-separated list of dangerous paths to protect from rm/trash/mv")
    pre_tool.add_argument("--deny-rust-allow", action="store_true",
                          help="Deny #[allow(...)] attributes in Rust files")
    pre_tool.add_argument("--expect", action="store_true",
                          help="With --deny-rust-allow: suggest #[expect(...)] instead of denying both")
    pre_tool.add_argument("--additional-context", metavar="TEXT",
                          help="With --deny-rust-allow: additional context message to append to the denial reason")
    pre_tool.add_argument("--check-package-manager", action="store_true",
                          help="Check for package manager mismatch (e.g., using npm when pnpm-lock.yaml exists)")
    pre_tool.add_argument("--deny-destructive-find", action="store_true",
                          help="Deny destructive find commands (e.g., find -delete, find -exec rm)")
    pre_tool.add_argument("--deny-nul-redirect", action="store_true",
                          help="Deny redirects to nul on Windows (e.g., > nul, 2> nul, &> nul)")

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.subcommand is None:
        parser.print_help(sys.stderr)
        return

    options = resolve_options(args)
    if not any_check_enabled(options):
        return

    data = read_hook_input()
    if data is None:
        return

    result = handle_pre_tool_use(data, options)
    if result is None:
        return

    output, check, subject = result
    if options.get("audit_log", True):
        audit_log.log_decision(
            _field(data, "toolName", "tool_name"), subject, "DENY",
            output["permissionDecisionReason"], check,
            cwd=_field(data, "cwd") or None,
            subject_key="file_path" if check == "suppression" else "command",
        )
    output_hook_result(output)


if __name__ == "__main__":
    main()
