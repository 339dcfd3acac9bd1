#!/usr/bin/env python3
"""
agent-hooks: Claude Code hook adapter

Subcommands:
  permission-request   PermissionRequest hook for Bash commands
                       (--block-rm, --confirm-destructive-find, --dangerous-paths)
  pre-tool-use         PreToolUse hook for Bash/Edit/Write
                       (--deny-rust-allow, --expect, --additional-context,
                        --check-package-manager)

Reads the hook envelope as JSON from stdin and prints at most one decision
as JSON to stdout. Exit code is always 0.

Failure policy: if the input cannot be read or parsed, no decision is
emitted and the agent proceeds with its normal permission flow.
"""

import argparse
import json
import os
import sys
from typing import List, Optional

import audit_log
from config_loader import ConfigLoader, get_loader
from policy import (
    RM_FORBIDDEN_REASON,
    check_dangerous_path,
    check_destructive_find,
    check_package_manager,
    check_suppression,
    dangerous_path_reason,
    destructive_find_reason,
    is_destructive_delete,
    is_rust_file,
    package_manager_reason,
    parse_path_list,
    suppression_reason,
)

PERMISSION_REQUEST = "PermissionRequest"
PRE_TOOL_USE = "PreToolUse"

EDIT_TOOLS = ("Edit", "Write")


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


def _tool_input(data: dict) -> dict:
    tool_input = data.get("tool_input")
    return tool_input if isinstance(tool_input, dict) else {}


def _string_field(fields: dict, name: str) -> str:
    value = fields.get(name)
    return value if isinstance(value, str) else ""


# === OUTPUT ===

def deny_with_decision(event: str, message: str) -> dict:
    return {
        "hookSpecificOutput": {
            "hookEventName": event,
            "decision": {"behavior": "deny", "message": message},
        }
    }


def ask_permission(event: str, reason: str) -> dict:
    return {
        "hookSpecificOutput": {
            "hookEventName": event,
            "permissionDecision": "ask",
            "permissionDecisionReason": reason,
        }
    }


def deny_permission(event: str, reason: str) -> dict:
    return {
        "hookSpecificOutput": {
            "hookEventName": event,
            "permissionDecision": "deny",
            "permissionDecisionReason": reason,
        }
    }


def output_hook_result(output: dict):
    print(json.dumps(output))


# === OPTIONS ===

def resolve_options(args: argparse.Namespace, loader: Optional[ConfigLoader] = None) -> dict:
    """
    Merge command-line flags with the configuration file.

    A boolean check is enabled if either the flag or the config enables it.
    --dangerous-paths replaces the configured list.
    """
    loader = loader or get_loader()
    options = {}

    for name in ("block_rm", "confirm_destructive_find", "deny_rust_allow",
                 "expect", "check_package_manager"):
        options[name] = bool(getattr(args, name, False)) or loader.get_flag(name)

    paths_arg = getattr(args, "dangerous_paths", None)
    if paths_arg is not None:
        options["dangerous_paths"] = parse_path_list(paths_arg)
    else:
        options["dangerous_paths"] = loader.get_dangerous_paths()

    context_arg = getattr(args, "additional_context", None)
    options["additional_context"] = context_arg if context_arg is not None else loader.get_additional_context()

    options["audit_log"] = loader.audit_enabled()
    return options


# === HANDLERS ===

def handle_permission_request(data: dict, options: dict) -> Optional[tuple]:
    """
    Check a Bash permission request.

    Order: rm (deny), dangerous path (ask), destructive find (ask).

    Returns:
        (output, check) pair, or None if no decision should be emitted.
    """
    if data.get("tool_name") != "Bash":
        return None

    cmd = _string_field(_tool_input(data), "command")
    if not cmd:
        return None

    if options.get("block_rm") and is_destructive_delete(cmd):
        return deny_with_decision(PERMISSION_REQUEST, RM_FORBIDDEN_REASON), "rm"

    dangerous_paths = options.get("dangerous_paths") or []
    if dangerous_paths:
        match = check_dangerous_path(cmd, dangerous_paths)
        if match is not None:
            return ask_permission(PERMISSION_REQUEST, dangerous_path_reason(match)), "dangerous_path"

    if options.get("confirm_destructive_find"):
        description = check_destructive_find(cmd)
        if description is not None:
            return ask_permission(PERMISSION_REQUEST, destructive_find_reason(description)), "destructive_find"

    return None


def handle_pre_tool_use(data: dict, options: dict, cwd: Optional[str] = None) -> Optional[tuple]:
    """
    Check a Bash command for package manager mismatch, or an Edit/Write of a
    Rust file for suppression attributes.

    Returns:
        (output, check) pair, or None if no decision should be emitted.
    """
    tool_name = data.get("tool_name")
    if not isinstance(tool_name, str):
        return None

    tool_input = _tool_input(data)

    if options.get("check_package_manager") and tool_name == "Bash":
        cmd = _string_field(tool_input, "command")
        if cmd:
            start_dir = cwd or _string_field(data, "cwd") or os.getcwd()
            reason = package_manager_reason(check_package_manager(cmd, start_dir))
            if reason is not None:
                return deny_permission(PRE_TOOL_USE, reason), "package_manager"

    if tool_name not in EDIT_TOOLS or not options.get("deny_rust_allow"):
        return None

    file_path = _string_field(tool_input, "file_path")
    if not is_rust_file(file_path):
        return None

    # An explicit new_string wins even when empty
    if isinstance(tool_input.get("new_string"), str):
        content = tool_input["new_string"]
    else:
        content = _string_field(tool_input, "content")
    if not content:
        return None

    reason = suppression_reason(
        check_suppression(content),
        expect=options.get("expect", False),
        additional_context=options.get("additional_context"),
    )
    if reason is not None:
        return deny_permission(PRE_TOOL_USE, reason), "suppression"

    return None


def _audit(data: dict, output: dict, check: str, options: dict):
    if not options.get("audit_log", True):
        return
    hook = output["hookSpecificOutput"]
    if "decision" in hook:
        verdict, reason = "DENY", hook["decision"]["message"]
    else:
        verdict, reason = hook["permissionDecision"].upper(), hook["permissionDecisionReason"]

    tool_input = _tool_input(data)
    if check == "suppression":
        subject, subject_key = _string_field(tool_input, "file_path"), "file_path"
    else:
        subject, subject_key = _string_field(tool_input, "command"), "command"

    audit_log.log_decision(
        str(data.get("tool_name")), subject, verdict, reason, check,
        cwd=_string_field(data, "cwd") or None, subject_key=subject_key,
    )


# === MAIN ===

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-hooks-claude",
        description="Safety hooks for Claude Code",
    )
    subparsers = parser.add_subparsers(dest="subcommand")

    permission = subparsers.add_parser(
        "permission-request", help="Handle permission requests for Bash commands")
    permission.add_argument("--block-rm", action="store_true",
                            help="Block rm command and suggest using trash instead")
    permission.add_argument("--confirm-destructive-find", action="store_true",
                            help="Ask for confirmation on destructive find commands")
    permission.add_argument("--dangerous-paths", metavar="PATHS",
                            help="Comma-separated list of dangerous paths to protect from rm/trash/mv")

    pre_tool = subparsers.add_parser(
        "pre-tool-use", help="Handle pre-tool-use checks for Edit/Write/Bash tools")
    pre_tool.add_argument("--deny-rust-allow", action="store_true",
                          help="Deny #[allow(...)] attributes in Rust files")
    pre_tool.add_argument("--expect", action="store_true",
                          help="With --deny-rust-allow: suggest #[expect(...)] instead of denying both")
    pre_tool.add_argument("--additional-context", metavar="TEXT",
                          help="With --deny-rust-allow: additional context message to append to the denial reason")
    pre_tool.add_argument("--check-package-manager", action="store_true",
                          help="Check for package manager mismatch (e.g., using npm when pnpm-lock.yaml exists)")

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.subcommand is None:
        parser.print_help(sys.stderr)
        return

    options = resolve_options(args)

    if args.subcommand == "permission-request":
        if not (options["block_rm"] or options["confirm_destructive_find"] or options["dangerous_paths"]):
            return
        handler = handle_permission_request
    else:
        if not (options["deny_rust_allow"] or options["check_package_manager"]):
            return
        handler = handle_pre_tool_use

    data = read_hook_input()
    if data is None:
        return

    result = handler(data, options)
    if result is None:
        return

    output, check = result
    _audit(data, output, check, options)
    output_hook_result(output)


if __name__ == "__main__":
    main()
