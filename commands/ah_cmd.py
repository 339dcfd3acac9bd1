#!/usr/bin/env python3
"""
agent-hooks: Slash Command Handler

Commands:
  /ah status           Show effective configuration and recent stats
  /ah log              Show recent audit log entries
  /ah check <command>  Run every command check and print the results
  /ah help             Show this help
"""

import sys
import io
import json
import os
from pathlib import Path

# Fix Windows console encoding for Unicode output
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')

sys.path.insert(0, str(Path(__file__).parent.parent / "hooks"))

import audit_log
from config_loader import get_loader
from policy import (
    check_dangerous_path,
    check_destructive_find,
    check_package_manager,
    has_nul_redirect,
    is_destructive_delete,
)

VERSION = "0.3.0"


def cmd_status():
    loader = get_loader()
    config = loader.load()

    print(f"agent-hooks v{VERSION}")
    print()
    print(f"  Config file: {loader.config_path}"
          f"{'' if loader.config_path.exists() else ' (not found, using defaults)'}")
    print(f"  Audit log:   {audit_log.LOG_FILE}")
    print()

    for name in ("block_rm", "confirm_destructive_find", "deny_destructive_find",
                 "deny_nul_redirect", "deny_rust_allow", "expect", "check_package_manager"):
        enabled = loader.get_flag(name)
        print(f"  {name:26} {'on' if enabled else 'off'}")

    paths = loader.get_dangerous_paths()
    print(f"  {'dangerous_paths':26} {', '.join(paths) if paths else '(none)'}")
    if config.get("additional_context"):
        print(f"  {'additional_context':26} {config['additional_context']}")

    entries = audit_log.read_recent(100)
    if entries:
        denies = sum(1 for e in entries if e.get("verdict") == "DENY")
        asks = sum(1 for e in entries if e.get("verdict") == "ASK")
        print()
        print(f"  Recent stats (last {len(entries)} decisions):")
        print(f"    Denied: {denies}")
        print(f"    Asked:  {asks}")


def cmd_log():
    """Show recent audit log entries."""
    if not audit_log.LOG_FILE.exists():
        print("No audit log found yet.")
        print(f"Log will be created at: {audit_log.LOG_FILE}")
        return

    entries = audit_log.read_recent(20)

    print(f"agent-hooks Audit Log (last {len(entries)} entries)")
    print("=" * 60)

    for entry in entries:
        ts = entry.get("timestamp", "")[:19]  # Trim microseconds
        verdict = entry.get("verdict", "?")
        check = entry.get("check", "?")
        subject = (entry.get("command") or entry.get("file_path") or "")[:50]
        reason = entry.get("reason", "")[:60]

        icon = "🛑" if verdict == "DENY" else "❓"
        print(f"{ts} {icon} [{check:16}] {subject}")
        if reason:
            print(f"                         └─ {reason}")

    print()
    print(f"Full log: {audit_log.LOG_FILE}")


def run_checks(command: str, cwd: str, dangerous_paths) -> dict:
    """Run every command detector and collect JSON-friendly results."""
    path_match = check_dangerous_path(command, dangerous_paths)
    return {
        "command": command,
        "destructive_delete": is_destructive_delete(command),
        "destructive_find": check_destructive_find(command),
        "nul_redirect": has_nul_redirect(command),
        "dangerous_path": path_match.to_dict() if path_match else None,
        "package_manager": check_package_manager(command, cwd).to_dict(),
    }


def cmd_check(command: str):
    if not command.strip():
        print("❌ Nothing to check")
        print("   Usage: /ah check <command>")
        return
    results = run_checks(command, os.getcwd(), get_loader().get_dangerous_paths())
    print(json.dumps(results, indent=2))


def cmd_help():
    print(f"""
agent-hooks v{VERSION}
Safety checks for AI coding-agent commands and edits

Commands:
  /ah status           Show effective configuration and recent stats
  /ah log              Show recent audit log entries
  /ah check <command>  Dry-run every command check against <command>
  /ah help             Show this help

What it catches:
  🛑 rm (use trash instead), rm/trash/mv on protected paths
  🛑 find -delete, find -exec rm, find | xargs rm, redirects to nul
  🛑 npm/pnpm/yarn/bun mismatching the project's lock file
  🛑 #[allow(...)] / #[expect(...)] added to Rust files

Configuration: ~/.agent-hooks/config.yaml (see config/config.example.yaml)
""")


def main():
    # Parse command
    if len(sys.argv) < 2:
        cmd_help()
        return

    subcommand = sys.argv[1].lower()

    if subcommand in ("check", "test"):
        cmd_check(" ".join(sys.argv[2:]))
        return

    commands = {
        "status": cmd_status,
        "state": cmd_status,
        "config": cmd_status,
        "log": cmd_log,
        "logs": cmd_log,
        "audit": cmd_log,
        "help": cmd_help,
        "-h": cmd_help,
        "--help": cmd_help,
    }

    handler = commands.get(subcommand)
    if handler:
        handler()
    else:
        print(f"Unknown command: {subcommand}")
        print("Use '/ah help' for available commands.")


if __name__ == "__main__":
    main()
