#!/usr/bin/env python3
"""
Audit log for hook decisions.

Appends one JSON object per decision to ~/.agent-hooks/audit.log.
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

STATE_DIR = Path.home() / ".agent-hooks"
LOG_FILE = STATE_DIR / "audit.log"


def log_decision(tool: str, subject: str, verdict: str, reason: str, check: str,
                 cwd: Optional[str] = None, subject_key: str = "command"):
    """
    Log a hook decision to the audit file.

    Args:
        tool: Tool name from the hook envelope (Bash, Edit, ...)
        subject: Command text or file path the decision is about
        verdict: DENY or ASK
        reason: Reason shown to the agent
        check: Detector that produced the decision (rm, dangerous_path, ...)
        cwd: Working directory, if known
        subject_key: "command" for shell commands, "file_path" for edits
    """
    try:
        STATE_DIR.mkdir(parents=True, exist_ok=True)
        entry = {
            "timestamp": datetime.now().isoformat(),
            "tool": tool,
            subject_key: subject[:500],  # Truncate very long commands
            "cwd": cwd,
            "verdict": verdict,
            "reason": reason,
            "check": check,
        }
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except (IOError, OSError) as e:
        # Logging failure shouldn't affect the decision
        print(f"Warning: Could not write to audit log: {e}", file=sys.stderr)


def read_recent(limit: int = 20) -> list:
    """Return up to `limit` most recent parseable audit entries, oldest first."""
    if not LOG_FILE.exists():
        return []

    try:
        lines = LOG_FILE.read_text(encoding="utf-8").strip().split("\n")
    except (IOError, OSError) as e:
        print(f"Warning: Could not read audit log: {e}", file=sys.stderr)
        return []

    entries = []
    for line in lines[-limit:]:
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return entries
