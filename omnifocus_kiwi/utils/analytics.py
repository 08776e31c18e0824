"""
Run history for OmniFocus Kiwi.

Logs tool calls to:
1. User space: ~/.omnifocus-kiwi/.runs/history.jsonl
2. Supabase: executions table (optional, when credentials are configured)

This is an audit trail only. Nothing here is read back while serving a tool
call, and a failing sink never changes a tool's response.
"""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Optional

from supabase import Client, create_client

from .settings import get_omnifocus_kiwi_home, get_supabase_credentials, history_enabled

logger = logging.getLogger(__name__)

# Free text is logged as its length only
REDACTED_FIELDS = ("note",)
MAX_INPUT_ITEMS = 8
MAX_ERROR_LENGTH = 500


def _get_history_file() -> Path:
    """Get path to history file in user space (~/.omnifocus-kiwi/.runs/history.jsonl)."""
    return get_omnifocus_kiwi_home() / ".runs" / "history.jsonl"


def _ensure_runs_dir(history_file: Path):
    """Ensure runs directory exists."""
    history_file.parent.mkdir(parents=True, exist_ok=True)


def _get_supabase_client() -> Optional[Client]:
    """Get Supabase client for executions table."""
    url, key = get_supabase_credentials()

    if not url or not key:
        return None

    return create_client(url, key)


def summarize_inputs(inputs: Optional[Dict[str, Any]], max_items: int = MAX_INPUT_ITEMS) -> Optional[Dict[str, Any]]:
    """Keep the first few arguments, replacing free text with its length."""
    if not inputs:
        return None
    summary = {}
    for i, (key, value) in enumerate(inputs.items()):
        if i >= max_items:
            break
        if key in REDACTED_FIELDS and isinstance(value, str):
            summary[key] = f"<{len(value)} chars>"
        else:
            summary[key] = value
    return summary


def log_execution(
    tool_name: str,
    status: str,
    duration_sec: float,
    inputs: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    execution_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Log one tool call to user space and, when configured, to Supabase.

    Args:
        tool_name: MCP tool name (e.g. "omnifocus_add_task")
        status: "success" or "error"
        duration_sec: Wall time of the call
        inputs: Tool arguments (summarized, notes redacted)
        error: Error text for failed calls
        execution_id: Caller-generated ID tying log lines together

    Returns:
        The logged entry
    """
    entry = {
        "timestamp": datetime.now().isoformat(),
        "execution_id": execution_id,
        "tool": tool_name,
        "status": status,
        "duration_sec": round(duration_sec, 3),
        "inputs": summarize_inputs(inputs),
        "error": error[:MAX_ERROR_LENGTH] if error else None,
    }
    entry = {k: v for k, v in entry.items() if v is not None}

    if not history_enabled():
        logger.debug(f"Run history disabled, not logging {tool_name}")
        return entry

    history_file = _get_history_file()
    try:
        _ensure_runs_dir(history_file)
        with open(history_file, "a") as f:
            f.write(json.dumps(entry) + "\n")
        logger.debug(f"Logged to user space: {tool_name} -> {status}")
    except Exception as e:
        logger.error(f"Failed to log to user space: {e}")

    try:
        client = _get_supabase_client()
    except Exception as e:
        logger.warning(f"Could not create Supabase client: {e}")
        client = None

    if client:
        try:
            execution_data = {
                "script_name": tool_name,
                "status": status,
                "duration_sec": entry["duration_sec"],
                "inputs": entry.get("inputs"),
                "error": entry.get("error"),
            }
            execution_data = {k: v for k, v in execution_data.items() if v is not None}
            client.table("executions").insert(execution_data).execute()
            logger.debug(f"Logged to Supabase: {tool_name} -> {status}")
        except Exception as e:
            logger.warning(f"Failed to log to Supabase: {e}")
    else:
        logger.debug("Supabase not configured, skipping remote log")

    return entry


def get_run_history(days: int = 30, tool: Optional[str] = None) -> list:
    """
    Load run history from the last N days.

    Args:
        days: Number of days of history to load
        tool: Optional filter by tool name

    Returns:
        List of run entries, most recent first
    """
    history_file = _get_history_file()
    if not history_file.exists():
        return []

    cutoff = datetime.now() - timedelta(days=days)
    runs = []

    with open(history_file, "r") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                run = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping corrupt line in run history")
                continue
            if datetime.fromisoformat(run["timestamp"]) <= cutoff:
                continue
            if tool and run.get("tool") != tool:
                continue
            runs.append(run)

    return sorted(runs, key=lambda x: x["timestamp"], reverse=True)


def format_run(run: Dict[str, Any]) -> str:
    line = f"{run['timestamp']}  {run.get('tool', '?')}  {run.get('status', '?')}"
    if "duration_sec" in run:
        line += f"  {run['duration_sec']:.2f}s"
    if run.get("error"):
        line += f"  {run['error']}"
    return line


def main(argv: Optional[list] = None):
    """Print recent tool calls from the local run history."""
    import argparse

    parser = argparse.ArgumentParser(description="OmniFocus Kiwi run history")
    parser.add_argument("--days", type=int, default=30, help="Number of days")
    parser.add_argument("--tool", help="Filter by tool name")
    parser.add_argument("--errors", action="store_true", help="Only show failed calls")

    args = parser.parse_args(argv)

    runs = get_run_history(days=args.days, tool=args.tool)
    if args.errors:
        runs = [r for r in runs if r.get("status") == "error"]

    if not runs:
        print(f"No runs in the last {args.days} days.")
        return
    for run in runs:
        print(format_run(run))


if __name__ == "__main__":
    main()
