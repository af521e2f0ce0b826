"""
Renderers — turn SessionStats into console text, JSON or YAML.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Union

import yaml

from .core.models import SessionStats

logger = logging.getLogger(__name__)

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def render(stats: SessionStats, fmt: str) -> str:
    """Render stats in the given format ("console", "json" or "yaml")."""
    if fmt == "json":
        return render_json(stats)
    if fmt == "yaml":
        return render_yaml(stats)
    if fmt == "console":
        return render_console(stats)
    raise ValueError(f"Unknown output format: {fmt}")


def render_json(stats: SessionStats) -> str:
    return json.dumps(stats.to_dict(), indent=2, ensure_ascii=False)


def render_yaml(stats: SessionStats) -> str:
    return yaml.safe_dump(
        stats.to_dict(), indent=2, sort_keys=False, allow_unicode=True,
    )


def render_console(stats: SessionStats) -> str:
    """Human-readable report. Times are shown in the local timezone."""
    lines: List[str] = [
        "",
        "Claude Code Session Statistics",
        "",
        f"Session Summary:   {stats.summary}",
        f"Session ID:        {stats.session_id}",
        f"Version:           {stats.version}",
        f"Git Branch:        {stats.git_branch}",
        f"Working Directory: {stats.working_directory}",
        "",
        "Time Information:",
        f"  Start Time:     {stats.start_time.astimezone().strftime(_TIME_FORMAT)}",
        f"  End Time:       {stats.end_time.astimezone().strftime(_TIME_FORMAT)}",
        f"  Total Duration: {stats.duration}",
        f"  Active Time:    {stats.active_duration} (Claude working)",
        f"  Waiting Time:   {stats.waiting_duration} (user thinking/typing)",
        "",
        "Message Statistics:",
        f"  Total Messages:     {stats.message_count}",
        f"  User Messages:      {stats.user_message_count}",
        f"  Assistant Messages: {stats.assistant_message_count}",
        "",
        "Tool Usage:",
        f"  Tool Invocations: {stats.tool_usage_count}",
        f"  Thinking Blocks:  {stats.thinking_count}",
    ]

    if stats.tool_breakdown:
        lines += ["", "Tool Breakdown:"]
        ranked = sorted(stats.tool_breakdown.items(), key=lambda kv: kv[1], reverse=True)
        for tool, count in ranked:
            lines.append(f"  {tool}: {count}")

    lines += [
        "",
        "Token Usage:",
        f"  Input Tokens:  {stats.total_input_tokens:,}",
        f"  Output Tokens: {stats.total_output_tokens:,}",
        f"  Total Tokens:  {stats.total_tokens:,}",
    ]

    if stats.cache_events > 0:
        lines += [
            "",
            "Cache Statistics:",
            f"  Cache Events:           {stats.cache_events}",
            f"  Tokens Cached:          {stats.total_cache_created:,}",
            f"  Tokens Read from Cache: {stats.total_cache_read:,}",
        ]

    lines.append("")
    return "\n".join(lines)


def save_output(text: str, path: Union[str, Path]) -> Path:
    """Write rendered output to a file, creating parent directories."""
    out = Path(path).expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    logger.debug(f"Wrote {len(text)} chars to {out}")
    return out
