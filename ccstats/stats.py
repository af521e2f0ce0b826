"""
Session statistics — derive a SessionStats summary from decoded entries.

Pure functions only: no file I/O, no environment, no formatting beyond
the duration strings carried by SessionStats.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from .core.models import NO_SUMMARY, UNKNOWN, SessionEntry, SessionStats

logger = logging.getLogger(__name__)

_CONVERSATION_KINDS = ("user", "assistant")


def calculate_session_stats(entries: Sequence[SessionEntry]) -> Optional[SessionStats]:
    """
    Compute statistics for one session.

    Returns None when there is nothing to summarize: no entries at all,
    or no entry carrying a timestamp.
    """
    if not entries:
        return None

    timestamps = [e.timestamp for e in entries if e.timestamp is not None]
    if not timestamps:
        logger.debug(f"No timestamps in {len(entries)} entries")
        return None

    start_time = min(timestamps)
    end_time = max(timestamps)

    user_messages = [e for e in entries if e.kind == "user"]
    assistant_messages = [e for e in entries if e.kind == "assistant"]

    tool_usage_count = sum(
        1 for e in assistant_messages if e.message and e.message.has_block("tool_use")
    )
    thinking_count = sum(
        1 for e in assistant_messages if e.message and e.message.has_block("thinking")
    )

    tool_breakdown: Dict[str, int] = {}
    for e in assistant_messages:
        if not e.message:
            continue
        for name in e.message.tool_names():
            tool_breakdown[name] = tool_breakdown.get(name, 0) + 1

    # Cache/token accounting, every entry kind
    cache_events = 0
    total_cache_created = 0
    total_cache_read = 0
    total_input_tokens = 0
    total_output_tokens = 0

    for e in entries:
        usage = e.message.usage if e.message else None
        if usage is None:
            continue
        if usage.cache_creation_input_tokens:
            cache_events += 1
            total_cache_created += usage.cache_creation_input_tokens
        if usage.cache_read_input_tokens:
            total_cache_read += usage.cache_read_input_tokens
        if usage.input_tokens:
            total_input_tokens += usage.input_tokens
        if usage.output_tokens:
            total_output_tokens += usage.output_tokens

    active_ms, waiting_ms = _active_waiting_ms(entries)

    return SessionStats(
        session_id=_first(entries, "session_id") or UNKNOWN,
        summary=_first_summary(entries),
        start_time=start_time,
        end_time=end_time,
        duration=format_duration(_to_ms(end_time - start_time)),
        active_duration=format_duration(active_ms),
        waiting_duration=format_duration(waiting_ms),
        message_count=len(entries),
        user_message_count=len(user_messages),
        assistant_message_count=len(assistant_messages),
        tool_usage_count=tool_usage_count,
        thinking_count=thinking_count,
        tool_breakdown=tool_breakdown,
        cache_events=cache_events,
        total_cache_created=total_cache_created,
        total_cache_read=total_cache_read,
        total_input_tokens=total_input_tokens,
        total_output_tokens=total_output_tokens,
        total_tokens=total_input_tokens + total_output_tokens,
        version=_first(entries, "version") or UNKNOWN,
        git_branch=_first(entries, "git_branch") or UNKNOWN,
        working_directory=_first(entries, "cwd") or UNKNOWN,
    )


def _active_waiting_ms(entries: Sequence[SessionEntry]) -> Tuple[int, int]:
    """
    Split conversation time into (active_ms, waiting_ms).

    user -> assistant       active  (model responding)
    assistant -> assistant  active  (multi-step tool chains)
    assistant -> user       waiting (human responding)
    user -> user            neither
    """
    timed: List[SessionEntry] = sorted(
        (e for e in entries if e.timestamp is not None and e.kind in _CONVERSATION_KINDS),
        key=lambda e: e.timestamp,
    )

    active_ms = 0
    waiting_ms = 0
    for current, nxt in zip(timed, timed[1:]):
        delta = _to_ms(nxt.timestamp - current.timestamp)
        if current.kind == "user" and nxt.kind == "assistant":
            active_ms += delta
        elif current.kind == "assistant" and nxt.kind == "user":
            waiting_ms += delta
        elif current.kind == "assistant" and nxt.kind == "assistant":
            active_ms += delta

    return active_ms, waiting_ms


def format_duration(ms: int) -> str:
    """Render milliseconds as '1h 1m 1s', '1m 0s' or '59s'."""
    seconds = max(int(ms), 0) // 1000
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    elif minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    else:
        return f"{seconds}s"


def _to_ms(delta: timedelta) -> int:
    return delta // timedelta(milliseconds=1)


def _first(entries: Sequence[SessionEntry], attr: str) -> Optional[str]:
    """Value of `attr` on the first entry that has it set."""
    for e in entries:
        value = getattr(e, attr)
        if value:
            return value
    return None


def _first_summary(entries: Sequence[SessionEntry]) -> str:
    for e in entries:
        if e.kind == "summary":
            return e.summary or NO_SUMMARY
    return NO_SUMMARY
