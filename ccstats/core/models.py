"""Data models for ccstats."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union


UNKNOWN = "unknown"
NO_SUMMARY = "No summary available"


# ── Content blocks ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ToolUseBlock:
    name: str = ""
    type: str = "tool_use"


@dataclass(frozen=True)
class ThinkingBlock:
    type: str = "thinking"


@dataclass(frozen=True)
class OtherBlock:
    type: str = ""  # "text" | "tool_result" | "image" | ...


ContentBlock = Union[ToolUseBlock, ThinkingBlock, OtherBlock]


@dataclass(frozen=True)
class Usage:
    """Token accounting attached to a message. Absent fields stay None."""

    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


@dataclass(frozen=True)
class Message:
    content: Tuple[ContentBlock, ...] = ()
    usage: Optional[Usage] = None

    def has_block(self, block_type: str) -> bool:
        return any(b.type == block_type for b in self.content)

    def tool_names(self) -> Tuple[str, ...]:
        return tuple(
            b.name for b in self.content
            if isinstance(b, ToolUseBlock) and b.name
        )


# ── Records ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SessionEntry:
    """One decoded line of a session log."""

    kind: str                            # "user" | "assistant" | "summary" | ...
    timestamp: Optional[datetime] = None
    session_id: Optional[str] = None
    version: Optional[str] = None
    git_branch: Optional[str] = None
    cwd: Optional[str] = None
    summary: Optional[str] = None        # only on kind == "summary"
    message: Optional[Message] = None


@dataclass(frozen=True)
class SessionStats:
    session_id: str
    summary: str
    start_time: datetime
    end_time: datetime
    duration: str
    active_duration: str
    waiting_duration: str
    message_count: int
    user_message_count: int
    assistant_message_count: int
    tool_usage_count: int
    thinking_count: int
    tool_breakdown: Dict[str, int] = field(default_factory=dict)
    cache_events: int = 0
    total_cache_created: int = 0
    total_cache_read: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_tokens: int = 0
    version: str = UNKNOWN
    git_branch: str = UNKNOWN
    working_directory: str = UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Serialized form used by the JSON and YAML renderers."""
        return {
            "sessionId": self.session_id,
            "summary": self.summary,
            "startTime": format_timestamp(self.start_time),
            "endTime": format_timestamp(self.end_time),
            "duration": self.duration,
            "activeDuration": self.active_duration,
            "waitingDuration": self.waiting_duration,
            "messageCount": self.message_count,
            "userMessageCount": self.user_message_count,
            "assistantMessageCount": self.assistant_message_count,
            "toolUsageCount": self.tool_usage_count,
            "thinkingCount": self.thinking_count,
            "toolBreakdown": dict(self.tool_breakdown),
            "cacheEvents": self.cache_events,
            "totalCacheCreated": self.total_cache_created,
            "totalCacheRead": self.total_cache_read,
            "totalInputTokens": self.total_input_tokens,
            "totalOutputTokens": self.total_output_tokens,
            "totalTokens": self.total_tokens,
            "version": self.version,
            "gitBranch": self.git_branch,
            "workingDirectory": self.working_directory,
        }


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision: 2025-01-01T10:00:00.000Z"""
    utc = ts.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")
