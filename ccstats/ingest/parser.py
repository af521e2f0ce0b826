"""
Session parser — decode Claude Code JSONL session logs into entries.

A session log is append-only, so a truncated or corrupted line must
never abort the whole file: bad lines are logged and skipped.
"""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.models import (
    ContentBlock,
    Message,
    OtherBlock,
    SessionEntry,
    ThinkingBlock,
    ToolUseBlock,
    Usage,
)

logger = logging.getLogger(__name__)

_USAGE_FIELDS = (
    "cache_creation_input_tokens",
    "cache_read_input_tokens",
    "input_tokens",
    "output_tokens",
)

# fromisoformat before 3.11 only takes 3 or 6 fractional digits
_FRACTION = re.compile(r"\.(\d+)")


def read_session_file(session_file: Union[str, Path]) -> List[SessionEntry]:
    """Read a session file and decode it. I/O errors propagate."""
    content = Path(session_file).read_text(encoding="utf-8")
    return parse_jsonl(content)


def parse_jsonl(content: str) -> List[SessionEntry]:
    """
    Decode raw JSONL text into session entries.

    Blank lines are ignored. Lines that fail to decode are skipped with
    a warning; the result keeps the original line order.
    """
    entries = []
    for line in content.split("\n"):
        if not line.strip():
            continue
        entry = decode_line(line)
        if entry is not None:
            entries.append(entry)
    return entries


def decode_line(line: str) -> Optional[SessionEntry]:
    """Decode one JSONL line. Returns None (and warns) if it can't be used."""
    try:
        data = json.loads(line)
    except (ValueError, RecursionError):
        logger.warning(f"Failed to parse line: {line}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Failed to parse line (not an object): {line}")
        return None

    return decode_entry(data)


def decode_entry(data: Dict[str, Any]) -> SessionEntry:
    """Map one JSON object to a SessionEntry. Missing fields become None."""
    kind = data.get("type")
    return SessionEntry(
        kind=kind if isinstance(kind, str) else "",
        timestamp=_parse_timestamp(data.get("timestamp")),
        session_id=_str_or_none(data.get("sessionId")),
        version=_str_or_none(data.get("version")),
        git_branch=_str_or_none(data.get("gitBranch")),
        cwd=_str_or_none(data.get("cwd")),
        summary=_str_or_none(data.get("summary")),
        message=_decode_message(data.get("message")),
    )


def _decode_message(raw: Any) -> Optional[Message]:
    if not isinstance(raw, dict):
        return None

    content = raw.get("content")
    blocks: List[ContentBlock] = []
    if isinstance(content, str):
        blocks.append(OtherBlock(type="text"))
    elif isinstance(content, list):
        for item in content:
            if isinstance(item, dict):
                blocks.append(_decode_block(item))

    return Message(content=tuple(blocks), usage=_decode_usage(raw.get("usage")))


def _decode_block(block: Dict[str, Any]) -> ContentBlock:
    block_type = block.get("type")
    if block_type == "tool_use":
        name = block.get("name")
        return ToolUseBlock(name=name if isinstance(name, str) else "")
    if block_type == "thinking":
        return ThinkingBlock()
    return OtherBlock(type=block_type if isinstance(block_type, str) else "")


def _decode_usage(raw: Any) -> Optional[Usage]:
    if not isinstance(raw, dict):
        return None
    values = {}
    for name in _USAGE_FIELDS:
        value = raw.get(name)
        # bool is an int subclass; a flag is not a token count
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        # json accepts NaN and 1e400 (inf)
        if isinstance(value, float) and not math.isfinite(value):
            continue
        values[name] = int(value)
    return Usage(**values)


def _parse_timestamp(ts: Any) -> Optional[datetime]:
    if not isinstance(ts, str) or not ts:
        return None
    try:
        parsed = datetime.fromisoformat(_normalize_fraction(ts.replace("Z", "+00:00")))
    except ValueError:
        logger.debug(f"Ignoring unparseable timestamp: {ts!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _normalize_fraction(ts: str) -> str:
    """Pad or truncate fractional seconds to microseconds."""
    return _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), ts, count=1)


def _str_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None
