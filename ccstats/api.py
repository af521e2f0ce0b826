"""
ccstats API — clean, importable functions for all operations.

Every function returns JSON-serializable dicts.
Designed to be called from scripts, skills, or other agents.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .core.models import SessionStats

logger = logging.getLogger(__name__)


def _config():
    from .core.config import Config
    return Config.load()


# ── Discovery ─────────────────────────────────────────────────────────────────

def locate(*, use_git_root: Optional[bool] = None) -> Dict[str, Any]:
    """Find the active session file for the current project."""
    from .ingest.discovery import find_active_session_file
    cfg = _config()
    if use_git_root is None:
        use_git_root = cfg.use_git_root
    result = find_active_session_file(
        use_git_root=use_git_root,
        claude_dir=cfg.resolved_claude_dir,
    )
    return asdict(result)


# ── Statistics ────────────────────────────────────────────────────────────────

def analyze(
    session_file: Optional[str] = None,
    *,
    use_git_root: Optional[bool] = None,
) -> Dict[str, Any]:
    """Compute statistics for a session file (or the active session)."""
    stats, result = _load_stats(session_file, use_git_root=use_git_root)
    if stats is not None:
        result["stats"] = stats.to_dict()
    return result


def report(
    session_file: Optional[str] = None,
    *,
    output_format: Optional[str] = None,
    use_git_root: Optional[bool] = None,
) -> Dict[str, Any]:
    """Compute statistics and render them as console text, JSON or YAML."""
    from .render import render
    cfg = _config()
    fmt = output_format or cfg.output_format
    fmt_err = cfg.check_output_format(fmt)
    if fmt_err:
        return {"error": fmt_err}

    stats, result = _load_stats(session_file, use_git_root=use_git_root)
    if stats is not None:
        result["format"] = fmt
        result["output"] = render(stats, fmt)
    return result


def _load_stats(
    session_file: Optional[str],
    *,
    use_git_root: Optional[bool],
) -> Tuple[Optional[SessionStats], Dict[str, Any]]:
    """Resolve, read, decode and aggregate. Errors come back as {"error": ...}."""
    from .ingest.parser import read_session_file
    from .stats import calculate_session_stats

    if not session_file:
        found = locate(use_git_root=use_git_root)
        if not found["path"]:
            if found["directory_exists"]:
                error = "Could not find session file"
            else:
                error = "No Claude Code session found yet"
            return None, {
                "error": error,
                "searched_path": found["searched_path"],
                "directory_exists": found["directory_exists"],
            }
        session_file = found["path"]

    path = Path(session_file).expanduser()
    if not path.is_file():
        return None, {"error": f"File not found: {session_file}"}

    logger.debug(f"Reading session file: {path}")
    try:
        entries = read_session_file(path)
    except (OSError, UnicodeDecodeError) as e:
        return None, {"error": f"Error reading session file: {e}"}

    stats = calculate_session_stats(entries)
    if stats is None:
        return None, {
            "error": "Could not calculate statistics from session file",
            "session_file": str(path),
        }

    return stats, {"session_file": str(path)}
