"""
Session discovery — find the active Claude Code session file on disk.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

_PROJECT_DIR_CHARS = re.compile(r"[/._]")


@dataclass
class SessionFileResult:
    path: Optional[str]
    searched_path: str
    directory_exists: bool
    file_count: int


def find_active_session_file(
    *,
    use_git_root: bool = True,
    claude_dir: Optional[Union[str, Path]] = None,
    cwd: Optional[str] = None,
) -> SessionFileResult:
    """
    Find the most recently modified session file for the current project.

    Claude Code stores sessions under ~/.claude/projects/<encoded path>/,
    where the project path is the directory Claude was started in. With
    use_git_root the repository root is used instead of cwd, so running
    from a subdirectory still finds the session.
    """
    search_dir = cwd or os.getcwd()
    if use_git_root:
        git_root = get_git_root(search_dir)
        if git_root:
            logger.debug(f"Using git root: {git_root}")
            search_dir = git_root
        else:
            logger.debug("Not a git repository, using current directory")
    else:
        logger.debug("Git root detection disabled, using current directory")

    base = Path(claude_dir).expanduser() if claude_dir else Path.home() / ".claude"
    project_path = base / "projects" / encode_project_dir(search_dir)

    if not project_path.is_dir():
        return SessionFileResult(
            path=None,
            searched_path=str(project_path),
            directory_exists=False,
            file_count=0,
        )

    files = sorted(
        (f for f in project_path.glob("*.jsonl") if f.is_file()),
        key=lambda f: f.stat().st_mtime,
        reverse=True,
    )

    return SessionFileResult(
        path=str(files[0]) if files else None,
        searched_path=str(project_path),
        directory_exists=True,
        file_count=len(files),
    )


def encode_project_dir(path: str) -> str:
    """
    Encode a project path the way Claude Code names its project dirs.

        /home/yu/my_app.v2  ->  -home-yu-my-app-v2
    """
    return _PROJECT_DIR_CHARS.sub("-", path)


def get_git_root(cwd: Optional[str] = None) -> Optional[str]:
    """Return the git repository root containing cwd, or None."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"Git command failed: {e}")
        return None

    root = result.stdout.strip()
    return root or None
