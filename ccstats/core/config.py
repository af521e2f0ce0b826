"""Configuration for ccstats."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


_DEFAULT_CONFIG_PATH = "~/.ccstats/config.yaml"
_DEFAULT_CLAUDE_DIR = "~/.claude"

OUTPUT_FORMATS = ("console", "json", "yaml")

_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0")


@dataclass
class Config:
    # Where Claude Code keeps its projects/ directory
    claude_dir: str = _DEFAULT_CLAUDE_DIR

    # Output
    output_format: str = "console"

    # Session discovery: search from the git repository root instead of cwd
    use_git_root: bool = True

    @classmethod
    def load(cls, path: Optional[str] = None) -> Config:
        """Load config from YAML file, falling back to defaults."""
        config_path = Path(
            path or os.getenv("CCSTATS_CONFIG", _DEFAULT_CONFIG_PATH)
        ).expanduser()

        data: dict = {}
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Ignoring unreadable config {config_path}: {e}")
            if not isinstance(data, dict):
                logger.warning(f"Ignoring config {config_path}: not a mapping")
                data = {}

        cfg = cls()

        if "claude_dir" in data:
            cfg.claude_dir = str(data["claude_dir"])
        if "output_format" in data:
            cfg.output_format = str(data["output_format"])
        if "use_git_root" in data:
            flag = _as_bool(data["use_git_root"])
            if flag is None:
                logger.warning(f"Ignoring use_git_root: not a boolean: {data['use_git_root']!r}")
            else:
                cfg.use_git_root = flag

        # Environment overrides
        if env_dir := os.getenv("CCSTATS_CLAUDE_DIR"):
            cfg.claude_dir = env_dir
        if env_output := os.getenv("CCSTATS_OUTPUT"):
            cfg.output_format = env_output
        if os.getenv("CCSTATS_NO_GIT_ROOT"):
            cfg.use_git_root = False

        return cfg

    @property
    def resolved_claude_dir(self) -> Path:
        return Path(self.claude_dir).expanduser()

    def check_output_format(self, fmt: Optional[str] = None) -> Optional[str]:
        """Check an output format name.

        Returns None if OK, or an error message string.
        """
        fmt = fmt or self.output_format
        if fmt in OUTPUT_FORMATS:
            return None
        return f"Unknown output format '{fmt}' (expected one of: {', '.join(OUTPUT_FORMATS)})"


def _as_bool(value) -> Optional[bool]:
    """YAML booleans, 0/1, or quoted words like "false". None if unrecognized."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None
