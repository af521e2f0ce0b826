#!/usr/bin/env python3
"""
ccstats — Claude Code session statistics

Usage:
    ccstats                          Stats for the active session of this project
    ccstats -f, --file PATH          Analyze a specific session file
    ccstats -o, --output FORMAT      Output format: console (default), json, yaml
    ccstats -s, --save PATH          Save output to a file
    ccstats --no-git-root            Search from cwd instead of the git repository root
    ccstats -d, --debug              Show debug information on stderr
    ccstats -v, --version            Show version
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, List, Optional

_VALUE_FLAGS = {
    "-f": "file", "--file": "file",
    "-o": "output", "--output": "output",
    "-s": "save", "--save": "save",
}
_BOOL_FLAGS = {
    "-d": "debug", "--debug": "debug",
    "--no-git-root": "no_git_root",
}


def run(opts: Dict[str, Optional[str]]) -> None:
    from ccstats.api import report
    from ccstats.render import save_output

    debug = bool(opts.get("debug"))
    use_git_root = False if opts.get("no_git_root") else None

    result = report(
        opts.get("file"),
        output_format=opts.get("output"),
        use_git_root=use_git_root,
    )

    if "error" in result:
        if debug and result.get("searched_path"):
            print(f"Debug: searched in {result['searched_path']}", file=sys.stderr)
        if result["error"] == "No Claude Code session found yet":
            _err(f"{result['error']}\n  Session files are created after first tool use")
        _err(result["error"])

    # Keep stdout clean for json/yaml consumers
    if result["format"] == "console" or debug:
        print(f"Reading session file: {result['session_file']}", file=sys.stderr)

    save = opts.get("save")
    if save:
        try:
            out = save_output(result["output"], save)
        except OSError as e:
            _err(f"Could not save output to {save}: {e}")
        print(f"Statistics saved to {out}", file=sys.stderr)
    else:
        print(result["output"])


def _parse_args(args: List[str]) -> Dict[str, Optional[str]]:
    """Parse flags into an options dict. Exits on bad usage."""
    opts: Dict[str, Optional[str]] = {}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in _VALUE_FLAGS:
            if i + 1 >= len(args):
                _err(f"Option {arg} requires a value")
            opts[_VALUE_FLAGS[arg]] = args[i + 1]
            i += 2
            continue
        if arg in _BOOL_FLAGS:
            opts[_BOOL_FLAGS[arg]] = "1"
        else:
            _err(f"Unknown option: {arg}\nRun 'ccstats --help' for usage.")
        i += 1
    return opts


def _err(msg):
    print(msg, file=sys.stderr)
    sys.exit(1)


def main(argv: Optional[List[str]] = None):
    args = sys.argv[1:] if argv is None else argv

    if any(a in ("-h", "--help") for a in args):
        print(__doc__.strip())
        sys.exit(0)

    if any(a in ("-v", "--version") for a in args):
        from ccstats import __version__
        print(__version__)
        sys.exit(0)

    opts = _parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if opts.get("debug") else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    run(opts)


if __name__ == "__main__":
    main()
