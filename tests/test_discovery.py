"""Tests for ccstats.ingest.discovery — locating the active session file."""

import os
import subprocess

from ccstats.ingest import discovery
from ccstats.ingest.discovery import (
    encode_project_dir,
    find_active_session_file,
    get_git_root,
)


class TestEncodeProjectDir:
    def test_slashes(self):
        assert encode_project_dir("/home/yu/projects/foo") == "-home-yu-projects-foo"

    def test_dots_and_underscores(self):
        assert encode_project_dir("/home/yu/.config/my_app.v2") == "-home-yu--config-my-app-v2"


class TestFindActiveSessionFile:
    def _project_dir(self, claude_dir, cwd):
        d = claude_dir / "projects" / encode_project_dir(cwd)
        d.mkdir(parents=True)
        return d

    def test_missing_directory(self, tmp_path):
        result = find_active_session_file(
            use_git_root=False, claude_dir=tmp_path, cwd="/work/proj",
        )
        assert result.path is None
        assert result.directory_exists is False
        assert result.file_count == 0
        assert result.searched_path == str(tmp_path / "projects" / "-work-proj")

    def test_directory_without_sessions(self, tmp_path):
        d = self._project_dir(tmp_path, "/work/proj")
        (d / "notes.txt").write_text("x")
        result = find_active_session_file(
            use_git_root=False, claude_dir=tmp_path, cwd="/work/proj",
        )
        assert result.path is None
        assert result.directory_exists is True
        assert result.file_count == 0

    def test_newest_file_wins(self, tmp_path):
        d = self._project_dir(tmp_path, "/work/proj")
        old = d / "old.jsonl"
        new = d / "new.jsonl"
        old.write_text("{}")
        new.write_text("{}")
        os.utime(old, (1_000_000, 1_000_000))
        os.utime(new, (2_000_000, 2_000_000))

        result = find_active_session_file(
            use_git_root=False, claude_dir=tmp_path, cwd="/work/proj",
        )
        assert result.path == str(new)
        assert result.file_count == 2

    def test_uses_git_root(self, tmp_path, monkeypatch):
        d = self._project_dir(tmp_path, "/work/repo")
        (d / "s.jsonl").write_text("{}")
        monkeypatch.setattr(discovery, "get_git_root", lambda cwd=None: "/work/repo")

        result = find_active_session_file(
            use_git_root=True, claude_dir=tmp_path, cwd="/work/repo/src/pkg",
        )
        assert result.path == str(d / "s.jsonl")

    def test_falls_back_to_cwd_outside_repo(self, tmp_path, monkeypatch):
        d = self._project_dir(tmp_path, "/scratch")
        (d / "s.jsonl").write_text("{}")
        monkeypatch.setattr(discovery, "get_git_root", lambda cwd=None: None)

        result = find_active_session_file(
            use_git_root=True, claude_dir=tmp_path, cwd="/scratch",
        )
        assert result.path == str(d / "s.jsonl")

    def test_git_root_disabled(self, tmp_path, monkeypatch):
        def _boom(cwd=None):
            raise AssertionError("git should not be consulted")

        monkeypatch.setattr(discovery, "get_git_root", _boom)
        result = find_active_session_file(
            use_git_root=False, claude_dir=tmp_path, cwd="/work/repo/src",
        )
        assert result.searched_path.endswith("-work-repo-src")


class TestGetGitRoot:
    def test_git_missing(self, monkeypatch):
        def _raise(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", _raise)
        assert get_git_root() is None

    def test_not_a_repo(self, monkeypatch):
        def _raise(*args, **kwargs):
            raise subprocess.CalledProcessError(128, args[0])

        monkeypatch.setattr(subprocess, "run", _raise)
        assert get_git_root("/tmp") is None

    def test_strips_output(self, monkeypatch):
        def _run(cmd, **kwargs):
            return subprocess.CompletedProcess(cmd, 0, stdout="/work/repo\n", stderr="")

        monkeypatch.setattr(subprocess, "run", _run)
        assert get_git_root() == "/work/repo"
