"""Integration tests for test selection using real git repositories."""

import subprocess
from pathlib import Path

import pytest

from xray_bridge.errors import GitError
from xray_bridge.selector import (
    get_changed_files,
    ref_exists,
    resolve_ref,
    select_tests,
)

from .conftest import CommitFn, WriteFileFn


class TestSelectTestsChangedMode:
    """Tests for select_tests in changed mode."""

    async def test_returns_changed_test_files(
        self,
        git_repo: Path,
        git_commit: CommitFn,
        write_file: WriteFileFn,
    ) -> None:
        """Returns only test files changed under the test directory."""
        base = git_commit("initial")

        write_file("tests/login.spec.ts")
        write_file("tests/api/users.test.js")
        write_file("src/pages/LoginPage.ts")
        git_commit("add tests")

        result = await select_tests(git_repo, base, "HEAD", "tests", "changed")

        assert result == ["tests/api/users.test.js", "tests/login.spec.ts"]

    async def test_ignores_tests_outside_test_dir(
        self,
        git_repo: Path,
        git_commit: CommitFn,
        write_file: WriteFileFn,
    ) -> None:
        """Ignores test files that live outside the test directory."""
        base = git_commit("initial")

        write_file("examples/demo.spec.js")
        git_commit("add example")

        result = await select_tests(git_repo, base, "HEAD", "tests", "changed")

        assert result == []

    async def test_returns_empty_when_no_changes(
        self,
        git_repo: Path,
        git_commit: CommitFn,
    ) -> None:
        """Returns empty list when nothing changed."""
        commit = git_commit("initial")

        result = await select_tests(git_repo, commit, "HEAD", "tests", "changed")

        assert result == []


class TestSelectTestsAllMode:
    """Tests for select_tests in select-all mode."""

    async def test_returns_every_test_file_regardless_of_diff(
        self,
        git_repo: Path,
        git_commit: CommitFn,
        write_file: WriteFileFn,
    ) -> None:
        """Returns all test files even when only a source file changed."""
        write_file("tests/login.spec.ts")
        write_file("tests/api/users.test.js")
        write_file("tests/helpers.ts")
        base = git_commit("initial")

        write_file("src/pages/LoginPage.ts", "export class LoginPage {}\n")
        git_commit("change page object")

        result = await select_tests(git_repo, base, "HEAD", "tests", "all")

        assert result == ["tests/api/users.test.js", "tests/login.spec.ts"]

    async def test_returns_empty_without_test_dir(
        self,
        git_repo: Path,
        git_commit: CommitFn,
    ) -> None:
        """Returns empty list when the test directory does not exist."""
        commit = git_commit("initial")

        result = await select_tests(git_repo, commit, "HEAD", "missing", "all")

        assert result == []

    async def test_raises_for_invalid_ref(
        self,
        git_repo: Path,
        git_commit: CommitFn,
    ) -> None:
        """Select-all still requires a valid diff."""
        git_commit("initial")

        with pytest.raises(GitError, match="Cannot resolve git ref"):
            await select_tests(git_repo, "nope", "HEAD", "tests", "all")


class TestGetChangedFiles:
    """Tests for get_changed_files."""

    async def test_returns_changed_files(
        self,
        git_repo: Path,
        git_commit: CommitFn,
        write_file: WriteFileFn,
    ) -> None:
        """Returns list of files changed between commits."""
        base = git_commit("initial")

        write_file("file1.txt", "content")
        write_file("file2.txt", "content")
        git_commit("add files")

        changed = await get_changed_files(git_repo, base, "HEAD")

        assert sorted(changed) == ["file1.txt", "file2.txt"]

    async def test_raises_when_git_diff_fails(
        self,
        git_repo: Path,
        git_commit: CommitFn,
    ) -> None:
        """Raises GitError when git diff fails with valid-looking refs."""
        git_commit("initial")

        # A ref pointing to a blob passes rev-parse but breaks git diff
        result = subprocess.run(
            ["git", "hash-object", "-w", "--stdin"],
            cwd=git_repo,
            input="test content",
            capture_output=True,
            text=True,
            check=True,
        )
        subprocess.run(
            ["git", "update-ref", "refs/blob-ref", result.stdout.strip()],
            cwd=git_repo,
            check=True,
            capture_output=True,
        )

        with pytest.raises(GitError, match="Git diff failed"):
            await get_changed_files(git_repo, "HEAD", "refs/blob-ref")


class TestResolveRef:
    """Tests for resolve_ref and ref_exists."""

    async def test_resolves_commit_sha(
        self, git_repo: Path, git_commit: CommitFn
    ) -> None:
        """Resolves a commit SHA directly."""
        sha = git_commit("initial")

        assert await resolve_ref(git_repo, sha) == sha

    async def test_tries_origin_prefix(
        self, git_repo: Path, git_commit: CommitFn
    ) -> None:
        """Falls back to origin/ when the ref only exists remotely."""
        git_commit("initial")
        subprocess.run(
            ["git", "update-ref", "refs/remotes/origin/main-branch", "HEAD"],
            cwd=git_repo,
            check=True,
            capture_output=True,
        )

        assert await resolve_ref(git_repo, "main-branch") == "origin/main-branch"

    async def test_raises_for_unknown_ref(
        self, git_repo: Path, git_commit: CommitFn
    ) -> None:
        """Raises GitError for unknown refs."""
        git_commit("initial")

        with pytest.raises(GitError, match="Cannot resolve git ref"):
            await resolve_ref(git_repo, "unknown-branch")

    async def test_ref_exists(self, git_repo: Path, git_commit: CommitFn) -> None:
        """Reports existing and missing refs."""
        git_commit("initial")

        assert await ref_exists(git_repo, "HEAD") is True
        assert await ref_exists(git_repo, "non-existent") is False
