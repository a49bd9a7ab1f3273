"""Select test files to run for a git diff."""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Literal

from xray_bridge.errors import GitError

log = logging.getLogger(__name__)

type SelectionMode = Literal["changed", "all"]

TEST_FILE_SUFFIXES = (".spec.js", ".spec.ts", ".test.js", ".test.ts")


async def select_tests(
    repo_path: Path,
    base_ref: str,
    head_ref: str,
    test_dir: str = "tests",
    mode: SelectionMode = "all",
) -> Sequence[str]:
    """Determine which test files to run between two refs.

    Args:
        repo_path: Path to the git repository
        base_ref: Base git reference (e.g., "origin/main")
        head_ref: Head git reference (e.g., "HEAD")
        test_dir: Test directory relative to the repository root
        mode: "changed" returns only modified test files; "all" returns every
            test file under test_dir whatever the diff contains

    Returns:
        Repository relative test file paths, sorted.

    """
    changed_files = await get_changed_files(repo_path, base_ref, head_ref)
    log.info(
        "Found %d changed file(s) between %s and %s",
        len(changed_files),
        base_ref,
        head_ref,
    )

    if mode == "changed":
        selected = sorted(
            file_path
            for file_path in changed_files
            if is_test_file(file_path) and is_under(file_path, test_dir)
        )
        log.info("Selected %d changed test file(s)", len(selected))
        return selected

    # Changed sources cannot be traced to the tests importing them, so every
    # test file is selected.
    selected = list_test_files(repo_path, test_dir)
    log.info(
        "Select-all mode: %d changed file(s) might affect %d test file(s)",
        len(changed_files),
        len(selected),
    )
    return selected


def is_test_file(file_path: str) -> bool:
    """Check if a path names a test file."""
    return file_path.endswith(TEST_FILE_SUFFIXES)


def is_under(file_path: str, directory: str) -> bool:
    """Check if a repository relative path lives below ``directory``."""
    prefix = directory.strip("/")
    if not prefix or prefix == ".":
        return True
    return file_path.startswith(f"{prefix}/")


def list_test_files(repo_path: Path, test_dir: str) -> Sequence[str]:
    """List every test file below ``test_dir``, relative to the repository."""
    root = repo_path / test_dir
    if not root.is_dir():
        return []
    return sorted(
        path.relative_to(repo_path).as_posix()
        for path in root.rglob("*")
        if path.is_file() and is_test_file(path.name)
    )


async def get_changed_files(
    repo_path: Path,
    base_ref: str,
    head_ref: str,
) -> Sequence[str]:
    """Get list of changed files between two git refs."""
    resolved_base = await resolve_ref(repo_path, base_ref)
    resolved_head = await resolve_ref(repo_path, head_ref)

    process = await asyncio.create_subprocess_exec(
        "git",
        "diff",
        "--name-only",
        resolved_base,
        resolved_head,
        cwd=repo_path,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()

    if process.returncode != 0:
        raise GitError(f"Git diff failed: {stderr.decode().strip()}")

    output = stdout.decode().strip()
    return output.split("\n") if output else []


async def resolve_ref(repo_path: Path, ref: str) -> str:
    """Resolve a git reference, trying origin/ prefix if needed.

    CI checkouts often only carry origin/main instead of main.
    """
    if await ref_exists(repo_path, ref):
        return ref

    if not ref.startswith(("origin/", "refs/")):
        origin_ref = f"origin/{ref}"
        if await ref_exists(repo_path, origin_ref):
            return origin_ref

    raise GitError(f"Cannot resolve git ref '{ref}'")


async def ref_exists(repo_path: Path, ref: str) -> bool:
    """Check if a git reference exists."""
    process = await asyncio.create_subprocess_exec(
        "git",
        "rev-parse",
        "--verify",
        "--quiet",
        ref,
        cwd=repo_path,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.DEVNULL,
    )
    await process.communicate()
    return process.returncode == 0
