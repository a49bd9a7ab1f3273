"""CLI entry point for generating and pushing Xray results."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import aiohttp

from xray_bridge.assembler import Assembly
from xray_bridge.config import XraySettings
from xray_bridge.errors import XrayBridgeError
from xray_bridge.loaders import read_json
from xray_bridge.models.payload import TrackerPayload
from xray_bridge.pipeline import generate_results
from xray_bridge.selector import select_tests
from xray_bridge.xray.client import XrayClient

STATUS_SYMBOLS = {
    "PASSED": "✓",
    "FAILED": "✗",
    "SKIPPED": "-",
}

log = logging.getLogger("xray_bridge")


def log_results_summary(log: logging.Logger, payload: TrackerPayload) -> None:
    """Log a formatted summary of the generated test results."""
    log.info("=" * 80)
    log.info("Xray Results Summary:")
    log.info("=" * 80)

    for test in payload.tests:
        symbol = STATUS_SYMBOLS.get(test.status, "?")
        log.info("%s %s: %s", symbol, test.test_key, test.status)
        if test.status == "FAILED" and test.comment:
            log.info("  Comment: %s", test.comment)


def format_output(assembly: Assembly, output_path: Path) -> dict[str, Any]:
    """Format the generation summary for JSON output."""
    tests = assembly.payload.tests
    return {
        "total": len(tests),
        "passed": sum(1 for t in tests if t.status == "PASSED"),
        "failed": sum(1 for t in tests if t.status == "FAILED"),
        "skipped": sum(1 for t in tests if t.status == "SKIPPED"),
        "unmapped": assembly.unmapped,
        "output": str(output_path),
    }


async def run_generate(settings: XraySettings) -> int:
    """Generate the Xray payload and return exit code."""
    try:
        assembly = await generate_results(settings)
    except XrayBridgeError as e:
        log.error("Error generating Xray results: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    log_results_summary(log, assembly.payload)
    print(json.dumps(format_output(assembly, settings.output_path), indent=2))
    return 0


async def run_push(
    settings: XraySettings,
    results_path: Path,
    test_execution_key: str | None = None,
) -> int:
    """Import a previously generated payload into Xray and return exit code."""
    try:
        payload = TrackerPayload.model_validate(
            await read_json(results_path, "Xray results")
        )
        async with XrayClient.from_config(settings) as client:
            result = await client.import_execution(
                payload.to_json_dict(), test_execution_key=test_execution_key
            )
    except (XrayBridgeError, aiohttp.ClientError, TimeoutError, ValueError) as e:
        reason = str(e) or type(e).__name__
        log.error("Failed to push results to Xray: %s", reason)
        print(f"error: {reason}", file=sys.stderr)
        return 1

    print(result.key)
    return 0


async def run_select(
    repo_path: Path,
    base_ref: str,
    head_ref: str,
    test_dir: str,
    mode: str,
) -> int:
    """Print the selected test files one per line and return exit code."""
    try:
        selected = await select_tests(
            repo_path,
            base_ref,
            head_ref,
            test_dir,
            "changed" if mode == "changed" else "all",
        )
    except XrayBridgeError as e:
        log.error("Error selecting tests: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    for file_path in selected:
        print(file_path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="xray-bridge",
        description="Convert Playwright results to Xray and push them",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser(
        "generate", help="Generate an Xray JSON payload from Playwright results"
    )
    generate.add_argument(
        "--results", type=Path, help="Playwright JSON report (PW_RESULTS_PATH)"
    )
    generate.add_argument(
        "--mapping", type=Path, help="Title to test key mapping (TEST_MAPPING_PATH)"
    )
    generate.add_argument(
        "--output", type=Path, help="Xray payload destination (XRAY_OUTPUT_PATH)"
    )

    push = subparsers.add_parser("push", help="Import an Xray payload into Xray")
    push.add_argument(
        "--results",
        type=Path,
        help="Xray payload to import (defaults to XRAY_OUTPUT_PATH)",
    )
    push.add_argument(
        "--test-execution-key",
        help="Existing test execution to attach results to (e.g. PROJ-123)",
    )

    select = subparsers.add_parser(
        "select", help="List test files to run for a git diff"
    )
    select.add_argument("--repo-path", type=Path, default=Path("."))
    select.add_argument("--base-ref", default="origin/main")
    select.add_argument("--head-ref", default="HEAD")
    select.add_argument("--test-dir", default="tests")
    select.add_argument(
        "--mode",
        choices=("changed", "all"),
        default="all",
        help="'changed' lists modified test files; 'all' lists every test file",
    )

    return parser


def load_settings(args: argparse.Namespace) -> XraySettings:
    """Build settings from the environment, then apply CLI overrides."""
    settings = XraySettings.from_env()
    overrides = {
        field_name: value
        for field_name, value in (
            ("results_path", getattr(args, "results", None)),
            ("mapping_path", getattr(args, "mapping", None)),
            ("output_path", getattr(args, "output", None)),
        )
        if value is not None
    }
    if args.command == "push":
        # push reads --results as the payload, not the Playwright report
        overrides.pop("results_path", None)
    return settings.model_copy(update=overrides)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.command == "select":
        exit_code = asyncio.run(
            run_select(
                repo_path=args.repo_path,
                base_ref=args.base_ref,
                head_ref=args.head_ref,
                test_dir=args.test_dir,
                mode=args.mode,
            )
        )
        sys.exit(exit_code)

    try:
        settings = load_settings(args)
    except ValueError as e:
        log.error("Invalid configuration: %s", e)
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "push":
        exit_code = asyncio.run(
            run_push(
                settings,
                args.results or settings.output_path,
                test_execution_key=args.test_execution_key,
            )
        )
    else:
        exit_code = asyncio.run(run_generate(settings))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
