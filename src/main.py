# src/main.py — v3
"""CLI entry point — run, plan, resume commands.

Usage:
    swarmcoder run "<prompt>" [options]
    swarmcoder plan "<prompt>"
    swarmcoder resume <workspace_dir>

Exit codes: 0 success, 1 failure (partial results stay on disk), 130 interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from swarmcoder.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
        _setup_logging(settings, args.verbose)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="swarmcoder",
        description=f"swarmcoder v{__version__} — Multi-role code generation swarm",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- run ---
    p_run = subparsers.add_parser("run", help="Plan and generate a project")
    p_run.add_argument("prompt", help="Natural-language project description")
    p_run.add_argument(
        "--manifest", type=Path, default=None,
        help="Use this manifest JSON instead of calling the planner",
    )
    _add_common_options(p_run)
    p_run.add_argument(
        "--max-run-attempts", type=int, choices=(1, 2), default=None,
        help="1 = fail fast, 2 = retry the run once (default: from settings)",
    )
    p_run.set_defaults(func=_cmd_run)

    # --- plan ---
    p_plan = subparsers.add_parser("plan", help="Print the manifest for a prompt")
    p_plan.add_argument("prompt", help="Natural-language project description")
    _add_common_options(p_plan)
    p_plan.set_defaults(func=_cmd_plan)

    # --- resume ---
    p_resume = subparsers.add_parser(
        "resume", help="Continue a failed run, skipping completed roles",
    )
    p_resume.add_argument("workspace_dir", type=Path, help="Workspace directory")
    _add_common_options(p_resume)
    p_resume.set_defaults(func=_cmd_resume)

    return parser


def _add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--workspace-root", type=Path, default=None,
        help="Directory holding workspaces (default: ./swarm-projects)",
    )
    p.add_argument(
        "--mock", action="store_true",
        help="Use canned responses instead of a real model",
    )


def _load_settings(args: argparse.Namespace):
    from swarmcoder.config.settings import load_settings

    overrides: dict[str, object] = {}
    if getattr(args, "workspace_root", None) is not None:
        overrides["workspace_root"] = args.workspace_root
    if getattr(args, "mock", False):
        overrides["mock"] = True
    if getattr(args, "max_run_attempts", None) is not None:
        overrides["max_run_attempts"] = args.max_run_attempts
    return load_settings(**overrides)


async def _cmd_run(args: argparse.Namespace, settings) -> int:
    """Execute a full run."""
    from swarmcoder.pipeline.orchestrator import SwarmOrchestrator
    from swarmcoder.storage.run_manager import load_manifest

    manifest = None
    if args.manifest is not None:
        if not args.manifest.exists():
            logger.error("Manifest not found: %s", args.manifest)
            return 1
        manifest = load_manifest(args.manifest)

    orchestrator = SwarmOrchestrator(settings)
    report = await orchestrator.run(args.prompt, manifest=manifest)
    _print_report(report)
    return 0


async def _cmd_plan(args: argparse.Namespace, settings) -> int:
    """Print the planned manifest without generating anything."""
    from swarmcoder.llm.client_factory import client_for
    from swarmcoder.pipeline.dag_builder import build_plan
    from swarmcoder.planning.planner import Planner

    planner = Planner(
        client_for("planner", settings),
        temperature=settings.planner_temperature,
        max_tokens=settings.llm_max_tokens,
    )
    manifest = await planner.plan(args.prompt)
    # Raises CyclicManifestError before anything is printed.
    plan = build_plan(manifest)
    logger.info("Execution order: %s", " -> ".join(plan.order))
    print(manifest.model_dump_json(indent=2))
    return 0


async def _cmd_resume(args: argparse.Namespace, settings) -> int:
    """Resume a workspace."""
    from swarmcoder.pipeline.orchestrator import SwarmOrchestrator

    workspace_dir: Path = args.workspace_dir
    if not workspace_dir.is_dir():
        logger.error("Not a directory: %s", workspace_dir)
        return 1

    orchestrator = SwarmOrchestrator(settings)
    report = await orchestrator.resume(workspace_dir)
    _print_report(report)
    return 0


def _print_report(report: object) -> None:
    """Print a human-readable summary of a RunReport."""
    print("\nSwarm complete:")
    print(f"  Project:   {report.manifest.project_name}")
    print(f"  Roles:     {len(report.outcomes)}")
    print(f"  Files:     {report.total_files}")
    print(f"  Assembled: {len(report.assembled)}")
    print(f"  Attempts:  {report.attempts}")
    print(f"  Output:    {report.project_dir}")


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from swarmcoder.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
