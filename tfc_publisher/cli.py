"""Command-line entry point for running the lifecycle hooks outside a host."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from tfc_publisher.core.config import load_settings
from tfc_publisher.core.errors import AggregatePublishError
from tfc_publisher.core.logging import configure_structlog
from tfc_publisher.plugin import PluginContext, publish, verify_conditions
from tfc_publisher.publish.types import PublishResult


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env = dict(os.environ)
    configure_structlog(debug=_debug_enabled(env))

    if args.command == "verify":
        return _handle_verify(args, env)
    if args.command == "publish":
        return _handle_publish(args, env)

    parser.error(f"Unknown command '{args.command}'")
    return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tfc-publisher",
        description="Publish Terraform modules to a private Terraform Cloud registry.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    verify = subparsers.add_parser("verify", help="Validate options, environment and token.")
    _add_plugin_arguments(verify)

    publish_cmd = subparsers.add_parser("publish", help="Verify, then package and publish the module.")
    _add_plugin_arguments(publish_cmd)

    return parser


def _add_plugin_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--org-name", help="Registry organization when package.json has none.")
    parser.add_argument(
        "--no-publish",
        dest="publish",
        action="store_false",
        default=None,
        help="Skip packaging and registry calls.",
    )
    parser.add_argument("--tarball-dir", help="Directory (relative to cwd) for the archive.")
    parser.add_argument("--pkg-root", help="Directory (relative to cwd) holding package.json.")
    parser.add_argument("--cwd", help="Working directory; defaults to the current one.")


def _plugin_options(args: argparse.Namespace) -> dict[str, Any]:
    candidates = {
        "orgName": args.org_name,
        "publish": args.publish,
        "tarballDir": args.tarball_dir,
        "pkgRoot": args.pkg_root,
    }
    return {key: value for key, value in candidates.items() if value is not None}


def _debug_enabled(env: dict[str, str]) -> bool:
    try:
        return load_settings(env).debug
    except ValueError:
        return False


def _handle_verify(args: argparse.Namespace, env: dict[str, str]) -> int:
    try:
        state = asyncio.run(verify_conditions(_plugin_options(args), _context(args, env)))
    except AggregatePublishError as exc:
        return _emit(exc.to_dict(), 1)
    return _emit({"verified": state.verified, "options": state.config.to_options()}, 0)


def _handle_publish(args: argparse.Namespace, env: dict[str, str]) -> int:
    try:
        result = asyncio.run(_verify_and_publish(_plugin_options(args), _context(args, env)))
    except AggregatePublishError as exc:
        return _emit(exc.to_dict(), 1)
    return _emit(result.to_dict(), 0)


async def _verify_and_publish(options: dict[str, Any], context: PluginContext) -> PublishResult:
    state = await verify_conditions(options, context)
    return await publish(options, context, state)


def _context(args: argparse.Namespace, env: dict[str, str]) -> PluginContext:
    # tar's verbose listing goes to stderr so stdout carries only the JSON payload
    return PluginContext(
        cwd=Path(args.cwd).resolve() if args.cwd else Path.cwd(),
        env=env,
        stdout=sys.stderr,
        stderr=sys.stderr,
    )


def _emit(payload: dict, code: int) -> int:
    print(json.dumps(payload, indent=2))
    return code


if __name__ == "__main__":
    sys.exit(main())
