#!/usr/bin/env python3
"""
Command line entry point for typeref.
"""

import sys
import json
import argparse
from pathlib import Path

from .config import setup_logging, get_config
from .config_loader import ConfigLoader, RewriterConfig
from .exceptions import TyperefError
from .runner import RewriteRunner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typeref",
        description="Rewrite import() type references in JSDoc comments to module: references"
    )
    parser.add_argument("--log-level", help="Logging level (default: TYPEREF_LOG_LEVEL or WARNING)")
    parser.add_argument("--log-file", help="Also log to this file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in [
        ("rewrite", "Rewrite doc comments of every source file"),
        ("modules", "Print the resolved module map as JSON"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("roots", nargs="*", help="Source roots (default: from configuration)")
        sub.add_argument("--project", default=".", help="Project directory holding the configuration")
        sub.add_argument("--config", help="Explicit configuration file")
        if name == "rewrite":
            output = sub.add_mutually_exclusive_group()
            output.add_argument("--out", help="Write rewritten sources beneath this directory")
            output.add_argument("--in-place", action="store_true", help="Overwrite changed files")
            output.add_argument("--stdout", action="store_true", help="Print changed files")

    return parser


def load_run_config(args) -> RewriterConfig:
    config = ConfigLoader.load(Path(args.project), args.config)
    if args.roots:
        config.source_roots = RewriterConfig(source_roots=args.roots).source_roots
    return config


def run_rewrite(args) -> int:
    runner = RewriteRunner(load_run_config(args))
    result = runner.run()

    if args.out:
        written = runner.write(result, args.out)
        print(f"Wrote {len(written)} files to {args.out}")
    elif args.in_place:
        written = runner.write(result)
        print(f"Rewrote {len(written)} files in place")
    elif args.stdout:
        for path in result.changed:
            print(f"==> {path} <==")
            print(result.outputs[path])
    else:
        print(json.dumps(result.to_dict(), indent=2))
    return 0


def run_modules(args) -> int:
    result = RewriteRunner(load_run_config(args)).run()
    print(json.dumps(result.modules, indent=2))
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    env = get_config()
    setup_logging(args.log_level or env['LOG_LEVEL'], args.log_file or env['LOG_FILE'])

    commands = {
        "rewrite": run_rewrite,
        "modules": run_modules,
    }
    try:
        return commands[args.command](args)
    except TyperefError as e:
        print(json.dumps({'error': e.to_dict()}, indent=2), file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
