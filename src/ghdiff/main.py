"""Main CLI entry point for ghdiff."""

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from .actions import ActionsIO, PipelineIO
from .config import ActionConfig
from .logging_utils import configure_logging
from .orchestrator import run_git_diff

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="ghdiff",
        description="Run git diff and publish raw and JSON diffs as step outputs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Arguments that are not given fall back to the step inputs (INPUT_* variables),
so the same command works inside a GitHub Actions step and from a shell.

Examples:
  ghdiff --base-branch origin/main --search-path .
  ghdiff --base-branch main --search-path src --json-diff-file diff.json --file-output-only
  ghdiff --base-branch main --search-path . --git-options="--ignore-all-space -U0"
        """,
    )

    parser.add_argument(
        "--base-branch",
        dest="base_branch",
        help="Ref to diff against",
    )
    parser.add_argument(
        "--search-path",
        dest="search_path",
        help="Path filter for the diff",
    )
    parser.add_argument(
        "--max-buffer-size",
        dest="max_buffer_size",
        help="Maximum bytes of git output to capture (default: 1000000)",
    )
    parser.add_argument(
        "--file-output-only",
        dest="file_output_only",
        action="store_const",
        const="true",
        help="Only write files, do not set raw-diff and json-diff outputs",
    )
    parser.add_argument(
        "--git-options",
        dest="git_options",
        help="Extra git diff options, use --git-options=... when they start with a dash",
    )
    parser.add_argument(
        "--raw-diff-file",
        dest="raw_diff_file_output",
        help="Write the raw diff to this file",
    )
    parser.add_argument(
        "--json-diff-file",
        dest="json_diff_file_output",
        help="Write the JSON diff to this file",
    )
    parser.add_argument(
        "--cwd",
        dest="working_directory",
        help="Repository directory to run git in (default: current directory)",
    )
    parser.add_argument(
        "--log-level",
        help="Log level (default: LOG_LEVEL or INFO)",
    )

    return parser


_INPUT_NAMES = (
    "base_branch",
    "search_path",
    "max_buffer_size",
    "file_output_only",
    "git_options",
    "raw_diff_file_output",
    "json_diff_file_output",
    "working_directory",
)


def collect_overrides(args: argparse.Namespace) -> Dict[str, str]:
    """Return the inputs given on the command line."""
    return {
        name: getattr(args, name)
        for name in _INPUT_NAMES
        if getattr(args, name, None) is not None
    }


def create_config(args: argparse.Namespace, io: PipelineIO) -> ActionConfig:
    """Create configuration from command line arguments and step inputs."""
    overrides = collect_overrides(args)

    def get_input(name: str) -> str:
        if name in overrides:
            return overrides[name]
        return io.get_input(name)

    return ActionConfig.from_inputs(get_input)


def main(argv: Optional[List[str]] = None, io: Optional[PipelineIO] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    io = io or ActionsIO()

    config = create_config(args, io)
    outcome = run_git_diff(config, io)

    if not outcome.ok:
        logger.debug("git diff failure: %s", json.dumps(outcome.error_dict()))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
