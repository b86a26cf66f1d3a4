"""Command-line interface for tapbump."""

from __future__ import annotations

import argparse
import logging
import shlex
import signal
import sys
from types import FrameType

from . import __version__
from .config import DEFAULT_TARGET_REPO, TapbumpConfig
from .errors import TapbumpError, UsageError
from .pipeline import PipelineResult, update_formula
from .utils import console, log, setup_logging

logger = logging.getLogger(__name__)

EXAMPLES = (
    "Example: tapbump v0.1.0",
    "Example: tapbump 0.1.0 ../homebrew-tap",
)


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="tapbump",
        description="tapbump - Update a Homebrew formula for a tagged GitHub release",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        epilog=(
            "Environment variables: REPO_OWNER, REPO_NAME and FORMULA_NAME "
            "override the repository owner, repository name and formula name."
        ),
    )
    parser.add_argument(
        "version",
        nargs="?",
        help="Version or tag to release (e.g. v0.1.0 or 0.1.0)",
    )
    parser.add_argument(
        "target_repo",
        nargs="?",
        default=str(DEFAULT_TARGET_REPO),
        help="Path to the Homebrew tap repository",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Print the formula instead of writing it",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"tapbump {__version__}",
        dest="show_version",
    )
    return parser


def print_usage(parser: argparse.ArgumentParser) -> None:
    """Print usage with invocation examples."""
    parser.print_usage()
    for example in EXAMPLES:
        print(example)


def _print_next_steps(
    result: PipelineResult,
    target_repo: str,
    formula_name: str,
) -> None:
    """Print the follow-up git steps, which are left to the operator."""
    path = result.formula_path
    if path is None:
        return
    tap = shlex.quote(target_repo)
    relative_path = shlex.quote(str(path.relative_to(target_repo)))
    message = f"Update {formula_name} to {result.version_tag.version}"
    log("Formula updated successfully!", "success", "✅")
    console.print()
    console.print("Next steps:")
    console.print(
        f"1. Review the changes: cat {shlex.quote(str(path))}",
        soft_wrap=True,
        markup=False,
    )
    console.print(
        f"2. Commit the changes: cd {tap} && git add {relative_path} && "
        f"git commit -m {shlex.quote(message)}",
        soft_wrap=True,
        markup=False,
    )
    console.print(
        f"3. Push to GitHub: cd {tap} && git push",
        soft_wrap=True,
        markup=False,
    )


def _handle_sigterm(signum: int, _frame: FrameType | None) -> None:
    """Exit through the normal unwinding path so temporary files are removed."""
    raise SystemExit(128 + signum)


def main(argv: list[str] | None = None) -> int:
    """Main function to parse arguments and run the pipeline."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not args.version:
        print_usage(parser)
        return 1

    previous_handler = signal.signal(signal.SIGTERM, _handle_sigterm)
    try:
        config = TapbumpConfig.load(args.config_file)
        result = update_formula(
            args.version,
            args.target_repo,
            config,
            dry_run=args.dry_run,
        )
    except UsageError as e:
        log(f"Error: {e.message}", "error", "❌")
        print_usage(parser)
        return e.exit_code
    except TapbumpError as e:
        stage = e.stage or "setup"
        log(f"Error during {stage}: {e.message}", "error", "❌", print_exception=True)
        return e.exit_code
    except KeyboardInterrupt:
        log("Interrupted", "warning", "⚠️")
        return 130
    finally:
        signal.signal(signal.SIGTERM, previous_handler)

    if args.dry_run:
        print(result.document.text, end="")
    else:
        _print_next_steps(
            result,
            args.target_repo,
            config.coordinates.formula_name,
        )
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
