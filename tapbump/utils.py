"""Utility functions for tapbump."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

# Initialize rich console
console = Console()
logger = logging.getLogger(__name__)

_STYLES = {
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "bold red",
    "debug": "dim",
}

_verbose = False


def setup_logging(verbose: bool = False) -> None:  # noqa: FBT001, FBT002
    """Configure logging level based on verbosity."""
    global _verbose  # noqa: PLW0603
    _verbose = verbose
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


def log(
    message: str,
    level: str = "info",
    emoji: str = "",
    *,
    print_exception: bool = False,
) -> None:
    """Print a styled message to the console.

    Debug messages are only shown when verbose output is enabled. The message
    is printed literally, so text such as ``[bold]`` is never treated as markup.
    """
    if level == "debug" and not _verbose:
        return
    style = _STYLES.get(level, "")
    prefix = f"{emoji} " if emoji else ""
    text = escape(message)
    if style:
        text = f"[{style}]{text}[/{style}]"
    console.print(f"{prefix}{text}", soft_wrap=True)
    if print_exception and _verbose:
        console.print_exception()
