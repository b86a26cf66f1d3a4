"""Allow ``python -m tapbump``."""

from .cli import run

run()
