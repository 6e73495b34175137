"""`python -m cli` entry point."""

from cli.main import run

run()
