"""Main entry point for the agentwait CLI."""

from .cli import cli


if __name__ == "__main__":
    cli(prog_name="agentwait")
