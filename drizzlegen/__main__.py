# File: drizzlegen/__main__.py
"""
drizzlegen - Module entry point.

Allows running the generator directly via::

    python -m drizzlegen --schema dmmf.json --output ./drizzle/schema.ts

This module simply delegates to the CLI entry point defined in ``drizzlegen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from drizzlegen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
