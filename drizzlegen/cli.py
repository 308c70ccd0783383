# File: drizzlegen/cli.py
"""
drizzlegen - Command-Line Interface
====================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # PostgreSQL schema from a DMMF dump
    python -m drizzlegen --schema dmmf.json --output ./drizzle/schema.ts

    # Override the dialect and print to stdout
    python -m drizzlegen -s dmmf.yaml -d mysql --stdout

    # Show version
    python -m drizzlegen --version

Exit codes:
    0 : success
    2 : generation error (unsupported construct, malformed relation)
    3 : write error
    4 : input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

from drizzlegen.errors import GeneratorError
from drizzlegen.models import DatabaseDialect, GeneratedFile

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("drizzlegen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_GENERATION_ERROR: int = 2
EXIT_WRITE_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the drizzlegen logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("drizzlegen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from drizzlegen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="drizzlegen",
        description=(
            "drizzlegen: Drizzle ORM schema generator.\n\n"
            "Translates a Prisma DMMF datamodel (JSON/YAML) into a Drizzle "
            "schema module for PostgreSQL, MySQL, SQLite or SQL Server."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s dmmf.json -o ./drizzle/schema.ts\n"
            "  %(prog)s -s dmmf.yaml -d sqlite --stdout\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"drizzlegen v{__version__}",
    )

    parser.add_argument(
        "-s", "--schema",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the DMMF datamodel file (JSON or YAML).",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="PATH",
        help="Output file. Defaults to the 'output' value of the schema config.",
    )

    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "-d", "--dialect",
        type=str,
        default=None,
        choices=[d.value for d in DatabaseDialect],
        help="Override the target database dialect.",
    )
    config_group.add_argument(
        "--stdout",
        action="store_true",
        default=False,
        help="Print the generated schema instead of writing it.",
    )

    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(schema_path: Path, args: argparse.Namespace) -> int:
    """
    Load, generate and write.  Returns the appropriate exit code.
    """
    from drizzlegen.generator import SchemaGenerator, load_schema_file, parse_raw_schema
    from drizzlegen.utils import write_file

    try:
        datamodel, config = parse_raw_schema(load_schema_file(schema_path))
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load schema: %s", exc)
        return EXIT_INPUT_ERROR

    if args.dialect is not None:
        config.dialect = DatabaseDialect(args.dialect)
    if args.output is not None:
        config.output = args.output

    try:
        content: str = SchemaGenerator(config.dialect).generate(datamodel)
    except GeneratorError as exc:
        logger.error("Generation failed: %s", exc)
        return EXIT_GENERATION_ERROR

    if args.stdout:
        sys.stdout.write(content + "\n" if content else "")
        return EXIT_SUCCESS

    output_path: Path = Path(config.output).resolve()
    if output_path.exists() and not config.overwrite_existing:
        logger.error("Output file exists and overwriteExisting is false: %s", output_path)
        return EXIT_WRITE_ERROR

    try:
        write_file(output_path, content + "\n" if content else "")
    except OSError as exc:
        logger.error("Failed to write %s: %s", output_path, exc)
        return EXIT_WRITE_ERROR

    generated: GeneratedFile = GeneratedFile(path=str(output_path), content=content)
    logger.info(
        "Wrote %s (%d lines, %d bytes, sha256 %s).",
        generated.path,
        generated.line_count,
        generated.size_bytes,
        (generated.checksum or "")[:12],
    )
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)
    if args.quiet:
        logging.getLogger("drizzlegen").setLevel(logging.ERROR)

    schema_path: Path = Path(args.schema).resolve()

    if not schema_path.exists():
        logger.error("Schema file not found: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    if not schema_path.is_file():
        logger.error("Schema path is not a file: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Schema:  %s", schema_path)

    exit_code: int = _run_generation(schema_path, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_GENERATION_ERROR",
    "EXIT_WRITE_ERROR",
    "EXIT_INPUT_ERROR",
]
