#!/usr/bin/env python3
"""
sectorgen CLI Entry Point

Provides command-line interface for universe generation and routing.
Run with: python -m sectorgen <command> [args]
"""

import argparse
import json
import sys

from .core import get_utc_timestamp


def output_json(data: dict, indent: int = 2) -> None:
    """Print JSON output to stdout."""
    print(json.dumps(data, indent=indent))


def output_error(message: str, exit_code: int = 1, **kwargs) -> None:
    """Print error JSON and exit."""
    error_data = {
        "error": kwargs.pop("error_type", "error"),
        "message": message,
        "query_timestamp": get_utc_timestamp(),
    }
    error_data.update(kwargs)
    output_json(error_data)
    sys.exit(exit_code)


# =============================================================================
# Built-in Commands
# =============================================================================


def cmd_help(args: argparse.Namespace) -> dict:
    """Show help message."""
    help_text = """
═══════════════════════════════════════════════════════════════════
sectorgen - Procedural Sector Universe
───────────────────────────────────────────────────────────────────

Universe Commands:
  generate <sectors> [opts]  Generate a universe and save it
                             --seed N, --output <file>, --force, --no-verify
  stats [opts]               Universe statistics
                             --graph <file>, --detailed
  verify [opts]              Check every generation postcondition
                             --graph <file>
  instance [opts]            Rows for a new single-player universe
                             --max-persisted-id N, --output <file>

Navigation Commands:
  route <from> <to> [opts]   Shortest route between two sectors
                             --graph <file>, --max-depth N

System Commands:
  help                       Show this help message

Examples:
  sectorgen generate 5000 --seed 42
  sectorgen generate 1000 --output /tmp/small.universe --force
  sectorgen stats --detailed
  sectorgen verify
  sectorgen route 1 4200
  sectorgen route 12 480 --max-depth 20
  sectorgen instance --max-persisted-id 5000 --output rows.json

Environment:
  SECTORGEN_LOG_LEVEL        DEBUG, INFO, WARNING (default), ERROR
  SECTORGEN_UNIVERSE_PATH    Default universe file
  SECTORGEN_DEBUG_TIMING     Report per-phase generation timings

Usage:
  python3 -m sectorgen <command> [args]

═══════════════════════════════════════════════════════════════════
"""
    print(help_text)
    return {}


# =============================================================================
# Main Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="sectorgen",
        description="sectorgen - procedural sector universe generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Built-in commands
    help_parser = subparsers.add_parser("help", help="Show help message")
    help_parser.set_defaults(func=cmd_help)

    from .commands import navigation, universe

    universe.register_parsers(subparsers)
    navigation.register_parsers(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Default to help if no command
    if not args.command:
        cmd_help(args)
        return 0

    # Check if command has a handler function
    if not hasattr(args, "func"):
        output_error(
            f"Unknown command: {args.command}",
            error_type="unknown_command",
            hint="Run 'sectorgen help' for usage",
        )

    # Execute command
    try:
        result = args.func(args)

        # Output result if it's a dict (JSON response)
        if isinstance(result, dict) and result:
            output_json(result)

            # Return non-zero exit code if result contains error
            if "error" in result:
                return 1

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        output_error(str(e), error_type="command_error", command=args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
