"""
Module 07 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m dropledger_cli generate -i balances.json -o snapshot.json
    python -m dropledger_cli mutate -i balances.json --add add.json --remove remove.json -o snapshot.json
    python -m dropledger_cli proof snapshot.json 0xAccount
    python -m dropledger_cli verify snapshot.json 0xAccount [--amount N]
    python -m dropledger_cli config --init

Environment Variables:
    DROPLEDGER_CLAIM_KEY_POLICY   Registry claim accounting key: account or index
    DROPLEDGER_SNAPSHOT_PATH      Snapshot served by the HTTP API
    DROPLEDGER_LOG_LEVEL          Log level (default: INFO)
    DROPLEDGER_LOG_FILE           Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config import get_default_config_template, load_config
from dropledger_cli.commands import generate, mutate, proof, verify


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="dropledger",
        description="DropLedger CLI - Build Merkle distribution snapshots and check claims.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./dropledger.yaml or ~/.config/dropledger/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Build a snapshot from a balances document",
        description="Assign indices, build the Merkle tree and write the snapshot document.",
    )
    generate_parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Balances JSON: account -> amount object, or list of {address, earnings, reasons}",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the snapshot (default: print to stdout)",
    )
    generate_parser.add_argument(
        "--pretty",
        action="store_true",
        default=False,
        help="Indent the snapshot instead of writing canonical JSON",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- mutate command ---
    mutate_parser = subparsers.add_parser(
        "mutate",
        help="Apply add/update/remove batches and regenerate the snapshot",
        description="Batches are applied in order add, update, remove; nothing is written on failure.",
    )
    mutate_parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Current balances JSON",
    )
    mutate_parser.add_argument(
        "--add",
        type=str,
        default=None,
        help="JSON object of account -> amount to add",
    )
    mutate_parser.add_argument(
        "--update",
        type=str,
        default=None,
        help="JSON object of account -> new amount",
    )
    mutate_parser.add_argument(
        "--remove",
        type=str,
        default=None,
        help="JSON list of accounts to remove",
    )
    mutate_parser.add_argument(
        "--out", "-o",
        type=str,
        required=True,
        help="Output path for the regenerated snapshot",
    )
    mutate_parser.add_argument(
        "--balances-out",
        type=str,
        default=None,
        help="Also write the resulting balances document here",
    )
    mutate_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    mutate_parser.set_defaults(func=mutate.mutate_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Print an account's claim record",
        description="Look up index, amount, proof and flags for one account.",
    )
    proof_parser.add_argument("snapshot", type=str, help="Path to snapshot JSON")
    proof_parser.add_argument("account", type=str, help="Account identifier (any casing)")
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Re-verify an account's claim against the snapshot root",
        description="Exit code 2 if the proof does not reach the root.",
    )
    verify_parser.add_argument("snapshot", type=str, help="Path to snapshot JSON")
    verify_parser.add_argument("account", type=str, help="Account identifier (any casing)")
    verify_parser.add_argument(
        "--amount",
        type=str,
        default=None,
        help="Verify this amount instead of the recorded one (decimal or 0x-hex)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Create or show configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="dropledger.yaml",
        help="Path for config file (default: dropledger.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (DROPLEDGER_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: dropledger config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.log_level
    setup_logging(level=log_level, log_file=config.logging.log_file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
