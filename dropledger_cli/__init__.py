"""
Module 07 - DropLedger CLI

Command-line interface for building and checking distribution snapshots.

Usage:
    python -m dropledger_cli generate -i balances.json -o snapshot.json
    python -m dropledger_cli mutate -i balances.json --add new.json -o snapshot.json
    python -m dropledger_cli proof snapshot.json 0xAccount
    python -m dropledger_cli verify snapshot.json 0xAccount
"""

__version__ = "0.1.0"
