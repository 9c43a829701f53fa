"""
CLI command modules.
"""

from dropledger_cli.commands import generate, mutate, proof, verify

__all__ = ["generate", "mutate", "proof", "verify"]
