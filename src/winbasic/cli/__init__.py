"""
CLI module for the Windows Basic gateway.

Starts the stdio server and offers a few offline checks of the
root and command policies.
"""

from winbasic.cli.main import cli

__all__ = ["cli"]
