"""nftmarket CLI — Typer-based command-line interface.

Provides the ``nftmarket`` command with subcommands for deploying the
contracts to the development chain, publishing addresses to the front end,
running the behavioural oracle, and a walkthrough demo.

All output uses Rich for formatted terminal display.
"""
