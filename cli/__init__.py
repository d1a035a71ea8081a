"""Command-line interface for the prompt store.

Updates:
  v0.1.0 - 2026-09-29 - Package scaffold for parser, commands, and runtime helpers.
"""
