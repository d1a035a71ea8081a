"""Argument parser for the prompt store CLI.

Updates:
  v0.4.0 - 2026-10-18 - Add prompt authoring, search, and list filter arguments.
  v0.3.0 - 2026-10-16 - Add mirror export, import, and sync subcommands.
  v0.2.0 - 2026-10-12 - Add backup and restore subcommands.
  v0.1.0 - 2026-09-29 - Initial launcher with prompt listing and index rebuild.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Sequence


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected zero or a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Return the configured argument parser."""
    parser = argparse.ArgumentParser(description="Prompt store maintenance launcher")
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser(
        "prompts-list",
        help="List stored prompts and report files that could not be read.",
    )
    list_parser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=[],
        help="Only list prompts carrying this tag; repeat to require several.",
    )
    list_parser.add_argument("--category", default=None, help="Only list this category.")
    template_group = list_parser.add_mutually_exclusive_group()
    template_group.add_argument(
        "--templates",
        dest="is_template",
        action="store_true",
        default=None,
        help="Only list template prompts.",
    )
    template_group.add_argument(
        "--no-templates",
        dest="is_template",
        action="store_false",
        default=None,
        help="Only list prompts that are not templates.",
    )
    list_parser.add_argument(
        "--search",
        default=None,
        help="Case-insensitive text to find in name, description, content, category, or tags.",
    )
    list_parser.add_argument("--limit", type=_positive_int, default=None)
    list_parser.add_argument("--offset", type=_non_negative_int, default=0)

    search_parser = subparsers.add_parser(
        "prompts-search",
        help="List prompts whose text fields contain the query.",
    )
    search_parser.add_argument("query", help="Case-insensitive search text.")
    search_parser.add_argument("--limit", type=_positive_int, default=None)

    add_parser = subparsers.add_parser(
        "prompt-add",
        help="Create a prompt from a JSON document (an id is generated when absent).",
    )
    add_parser.add_argument("source", type=Path, help="Path to the prompt JSON document.")
    add_parser.add_argument(
        "--mirror",
        action="store_true",
        help="Also write the prompt to the relational mirror.",
    )

    update_parser = subparsers.add_parser(
        "prompt-update",
        help="Apply the fields of a JSON document to an existing prompt.",
    )
    update_parser.add_argument("prompt_id", help="Prompt identifier (file stem).")
    update_parser.add_argument("source", type=Path, help="Path to a JSON document of changes.")
    update_parser.add_argument(
        "--mirror",
        action="store_true",
        help="Also write the updated prompt to the relational mirror.",
    )

    show_parser = subparsers.add_parser("prompt-show", help="Print one stored prompt as JSON.")
    show_parser.add_argument("prompt_id", help="Prompt identifier (file stem).")

    delete_parser = subparsers.add_parser("prompt-delete", help="Delete a stored prompt.")
    delete_parser.add_argument("prompt_id", help="Prompt identifier (file stem).")
    delete_parser.add_argument(
        "--mirror",
        action="store_true",
        help="Also delete the prompt from the relational mirror.",
    )

    render_parser = subparsers.add_parser(
        "prompt-render",
        help="Render a template prompt with the supplied variables.",
    )
    render_parser.add_argument("prompt_id", help="Prompt identifier (file stem).")
    render_parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template variable assignment; repeat for multiple variables.",
    )

    subparsers.add_parser(
        "index-rebuild",
        help="Regenerate index.json from the stored prompt files.",
    )

    subparsers.add_parser("backup-create", help="Snapshot every stored prompt.")
    subparsers.add_parser("backup-list", help="List snapshots, newest first.")

    restore_parser = subparsers.add_parser(
        "backup-restore",
        help="Restore prompts from a snapshot (merging into the live store).",
    )
    restore_parser.add_argument("timestamp", help="Snapshot timestamp as shown by backup-list.")
    restore_parser.add_argument(
        "--no-safety-backup",
        dest="safety_backup",
        action="store_false",
        help="Skip the snapshot of the current state taken before restoring.",
    )
    restore_parser.add_argument(
        "--skip-index",
        dest="rebuild_index",
        action="store_false",
        help="Do not regenerate index.json after restoring.",
    )

    subparsers.add_parser(
        "mirror-export",
        help="Copy every readable prompt file into the relational mirror.",
    )
    import_parser = subparsers.add_parser(
        "mirror-import",
        help="Write relational mirror rows to prompt files.",
    )
    import_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace prompt files that already exist.",
    )
    sync_parser = subparsers.add_parser(
        "mirror-sync",
        help="Two-way sync between prompt files and the relational mirror.",
    )
    sync_parser.add_argument(
        "--prefer",
        choices=("file", "mirror"),
        default=None,
        help="Resolve diverging prompts from this side instead of reporting conflicts.",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for the prompt store launcher."""
    return build_parser().parse_args(argv)


__all__ = ["build_parser", "parse_args"]
