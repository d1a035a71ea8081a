"""CLI command handlers for the prompt store.

Updates:
  v0.4.0 - 2026-10-18 - Add prompt add, update, and search handlers plus list filters.
  v0.3.0 - 2026-10-16 - Add mirror export, import, and sync handlers.
  v0.2.0 - 2026-10-12 - Add backup and restore handlers.
  v0.1.0 - 2026-09-29 - Initial prompt listing and index handlers.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core import (
    BackupError,
    BackupNotFoundError,
    InvalidIdentifierError,
    PromptAlreadyExistsError,
    PromptNotFoundError,
    PromptStoreError,
    PromptValidationError,
)

from .utils import load_json_object, parse_variable_assignments, print_and_log

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from core.file_store import ScanResult, SkippedRecord
    from core.prompt_manager import PromptManager
    from models.prompt_model import Prompt
else:  # pragma: no cover - runtime placeholders for type-only imports
    PromptManager = object

CommandHandler = Callable[[PromptManager | None, argparse.Namespace, logging.Logger], int]

EXIT_OK = 0
EXIT_NOT_FOUND = 4
EXIT_INVALID_INPUT = 5
EXIT_FAILURE = 6


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler
    requires_manager: bool = True


def _exit_code_for(exc: PromptStoreError) -> int:
    if isinstance(exc, PromptNotFoundError | BackupNotFoundError):
        return EXIT_NOT_FOUND
    if isinstance(exc, InvalidIdentifierError | PromptAlreadyExistsError | PromptValidationError):
        return EXIT_INVALID_INPUT
    if type(exc) is BackupError:
        # Only malformed timestamps raise the bare backup error.
        return EXIT_INVALID_INPUT
    return EXIT_FAILURE


def _fail(logger: logging.Logger, action: str, exc: PromptStoreError) -> int:
    print_and_log(logger, logging.ERROR, f"{action} failed: {exc}")
    return _exit_code_for(exc)


def _require_manager(manager: PromptManager | None, command: str) -> PromptManager:
    if manager is None:
        raise ValueError(f"Prompt manager is required for {command}.")
    return manager


def _print_skipped(skipped: list[SkippedRecord]) -> None:
    if not skipped:
        return
    print(f"\nSkipped records ({len(skipped)}):")
    for entry in skipped:
        print(f" - {entry.identifier} [{entry.kind.value}]: {entry.reason}")


def _print_prompts(result: ScanResult[Prompt], empty_message: str) -> None:
    if not result.items:
        print(empty_message)
    for prompt in result.items:
        template_flag = " [template]" if prompt.is_template else ""
        print(f"{prompt.id}\t{prompt.name}{template_flag}")
    _print_skipped(result.skipped)


def run_prompts_list(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "prompts-list")
    filtered = bool(args.tags or args.category or args.search or args.is_template is not None)
    try:
        result = manager.list_prompts(
            tags=args.tags or None,
            is_template=args.is_template,
            category=args.category,
            search=args.search,
            limit=args.limit,
            offset=args.offset,
        )
    except PromptStoreError as exc:
        return _fail(logger, "Listing prompts", exc)
    _print_prompts(result, "No matching prompts." if filtered else "No prompts stored.")
    return EXIT_OK


def run_prompts_search(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "prompts-search")
    try:
        result = manager.search_prompts(args.query, limit=args.limit)
    except ValueError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID_INPUT
    except PromptStoreError as exc:
        return _fail(logger, f"Searching prompts for {args.query!r}", exc)
    _print_prompts(result, f"No prompts match {args.query!r}.")
    return EXIT_OK


def run_prompt_add(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "prompt-add")
    try:
        document = load_json_object(args.source)
    except ValueError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID_INPUT
    try:
        prompt = manager.add_prompt(document, mirror=bool(args.mirror))
    except PromptStoreError as exc:
        return _fail(logger, f"Adding prompt from {args.source}", exc)
    print_and_log(logger, logging.INFO, f"Prompt added with ID: {prompt.id}")
    return EXIT_OK


def run_prompt_update(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "prompt-update")
    try:
        changes = load_json_object(args.source)
    except ValueError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID_INPUT
    try:
        prompt = manager.update_prompt(args.prompt_id, changes, mirror=bool(args.mirror))
    except PromptStoreError as exc:
        return _fail(logger, f"Updating prompt {args.prompt_id}", exc)
    print_and_log(logger, logging.INFO, f"Updated prompt {prompt.id}")
    return EXIT_OK


def run_prompt_show(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "prompt-show")
    try:
        prompt = manager.get_prompt(args.prompt_id)
    except PromptStoreError as exc:
        return _fail(logger, f"Loading prompt {args.prompt_id}", exc)
    print(json.dumps(prompt.to_record(), indent=2, ensure_ascii=False))
    return EXIT_OK


def run_prompt_delete(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "prompt-delete")
    try:
        removed = manager.delete_prompt(args.prompt_id, mirror=bool(args.mirror))
    except PromptStoreError as exc:
        return _fail(logger, f"Deleting prompt {args.prompt_id}", exc)
    if not removed:
        print_and_log(logger, logging.WARNING, f"Prompt {args.prompt_id} not found")
        return EXIT_NOT_FOUND
    print_and_log(logger, logging.INFO, f"Deleted prompt {args.prompt_id}")
    return EXIT_OK


def run_prompt_render(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "prompt-render")
    try:
        variables = parse_variable_assignments(args.variables)
    except ValueError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID_INPUT
    try:
        result = manager.render_prompt(args.prompt_id, variables)
    except PromptStoreError as exc:
        return _fail(logger, f"Rendering prompt {args.prompt_id}", exc)
    if result.errors:
        for error in result.errors:
            print_and_log(logger, logging.ERROR, error)
        return EXIT_INVALID_INPUT
    print(result.rendered_text)
    return EXIT_OK


def run_index_rebuild(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del args
    manager = _require_manager(manager, "index-rebuild")
    try:
        result = manager.rebuild_index()
    except PromptStoreError as exc:
        return _fail(logger, "Index rebuild", exc)
    print_and_log(
        logger,
        logging.INFO,
        f"Index written to {result.path} with {result.total} prompts",
    )
    _print_skipped(result.skipped)
    return EXIT_OK


def run_backup_create(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del args
    manager = _require_manager(manager, "backup-create")
    try:
        result = manager.create_backup()
    except PromptStoreError as exc:
        return _fail(logger, "Backup", exc)
    print_and_log(
        logger,
        logging.INFO,
        f"Backup {result.timestamp} created with {result.count} prompts at {result.path}",
    )
    _print_skipped(result.skipped)
    return EXIT_OK


def run_backup_list(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del args
    manager = _require_manager(manager, "backup-list")
    try:
        summaries = manager.list_backups()
    except PromptStoreError as exc:
        return _fail(logger, "Listing backups", exc)
    if not summaries:
        print("No backups found.")
        return EXIT_OK
    for summary in summaries:
        count = str(summary.count) if summary.complete else "unknown (incomplete)"
        print(f"{summary.timestamp}\t{count}")
    return EXIT_OK


def run_backup_restore(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "backup-restore")
    try:
        result = manager.restore_backup(
            args.timestamp,
            backup_current=bool(args.safety_backup),
            rebuild_index=bool(args.rebuild_index),
        )
    except PromptStoreError as exc:
        return _fail(logger, f"Restoring backup {args.timestamp}", exc)
    print_and_log(
        logger,
        logging.INFO,
        f"Restored {result.count} prompts from backup {result.timestamp}",
    )
    return EXIT_OK


def run_mirror_export(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del args
    manager = _require_manager(manager, "mirror-export")
    try:
        report = manager.export_to_mirror()
    except PromptStoreError as exc:
        return _fail(logger, "Mirror export", exc)
    print_and_log(
        logger,
        logging.INFO,
        f"Exported {len(report.transferred)} prompts (skipped {len(report.skipped)}, "
        f"failed {len(report.failed)}); safety backup {report.backup_timestamp}",
    )
    for identifier, reason in report.failed:
        print(f" - {identifier}: {reason}")
    return EXIT_FAILURE if report.failed else EXIT_OK


def run_mirror_import(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "mirror-import")
    try:
        report = manager.import_from_mirror(overwrite=bool(args.overwrite))
    except PromptStoreError as exc:
        return _fail(logger, "Mirror import", exc)
    print_and_log(
        logger,
        logging.INFO,
        f"Imported {len(report.transferred)} prompts (skipped {len(report.skipped)}, "
        f"failed {len(report.failed)}); safety backup {report.backup_timestamp}",
    )
    for identifier, reason in report.failed:
        print(f" - {identifier}: {reason}")
    return EXIT_FAILURE if report.failed else EXIT_OK


def run_mirror_sync(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = _require_manager(manager, "mirror-sync")
    try:
        report = manager.sync_with_mirror(prefer=args.prefer)
    except PromptStoreError as exc:
        return _fail(logger, "Mirror sync", exc)
    lines = [
        f"Added to mirror: {len(report.added_to_mirror)}",
        f"Added to files: {len(report.added_to_files)}",
        f"Updated in mirror: {len(report.updated_mirror)}",
        f"Updated in files: {len(report.updated_files)}",
        f"Unchanged: {len(report.unchanged)}",
        f"Safety backup: {report.backup_timestamp}",
    ]
    print("\n".join(lines))
    if report.conflicts:
        print_and_log(
            logger,
            logging.WARNING,
            f"Conflicting prompts left unchanged ({len(report.conflicts)}): "
            f"{', '.join(report.conflicts)}. Re-run with --prefer file|mirror to resolve.",
        )
    for identifier, reason in report.failed:
        print(f" - {identifier}: {reason}")
    return EXIT_FAILURE if report.failed else EXIT_OK


COMMAND_SPECS: dict[str | None, CommandSpec] = {
    "prompts-list": CommandSpec(run_prompts_list),
    "prompts-search": CommandSpec(run_prompts_search),
    "prompt-add": CommandSpec(run_prompt_add),
    "prompt-update": CommandSpec(run_prompt_update),
    "prompt-show": CommandSpec(run_prompt_show),
    "prompt-delete": CommandSpec(run_prompt_delete),
    "prompt-render": CommandSpec(run_prompt_render),
    "index-rebuild": CommandSpec(run_index_rebuild),
    "backup-create": CommandSpec(run_backup_create),
    "backup-list": CommandSpec(run_backup_list),
    "backup-restore": CommandSpec(run_backup_restore),
    "mirror-export": CommandSpec(run_mirror_export),
    "mirror-import": CommandSpec(run_mirror_import),
    "mirror-sync": CommandSpec(run_mirror_sync),
}


__all__ = ["COMMAND_SPECS", "CommandSpec"]
