"""Application entry point for the prompt store CLI.

Updates:
  v0.2.0 - 2026-10-16 - Dispatch mirror transfer commands through COMMAND_SPECS.
  v0.1.0 - 2026-09-29 - Wire settings, logging, and the prompt manager into the CLI.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cli.commands import COMMAND_SPECS
from cli.parser import build_parser, parse_args
from cli.runtime import apply_log_level, setup_logging
from cli.settings_summary import print_settings_summary
from config import SettingsError, load_settings
from core import PromptStoreError, build_prompt_manager

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Sequence

    from config import PromptStoreSettings
    from core.prompt_manager import PromptManager


def _initialise_manager(
    settings: PromptStoreSettings,
    logger: logging.Logger,
) -> PromptManager | None:
    try:
        return build_prompt_manager(settings)
    except PromptStoreError as exc:
        logger.error("Failed to initialise services: %s", exc)
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, services, and CLI commands."""
    args = parse_args(argv)
    setup_logging(args.logging_config)

    logger = logging.getLogger("prompt_store.main")
    try:
        settings = load_settings()
    except SettingsError as exc:
        cause = exc.__cause__
        logger.error("Failed to load settings: %s%s", exc, f" ({cause})" if cause else "")
        return 2
    apply_log_level(settings.log_level)

    if args.print_settings:
        print_settings_summary(settings)
        return 0

    command = getattr(args, "command", None)
    spec = COMMAND_SPECS.get(command)
    if spec is None:
        build_parser().print_help()
        return 0

    manager = None
    if spec.requires_manager:
        manager = _initialise_manager(settings, logger)
        if manager is None:
            return 3

    try:
        return spec.handler(manager, args, logger)
    finally:
        if manager is not None:
            manager.close()


if __name__ == "__main__":
    raise SystemExit(main())
