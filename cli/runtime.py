"""Runtime boot helpers for the prompt store CLI.

Updates:
  v0.1.1 - 2026-10-16 - Apply the configured log level after file-based setup.
  v0.1.0 - 2026-09-29 - Extract logging configuration helpers.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

DEFAULT_LOGGING_CONFIG = Path("config/logging.conf")


def setup_logging(logging_conf_path: Path | None) -> None:
    """Configure logging using *logging_conf_path* when available."""
    path = logging_conf_path or DEFAULT_LOGGING_CONFIG
    if path.exists():
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
            return
        except (OSError, ValueError, KeyError, RuntimeError) as exc:  # pragma: no cover
            print(f"Ignoring unusable logging configuration {path}: {exc}")
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def apply_log_level(level_name: str) -> None:
    """Set the package logger level from validated settings."""
    logging.getLogger("prompt_store").setLevel(level_name)


__all__ = ["apply_log_level", "setup_logging"]
