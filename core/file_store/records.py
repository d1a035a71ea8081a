"""One-JSON-file-per-prompt record store.

Updates:
  v0.4.0 - 2026-10-18 - Skip reserved artifact names in any case when scanning.
  v0.3.0 - 2026-10-09 - Route writes through the shared atomic document writer.
  v0.2.0 - 2026-10-02 - Expose file-level document scans for index and backup builders.
  v0.1.0 - 2026-09-22 - Initial put/get/list/delete implementation.
"""

from __future__ import annotations

from pathlib import Path

from models.prompt_model import Prompt

from ..exceptions import PromptStorageError, RecordParseError
from .base import (
    RECORD_SUFFIX,
    RecordDocument,
    RecordLookup,
    ScanResult,
    SkippedRecord,
    SkipReason,
    identifier_from_path,
    is_reserved_stem,
    logger,
    read_json_document,
    validate_identifier,
    write_json_document,
)


class PromptFileStore:
    """Persist prompts as ``<identifier>.json`` documents under one directory."""

    def __init__(self, records_dir: str | Path) -> None:
        self._records_dir = Path(records_dir)

    @property
    def records_dir(self) -> Path:
        return self._records_dir

    def path_for(self, identifier: str) -> Path:
        """Return the file path that stores *identifier*."""
        return self._records_dir / f"{validate_identifier(identifier)}{RECORD_SUFFIX}"

    def exists(self, identifier: str) -> bool:
        return self.path_for(identifier).is_file()

    # Record CRUD -------------------------------------------------------- #

    def put(self, identifier: str, prompt: Prompt) -> Path:
        """Write *prompt* under *identifier*, overwriting any previous record."""
        path = self.path_for(identifier)
        record = prompt.to_record()
        record["id"] = identifier
        write_json_document(path, record)
        logger.debug("Stored prompt %s at %s", identifier, path)
        return path

    def get(self, identifier: str) -> RecordLookup:
        """Return the stored prompt, or a not-found / parse-failure lookup."""
        path = self.path_for(identifier)
        try:
            document = read_json_document(path)
        except FileNotFoundError:
            return RecordLookup.not_found(identifier)
        except RecordParseError as exc:
            logger.warning("Prompt %s could not be parsed: %s", identifier, exc)
            return RecordLookup.parse_failure(identifier, str(exc))
        try:
            prompt = Prompt.from_record(document, identifier=identifier)
        except ValueError as exc:
            logger.warning("Prompt %s is not a valid record: %s", identifier, exc)
            return RecordLookup.parse_failure(identifier, str(exc))
        return RecordLookup.hit(identifier, prompt)

    def list(self) -> ScanResult[Prompt]:
        """Return every prompt that parses; failures are reported, never raised."""
        documents = self.scan_documents()
        result: ScanResult[Prompt] = ScanResult(skipped=list(documents.skipped))
        for document in documents.items:
            try:
                prompt = Prompt.from_record(document.data, identifier=document.identifier)
            except ValueError as exc:
                logger.warning("Skipping prompt %s: %s", document.identifier, exc)
                result.skipped.append(
                    SkippedRecord(document.identifier, str(exc), SkipReason.PARSE)
                )
                continue
            result.items.append(prompt)
        return result

    def delete(self, identifier: str) -> bool:
        """Remove the record file, returning whether one was present."""
        path = self.path_for(identifier)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise PromptStorageError(f"Unable to delete prompt {identifier}") from exc
        logger.debug("Deleted prompt %s", identifier)
        return True

    # File-level scanning ------------------------------------------------ #

    def record_paths(self) -> list[Path]:
        """Return record files in name order, excluding index and manifest artifacts."""
        if not self._records_dir.is_dir():
            return []
        try:
            candidates = sorted(self._records_dir.glob(f"*{RECORD_SUFFIX}"))
        except OSError as exc:
            raise PromptStorageError(f"Unable to scan {self._records_dir}") from exc
        return [
            path
            for path in candidates
            if not is_reserved_stem(identifier_from_path(path)) and path.is_file()
        ]

    def scan_documents(self) -> ScanResult[RecordDocument]:
        """Parse every record file independently; one corrupt file never aborts the scan."""
        result: ScanResult[RecordDocument] = ScanResult()
        for path in self.record_paths():
            identifier = identifier_from_path(path)
            try:
                data = read_json_document(path)
            except FileNotFoundError:
                # Removed between listing and reading.
                continue
            except RecordParseError as exc:
                logger.warning("Skipping %s: %s", path.name, exc)
                result.skipped.append(SkippedRecord(identifier, str(exc), SkipReason.PARSE))
                continue
            except PromptStorageError as exc:
                logger.warning("Skipping unreadable %s: %s", path.name, exc)
                result.skipped.append(SkippedRecord(identifier, str(exc), SkipReason.IO))
                continue
            result.items.append(RecordDocument(identifier=identifier, path=path, data=data))
        if result.skipped:
            logger.info(
                "Scanned %s: %d readable, %d skipped",
                self._records_dir,
                len(result.items),
                len(result.skipped),
            )
        return result


__all__ = ["PromptFileStore"]
