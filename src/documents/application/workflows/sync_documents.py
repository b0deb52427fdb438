from dataclasses import dataclass
from datetime import datetime, timezone
from time import perf_counter
from typing import Sequence

from tqdm import tqdm

from src.config.logger_config import logger
from src.documents.application.documents_service import DocumentsService
from src.documents.application.ports import FileStoragePort

DOCUMENTS_CONTAINER = "documents"


@dataclass(frozen=True)
class SyncSummary:
    total_documents: int
    synced_count: int
    not_found_count: int
    failed_count: int
    failed_documents: tuple[str, ...]
    duration_ms: int


class SyncDocumentsWorkflow:
    """Processes registered documents and caches the HTML by document name."""

    def __init__(self, service: DocumentsService, storage: FileStoragePort) -> None:
        self.service = service
        self.storage = storage

    def run(self, document_names: Sequence[str] | None = None, show_progress: bool = True) -> SyncSummary:
        started = perf_counter()
        names = list(document_names) if document_names is not None else [e.name for e in self.service.registry]
        logger.info("Document sync started: documents={}", len(names))

        synced_count = 0
        not_found_count = 0
        failed: list[str] = []
        for name in tqdm(names, total=len(names), desc="Sync documents", unit="doc", disable=not show_progress):
            try:
                synced = self.sync_one(name)
            except Exception as exc:
                # One broken export must not stop the rest of the batch.
                logger.error("Error during sync of document {}: {}: {}", name, type(exc).__name__, exc)
                failed.append(name)
                continue
            if synced:
                synced_count += 1
            else:
                not_found_count += 1

        summary = SyncSummary(
            total_documents=len(names),
            synced_count=synced_count,
            not_found_count=not_found_count,
            failed_count=len(failed),
            failed_documents=tuple(failed),
            duration_ms=int((perf_counter() - started) * 1000),
        )
        logger.info(
            "Document sync completed: total={}, synced={}, not_found={}, failed={}, duration_ms={}",
            summary.total_documents,
            summary.synced_count,
            summary.not_found_count,
            summary.failed_count,
            summary.duration_ms,
        )
        return summary

    def sync_one(self, document_name: str) -> bool:
        logger.trace("Starting synchronization of document {} to storage", document_name)
        document = self.service.get_document_as_html(document_name)
        if document is None:
            logger.warning("Document {} was not found during sync", document_name)
            return False

        self.storage.upload_file(
            DOCUMENTS_CONTAINER,
            document_name,
            document.content,
            document.content_type,
            {
                "source_document_id": document.id,
                "cached_at": datetime.now(timezone.utc).isoformat(),
            },
        )
        logger.debug("Completed synchronization of document {} to storage", document_name)
        return True
