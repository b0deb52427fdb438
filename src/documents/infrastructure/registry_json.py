import json
from pathlib import Path

from src.config.logger_config import logger
from src.documents.domain.models import DocumentRegistry, DocumentRegistryEntry

REQUIRED_FIELDS = ("documentId", "webRoute", "name")


def load_registry(path: str | Path) -> DocumentRegistry:
    """Read the registry file: a JSON list of {documentId, webRoute, name}."""
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Document registry {path} is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, list) or not payload:
        raise ValueError(f"Document registry {path} must be a non-empty list; at least one document must be configured")

    entries: list[DocumentRegistryEntry] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise ValueError(f"Document registry entry #{index} must be an object")
        missing = [key for key in REQUIRED_FIELDS if not isinstance(item.get(key), str) or not item[key].strip()]
        if missing:
            raise ValueError(f"Document registry entry #{index} is missing {', '.join(missing)}")
        entries.append(
            DocumentRegistryEntry(
                document_id=item["documentId"].strip(),
                web_route=item["webRoute"].strip(),
                name=item["name"].strip(),
            )
        )

    registry = DocumentRegistry(entries)
    logger.info("Document registry loaded from {}: {} documents", str(path), len(registry))
    return registry
