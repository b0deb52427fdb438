# Runtime configuration, read from the environment (and a local .env file).

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_REGISTRY_PATH = "config/documents.json"
DEFAULT_EXPORT_URL = "https://docs.google.com/document/d/{document_id}/export?format=html"
DEFAULT_EXPORT_TIMEOUT = 30.0
DEFAULT_STORAGE_ROOT = "artifacts/documents"


@dataclass(frozen=True)
class Settings:
    registry_path: str = DEFAULT_REGISTRY_PATH
    export_url: str = DEFAULT_EXPORT_URL
    export_timeout: float = DEFAULT_EXPORT_TIMEOUT
    storage_root: str = DEFAULT_STORAGE_ROOT


def load_settings() -> Settings:
    timeout_raw = os.getenv("DOCUMENT_EXPORT_TIMEOUT")
    try:
        export_timeout = float(timeout_raw) if timeout_raw else DEFAULT_EXPORT_TIMEOUT
    except ValueError:
        raise ValueError(f"DOCUMENT_EXPORT_TIMEOUT must be a number, got {timeout_raw!r}") from None

    return Settings(
        registry_path=os.getenv("DOCUMENT_REGISTRY_PATH", DEFAULT_REGISTRY_PATH),
        export_url=os.getenv("DOCUMENT_EXPORT_URL", DEFAULT_EXPORT_URL),
        export_timeout=export_timeout,
        storage_root=os.getenv("DOCUMENT_STORAGE_ROOT", DEFAULT_STORAGE_ROOT),
    )
