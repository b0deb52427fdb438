import requests

from src.config.logger_config import logger
from src.config.settings import DEFAULT_EXPORT_TIMEOUT, DEFAULT_EXPORT_URL
from src.documents.errors import DocumentExportError

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; docnav-export/1.0)",
    "Accept": "text/html",
}


class GoogleDocsExportClient:
    """Downloads the HTML export of a shared document.

    Only documents readable without credentials can be exported this way.
    """

    def __init__(
        self,
        export_url: str = DEFAULT_EXPORT_URL,
        timeout: float = DEFAULT_EXPORT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.export_url = export_url
        self.timeout = timeout
        self.session = session

    def fetch_html(self, document_id: str) -> str:
        url = self.export_url.format(document_id=document_id)
        getter = self.session.get if self.session is not None else requests.get
        try:
            resp = getter(url, headers=DEFAULT_HEADERS, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Export request failed for document {}: {}", document_id, exc)
            raise DocumentExportError(document_id, str(exc)) from exc

        # The export endpoint serves UTF-8 but does not always say so.
        resp.encoding = "utf-8"
        return resp.text
