from html import escape

from src.config.logger_config import logger
from src.documents.application.documents_service import DocumentsService
from src.documents.errors import DocumentExportError
from src.navigation.dom import Page
from src.navigation.navigator import DocumentNavigator


class DocumentSlideoverHandler:
    """Loads the document behind an internal link into the slideover panel.

    Meant to be passed (bound ``handle_link_clicked``) as the navigator's
    internal-link callback.
    """

    def __init__(
        self,
        page: Page,
        navigator: DocumentNavigator,
        service: DocumentsService,
        content_id: str,
    ) -> None:
        self.page = page
        self.navigator = navigator
        self.service = service
        self.content_id = content_id
        self.title: str | None = None
        self.content: str | None = None
        self.is_loading = False

    def handle_link_clicked(self, pathname: str) -> None:
        self.is_loading = True
        route = pathname.lstrip("/")
        entry = self.service.registry.find_by_route(route)
        if entry is None:
            logger.warning("No document registered for route: {}", route)
            self._show(f"<p>Document not found for route: {escape(pathname)}</p>")
            return

        self.title = document_title(entry.name)
        try:
            document = self.service.get_document_as_html(entry.name)
        except DocumentExportError as exc:
            self._show(f"<p>Failed to load document: {escape(exc.reason)}</p>")
            return

        if document is None:
            self._show(f"<p>Document not found for route: {escape(pathname)}</p>")
            return
        self._show(document.content)

    def _show(self, html: str) -> None:
        self.is_loading = False
        self.content = html
        container = self.page.get_element_by_id(self.content_id)
        if container is None:
            logger.warning("Slideover content element not found: {}", self.content_id)
            return
        container.inner_html = html
        self.navigator.initialize_slideover_content(self.content_id)


def document_title(document_name: str) -> str:
    """Title-case a document name: tournament-rules -> Tournament Rules."""
    return " ".join(word[:1].upper() + word[1:] for word in document_name.split("-") if word)
