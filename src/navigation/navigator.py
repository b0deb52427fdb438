from typing import Callable
from urllib.parse import urljoin, urlsplit

from src.config.logger_config import logger
from src.navigation.anchors import build_anchor_lookup, resolve_anchor
from src.navigation.config import (
    CONTENT_SCROLL_OFFSET,
    MOBILE_TOC_CLOSE_DELAY_MS,
    NAVBAR_HEIGHT,
    WINDOW_SCROLL_OFFSET,
    NavigationConfig,
)
from src.navigation.dom import AbortController, AbortSignal, Element, Event, KeyboardEvent, MouseEvent, Page, url_origin
from src.navigation.toc import (
    ACTIVE_CLASS,
    TOC_LINK_SELECTOR,
    ScrollSpy,
    assign_missing_ids,
    find_toc_link,
    render_toc,
    scroll_toc_to_link,
)

InternalLinkCallback = Callable[[str], None]

ALL_HEADINGS = "h1, h2, h3, h4, h5, h6"
EXTERNAL_PROTOCOLS = ("mailto:", "tel:")


class DocumentNavigator:
    """Table of contents, scroll-spy and link handling for one rendered document.

    One navigator is owned per document on the page. ``initialize`` may be
    called again at any time; it disposes the previous wiring first.
    """

    def __init__(self, page: Page) -> None:
        self.page = page
        self.config: NavigationConfig | None = None
        self.anchor_lookup: dict[str, str] = {}
        self.scroll_spy: ScrollSpy | None = None
        self._on_internal_link: InternalLinkCallback | None = None
        self._controller: AbortController | None = None
        self._slideover_controllers: dict[str, AbortController] = {}
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self, on_internal_link: InternalLinkCallback | None, config: NavigationConfig) -> bool:
        if self._initialized:
            self.dispose()

        content = self.page.get_element_by_id(config.content_id)
        if content is None:
            logger.error("[DocumentNavigator] Content element not found: {}", config.content_id)
            return False

        self.config = config
        self._on_internal_link = on_internal_link
        self._controller = AbortController()
        signal = self._controller.signal

        headings = content.query_selector_all(config.heading_levels)
        assign_missing_ids(headings)
        # Must be complete before any click listener can resolve a fragment.
        self.anchor_lookup = build_anchor_lookup(headings)

        toc_list = self.page.get_element_by_id(config.toc_list_id)
        if toc_list is not None and headings:
            toc_html = render_toc(headings)
            toc_list.inner_html = toc_html
            toc_mobile_list = self.page.get_element_by_id(config.toc_mobile_list_id)
            if toc_mobile_list is not None:
                toc_mobile_list.inner_html = toc_html

            self.scroll_spy = ScrollSpy(self.page, content, toc_list, headings)
            self._setup_desktop_toc(content, toc_list, signal)
            self._setup_mobile_modal(content, toc_mobile_list, signal)
            self.scroll_spy.attach(signal)
        else:
            logger.debug("[DocumentNavigator] TOC skipped: toc_list={}, headings={}", toc_list is not None, len(headings))

        self._setup_slideover(signal)
        # Internal links are intercepted even without headings.
        self._intercept_links(content, self.anchor_lookup, signal, update_history=True)

        self._initialized = True
        logger.debug("[DocumentNavigator] Initialized: content={}, headings={}", config.content_id, len(headings))
        return True

    def scroll_to_hash(self, content_id: str, toc_list_id: str | None) -> None:
        hash_value = self.page.location.hash
        if not hash_value:
            return

        target_id = resolve_anchor(hash_value[1:], self.anchor_lookup)
        content = self.page.get_element_by_id(content_id)
        if content is None:
            return
        target = self._find_target(content, target_id, search_page=True)
        if target is None:
            return

        self._scroll_to_target(content, target)

        toc_list = self.page.get_element_by_id(toc_list_id)
        if toc_list is None:
            return
        link = find_toc_link(toc_list, target.id)
        if self.scroll_spy is not None and self.scroll_spy.toc_list is toc_list:
            self.scroll_spy.set_active(link)
            return
        for active in toc_list.query_selector_all(f"{TOC_LINK_SELECTOR}.{ACTIVE_CLASS}"):
            active.class_list.remove(ACTIVE_CLASS)
        if link is not None:
            link.class_list.add(ACTIVE_CLASS)
            scroll_toc_to_link(link)

    def open_slideover(self, slideover_id: str) -> None:
        slideover = self.page.get_element_by_id(slideover_id)
        if slideover is not None:
            self._open_panel(slideover)

    def close_slideover(self, slideover_id: str) -> None:
        slideover = self.page.get_element_by_id(slideover_id)
        if slideover is not None:
            self._close_panel(slideover)

    def initialize_slideover_content(self, container_id: str) -> bool:
        """Wire link handling for content freshly injected into the slideover.

        Listeners from a previous call for the same container are removed first.
        """
        container = self.page.get_element_by_id(container_id)
        if container is None:
            logger.warning("[DocumentNavigator] Slideover content element not found: {}", container_id)
            return False

        previous = self._slideover_controllers.pop(container_id, None)
        if previous is not None:
            previous.abort()

        controller = AbortController()
        self._slideover_controllers[container_id] = controller
        lookup = build_anchor_lookup(container.query_selector_all(ALL_HEADINGS))
        self._intercept_links(container, lookup, controller.signal, update_history=False)
        return True

    def dispose(self) -> None:
        if self._controller is not None:
            self._controller.abort()
            self._controller = None
        for controller in self._slideover_controllers.values():
            controller.abort()
        self._slideover_controllers.clear()

        self._on_internal_link = None
        self.scroll_spy = None
        self.anchor_lookup = {}
        self._initialized = False

    # -- panels -------------------------------------------------------------

    def _open_panel(self, panel: Element) -> None:
        panel.class_list.add(ACTIVE_CLASS)
        self.page.body.style["overflow"] = "hidden"

    def _close_panel(self, panel: Element) -> None:
        panel.class_list.remove(ACTIVE_CLASS)
        self.page.body.style["overflow"] = ""

    def _bind_close(self, panel: Element, close_button: Element, overlay: Element, signal: AbortSignal) -> None:
        def on_close(event: Event) -> None:
            self._close_panel(panel)

        close_button.add_event_listener("click", on_close, signal=signal)
        overlay.add_event_listener("click", on_close, signal=signal)

        def on_keydown(event: KeyboardEvent) -> None:
            if event.key == "Escape" and panel.class_list.contains(ACTIVE_CLASS):
                self._close_panel(panel)

        self.page.add_event_listener("keydown", on_keydown, signal=signal)

    def _setup_mobile_modal(self, content: Element, toc_mobile_list: Element | None, signal: AbortSignal) -> None:
        config = self.config
        button = self.page.get_element_by_id(config.toc_mobile_button_id)
        modal = self.page.get_element_by_id(config.toc_modal_id)
        overlay = self.page.get_element_by_id(config.toc_modal_overlay_id)
        close_button = self.page.get_element_by_id(config.toc_modal_close_id)
        if button is None or modal is None or overlay is None or close_button is None:
            return

        button.add_event_listener("click", lambda event: self._open_panel(modal), signal=signal)
        self._bind_close(modal, close_button, overlay, signal)

        if toc_mobile_list is None:
            return
        for link in toc_mobile_list.query_selector_all(TOC_LINK_SELECTOR):
            link.add_event_listener("click", self._mobile_toc_handler(content, link, modal, signal), signal=signal)

    def _mobile_toc_handler(self, content: Element, link: Element, modal: Element, signal: AbortSignal):
        def on_click(event: Event) -> None:
            event.prevent_default()
            target = content.get_element_by_id(link.data("target"))
            if target is None:
                return
            self._close_panel(modal)

            def scroll_after_close() -> None:
                top = target.get_bounding_client_rect().top + self.page.scroll_y - NAVBAR_HEIGHT
                self.page.scroll_to(top, "smooth")
                if self.scroll_spy is not None:
                    self.scroll_spy.set_active(find_toc_link(self.scroll_spy.toc_list, target.id))

            # Let the modal finish collapsing before measuring the target.
            handle = self.page.set_timeout(scroll_after_close, MOBILE_TOC_CLOSE_DELAY_MS)
            signal.on_abort(lambda: self.page.clear_timeout(handle))

        return on_click

    def _setup_slideover(self, signal: AbortSignal) -> None:
        config = self.config
        slideover = self.page.get_element_by_id(config.slideover_id)
        overlay = self.page.get_element_by_id(config.slideover_overlay_id)
        close_button = self.page.get_element_by_id(config.slideover_close_id)
        if slideover is None or overlay is None or close_button is None:
            return
        self._bind_close(slideover, close_button, overlay, signal)

    # -- table of contents --------------------------------------------------

    def _setup_desktop_toc(self, content: Element, toc_list: Element, signal: AbortSignal) -> None:
        for link in toc_list.query_selector_all(TOC_LINK_SELECTOR):
            link.add_event_listener("click", self._desktop_toc_handler(content, link), signal=signal)

    def _desktop_toc_handler(self, content: Element, link: Element):
        def on_click(event: Event) -> None:
            event.prevent_default()
            target = content.get_element_by_id(link.data("target"))
            if target is None:
                return
            self._scroll_content(content, target)
            if self.scroll_spy is not None:
                self.scroll_spy.set_active(link)

        return on_click

    # -- links --------------------------------------------------------------

    def _intercept_links(
        self,
        container: Element,
        lookup: dict[str, str],
        signal: AbortSignal,
        update_history: bool,
    ) -> None:
        for link in container.query_selector_all("a[href]"):
            link.add_event_listener(
                "click",
                self._link_handler(container, link, lookup, update_history),
                signal=signal,
            )

    def _link_handler(self, container: Element, link: Element, lookup: dict[str, str], update_history: bool):
        def on_click(event: MouseEvent) -> None:
            href = link.get_attribute("href")
            if not href or href == "#":
                return
            if event.ctrl_key or event.meta_key:
                return

            if href.startswith("#"):
                event.prevent_default()
                self._navigate_to_anchor(container, href[1:], lookup, update_history)
                return

            location = self.page.location
            try:
                absolute = urljoin(location.href, href)
                parts = urlsplit(absolute)
            except ValueError:
                # Malformed URLs are left to the browser.
                return

            if f"{parts.scheme}:" in EXTERNAL_PROTOCOLS or url_origin(absolute) != location.origin:
                return

            if (parts.path or "/") == location.pathname and parts.fragment:
                event.prevent_default()
                self._navigate_to_anchor(container, parts.fragment, lookup, update_history)
                return

            callback = self._on_internal_link
            if callback is None:
                return
            event.prevent_default()
            slideover = self.page.get_element_by_id(self.config.slideover_id) if self.config else None
            if slideover is not None:
                self._open_panel(slideover)
            path = parts.path[1:] if parts.path.startswith("/") else parts.path
            callback(path)

        return on_click

    def _navigate_to_anchor(self, container: Element, fragment: str, lookup: dict[str, str], update_history: bool) -> None:
        resolved_id = resolve_anchor(fragment, lookup)
        # Slideover content only scrolls to its own headings.
        target = self._find_target(container, resolved_id, search_page=update_history)
        if target is None:
            return

        self._scroll_to_target(container, target)

        if update_history:
            # replace_state keeps client-side routing out of it.
            new_hash = f"#{resolved_id}"
            if self.page.location.hash != new_hash:
                self.page.history.replace_state(None, "", new_hash)

    def _find_target(self, container: Element, element_id: str, search_page: bool) -> Element | None:
        target = container.get_element_by_id(element_id)
        if target is None and search_page:
            target = self.page.get_element_by_id(element_id)
        return target

    def _scroll_to_target(self, container: Element, target: Element) -> None:
        if container.scroll_height > container.client_height:
            self._scroll_content(container, target)
        else:
            top = target.get_bounding_client_rect().top + self.page.scroll_y - NAVBAR_HEIGHT - WINDOW_SCROLL_OFFSET
            self.page.scroll_to(top, "smooth")

    @staticmethod
    def _scroll_content(container: Element, target: Element) -> None:
        container_rect = container.get_bounding_client_rect()
        target_rect = target.get_bounding_client_rect()
        top = container.scroll_top + (target_rect.top - container_rect.top) - CONTENT_SCROLL_OFFSET
        container.scroll_to(top, "smooth")
