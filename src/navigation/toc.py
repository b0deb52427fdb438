from html import escape
from typing import Sequence

from src.navigation.config import ACTIVE_HEADING_TOLERANCE, TOC_ACTIVE_MARGIN
from src.navigation.dom import Element, Page

ACTIVE_CLASS = "active"
TOC_LINK_SELECTOR = ".toc-link"
TOC_SCROLL_CONTAINER = ".toc-sticky"


def assign_missing_ids(headings: Sequence[Element]) -> None:
    for index, heading in enumerate(headings):
        if not heading.id:
            heading.id = f"heading-{index}"


def render_toc(headings: Sequence[Element]) -> str:
    items = []
    for heading in headings:
        level = heading.tag_name
        text = escape(" ".join(heading.text_content.split()), quote=False)
        target = escape(heading.id)
        items.append(
            f'<li class="toc-item-{level}">'
            f'<a href="#{target}" class="toc-link" data-target="{target}">{text}</a>'
            "</li>"
        )
    return f'<ul class="toc-list">{"".join(items)}</ul>'


def find_toc_link(toc_list: Element, target_id: str) -> Element | None:
    for link in toc_list.query_selector_all(TOC_LINK_SELECTOR):
        if link.data("target") == target_id:
            return link
    return None


def find_active_heading(headings: Sequence[Element], content_rect) -> Element | None:
    """Pick the heading nearest the top of the visible content.

    A heading within the tolerance window below the top (or still partly
    visible above it) wins; otherwise the closest heading below the top.
    """
    active = None
    min_distance = float("inf")
    for heading in headings:
        rect = heading.get_bounding_client_rect()
        distance = rect.top - content_rect.top
        if -rect.height <= distance <= ACTIVE_HEADING_TOLERANCE and abs(distance) < min_distance:
            min_distance = abs(distance)
            active = heading

    if active is None:
        for heading in headings:
            distance = heading.get_bounding_client_rect().top - content_rect.top
            if 0 <= distance < min_distance:
                min_distance = distance
                active = heading
    return active


def scroll_toc_to_link(link: Element | None) -> None:
    if link is None:
        return
    container = link.closest(TOC_SCROLL_CONTAINER)
    if container is None:
        return
    link_top = link.get_bounding_client_rect().top - container.get_bounding_client_rect().top + container.scroll_top
    container.scroll_to(max(0, link_top - TOC_ACTIVE_MARGIN), "smooth")


class ScrollSpy:
    """Keeps exactly one TOC link marked active as the content scrolls."""

    def __init__(self, page: Page, content: Element, toc_list: Element, headings: Sequence[Element]) -> None:
        self.page = page
        self.content = content
        self.toc_list = toc_list
        self.headings = list(headings)
        self.current: Element | None = None
        self._ticking = False

    def attach(self, signal) -> None:
        self.content.add_event_listener("scroll", self._on_scroll, signal=signal)
        self.update()

    def _on_scroll(self, event) -> None:
        if self._ticking:
            return
        self._ticking = True
        self.page.request_animation_frame(self._on_frame)

    def _on_frame(self) -> None:
        self._ticking = False
        self.update()

    def update(self) -> None:
        heading = find_active_heading(self.headings, self.content.get_bounding_client_rect())
        if heading is None:
            return
        link = find_toc_link(self.toc_list, heading.id)
        if link is not None and link is not self.current:
            self.set_active(link)

    def set_active(self, link: Element | None) -> None:
        for active in self.toc_list.query_selector_all(f"{TOC_LINK_SELECTOR}.{ACTIVE_CLASS}"):
            if active is not link:
                active.class_list.remove(ACTIVE_CLASS)
        if link is not None:
            link.class_list.add(ACTIVE_CLASS)
            scroll_toc_to_link(link)
        self.current = link
