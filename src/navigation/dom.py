"""Headless browser model the navigator runs against.

A ``Page`` wraps a BeautifulSoup tree and plays the roles of ``document`` and
``window``: element lookup, location and history, window scrolling, animation
frames, timers and document-level key events. Layout is not computed; hosts
(and tests) assign each element's bounding rect and scroll metrics directly.

Timers and animation frames never fire on their own. Call
``flush_animation_frames`` and ``run_timers`` to advance them.
"""

from dataclasses import dataclass
from typing import Callable
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

Listener = Callable[["Event"], None]


class AbortSignal:
    def __init__(self) -> None:
        self.aborted = False
        self._callbacks: list[Callable[[], None]] = []

    def on_abort(self, callback: Callable[[], None]) -> None:
        if self.aborted:
            callback()
            return
        self._callbacks.append(callback)

    def _abort(self) -> None:
        if self.aborted:
            return
        self.aborted = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()


class AbortController:
    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self) -> None:
        self.signal._abort()


class Event:
    def __init__(self, type: str) -> None:
        self.type = type
        self.default_prevented = False
        self.target: "EventTarget | None" = None

    def prevent_default(self) -> None:
        self.default_prevented = True


class MouseEvent(Event):
    def __init__(self, type: str = "click", ctrl_key: bool = False, meta_key: bool = False) -> None:
        super().__init__(type)
        self.ctrl_key = ctrl_key
        self.meta_key = meta_key


class KeyboardEvent(Event):
    def __init__(self, key: str, type: str = "keydown") -> None:
        super().__init__(type)
        self.key = key


class EventTarget:
    def __init__(self) -> None:
        self._listeners: list[tuple[str, Listener]] = []

    def add_event_listener(self, type: str, listener: Listener, signal: AbortSignal | None = None) -> None:
        if signal is not None and signal.aborted:
            return
        registration = (type, listener)
        self._listeners.append(registration)
        if signal is not None:
            signal.on_abort(lambda: self._discard(registration))

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        self._discard((type, listener))

    def listener_count(self, type: str) -> int:
        return sum(1 for registered, _ in self._listeners if registered == type)

    def dispatch_event(self, event: Event) -> bool:
        """Run listeners in registration order; False if default was prevented."""
        event.target = self
        for registered, listener in list(self._listeners):
            if registered == event.type:
                listener(event)
        return not event.default_prevented

    def _discard(self, registration: tuple[str, Listener]) -> None:
        if registration in self._listeners:
            self._listeners.remove(registration)


@dataclass
class Rect:
    top: float = 0.0
    height: float = 0.0

    @property
    def bottom(self) -> float:
        return self.top + self.height


class ClassList:
    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def _values(self) -> list[str]:
        value = self._tag.get("class") or []
        if isinstance(value, str):
            value = value.split()
        return list(value)

    def contains(self, name: str) -> bool:
        return name in self._values()

    def add(self, name: str) -> None:
        values = self._values()
        if name not in values:
            values.append(name)
            self._tag["class"] = values

    def remove(self, name: str) -> None:
        values = [value for value in self._values() if value != name]
        if values:
            self._tag["class"] = values
        elif "class" in self._tag.attrs:
            del self._tag["class"]


class Element(EventTarget):
    def __init__(self, page: "Page", tag: Tag) -> None:
        super().__init__()
        self.page = page
        self.tag = tag
        self.class_list = ClassList(tag)
        self.style: dict[str, str] = {}
        self.layout = Rect()
        self.scroll_top = 0.0
        self.scroll_height = 0.0
        self.client_height = 0.0
        self.scroll_calls: list[tuple[float, str]] = []

    def __repr__(self) -> str:
        return f"<Element {self.tag_name} id={self.id!r}>"

    @property
    def tag_name(self) -> str:
        return self.tag.name.lower()

    @property
    def id(self) -> str:
        return self.tag.get("id") or ""

    @id.setter
    def id(self, value: str) -> None:
        self.tag["id"] = value

    @property
    def text_content(self) -> str:
        return self.tag.get_text()

    def get_attribute(self, name: str) -> str | None:
        value = self.tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def set_attribute(self, name: str, value: str) -> None:
        self.tag[name] = value

    def data(self, name: str) -> str | None:
        return self.get_attribute(f"data-{name}")

    @property
    def inner_html(self) -> str:
        return self.tag.decode_contents()

    @inner_html.setter
    def inner_html(self, markup: str) -> None:
        for child in self.tag.find_all(True, recursive=False):
            self.page.forget(child)
        self.tag.clear()
        fragment = BeautifulSoup(markup, "html.parser")
        for node in list(fragment.contents):
            self.tag.append(node.extract())

    def query_selector_all(self, selector: str) -> list["Element"]:
        return [self.page.wrap(tag) for tag in self.tag.select(selector)]

    def query_selector(self, selector: str) -> "Element | None":
        tag = self.tag.select_one(selector)
        return self.page.wrap(tag) if tag is not None else None

    def get_element_by_id(self, element_id: str | None) -> "Element | None":
        """Find a descendant by id, ignoring matches elsewhere on the page."""
        if not element_id:
            return None
        tag = self.tag.find(id=element_id)
        return self.page.wrap(tag) if tag is not None else None

    def closest(self, selector: str) -> "Element | None":
        tag = self.tag.css.closest(selector)
        return self.page.wrap(tag) if tag is not None else None

    def get_bounding_client_rect(self) -> Rect:
        return self.layout

    def scroll_to(self, top: float, behavior: str = "auto") -> None:
        self.scroll_top = top
        self.scroll_calls.append((top, behavior))

    def click(self, ctrl_key: bool = False, meta_key: bool = False) -> MouseEvent:
        """Dispatch a click; unprevented link clicks fall through to the page."""
        event = MouseEvent("click", ctrl_key=ctrl_key, meta_key=meta_key)
        self.dispatch_event(event)
        if not event.default_prevented and self.tag_name == "a":
            self.page.follow_link(self, new_tab=ctrl_key or meta_key)
        return event


class Location:
    def __init__(self, href: str) -> None:
        self.href = href

    @property
    def protocol(self) -> str:
        return f"{urlsplit(self.href).scheme}:"

    @property
    def origin(self) -> str:
        return url_origin(self.href)

    @property
    def pathname(self) -> str:
        return urlsplit(self.href).path or "/"

    @property
    def hash(self) -> str:
        fragment = urlsplit(self.href).fragment
        return f"#{fragment}" if fragment else ""


class History:
    def __init__(self, page: "Page") -> None:
        self._page = page
        self.entries: list[str] = []

    def replace_state(self, state: object, title: str, url: str) -> None:
        """Rewrite the current URL in place; no navigation happens."""
        new_href = urljoin(self._page.location.href, url)
        self._page.location.href = new_href
        self.entries.append(new_href)


class Page(EventTarget):
    def __init__(self, html: str = "", url: str = "http://localhost/") -> None:
        super().__init__()
        self.soup = BeautifulSoup(html or "<body></body>", "lxml")
        if self.soup.body is None:
            self.soup.append(self.soup.new_tag("body"))
        self.location = Location(url)
        self.history = History(self)
        self.navigations: list[str] = []
        self.opened_tabs: list[str] = []
        self.scroll_y = 0.0
        self.scroll_calls: list[tuple[float, str]] = []
        self._elements: dict[int, Element] = {}
        self._frames: list[Callable[[], None]] = []
        self._timers: list[tuple[float, int, Callable[[], None]]] = []
        self._timer_seq = 0

    def wrap(self, tag: Tag) -> Element:
        element = self._elements.get(id(tag))
        if element is None:
            element = Element(self, tag)
            self._elements[id(tag)] = element
        return element

    def forget(self, tag: Tag) -> None:
        """Drop the wrappers of a detached subtree."""
        self._elements.pop(id(tag), None)
        for descendant in tag.find_all(True):
            self._elements.pop(id(descendant), None)

    @property
    def body(self) -> Element:
        return self.wrap(self.soup.body)

    def get_element_by_id(self, element_id: str | None) -> Element | None:
        if not element_id:
            return None
        tag = self.soup.find(id=element_id)
        return self.wrap(tag) if tag is not None else None

    def scroll_to(self, top: float, behavior: str = "auto") -> None:
        self.scroll_y = top
        self.scroll_calls.append((top, behavior))

    def request_animation_frame(self, callback: Callable[[], None]) -> int:
        self._frames.append(callback)
        return len(self._frames)

    def flush_animation_frames(self) -> int:
        frames, self._frames = self._frames, []
        for callback in frames:
            callback()
        return len(frames)

    def set_timeout(self, callback: Callable[[], None], delay_ms: float) -> int:
        self._timer_seq += 1
        self._timers.append((delay_ms, self._timer_seq, callback))
        return self._timer_seq

    def clear_timeout(self, handle: int) -> None:
        self._timers = [timer for timer in self._timers if timer[1] != handle]

    def pending_timers(self) -> int:
        return len(self._timers)

    def run_timers(self) -> int:
        timers, self._timers = sorted(self._timers), []
        for _, _, callback in timers:
            callback()
        return len(timers)

    def press_key(self, key: str) -> KeyboardEvent:
        event = KeyboardEvent(key)
        self.dispatch_event(event)
        return event

    def follow_link(self, link: Element, new_tab: bool = False) -> None:
        href = link.get_attribute("href")
        if not href:
            return
        target = urljoin(self.location.href, href)
        if new_tab:
            self.opened_tabs.append(target)
            return
        self.navigations.append(target)
        if url_origin(target) == self.location.origin:
            self.location.href = target


def url_origin(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme in ("http", "https") and parts.netloc:
        return f"{parts.scheme}://{parts.netloc.lower()}"
    return "null"
