from dataclasses import dataclass

DEFAULT_HEADING_LEVELS = "h1, h2"

# Layout constants, in CSS pixels / milliseconds.
CONTENT_SCROLL_OFFSET = 20
NAVBAR_HEIGHT = 80
WINDOW_SCROLL_OFFSET = 10
ACTIVE_HEADING_TOLERANCE = 100
TOC_ACTIVE_MARGIN = 60
MOBILE_TOC_CLOSE_DELAY_MS = 300


@dataclass(frozen=True)
class NavigationConfig:
    """Element ids the navigator binds to. Only ``content_id`` is required."""

    content_id: str
    toc_list_id: str | None = None
    toc_mobile_list_id: str | None = None
    toc_mobile_button_id: str | None = None
    toc_modal_id: str | None = None
    toc_modal_overlay_id: str | None = None
    toc_modal_close_id: str | None = None
    heading_levels: str = DEFAULT_HEADING_LEVELS
    slideover_id: str | None = None
    slideover_overlay_id: str | None = None
    slideover_close_id: str | None = None
