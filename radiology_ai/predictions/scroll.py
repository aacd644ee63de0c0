"""
Scroll boundary detection for the up/down affordances next to the
ranked list.
"""

from dataclasses import dataclass

from ..utils.exceptions import ValidationException
from ..utils.validators import validate_viewport_metric


@dataclass(frozen=True)
class ViewportMetrics:
    scroll_top: float
    scroll_height: float
    client_height: float

    def __post_init__(self):
        for name in ("scroll_top", "scroll_height", "client_height"):
            object.__setattr__(self, name, validate_viewport_metric(getattr(self, name), name))

    @classmethod
    def from_event(cls, event) -> "ViewportMetrics":
        """Build from a browser scroll event (``scrollTop``, ``scrollHeight``, ``clientHeight``)."""
        try:
            return cls(
                scroll_top=event["scrollTop"],
                scroll_height=event["scrollHeight"],
                client_height=event["clientHeight"],
            )
        except (KeyError, TypeError) as e:
            raise ValidationException(f"Malformed scroll event: {event!r}") from e


@dataclass(frozen=True)
class ScrollState:
    at_bottom: bool = False

    @property
    def show_up_arrow(self) -> bool:
        return self.at_bottom

    @property
    def show_down_arrow(self) -> bool:
        return not self.at_bottom


INITIAL_SCROLL_STATE = ScrollState(at_bottom=False)


def is_at_bottom(metrics: ViewportMetrics) -> bool:
    # Content that does not overflow is always "at the bottom"
    return metrics.scroll_top + metrics.client_height >= metrics.scroll_height


class ScrollEdgeTracker:
    """Keeps the latest ScrollState; every event recomputes it from scratch."""

    def __init__(self):
        self.state = INITIAL_SCROLL_STATE

    def on_scroll(self, metrics: ViewportMetrics) -> ScrollState:
        self.state = ScrollState(at_bottom=is_at_bottom(metrics))
        return self.state

    def reset(self) -> ScrollState:
        self.state = INITIAL_SCROLL_STATE
        return self.state
