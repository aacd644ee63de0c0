"""
Single source of truth for which class is shown and how much of the
ranked list is visible.

The table highlight, the heatmap panel and its caption all read
``SelectionState.active_label``; nothing else decides which heatmap is
displayed.
"""

import logging
from typing import FrozenSet, Optional

from .models import PredictionSet
from .ranking import rank, top_label
from ..utils.exceptions import InvalidSelection, format_user_error

logger = logging.getLogger(__name__)


class SelectionState:
    """
    View state for one analysis session.

    Args:
        strict: Raise ``InvalidSelection`` on unknown labels (development).
            When False the call is logged and ignored (production).
    """

    def __init__(self, strict: bool = True):
        self.strict = strict
        self._labels: FrozenSet[str] = frozenset()
        self._active_label: Optional[str] = None
        self._expanded = False
        self._verified: FrozenSet[str] = frozenset()

    @property
    def active_label(self) -> Optional[str]:
        return self._active_label

    @property
    def expanded(self) -> bool:
        return self._expanded

    @property
    def verified(self) -> FrozenSet[str]:
        return self._verified

    @property
    def is_loaded(self) -> bool:
        return self._active_label is not None

    def load(self, prediction_set: PredictionSet) -> None:
        """Reset for a newly loaded prediction set."""
        self._labels = frozenset(prediction_set.entries)
        self._active_label = top_label(rank(prediction_set))
        self._expanded = False
        self._verified = frozenset()
        logger.debug(
            "Selection reset: %d classes, active=%s", len(self._labels), self._active_label
        )

    def clear(self) -> None:
        self._labels = frozenset()
        self._active_label = None
        self._expanded = False
        self._verified = frozenset()

    def select(self, label: str) -> None:
        """Make ``label`` the class whose heatmap is displayed."""
        if not self._check_label(label, "select"):
            return
        self._active_label = label

    def toggle_expanded(self) -> bool:
        """Flip between the first table page and the full list."""
        self._expanded = not self._expanded
        return self._expanded

    def toggle_verified(self, label: str) -> bool:
        """Mark or unmark a class as verified by the reviewing clinician."""
        if not self._check_label(label, "toggle_verified"):
            return label in self._verified
        if label in self._verified:
            self._verified = self._verified - {label}
        else:
            self._verified = self._verified | {label}
        return label in self._verified

    def is_active(self, label: str) -> bool:
        return label == self._active_label

    def _check_label(self, label: str, action: str) -> bool:
        if label in self._labels:
            return True
        
        error = InvalidSelection(
            format_user_error("unknown_label", label=label),
            f"{action}({label!r}) with loaded classes {sorted(self._labels)}"
        )
        if self.strict:
            raise error
        logger.error("Ignoring selection desync: %s", error)
        return False
