"""
AnalysisSession: one popup's worth of analysis state.

The session owns the loaded PredictionSet together with its SelectionState
and scroll tracker. It is the only place the inference call is awaited, and
it drops results that arrive after the session was closed or superseded by
a newer analysis.
"""

import logging
import uuid
from enum import Enum
from typing import Optional, Tuple, Union

from .models import PredictionSet
from .presentation import (
    ErrorView,
    LoadingView,
    ResultView,
    TableRow,
    build_rows,
    render,
    render_error,
    render_loading,
)
from .ranking import rank
from .scroll import ScrollEdgeTracker, ScrollState, ViewportMetrics
from .selection import SelectionState
from ..utils.config_loader import AnalysisSettings
from ..utils.exceptions import FetchFailed

logger = logging.getLogger(__name__)

View = Union[LoadingView, ErrorView, ResultView]


class SessionStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


class AnalysisSession:
    """
    Holds the state triple for one analysis popup.

    Args:
        settings: Page size, severity thresholds and selection strictness.
        source_image: Encoded radiograph under analysis, shown while loading
            and beside the heatmap.
    """

    def __init__(self, settings: Optional[AnalysisSettings] = None, source_image: Optional[str] = None):
        self.settings = settings or AnalysisSettings()
        self.session_id = uuid.uuid4().hex
        self.source_image = source_image
        self.status = SessionStatus.LOADING
        self.prediction_set: Optional[PredictionSet] = None
        self.error: Optional[Exception] = None
        self.selection = SelectionState(strict=self.settings.strict_selection)
        self.scroll = ScrollEdgeTracker()
        self._generation = 0

    @property
    def is_closed(self) -> bool:
        return self.status is SessionStatus.CLOSED

    @property
    def generation(self) -> int:
        """Increases with every analysis started in this session."""
        return self._generation

    async def analyze(self, source, image: str) -> bool:
        """
        Run one inference call and load its result.

        Returns:
            True if the result was applied, False if it failed or was
            discarded because the session closed or a newer analysis
            started while the call was outstanding.
        """
        if self.is_closed:
            logger.debug("Session %s closed; not starting analysis", self.session_id)
            return False

        self._generation += 1
        generation = self._generation
        self.source_image = image
        self.status = SessionStatus.LOADING
        self.error = None

        try:
            prediction_set = await source.fetch(image)
        except FetchFailed as e:
            if self._is_stale(generation):
                return False
            logger.error("Analysis failed in session %s: %s", self.session_id, e)
            self.fail(e)
            return False

        if self._is_stale(generation):
            return False

        self.load(prediction_set)
        return True

    def load(self, prediction_set: PredictionSet) -> None:
        """Install a prediction set and reset all view state derived from the previous one."""
        self.prediction_set = prediction_set
        self.error = None
        self.selection.load(prediction_set)
        self.scroll.reset()
        self.status = SessionStatus.READY
        logger.info(
            "Session %s loaded %d classes (top: %s)",
            self.session_id, len(prediction_set), self.selection.active_label
        )

    def fail(self, error: Exception) -> None:
        self.prediction_set = None
        self.error = error
        self.selection.clear()
        self.scroll.reset()
        self.status = SessionStatus.FAILED

    def close(self) -> None:
        """Tear down the session; late fetch results are ignored from here on."""
        self.status = SessionStatus.CLOSED
        self.prediction_set = None
        self.selection.clear()
        self.scroll.reset()
        logger.debug("Session %s closed", self.session_id)

    def select(self, label: str) -> None:
        self.selection.select(label)

    def toggle_expanded(self) -> bool:
        return self.selection.toggle_expanded()

    def toggle_verified(self, label: str) -> bool:
        return self.selection.toggle_verified(label)

    def on_scroll(self, metrics: ViewportMetrics) -> ScrollState:
        return self.scroll.on_scroll(metrics)

    def render(self) -> View:
        """Presentation model for the current status."""
        if self.status is SessionStatus.FAILED and self.error is not None:
            return render_error(self.error)
        if self.status is not SessionStatus.READY or self.prediction_set is None:
            return render_loading(self.source_image)

        return render(
            self.prediction_set,
            rank(self.prediction_set),
            self.selection,
            self.scroll.state,
            page_size=self.settings.table_page_size,
            thresholds=self.settings.thresholds,
            source_image=self.source_image,
        )

    def export_rows(self) -> Tuple[TableRow, ...]:
        """Every ranked class as a table row, whatever page the table shows."""
        if self.status is not SessionStatus.READY or self.prediction_set is None:
            return ()
        return build_rows(
            self.prediction_set,
            rank(self.prediction_set),
            self.selection,
            thresholds=self.settings.thresholds,
            all_rows=True,
        )

    def _is_stale(self, generation: int) -> bool:
        if self.is_closed or generation != self._generation:
            logger.debug(
                "Discarding result for session %s (generation %d, current %d, status %s)",
                self.session_id, generation, self._generation, self.status.value
            )
            return True
        return False
