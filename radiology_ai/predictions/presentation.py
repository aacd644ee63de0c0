"""
Presentation model for the analysis view.

Everything here is a pure function of the loaded prediction set and the
session's view state. Nothing is cached: every render recomputes ranking,
tiers and the table slice from the current snapshot.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .models import PredictionSet, RankedEntry
from .ranking import TABLE_PAGE_SIZE, can_expand, visible_rows
from .scroll import ScrollState
from .selection import SelectionState
from .severity import DEFAULT_THRESHOLDS, SeverityThresholds, Tier, classify, legend as tier_legend, tier_color
from ..utils.exceptions import AnalysisException, format_user_error


@dataclass(frozen=True)
class TableRow:
    label: str
    mean: float
    variance: float
    rank: int
    tier: Tier
    color: str
    active: bool
    verified: bool

    @property
    def accuracy_text(self) -> str:
        """Mean and variance as whole percentages, e.g. ``90%(5%)``."""
        return f"{as_percent(self.mean)}%({as_percent(self.variance)}%)"


@dataclass(frozen=True)
class HeatmapView:
    label: str
    image: str


@dataclass(frozen=True)
class RadarData:
    labels: Tuple[str, ...] = ()
    values: Tuple[float, ...] = ()


@dataclass(frozen=True)
class LoadingView:
    source_image: Optional[str] = None


@dataclass(frozen=True)
class ErrorView:
    message: str
    details: Optional[str] = None


@dataclass(frozen=True)
class ResultView:
    rows: Tuple[TableRow, ...]
    heatmap: Optional[HeatmapView]
    radar: RadarData
    show_up_arrow: bool
    show_down_arrow: bool
    expanded: bool
    can_expand: bool
    total_classes: int
    legend: List[Tuple[Tier, str]] = field(default_factory=tier_legend)
    source_image: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.total_classes == 0


def as_percent(value: float) -> int:
    # Round half up, so 0.125 -> 13 rather than banker's 12
    return int(math.floor(value * 100 + 0.5))


def build_rows(
    prediction_set: PredictionSet,
    ranked: Sequence[RankedEntry],
    selection: SelectionState,
    page_size: int = TABLE_PAGE_SIZE,
    thresholds: SeverityThresholds = DEFAULT_THRESHOLDS,
    all_rows: bool = False,
) -> Tuple[TableRow, ...]:
    """Table rows for the current page, or for every ranked class with ``all_rows``."""
    set_max = prediction_set.max_mean
    entries = tuple(ranked) if all_rows else visible_rows(ranked, selection.expanded, page_size)
    rows = []
    for entry in entries:
        tier = classify(entry.mean, set_max, thresholds)
        rows.append(TableRow(
            label=entry.label,
            mean=entry.mean,
            variance=entry.variance,
            rank=entry.rank,
            tier=tier,
            color=tier_color(tier),
            active=selection.is_active(entry.label),
            verified=entry.label in selection.verified,
        ))
    return tuple(rows)


def build_radar(ranked: Sequence[RankedEntry]) -> RadarData:
    """The radar chart plots every class, never the truncated page."""
    return RadarData(
        labels=tuple(entry.label for entry in ranked),
        values=tuple(entry.mean for entry in ranked),
    )


def render(
    prediction_set: PredictionSet,
    ranked: Sequence[RankedEntry],
    selection: SelectionState,
    scroll: ScrollState,
    page_size: int = TABLE_PAGE_SIZE,
    thresholds: SeverityThresholds = DEFAULT_THRESHOLDS,
    source_image: Optional[str] = None,
) -> ResultView:
    """
    Compose the table, the active heatmap and the radar chart.

    Args:
        prediction_set: Loaded inference result.
        ranked: ``rank(prediction_set)``.
        selection: Active class, expansion and verified classes.
        scroll: Latest scroll boundary state.
        page_size: Rows shown while collapsed.
        thresholds: Severity tier boundaries.
        source_image: Original radiograph shown beside the heatmap.

    Returns:
        ResultView consumed by the table, image and chart renderers.
    """
    heatmap = None
    active = selection.active_label
    if active is not None and active in prediction_set.heatmaps:
        heatmap = HeatmapView(label=active, image=prediction_set.heatmaps[active])
    
    return ResultView(
        rows=build_rows(prediction_set, ranked, selection, page_size, thresholds),
        heatmap=heatmap,
        radar=build_radar(ranked),
        show_up_arrow=scroll.show_up_arrow,
        show_down_arrow=scroll.show_down_arrow,
        expanded=selection.expanded,
        can_expand=can_expand(ranked, page_size),
        total_classes=len(ranked),
        source_image=source_image,
    )


def render_loading(source_image: Optional[str] = None) -> LoadingView:
    return LoadingView(source_image=source_image)


def render_error(error: Exception) -> ErrorView:
    """User-facing message for a failed analysis; internals go to ``details``."""
    if isinstance(error, AnalysisException):
        return ErrorView(message=error.message, details=error.details)
    return ErrorView(message=format_user_error("fetch_failed"), details=str(error))
