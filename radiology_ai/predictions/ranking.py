"""
Descending ranking of prediction entries and the table page slice.
"""

from typing import Sequence, Tuple

from .models import PredictionSet, RankedEntry

# Rows shown while the table is collapsed
TABLE_PAGE_SIZE = 7


def rank(prediction_set: PredictionSet) -> Tuple[RankedEntry, ...]:
    """
    Order all entries by mean, highest first.

    ``sorted`` is stable, so classes with equal means keep the order the
    inference API returned them in.
    """
    ordered = sorted(
        prediction_set.entries.items(),
        key=lambda item: item[1].mean,
        reverse=True,
    )
    return tuple(
        RankedEntry(label=label, mean=entry.mean, variance=entry.variance, rank=position)
        for position, (label, entry) in enumerate(ordered)
    )


def top_label(ranked: Sequence[RankedEntry]):
    """Label of the rank-0 entry, or None for an empty ranking."""
    return ranked[0].label if ranked else None


def visible_rows(
    ranked: Sequence[RankedEntry],
    expanded: bool,
    page_size: int = TABLE_PAGE_SIZE,
) -> Tuple[RankedEntry, ...]:
    """Rows for the table: the first page unless the list is expanded."""
    if expanded:
        return tuple(ranked)
    return tuple(ranked[:page_size])


def can_expand(ranked: Sequence[RankedEntry], page_size: int = TABLE_PAGE_SIZE) -> bool:
    """Whether the "See more / See less" control applies."""
    return len(ranked) > page_size
