"""
Data model for one inference result.

A ``PredictionSet`` is an immutable snapshot: once constructed, its
entries and heatmaps cannot change, so everything derived from it
(ranking, tiers, table slices) can be recomputed on demand.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple

from ..utils.exceptions import InvalidPredictionSet, ValidationException, format_user_error
from ..utils.validators import RESPONSE_KEYS, describe_payload_shape, validate_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictionEntry:
    """One class's statistics: severity signal and its uncertainty."""
    mean: float
    variance: float

    def __post_init__(self):
        if self.variance < 0:
            raise InvalidPredictionSet(
                format_user_error("invalid_response"),
                f"Variance must be >= 0, got {self.variance}"
            )


class RankedEntry(NamedTuple):
    label: str
    mean: float
    variance: float
    rank: int


@dataclass(frozen=True)
class PredictionSet:
    """
    Normalized inference result.

    Attributes:
        entries: label -> PredictionEntry, in the order the API returned them.
        heatmaps: label -> encoded heatmap image superimposed on the source.

    Raises:
        InvalidPredictionSet: If ``entries`` and ``heatmaps`` do not share
            exactly the same labels.
    """
    entries: Mapping[str, PredictionEntry]
    heatmaps: Mapping[str, str]

    def __post_init__(self):
        entry_labels = set(self.entries)
        heatmap_labels = set(self.heatmaps)
        if entry_labels != heatmap_labels:
            missing = sorted(entry_labels - heatmap_labels)
            extra = sorted(heatmap_labels - entry_labels)
            raise InvalidPredictionSet(
                format_user_error("invalid_response"),
                f"Heatmap labels do not match predictions (missing heatmaps: {missing}, "
                f"heatmaps without prediction: {extra})"
            )
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))
        object.__setattr__(self, "heatmaps", MappingProxyType(dict(self.heatmaps)))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, label) -> bool:
        return label in self.entries

    @property
    def labels(self):
        return tuple(self.entries)

    @property
    def max_mean(self) -> float:
        """Highest mean in the set, 0.0 when the set is empty."""
        if not self.entries:
            return 0.0
        return max(entry.mean for entry in self.entries.values())

    @classmethod
    def empty(cls) -> "PredictionSet":
        return cls(entries={}, heatmaps={})

    @classmethod
    def from_response(cls, payload: Any) -> "PredictionSet":
        """
        Build a prediction set from the inference API JSON body.

        Expected keys: ``prediction_mean``, ``prediction_variance`` and
        ``superimposed_images``, each a mapping keyed by class label.

        Raises:
            InvalidPredictionSet: If a section is missing or malformed, or
                the label sets disagree. The payload shape is logged.
        """
        try:
            return cls._parse(payload)
        except InvalidPredictionSet as e:
            logger.error(
                "Rejected inference response: %s | shape=%s",
                e.details or e.message, describe_payload_shape(payload)
            )
            raise

    @classmethod
    def _parse(cls, payload: Any) -> "PredictionSet":
        if not isinstance(payload, Mapping):
            raise InvalidPredictionSet(
                format_user_error("invalid_response"),
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        
        for key in RESPONSE_KEYS:
            if not isinstance(payload.get(key), Mapping):
                raise InvalidPredictionSet(
                    format_user_error("invalid_response"),
                    f"Missing or malformed '{key}' section"
                )
        
        means = payload["prediction_mean"]
        variances = payload["prediction_variance"]
        images = payload["superimposed_images"]
        
        if set(means) != set(variances):
            raise InvalidPredictionSet(
                format_user_error("invalid_response"),
                f"Variance labels do not match mean labels "
                f"(without variance: {sorted(set(means) - set(variances))}, "
                f"without mean: {sorted(set(variances) - set(means))})"
            )
        
        entries = {}
        for label, mean in means.items():
            try:
                entry = PredictionEntry(
                    mean=validate_score(mean, label, "prediction_mean"),
                    variance=validate_score(variances[label], label, "prediction_variance"),
                )
            except ValidationException as e:
                raise InvalidPredictionSet(format_user_error("invalid_response"), e.message) from e
            if not 0.0 <= entry.mean <= 1.0:
                logger.warning("Mean for '%s' outside [0, 1]: %s", label, entry.mean)
            entries[str(label)] = entry
        
        heatmaps = {}
        for label, image in images.items():
            if not isinstance(image, str):
                raise InvalidPredictionSet(
                    format_user_error("invalid_response"),
                    f"Heatmap for '{label}' must be an encoded image string"
                )
            heatmaps[str(label)] = image
        
        return cls(entries=entries, heatmaps=heatmaps)
