import base64

import pytest

from radiology_ai.predictions.models import PredictionSet

# Tiny stand-in for an encoded image; the view never decodes it
IMAGE = base64.b64encode(b"\x89PNG fake radiograph").decode("ascii")


def build_payload(means, variances=None, images=None):
    """Inference API response body for the given class means."""
    variances = variances if variances is not None else {label: 0.05 for label in means}
    images = images if images is not None else {label: f"heatmap-{label}" for label in means}
    return {
        "prediction_mean": dict(means),
        "prediction_variance": dict(variances),
        "superimposed_images": dict(images),
    }


@pytest.fixture
def image():
    return IMAGE


@pytest.fixture
def make_payload():
    return build_payload


@pytest.fixture
def make_set():
    def _make(means, **kwargs):
        return PredictionSet.from_response(build_payload(means, **kwargs))
    return _make


@pytest.fixture
def abc_set(make_set):
    return make_set({"A": 0.9, "B": 0.3, "C": 0.6})


@pytest.fixture
def ten_set(make_set):
    # Class0 strongest, Class9 weakest
    return make_set({f"Class{i}": round(1.0 - i * 0.1, 2) for i in range(10)})
