# app/caching_utils.py
from pathlib import Path
from typing import Tuple

import streamlit as st

from radiology_ai.imaging.image_source import ImageProvider, list_sample_images
from radiology_ai.predictions.source import PredictionSource
from radiology_ai.utils.config_loader import AnalysisSettings, load_settings

# --- Cached Resource Loaders ---

@st.cache_resource
def get_cached_settings(config_path: str) -> AnalysisSettings:
    """Caches the parsed config.yaml."""
    return load_settings(config_path)


@st.cache_data
def get_cached_sample_images(sample_dir: str) -> Tuple[Path, ...]:
    """Caches the (immutable) listing of the sample image directory."""
    return list_sample_images(sample_dir)


# --- PER-SESSION STATE - NEVER SHARED BETWEEN BROWSER SESSIONS ---
def get_session_image_provider(sample_dir: str) -> ImageProvider:
    """Returns this browser session's image picker, built over the cached listing."""
    provider = st.session_state.get("image_provider")
    if provider is None or provider.sample_dir != Path(sample_dir):
        provider = ImageProvider(sample_dir, images=get_cached_sample_images(sample_dir))
        st.session_state["image_provider"] = provider
    return provider


# --- DO NOT CACHE THE SOURCE - IT CONTAINS AN ASYNC CLIENT ---
# Create a new source for each analysis
def get_prediction_source(settings: AnalysisSettings, base_url: str = None) -> PredictionSource:
    """Creates a new PredictionSource (not cached due to async client)."""
    return PredictionSource(
        base_url=base_url or settings.inference_base_url,
        predict_path=settings.predict_path,
        timeout=settings.request_timeout,
    )
