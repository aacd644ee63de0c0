"""
Main Streamlit Application Entry Point for the Radiology AI Analysis view
"""

import streamlit as st
import sys
import asyncio
from pathlib import Path

# ==========================================
# Set up Python path FIRST
# ==========================================
# Project root (parent of 'app' directory)
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# ==========================================
# Import analysis modules AFTER path setup
# ==========================================
try:
    from radiology_ai.predictions.session import AnalysisSession
    from radiology_ai.utils.exceptions import AnalysisException
    from radiology_ai.utils.logger import get_logger, setup_logger
    from app.caching_utils import get_cached_settings, get_prediction_source, get_session_image_provider
    from app.components.analysis_view import render_session
except ImportError as err:
    st.error("⚠️ **CRITICAL ERROR**: Failed to import analysis modules")
    st.error(f"**Error Details**: {err}")
    st.error(
        "**Troubleshooting**:\n"
        "1. Ensure all dependencies are installed: `pip install -e .`\n"
        f"2. Check that the `radiology_ai/` package exists at: {PROJECT_ROOT}\n"
        f"3. Verify Python path: {sys.path}"
    )
    st.stop()

# ==========================================
# Page Configuration
# ==========================================
st.set_page_config(
    page_title="Radiology AI Analysis",
    page_icon="🩻",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ==========================================
# Sidebar: Configuration
# ==========================================
st.sidebar.title("🔧 Analysis Configuration")

config_path = st.sidebar.text_input(
    "Config File Path",
    value="config/config.yaml",
    help="Path to the YAML configuration file"
)

try:
    settings = get_cached_settings(config_path)
except FileNotFoundError as e:
    st.sidebar.error(f"❌ Configuration file not found: {e}")
    st.stop()
except AnalysisException as e:
    st.sidebar.error(f"❌ Invalid configuration: {e.message}")
    if e.details:
        st.sidebar.error(f"**Details**: {e.details}")
    st.stop()

setup_logger(level=settings.log_level, log_dir=settings.log_dir)
logger = get_logger(__name__)

inference_url = st.sidebar.text_input(
    "Inference API URL",
    value=settings.inference_base_url,
    help="Base URL of the prediction service"
)
st.sidebar.caption(f"Sample images: `{settings.sample_image_dir}`")


# ==========================================
# Session Handling
# ==========================================
def run_analysis():
    """
    Pick a sample radiograph and run one inference call for a fresh session.
    Errors end up in the session and are rendered by the results panel.
    """
    provider = get_session_image_provider(str(settings.sample_image_dir))
    try:
        provider.set_random_image()
        image = provider.get_image()
    except AnalysisException as e:
        st.session_state.pop("analysis_session", None)
        st.session_state["analysis_error"] = e.message
        logger.error(f"Could not load a source image: {e}")
        return

    st.session_state.pop("analysis_error", None)
    session = AnalysisSession(settings, source_image=image)
    st.session_state["analysis_session"] = session

    async def _fetch():
        async with get_prediction_source(settings, inference_url) as source:
            await session.analyze(source, image)

    with st.spinner("🔄 Have patience! Analysis is in progress..."):
        asyncio.run(_fetch())


def close_analysis():
    session = st.session_state.pop("analysis_session", None)
    if session is not None:
        session.close()


st.sidebar.button(
    "🩻 Run AI Analysis",
    on_click=run_analysis,
    type="primary",
    use_container_width=True,
    help="Analyze a radiograph with the AI model"
)

# ==========================================
# Main Content Area
# ==========================================
st.title("🩻 AI Radiology Analysis")

if "analysis_error" in st.session_state:
    st.error(f"❌ {st.session_state['analysis_error']}")

session = st.session_state.get("analysis_session")

if session is None:
    st.info(
        "**👈 Get started**: Click 'Run AI Analysis' to analyze a radiograph.",
        icon="🔍"
    )
else:
    render_session(session)
    st.button("Close", on_click=close_analysis)

# ==========================================
# Footer
# ==========================================
st.markdown("---")
st.caption(
    "⚠️ **Disclaimer:** This tool is for research purposes only. "
    "Findings must be confirmed by a radiologist."
)
