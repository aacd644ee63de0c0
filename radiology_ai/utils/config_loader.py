import yaml
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional

from .exceptions import ConfigurationException, format_user_error
from ..predictions.ranking import TABLE_PAGE_SIZE
from ..predictions.severity import SeverityThresholds

DEFAULT_CONFIG_PATH = "config/config.yaml"


def replace_env_var(match):
    var_name = match.group(1)
    default_value = match.group(2)
    
    value = os.getenv(var_name, default_value)
    
    if value is None:
        raise ValueError(
            f"Environment variable '{var_name}' not set and no default provided"
        )
    return value


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration with environment variable substitution.
    The syntax for substitution is: 
        ${VAR_NAME} or ${VAR_NAME:default_value}
    
    Parameters:
        config_path (str): Path to the YAML config file. Defaults to "config/config.yaml".
        
    Raises:
        ValueError: If an environment variable is not set and no default is provided.

    Returns:
        Dict[str, Any]: The configuration parameters loaded from the YAML file.
    """
    config_file = Path(config_path)
    if not config_file.is_file():
        raise FileNotFoundError(f"The config file '{config_path}' does not exist.")

    with open(config_file, 'r') as f:
        config_text = f.read()

    pattern = re.compile(r'\$\{([^}:]+)(?::([^}]+))?\}')
    config_text = re.sub(pattern, replace_env_var, config_text)
    
    config = yaml.safe_load(config_text)
    
    return config or {}


@dataclass(frozen=True)
class AnalysisSettings:
    """Typed view of config.yaml used by the session and the Streamlit app."""
    inference_base_url: str = "http://localhost:8000"
    predict_path: str = "/predict"
    request_timeout: float = 120.0
    table_page_size: int = TABLE_PAGE_SIZE
    thresholds: SeverityThresholds = field(default_factory=SeverityThresholds)
    strict_selection: bool = True
    sample_image_dir: Path = Path("data/samples")
    log_level: str = "INFO"
    log_dir: Optional[Path] = Path("logs")


def _as_number(value: Any, key: str, cast=float):
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationException(
            format_user_error("bad_config_value", key=key, value=value), str(e)
        ) from e


def settings_from_config(config: Dict[str, Any]) -> AnalysisSettings:
    """
    Build validated settings from a loaded config dictionary.

    Missing sections fall back to the defaults of ``AnalysisSettings``.

    Raises:
        ConfigurationException: If a value has the wrong type or range.
    """
    defaults = AnalysisSettings()
    inference = config.get("inference", {}) or {}
    analysis = config.get("analysis", {}) or {}
    severity = analysis.get("severity", {}) or {}
    images = config.get("images", {}) or {}
    logging_cfg = config.get("logging", {}) or {}

    page_size = _as_number(
        analysis.get("table_page_size", defaults.table_page_size),
        "analysis.table_page_size", int
    )
    if page_size < 1:
        raise ConfigurationException(
            format_user_error("bad_config_value", key="analysis.table_page_size", value=page_size),
            "Page size must be at least 1"
        )

    moderate = _as_number(
        severity.get("moderate_pct", defaults.thresholds.moderate_pct),
        "analysis.severity.moderate_pct"
    )
    severe = _as_number(
        severity.get("severe_pct", defaults.thresholds.severe_pct),
        "analysis.severity.severe_pct"
    )
    if not 0 < moderate < severe:
        raise ConfigurationException(
            format_user_error("bad_config_value", key="analysis.severity", value=f"{moderate}/{severe}"),
            "Thresholds must satisfy 0 < moderate_pct < severe_pct"
        )

    strict = analysis.get("strict_selection", defaults.strict_selection)
    if isinstance(strict, str):
        strict = strict.strip().lower() in ("1", "true", "yes", "on")

    log_dir = logging_cfg.get("log_dir", defaults.log_dir)

    return AnalysisSettings(
        inference_base_url=str(inference.get("base_url", defaults.inference_base_url)).rstrip("/"),
        predict_path=str(inference.get("predict_path", defaults.predict_path)),
        request_timeout=_as_number(
            inference.get("timeout", defaults.request_timeout), "inference.timeout"
        ),
        table_page_size=page_size,
        thresholds=SeverityThresholds(moderate_pct=moderate, severe_pct=severe),
        strict_selection=bool(strict),
        sample_image_dir=Path(images.get("sample_dir", defaults.sample_image_dir)),
        log_level=str(logging_cfg.get("level", defaults.log_level)).upper(),
        log_dir=Path(log_dir) if log_dir else None,
    )


def load_settings(config_path: str = DEFAULT_CONFIG_PATH) -> AnalysisSettings:
    """Load config.yaml and convert it to ``AnalysisSettings``."""
    return settings_from_config(load_config(config_path))
