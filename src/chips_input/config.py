"""Controller configuration.

Configuration can be built in code or loaded from a JSON file.
"""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from chips_input.logger import get_logger

logger = get_logger("chips.config")

DEFAULT_DEBUG_LABEL = "chipsInput"


class ChipsInputConfig(BaseModel):
    """Configuration for a single chips input controller."""

    debug_label: str = Field(DEFAULT_DEBUG_LABEL, description="Prefix for stream names and log lines")
    suggest_on_type: bool = Field(True, description="Load suggestions whenever the query changes")
    placeholder: str | None = Field(None, description="Text shown while there are no chips")
    query: str | None = Field(None, description="Initial query text")
    hide_suggestion_overlay: bool = Field(
        False, description="Never show the overlay; suggestions are still computed"
    )
    enabled: bool = Field(True, description="Initial enabled flag for chip mutations")
    query_debounce: float = Field(0.3, ge=0, description="Seconds raw keystrokes settle before becoming the query")
    suggestion_debounce: float = Field(
        0.2, ge=0, description="Seconds a query change settles before suggestions are fetched"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True


def load_chips_input_config(config_path: str | Path) -> ChipsInputConfig:
    """
    Load controller configuration from a JSON file.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        ChipsInputConfig: Parsed configuration object

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        json.JSONDecodeError: If the JSON file is invalid
        ValidationError: If the configuration structure is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        error_msg = f"Chips input configuration file not found: {config_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    logger.info(f"Loading chips input configuration from: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in configuration file {config_path}: {e}")
        raise

    try:
        config = ChipsInputConfig(**config_data)
    except ValidationError as e:
        logger.error(f"Invalid configuration structure in {config_path}: {e}")
        raise

    logger.debug(f"Loaded configuration for '{config.debug_label}'")
    return config
