"""
Configuration loader for the Encceja Report Reader.

Handles parsing and validation of YAML configuration files.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .config import DEFAULT_PROVIDER


class ReaderConfig(BaseModel):
    """
    Configuration model for the reader.
    """
    provider: Literal["openai", "gemini"] = Field(DEFAULT_PROVIDER, description="Hosted model provider")
    model: Optional[str] = Field(None, description="Model name override (provider default when empty)")
    output_dir: Optional[Path] = Field(None, description="Directory to save extraction results")
    verbose: bool = Field(False, description="Enable verbose output")


def load_config(config_path: Path) -> ReaderConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        ReaderConfig object with loaded values.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
        ValidationError: If config data is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f)

    if not config_data:
        return ReaderConfig()

    # Resolve output_dir relative to the config file location
    if config_data.get("output_dir"):
        path = Path(config_data["output_dir"])
        if not path.is_absolute():
            config_data["output_dir"] = config_path.parent / path

    return ReaderConfig(**config_data)
