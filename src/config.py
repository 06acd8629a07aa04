"""Configuration Management with Pydantic.

This module implements configuration models using Pydantic for parsing and
validation of YAML configuration files with environment variable overrides.
The pipeline takes a PipelineConfig whose GraphSource says where the graph
text comes from: a file path, an in-memory string, or an open text stream.
"""

import io
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.log_config import get_logger

# Initialize logger
logger = get_logger(__name__)

OUTPUT_FORMATS = ("text", "mermaid", "dot")
TRUE_VALUES = ("true", "1", "yes")


class GraphSource(BaseModel):
    """Where the graph text is read from. Exactly one field must be set.

    Attributes:
        path: Path to a graph file
        text: Graph text held in memory
        stream: An open text stream; it is read but not closed
    """

    path: Path | None = Field(default=None, description="Path to a graph file")
    text: str | None = Field(default=None, description="Graph text held in memory")
    stream: io.TextIOBase | None = Field(
        default=None,
        description="Open text stream",
        exclude=True,
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_single_source(self) -> "GraphSource":
        """Validate that exactly one source is configured.

        Raises:
            ValueError: If no source or more than one source is set
        """
        given = [name for name in ("path", "text", "stream") if getattr(self, name) is not None]
        if len(given) != 1:
            msg = f"Exactly one of path, text or stream must be set (got {given or 'none'})"
            raise ValueError(msg)
        return self

    @property
    def name(self) -> str:
        """Display name of the source for logs and reports."""
        if self.path is not None:
            return self.path.name
        if self.text is not None:
            return "<string>"
        return "<stream>"


class PipelineConfig(BaseModel):
    """Parse-then-sort pipeline configuration.

    Attributes:
        source: Where the graph text comes from
        output_format: How the CLI presents the result (text, mermaid or dot)
        logging_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render logs as JSON instead of console output
    """

    source: GraphSource
    output_format: str = Field(
        default="text",
        description="Result presentation format",
    )
    logging_level: str = Field(
        default="WARNING",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Normalize and validate the output format.

        Raises:
            ValueError: If the format is not one of text, mermaid or dot
        """
        v = v.lower().strip()
        if v not in OUTPUT_FORMATS:
            msg = f"Output format must be one of {', '.join(OUTPUT_FORMATS)}"
            raise ValueError(msg)
        return v

    @field_validator("logging_level", mode="before")
    @classmethod
    def normalize_logging_level(cls, v: Any) -> Any:
        """Accept lower-case level names."""
        return v.upper().strip() if isinstance(v, str) else v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "PipelineConfig":
        """Load configuration from a YAML file.

        Relative source paths are resolved against the configuration file's
        directory.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Parsed and validated PipelineConfig instance

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid YAML in configuration file: {e}"
            raise ValueError(msg) from e

        if not config_data:
            msg = "Configuration file is empty"
            raise ValueError(msg)
        if not isinstance(config_data, dict):
            msg = "Configuration file must contain a mapping"
            raise ValueError(msg)

        config_data = cls._apply_env_overrides(config_data)

        source = config_data.get("source")
        source_path = source.get("path") if isinstance(source, dict) else None
        if source_path is not None and not Path(source_path).is_absolute():
            config_data["source"]["path"] = config_path.parent / source_path

        config = cls(**config_data)

        logger.info(
            "configuration_loaded",
            source=config.source.name,
            output_format=config.output_format,
            logging_level=config.logging_level,
        )

        return config

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern: TOPOGRAPH_<SECTION>_<KEY>
        Example: TOPOGRAPH_SOURCE_PATH, TOPOGRAPH_LOGGING_LEVEL

        Args:
            config_data: Base configuration dictionary from file

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            ("source", "path"): "TOPOGRAPH_SOURCE_PATH",
            ("output_format",): "TOPOGRAPH_OUTPUT_FORMAT",
            ("logging_level",): "TOPOGRAPH_LOGGING_LEVEL",
            ("json_logs",): "TOPOGRAPH_JSON_LOGS",
        }

        for path, env_var in env_overrides.items():
            value = os.environ.get(env_var)
            if value is not None:
                # Navigate to nested config section
                current = config_data
                for key in path[:-1]:
                    if key not in current:
                        current[key] = {}
                    current = current[key]

                final_key = path[-1]
                if env_var == "TOPOGRAPH_SOURCE_PATH":
                    # A path override replaces whatever source the file named
                    current.pop("text", None)
                elif env_var == "TOPOGRAPH_JSON_LOGS":
                    value = value.lower() in TRUE_VALUES

                current[final_key] = value
                logger.debug(
                    "env_override_applied",
                    env_var=env_var,
                    config_path=".".join(path),
                )

        return config_data


def load_config(config_path: str | Path | None = None) -> PipelineConfig:
    """Load configuration from file.

    Args:
        config_path: Path to configuration file. If None, looks for
            topograph.yaml or topograph.yml in the current directory.

    Returns:
        Loaded PipelineConfig instance

    Raises:
        FileNotFoundError: If config file not found
        ValueError: If config file is invalid
    """
    if config_path is None:
        for default_name in ["topograph.yaml", "topograph.yml"]:
            default_path = Path(default_name)
            if default_path.exists():
                config_path = default_path
                break
        else:
            msg = "No configuration file found. Expected topograph.yaml or topograph.yml"
            raise FileNotFoundError(msg)

    return PipelineConfig.from_yaml(config_path)


__all__ = [
    "GraphSource",
    "PipelineConfig",
    "load_config",
]
