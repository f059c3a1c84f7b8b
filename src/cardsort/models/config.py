"""
Pydantic configuration model for cardsort.

Defines the analysis settings: similarity rounding precision, which
sessions are included, and the matrix export format. Configuration can
be loaded from YAML files or set through CLI options.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from cardsort.core.constants import MAX_SIMILARITY_DECIMALS, SIMILARITY_DECIMALS
from cardsort.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TEMPLATE_SUGGESTION = "Generate a template with: cardsort config init -o config.yaml"


class AnalysisConfig(BaseModel):
    """
    Configuration for card sort analysis.

    YAML layout::

        similarity:
          decimals: 2
        sessions:
          include_excluded: false
        output:
          matrix_format: csv
    """

    decimals: int = Field(
        default=SIMILARITY_DECIMALS,
        ge=0,
        le=MAX_SIMILARITY_DECIMALS,
        description="Decimal places similarity values are rounded to (half up)",
    )
    include_excluded: bool = Field(
        default=False,
        description=(
            "Include submitted sessions the researcher excluded. "
            "Unsubmitted sessions are never included."
        ),
    )
    matrix_format: Literal["csv", "parquet"] = Field(
        default="csv",
        description="File format for exported matrix tables",
    )

    model_config = {"frozen": True}

    @classmethod
    def from_yaml(cls, path: Path) -> AnalysisConfig:
        """
        Load analysis configuration from a YAML file.

        Unknown keys are ignored. Nested sections
        are flattened to match model fields.

        Args:
            path: Path to YAML configuration file.

        Returns:
            AnalysisConfig populated from YAML values merged with defaults.

        Raises:
            FileNotFoundError: If YAML file does not exist.
            ConfigurationError: If the YAML document is not a mapping.
            ValueError: If YAML contains invalid values.
        """
        import yaml

        raw = yaml.safe_load(path.read_text())
        if raw is None:
            logger.debug(f"Empty configuration file {path}, using defaults")
            return cls()
        if not isinstance(raw, dict):
            raise ConfigurationError(
                message=f"YAML config must be a mapping, got {type(raw).__name__}",
                suggestion=TEMPLATE_SUGGESTION,
            )

        return cls(**_flatten_yaml_config(raw))

    def to_yaml(self, path: Path) -> None:
        """Write analysis configuration to a YAML file."""
        path.write_text(self.to_yaml_str())

    def to_yaml_str(self) -> str:
        """Serialize analysis configuration to a YAML string."""
        import yaml

        data = {
            "similarity": {"decimals": self.decimals},
            "sessions": {"include_excluded": self.include_excluded},
            "output": {"matrix_format": self.matrix_format},
        }
        return yaml.dump(data, default_flow_style=False, sort_keys=False)


def _flatten_yaml_config(raw: dict[str, Any]) -> dict[str, Any]:
    """Map the nested YAML sections onto AnalysisConfig keyword arguments."""
    flat: dict[str, Any] = {}

    _map_if_present(_section(raw, "similarity"), "decimals", flat, "decimals")
    _map_if_present(_section(raw, "sessions"), "include_excluded", flat, "include_excluded")
    _map_if_present(_section(raw, "output"), "matrix_format", flat, "matrix_format")

    return flat


def _map_if_present(
    source: dict[str, Any],
    source_key: str,
    target: dict[str, Any],
    target_key: str,
) -> None:
    """Copy value from source dict to target dict if key exists."""
    if source_key in source and source[source_key] is not None:
        target[target_key] = source[source_key]


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a nested YAML section, empty when absent."""
    section = raw.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            message=f"YAML section '{name}' must be a mapping, got {type(section).__name__}",
            suggestion=TEMPLATE_SUGGESTION,
        )
    return section
