"""Configuration for page-sync.

Configuration values are immutable pydantic models passed into the extractor,
transformer and patcher at construction. Defaults describe the organisation
directory page and its Apps Script mirror; a YAML file (pointed to by the
``PAGE_SYNC_CONFIG`` environment variable or passed explicitly) can override
any of them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from page_sync.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PAGE_SYNC_CONFIG"

DEFAULT_SOURCE_PATH = Path("./src/app/page.js")
DEFAULT_TARGET_PATH = Path("./index.html")

_DEFAULT_TARGET_FUNCTIONS = (
    "organizeEmployeeData",
    "getEmploymentStatus",
    "isManager",
    "fetchEmployeeData",
    "loadData",
)

_IDENTIFIER_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_$"
)


def _validate_identifier(value: str) -> str:
    if not value or value[0].isdigit() or not set(value) <= _IDENTIFIER_CHARS:
        raise ValueError(f"'{value}' is not a valid JavaScript identifier")
    return value


class _FrozenConfig(BaseModel):
    """Base for all page-sync configuration models.

    Immutable, strict (unknown keys rejected), with a ``from_properties``
    factory that reports validation failures as ConfigError.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from a properties dictionary.

        Args:
            properties: Raw properties, typically loaded from YAML

        Returns:
            Validated configuration object

        Raises:
            ConfigError: If validation fails

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise ConfigError(f"Invalid {cls.__name__} configuration: {e}") from e


class ExtractorConfig(_FrozenConfig):
    """Names the extractor recognises in the React source."""

    target_functions: frozenset[str] = Field(
        default=frozenset(_DEFAULT_TARGET_FUNCTIONS),
        description="Allow-list of function names to extract",
    )
    state_hook: str = Field(
        default="useState", description="Callee name of state declarations"
    )
    effect_hook: str = Field(
        default="useEffect", description="Callee name of effect registrations"
    )
    callback_hook: str = Field(
        default="useCallback", description="Callee name of memoized callbacks"
    )

    @field_validator("state_hook", "effect_hook", "callback_hook")
    @classmethod
    def validate_hook_name(cls, v: str) -> str:
        """Hook names must be plain identifiers."""
        return _validate_identifier(v)

    @field_validator("target_functions")
    @classmethod
    def validate_target_functions(cls, v: frozenset[str]) -> frozenset[str]:
        """Every allow-listed name must be a plain identifier."""
        for name in v:
            _validate_identifier(name)
        return v


class TransformConfig(_FrozenConfig):
    """Textual substitutions applied to generated code."""

    env_lookup: str = "process.env.NODE_ENV"
    env_replacement: str = '(window.NODE_ENV || "production")'
    fetch_callee: str = "axios.get"
    fallback_identifier: str = "fallbackData"
    fallback_accessor: str = "getFallbackData()"
    preserved_calls: frozenset[str] = Field(
        default=frozenset({"setTimeout", "setInterval", "setImmediate"}),
        description="set<Name> calls that are never rewritten to assignments",
    )
    indent_width: int = Field(default=4, gt=0, le=16)


class PatcherConfig(_FrozenConfig):
    """Anchors and matching behaviour of the target patcher."""

    insertion_marker: str = Field(
        default="</script>",
        min_length=1,
        description="Closing script-region marker used as the fallback insertion point",
    )
    insertion_indent: int = Field(default=8, ge=0)
    state_region_comment: str = Field(
        default="Global state",
        min_length=1,
        description="Text of the comment opening the global state region",
    )
    region_terminators: tuple[str, ...] = ("//", "function", "async", "document")
    balanced_matching: bool = Field(
        default=True,
        description="Locate function bodies by brace balancing before the legacy patterns",
    )


class SyncConfig(_FrozenConfig):
    """Top-level configuration for a sync run."""

    source_path: Path = DEFAULT_SOURCE_PATH
    target_path: Path = DEFAULT_TARGET_PATH
    extractor: ExtractorConfig = ExtractorConfig()
    transform: TransformConfig = TransformConfig()
    patcher: PatcherConfig = PatcherConfig()


def load_config(config_path: Path | str | None = None) -> SyncConfig:
    """Load sync configuration from YAML.

    The path is taken from the argument, then from the PAGE_SYNC_CONFIG
    environment variable. With neither set, defaults are returned.

    Args:
        config_path: Optional path to a YAML configuration file

    Returns:
        Validated SyncConfig

    Raises:
        ConfigError: If the file cannot be read, parsed or validated

    """
    if config_path is None:
        env_value = os.getenv(CONFIG_ENV_VAR, "").strip()
        if not env_value:
            return SyncConfig()
        config_path = env_value

    path = Path(config_path)
    try:
        with open(path, encoding="utf-8") as f:
            properties = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    if properties is None:
        properties = {}
    if not isinstance(properties, dict):
        raise ConfigError(f"Invalid configuration format in {path}")

    logger.debug("Loaded sync configuration from %s", path)
    return SyncConfig.from_properties(properties)  # type: ignore[arg-type]
