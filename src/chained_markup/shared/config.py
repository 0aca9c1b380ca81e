"""Configuration classes for chained markup building.

This module provides configuration objects for tree construction, rendering
and logging, with validation, overrides, JSON round-tripping and presets.
"""

import json
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Dict, List, Optional

_COMPONENTS = ("render", "tree", "global_")
_LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for serializing element trees to text."""

    indent: Optional[int] = None  # None keeps the compact single-line form
    self_closing: bool = True
    sort_attributes: bool = False
    newline: str = "\n"

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if self.indent is not None and self.indent < 0:
            raise ValueError("indent must be >= 0 or None")
        if not self.newline:
            raise ValueError("newline cannot be empty")

    @property
    def is_pretty(self) -> bool:
        """Check if output is laid out one node per line."""
        return self.indent is not None


@dataclass(frozen=True)
class TreeConfig:
    """Configuration for tree construction."""

    validate_names: bool = True
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError("max_depth must be >= 0 or None")


@dataclass(frozen=True)
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in _LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {list(_LOGGING_LEVELS)}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class BuilderConfig:
    """Complete configuration shared by every node of a tree.

    Nodes inherit the configuration of the node they are created under, so a
    tree started from a configured root is rendered and validated consistently.
    Immutable, so one instance can be shared freely.
    """

    render: RenderConfig = field(default_factory=RenderConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the component types of the configuration."""
        expected = {"render": RenderConfig, "tree": TreeConfig, "global_": GlobalConfig}
        for field_name, expected_type in expected.items():
            if not isinstance(getattr(self, field_name), expected_type):
                raise ConfigValidationError(
                    f"{field_name} must be a {expected_type.__name__}",
                    field_name=field_name,
                )

    def override(self, **kwargs: Any) -> "BuilderConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override,
                using ``component__field`` for nested fields

        Returns:
            New BuilderConfig instance with overrides applied

        Example:
            >>> config = BuilderConfig()
            >>> config.override(render__indent=2, tree__max_depth=8).render.indent
            2
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component == "global":
                    component = "global_"
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {list(_COMPONENTS)}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component, values in nested_overrides.items():
                new_fields[component] = replace(getattr(self, component), **values)
            new_fields.update(top_level)
            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if is_dataclass(obj):
                return {f.name: _dataclass_to_dict(getattr(obj, f.name)) for f in fields(obj)}
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuilderConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so typos in configuration files surface early.

        Args:
            data: Dictionary containing configuration data

        Returns:
            BuilderConfig instance created from dictionary
        """
        components = {"render": RenderConfig, "tree": TreeConfig, "global_": GlobalConfig}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                suggestions=[f"Valid keys are {sorted(known)}"],
            )

        values: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key in components:
                    if not isinstance(value, dict):
                        raise ConfigValidationError(
                            f"{key} must be an object", field_name=key
                        )
                    values[key] = components[key](**value)
                else:
                    values[key] = value
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "BuilderConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def compact(cls) -> "BuilderConfig":
        """Create the default single-line configuration."""
        return cls(name="compact", description="Single-line markup output")

    @classmethod
    def pretty(cls, indent: int = 2) -> "BuilderConfig":
        """Create configuration preset for human-readable, indented output."""
        return cls(
            render=RenderConfig(indent=indent, sort_attributes=True),
            name="pretty",
            description="Indented markup with attributes in sorted order",
        )

    @classmethod
    def strict(cls, max_depth: int = 32) -> "BuilderConfig":
        """Create configuration preset that bounds tree depth."""
        return cls(
            tree=TreeConfig(validate_names=True, max_depth=max_depth),
            name="strict",
            description=f"Name validation with trees at most {max_depth} levels deep",
        )
