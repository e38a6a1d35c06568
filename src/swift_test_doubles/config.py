"""Configuration for the test doubles generator."""

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from swift_test_doubles.errors import GeneratorConfigError

# Swift module names are identifiers
_IDENTIFIER_START = "_abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


class GeneratorConfig(BaseModel):
    """Configuration for generating test doubles with Pydantic validation.

    Example:
        ```python
        config = GeneratorConfig.from_properties({
            "testable_import": "MyApp",
            "strict_markers": True,
        })
        ```

    """

    model_config = ConfigDict(
        # Immutable - configuration cannot be modified after creation
        frozen=True,
        # Strict - extra fields not in the model are rejected
        extra="forbid",
    )

    strict_markers: bool = Field(
        default=False,
        description="Fail when a marker precedes a declaration of the wrong kind",
    )
    testable_import: str | None = Field(
        default=None,
        description="Module added to every artifact as '@testable import <module>'",
    )
    populate_optional_closures: bool = Field(
        default=False,
        description="Default optional closure fields to a no-op closure instead of nil",
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        description="Skip source files larger than this size in bytes",
        gt=0,
    )
    indent_width: int = Field(
        default=4,
        description="Number of spaces per indentation level in generated code",
        ge=1,
        le=8,
    )

    @field_validator("testable_import")
    @classmethod
    def validate_module_name(cls, v: str | None) -> str | None:
        """Validate that the testable module is a plain Swift identifier."""
        if v is None:
            return None
        name = v.strip()
        if not name:
            return None
        if name[0] not in _IDENTIFIER_START or not name.replace("_", "").isalnum():
            raise ValueError(f"'{v}' is not a valid Swift module name")
        return name

    @property
    def indent(self) -> str:
        return " " * self.indent_width

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from a properties dictionary.

        Args:
            properties: Raw properties, e.g. parsed from a YAML file

        Returns:
            Validated configuration object

        Raises:
            GeneratorConfigError: If validation fails

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise GeneratorConfigError(f"Invalid generator configuration: {e}") from e

    @classmethod
    def from_file(cls, config_path: Path) -> Self:
        """Load configuration from a YAML file.

        An empty file yields the default configuration.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Validated configuration object

        Raises:
            GeneratorConfigError: If the file cannot be read or parsed, or
                its contents are invalid

        """
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise GeneratorConfigError(f"Invalid YAML in {config_path}: {e}") from e
        except OSError as e:
            raise GeneratorConfigError(f"Cannot read file {config_path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise GeneratorConfigError(
                f"Invalid configuration format in {config_path}: expected a mapping"
            )
        return cls.from_properties(data)  # pyright: ignore[reportUnknownArgumentType]
