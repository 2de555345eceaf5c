from enum import Enum
from pathlib import Path
from typing import Any, cast

import yaml
from caseconverter import camelcase, cobolcase, flatcase, kebabcase, macrocase, pascalcase, snakecase, titlecase
from pydantic import BaseModel, ConfigDict, Field

from graphql_annotations import log


class CaseFormat(str, Enum):
    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"
    SNAKE_CASE = "snake_case"
    KEBAB_CASE = "kebab-case"
    MACRO_CASE = "MACROCASE"
    COBOL_CASE = "COBOL-CASE"
    FLAT_CASE = "flatcase"
    TITLE_CASE = "TitleCase"


CASE_CONVERTERS = {
    CaseFormat.CAMEL_CASE: camelcase,
    CaseFormat.PASCAL_CASE: pascalcase,
    CaseFormat.SNAKE_CASE: snakecase,
    CaseFormat.KEBAB_CASE: kebabcase,
    CaseFormat.MACRO_CASE: macrocase,
    CaseFormat.COBOL_CASE: cobolcase,
    CaseFormat.FLAT_CASE: flatcase,
    CaseFormat.TITLE_CASE: titlecase,
}


def convert_name(name: str, target_case: CaseFormat | None) -> str:
    """Convert ``name`` to ``target_case``; ``None`` keeps the name as it is."""
    if target_case is None:
        return name
    return str(CASE_CONVERTERS[target_case](name))


class BuilderSettings(BaseModel):
    """Settings shared by every type built by one builder.

    Attributes:
        field_case: Case applied to derived field names. Explicit names are never converted.
        input_type_suffix: Appended to the name of every mirrored input type.
        default_connection: Registry key of the connection wrapper used when a field does not name one.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    field_case: CaseFormat | None = Field(None, alias="fieldCase")
    input_type_suffix: str = Field("", alias="inputTypeSuffix")
    default_connection: str = Field("list", alias="defaultConnection")


def load_builder_settings(config_path: Path | None) -> BuilderSettings:
    """
    Load and validate builder settings from a YAML file.

    Args:
        config_path: Path to the YAML configuration file, or None for the defaults.

    Returns:
        The validated settings.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the YAML root is not a mapping.
        ValidationError: If validation against BuilderSettings fails.
    """
    if config_path is None:
        log.debug("No builder settings provided")
        return BuilderSettings()

    raw: Any
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug("Loaded builder settings from %s", config_path)

    # Treat empty file or explicit YAML null as "defaults"
    if raw is None or raw == {}:
        return BuilderSettings()

    if not isinstance(raw, dict):
        raise TypeError(f"Settings root must be a mapping (YAML object), got {type(raw).__name__}")

    return BuilderSettings.model_validate(cast(dict[str, Any], raw))
