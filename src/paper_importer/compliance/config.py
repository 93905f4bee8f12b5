"""
Module: compliance.config

Purpose:
    Extraction rules configuration - the toggles the import screen sets
    before questions are checked (hints/explanations required, subject
    specific rules, answer structure checks...). Immutable nested
    dataclasses, loadable from camelCase (screen export) or snake_case
    JSON.

    Loading is forgiving: a malformed value falls back to its default with
    a warning; only an unreadable file is an error.

Key Classes:
    - ExtractionRulesConfig: Root configuration
    - EducationalContent, SubjectSpecific, Abbreviations, AnswerStructure,
      MarkSchemeOptions: Nested sections

Key Functions:
    - ExtractionRulesConfig.from_dict(): Parse either key style
    - load_rules_config(): Read a JSON file

Dependencies:
    - dataclasses (std)

Used By:
    - compliance.rules: Computed required flags
    - compliance.guidelines: Checklist statuses and suggested toggles
    - cli: --config option
"""

from __future__ import annotations

import json
import logging
from dataclasses import MISSING, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from ..errors import ConfigLoadError

logger = logging.getLogger(__name__)

# Bump when the layout of the rules config changes
RULES_CONFIG_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class EducationalContent:
    """Whether hints and explanations are expected on every question."""
    hints_required: bool = True
    explanations_required: bool = True


@dataclass(frozen=True)
class SubjectSpecific:
    """Subject rule toggles; off unless the paper's guidelines mention the subject."""
    physics: bool = False
    chemistry: bool = False


@dataclass(frozen=True)
class Abbreviations:
    """Mark scheme abbreviations the extractor should expand."""
    ora: bool = False
    owtte: bool = False
    ecf: bool = False
    cao: bool = False


@dataclass(frozen=True)
class AnswerStructure:
    """Checks applied when correct-answer alternatives are saved."""
    validate_marks: bool = True
    require_context: bool = True
    validate_linking: bool = True
    accept_alternatives: bool = False


@dataclass(frozen=True)
class MarkSchemeOptions:
    """Mark scheme handling the import is prepared for."""
    requires_manual_marking: bool = True
    marking_criteria: bool = True
    component_marking: bool = True


@dataclass(frozen=True)
class ExtractionRulesConfig:
    """
    Extraction rules configuration (immutable).

    The five top-level toggles decide whether the matching structure or
    figure rule blocks import (error) or only warns. The remaining
    toggles feed the guideline checklist.

    Attributes:
        forward_slash_handling: Unlinked "a/b" answers are errors
        line_by_line_processing: Treat each mark scheme line as one answer
        alternative_linking: Dangling alternative links are errors
        context_required: Alternatives without context type and value are errors
        figure_detection: Figure references without attachments are errors
        educational_content: Hint/explanation requirements
        subject_specific: Subject rule toggles
        abbreviations: Mark scheme abbreviation handling
        answer_structure: Answer save checks
        mark_scheme: Mark scheme extraction options
        config_schema_version: Layout version of the stored config

    Example:
        >>> config = ExtractionRulesConfig.from_dict(
        ...     {"educationalContent": {"hintsRequired": False}}
        ... )
        >>> config.educational_content.hints_required
        False
    """

    forward_slash_handling: bool = True
    line_by_line_processing: bool = True
    alternative_linking: bool = True
    context_required: bool = True
    figure_detection: bool = True
    educational_content: EducationalContent = field(default_factory=EducationalContent)
    subject_specific: SubjectSpecific = field(default_factory=SubjectSpecific)
    abbreviations: Abbreviations = field(default_factory=Abbreviations)
    answer_structure: AnswerStructure = field(default_factory=AnswerStructure)
    mark_scheme: MarkSchemeOptions = field(default_factory=MarkSchemeOptions)
    config_schema_version: int = RULES_CONFIG_SCHEMA_VERSION

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExtractionRulesConfig:
        """
        Parse a config dict in camelCase or snake_case.

        Unknown keys are ignored. Malformed values keep their defaults and
        log a warning.

        Args:
            data: Config dict

        Returns:
            ExtractionRulesConfig instance
        """
        config = _section_from_dict(cls, data, "")

        if config.config_schema_version < RULES_CONFIG_SCHEMA_VERSION:
            logger.warning(
                f"Extraction rules config uses an outdated layout "
                f"(v{config.config_schema_version}, current v{RULES_CONFIG_SCHEMA_VERSION}); "
                "missing settings use defaults"
            )
        elif config.config_schema_version > RULES_CONFIG_SCHEMA_VERSION:
            logger.warning(
                f"Extraction rules config is newer than supported "
                f"(v{config.config_schema_version}, current v{RULES_CONFIG_SCHEMA_VERSION})"
            )
        return config

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys the import screen uses."""
        return _section_to_dict(self)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(word.capitalize() for word in rest)


def _lookup(data: Mapping[str, Any], name: str) -> Any:
    if name in data:
        return data[name]
    return data.get(_camel(name), MISSING)


def _section_from_dict(section_cls: type, data: Any, path: str) -> Any:
    """Build one config dataclass, falling back to defaults per field."""
    if not isinstance(data, Mapping):
        logger.warning(f"Ignoring malformed rules config section {path or '<root>'}: {data!r}")
        return section_cls()

    values: dict[str, Any] = {}
    for f in fields(section_cls):
        raw = _lookup(data, f.name)
        if raw is MISSING:
            continue
        key = f"{path}.{f.name}" if path else f.name
        default = f.default if f.default is not MISSING else f.default_factory()

        if hasattr(type(default), "__dataclass_fields__"):
            values[f.name] = _section_from_dict(type(default), raw, key)
        elif isinstance(default, bool):
            if isinstance(raw, bool):
                values[f.name] = raw
            else:
                logger.warning(f"Rules config {key} must be true/false, got {raw!r}; using {default}")
        elif isinstance(default, int):
            try:
                values[f.name] = int(raw)
            except (TypeError, ValueError):
                logger.warning(f"Rules config {key} must be an integer, got {raw!r}; using {default}")

    return section_cls(**values)


def _section_to_dict(section: Any) -> dict:
    out = {}
    for f in fields(section):
        value = getattr(section, f.name)
        if hasattr(value, "__dataclass_fields__"):
            value = _section_to_dict(value)
        out[_camel(f.name)] = value
    return out


def load_rules_config(path: Optional[Path]) -> ExtractionRulesConfig:
    """
    Load an extraction rules config file.

    Args:
        path: JSON file path, or None for the defaults

    Returns:
        ExtractionRulesConfig instance

    Raises:
        ConfigLoadError: If the file cannot be read or is not a JSON object
    """
    if path is None:
        return ExtractionRulesConfig()

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigLoadError(f"Could not read rules config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Rules config must contain a JSON object: {path}")

    logger.info(f"Loaded extraction rules config from {path.name}")
    return ExtractionRulesConfig.from_dict(data)
