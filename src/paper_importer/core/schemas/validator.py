"""
Schema Validation Utilities

Validates uploaded paper JSON and catalog exports before they are
normalized into models.

Two levels:
- Basic checks (always): required keys and container types, with the
  failing path reported.
- Strict checks (strict=True): full JSON Schema validation against the
  bundled `*.schema.json` files.

`check_import_payload()` is softer: it reports errors and warnings for a
reviewer instead of raising.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

import jsonschema


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _strict_validate(data: Any, schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e


def validate_paper(data: Any, *, strict: bool = False) -> None:
    """
    Validate an uploaded paper payload.

    Args:
        data: Parsed JSON of the uploaded file
        strict: If True, also validate against paper.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Paper file must contain a JSON object", path="")

    questions = data.get("questions")
    if questions is None:
        raise ValidationError(
            "Missing required fields: ['questions']",
            path="",
            errors=["Missing field: questions"],
        )
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path="questions")

    for i, question in enumerate(questions):
        _validate_node(question, f"questions[{i}]", ("parts", "subparts"))

    if strict:
        _strict_validate(data, "paper")


def _validate_node(data: Any, path: str, child_keys: tuple[str, ...]) -> None:
    """Validate a question/part/subpart node recursively."""
    if not isinstance(data, dict):
        raise ValidationError("Question node must be an object", path=path)

    for key in ("correct_answers", "options"):
        value = data.get(key)
        if value is not None and not isinstance(value, list):
            raise ValidationError(f"{key} must be a list", path=f"{path}.{key}")

    attachments = data.get("attachments")
    if attachments is not None and not isinstance(attachments, (list, str)):
        raise ValidationError(
            "attachments must be a list or a single reference",
            path=f"{path}.attachments",
        )

    for i, answer in enumerate(data.get("correct_answers") or []):
        if not isinstance(answer, dict):
            raise ValidationError(
                "correct answer must be an object",
                path=f"{path}.correct_answers[{i}]",
            )
        linked = answer.get("linked_alternatives")
        if linked is not None and not isinstance(linked, list):
            raise ValidationError(
                "linked_alternatives must be a list",
                path=f"{path}.correct_answers[{i}].linked_alternatives",
            )

    if not child_keys:
        return
    key, rest = child_keys[0], child_keys[1:]
    children = data.get(key)
    if children is None:
        return
    if not isinstance(children, list):
        raise ValidationError(f"{key} must be a list", path=f"{path}.{key}")
    for i, child in enumerate(children):
        _validate_node(child, f"{path}.{key}[{i}]", rest)


def validate_catalog(data: Any, *, strict: bool = False) -> None:
    """
    Validate a catalog export (list of data structure rows).

    Accepts either a bare list or an object with a "data_structures" list.

    Args:
        data: Parsed JSON of the catalog export
        strict: If True, also validate against catalog.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    rows = data.get("data_structures") if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise ValidationError(
            "Catalog must be a list of data structures",
            path="data_structures" if isinstance(data, dict) else "",
        )
    for i, row in enumerate(rows):
        if not isinstance(row, dict) or "id" not in row:
            raise ValidationError(
                "Data structure must be an object with an id",
                path=f"[{i}]",
            )

    if strict:
        _strict_validate(rows, "catalog")


@dataclass
class ImportCheck:
    """Reviewer-facing result of check_import_payload()."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def check_import_payload(data: dict[str, Any]) -> ImportCheck:
    """
    Check an upload for missing paper fields and question gaps.

    Missing program/provider/subject are errors; missing paper code,
    year, session and question topics/units are warnings.

    Args:
        data: Parsed JSON of the uploaded file

    Returns:
        ImportCheck with accumulated errors and warnings
    """
    result = ImportCheck()

    if not data.get("qualification"):
        result.errors.append("Missing qualification (program)")
    if not (data.get("exam_board") or data.get("examBoard")):
        result.errors.append("Missing exam board (provider)")
    if not data.get("subject"):
        result.errors.append("Missing subject")

    questions = data.get("questions")
    if not isinstance(questions, list):
        result.errors.append("No questions found in the import file")
    else:
        if not questions:
            result.warnings.append("No questions to import")
        missing_topics = sum(
            1 for q in questions if isinstance(q, dict) and not (q.get("topic") or q.get("topics"))
        )
        if missing_topics:
            result.warnings.append(f"{missing_topics} questions missing topic information")
        missing_units = sum(
            1 for q in questions if isinstance(q, dict) and not (q.get("unit") or q.get("chapter"))
        )
        if missing_units:
            result.warnings.append(f"{missing_units} questions missing unit information")

    if not (data.get("paper_code") or data.get("paperCode")):
        result.warnings.append("Missing paper code")
    if not (data.get("exam_year") or data.get("examYear")):
        result.warnings.append("Missing exam year")
    if not (data.get("exam_session") or data.get("examSession")):
        result.warnings.append("Missing exam session")

    return result
