"""
Serialization Utilities

Turns an uploaded paper JSON into immutable models, once, at ingestion.

Uploaded files come from several extraction tools and disagree on field
names. Every variant is normalized here so that nothing downstream reads
raw dicts:

- question text: `question_description` | `question_text` | `text`
- question type: `type` | `question_type`
- marks: `marks` | `total_marks`
- legacy `correct_answer` (single string) becomes one alternative worth
  the node's full marks
- part labels default to letters ("1(a)"), subpart labels to roman
  numerals ("1(a)(ii)")
- `attachments` is always a list of strings
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ...errors import PaperLoadError
from ..models.answers import Alternative, Option, coerce_marks
from ..models.parts import Part, PartKind
from ..models.questions import Question
from ..schemas.validator import validate_paper

logger = logging.getLogger(__name__)

_ROMAN = (
    "i", "ii", "iii", "iv", "v", "vi", "vii", "viii", "ix", "x",
    "xi", "xii", "xiii", "xiv", "xv", "xvi", "xvii", "xviii", "xix", "xx",
)


@dataclass(frozen=True)
class PaperImport:
    """
    Result of ingesting one uploaded paper file.

    Attributes:
        metadata: Paper-level fields of the upload (everything except questions)
        questions: Normalized question trees in file order
        source: Path the payload was read from, if any
        payload: The upload as parsed, for checks that need fields the
            question trees drop (marking flags, mark scheme lines)
    """

    metadata: dict = field(default_factory=dict)
    questions: tuple[Question, ...] = ()
    source: Optional[Path] = None
    payload: dict = field(default_factory=dict, repr=False)


# ─────────────────────────────────────────────────────────────────────────────
# Question Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_question(question: Question) -> dict[str, Any]:
    """Serialize a Question back to the imported JSON field names."""
    return question.to_dict()


def deserialize_question(data: dict[str, Any], index: int = 0) -> Question:
    """
    Deserialize one question object from an uploaded file.

    Args:
        data: Question dict from the upload
        index: Position in the file, used for defaults

    Returns:
        Question instance

    Raises:
        ValueError: If the tree cannot be built
    """
    number = _clean_label(data.get("question_number") or data.get("number")) or str(index + 1)

    parts = []
    for i, part_data in enumerate(data.get("parts") or []):
        letter = _clean_label(part_data.get("part") or part_data.get("label")) or chr(ord("a") + i)
        part_label = f"{number}({letter})"
        subparts = tuple(
            _node_from_payload(
                sub,
                f"{part_label}({_clean_label(sub.get('subpart') or sub.get('part') or sub.get('label')) or _roman(j)})",
                PartKind.SUBPART,
            )
            for j, sub in enumerate(part_data.get("subparts") or [])
        )
        parts.append(_node_from_payload(part_data, part_label, PartKind.PART, subparts))

    node = _node_from_payload(data, number, PartKind.QUESTION, tuple(parts))

    topics = data.get("topics")
    topic = data.get("topic") or (topics[0] if isinstance(topics, list) and topics else "")

    return Question(
        id=str(data.get("id") or f"q{index + 1}"),
        question_number=number,
        question_node=node,
        topic=str(topic or ""),
        subtopic=str(data.get("subtopic") or data.get("sub_topic") or ""),
        unit=str(data.get("unit") or data.get("chapter") or ""),
    )


def _node_from_payload(
    data: dict[str, Any],
    label: str,
    kind: PartKind,
    children: tuple[Part, ...] = (),
) -> Part:
    """Build one Part from a question/part/subpart dict."""
    marks = coerce_marks(data.get("marks", data.get("total_marks")))

    answers = [
        Alternative.from_dict(item, i)
        for i, item in enumerate(data.get("correct_answers") or [])
        if isinstance(item, dict)
    ]
    legacy = data.get("correct_answer")
    if not answers and legacy not in (None, ""):
        answers = [Alternative(answer=str(legacy), marks=marks, alternative_id=1)]
        logger.debug(f"{label}: legacy correct_answer converted to one alternative")

    figure_required = data.get("figure_required")

    return Part(
        label=label,
        kind=kind,
        marks=marks,
        question_type=str(data.get("type") or data.get("question_type") or ""),
        text=str(
            data.get("question_description")
            or data.get("question_text")
            or data.get("text")
            or ""
        ),
        answer_format=str(data.get("answer_format") or ""),
        answer_requirement=str(data.get("answer_requirement") or ""),
        correct_answers=tuple(answers),
        options=tuple(Option.from_dict(opt, i) for i, opt in enumerate(data.get("options") or [])),
        attachments=_attachment_list(data.get("attachments")),
        hint=str(data.get("hint") or ""),
        explanation=str(data.get("explanation") or ""),
        figure=bool(data.get("figure", False)),
        figure_required=None if figure_required is None else bool(figure_required),
        children=children,
    )


def _attachment_list(value: Any) -> tuple[str, ...]:
    """Normalize attachments to a tuple of non-empty references."""
    if value is None:
        return ()
    if not isinstance(value, list):
        value = [value]
    refs = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("file_name") or item.get("url") or item.get("name") or ""
        text = str(item).strip()
        if text:
            refs.append(text)
    return tuple(refs)


def _clean_label(value: Any) -> str:
    """Strip brackets and whitespace: "(a)" -> "a", 3 -> "3"."""
    if value is None:
        return ""
    return str(value).strip().strip("()").strip()


def _roman(index: int) -> str:
    return _ROMAN[index] if index < len(_ROMAN) else str(index + 1)


# ─────────────────────────────────────────────────────────────────────────────
# Paper Loading
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_paper(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> PaperImport:
    """
    Deserialize a whole uploaded paper.

    Args:
        data: Parsed JSON of the upload
        validate: Whether to run the schema checks first
        strict: Also run full JSON Schema validation

    Returns:
        PaperImport with raw metadata and question trees

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_paper(data, strict=strict)

    questions = tuple(
        deserialize_question(item, i) for i, item in enumerate(data.get("questions") or [])
    )
    metadata = {key: value for key, value in data.items() if key != "questions"}
    return PaperImport(metadata=metadata, questions=questions, payload=data)


def load_paper(path: Path, *, strict: bool = False) -> PaperImport:
    """
    Load and normalize an uploaded paper JSON file.

    Args:
        path: Path to the JSON file
        strict: Also run full JSON Schema validation

    Returns:
        PaperImport with source set to path

    Raises:
        PaperLoadError: If the file cannot be read, parsed or built
        ValidationError: If the payload fails schema checks
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise PaperLoadError(f"Paper file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise PaperLoadError(f"Could not read paper file {path}: {e}") from e

    try:
        paper = deserialize_paper(data, strict=strict)
    except ValueError as e:
        raise PaperLoadError(f"Invalid question structure in {path}: {e}") from e

    logger.info(f"Loaded {len(paper.questions)} questions from {path.name}")
    return PaperImport(metadata=paper.metadata, questions=paper.questions, source=path, payload=data)
